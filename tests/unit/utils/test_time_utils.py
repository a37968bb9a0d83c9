from datetime import UTC, datetime, timedelta, timezone

import pytest

from fittrack.utils.time_utils import time_utils


@pytest.mark.unit
def test_to_json_timestamp_uses_millisecond_precision() -> None:
    value = datetime(2024, 3, 5, 8, 30, 15, 123456, tzinfo=UTC)

    assert time_utils.to_json_timestamp(value) == "2024-03-05T08:30:15.123Z"


@pytest.mark.unit
def test_to_json_timestamp_converts_to_utc() -> None:
    value = datetime(2024, 3, 5, 16, 0, tzinfo=timezone(timedelta(hours=8)))

    assert time_utils.to_json_timestamp(value) == "2024-03-05T08:00:00.000Z"
    assert time_utils.to_json_timestamp(None) is None


@pytest.mark.unit
def test_naive_datetimes_are_treated_as_utc() -> None:
    naive = datetime(2024, 3, 5, 8, 0)

    assert time_utils.ensure_utc(naive).tzinfo == UTC
    assert time_utils.ensure_utc(naive).hour == 8


@pytest.mark.unit
def test_is_expired() -> None:
    assert time_utils.is_expired(None) is True
    assert time_utils.is_expired(time_utils.now() - timedelta(seconds=1)) is True
    assert time_utils.is_expired(time_utils.expires_in(60)) is False
