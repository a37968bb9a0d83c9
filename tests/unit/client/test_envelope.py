import asyncio

import pytest

from fittrack.client.envelope import EnvelopeStateError, RequestEnvelope, RequestStatus, extract_error_reason, invoke
from fittrack.client.transport import ApiError, SessionExpiredError, TransportError


@pytest.mark.unit
@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (ApiError(400, {"message": "Email already exists"}), "Email already exists"),
        (ApiError(400, {"detail": "bad"}), '{"detail": "bad"}'),
        (ApiError(400, {"message": "   "}), '{"message": "   "}'),
        (ApiError(500, "Internal Server Error"), "Internal Server Error"),
        (ApiError(500, {}), "Failed to fetch workouts"),
        (ApiError(502, None), "Failed to fetch workouts"),
        (TransportError("timeout"), "Failed to fetch workouts"),
        (RuntimeError("boom"), "Failed to fetch workouts"),
    ],
)
def test_extract_error_reason_preference(error, expected) -> None:
    assert extract_error_reason(error, "Failed to fetch workouts") == expected


@pytest.mark.unit
def test_envelope_settles_exactly_once() -> None:
    envelope: RequestEnvelope[int] = RequestEnvelope(operation="fetch_list")
    envelope.start()
    envelope.fulfill(1)

    with pytest.raises(EnvelopeStateError):
        envelope.reject("late")
    assert envelope.status == RequestStatus.FULFILLED
    assert envelope.payload == 1


@pytest.mark.unit
def test_envelope_cannot_settle_before_start() -> None:
    with pytest.raises(EnvelopeStateError):
        RequestEnvelope(operation="create").fulfill({})


@pytest.mark.unit
def test_invoke_returns_pending_task_and_resolves() -> None:
    async def _run():
        task = invoke(lambda value: value * 2, 21, fallback="nope", name="double")
        assert not task.done()
        return await task

    envelope = asyncio.run(_run())

    assert envelope.operation == "double"
    assert envelope.is_fulfilled
    assert envelope.payload == 42


@pytest.mark.unit
def test_invoke_never_raises_on_failure() -> None:
    def _fail() -> None:
        raise ApiError(422, {"message": "Title is required"})

    envelope = asyncio.run(_settle(_fail))

    assert envelope.is_rejected
    assert envelope.error_reason == "Title is required"
    assert envelope.session_expired is False


@pytest.mark.unit
def test_invoke_marks_session_expiry() -> None:
    def _expire() -> None:
        raise SessionExpiredError({"message": "Token has expired"})

    envelope = asyncio.run(_settle(_expire))

    assert envelope.is_rejected
    assert envelope.session_expired is True


@pytest.mark.unit
def test_invoke_unexpected_error_uses_fallback() -> None:
    def _crash() -> None:
        raise KeyError("payload")

    envelope = asyncio.run(_settle(_crash))

    assert envelope.error_reason == "Failed to create workout"


async def _settle(operation):
    return await invoke(operation, fallback="Failed to create workout")
