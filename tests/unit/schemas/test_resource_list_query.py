import pytest

from fittrack.core.resources import get_resource
from fittrack.errors import ValidationError
from fittrack.schemas.resources_query import ResourceListQuery


@pytest.mark.unit
def test_resource_list_query_uses_resource_defaults() -> None:
    filters = ResourceListQuery.from_args({}, get_resource("workout")).to_filters()

    assert filters.page == 1
    assert filters.limit == 10
    assert filters.search == ""
    assert filters.sort == "date"
    assert filters.order == "desc"


@pytest.mark.unit
def test_resource_list_query_blank_args_fall_back_to_defaults() -> None:
    query = ResourceListQuery.from_args({"sort": "  ", "order": "", "limit": " "}, get_resource("exercise"))

    assert query.sort == "name"
    assert query.order == "asc"
    assert query.limit == 10


@pytest.mark.unit
def test_resource_list_query_normalizes_and_clamps() -> None:
    query = ResourceListQuery.from_args(
        {"page": "0", "limit": "999", "search": " squat ", "sort": " duration ", "order": "ASC"},
        get_resource("workout"),
    )

    assert query.page == 1
    assert query.limit == 100
    assert query.search == "squat"
    assert query.sort == "duration"
    assert query.order == "asc"


@pytest.mark.unit
@pytest.mark.parametrize("args", [{"order": "sideways"}, {"page": "two"}, {"limit": True}])
def test_resource_list_query_rejects_invalid_args(args) -> None:
    with pytest.raises(ValidationError) as excinfo:
        ResourceListQuery.from_args(args, get_resource("workout"))

    assert excinfo.value.message_key == "INVALID_REQUEST"


@pytest.mark.unit
def test_resource_list_query_invalid_order_message() -> None:
    with pytest.raises(ValidationError) as excinfo:
        ResourceListQuery.from_args({"order": "up"}, get_resource("workout"))

    assert str(excinfo.value) == "order must be 'asc' or 'desc'"
