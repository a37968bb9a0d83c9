import asyncio

import pytest

from fittrack.client.store import ResourceStore, record_identifier
from fittrack.client.transport import ApiError, SessionExpiredError, TransportError
from fittrack.core.resources import get_resource, iter_resources
from fittrack.types.listing import PaginatedResult


@pytest.mark.unit
@pytest.mark.parametrize("definition", iter_resources(), ids=lambda definition: definition.name)
def test_initial_state_matches_resource_defaults(fake_api, definition) -> None:
    store = ResourceStore(definition, fake_api)
    state = store.state

    assert state.items == []
    assert state.current_item is None
    assert state.loading is False
    assert state.error is None
    assert state.total_count == 0
    assert state.sort == definition.default_sort
    assert state.order == definition.default_order


@pytest.mark.unit
def test_update_sort_scenario_switches_field_and_resets_order(workout_store) -> None:
    assert (workout_store.state.sort, workout_store.state.order) == ("date", "desc")

    workout_store.update_sort("name")

    assert workout_store.state.sort == "name"
    assert workout_store.state.order == "asc"


@pytest.mark.unit
def test_update_sort_same_field_flips_order(workout_store) -> None:
    workout_store.update_sort("date")
    assert workout_store.state.order == "asc"
    workout_store.update_sort("date")
    assert workout_store.state.order == "desc"
    assert workout_store.state.sort == "date"


@pytest.mark.unit
def test_update_search_does_not_fetch(workout_store, fake_api) -> None:
    workout_store.update_search("run")

    assert workout_store.state.search == "run"
    assert fake_api.calls == []


@pytest.mark.unit
def test_fetch_list_success_replaces_page(workout_store, fake_api) -> None:
    fake_api.queue_page({"_id": "1", "notes": "a"}, {"_id": "2", "notes": "b"}, total=12)
    workout_store.state.error = "old"

    async def _run():
        task = workout_store.fetch_list(page=2, limit=5)
        assert workout_store.state.loading is True
        assert workout_store.state.error is None
        return await task

    envelope = asyncio.run(_run())

    assert envelope.is_fulfilled
    state = workout_store.state
    assert state.loading is False
    assert [item["_id"] for item in state.items] == ["1", "2"]
    assert state.total_count == 12
    assert state.error is None
    assert (state.page, state.limit) == (2, 5)
    assert fake_api.calls == [("list", (2, 5, "", "date", "desc"))]


@pytest.mark.unit
def test_fetch_list_failure_keeps_stale_data(workout_store, fake_api) -> None:
    workout_store.state.items = [{"id": "1", "title": "Morning Run"}]
    workout_store.state.total_count = 2
    fake_api.queue("list", ApiError(500, {"message": "Failed to fetch workouts"}))

    async def _run():
        return await workout_store.fetch_list()

    envelope = asyncio.run(_run())

    assert envelope.is_rejected
    state = workout_store.state
    assert state.items == [{"id": "1", "title": "Morning Run"}]
    assert state.total_count == 2
    assert state.loading is False
    assert state.error == "Failed to fetch workouts"


@pytest.mark.unit
def test_fetch_list_transport_failure_uses_fallback(workout_store, fake_api) -> None:
    fake_api.queue("list", TransportError("connection refused"))

    asyncio.run(_await(workout_store.fetch_list))

    assert workout_store.state.error == "Failed to fetch workouts"


@pytest.mark.unit
def test_session_expired_sets_no_store_error(workout_store, fake_api) -> None:
    fake_api.queue("list", SessionExpiredError({"message": "Token has expired"}))

    envelope = asyncio.run(_await(workout_store.fetch_list))

    assert envelope.session_expired is True
    assert workout_store.state.error is None
    assert workout_store.state.loading is False


@pytest.mark.unit
def test_stale_fetch_list_result_is_dropped(workout_store, fake_api) -> None:
    first = fake_api.gate(
        "list",
        PaginatedResult(items=[{"_id": "old"}], total=1, page=1, pages=1, limit=10),
    )
    fake_api.queue_page({"_id": "new"}, total=1)

    async def _run():
        slow = workout_store.fetch_list(search="a")
        while not fake_api.calls:
            await asyncio.sleep(0.01)
        fast = workout_store.fetch_list(search="ab")
        await fast
        first.release()
        await slow

    asyncio.run(_run())

    assert [item["_id"] for item in workout_store.state.items] == ["new"]
    assert workout_store.state.loading is False


@pytest.mark.unit
def test_stale_fetch_by_id_result_is_dropped(workout_store, fake_api) -> None:
    first = fake_api.gate("get", {"_id": "1", "notes": "old"})
    fake_api.queue("get", {"_id": "2", "notes": "new"})

    async def _run():
        slow = workout_store.fetch_by_id("1")
        while not fake_api.calls:
            await asyncio.sleep(0.01)
        fast = workout_store.fetch_by_id("2")
        await fast
        first.release()
        return await slow

    stale = asyncio.run(_run())

    assert stale.is_fulfilled
    assert workout_store.state.current_item == {"_id": "2", "notes": "new"}
    assert fake_api.calls == [("get", ("1",)), ("get", ("2",))]


@pytest.mark.unit
def test_stale_fetch_by_id_failure_sets_no_error(workout_store, fake_api) -> None:
    first = fake_api.gate("get", ApiError(404, {"message": "Workout not found"}))
    fake_api.queue("get", {"_id": "2"})

    async def _run():
        slow = workout_store.fetch_by_id("1")
        while not fake_api.calls:
            await asyncio.sleep(0.01)
        await workout_store.fetch_by_id("2")
        first.release()
        await slow

    asyncio.run(_run())

    assert workout_store.state.current_item == {"_id": "2"}
    assert workout_store.state.error is None


@pytest.mark.unit
def test_create_appends_server_record(fake_api) -> None:
    store = ResourceStore(get_resource("exercise"), fake_api)
    fake_api.queue("create", {"_id": "2", "name": "Squat"})

    async def _run():
        return await store.create({"name": "Squat"})

    envelope = asyncio.run(_run())

    assert envelope.payload == {"_id": "2", "name": "Squat"}
    assert store.state.items == [{"_id": "2", "name": "Squat"}]
    assert store.state.total_count == 1


@pytest.mark.unit
def test_create_failure_keeps_items(workout_store, fake_api) -> None:
    fake_api.queue("create", ApiError(400, {"message": "Duration is required"}))

    asyncio.run(_await(workout_store.create, {"notes": "x"}))

    assert workout_store.state.items == []
    assert workout_store.state.total_count == 0
    assert workout_store.state.error == "Duration is required"


@pytest.mark.unit
def test_update_replaces_entry_in_place(workout_store, fake_api) -> None:
    workout_store.state.items = [{"_id": "1", "notes": "a"}, {"_id": "2", "notes": "b"}]
    fake_api.queue("update", {"_id": "1", "notes": "changed"})

    asyncio.run(_await(workout_store.update, "1", {"notes": "changed"}))

    assert workout_store.state.items == [{"_id": "1", "notes": "changed"}, {"_id": "2", "notes": "b"}]


@pytest.mark.unit
def test_update_of_record_outside_page_is_noop(workout_store, fake_api) -> None:
    workout_store.state.items = [{"_id": "1", "notes": "a"}]
    fake_api.queue("update", {"_id": "9", "notes": "elsewhere"})

    asyncio.run(_await(workout_store.update, "9", {"notes": "elsewhere"}))

    assert workout_store.state.items == [{"_id": "1", "notes": "a"}]


@pytest.mark.unit
def test_delete_removes_exactly_one_entry(workout_store, fake_api) -> None:
    workout_store.state.items = [{"_id": "1"}, {"_id": "2"}, {"_id": "3"}]
    workout_store.state.total_count = 3

    asyncio.run(_await(workout_store.delete, "2"))

    assert workout_store.state.items == [{"_id": "1"}, {"_id": "3"}]
    assert workout_store.state.total_count == 2


@pytest.mark.unit
def test_delete_never_drops_total_below_zero(workout_store) -> None:
    asyncio.run(_await(workout_store.delete, "missing"))

    assert workout_store.state.total_count == 0


@pytest.mark.unit
def test_delete_failure_leaves_list_unchanged(workout_store, fake_api) -> None:
    workout_store.state.items = [{"_id": "1"}]
    workout_store.state.total_count = 1
    fake_api.queue("delete", ApiError(404, {"message": "Workout not found"}))

    asyncio.run(_await(workout_store.delete, "1"))

    assert workout_store.state.items == [{"_id": "1"}]
    assert workout_store.state.total_count == 1
    assert workout_store.state.error == "Workout not found"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("operation", "args"),
    [
        ("create", ({"date": "2024-03-05", "duration": 30},)),
        ("update", ("1", {"duration": 45})),
        ("delete", ("1",)),
    ],
)
def test_pending_write_clears_previous_error(workout_store, fake_api, operation, args) -> None:
    workout_store.state.items = [{"_id": "1"}]
    workout_store.state.total_count = 1
    workout_store.state.error = "Failed to fetch workouts"
    gate = fake_api.gate(operation, {"_id": "1"} if operation != "delete" else None)
    seen: list[str | None] = []

    async def _run():
        task = getattr(workout_store, operation)(*args)
        seen.append(workout_store.state.error)
        gate.release()
        return await task

    envelope = asyncio.run(_run())

    assert seen == [None]
    assert envelope.is_fulfilled
    assert workout_store.state.error is None


@pytest.mark.unit
def test_fetch_by_id_failure_keeps_current_item(workout_store, fake_api) -> None:
    workout_store.state.current_item = {"_id": "1", "notes": "draft"}
    fake_api.queue("get", ApiError(404, {"message": "Workout not found"}))

    asyncio.run(_await(workout_store.fetch_by_id, "1"))

    assert workout_store.state.current_item == {"_id": "1", "notes": "draft"}
    assert workout_store.state.error == "Workout not found"


@pytest.mark.unit
def test_reset_current_clears_unconditionally(workout_store) -> None:
    workout_store.state.current_item = {"_id": "1"}
    workout_store.reset_current()
    assert workout_store.state.current_item is None

    workout_store.reset_current()
    assert workout_store.state.current_item is None


@pytest.mark.unit
def test_subscribers_receive_same_state_object(workout_store, fake_api) -> None:
    seen: list[object] = []
    unsubscribe = workout_store.subscribe(seen.append)
    fake_api.queue_page({"_id": "1"})

    asyncio.run(_await(workout_store.fetch_list))
    unsubscribe()
    workout_store.update_search("ignored")

    assert len(seen) == 2
    assert all(state is workout_store.state for state in seen)


@pytest.mark.unit
def test_record_identifier_prefers_underscore_id() -> None:
    assert record_identifier({"_id": "a", "id": "b"}) == "a"
    assert record_identifier({"id": 7}) == "7"
    assert record_identifier(None) is None


async def _await(method, *args):
    return await method(*args)
