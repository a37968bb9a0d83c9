import asyncio

import pytest

from fittrack.client.list_controller import ListController
from fittrack.client.notifications import ToastLevel
from fittrack.client.transport import ApiError, SessionExpiredError


def _controller(store, notifier, navigator, *, confirm=lambda _message: True, rows_per_page=5) -> ListController:
    return ListController(
        store,
        notifier=notifier,
        navigator=navigator,
        confirm=confirm,
        rows_per_page=rows_per_page,
        search_debounce=0.01,
    )


def _list_calls(fake_api) -> list[tuple[object, ...]]:
    return [args for name, args in fake_api.calls if name == "list"]


@pytest.mark.unit
def test_mount_fetches_first_page_one_indexed(workout_store, fake_api, notifier, navigator) -> None:
    controller = _controller(workout_store, notifier, navigator)

    async def _run():
        await controller.mount()

    asyncio.run(_run())

    assert _list_calls(fake_api) == [(1, 5, "", "date", "desc")]


@pytest.mark.unit
def test_on_sort_fetches_with_toggled_values(workout_store, fake_api, notifier, navigator) -> None:
    controller = _controller(workout_store, notifier, navigator)

    async def _run():
        await controller.on_sort("date")
        await controller.on_sort("duration")

    asyncio.run(_run())

    assert _list_calls(fake_api) == [(1, 5, "", "date", "asc"), (1, 5, "", "duration", "asc")]


@pytest.mark.unit
def test_page_change_fetches_once_and_ignores_same_page(workout_store, fake_api, notifier, navigator) -> None:
    controller = _controller(workout_store, notifier, navigator)

    async def _run():
        await controller.on_page_change(2)
        assert controller.on_page_change(2) is None

    asyncio.run(_run())

    assert _list_calls(fake_api) == [(3, 5, "", "date", "desc")]


@pytest.mark.unit
def test_rows_per_page_change_resets_page(workout_store, fake_api, notifier, navigator) -> None:
    controller = _controller(workout_store, notifier, navigator)
    controller.page = 3

    async def _run():
        await controller.on_rows_per_page_change(25)

    asyncio.run(_run())

    assert controller.page == 0
    assert _list_calls(fake_api) == [(1, 25, "", "date", "desc")]
    with pytest.raises(ValueError):
        controller.on_rows_per_page_change(0)


@pytest.mark.unit
def test_search_is_debounced_to_one_fetch(workout_store, fake_api, notifier, navigator) -> None:
    controller = _controller(workout_store, notifier, navigator)
    controller.page = 2

    async def _run():
        for text in ("r", "ru", "run"):
            controller.on_search(text)
        await asyncio.sleep(0.05)
        await controller.last_fetch

    asyncio.run(_run())

    assert workout_store.state.search == "run"
    assert controller.page == 0
    assert _list_calls(fake_api) == [(1, 5, "run", "date", "desc")]


@pytest.mark.unit
def test_search_with_unchanged_text_does_not_fetch(workout_store, fake_api, notifier, navigator) -> None:
    controller = _controller(workout_store, notifier, navigator)

    async def _run():
        controller.on_search("run")
        controller.on_search("")
        await asyncio.sleep(0.05)

    asyncio.run(_run())

    assert _list_calls(fake_api) == []


@pytest.mark.unit
def test_dispose_cancels_pending_search(workout_store, fake_api, notifier, navigator) -> None:
    controller = _controller(workout_store, notifier, navigator)

    async def _run():
        controller.on_search("run")
        controller.dispose()
        await asyncio.sleep(0.05)

    asyncio.run(_run())

    assert _list_calls(fake_api) == []


@pytest.mark.unit
def test_on_edit_navigates_to_edit_form(workout_store, notifier, navigator) -> None:
    controller = _controller(workout_store, notifier, navigator)

    path = controller.on_edit("42")

    assert path == "/workouts/edit/42"
    assert navigator.location == "/workouts/edit/42"


@pytest.mark.unit
def test_delete_cancelled_does_nothing(workout_store, fake_api, notifier, navigator) -> None:
    prompts: list[str] = []

    def _deny(message: str) -> bool:
        prompts.append(message)
        return False

    controller = _controller(workout_store, notifier, navigator, confirm=_deny)

    assert asyncio.run(controller.on_delete("1")) is False
    assert prompts == ["Are you sure you want to delete this workout?"]
    assert fake_api.calls == []
    assert notifier.toasts == []


@pytest.mark.unit
def test_delete_success_toasts_and_steps_back_a_page(workout_store, fake_api, notifier, navigator) -> None:
    workout_store.state.items = [{"_id": "11"}]
    workout_store.state.total_count = 11
    fake_api.queue_page({"_id": "6"}, {"_id": "10"}, total=10, page=2, limit=5)

    async def _confirm(_message: str) -> bool:
        return True

    controller = _controller(workout_store, notifier, navigator, confirm=_confirm)
    controller.page = 2

    assert asyncio.run(controller.on_delete("11")) is True

    assert notifier.latest.level == ToastLevel.SUCCESS
    assert notifier.latest.message == "Workout deleted successfully"
    assert controller.page == 1
    assert _list_calls(fake_api) == [(2, 5, "", "date", "desc")]
    assert workout_store.state.total_count == 10


@pytest.mark.unit
def test_delete_failure_toasts_reason_and_keeps_list(workout_store, fake_api, notifier, navigator) -> None:
    workout_store.state.items = [{"_id": "1"}]
    workout_store.state.total_count = 1
    fake_api.queue("delete", ApiError(403, {"message": "Not allowed"}))
    controller = _controller(workout_store, notifier, navigator)

    assert asyncio.run(controller.on_delete("1")) is False

    assert notifier.latest.level == ToastLevel.ERROR
    assert notifier.latest.message == "Not allowed"
    assert workout_store.state.items == [{"_id": "1"}]
    assert _list_calls(fake_api) == []


@pytest.mark.unit
def test_delete_session_expiry_shows_no_toast(workout_store, fake_api, notifier, navigator) -> None:
    fake_api.queue("delete", SessionExpiredError())
    controller = _controller(workout_store, notifier, navigator)

    assert asyncio.run(controller.on_delete("1")) is False
    assert notifier.toasts == []


@pytest.mark.unit
def test_page_count_follows_total(workout_store, notifier, navigator) -> None:
    controller = _controller(workout_store, notifier, navigator)
    workout_store.state.total_count = 11

    assert controller.page_count == 3
