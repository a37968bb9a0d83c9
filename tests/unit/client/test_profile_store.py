import asyncio

import pytest

from fittrack.client.profile_store import ProfileStore, profile_form_values
from fittrack.client.transport import ApiClient, CredentialStore

USER = {
    "_id": "1",
    "username": "runner",
    "email": "runner@example.com",
    "profile": {"firstName": "Ada", "lastName": "Lovelace", "dob": "1990-12-10T00:00:00Z"},
    "fitnessGoals": [{"goalType": "distance", "targetValue": 42}],
}


def _store(fake_session) -> ProfileStore:
    return ProfileStore(ApiClient("http://testserver/api", credentials=CredentialStore(token="t"), session=fake_session))


@pytest.mark.unit
def test_get_profile_stores_user(fake_session, respond) -> None:
    fake_session.route("GET", "/my-profile", respond(200, {"data": USER}))
    store = _store(fake_session)

    asyncio.run(_await(store.get_profile))

    assert store.state.data == USER
    assert store.state.loading is False


@pytest.mark.unit
def test_update_profile_validates_before_dispatch(fake_session) -> None:
    store = _store(fake_session)

    assert store.update_profile({"age": -3}) is None
    assert store.state.error == "Age must be positive"
    assert fake_session.requests == []


@pytest.mark.unit
def test_update_profile_sends_coerced_changes(fake_session, respond) -> None:
    updated = {**USER, "profile": {**USER["profile"], "weight": 70.5}}
    fake_session.route("PUT", "/edit-profile", respond(200, {"data": updated}))
    store = _store(fake_session)

    async def _run():
        return await store.update_profile({"weight": "70.5", "firstName": " Ada "})

    envelope = asyncio.run(_run())

    assert envelope.is_fulfilled
    assert fake_session.requests[0]["json"] == {"weight": 70.5, "firstName": "Ada"}
    assert store.state.data["profile"]["weight"] == 70.5


@pytest.mark.unit
def test_get_all_users_reads_users_key(fake_session, respond) -> None:
    fake_session.route("GET", "/users", respond(200, {"data": {"users": [USER]}}))
    store = _store(fake_session)

    asyncio.run(_await(store.get_all_users))

    assert store.state.users == [USER]


@pytest.mark.unit
def test_get_all_users_failure_sets_error(fake_session, respond) -> None:
    fake_session.route("GET", "/users", respond(500, {"message": "Failed to fetch users"}))
    store = _store(fake_session)

    asyncio.run(_await(store.get_all_users))

    assert store.state.error == "Failed to fetch users"
    assert store.state.users == []


@pytest.mark.unit
def test_profile_form_values_flattens_user() -> None:
    values = profile_form_values(USER)

    assert values["firstName"] == "Ada"
    assert values["dob"] == "1990-12-10"
    assert values["gender"] == ""
    assert values["fitnessGoals"] == [{"goalType": "distance", "targetValue": 42}]


async def _await(method, *args):
    return await method(*args)
