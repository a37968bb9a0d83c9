import pytest


@pytest.mark.unit
def test_my_profile_returns_current_user(client, auth_headers) -> None:
    response = client.get("/api/my-profile", headers=auth_headers)

    data = response.get_json()["data"]
    assert response.status_code == 200
    assert data["email"] == "runner@example.com"
    assert data["profile"] == {}
    assert data["fitnessGoals"] == []


@pytest.mark.unit
def test_edit_profile_merges_fields_and_replaces_goals(client, auth_headers) -> None:
    client.put("/api/edit-profile", json={"firstName": "Ada", "age": 30}, headers=auth_headers)

    response = client.put(
        "/api/edit-profile",
        json={"weight": 61.5, "fitnessGoals": [{"goalType": "distance", "targetValue": 42}]},
        headers=auth_headers,
    )

    data = response.get_json()["data"]
    assert response.status_code == 200
    assert data["profile"] == {"firstName": "Ada", "age": 30, "weight": 61.5}
    assert data["fitnessGoals"] == [{"goalType": "distance", "targetValue": 42.0}]


@pytest.mark.unit
def test_edit_profile_rejects_non_positive_numbers(client, auth_headers) -> None:
    response = client.put("/api/edit-profile", json={"age": 0}, headers=auth_headers)

    assert response.status_code == 400


@pytest.mark.unit
def test_users_lists_everyone(client, login_as) -> None:
    headers = login_as("alice@example.com")
    login_as("bob@example.com")

    response = client.get("/api/users", headers=headers)

    users = response.get_json()["data"]["users"]
    assert sorted(user["email"] for user in users) == ["alice@example.com", "bob@example.com"]
    assert all("password_hash" not in user for user in users)


@pytest.mark.unit
def test_health_check_is_public(client) -> None:
    response = client.get("/health-check")

    data = response.get_json()["data"]
    assert response.status_code == 200
    assert data["status"] == "healthy"
    assert "X-Request-ID" in response.headers
