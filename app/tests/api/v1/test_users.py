import pytest

USERS = "/api/v1/users"


@pytest.fixture
def alice(client):
    response = client.post(
        USERS,
        json={
            "email": "alice@example.com",
            "name": "Alice",
            "phone": "+15550000001",
            "categories": ["Finance"],
            "channels": ["Email", "SMS"],
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.unit
class TestCreateUser:
    def test_create_returns_profile(self, alice):
        assert alice["email"] == "alice@example.com"
        assert alice["categories"] == ["Finance"]
        assert alice["channels"] == ["Email", "SMS"]

    def test_duplicate_email(self, client, alice):
        response = client.post(USERS, json={"email": "alice@example.com", "name": "Again"})

        assert response.status_code == 409
        assert response.json()["error_type"] == "duplicate_user"

    def test_unknown_channel(self, client):
        response = client.post(
            USERS, json={"email": "b@example.com", "name": "B", "channels": ["Fax"]}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid channels: Fax"
        assert response.json()["valid_channels"] == ["Email", "Push", "SMS"]

    def test_invalid_email(self, client):
        response = client.post(USERS, json={"email": "nope", "name": "B"})

        assert response.status_code == 400
        assert any("email" in error for error in response.json()["errors"])


@pytest.mark.unit
class TestReadUsers:
    def test_list(self, client, alice):
        client.post(USERS, json={"email": "aaron@example.com", "name": "Aaron"})

        assert [u["name"] for u in client.get(USERS).json()] == ["Aaron", "Alice"]

    def test_search(self, client, alice):
        client.post(USERS, json={"email": "aaron@example.com", "name": "Aaron"})

        response = client.get(USERS, params={"search": "ali"})

        assert [u["name"] for u in response.json()] == ["Alice"]

    def test_get_profile(self, client, alice):
        response = client.get(f"{USERS}/{alice['id']}")

        assert response.status_code == 200
        assert response.json()["channels"] == ["Email", "SMS"]

    def test_get_unknown(self, client):
        response = client.get(f"{USERS}/00000000-0000-0000-0000-000000000000")

        assert response.status_code == 404
        assert response.json()["error_type"] == "user_not_found"


@pytest.mark.unit
class TestPreferences:
    def test_replace_preferences(self, client, alice):
        response = client.put(
            f"{USERS}/{alice['id']}/preferences",
            json={"categories": ["Sports", "Movies"], "channels": ["Push"]},
        )

        assert response.status_code == 200
        assert response.json()["categories"] == ["Movies", "Sports"]
        assert response.json()["channels"] == ["Push"]

    def test_preferences_drive_dispatch(self, client, alice):
        client.put(
            f"{USERS}/{alice['id']}/preferences",
            json={"categories": ["Sports"], "channels": ["Push"]},
        )

        finance = client.post("/api/v1/notifications", json={"category": "Finance", "message": "x"})
        sports = client.post("/api/v1/notifications", json={"category": "Sports", "message": "y"})

        assert finance.json()["results"] == []
        assert [r["channel"] for r in sports.json()["results"]] == ["Push"]

    def test_disable_channel(self, client, alice):
        response = client.put(
            f"{USERS}/{alice['id']}/channels/SMS", json={"enabled": False}
        )

        assert response.status_code == 200
        assert response.json()["channels"] == ["Email"]

    def test_toggle_unknown_user(self, client):
        response = client.put(
            f"{USERS}/00000000-0000-0000-0000-000000000000/channels/SMS",
            json={"enabled": True},
        )

        assert response.status_code == 404
