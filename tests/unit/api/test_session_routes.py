"""Unit tests for session routes."""

import pytest
from fastapi.testclient import TestClient

from ticketdesk.session_store import SessionStore

MOCK_EMAIL = "jean.dupont@startup.io"


@pytest.mark.unit
class TestGetSession:
    """Tests for GET /session."""

    def test_before_mount(self, client: TestClient) -> None:
        """The flow starts out resolving."""
        response = client.get("/api/v1/session")

        assert response.status_code == 200
        data = response.json()
        assert data["data"]["state"] == "resolving"
        assert data["data"]["loading"] is True
        assert data["data"]["client"] is None
        assert data["error"] is None


@pytest.mark.unit
class TestMount:
    """Tests for POST /session/mount."""

    def test_mount_without_identity(self, client: TestClient) -> None:
        """No link and no session is unauthenticated."""
        response = client.post("/api/v1/session/mount", json={"location": "/"})

        assert response.status_code == 200
        assert response.json()["data"]["state"] == "unauthenticated"
        assert response.json()["data"]["loading"] is False

    def test_mount_with_client_link(self, client: TestClient) -> None:
        """A clientId link resolves and the query is stripped."""
        response = client.post(
            "/api/v1/session/mount", json={"location": "/dashboard?clientId=cli_1"}
        )

        data = response.json()["data"]
        assert data["state"] == "authenticated"
        assert data["client"]["id"] == "cli_1"
        assert data["client"]["name"] == "Jean Dupont"
        assert data["client"]["email_status"] == "Valid"
        assert data["location"] == "/dashboard"

    def test_mount_default_location(self, client: TestClient, store: SessionStore) -> None:
        """An empty body mounts at the root with the stored session."""
        store.save_session(MOCK_EMAIL)

        response = client.post("/api/v1/session/mount", json={})

        assert response.json()["data"]["state"] == "authenticated"


@pytest.mark.unit
class TestLoginLogout:
    """Tests for POST /session/login and /session/logout."""

    def test_login_known_email(self, client: TestClient, store: SessionStore) -> None:
        """A known email logs in and is remembered."""
        response = client.post("/api/v1/session/login", json={"email": f"  {MOCK_EMAIL} "})

        assert response.status_code == 200
        assert response.json()["data"]["state"] == "authenticated"
        assert response.json()["error"] is None
        token = store.load_session()
        assert token is not None
        assert token.email == MOCK_EMAIL

    def test_login_unknown_email(self, client: TestClient) -> None:
        """An unknown email stays unauthenticated with an error message."""
        response = client.post("/api/v1/session/login", json={"email": "who@nowhere.test"})

        assert response.status_code == 200
        body = response.json()
        assert body["data"]["state"] == "unauthenticated"
        assert "who@nowhere.test" in body["error"]

    def test_login_validation(self, client: TestClient) -> None:
        """A missing email is a request validation error."""
        response = client.post("/api/v1/session/login", json={})
        assert response.status_code == 422

    def test_logout(self, logged_in: TestClient, store: SessionStore) -> None:
        """Logout forgets the client and the stored session."""
        response = logged_in.post("/api/v1/session/logout")

        data = response.json()["data"]
        assert data["state"] == "unauthenticated"
        assert data["client"] is None
        assert store.load_session() is None

    def test_logout_discards_draft(self, logged_in: TestClient) -> None:
        """A ticket being drafted is dropped on logout."""
        logged_in.post(
            "/api/v1/intake/details",
            json={
                "title": "Menu",
                "description": "Broken",
                "type": "Bug",
                "project_id": "proj_1",
            },
        )

        logged_in.post("/api/v1/session/logout")

        assert logged_in.get("/api/v1/intake").json()["data"]["step"] == "details"


@pytest.mark.unit
class TestActivityAndVisibility:
    """Tests for POST /session/activity and /session/visibility."""

    def test_activity_refreshes(self, logged_in: TestClient) -> None:
        """Activity while logged in refreshes the session."""
        response = logged_in.post("/api/v1/session/activity", json={"signal": "click"})

        assert response.status_code == 200
        assert response.json()["data"]["refreshed"] is True

    def test_activity_when_logged_out(self, client: TestClient) -> None:
        """Activity without a session refreshes nothing."""
        response = client.post("/api/v1/session/activity", json={"signal": "pointer_move"})
        assert response.json()["data"]["refreshed"] is False

    def test_unknown_signal_rejected(self, client: TestClient) -> None:
        """Signals outside the enumeration fail validation."""
        response = client.post("/api/v1/session/activity", json={"signal": "scroll"})
        assert response.status_code == 422

    def test_visibility_schedules_reconcile(self, logged_in: TestClient, fake_timers) -> None:
        """Becoming visible while logged in schedules a re-fetch."""
        response = logged_in.post("/api/v1/session/visibility", json={"visible": True})

        assert response.json()["data"]["scheduled"] is True
        assert len(fake_timers.pending) == 1

    def test_hidden_schedules_nothing(self, logged_in: TestClient) -> None:
        """Becoming hidden does nothing."""
        response = logged_in.post("/api/v1/session/visibility", json={"visible": False})
        assert response.json()["data"]["scheduled"] is False
