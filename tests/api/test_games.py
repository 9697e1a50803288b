# tests/api/test_games.py

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from matchpoint.constants.statuses import GroupRole
from tests.utils.game import TEST_GROUP, add_member, create_game


def _game_body(**overrides):
    body = {
        "title": "Tuesday Volleyball",
        "groupId": TEST_GROUP,
        "scheduledTime": (datetime.now(timezone.utc) + timedelta(days=2)).isoformat(),
        "maxParticipants": 12,
    }
    body.update(overrides)
    return body


def test_create_game(test_client: TestClient, db_session):
    add_member(db_session, "user_host")

    response = test_client.post("/api/v1/games", json=_game_body())

    assert response.status_code == 201
    data = response.json()
    assert data["id"].startswith("gam_")
    assert data["hostId"] == "user_host"
    assert data["groupId"] == TEST_GROUP
    assert data["status"] == "Upcoming"
    assert data["maxParticipants"] == 12
    assert data["currentParticipants"] == 0
    assert data["participantIds"] == []


def test_create_game_requires_group_membership(test_client: TestClient):
    response = test_client.post("/api/v1/games", json=_game_body())

    assert response.status_code == 403
    assert "member of the group" in response.json()["detail"]


def test_create_game_validates_bounds(test_client: TestClient, db_session):
    add_member(db_session, "user_host")

    response = test_client.post("/api/v1/games", json=_game_body(maxParticipants=4, minParticipants=6))
    assert response.status_code == 422

    response = test_client.post("/api/v1/games", json=_game_body(maxParticipants=0))
    assert response.status_code == 422


def test_get_game(test_client: TestClient, db_session):
    game = create_game(db_session, max_participants=4)

    response = test_client.get(f"/api/v1/games/{game.id}")

    assert response.status_code == 200
    assert response.json()["title"] == "Sunday Pickup"


def test_get_missing_game(test_client: TestClient):
    response = test_client.get("/api/v1/games/gam_missing")

    assert response.status_code == 404
    assert response.json()["detail"] == "Game not found"


def test_host_starts_game(test_client: TestClient, db_session):
    game = create_game(db_session)

    response = test_client.patch(f"/api/v1/games/{game.id}/status", json={"status": "In Progress"})

    assert response.status_code == 200
    assert response.json()["status"] == "In Progress"


def test_invalid_transition(test_client: TestClient, db_session):
    game = create_game(db_session)

    response = test_client.patch(f"/api/v1/games/{game.id}/status", json={"status": "Completed"})

    assert response.status_code == 400
    assert "Cannot move game" in response.json()["detail"]


def test_group_admin_can_cancel(test_client: TestClient, db_session, auth):
    game = create_game(db_session)
    add_member(db_session, "user_admin", GroupRole.ADMIN)
    auth.user_id = "user_admin"

    response = test_client.patch(f"/api/v1/games/{game.id}/status", json={"status": "Canceled"})

    assert response.status_code == 200
    assert response.json()["status"] == "Canceled"


def test_member_cannot_change_status(test_client: TestClient, db_session, auth):
    game = create_game(db_session)
    add_member(db_session, "user_member")
    auth.user_id = "user_member"

    response = test_client.patch(f"/api/v1/games/{game.id}/status", json={"status": "Canceled"})

    assert response.status_code == 403
