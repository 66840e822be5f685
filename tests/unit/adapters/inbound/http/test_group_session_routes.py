"""Unit tests for HTTP routes."""

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from app.adapters.inbound.http.error_handlers import register_error_handlers
from app.adapters.inbound.http.routes import router
from app.adapters.outbound.rate_limit import InMemoryRateLimiter
from app.application.ports.rate_limiter import EndpointType
from app.infrastructure.config.settings import settings
from app.infrastructure.wiring.container import Container, get_container

OWNER = {"X-User-Id": "owner"}
ALICE = {"X-User-Id": "alice"}
BOB = {"X-User-Id": "bob"}


def _build_client(container: Container) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    register_error_handlers(app)
    app.dependency_overrides[get_container] = lambda: container
    return TestClient(app)


@pytest.fixture
def client(container):
    """Test client wired to the in-memory container."""
    return _build_client(container)


def _group_with_invite(client, **invite_body) -> tuple[str, str]:
    session = client.post("/sessions", json={"kind": "group"}, headers=OWNER).json()
    invite = client.post(
        f"/group/sessions/{session['session_id']}/invite", json=invite_body, headers=OWNER
    ).json()
    return session["session_id"], invite["code"]


def test_health_check(client):
    """Health check needs no identity."""
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}


def test_missing_identity_is_rejected(client):
    """Requests without X-User-Id get 401 with the error body."""
    response = client.post("/sessions", json={"kind": "group"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error"] == "not_authenticated"
    assert response.json()["retryable"] is False


def test_create_and_read_session(client):
    """A created group session is readable by its owner only."""
    created = client.post(
        "/sessions", json={"kind": "group", "category": "family"}, headers=OWNER
    )
    assert created.status_code == status.HTTP_201_CREATED
    body = created.json()
    assert body["status"] == "waiting"
    assert body["title"] == "Group Session"

    assert client.get(f"/sessions/{body['session_id']}", headers=OWNER).status_code == 200
    forbidden = client.get(f"/sessions/{body['session_id']}", headers=ALICE)
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN
    assert client.get("/sessions/missing", headers=OWNER).status_code == status.HTTP_404_NOT_FOUND


def test_invite_is_created_then_reused(client):
    """The first call creates (201); the second returns the same invite (200)."""
    session = client.post("/sessions", json={"kind": "group"}, headers=OWNER).json()
    url = f"/group/sessions/{session['session_id']}/invite"

    first = client.post(url, headers=OWNER)
    second = client.post(url, json={}, headers=OWNER)

    assert first.status_code == status.HTTP_201_CREATED
    assert second.status_code == status.HTTP_200_OK
    assert second.json()["code"] == first.json()["code"]
    assert second.json()["reused"] is True
    assert first.json()["url"].endswith(f"/join/{first.json()['code']}")


def test_validate_invite_without_identity(client):
    """Invite status is public and reports occupancy."""
    _, code = _group_with_invite(client)

    response = client.get(f"/group/invites/{code}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["current_participants"] == 1
    assert response.json()["can_join"] is True


def test_join_flow_and_rejoin(client):
    """Joining twice is a success flagged as already_member."""
    sid, code = _group_with_invite(client)

    first = client.post("/group/join", json={"invite_code": code.lower()}, headers=ALICE)
    again = client.post("/group/join", json={"invite_code": code}, headers=ALICE)

    assert first.status_code == status.HTTP_200_OK
    assert first.json()["membership"]["session_id"] == sid
    assert first.json()["already_member"] is False
    assert again.json()["already_member"] is True


def test_join_body_needs_exactly_one_target(client):
    """Both or neither of invite_code and session_id is a validation error."""
    neither = client.post("/group/join", json={}, headers=ALICE)
    both = client.post("/group/join", json={"invite_code": "ABCD2345", "session_id": "s"}, headers=ALICE)

    assert neither.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert both.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_full_session_returns_conflict(client):
    """Admission beyond the ceiling is 409 full."""
    _, code = _group_with_invite(client, max_participants=2)
    client.post("/group/join", json={"invite_code": code}, headers=ALICE)

    response = client.post("/group/join", json={"invite_code": code}, headers=BOB)

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"] == "full"


def test_expired_invite_is_gone(client, clock):
    """Expired invites answer 410 with kind expired."""
    _, code = _group_with_invite(client)
    clock.advance(hours=25)

    response = client.get(f"/group/invites/{code}")

    assert response.status_code == status.HTTP_410_GONE
    assert response.json()["error"] == "expired"


def test_revoked_invite_is_gone(client):
    """Revoked invites answer 410 with kind revoked."""
    sid, code = _group_with_invite(client)

    revoke = client.delete(f"/group/sessions/{sid}/invite", headers=OWNER)
    response = client.post("/group/join", json={"invite_code": code}, headers=ALICE)

    assert revoke.json()["revoked"] == 1
    assert response.status_code == status.HTTP_410_GONE
    assert response.json()["error"] == "revoked"


def test_unknown_invite_is_not_found(client):
    """Unknown codes answer 404."""
    assert client.get("/group/invites/ZZZZ9999").status_code == status.HTTP_404_NOT_FOUND


def test_start_too_early_is_conflict_with_counts(client):
    """Starting before readiness returns 409 with ready counts."""
    sid, code = _group_with_invite(client)
    client.post("/group/join", json={"invite_code": code}, headers=ALICE)
    client.post(f"/group/sessions/{sid}/ready", headers=OWNER)

    response = client.post(f"/group/sessions/{sid}/start", headers=OWNER)

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"] == "invalid_state"
    assert response.json()["details"]["ready_count"] == 1


def test_heartbeat_and_presence(client):
    """Heartbeats mark the caller online in the roster."""
    sid, code = _group_with_invite(client)
    client.post("/group/join", json={"invite_code": code}, headers=ALICE)

    beat = client.post(f"/group/sessions/{sid}/heartbeat", headers=ALICE)
    roster = client.get(f"/group/sessions/{sid}/presence", headers=OWNER)

    assert beat.json()["status"] == "online"
    statuses = {p["user_id"]: p["status"] for p in roster.json()["participants"]}
    assert statuses == {"owner": "offline", "alice": "online"}
    assert roster.json()["heartbeat_interval_seconds"] == 15


def test_non_member_heartbeat_is_forbidden(client):
    """Strangers cannot heartbeat."""
    sid, _ = _group_with_invite(client)

    response = client.post(f"/group/sessions/{sid}/heartbeat", headers=BOB)

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_introductions_tagged_union(client):
    """Introductions are validated against their category tag."""
    sid, _ = _group_with_invite(client)
    url = f"/group/sessions/{sid}/introductions"

    created = client.post(
        url,
        json={"introduction": {"category": "general", "personal_goals": "Sleep better"}},
        headers=ALICE,
    )
    wrong_fields = client.post(
        url,
        json={"introduction": {"category": "unknown", "goals": "x"}},
        headers=ALICE,
    )
    listed = client.get(url, headers=OWNER)

    assert created.status_code == status.HTTP_201_CREATED
    assert created.json()["answers"]["personal_goals"] == "Sleep better"
    assert wrong_fields.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert [i["user_id"] for i in listed.json()] == ["alice"]


def test_remove_participant(client):
    """The owner removes a participant with 204."""
    sid, code = _group_with_invite(client)
    client.post("/group/join", json={"invite_code": code}, headers=ALICE)

    forbidden = client.delete(f"/group/sessions/{sid}/participants/owner", headers=ALICE)
    removed = client.delete(f"/group/sessions/{sid}/participants/alice", headers=OWNER)

    assert forbidden.status_code == status.HTTP_403_FORBIDDEN
    assert removed.status_code == status.HTTP_204_NO_CONTENT


def test_delete_session(client):
    """Deleting returns 204 and the session is gone."""
    session = client.post("/sessions", json={"kind": "individual"}, headers=OWNER).json()

    response = client.delete(f"/sessions/{session['session_id']}", headers=OWNER)

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/sessions/{session['session_id']}", headers=OWNER).status_code == 404


def test_rate_limit_returns_429_with_retry_after(container, clock):
    """Exceeding the hourly budget yields 429 with Retry-After and the budget headers."""
    limited = Container(
        session_repository=container.session_repository,
        invite_repository=container.invite_repository,
        membership_repository=container.membership_repository,
        presence_repository=container.presence_repository,
        introduction_repository=container.introduction_repository,
        message_store=container.message_store,
        account_repository=container.account_repository,
        rate_limiter=InMemoryRateLimiter(
            {EndpointType.GENERAL_API: 2, EndpointType.AI_CALL: 1}, clock=clock
        ),
        clock=clock,
    )
    client = _build_client(limited)

    first = client.post("/sessions", json={"kind": "individual"}, headers=OWNER)
    client.post("/sessions", json={"kind": "individual"}, headers=OWNER)
    third = client.post("/sessions", json={"kind": "individual"}, headers=OWNER)

    assert first.headers["X-RateLimit-Limit"] == "2"
    assert first.headers["X-RateLimit-Remaining"] == "1"
    assert third.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert third.json()["error"] == "rate_limited"
    assert int(third.headers["Retry-After"]) >= 1
    assert third.headers["X-RateLimit-Limit"] == "2"
    assert third.headers["X-RateLimit-Remaining"] == "0"
    assert int(third.headers["X-RateLimit-Reset"]) == int(first.headers["X-RateLimit-Reset"])

    # Other users keep their own budget
    assert client.post("/sessions", json={"kind": "individual"}, headers=ALICE).status_code == 201


def test_message_gate_rejection_is_ok_response(client):
    """A gate rejection is a 200 decision, not an error."""
    sid, _ = _group_with_invite(client)

    response = client.post(f"/sessions/{sid}/messages/authorize", headers=OWNER)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["allowed"] is False
    assert response.json()["code"] == "session_waiting"


def test_internal_lock_requires_token(client, monkeypatch):
    """The lock endpoint needs the configured internal token."""
    sid, _ = _group_with_invite(client)
    url = f"/internal/sessions/{sid}/lock"
    body = {"actor": "ai", "reason": "Crisis protocol"}

    assert client.post(url, json=body).status_code == status.HTTP_403_FORBIDDEN

    monkeypatch.setattr(settings, "internal_service_token", "secret")
    wrong = client.post(url, json=body, headers={"X-Internal-Token": "nope"})
    locked = client.post(url, json=body, headers={"X-Internal-Token": "secret"})
    gate = client.post(f"/sessions/{sid}/messages/authorize", headers=OWNER)

    assert wrong.status_code == status.HTTP_403_FORBIDDEN
    assert locked.status_code == status.HTTP_200_OK
    assert locked.json()["is_locked"] is True
    assert locked.json()["locked_by"] == "ai"
    assert gate.json()["code"] == "session_locked"


def test_internal_purge(client, monkeypatch):
    """Purge reports what it touched."""
    monkeypatch.setattr(settings, "internal_service_token", "secret")

    response = client.post("/internal/maintenance/purge", headers={"X-Internal-Token": "secret"})

    assert response.status_code == status.HTTP_200_OK
    assert set(response.json()) == {"invites_deactivated", "presence_deleted"}
