"""HTTP routes."""

from typing import Any
from uuid import uuid4

from fastapi import APIRouter, Depends, Response, status

from app.adapters.inbound.http.schemas import (
    CreateInviteRequest,
    CreateSessionRequest,
    HeartbeatResponse,
    IntroductionEnvelope,
    JoinRequest,
    LockRequest,
    RevokeResponse,
)
from app.adapters.inbound.http.security import (
    get_current_user,
    rate_limited,
    require_internal_token,
)
from app.application.dtos.housekeeping import PurgeResult
from app.application.dtos.introduction import IntroductionView
from app.application.dtos.invite import InviteIssued, InviteStatus
from app.application.dtos.membership import JoinResult, MembershipView
from app.application.dtos.message import MessageDecision
from app.application.dtos.presence import PresenceSummary
from app.application.dtos.session import RestartResult, SessionView
from app.application.ports.rate_limiter import EndpointType
from app.infrastructure.logging.logger import log_event
from app.infrastructure.wiring.container import Container, get_container

router = APIRouter()

general_api = rate_limited(EndpointType.GENERAL_API)
ai_call = rate_limited(EndpointType.AI_CALL)


def _log_request(session_id: str, route: str, user_id: str, **kwargs: Any) -> str:
    """Log an incoming request under a fresh request id and return the id."""
    request_id = str(uuid4())
    log_event(session_id, "http", request_id=request_id, route=route, user_id=user_id, **kwargs)
    return request_id


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> dict[str, str]:
    """
    Health check endpoint for liveness/readiness.

    Returns:
        Health status
    """
    return {"status": "ok"}


# Sessions


@router.post("/sessions", status_code=status.HTTP_201_CREATED, response_model=SessionView)
async def create_session(
    request: CreateSessionRequest,
    user_id: str = Depends(general_api),
    container: Container = Depends(get_container),
) -> SessionView:
    """Create a session owned by the caller."""
    session = await container.session_manager.create_session(
        user_id, request.kind, title=request.title, category=request.category
    )
    _log_request(session.session_id, "create_session", user_id, kind=request.kind.value)
    return SessionView.from_entity(session)


@router.get("/sessions/{session_id}", response_model=SessionView)
async def get_session(
    session_id: str,
    user_id: str = Depends(general_api),
    container: Container = Depends(get_container),
) -> SessionView:
    """Read a session the caller owns or belongs to."""
    return SessionView.from_entity(await container.session_manager.get_session(session_id, user_id))


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: str,
    user_id: str = Depends(general_api),
    container: Container = Depends(get_container),
) -> Response:
    """Delete a session and everything attached to it."""
    _log_request(session_id, "delete_session", user_id)
    await container.session_manager.delete_session(session_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/sessions/{session_id}/messages/authorize", response_model=MessageDecision)
async def authorize_message(
    session_id: str,
    user_id: str = Depends(ai_call),
    container: Container = Depends(get_container),
) -> MessageDecision:
    """
    Ask whether the caller may post a message right now.

    Returns:
        Allow/reject decision; a rejection is a normal 200 response
    """
    decision = await container.lifecycle.accept_message(session_id, user_id)
    _log_request(
        session_id,
        "authorize_message",
        user_id,
        allowed=decision.allowed,
        code=decision.code.value if decision.code else None,
    )
    return decision


# Invites


@router.post(
    "/group/sessions/{session_id}/invite",
    status_code=status.HTTP_201_CREATED,
    response_model=InviteIssued,
)
async def create_invite(
    session_id: str,
    response: Response,
    request: CreateInviteRequest = CreateInviteRequest(),
    user_id: str = Depends(general_api),
    container: Container = Depends(get_container),
) -> InviteIssued:
    """Create an invite, or return the active one (200) if it still holds."""
    issued = await container.invite_manager.create_invite(
        session_id, user_id, max_participants=request.max_participants
    )
    if issued.reused:
        response.status_code = status.HTTP_200_OK
    _log_request(session_id, "create_invite", user_id, reused=issued.reused)
    return issued


@router.delete("/group/sessions/{session_id}/invite", response_model=RevokeResponse)
async def revoke_invite(
    session_id: str,
    user_id: str = Depends(general_api),
    container: Container = Depends(get_container),
) -> RevokeResponse:
    """Revoke the session's active invite."""
    revoked = await container.invite_manager.revoke_invite(session_id, user_id)
    _log_request(session_id, "revoke_invite", user_id, revoked=revoked)
    return RevokeResponse(session_id=session_id, revoked=revoked)


@router.get("/group/invites/{code}", response_model=InviteStatus)
async def validate_invite(
    code: str,
    container: Container = Depends(get_container),
) -> InviteStatus:
    """Describe the session behind an invite code. No authentication required."""
    return await container.invite_manager.validate_invite(code)


# Membership


@router.post("/group/join", response_model=JoinResult)
async def join(
    request: JoinRequest,
    user_id: str = Depends(general_api),
    container: Container = Depends(get_container),
) -> JoinResult:
    """Join a session by invite code or session id."""
    result = await container.membership_admission.join(
        user_id, invite_code=request.invite_code, session_id=request.session_id
    )
    _log_request(
        result.membership.session_id, "join", user_id, already_member=result.already_member
    )
    return result


@router.delete(
    "/group/sessions/{session_id}/participants/{participant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_participant(
    session_id: str,
    participant_id: str,
    user_id: str = Depends(general_api),
    container: Container = Depends(get_container),
) -> Response:
    """Remove a participant (owner only)."""
    _log_request(session_id, "remove_participant", user_id, target=participant_id)
    await container.membership_admission.remove_member(session_id, user_id, participant_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Presence


@router.post("/group/sessions/{session_id}/heartbeat", response_model=HeartbeatResponse)
async def heartbeat(
    session_id: str,
    user_id: str = Depends(get_current_user),
    container: Container = Depends(get_container),
) -> HeartbeatResponse:
    """Record a heartbeat for the caller. Not rate limited: clients send one every few seconds."""
    record = await container.presence_tracker.heartbeat(session_id, user_id)
    return HeartbeatResponse(
        session_id=record.session_id,
        user_id=record.user_id,
        last_heartbeat=record.last_heartbeat,
        status=container.presence_tracker.classify(record),
    )


@router.get("/group/sessions/{session_id}/presence", response_model=PresenceSummary)
async def presence(
    session_id: str,
    user_id: str = Depends(general_api),
    container: Container = Depends(get_container),
) -> PresenceSummary:
    """Roster with derived presence."""
    return await container.presence_tracker.list_presence(session_id, user_id)


# Lifecycle


@router.post("/group/sessions/{session_id}/ready", response_model=MembershipView)
async def toggle_ready(
    session_id: str,
    user_id: str = Depends(general_api),
    container: Container = Depends(get_container),
) -> MembershipView:
    """Flip the caller's ready flag."""
    return await container.lifecycle.toggle_ready(session_id, user_id)


@router.post("/group/sessions/{session_id}/start", response_model=SessionView)
async def start(
    session_id: str,
    user_id: str = Depends(general_api),
    container: Container = Depends(get_container),
) -> SessionView:
    """Start a waiting group session."""
    _log_request(session_id, "start", user_id)
    return SessionView.from_entity(await container.lifecycle.start(session_id, user_id))


@router.post("/group/sessions/{session_id}/pause", response_model=SessionView)
async def pause(
    session_id: str,
    user_id: str = Depends(general_api),
    container: Container = Depends(get_container),
) -> SessionView:
    """Pause an active group session."""
    _log_request(session_id, "pause", user_id)
    return SessionView.from_entity(await container.lifecycle.pause(session_id, user_id))


@router.post("/group/sessions/{session_id}/resume", response_model=SessionView)
async def resume(
    session_id: str,
    user_id: str = Depends(general_api),
    container: Container = Depends(get_container),
) -> SessionView:
    """Resume a paused group session."""
    _log_request(session_id, "resume", user_id)
    return SessionView.from_entity(await container.lifecycle.resume(session_id, user_id))


@router.post("/group/sessions/{session_id}/end", response_model=SessionView)
async def end(
    session_id: str,
    user_id: str = Depends(general_api),
    container: Container = Depends(get_container),
) -> SessionView:
    """End and lock a group session."""
    _log_request(session_id, "end", user_id)
    return SessionView.from_entity(await container.lifecycle.end(session_id, user_id))


@router.post("/group/sessions/{session_id}/restart", response_model=RestartResult)
async def restart(
    session_id: str,
    user_id: str = Depends(ai_call),
    container: Container = Depends(get_container),
) -> RestartResult:
    """Clear the conversation and post a fresh opening."""
    _log_request(session_id, "restart", user_id)
    return await container.lifecycle.restart(session_id, user_id)


# Introductions


@router.post(
    "/group/sessions/{session_id}/introductions",
    status_code=status.HTTP_201_CREATED,
    response_model=IntroductionView,
)
async def submit_introduction(
    session_id: str,
    request: IntroductionEnvelope,
    user_id: str = Depends(general_api),
    container: Container = Depends(get_container),
) -> IntroductionView:
    """Store the caller's introduction."""
    introduction = await container.introductions.submit(
        session_id, user_id, request.introduction.to_answers()
    )
    return IntroductionView.from_entity(introduction)


@router.get("/group/sessions/{session_id}/introductions", response_model=list[IntroductionView])
async def list_introductions(
    session_id: str,
    user_id: str = Depends(general_api),
    container: Container = Depends(get_container),
) -> list[IntroductionView]:
    """Introductions of every participant."""
    rows = await container.introductions.list_introductions(session_id, user_id)
    return [IntroductionView.from_entity(i) for i in rows]


# Internal


@router.post(
    "/internal/sessions/{session_id}/lock",
    response_model=SessionView,
    dependencies=[Depends(require_internal_token)],
)
async def lock_session(
    session_id: str,
    request: LockRequest,
    container: Container = Depends(get_container),
) -> SessionView:
    """Safety lock from any state."""
    _log_request(session_id, "lock", request.actor, reason=request.reason)
    return SessionView.from_entity(
        await container.lifecycle.lock(session_id, request.actor, request.reason)
    )


@router.post(
    "/internal/maintenance/purge",
    response_model=PurgeResult,
    dependencies=[Depends(require_internal_token)],
)
async def purge(container: Container = Depends(get_container)) -> PurgeResult:
    """Deactivate expired invites and drop stale presence rows."""
    return await container.housekeeping.purge()
