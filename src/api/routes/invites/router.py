"""Endpoints de convites de time (todos autenticados).

Endpoints:
- POST /invites: capitão convida um atleta por e-mail
- POST /invites/{invite_id}/accept | /decline: resposta do convidado
- POST /invites/{invite_id}/cancel: capitão cancela
- GET /invites/pending: convites pendentes do e-mail do chamador
- GET /teams/{team_id}/invites: visão do capitão

Erros de regra → 4xx com `{"success": false, "error", "message"}`;
store indisponível → 503.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies.auth import require_auth
from app.domain.identity import Identity
from app.services.invite_service import InviteError, InviteResult, InviteService
from fsm import InviteStatus
from utils.errors import InfrastructureError

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_STATUS: dict[InviteError, int] = {
    InviteError.NOT_FOUND: 404,
    InviteError.FORBIDDEN: 403,
    InviteError.CONFLICT: 409,
    InviteError.ALREADY_RESOLVED: 409,
    InviteError.EXPIRED: 409,
    InviteError.TEAM_FULL: 409,
    InviteError.INVALID_ARGUMENT: 400,
}

AuthIdentity = Annotated[Identity, Depends(require_auth)]


class CreateInviteRequest(BaseModel):
    """Corpo de POST /invites (camelCase como no frontend)."""

    model_config = ConfigDict(populate_by_name=True)

    team_id: str = Field(..., alias="teamId", min_length=1)
    invited_email: str = Field(..., alias="invitedEmail", min_length=3)
    invited_name: str = Field("", alias="invitedName")
    team_name: str | None = Field(None, alias="teamName")


def _get_invite_service(request: Request) -> InviteService:
    service = getattr(request.app.state, "invite_service", None)
    if service is None:
        raise RuntimeError("invite_service não inicializado (lifespan não executou)")
    return service


def _to_response(
    service: InviteService,
    result: InviteResult,
    success_status: int = 200,
) -> JSONResponse:
    if not result.ok:
        error = result.error or InviteError.INVALID_ARGUMENT
        return JSONResponse(
            {"success": False, "error": str(error), "message": result.message},
            status_code=ERROR_STATUS[error],
        )

    now = service.now()
    body: dict[str, Any] = {"success": True}
    if result.invite is not None:
        body["invite"] = result.invite.to_public_dict(now)
    if result.invites or result.invite is None:
        body["invites"] = [invite.to_public_dict(now) for invite in result.invites]
    if result.roster_updated is not None:
        body["rosterUpdated"] = result.roster_updated
    return JSONResponse(body, status_code=success_status)


async def _execute(
    service: InviteService,
    operation: Awaitable[InviteResult],
    success_status: int = 200,
) -> JSONResponse:
    try:
        result = await operation
    except InfrastructureError as exc:
        logger.error("invite_store_unavailable", extra={"error_type": type(exc).__name__})
        return JSONResponse(
            {
                "success": False,
                "error": "store_unavailable",
                "message": "armazenamento indisponível, tente novamente",
            },
            status_code=503,
        )
    return _to_response(service, result, success_status)


@router.post("/invites", response_model=None)
async def create_invite(
    body: CreateInviteRequest,
    request: Request,
    identity: AuthIdentity,
) -> JSONResponse:
    """Capitão (chamador) convida um atleta para o time."""
    service = _get_invite_service(request)
    return await _execute(
        service,
        service.create_invite(
            body.team_id,
            body.invited_email,
            identity.uid,
            captain_name=identity.name or "",
            captain_email=identity.email,
            invited_name=body.invited_name,
            team_name=body.team_name,
        ),
        success_status=201,
    )


async def _respond(
    request: Request,
    invite_id: str,
    identity: Identity,
    decision: InviteStatus,
) -> JSONResponse:
    service = _get_invite_service(request)
    return await _execute(
        service,
        service.respond_to_invite(
            invite_id,
            identity.uid,
            decision,
            responder_email=identity.email,
            responder_name=identity.name,
        ),
    )


@router.post("/invites/{invite_id}/accept", response_model=None)
async def accept_invite(invite_id: str, request: Request, identity: AuthIdentity) -> JSONResponse:
    return await _respond(request, invite_id, identity, InviteStatus.ACEITO)


@router.post("/invites/{invite_id}/decline", response_model=None)
async def decline_invite(invite_id: str, request: Request, identity: AuthIdentity) -> JSONResponse:
    return await _respond(request, invite_id, identity, InviteStatus.RECUSADO)


@router.post("/invites/{invite_id}/cancel", response_model=None)
async def cancel_invite(invite_id: str, request: Request, identity: AuthIdentity) -> JSONResponse:
    service = _get_invite_service(request)
    return await _execute(service, service.cancel_invite(invite_id, identity.uid))


@router.get("/invites/pending", response_model=None)
async def list_pending_invites(request: Request, identity: AuthIdentity) -> JSONResponse:
    """Convites pendentes endereçados ao e-mail do token."""
    service = _get_invite_service(request)
    return await _execute(service, service.list_pending_invites(identity.email or ""))


@router.get("/teams/{team_id}/invites", response_model=None)
async def list_team_invites(team_id: str, request: Request, identity: AuthIdentity) -> JSONResponse:
    service = _get_invite_service(request)
    return await _execute(service, service.list_team_invites(team_id, identity.uid))
