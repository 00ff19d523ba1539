"""Endpoint de introspecção da identidade do chamador."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from api.dependencies.auth import optional_auth
from app.domain.identity import Identity

router = APIRouter()


@router.get("/auth/me")
async def who_am_i(
    identity: Annotated[Identity | None, Depends(optional_auth)],
) -> dict[str, Any]:
    """Identidade do token, ou anônimo quando ausente/inválido."""
    if identity is None:
        return {"authenticated": False}
    return {
        "authenticated": True,
        "uid": identity.uid,
        "email": identity.email,
        "name": identity.name,
    }
