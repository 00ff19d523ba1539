"""Identity: usuário autenticado derivado de um ID token Firebase."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Identity(BaseModel):
    """Identidade verificada (claims decodificados do token)."""

    model_config = ConfigDict(frozen=True)

    uid: str = Field(..., min_length=1)
    email: str | None = None
    name: str | None = None
    claims: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> Identity:
        """Monta a identidade a partir do claim set do Firebase.

        Firebase grava o uid em `user_id` e repete em `sub`.

        Raises:
            ValueError: Se nenhum uid estiver presente
        """
        uid = claims.get("user_id") or claims.get("uid") or claims.get("sub")
        if not uid or not isinstance(uid, str):
            raise ValueError("claim set sem uid")
        email = claims.get("email")
        return cls(
            uid=uid,
            email=email.strip().lower() if isinstance(email, str) and email.strip() else None,
            name=claims.get("name") or None,
            claims=dict(claims),
        )
