"""Testes do FirebaseIdentityVerifier e do verificador desabilitado."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from google.auth import exceptions as auth_exceptions
from google.oauth2 import id_token

from app.infra.identity import DisabledIdentityVerifier, FirebaseIdentityVerifier
from utils.errors import IdentityVerificationError


class TestFirebaseIdentityVerifier:
    def test_requires_project_id(self) -> None:
        with pytest.raises(ValueError, match="project_id"):
            FirebaseIdentityVerifier("")

    @pytest.mark.asyncio
    async def test_valid_token_returns_identity(self) -> None:
        verifier = FirebaseIdentityVerifier("interbox-2025")
        claims = {"user_id": "u1", "sub": "u1", "email": "Ana@Mail.com", "name": "Ana"}

        with patch.object(id_token, "verify_firebase_token", return_value=claims) as verify:
            identity = await verifier.verify("tok")

        assert identity.uid == "u1"
        assert identity.email == "ana@mail.com"
        assert identity.name == "Ana"
        _, kwargs = verify.call_args
        assert kwargs["audience"] == "interbox-2025"

    @pytest.mark.asyncio
    async def test_value_error_becomes_verification_error(self) -> None:
        verifier = FirebaseIdentityVerifier("interbox-2025")

        with (
            patch.object(id_token, "verify_firebase_token", side_effect=ValueError("expired")),
            pytest.raises(IdentityVerificationError, match="ValueError"),
        ):
            await verifier.verify("tok")

    @pytest.mark.asyncio
    async def test_transport_error_becomes_verification_error(self) -> None:
        verifier = FirebaseIdentityVerifier("interbox-2025")

        with (
            patch.object(
                id_token,
                "verify_firebase_token",
                side_effect=auth_exceptions.TransportError("certs"),
            ),
            pytest.raises(IdentityVerificationError),
        ):
            await verifier.verify("tok")

    @pytest.mark.asyncio
    async def test_claims_without_uid_rejected(self) -> None:
        verifier = FirebaseIdentityVerifier("interbox-2025")

        with (
            patch.object(id_token, "verify_firebase_token", return_value={"email": "a@b.c"}),
            pytest.raises(IdentityVerificationError, match="uid"),
        ):
            await verifier.verify("tok")


class TestDisabledIdentityVerifier:
    @pytest.mark.asyncio
    async def test_always_rejects(self) -> None:
        with pytest.raises(IdentityVerificationError):
            await DisabledIdentityVerifier().verify("anything")
