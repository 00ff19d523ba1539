"""Helpers para manter PII e segredos fora dos logs."""

from __future__ import annotations

import hashlib


def mask_email(email: str | None) -> str:
    """Mascara e-mail preservando domínio: ``jo***@gmail.com``."""
    if not email or "@" not in email:
        return ""
    local, _, domain = email.partition("@")
    return f"{local[:2]}***@{domain}"


def token_fingerprint(token: str) -> str:
    """Fingerprint curto e não reversível de um bearer token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]
