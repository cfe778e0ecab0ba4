"""Opaque submission ids and signed file links."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import time
from typing import Optional
from urllib.parse import quote, urlencode

from formnotify.core.config import Settings, settings as default_settings


TOKEN_VERSION = 1


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("utf-8").rstrip("=")


def _b64decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(text + padding)


def _get_signing_secret(settings: Settings) -> str:
    secret = settings.SIGNING_SECRET
    if not secret:
        raise ValueError("SIGNING_SECRET must be set to sign submission ids and file links")
    return secret


def _sign(message: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).digest()
    return _b64encode(digest)


def encode_submission_id(internal_id: str | int, *, settings: Settings | None = None) -> str:
    """Encode an internal submission id into a stable, opaque external id."""
    settings = settings or default_settings
    payload_b64 = _b64encode(f"{TOKEN_VERSION}:{internal_id}".encode("utf-8"))
    signature = _sign(payload_b64, _get_signing_secret(settings))
    return f"{payload_b64}.{signature[: settings.SUBMISSION_ID_SIGNATURE_LENGTH]}"


def decode_submission_id(token: str, *, settings: Settings | None = None) -> Optional[str]:
    """Verify and decode an external submission id. Returns None if invalid."""
    settings = settings or default_settings
    if not token:
        return None

    try:
        payload_b64, signature = token.split(".", 1)
    except ValueError:
        return None

    expected = _sign(payload_b64, _get_signing_secret(settings))[: settings.SUBMISSION_ID_SIGNATURE_LENGTH]
    if not hmac.compare_digest(expected, signature):
        return None

    try:
        payload = _b64decode(payload_b64).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    version, _, internal_id = payload.partition(":")
    if version != str(TOKEN_VERSION) or not internal_id:
        return None
    return internal_id


def build_signed_file_url(
    form_id: str | int,
    filename: str,
    *,
    now: int | None = None,
    settings: Settings | None = None,
) -> str:
    """Build a time-limited download link for an uploaded submission file."""
    settings = settings or default_settings
    expires = (now if now is not None else int(time.time())) + settings.SIGNED_URL_TTL_SECONDS
    path = f"/forms/{quote(str(form_id), safe='')}/submissions/files/{quote(filename, safe='')}"
    signature = _sign(f"{path}:{expires}", _get_signing_secret(settings))
    base = (settings.APP_URL or "").rstrip("/")
    return f"{base}{path}?{urlencode({'expires': expires, 'signature': signature})}"


def verify_signed_file_url(
    path: str,
    expires: int,
    signature: str,
    *,
    now: int | None = None,
    settings: Settings | None = None,
) -> bool:
    """Check a file link signature and expiry."""
    settings = settings or default_settings
    current = now if now is not None else int(time.time())
    if expires < current:
        return False
    expected = _sign(f"{path}:{expires}", _get_signing_secret(settings))
    return hmac.compare_digest(expected, signature)
