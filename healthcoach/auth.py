"""LINE webhook signature verification."""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging

from fastapi import Header, HTTPException, Request

from healthcoach.config import settings

logger = logging.getLogger(__name__)


def compute_signature(secret: str, body: bytes) -> str:
    """base64(HMAC-SHA256(secret, body)) — the value LINE sends in x-line-signature."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(secret: str, body: bytes, signature: str | None) -> bool:
    """Constant-time check of ``signature`` against the raw body. Empty secret never verifies."""
    if not secret or not signature:
        return False
    expected = compute_signature(secret, body)
    return hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8"))


async def verified_body(
    request: Request,
    x_line_signature: str | None = Header(default=None, alias="x-line-signature"),
) -> bytes:
    """Return the raw request body once its signature checks out, else raise 400.

    The header is checked before the body is read; the body is read exactly once
    and handed on unparsed.
    """
    if not x_line_signature:
        logger.warning("Webhook rejected: no signature header")
        raise HTTPException(status_code=400, detail="No signature")

    if not settings.line_channel_secret:
        logger.error("Webhook rejected: LINE_CHANNEL_SECRET is not configured")
        raise HTTPException(status_code=400, detail="Invalid signature")

    body = await request.body()
    if not verify_signature(settings.line_channel_secret, body, x_line_signature):
        logger.warning("Webhook rejected: signature mismatch")
        raise HTTPException(status_code=400, detail="Invalid signature")

    return body
