"""Signed account cookie.

The resolved account is cached client-side under a fixed cookie name as a flat
JSON record with an HMAC signature, so a returning browser can be restored
without logging in again. The record is only a hint: it is always re-resolved
against the store before use.
"""
import base64
import hashlib
import hmac
import json
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

ACCOUNT_COOKIE = "account"


def _sign(payload: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def dump_account_record(record: Dict[str, Any], secret: str) -> str:
    """Serialize and sign an account record."""
    payload = base64.urlsafe_b64encode(
        json.dumps(record, separators=(",", ":"), default=str).encode("utf-8")
    ).decode("ascii")
    return f"{payload}.{_sign(payload, secret)}"


def load_account_record(value: Optional[str], secret: str) -> Optional[Dict[str, Any]]:
    """Verify and decode an account record. Returns None if missing or tampered."""
    if not value:
        return None
    payload, _, signature = value.rpartition(".")
    expected = _sign(payload, secret).encode("ascii")
    # Cookie headers arrive latin-1 decoded, so the signature may hold any character
    if not payload or not hmac.compare_digest(expected, signature.encode("utf-8", "surrogateescape")):
        logger.warning("[AUTH] Discarding account cookie with invalid signature")
        return None
    try:
        record = json.loads(base64.urlsafe_b64decode(payload.encode("ascii")))
    except ValueError:
        logger.warning("[AUTH] Discarding undecodable account cookie")
        return None
    return record if isinstance(record, dict) else None
