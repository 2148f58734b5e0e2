import hashlib
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_logger = logging.getLogger("audit")


def _email_hash(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    return hashlib.sha256(email.lower().encode()).hexdigest()[:12]


def audit(event: str, *, email: Optional[str] = None, user_id: Optional[str] = None, **fields: Any) -> None:
    """Emit one audit event as a single JSON line on the ``audit`` logger.

    Used for authentication and onboarding transitions. Never pass secrets
    (passwords, tokens); the email is hashed before it is written.
    """
    payload: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
    }
    if email:
        payload["email_hash"] = _email_hash(email)
    if user_id:
        payload["user_id"] = user_id
    payload.update(fields)
    _logger.info(json.dumps(payload, ensure_ascii=False, default=str))


def configure_audit_logger() -> logging.Logger:
    """Attach a raw JSON-lines handler to the audit logger (idempotent)."""
    if not _logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        _logger.addHandler(handler)
    _logger.setLevel(logging.INFO)
    # Keep audit lines out of the root handlers
    _logger.propagate = False
    return _logger
