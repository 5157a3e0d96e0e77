"""Hybrid notification payload codec.

A notification ``message`` is either a structured ``{"key", "params"}`` JSON
object, resolved against a translation catalog when rendered, or legacy free
text stored before the structured format existed. Decoding must keep working
for both, so ``decode`` is total: anything it cannot read as a structured
payload comes back unchanged as legacy text.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Literal

# Translation keys for structured payloads
NEW_COMPLAINT = "new_complaint_msg"
COMPLAINT_CREATED = "user_complaint_created_msg"
PROCESSING_TECH = "notif_processing_tech"
PROCESSING_USER = "notif_processing_user"
PROCESSING_BODY = "notif_processing_body"
COMPLETED_BODY = "notif_completed_body"
COMPLETED_USER = "notif_completed_user"
TRANSPORT_ADMIN = "notif_transport_admin"
TRANSPORT_USER = "notif_transport_user"
CHECKING_ADMIN = "notif_checking_admin"
CHECKING_USER = "notif_checking_user"
REMARK_ADMIN = "notif_remark_admin"
REMARK_USER = "notif_remark_user"
JOB_UPDATE_TECH = "notif_job_update_tech"
COMPLAINT_CANCELLED_USER = "user_complaint_cancelled_msg"
COMPLAINT_CANCELLED_ADMIN = "admin_complaint_cancelled_msg"


@dataclass(frozen=True)
class StructuredMessage:
    key: str
    params: dict[str, str] = field(default_factory=dict)
    kind: Literal["structured"] = "structured"


@dataclass(frozen=True)
class LegacyMessage:
    text: str
    kind: Literal["legacy"] = "legacy"


DecodedMessage = StructuredMessage | LegacyMessage


def _stringify_params(params: Any) -> dict[str, str]:
    if not isinstance(params, dict):
        return {}
    return {str(name): "" if value is None else str(value) for name, value in params.items()}


def encode(key: str, params: dict[str, Any] | None = None) -> str:
    """Serialize a translation key and its interpolation params.

    Raises:
        ValueError: If ``key`` is empty, since such a payload would decode as legacy.
    """
    if not key:
        raise ValueError("Notification key must not be empty")
    return json.dumps({"key": key, "params": _stringify_params(params or {})}, ensure_ascii=False)


def decode(raw: str | None) -> DecodedMessage:
    """Decode a stored message. Never raises."""
    if not raw:
        return LegacyMessage(text=raw or "")

    if not raw.strip().startswith("{"):
        return LegacyMessage(text=raw)

    try:
        parsed = json.loads(raw)
    except (ValueError, RecursionError):
        return LegacyMessage(text=raw)

    if not isinstance(parsed, dict):
        return LegacyMessage(text=raw)

    key = parsed.get("key")
    if not isinstance(key, str) or not key:
        return LegacyMessage(text=raw)

    return StructuredMessage(key=key, params=_stringify_params(parsed.get("params")))
