"""Structured JSON logging to stdout.

One JSON object per line, safe for stdout collectors. Credentials passed as
fields are masked down to their last four characters.
"""

from typing import Any, Dict
from datetime import datetime, timezone
import json

from app.obs.context import request_id_var

_SECRET_FIELDS = ("api_key", "key", "token")


def _redact_secret(value: Any) -> Any:
    s = str(value) if value is not None else ""
    if not s:
        return s
    if len(s) <= 4:
        return "***"
    return f"***{s[-4:]}"


def log_event(event: str, **fields: Any) -> None:
    now = datetime.now(timezone.utc).isoformat()
    payload: Dict[str, Any] = {
        "ts": now,
        "level": fields.pop("level", "INFO"),
        "event": event,
        "request_id": request_id_var.get(),
    }

    for k, v in fields.items():
        if k in _SECRET_FIELDS:
            payload[k] = _redact_secret(v)
        else:
            payload[k] = v

    try:
        print(json.dumps(payload, separators=(",", ":"), default=str))
    except (TypeError, ValueError):
        # Logging must never take the request down with it
        print(json.dumps({"ts": now, "level": str(payload["level"]), "event": str(event), "log_error": "unserializable fields"}))
