"""Redaction helpers for request/response logging.

Capabilities and script arguments can carry credentials (proxy auth, cookies,
tokens). Anything that goes to a log passes through `redact_json` first.
"""

from __future__ import annotations

from typing import Any

REDACTED = "<redacted>"

_SENSITIVE_SUBSTRINGS = (
    "token",
    "secret",
    "password",
    "passwd",
    "pwd",
    "authorization",
    "cookie",
    "jwt",
    "bearer",
    "api-key",
    "api_key",
    "apikey",
)

_SENSITIVE_EXACT = {
    # Avoid false-positives like "author"/"authorship" while still protecting obvious keys.
    "auth",
}

_MAX_STRING = 200


def is_sensitive_key(key: str) -> bool:
    k = (key or "").strip().lower()
    if not k:
        return False
    if k in _SENSITIVE_EXACT:
        return True
    return any(s in k for s in _SENSITIVE_SUBSTRINGS)


def redact_json(value: Any, *, max_depth: int = 8) -> Any:
    """Return a copy of a JSON value safe for logs.

    Sensitive keys are masked and long strings (screenshots, page sources)
    are truncated. The input is never mutated.
    """
    if max_depth <= 0:
        return "..."
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            out[key] = REDACTED if is_sensitive_key(key) else redact_json(v, max_depth=max_depth - 1)
        return out
    if isinstance(value, list):
        return [redact_json(v, max_depth=max_depth - 1) for v in value]
    if isinstance(value, str) and len(value) > _MAX_STRING:
        return f"{value[:_MAX_STRING]}...<{len(value)} chars>"
    return value


__all__ = ["REDACTED", "is_sensitive_key", "redact_json"]
