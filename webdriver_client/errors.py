"""
Error taxonomy for the WebDriver client.

Provides:
- WebDriverError: common base for every failure raised by the client
- TransportError: the remote end could not be reached (refused, timed out, I/O)
- ProtocolError: the remote end answered with a structured error object
- DecodeError: the response was not the JSON we expected
- build_protocol_error: error-object extraction for both wire dialects
"""

from __future__ import annotations

from typing import Any

# W3C WebDriver error codes and the HTTP status each one is sent with.
ERROR_CODES: dict[str, int] = {
    "element click intercepted": 400,
    "element not interactable": 400,
    "insecure certificate": 400,
    "invalid argument": 400,
    "invalid cookie domain": 400,
    "invalid element state": 400,
    "invalid selector": 400,
    "invalid session id": 404,
    "javascript error": 500,
    "move target out of bounds": 500,
    "no such alert": 404,
    "no such cookie": 404,
    "no such element": 404,
    "no such frame": 404,
    "no such window": 404,
    "no such shadow root": 404,
    "script timeout": 500,
    "session not created": 500,
    "stale element reference": 404,
    "detached shadow root": 404,
    "timeout": 500,
    "unable to set cookie": 500,
    "unable to capture screen": 500,
    "unexpected alert open": 500,
    "unknown command": 404,
    "unknown error": 500,
    "unknown method": 405,
    "unsupported operation": 500,
}

# Legacy JSON Wire numeric status codes, mapped onto W3C error codes.
LEGACY_STATUS_CODES: dict[int, str] = {
    6: "invalid session id",
    7: "no such element",
    8: "no such frame",
    9: "unknown command",
    10: "stale element reference",
    11: "element not interactable",
    12: "invalid element state",
    13: "unknown error",
    15: "element not interactable",
    17: "javascript error",
    19: "invalid selector",
    21: "timeout",
    23: "no such window",
    24: "invalid cookie domain",
    25: "unable to set cookie",
    26: "unexpected alert open",
    27: "no such alert",
    28: "script timeout",
    29: "invalid element state",
    32: "invalid selector",
    33: "session not created",
    34: "move target out of bounds",
}


class WebDriverError(Exception):
    """Base class for all client errors."""

    kind = "webdriver"

    def to_dict(self) -> dict[str, Any]:
        return {"error": True, "kind": self.kind, "message": str(self)}


class TransportError(WebDriverError):
    """Connection refused, timed out, or failed at the I/O level."""

    kind = "transport"

    def __init__(self, message: str, *, timed_out: bool = False) -> None:
        super().__init__(message)
        self.timed_out = timed_out

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["timedOut"] = self.timed_out
        return out


class DecodeError(WebDriverError):
    """Response body missing, not JSON, or not the shape a typed result needs."""

    kind = "decode"


class ProtocolError(WebDriverError):
    """The remote end reported an error object (code + message)."""

    kind = "protocol"

    def __init__(
        self,
        code: str,
        message: str = "",
        *,
        status: int | None = None,
        stacktrace: str = "",
        data: Any = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status = status if status is not None else ERROR_CODES.get(code)
        self.stacktrace = stacktrace
        self.data = data
        super().__init__(f"{code}: {message}" if message else code)

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out.update({"code": self.code, "status": self.status})
        if self.data is not None:
            out["data"] = self.data
        return out


def _legacy_code(status: Any) -> str:
    try:
        return LEGACY_STATUS_CODES.get(int(status), "unknown error")
    except (TypeError, ValueError):
        return "unknown error"


def build_protocol_error(status: int | None, payload: Any) -> ProtocolError:
    """Build a ProtocolError from an error response in any dialect.

    Accepted shapes:
    - W3C: {"value": {"error": ..., "message": ..., "stacktrace": ..., "data": ...}}
    - flat: {"error": ..., "message": ...}
    - legacy JSON Wire: {"status": 7, "value": {"message": ...}}
    """
    if not isinstance(payload, dict):
        text = "" if payload is None else str(payload)
        return ProtocolError("unknown error", text[:500], status=status)

    value = payload.get("value")
    obj = value if isinstance(value, dict) and "error" in value else payload

    code = obj.get("error")
    if not isinstance(code, str) or not code:
        legacy_status = payload.get("status")
        if isinstance(legacy_status, int) and legacy_status != 0:
            code = _legacy_code(legacy_status)
        else:
            code = "unknown error"
        obj = value if isinstance(value, dict) else payload

    message = obj.get("message")
    stacktrace = obj.get("stacktrace")
    return ProtocolError(
        code,
        message if isinstance(message, str) else "",
        status=status,
        stacktrace=stacktrace if isinstance(stacktrace, str) else "",
        data=obj.get("data"),
    )


__all__ = [
    "ERROR_CODES",
    "LEGACY_STATUS_CODES",
    "DecodeError",
    "ProtocolError",
    "TransportError",
    "WebDriverError",
    "build_protocol_error",
]
