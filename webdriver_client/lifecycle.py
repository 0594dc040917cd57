"""
Session lifecycle: capability negotiation and teardown.

`start_session` works with any capabilities payload (a mapping, or an object
exposing `to_json()` / `to_dict()`) and any Transport.

Session-creation responses come in three dialects. Precedence is fixed:
1. W3C:        {"value": {"sessionId": ..., "capabilities": {...}}}
2. JSON Wire:  {"sessionId": ..., "status": 0, "value": {...capabilities...}}
3. flat:       {"sessionId": ..., "capabilities": {...}}
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from .command import DeleteSession, NewSession, RequestData, SetTimeouts, TimeoutConfiguration
from .errors import DecodeError
from .http_client import Transport
from .redaction import redact_json
from .session import WebDriverSession

logger = logging.getLogger("webdriver.session")


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


class Capabilities(Mapping):
    """Read-only snapshot of the capabilities negotiated at session start."""

    def __init__(self, data: Mapping[str, Any] | None = None):
        self._data = _freeze(copy.deepcopy(dict(data or {})))

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Capabilities({self.to_dict()!r})"

    def to_dict(self) -> dict[str, Any]:
        """Mutable deep copy (safe to edit and send as a new request)."""
        return _thaw(self._data)

    @property
    def browser_name(self) -> str:
        return str(self._data.get("browserName") or "")

    @property
    def browser_version(self) -> str:
        return str(self._data.get("browserVersion") or self._data.get("version") or "")

    @property
    def platform_name(self) -> str:
        return str(self._data.get("platformName") or self._data.get("platform") or "")


class DesiredCapabilities:
    """Ready-made capability requests. Each call returns a fresh dict."""

    @staticmethod
    def chrome() -> dict[str, Any]:
        return {"browserName": "chrome", "goog:chromeOptions": {"args": []}}

    @staticmethod
    def edge() -> dict[str, Any]:
        return {"browserName": "MicrosoftEdge", "ms:edgeOptions": {"args": []}}

    @staticmethod
    def firefox() -> dict[str, Any]:
        return {"browserName": "firefox", "moz:firefoxOptions": {"args": []}}


def serialize_capabilities(capabilities: Any) -> dict[str, Any]:
    """Turn a capabilities payload into a JSON object."""
    if capabilities is None:
        return {}
    if isinstance(capabilities, Capabilities):
        return capabilities.to_dict()
    for attr in ("to_json", "to_dict"):
        fn = getattr(capabilities, attr, None)
        if callable(fn):
            capabilities = fn()
            break
    if not isinstance(capabilities, Mapping):
        raise TypeError(f"capabilities must serialize to a JSON object, got {type(capabilities).__name__}")
    return copy.deepcopy(dict(capabilities))


def parse_new_session_response(payload: Any) -> tuple[str, Capabilities]:
    """Extract (session_id, capabilities) from a session-creation response.

    A missing session id yields "" (no live session); a non-object payload
    raises DecodeError.
    """
    if not isinstance(payload, dict):
        raise DecodeError(f"New session response must be a JSON object, got {type(payload).__name__}")

    value = payload.get("value")
    if isinstance(value, dict) and "sessionId" in value:
        session_id = value.get("sessionId")
        caps = value.get("capabilities")
    elif "sessionId" in payload:
        session_id = payload.get("sessionId")
        caps = value if isinstance(value, dict) else payload.get("capabilities")
    else:
        session_id = ""
        caps = value.get("capabilities") if isinstance(value, dict) else payload.get("capabilities")

    if session_id is None:
        session_id = ""
    if not isinstance(session_id, str):
        raise DecodeError(f"sessionId must be a string, got {type(session_id).__name__}")
    if caps is None:
        caps = {}
    if not isinstance(caps, dict):
        raise DecodeError(f"capabilities must be a JSON object, got {type(caps).__name__}")
    return session_id, Capabilities(caps)


def start_session(
    transport: Transport,
    capabilities: Any,
    timeouts: TimeoutConfiguration | None = None,
) -> tuple[str, Capabilities]:
    """Negotiate a new remote session over `transport`.

    If `timeouts` is given it is applied right after creation. Raises
    ProtocolError when the endpoint rejects the capabilities.
    """
    caps = serialize_capabilities(capabilities)
    logger.info("new_session caps=%s", redact_json(caps))
    request: RequestData = NewSession(caps).format_request("")
    payload = transport.execute(request)
    session_id, negotiated = parse_new_session_response(payload)
    if not session_id:
        logger.warning("new_session returned no sessionId; teardown will be skipped")
    else:
        logger.info("new_session id=%s browser=%s %s", session_id, negotiated.browser_name, negotiated.browser_version)

    if timeouts is not None and session_id:
        try:
            transport.execute(SetTimeouts(timeouts).format_request(session_id))
        except Exception:
            # The caller never gets a handle for this session, so release it here.
            try:
                transport.execute(DeleteSession().format_request(session_id))
            except Exception as exc:  # noqa: BLE001
                logger.error("Failed to close session %s after setup error: %s", session_id, exc)
            raise
    return session_id, negotiated


def end_session(session: WebDriverSession) -> None:
    """Delete the remote session held by `session`."""
    logger.info("delete_session id=%s", session.session_id)
    session.execute(DeleteSession())


__all__ = [
    "Capabilities",
    "DesiredCapabilities",
    "end_session",
    "parse_new_session_response",
    "serialize_capabilities",
    "start_session",
]
