from __future__ import annotations

import json
import logging
import socket
import ssl
import urllib.parse
from typing import Any, Protocol
from urllib.error import HTTPError, URLError
from urllib.request import HTTPRedirectHandler, HTTPSHandler, Request, build_opener

from .command import POST, RequestData
from .config import DriverConfig
from .errors import DecodeError, TransportError, build_protocol_error
from .redaction import redact_json

logger = logging.getLogger("webdriver.http")


class Transport(Protocol):
    """What the session layer needs from a transport.

    `execute` returns the decoded JSON body of a success response and raises
    TransportError / ProtocolError / DecodeError otherwise. Implementations do
    not need to be thread-safe: the session serializes access.
    """

    request_timeout: float

    @classmethod
    def create(cls, base_url: str, config: DriverConfig | None = None) -> Transport: ...

    def execute(self, request: RequestData) -> Any: ...

    def set_request_timeout(self, timeout: float) -> None: ...

    def close(self) -> None: ...


class _SafeRedirectHandler(HTTPRedirectHandler):
    def __init__(self, config: DriverConfig) -> None:
        super().__init__()
        self._config = config

    def redirect_request(self, req, fp, code, msg, headers, newurl):  # noqa: ANN001
        # urllib may pass relative URLs here; normalize against the previous URL.
        absolute = urllib.parse.urljoin(req.full_url, str(newurl))
        parsed = urllib.parse.urlparse(absolute)
        if parsed.scheme not in ("http", "https"):
            raise TransportError("Only http/https are supported (redirect)")
        if not self._config.is_host_allowed(parsed.hostname or ""):
            raise TransportError(f"Host {parsed.hostname} is not in allowlist (redirect)")
        return super().redirect_request(req, fp, code, msg, headers, absolute)


def _is_timeout(exc: BaseException) -> bool:
    if isinstance(exc, (TimeoutError, socket.timeout)):
        return True
    reason = getattr(exc, "reason", None)
    if isinstance(reason, (TimeoutError, socket.timeout)):
        return True
    return "timed out" in str(exc).lower()


def _decode_body(raw: bytes) -> Any:
    try:
        text = raw.decode("utf-8").strip()
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Response is not valid UTF-8: {exc}") from exc
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Response is not valid JSON: {exc}") from exc


class UrllibTransport:
    """Blocking JSON-over-HTTP transport built on urllib."""

    def __init__(self, base_url: str, config: DriverConfig | None = None) -> None:
        self.config = config or DriverConfig(remote_url=base_url)
        parsed = urllib.parse.urlparse(base_url)
        if parsed.scheme not in ("http", "https"):
            raise TransportError(f"Only http/https are supported: {base_url!r}")
        if not self.config.is_host_allowed(parsed.hostname or ""):
            raise TransportError(f"Host {parsed.hostname} is not in allowlist")
        self.base_url = base_url.rstrip("/")
        self.request_timeout = float(self.config.request_timeout)
        ctx = ssl.create_default_context()
        self._opener = build_opener(_SafeRedirectHandler(self.config), HTTPSHandler(context=ctx))

    @classmethod
    def create(cls, base_url: str, config: DriverConfig | None = None) -> UrllibTransport:
        return cls(base_url, config)

    def set_request_timeout(self, timeout: float) -> None:
        self.request_timeout = float(timeout)

    def close(self) -> None:
        # urllib opens a fresh connection per request; nothing is pooled.
        return

    def _build_request(self, request: RequestData) -> Request:
        body = request.body
        if body is None and request.method == POST:
            body = {}
        data = None if body is None else json.dumps(body).encode("utf-8")
        headers = {
            "Accept": "application/json",
            "User-Agent": self.config.user_agent,
        }
        if data is not None:
            headers["Content-Type"] = "application/json; charset=utf-8"
        return Request(request.url_for(self.base_url), data=data, headers=headers, method=request.method)

    def _read(self, fp: Any) -> bytes:
        limit = self.config.max_response_bytes
        raw = fp.read(limit + 1)
        if len(raw) > limit:
            raise DecodeError(f"Response exceeds {limit} bytes")
        return raw

    def execute(self, request: RequestData) -> Any:
        req = self._build_request(request)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("-> %s %s %s", request.method, request.path, json.dumps(redact_json(request.body)))
        try:
            with self._opener.open(req, timeout=self.request_timeout) as resp:
                status = resp.status
                raw = self._read(resp)
        except HTTPError as exc:
            status = exc.code
            try:
                raw = self._read(exc)
            finally:
                exc.close()
            try:
                payload = _decode_body(raw)
            except DecodeError:
                payload = raw.decode("utf-8", errors="replace")
            logger.debug("<- %s %s status=%s", request.method, request.path, status)
            raise build_protocol_error(status, payload) from None
        except (TimeoutError, socket.timeout) as exc:
            raise TransportError(f"Request timed out after {self.request_timeout}s", timed_out=True) from exc
        except URLError as exc:
            raise TransportError(str(exc.reason), timed_out=_is_timeout(exc)) from exc
        except OSError as exc:
            raise TransportError(str(exc), timed_out=_is_timeout(exc)) from exc

        logger.debug("<- %s %s status=%s", request.method, request.path, status)
        payload = _decode_body(raw)
        # Legacy JSON Wire endpoints report failures as HTTP 200 + non-zero "status".
        if isinstance(payload, dict):
            legacy_status = payload.get("status")
            if isinstance(legacy_status, int) and not isinstance(legacy_status, bool) and legacy_status != 0:
                raise build_protocol_error(status, payload)
        return payload


__all__ = ["Transport", "UrllibTransport"]
