"""
WebDriverSession: the single choke point for every remote operation.

The session owns the transport and serializes access to it with a lock, so a
driver and any number of extension catalogs can share one session across
threads without interleaving requests on the connection.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from .command import Command
from .http_client import Transport

logger = logging.getLogger("webdriver.session")


class WebDriverSession:
    def __init__(self, session_id: str, transport: Transport):
        self._session_id = str(session_id or "")
        self._transport = transport
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"WebDriverSession(session_id={self._session_id!r})"

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def request_timeout(self) -> float:
        with self._lock:
            return float(self._transport.request_timeout)

    def execute(self, command: Command) -> Any:
        """Render `command` for this session and send it.

        Returns the raw JSON body unchanged; typed decoding is up to the caller.
        Raises TransportError, ProtocolError or DecodeError.
        """
        request = command.format_request(self._session_id)
        logger.debug("execute %s %s", type(command).__name__, request.path)
        with self._lock:
            return self._transport.execute(request)

    def set_request_timeout(self, timeout: float) -> None:
        """Apply `timeout` (seconds) to every later request."""
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        with self._lock:
            self._transport.set_request_timeout(timeout)

    def close(self) -> None:
        """Release the transport. Does not end the remote session."""
        with self._lock:
            self._transport.close()


__all__ = ["WebDriverSession"]
