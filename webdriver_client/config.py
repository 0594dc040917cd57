from __future__ import annotations

import os
from dataclasses import dataclass, field

from . import __version__

DEFAULT_REMOTE_URL = "http://localhost:4444"
DEFAULT_REQUEST_TIMEOUT = 120.0
DEFAULT_MAX_RESPONSE_BYTES = 50_000_000


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name) or default)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name) or default)
    except ValueError:
        return default


@dataclass
class DriverConfig:
    remote_url: str = DEFAULT_REMOTE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_response_bytes: int = DEFAULT_MAX_RESPONSE_BYTES
    user_agent: str = f"webdriver-client/{__version__}"
    allow_hosts: list[str] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> DriverConfig:
        remote_url = (os.environ.get("WEBDRIVER_URL") or DEFAULT_REMOTE_URL).strip()
        timeout = _env_float("WEBDRIVER_HTTP_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)
        max_bytes = _env_int("WEBDRIVER_HTTP_MAX_BYTES", DEFAULT_MAX_RESPONSE_BYTES)
        user_agent = os.environ.get("WEBDRIVER_USER_AGENT") or f"webdriver-client/{__version__}"
        allow_raw = os.environ.get("WEBDRIVER_ALLOW_HOSTS", "")
        allow_hosts = [host.strip().lower() for host in allow_raw.split(",") if host.strip() and host.strip() != "*"]
        return cls(
            remote_url=remote_url,
            request_timeout=max(0.1, timeout),
            max_response_bytes=max(1, max_bytes),
            user_agent=user_agent,
            allow_hosts=allow_hosts,
        )

    def is_host_allowed(self, host: str) -> bool:
        host = (host or "").strip().lower().rstrip(".")
        if not self.allow_hosts:
            return True
        for raw_allowed in self.allow_hosts:
            allowed = (raw_allowed or "").strip().lower().lstrip(".").rstrip(".")
            if not allowed:
                continue
            if host == allowed:
                return True
            if host.endswith("." + allowed):
                return True
        return False


__all__ = ["DEFAULT_MAX_RESPONSE_BYTES", "DEFAULT_REMOTE_URL", "DEFAULT_REQUEST_TIMEOUT", "DriverConfig"]
