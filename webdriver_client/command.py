"""
Command model.

Every remote operation is a small frozen dataclass that knows how to render
itself into a RequestData (HTTP method, path, optional JSON body) for a given
session id. Rendering is a pure function of the command's own fields plus the
session id; it never touches the session or the transport.

Adding a remote command means adding one Command subclass with a
`format_request`. Commands the core does not model can go through
ExtensionCommand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

GET = "GET"
POST = "POST"
DELETE = "DELETE"


@dataclass(frozen=True)
class RequestData:
    method: str
    path: str
    body: Any = None

    def url_for(self, base_url: str) -> str:
        return base_url.rstrip("/") + "/" + self.path.lstrip("/")


def session_path(session_id: str, *segments: str) -> str:
    """Build /session/{id}/seg/... with every segment percent-encoded."""
    parts = ["session", quote(str(session_id), safe="")]
    for seg in segments:
        parts.extend(quote(piece, safe="") for piece in str(seg).strip("/").split("/") if piece)
    return "/" + "/".join(parts)


class Command:
    """Base class for all remote commands."""

    def format_request(self, session_id: str) -> RequestData:
        raise NotImplementedError


@dataclass(frozen=True)
class TimeoutConfiguration:
    """Session timeouts in seconds. None means "leave unchanged"."""

    script: float | None = None
    page_load: float | None = None
    implicit: float | None = None

    def to_json(self) -> dict[str, int]:
        out: dict[str, int] = {}
        if self.script is not None:
            out["script"] = int(self.script * 1000)
        if self.page_load is not None:
            out["pageLoad"] = int(self.page_load * 1000)
        if self.implicit is not None:
            out["implicit"] = int(self.implicit * 1000)
        return out

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> TimeoutConfiguration:
        def _seconds(key: str) -> float | None:
            raw = data.get(key)
            if raw is None:
                return None
            return float(raw) / 1000.0

        return cls(script=_seconds("script"), page_load=_seconds("pageLoad"), implicit=_seconds("implicit"))


# Session lifecycle


@dataclass(frozen=True)
class NewSession(Command):
    capabilities: dict[str, Any] = field(default_factory=dict)

    def format_request(self, session_id: str) -> RequestData:  # noqa: ARG002
        # W3C endpoints read "capabilities", legacy JSON Wire endpoints read "desiredCapabilities".
        body = {
            "capabilities": {"alwaysMatch": self.capabilities},
            "desiredCapabilities": self.capabilities,
        }
        return RequestData(POST, "/session", body)


@dataclass(frozen=True)
class DeleteSession(Command):
    def format_request(self, session_id: str) -> RequestData:
        return RequestData(DELETE, session_path(session_id))


@dataclass(frozen=True)
class Status(Command):
    def format_request(self, session_id: str) -> RequestData:  # noqa: ARG002
        return RequestData(GET, "/status")


@dataclass(frozen=True)
class GetTimeouts(Command):
    def format_request(self, session_id: str) -> RequestData:
        return RequestData(GET, session_path(session_id, "timeouts"))


@dataclass(frozen=True)
class SetTimeouts(Command):
    timeouts: TimeoutConfiguration = field(default_factory=TimeoutConfiguration)

    def format_request(self, session_id: str) -> RequestData:
        return RequestData(POST, session_path(session_id, "timeouts"), self.timeouts.to_json())


# Navigation


@dataclass(frozen=True)
class NavigateTo(Command):
    url: str

    def format_request(self, session_id: str) -> RequestData:
        return RequestData(POST, session_path(session_id, "url"), {"url": self.url})


@dataclass(frozen=True)
class GetCurrentUrl(Command):
    def format_request(self, session_id: str) -> RequestData:
        return RequestData(GET, session_path(session_id, "url"))


@dataclass(frozen=True)
class Back(Command):
    def format_request(self, session_id: str) -> RequestData:
        return RequestData(POST, session_path(session_id, "back"), {})


@dataclass(frozen=True)
class Forward(Command):
    def format_request(self, session_id: str) -> RequestData:
        return RequestData(POST, session_path(session_id, "forward"), {})


@dataclass(frozen=True)
class Refresh(Command):
    def format_request(self, session_id: str) -> RequestData:
        return RequestData(POST, session_path(session_id, "refresh"), {})


@dataclass(frozen=True)
class GetTitle(Command):
    def format_request(self, session_id: str) -> RequestData:
        return RequestData(GET, session_path(session_id, "title"))


# Windows


@dataclass(frozen=True)
class GetWindowHandle(Command):
    def format_request(self, session_id: str) -> RequestData:
        return RequestData(GET, session_path(session_id, "window"))


@dataclass(frozen=True)
class GetWindowHandles(Command):
    def format_request(self, session_id: str) -> RequestData:
        return RequestData(GET, session_path(session_id, "window", "handles"))


@dataclass(frozen=True)
class CloseWindow(Command):
    def format_request(self, session_id: str) -> RequestData:
        return RequestData(DELETE, session_path(session_id, "window"))


# Document


@dataclass(frozen=True)
class GetPageSource(Command):
    def format_request(self, session_id: str) -> RequestData:
        return RequestData(GET, session_path(session_id, "source"))


@dataclass(frozen=True)
class ExecuteScript(Command):
    script: str
    args: tuple[Any, ...] = ()

    def format_request(self, session_id: str) -> RequestData:
        body = {"script": self.script, "args": list(self.args)}
        return RequestData(POST, session_path(session_id, "execute", "sync"), body)


@dataclass(frozen=True)
class ExecuteAsyncScript(Command):
    script: str
    args: tuple[Any, ...] = ()

    def format_request(self, session_id: str) -> RequestData:
        body = {"script": self.script, "args": list(self.args)}
        return RequestData(POST, session_path(session_id, "execute", "async"), body)


@dataclass(frozen=True)
class TakeScreenshot(Command):
    def format_request(self, session_id: str) -> RequestData:
        return RequestData(GET, session_path(session_id, "screenshot"))


# Passthrough


@dataclass(frozen=True)
class ExtensionCommand(Command):
    """Any session-scoped endpoint the core does not model.

    `endpoint` is relative to /session/{id}/, e.g. "moz/context".
    """

    method: str
    endpoint: str
    body: Any = None

    def format_request(self, session_id: str) -> RequestData:
        return RequestData(self.method.upper(), session_path(session_id, self.endpoint), self.body)


__all__ = [
    "DELETE",
    "GET",
    "POST",
    "Back",
    "CloseWindow",
    "Command",
    "DeleteSession",
    "ExecuteAsyncScript",
    "ExecuteScript",
    "ExtensionCommand",
    "Forward",
    "GetCurrentUrl",
    "GetPageSource",
    "GetTimeouts",
    "GetTitle",
    "GetWindowHandle",
    "GetWindowHandles",
    "NavigateTo",
    "NewSession",
    "Refresh",
    "RequestData",
    "SetTimeouts",
    "Status",
    "TakeScreenshot",
    "TimeoutConfiguration",
    "session_path",
]
