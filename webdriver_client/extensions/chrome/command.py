"""Chromium vendor endpoints, as Command variants."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...command import GET, POST, Command, RequestData, session_path
from .network_conditions import NetworkConditions


class ChromeCommand(Command):
    """Marker base for Chromium-only commands."""


@dataclass(frozen=True)
class LaunchApp(ChromeCommand):
    app_id: str

    def format_request(self, session_id: str) -> RequestData:
        return RequestData(POST, session_path(session_id, "chromium/launch_app"), {"id": self.app_id})


@dataclass(frozen=True)
class GetNetworkConditions(ChromeCommand):
    def format_request(self, session_id: str) -> RequestData:
        return RequestData(GET, session_path(session_id, "chromium/network_conditions"))


@dataclass(frozen=True)
class SetNetworkConditions(ChromeCommand):
    conditions: NetworkConditions

    def format_request(self, session_id: str) -> RequestData:
        body = {"network_conditions": self.conditions.to_json()}
        return RequestData(POST, session_path(session_id, "chromium/network_conditions"), body)


@dataclass(frozen=True)
class ExecuteCdpCommand(ChromeCommand):
    """Raw Chrome DevTools Protocol call, e.g. cmd="Browser.getVersion"."""

    cmd: str
    params: dict[str, Any] = field(default_factory=dict)

    def format_request(self, session_id: str) -> RequestData:
        body = {"cmd": self.cmd, "params": dict(self.params)}
        return RequestData(POST, session_path(session_id, "goog/cdp/execute"), body)


@dataclass(frozen=True)
class GetSinks(ChromeCommand):
    def format_request(self, session_id: str) -> RequestData:
        return RequestData(GET, session_path(session_id, "goog/cast/get_sinks"))


@dataclass(frozen=True)
class GetIssueMessage(ChromeCommand):
    def format_request(self, session_id: str) -> RequestData:
        return RequestData(GET, session_path(session_id, "goog/cast/get_issue_message"))


@dataclass(frozen=True)
class SetSinkToUse(ChromeCommand):
    sink_name: str

    def format_request(self, session_id: str) -> RequestData:
        return RequestData(POST, session_path(session_id, "goog/cast/set_sink_to_use"), {"sinkName": self.sink_name})


@dataclass(frozen=True)
class StartTabMirroring(ChromeCommand):
    sink_name: str

    def format_request(self, session_id: str) -> RequestData:
        path = session_path(session_id, "goog/cast/start_tab_mirroring")
        return RequestData(POST, path, {"sinkName": self.sink_name})


@dataclass(frozen=True)
class StopCasting(ChromeCommand):
    sink_name: str

    def format_request(self, session_id: str) -> RequestData:
        return RequestData(POST, session_path(session_id, "goog/cast/stop_casting"), {"sinkName": self.sink_name})


__all__ = [
    "ChromeCommand",
    "ExecuteCdpCommand",
    "GetIssueMessage",
    "GetNetworkConditions",
    "GetSinks",
    "LaunchApp",
    "SetNetworkConditions",
    "SetSinkToUse",
    "StartTabMirroring",
    "StopCasting",
]
