"""
Chrome DevTools catalog.

Drives Chromium-based browsers through chromedriver's vendor endpoints:
- fixed commands with typed results (network conditions, cast sinks, apps)
- generic CDP passthrough: any DevTools Protocol method by name, with the
  raw "value" of the response returned undecoded

CDP method reference: https://chromedevtools.github.io/devtools-protocol/

    dev_tools = ChromeDevTools(driver.session)
    dev_tools.execute_cdp("Network.clearBrowserCache")
    version = dev_tools.execute_cdp("Browser.getVersion")
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from ..base import ExtensionCatalog
from .command import (
    ExecuteCdpCommand,
    GetIssueMessage,
    GetNetworkConditions,
    GetSinks,
    LaunchApp,
    SetNetworkConditions,
    SetSinkToUse,
    StartTabMirroring,
    StopCasting,
)
from .network_conditions import NetworkConditions

logger = logging.getLogger("webdriver.chrome")


class ChromeDevTools(ExtensionCatalog):
    def launch_app(self, app_id: str) -> None:
        """Launch the Chrome app with the given id."""
        self.cmd(LaunchApp(app_id))

    def get_network_conditions(self) -> NetworkConditions:
        """Current emulated network conditions. They must have been set first."""
        return NetworkConditions.from_json(self.cmd_value(GetNetworkConditions()))

    def set_network_conditions(self, conditions: NetworkConditions) -> None:
        # Copy so later edits to the caller's object don't leak into the command.
        self.cmd(SetNetworkConditions(dataclasses.replace(conditions)))

    def execute_cdp(self, cmd: str) -> Any:
        """Run a CDP method without parameters."""
        return self.execute_cdp_with_params(cmd, {})

    def execute_cdp_with_params(self, cmd: str, params: dict[str, Any] | None = None) -> Any:
        """Run a CDP method and return its result ("value") as raw JSON."""
        if not isinstance(cmd, str) or not cmd.strip():
            raise ValueError("cmd must be a non-empty CDP method name like 'Browser.getVersion'")
        logger.debug("cdp %s", cmd)
        return self.cmd_value(ExecuteCdpCommand(cmd, dict(params or {})))

    def get_sinks(self) -> Any:
        """Sinks (receivers) available for casting."""
        return self.cmd_value(GetSinks())

    def get_issue_message(self) -> Any:
        return self.cmd_value(GetIssueMessage())

    def set_sink_to_use(self, sink_name: str) -> None:
        self.cmd(SetSinkToUse(sink_name))

    def start_tab_mirroring(self, sink_name: str) -> None:
        self.cmd(StartTabMirroring(sink_name))

    def stop_casting(self, sink_name: str) -> None:
        self.cmd(StopCasting(sink_name))


__all__ = ["ChromeDevTools"]
