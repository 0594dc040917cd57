"""Chromium vendor extension: DevTools passthrough, network emulation, cast."""

from __future__ import annotations

from .command import ChromeCommand, ExecuteCdpCommand
from .devtools import ChromeDevTools
from .network_conditions import NetworkConditions

__all__ = ["ChromeCommand", "ChromeDevTools", "ExecuteCdpCommand", "NetworkConditions"]
