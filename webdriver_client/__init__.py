"""Synchronous WebDriver client.

Public surface:
- WebDriver / GenericWebDriver: session lifecycle + typed commands
- WebDriverSession: the execute(command) choke point shared with extensions
- command: Command variants and RequestData
- errors: TransportError / ProtocolError / DecodeError
- extensions.chrome: Chromium vendor commands (CDP passthrough, network conditions, cast)
"""

from __future__ import annotations

__version__ = "0.1.0"

from .command import Command, ExtensionCommand, RequestData, TimeoutConfiguration
from .config import DriverConfig
from .driver import GenericWebDriver, WebDriver, WebDriverCommands
from .errors import DecodeError, ProtocolError, TransportError, WebDriverError
from .http_client import Transport, UrllibTransport
from .lifecycle import Capabilities, DesiredCapabilities, end_session, start_session
from .session import WebDriverSession

__all__ = [
    "Capabilities",
    "Command",
    "DecodeError",
    "DesiredCapabilities",
    "DriverConfig",
    "ExtensionCommand",
    "GenericWebDriver",
    "ProtocolError",
    "RequestData",
    "TimeoutConfiguration",
    "Transport",
    "TransportError",
    "UrllibTransport",
    "WebDriver",
    "WebDriverCommands",
    "WebDriverError",
    "WebDriverSession",
    "__version__",
    "end_session",
    "start_session",
]
