"""
WebDriver: a browser session with guaranteed cleanup.

GenericWebDriver binds the session/command core to a transport class.
WebDriver is the ready-to-use binding for the urllib transport.

Use as context manager for deterministic teardown:

    with WebDriver("http://localhost:4444", DesiredCapabilities.chrome()) as driver:
        driver.get("https://example.com")

If the caller never calls quit() and never leaves a `with` block, the remote
session is still deleted when the driver is garbage-collected.
"""

from __future__ import annotations

import base64
import binascii
import logging
import threading
from typing import Any, ClassVar

from .command import (
    Back,
    CloseWindow,
    Command,
    ExecuteAsyncScript,
    ExecuteScript,
    Forward,
    GetCurrentUrl,
    GetPageSource,
    GetTimeouts,
    GetTitle,
    GetWindowHandle,
    GetWindowHandles,
    NavigateTo,
    Refresh,
    SetTimeouts,
    Status,
    TakeScreenshot,
    TimeoutConfiguration,
)
from .config import DriverConfig
from .errors import DecodeError
from .http_client import Transport, UrllibTransport
from .lifecycle import Capabilities, end_session, start_session
from .session import WebDriverSession

logger = logging.getLogger("webdriver.driver")


def unwrap_value(response: Any) -> Any:
    """Return the "value" member of a command response."""
    if isinstance(response, dict) and "value" in response:
        return response["value"]
    if response is None:
        return None
    raise DecodeError("Response has no 'value' member")


def _expect(value: Any, kind: type | tuple[type, ...], what: str) -> Any:
    if not isinstance(value, kind):
        raise DecodeError(f"{what}: unexpected {type(value).__name__} in response")
    return value


class WebDriverCommands:
    """Typed command methods shared by anything that owns a session."""

    @property
    def session(self) -> WebDriverSession:
        raise NotImplementedError

    def cmd(self, command: Command) -> Any:
        return self.session.execute(command)

    def execute(self, command: Command) -> Any:
        """Send an arbitrary command and return the raw JSON response."""
        return self.cmd(command)

    def status(self) -> dict[str, Any]:
        return _expect(unwrap_value(self.cmd(Status())), dict, "status")

    def get(self, url: str) -> None:
        self.cmd(NavigateTo(url))

    def current_url(self) -> str:
        return _expect(unwrap_value(self.cmd(GetCurrentUrl())), str, "current_url")

    def title(self) -> str:
        return _expect(unwrap_value(self.cmd(GetTitle())), str, "title")

    def back(self) -> None:
        self.cmd(Back())

    def forward(self) -> None:
        self.cmd(Forward())

    def refresh(self) -> None:
        self.cmd(Refresh())

    def window_handle(self) -> str:
        return _expect(unwrap_value(self.cmd(GetWindowHandle())), str, "window_handle")

    def window_handles(self) -> list[str]:
        handles = _expect(unwrap_value(self.cmd(GetWindowHandles())), list, "window_handles")
        return [_expect(h, str, "window_handles") for h in handles]

    def close_window(self) -> None:
        self.cmd(CloseWindow())

    def page_source(self) -> str:
        return _expect(unwrap_value(self.cmd(GetPageSource())), str, "page_source")

    def execute_script(self, script: str, *args: Any) -> Any:
        return unwrap_value(self.cmd(ExecuteScript(script, tuple(args))))

    def execute_async_script(self, script: str, *args: Any) -> Any:
        return unwrap_value(self.cmd(ExecuteAsyncScript(script, tuple(args))))

    def screenshot_as_png(self) -> bytes:
        encoded = _expect(unwrap_value(self.cmd(TakeScreenshot())), str, "screenshot")
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise DecodeError(f"screenshot: invalid base64: {exc}") from exc

    def get_timeouts(self) -> TimeoutConfiguration:
        data = _expect(unwrap_value(self.cmd(GetTimeouts())), dict, "timeouts")
        try:
            return TimeoutConfiguration.from_json(data)
        except (TypeError, ValueError) as exc:
            raise DecodeError(f"timeouts: {exc}") from exc

    def set_timeouts(self, timeouts: TimeoutConfiguration) -> None:
        self.cmd(SetTimeouts(timeouts))


class GenericWebDriver(WebDriverCommands):
    """A remote browser session bound to `transport_class`.

    Not normally used directly: subclass it with a concrete transport_class,
    or use WebDriver.
    """

    transport_class: ClassVar[type[Transport]]

    def __init__(
        self,
        remote_url: str,
        capabilities: Any,
        *,
        config: DriverConfig | None = None,
        request_timeout: float | None = None,
        timeouts: TimeoutConfiguration | None = None,
    ):
        self.quit_on_teardown = False
        self._teardown_lock = threading.Lock()
        transport = self.transport_class.create(remote_url, config)
        try:
            if request_timeout is not None:
                transport.set_request_timeout(request_timeout)
            session_id, negotiated = start_session(transport, capabilities, timeouts)
        except BaseException:
            transport.close()
            raise
        self._session = WebDriverSession(session_id, transport)
        self._capabilities = negotiated
        self.quit_on_teardown = True

    @classmethod
    def from_env(cls, capabilities: Any, config: DriverConfig | None = None, **kwargs: Any) -> GenericWebDriver:
        """Create a driver for the endpoint configured via WEBDRIVER_* env vars."""
        config = config or DriverConfig.from_env()
        return cls(config.remote_url, capabilities, config=config, **kwargs)

    def __repr__(self) -> str:
        session = getattr(self, "_session", None)
        sid = session.session_id if session is not None else ""
        return f"{type(self).__name__}(session_id={sid!r})"

    def __enter__(self) -> GenericWebDriver:
        return self

    def __exit__(self, *args: Any) -> None:
        self._teardown()

    def __del__(self) -> None:
        self._teardown()

    @property
    def session(self) -> WebDriverSession:
        return self._session

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities

    def set_request_timeout(self, timeout: float) -> None:
        self._session.set_request_timeout(timeout)

    def quit(self) -> None:
        """End the remote session.

        Automatic teardown is disabled even if the delete fails: the error is
        raised here and the remote end is left to expire the session itself.
        """
        session = self._claim_teardown()
        if session is None:
            return
        try:
            if session.session_id:
                end_session(session)
        finally:
            session.close()

    def _claim_teardown(self) -> WebDriverSession | None:
        """Clear quit_on_teardown; return the session only for the first caller."""
        lock = getattr(self, "_teardown_lock", None)
        if lock is None:
            return None
        with lock:
            if not self.quit_on_teardown:
                return None
            self.quit_on_teardown = False
            return getattr(self, "_session", None)

    def _teardown(self) -> None:
        # Called from __exit__/__del__: there is no caller left to receive errors.
        session = self._claim_teardown()
        if session is None:
            return
        try:
            if session.session_id:
                end_session(session)
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to close session %s: %s", session.session_id, exc)
        finally:
            try:
                session.close()
            except Exception as exc:  # noqa: BLE001
                logger.error("Failed to release transport for session %s: %s", session.session_id, exc)


class WebDriver(GenericWebDriver):
    """GenericWebDriver over the built-in urllib transport."""

    transport_class = UrllibTransport


__all__ = ["GenericWebDriver", "WebDriver", "WebDriverCommands", "unwrap_value"]
