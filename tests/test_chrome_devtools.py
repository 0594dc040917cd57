from __future__ import annotations

from typing import Any

import pytest

from webdriver_client.command import RequestData
from webdriver_client.errors import DecodeError, ProtocolError
from webdriver_client.extensions.chrome import ChromeDevTools, NetworkConditions
from webdriver_client.session import WebDriverSession


class FakeChromedriver:
    """Keeps network conditions like chromedriver does for one session."""

    def __init__(self) -> None:
        self.calls: list[RequestData] = []
        self.request_timeout = 120.0
        self.conditions: dict[str, Any] | None = None

    def execute(self, request: RequestData) -> Any:
        self.calls.append(request)
        if request.path.endswith("/chromium/network_conditions"):
            if request.method == "POST":
                self.conditions = dict(request.body["network_conditions"])
                return {"value": None}
            if self.conditions is None:
                raise ProtocolError("unknown error", "network conditions must be set before it can be retrieved")
            return {"value": dict(self.conditions)}
        if request.path.endswith("/goog/cdp/execute"):
            if request.body["cmd"] == "Browser.getVersion":
                return {"value": {"product": "Chrome/120.0", "userAgent": "Mozilla/5.0 HeadlessChrome"}}
            return {"value": {}}
        if request.path.endswith("/goog/cast/get_sinks"):
            return {"value": [{"name": "tv", "id": "1"}]}
        if request.path.endswith("/goog/cast/get_issue_message"):
            return {"value": ""}
        return {"value": None}

    def set_request_timeout(self, timeout: float) -> None:
        self.request_timeout = timeout

    def close(self) -> None:
        return


@pytest.fixture()
def fake() -> FakeChromedriver:
    return FakeChromedriver()


@pytest.fixture()
def dev_tools(fake: FakeChromedriver) -> ChromeDevTools:
    return ChromeDevTools(WebDriverSession("s1", fake))


def test_network_conditions_round_trip(dev_tools: ChromeDevTools) -> None:
    conditions = NetworkConditions()
    conditions.download_throughput = 20
    conditions.upload_throughput = 10
    conditions.offline = False
    conditions.latency = 200
    dev_tools.set_network_conditions(conditions)

    out = dev_tools.get_network_conditions()
    assert out.download_throughput == 20
    assert out.upload_throughput == 10
    assert out.offline is False
    assert out.latency == 200
    assert out == conditions


def test_get_network_conditions_before_set_is_protocol_error(dev_tools: ChromeDevTools) -> None:
    with pytest.raises(ProtocolError):
        dev_tools.get_network_conditions()


def test_set_network_conditions_snapshots_argument(dev_tools: ChromeDevTools, fake: FakeChromedriver) -> None:
    conditions = NetworkConditions(latency=5)
    dev_tools.set_network_conditions(conditions)
    conditions.latency = 999
    assert fake.conditions is not None and fake.conditions["latency"] == 5


def test_execute_cdp_without_params(dev_tools: ChromeDevTools, fake: FakeChromedriver) -> None:
    version = dev_tools.execute_cdp("Browser.getVersion")
    assert version["userAgent"].startswith("Mozilla/5.0")
    assert fake.calls[-1] == RequestData(
        "POST", "/session/s1/goog/cdp/execute", {"cmd": "Browser.getVersion", "params": {}}
    )


def test_execute_cdp_with_params(dev_tools: ChromeDevTools, fake: FakeChromedriver) -> None:
    assert dev_tools.execute_cdp_with_params("Network.setCacheDisabled", {"cacheDisabled": True}) == {}
    assert fake.calls[-1].body == {"cmd": "Network.setCacheDisabled", "params": {"cacheDisabled": True}}


def test_execute_cdp_rejects_empty_name(dev_tools: ChromeDevTools, fake: FakeChromedriver) -> None:
    with pytest.raises(ValueError):
        dev_tools.execute_cdp("  ")
    assert fake.calls == []


def test_cast_commands(dev_tools: ChromeDevTools, fake: FakeChromedriver) -> None:
    assert dev_tools.get_sinks() == [{"name": "tv", "id": "1"}]
    assert dev_tools.get_issue_message() == ""
    dev_tools.set_sink_to_use("tv")
    dev_tools.start_tab_mirroring("tv")
    dev_tools.stop_casting("tv")
    dev_tools.launch_app("app-1")
    paths = [c.path for c in fake.calls]
    assert paths[-4:] == [
        "/session/s1/goog/cast/set_sink_to_use",
        "/session/s1/goog/cast/start_tab_mirroring",
        "/session/s1/goog/cast/stop_casting",
        "/session/s1/chromium/launch_app",
    ]


def test_network_conditions_decode_errors() -> None:
    with pytest.raises(DecodeError):
        NetworkConditions.from_json(None)
    with pytest.raises(DecodeError):
        NetworkConditions.from_json({"latency": "slow"})
    with pytest.raises(DecodeError):
        NetworkConditions.from_json({"offline": "no"})
    assert NetworkConditions.from_json({}) == NetworkConditions()


def test_response_without_value_is_decode_error() -> None:
    class NoValue(FakeChromedriver):
        def execute(self, request: RequestData) -> Any:
            return {"unexpected": True}

    with pytest.raises(DecodeError):
        ChromeDevTools(WebDriverSession("s1", NoValue())).execute_cdp("Browser.getVersion")
