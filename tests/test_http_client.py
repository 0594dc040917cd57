from __future__ import annotations

import json
import socket
import time
from contextlib import closing, contextmanager
from http.server import BaseHTTPRequestHandler, HTTPServer
from threading import Thread
from typing import Any

import pytest

from webdriver_client.command import DeleteSession, ExecuteScript, GetTitle, NewSession, Refresh, RequestData
from webdriver_client.config import DriverConfig
from webdriver_client.errors import DecodeError, ProtocolError, TransportError
from webdriver_client.extensions.chrome.command import ExecuteCdpCommand
from webdriver_client.http_client import UrllibTransport
from webdriver_client.session import WebDriverSession

# Each entry: (status, raw body bytes, delay seconds)
Route = tuple[int, bytes, float]


def _free_port() -> int:
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@contextmanager
def _webdriver_server(routes: dict[tuple[str, str], Route]):
    seen: list[dict[str, Any]] = []

    class Handler(BaseHTTPRequestHandler):
        def _handle(self) -> None:
            length = int(self.headers.get("Content-Length") or 0)
            raw = self.rfile.read(length) if length else b""
            seen.append(
                {
                    "method": self.command,
                    "path": self.path,
                    "body": json.loads(raw) if raw else None,
                    "content_type": self.headers.get("Content-Type"),
                }
            )
            status, body, delay = routes.get((self.command, self.path), (404, b'{"value": {"error": "unknown command", "message": ""}}', 0.0))
            if delay:
                time.sleep(delay)
            try:
                self.send_response(status)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)
            except (BrokenPipeError, ConnectionResetError):
                return

        def do_GET(self) -> None:  # noqa: N802
            self._handle()

        def do_POST(self) -> None:  # noqa: N802
            self._handle()

        def do_DELETE(self) -> None:  # noqa: N802
            self._handle()

        def log_message(self, format: str, *args: object) -> None:  # noqa: A003
            return

    port = _free_port()
    server = HTTPServer(("127.0.0.1", port), Handler)
    thread = Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{port}", seen
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=1)


def _json(obj: Any) -> bytes:
    return json.dumps(obj).encode("utf-8")


def test_success_returns_decoded_json() -> None:
    routes = {("GET", "/session/s1/title"): (200, _json({"value": "Example Domain"}), 0.0)}
    with _webdriver_server(routes) as (url, seen):
        transport = UrllibTransport.create(url)
        assert transport.execute(GetTitle().format_request("s1")) == {"value": "Example Domain"}
        assert seen[0]["method"] == "GET"
        assert seen[0]["body"] is None


def test_base_path_prefix_is_kept() -> None:
    routes = {("DELETE", "/wd/hub/session/s1"): (200, _json({"value": None}), 0.0)}
    with _webdriver_server(routes) as (url, seen):
        transport = UrllibTransport.create(url + "/wd/hub/")
        assert transport.execute(DeleteSession().format_request("s1")) == {"value": None}
        assert seen[0]["path"] == "/wd/hub/session/s1"


def test_post_sends_json_body() -> None:
    routes = {
        ("POST", "/session"): (200, _json({"value": {"sessionId": "s1", "capabilities": {}}}), 0.0),
        ("POST", "/session/s1/refresh"): (200, _json({"value": None}), 0.0),
        ("POST", "/session/s1/execute/sync"): (200, _json({"value": 2}), 0.0),
    }
    with _webdriver_server(routes) as (url, seen):
        transport = UrllibTransport.create(url)
        transport.execute(NewSession({"browserName": "chrome"}).format_request(""))
        transport.execute(Refresh().format_request("s1"))
        transport.execute(RequestData("POST", "/session/s1/execute/sync"))
        assert seen[0]["body"]["desiredCapabilities"] == {"browserName": "chrome"}
        assert seen[0]["content_type"].startswith("application/json")
        assert seen[1]["body"] == {}
        # POST without a body still sends an empty JSON object.
        assert seen[2]["body"] == {}


def test_error_object_becomes_protocol_error() -> None:
    body = _json({"value": {"error": "no such window", "message": "target window already closed"}})
    routes = {("POST", "/session/s1/execute/sync"): (404, body, 0.0)}
    with _webdriver_server(routes) as (url, _):
        session = WebDriverSession("s1", UrllibTransport.create(url))
        with pytest.raises(ProtocolError) as exc:
            session.execute(ExecuteScript("return 1;"))
        assert exc.value.code == "no such window"
        assert exc.value.status == 404
        assert "already closed" in exc.value.message


def test_legacy_status_in_success_response_is_protocol_error() -> None:
    routes = {("GET", "/session/s1/title"): (200, _json({"sessionId": "s1", "status": 23, "value": {"message": "gone"}}), 0.0)}
    with _webdriver_server(routes) as (url, _):
        with pytest.raises(ProtocolError) as exc:
            UrllibTransport.create(url).execute(GetTitle().format_request("s1"))
        assert exc.value.code == "no such window"


def test_invalid_json_is_decode_error() -> None:
    routes = {("GET", "/session/s1/title"): (200, b"<html>not json</html>", 0.0)}
    with _webdriver_server(routes) as (url, _):
        with pytest.raises(DecodeError):
            UrllibTransport.create(url).execute(GetTitle().format_request("s1"))


def test_oversized_response_is_decode_error() -> None:
    routes = {("GET", "/session/s1/title"): (200, _json({"value": "x" * 500}), 0.0)}
    with _webdriver_server(routes) as (url, _):
        cfg = DriverConfig(remote_url=url, max_response_bytes=100)
        with pytest.raises(DecodeError):
            UrllibTransport.create(url, cfg).execute(GetTitle().format_request("s1"))


def test_timeout_is_transport_error_and_not_retried() -> None:
    routes = {("POST", "/session/s1/goog/cdp/execute"): (200, _json({"value": {}}), 1.0)}
    with _webdriver_server(routes) as (url, seen):
        session = WebDriverSession("s1", UrllibTransport.create(url))
        session.set_request_timeout(0.2)
        with pytest.raises(TransportError) as exc:
            session.execute(ExecuteCdpCommand("Browser.getVersion"))
        assert exc.value.timed_out is True
        time.sleep(1.0)
        assert len(seen) == 1


def test_connection_refused_is_transport_error() -> None:
    url = f"http://127.0.0.1:{_free_port()}"
    with pytest.raises(TransportError) as exc:
        UrllibTransport.create(url).execute(GetTitle().format_request("s1"))
    assert exc.value.timed_out is False


def test_create_rejects_bad_scheme_and_disallowed_host() -> None:
    with pytest.raises(TransportError):
        UrllibTransport.create("ftp://localhost:4444")
    cfg = DriverConfig(allow_hosts=["grid.internal"])
    with pytest.raises(TransportError):
        UrllibTransport.create("http://127.0.0.1:4444", cfg)


def test_invalid_utf8_is_decode_error() -> None:
    routes = {("GET", "/session/s1/title"): (200, b'{"value": "caf\xe9"}', 0.0)}
    with _webdriver_server(routes) as (url, _):
        with pytest.raises(DecodeError):
            UrllibTransport.create(url).execute(GetTitle().format_request("s1"))
