"""
Shared fixtures.

- image_files: real files on disk (the path checker looks at the filesystem)
- picgo_stub: a real local HTTP server speaking PicGo's /upload contract
- refused_url: a loopback URL where nothing listens
"""

from __future__ import annotations

import json
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable, List, Tuple

import pytest


Responder = Callable[[Any], Tuple[int, Any]]


class _PicGoStubHandler(BaseHTTPRequestHandler):
    def do_POST(self) -> None:
        length = int(self.headers.get("Content-Length") or 0)
        raw = self.rfile.read(length)
        body = json.loads(raw.decode("utf-8"))
        self.server.requests.append(
            {"path": self.path, "content_type": self.headers.get("Content-Type"), "body": body}
        )

        status, payload = self.server.responder(body)
        data = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")

        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def log_message(self, format: str, *args: Any) -> None:
        pass


class PicGoStub:
    def __init__(self, httpd: ThreadingHTTPServer):
        self._httpd = httpd
        host, port = httpd.server_address[:2]
        self.url = f"http://{host}:{port}/upload"

    @property
    def requests(self) -> List[dict]:
        return self._httpd.requests

    def respond_with(self, responder: Responder) -> None:
        self._httpd.responder = responder


@pytest.fixture
def picgo_stub():
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), _PicGoStubHandler)
    httpd.daemon_threads = True
    httpd.requests = []
    httpd.responder = lambda body: (200, {"success": True, "result": []})

    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield PicGoStub(httpd)
    finally:
        httpd.shutdown()
        httpd.server_close()
        thread.join(timeout=5)


@pytest.fixture
def refused_url() -> str:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"http://127.0.0.1:{port}/upload"


@pytest.fixture
def image_files(tmp_path) -> List[str]:
    paths = []
    for name in ("cat.png", "dog.jpg", "bird.gif"):
        p = tmp_path / name
        p.write_bytes(b"\x89PNG fake image bytes")
        paths.append(str(p))
    return paths
