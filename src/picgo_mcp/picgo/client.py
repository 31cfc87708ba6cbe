"""
PicGo HTTP client.

Design goals:
- No extra dependency (use stdlib urllib)
- Async-friendly: the blocking POST runs in a worker thread so one slow upload
  never stalls other MCP requests on the event loop
- Exactly one request per call; no retries

PicGo contract (built-in server, "Server" toggle in PicGo settings):
    POST <upload_url>
    {"list": ["/abs/path/a.png", "/abs/path/b.jpg"]}
    -> {"success": true, "result": ["https://.../a.png", "https://.../b.jpg"]}
    -> {"success": false, "message": "..."}
"""

from __future__ import annotations

import asyncio
import json
import socket
from dataclasses import dataclass
from typing import Any, List, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from src.picgo_mcp.config.settings import Settings, settings as default_settings
from src.picgo_mcp.logging.logger import setup_logger

logger = setup_logger(__name__)


class PicGoTransportError(Exception):
    """
    The request did not complete as a usable HTTP exchange.

    `status`/`body` are set when PicGo did answer (non-2xx or garbage body).
    """

    def __init__(self, message: str, *, status: Optional[int] = None, body: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.body = body


@dataclass(frozen=True)
class PicGoReply:
    status: int
    body: Any


def _decode_body(raw: bytes, *, strict: bool = False) -> Any:
    """
    Parse JSON when possible, otherwise keep the text as-is.

    With strict=True a non-JSON body raises ValueError instead.
    """
    text = raw.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except ValueError:
        if strict:
            raise
        return text


@dataclass(frozen=True)
class PicGoClient:
    """
    Immutable handle on the PicGo upload endpoint.

    Built once at startup and shared by all invocations; nothing on it changes
    per call, so concurrent use is safe.
    """

    upload_url: str
    timeout: Optional[float] = None

    @classmethod
    def from_settings(cls, cfg: Settings = default_settings) -> "PicGoClient":
        return cls(upload_url=cfg.upload_url, timeout=cfg.request_timeout_seconds)

    def _build_request(self, image_paths: List[str]) -> Request:
        body = json.dumps({"list": list(image_paths)}, ensure_ascii=False).encode("utf-8")
        return Request(
            self.upload_url,
            data=body,
            method="POST",
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    def upload(self, image_paths: List[str]) -> PicGoReply:
        """
        POST the paths to PicGo and return the decoded JSON reply.

        This is a blocking function (urllib). Call `aupload` from async code.

        Raises:
            PicGoTransportError: connection failure, timeout, non-2xx status or
                a 2xx reply that is not JSON.
        """
        req = self._build_request(image_paths)
        # socket default when no timeout is configured
        timeout = self.timeout if self.timeout is not None else socket.getdefaulttimeout()

        try:
            with urlopen(req, timeout=timeout) as resp:
                status = resp.status
                raw = resp.read()
        except HTTPError as e:
            # Include response body to help debug PicGo-side errors.
            try:
                err_body = _decode_body(e.read() or b"")
            except OSError:
                err_body = None
            raise PicGoTransportError(
                f"Request failed with status code {e.code}",
                status=e.code,
                body=err_body,
            ) from e
        except URLError as e:
            raise PicGoTransportError(str(e.reason)) from e
        except OSError as e:
            # socket.timeout / ConnectionResetError raised while reading
            raise PicGoTransportError(str(e) or e.__class__.__name__) from e

        try:
            payload = _decode_body(raw, strict=True)
        except ValueError as e:
            raise PicGoTransportError(
                "PicGo returned a response that is not valid JSON",
                status=status,
                body=_decode_body(raw),
            ) from e

        logger.debug("PicGo replied | status=%s | url=%s", status, self.upload_url)
        return PicGoReply(status=status, body=payload)

    async def aupload(self, image_paths: List[str]) -> PicGoReply:
        # Keep it event-loop-safe: run blocking HTTP in a background thread.
        return await asyncio.to_thread(self.upload, list(image_paths))
