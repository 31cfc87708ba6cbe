"""
Upload outcome contract.

Every upload invocation ends in exactly one of:
- Succeeded:        PicGo answered success=true; payload is what we show the caller
- LogicalFailure:   PicGo answered, but success is false/missing
- TransportFailure: PicGo could not be reached, or answered with garbage / non-2xx

All three are returned to the MCP caller as a normal CallToolResult with text
content. Only the failures set isError, so the caller can render the detail
instead of treating it as a protocol fault.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

from mcp import types

from src.picgo_mcp.picgo.client import PicGoReply, PicGoTransportError
from src.picgo_mcp.logging.logger import setup_logger

logger = setup_logger(__name__)

UNREACHABLE_HINT = "Is PicGo running and its server enabled?"


def _pretty(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def _text_result(text: str, *, is_error: bool) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


@dataclass(frozen=True)
class Succeeded:
    payload: Any

    is_error = False

    def to_call_tool_result(self) -> types.CallToolResult:
        return _text_result(_pretty(self.payload), is_error=self.is_error)


@dataclass(frozen=True)
class LogicalFailure:
    detail: str

    is_error = True

    def to_call_tool_result(self) -> types.CallToolResult:
        return _text_result(self.detail, is_error=self.is_error)


@dataclass(frozen=True)
class TransportFailure:
    detail: str

    is_error = True

    def to_call_tool_result(self) -> types.CallToolResult:
        return _text_result(self.detail, is_error=self.is_error)


UploadOutcome = Union[Succeeded, LogicalFailure, TransportFailure]


def normalize_reply(reply: PicGoReply) -> UploadOutcome:
    """
    Classify a completed HTTP exchange.

    Success requires a JSON object with a boolean `success: true`. The payload
    is `result` when PicGo sent one, otherwise the whole body.
    """
    body = reply.body
    if isinstance(body, dict) and body.get("success") is True:
        result = body.get("result")
        payload = result if result is not None else body
        logger.info("PicGo upload succeeded | status=%s", reply.status)
        return Succeeded(payload=payload)

    logger.warning("PicGo upload reported failure | status=%s | body=%s", reply.status, body)
    return LogicalFailure(detail=f"PicGo upload failed: {_pretty(body)}")


def describe_transport_error(exc: PicGoTransportError) -> TransportFailure:
    detail = f"PicGo server request error: {exc.message}. {UNREACHABLE_HINT}"
    if exc.status is not None:
        detail += f" Status: {exc.status}, Data: {json.dumps(exc.body, ensure_ascii=False)}"
    logger.warning("PicGo request failed | status=%s | reason=%s", exc.status, exc.message)
    return TransportFailure(detail=detail)


def describe_unexpected_error(exc: Exception) -> TransportFailure:
    return TransportFailure(detail=str(exc) or exc.__class__.__name__)
