"""
PicGo uploader MCP server.

Responsibilities:
- Advertise the single `upload_image_via_picgo` tool (tools/list)
- Route tools/call through: validate args -> check paths -> forward to PicGo -> normalize
- Turn bad requests into JSON-RPC errors, and every upload outcome into a CallToolResult

IMPORTANT:
- Handlers are registered directly on `Server.request_handlers` rather than via the
  `@server.call_tool()` decorator: the decorator converts every exception into a tool
  result, and InvalidParams / MethodNotFound must reach the client as protocol errors.
- No per-invocation state lives on this object. The SDK dispatches requests
  concurrently, and the only shared thing (PicGoClient) is immutable.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from src.picgo_mcp.config.settings import Settings, settings as default_settings
from src.picgo_mcp.logging.logger import setup_logger
from src.picgo_mcp.picgo.client import PicGoClient, PicGoTransportError
from src.picgo_mcp.picgo.outcome import (
    UploadOutcome,
    describe_transport_error,
    describe_unexpected_error,
    normalize_reply,
)
from src.picgo_mcp.tools.upload_image import (
    TOOL_NAME,
    UPLOAD_IMAGE_TOOL,
    ensure_paths_exist,
    validate_upload_args,
)

logger = setup_logger(__name__)


class PicGoUploaderServer:
    """
    Typical usage:
        server = PicGoUploaderServer()
        await server.run_stdio()
    """

    def __init__(self, client: Optional[PicGoClient] = None, cfg: Settings = default_settings) -> None:
        self.client = client or PicGoClient.from_settings(cfg)
        self.server: Server = Server(
            cfg.server_name,
            version=cfg.server_version,
            instructions=cfg.server_instructions,
        )
        self.server.request_handlers[types.ListToolsRequest] = self._handle_list_tools
        self.server.request_handlers[types.CallToolRequest] = self._handle_call_tool

    async def _handle_list_tools(self, req: types.ListToolsRequest) -> types.ServerResult:
        return types.ServerResult(types.ListToolsResult(tools=self.list_tools()))

    async def _handle_call_tool(self, req: types.CallToolRequest) -> types.ServerResult:
        result = await self.call_tool(req.params.name, req.params.arguments)
        return types.ServerResult(result)

    def list_tools(self) -> list[types.Tool]:
        return [UPLOAD_IMAGE_TOOL]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> types.CallToolResult:
        """
        Run one invocation end to end.

        Raises:
            McpError(METHOD_NOT_FOUND): unknown tool name.
            McpError(INVALID_PARAMS): bad argument shape or a missing path.
        """
        if name != TOOL_NAME:
            logger.warning("Unknown tool requested | tool=%s", name)
            raise McpError(types.ErrorData(code=types.METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))

        args = validate_upload_args(arguments)
        image_paths = ensure_paths_exist(list(args.image_paths))

        logger.info("Uploading via PicGo | tool=%s | paths=%d", name, len(image_paths))
        outcome = await self.upload(image_paths)
        return outcome.to_call_tool_result()

    async def upload(self, image_paths: list[str]) -> UploadOutcome:
        """Forward to PicGo once and classify what came back. Never raises."""
        try:
            reply = await self.client.aupload(image_paths)
            return normalize_reply(reply)
        except PicGoTransportError as e:
            return describe_transport_error(e)
        except Exception as e:
            logger.exception("Unexpected error while forwarding to PicGo | tool=%s", TOOL_NAME)
            return describe_unexpected_error(e)

    async def run_stdio(self) -> None:
        """Serve MCP over stdin/stdout until the client disconnects or we are cancelled."""
        async with stdio_server() as (read_stream, write_stream):
            logger.info(
                "PicGo Uploader MCP server running on stdio | upload_url=%s",
                self.client.upload_url,
            )
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )
