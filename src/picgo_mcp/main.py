"""
Process entrypoint.

Run with:
    picgo-mcp
    python -m src.picgo_mcp.main

Lifecycle:
- SIGINT/SIGTERM cancel the serving task; leaving `stdio_server()` closes the
  MCP connection, then the process exits 0
- The SDK reads stdin in a worker thread that cancellation cannot interrupt.
  If that read is still blocked after SHUTDOWN_GRACE_SECONDS (host keeps the
  pipe open), the process exits 0 explicitly instead of waiting for input
- Any error escaping startup or the transport is logged and exits 1
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
from typing import Optional

from src.picgo_mcp.logging.logger import setup_logger
from src.picgo_mcp.server import PicGoUploaderServer

logger = setup_logger(__name__)

_SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)
SHUTDOWN_GRACE_SECONDS = 1.0


def _exit_now(code: int) -> None:
    # asyncio.run() would join the blocked stdin thread, so skip interpreter teardown.
    logging.shutdown()
    os._exit(code)


async def serve(server: Optional[PicGoUploaderServer] = None) -> None:
    server = server or PicGoUploaderServer()
    loop = asyncio.get_running_loop()
    stop = asyncio.Event()

    installed = []
    for sig in _SHUTDOWN_SIGNALS:
        try:
            loop.add_signal_handler(sig, stop.set)
            installed.append(sig)
        except (NotImplementedError, RuntimeError):
            # Windows: SIGINT still arrives as KeyboardInterrupt, handled in main()
            pass

    serving = asyncio.create_task(server.run_stdio())
    stopping = asyncio.create_task(stop.wait())
    try:
        await asyncio.wait({serving, stopping}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        stopping.cancel()
        for sig in installed:
            loop.remove_signal_handler(sig)

    if not stop.is_set():
        # Client closed stdin, or the transport failed: surface the result as-is.
        await serving
        return

    logger.info("Shutdown signal received; closing MCP connection")
    serving.cancel()
    done, _ = await asyncio.wait({serving}, timeout=SHUTDOWN_GRACE_SECONDS)
    if done:
        logger.info("MCP connection closed")
        return

    logger.info("MCP connection closed; stdin reader still blocked, exiting")
    _exit_now(0)


def main() -> int:
    try:
        asyncio.run(serve())
    except KeyboardInterrupt:
        logger.info("Interrupted; MCP connection closed")
    except Exception:
        logger.exception("MCP server failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
