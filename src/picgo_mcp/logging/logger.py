"""Central logger configuration.

Why this exists:
- Consistent formatting across all modules
- One place to tune log level/handlers
- stdout belongs to the MCP stdio transport, so logs MUST go to stderr
"""

import logging
import sys

from src.picgo_mcp.config.settings import settings


def setup_logger(name: str = "picgo_mcp") -> logging.Logger:
    """Create and return a configured logger.

    NOTE:
    - Every module should do: `logger = setup_logger(__name__)`.
    - Never attach a stdout handler here; a single stray byte on stdout
      corrupts the JSON-RPC stream.
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers when modules are re-imported (tests, reloads)
    if logger.handlers:
        return logger

    logger.setLevel(settings.log_level.upper())

    handler = logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Avoid propagating to root and double-printing
    logger.propagate = False
    return logger
