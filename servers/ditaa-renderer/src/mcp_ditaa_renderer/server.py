# servers/ditaa-renderer/src/mcp_ditaa_renderer/server.py
from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from common.logging import get_logger

from .tools import register as register_tools

logger = get_logger("mcp.ditaa.server")

# Single FastMCP instance; __main__.py runs it via streamable HTTP (or stdio)
# based on MCP_TRANSPORT and friends.
mcp = FastMCP("ditaa-renderer")

# Register tools once at import time
register_tools(mcp)
