# servers/ditaa-renderer/src/mcp_ditaa_renderer/__main__.py
from __future__ import annotations

import os
import sys

from common.logging import get_logger

from .errors import MissingDependencyError
from .renderer import locate_renderer
from .server import mcp
from .settings import Settings


def main() -> None:
    """
    Run the ditaa renderer MCP server using the official SDK runner.

    Examples:
      MCP_TRANSPORT=streamable-http MCP_PORT=8002 python -m mcp_ditaa_renderer
      MCP_TRANSPORT=stdio           python -m mcp_ditaa_renderer
    """
    if any(a in ("-h", "--help") for a in sys.argv[1:]):
        sys.stderr.write("mcp-ditaa-renderer: MCP server rendering ditaa diagrams to images.\n")
        sys.stderr.flush()
        return

    settings = Settings()
    settings.configure_logging()
    log = get_logger("mcp.ditaa.main")

    # A missing ditaa is fatal: refuse to start rather than fail every call.
    try:
        ditaa = locate_renderer(settings.DITAA_BIN)
    except MissingDependencyError as e:
        sys.stderr.write("You are missing an executable required for mcp-ditaa-renderer. Please run:\n")
        sys.stderr.write(" $ [sudo] apt-get install ditaa\n")
        raise SystemExit(2) from e

    transport = os.getenv("MCP_TRANSPORT", "streamable-http").strip().lower()

    # Configure runner settings BEFORE run()
    host = os.getenv("MCP_HOST", "0.0.0.0")
    port = int(os.getenv("MCP_PORT", "8002"))
    mcp.settings.host = host
    mcp.settings.port = port

    if transport == "streamable-http":
        mcp.settings.streamable_http_path = os.getenv("MCP_MOUNT_PATH", "/mcp")
    elif transport == "sse":
        mcp.settings.sse_path = os.getenv("MCP_SSE_PATH", "/sse")

    # Optional stateless JSON mode for simple curl/browser testing
    if os.getenv("MCP_STATELESS_JSON", "").lower() in {"1", "true", "yes"}:
        mcp.settings.stateless_http = True
        mcp.settings.json_response = True

    log.info("server.start", transport=transport, host=host, port=port, ditaa=ditaa)

    mcp.run(transport=transport)


if __name__ == "__main__":
    main()
