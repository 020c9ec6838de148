# servers/ditaa-renderer/src/mcp_ditaa_renderer/tools/__init__.py
from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from .build_site import register_build_site
from .render_diagram import register_render_diagram


def register(mcp: FastMCP) -> None:
    register_render_diagram(mcp)
    register_build_site(mcp)
