# servers/ditaa-renderer/src/mcp_ditaa_renderer/tools/render_diagram.py
from __future__ import annotations

from typing import Any, Dict, Optional

from common.logging import get_logger

from ..diagrams import EmbeddedDiagram
from ..models.params import RenderDiagramInput
from ..models.site_config import SiteConfig
from ..renderer import RendererInvoker
from ..settings import Settings
from ..site import load_site_config

logger = get_logger("mcp.ditaa.tools.render")


def render_diagram(
    input: RenderDiagramInput,
    cfg: Settings,
    site: Optional[SiteConfig] = None,
    renderer: Optional[RendererInvoker] = None,
) -> Dict[str, Any]:
    renderer = renderer or RendererInvoker.locate(cfg.DITAA_BIN)
    site = site or load_site_config(cfg)

    diagram = EmbeddedDiagram(site, input.content, input.options, renderer=renderer)

    root = input.output_root or cfg.OUTPUT_DIR
    written = diagram.write(root)
    dest = diagram.destination(root)

    logger.info("tool.render.done", url=diagram.url, written=written, cache_key=diagram.cache_key)
    return {
        "url": diagram.url,
        "output": diagram.url if input.wants_url() else diagram.img_tag(),
        "written": written,
        "exists": dest.exists(),
        "path": str(dest),
        "cache_key": diagram.cache_key,
    }


def register_render_diagram(mcp: Any) -> None:
    # Flat parameters so MCP clients don't need an 'input' wrapper
    @mcp.tool(name="ditaa.render", title="Render ditaa Diagram")
    def ditaa_render(
        content: str,
        options: Optional[Dict[str, Any]] = None,
        output_root: Optional[str] = None,
        return_kind: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Render an embedded ditaa diagram to a content-addressed image."""
        input = RenderDiagramInput(
            content=content,
            options=options,
            output_root=output_root,
            return_kind=return_kind,
        )
        return render_diagram(input, Settings())
