# servers/ditaa-renderer/src/mcp_ditaa_renderer/tools/build_site.py
from __future__ import annotations

from typing import Any, Dict, Optional

from ..models.params import BuildSiteInput
from ..settings import Settings
from ..site import SiteBuilder


def build_site(input: BuildSiteInput, cfg: Settings) -> Dict[str, Any]:
    builder = SiteBuilder.from_settings(cfg, source_root=input.source_root, output_root=input.output_root)
    strict = cfg.STRICT_RENDER if input.strict is None else input.strict
    report = builder.build(strict=strict)
    return {**report.model_dump(), "counts": report.counts}


def register_build_site(mcp: Any) -> None:
    @mcp.tool(name="ditaa.build_site", title="Build ditaa Site")
    def ditaa_build_site(
        source_root: Optional[str] = None,
        output_root: Optional[str] = None,
        strict: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """Render every *.ditaa document under source_root into output_root."""
        input = BuildSiteInput(source_root=source_root, output_root=output_root, strict=strict)
        return build_site(input, Settings())
