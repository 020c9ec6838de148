# servers/ditaa-renderer/src/mcp_ditaa_renderer/models/params.py
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

# return kinds that make ditaa.render answer with the bare url
URL_RETURN_KINDS = frozenset({"uri", "url", "href"})


class RenderDiagramInput(BaseModel):
    content: str = Field(..., description="ditaa source text")
    options: Optional[Dict[str, Any]] = Field(
        default=None, description="Per-diagram option overrides (antialias, scale, dirname, ...)"
    )
    output_root: Optional[str] = Field(default=None, description="Output root (default: OUTPUT_DIR)")
    return_kind: Optional[str] = Field(
        default=None, description="'url' (or 'uri'/'href') to return the url instead of an <img> tag"
    )

    def wants_url(self) -> bool:
        return (self.return_kind or "").strip().lower() in URL_RETURN_KINDS


class BuildSiteInput(BaseModel):
    source_root: Optional[str] = Field(default=None, description="Source tree (default: SOURCE_DIR)")
    output_root: Optional[str] = Field(default=None, description="Output root (default: OUTPUT_DIR)")
    strict: Optional[bool] = Field(default=None, description="Fail when any diagram produced no file")
