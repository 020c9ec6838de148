# servers/ditaa-renderer/src/mcp_ditaa_renderer/models/report.py
from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

Outcome = Literal["written", "unchanged", "failed", "invalid"]


class RenderResult(BaseModel):
    key: str                       # document relative path, or cache key
    outcome: Outcome
    url: Optional[str] = None
    path: Optional[str] = None     # absolute destination on disk
    error: Optional[str] = None


class BuildReport(BaseModel):
    source_root: str
    output_root: str
    results: List[RenderResult] = Field(default_factory=list)

    def by_outcome(self, outcome: Outcome) -> List[RenderResult]:
        return [r for r in self.results if r.outcome == outcome]

    @property
    def counts(self) -> Dict[str, int]:
        counts = {"written": 0, "unchanged": 0, "failed": 0, "invalid": 0}
        for r in self.results:
            counts[r.outcome] += 1
        return counts
