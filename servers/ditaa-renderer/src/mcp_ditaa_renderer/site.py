# servers/ditaa-renderer/src/mcp_ditaa_renderer/site.py
"""
Site build: every ``*.ditaa`` document under a source root becomes a
DocumentDiagram published into the output root.

A missing ditaa aborts the build up front. A document that cannot be decoded
or has invalid options is logged and reported as invalid. A diagram ditaa
failed to render is reported and, in strict mode, turned into a RenderFailure
once every document was attempted.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from common.logging import get_logger
from common.os_paths import PathError

from .diagrams import DocumentDiagram
from .documents import DOCUMENT_EXTENSION, SourceDocument
from .errors import ConfigurationError, RenderFailure
from .models.report import BuildReport, RenderResult
from .models.site_config import SiteConfig
from .renderer import RendererInvoker
from .settings import Settings

logger = get_logger("mcp.ditaa.site")


def _is_within(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


def load_site_config(settings: Settings) -> SiteConfig:
    if settings.SITE_CONFIG:
        return SiteConfig.load(settings.SITE_CONFIG)
    return SiteConfig()


def discover_documents(
    source_root: Union[str, Path],
    encoding: str = "utf-8",
    exclude: Optional[List[Union[str, Path]]] = None,
    unreadable: Optional[List[RenderResult]] = None,
) -> List[SourceDocument]:
    """Find ``*.ditaa`` files (any case), skipping hidden paths and ``exclude`` trees.

    A file that cannot be read or decoded is logged and left out; when
    ``unreadable`` is given it also receives an ``invalid`` result for it.
    """
    root = Path(source_root).resolve()
    excluded = [Path(p).resolve() for p in (exclude or [])]

    docs: List[SourceDocument] = []
    for p in sorted(root.rglob("*")):
        if not p.is_file() or p.suffix.lower() != DOCUMENT_EXTENSION:
            continue
        rel = p.relative_to(root)
        if any(part.startswith(".") for part in rel.parts):
            continue
        if any(_is_within(p, ex) for ex in excluded):
            continue
        try:
            docs.append(SourceDocument.read(root, p, encoding=encoding))
        except (UnicodeDecodeError, OSError) as e:
            logger.error("site.unreadable", document=rel.as_posix(), encoding=encoding, error=str(e))
            if unreadable is not None:
                unreadable.append(RenderResult(key=rel.as_posix(), outcome="invalid", error=str(e)))
    return docs


class SiteBuilder:
    def __init__(
        self,
        site: Union[SiteConfig, Mapping[str, Any], None],
        source_root: Union[str, Path],
        output_root: Union[str, Path],
        renderer: Optional[RendererInvoker] = None,
    ):
        self.renderer = renderer if renderer is not None else RendererInvoker.locate()
        self.site = SiteConfig.from_mapping(site)
        self.source_root = Path(source_root).resolve()
        self.output_root = Path(output_root).resolve()
        # Diagrams only hold weak references; the builder keeps documents alive.
        self.documents: List[SourceDocument] = []
        self.unreadable: List[RenderResult] = []

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        source_root: Optional[Union[str, Path]] = None,
        output_root: Optional[Union[str, Path]] = None,
    ) -> "SiteBuilder":
        renderer = RendererInvoker.locate(settings.DITAA_BIN)
        return cls(
            load_site_config(settings),
            source_root or settings.SOURCE_DIR,
            output_root or settings.OUTPUT_DIR,
            renderer=renderer,
        )

    def discover(self) -> List[SourceDocument]:
        self.unreadable = []
        self.documents = discover_documents(
            self.source_root,
            encoding=self.site.encoding or "utf-8",
            exclude=[self.output_root],
            unreadable=self.unreadable,
        )
        logger.info(
            "site.discovered",
            source_root=str(self.source_root),
            documents=len(self.documents),
            unreadable=len(self.unreadable),
        )
        return self.documents

    def build(self, strict: bool = False) -> BuildReport:
        report = BuildReport(source_root=str(self.source_root), output_root=str(self.output_root))

        documents = self.discover()
        report.results.extend(self.unreadable)

        for doc in documents:
            try:
                diagram = DocumentDiagram(self.site, doc, renderer=self.renderer)
            except ConfigurationError as e:
                logger.error("site.invalid_options", document=doc.relative_path, key=e.key, error=str(e))
                report.results.append(RenderResult(key=doc.relative_path, outcome="invalid", error=str(e)))
                continue

            dest = diagram.destination(self.output_root)
            error = None
            try:
                written = diagram.write(self.output_root)
            except (PathError, ReferenceError) as e:
                logger.error("site.write_failed", document=doc.relative_path, error=str(e))
                written, error = False, str(e)

            if written:
                outcome = "written"
            elif error is None and dest.exists():
                outcome = "unchanged"
            else:
                outcome = "failed"
            report.results.append(
                RenderResult(key=doc.relative_path, outcome=outcome, url=diagram.url, path=str(dest), error=error)
            )

        logger.info("site.built", output_root=str(self.output_root), **report.counts)

        failed = report.by_outcome("failed")
        if strict and failed:
            raise RenderFailure(
                f"ditaa produced no output for {len(failed)} document(s)",
                paths=[r.key for r in failed],
            )
        return report
