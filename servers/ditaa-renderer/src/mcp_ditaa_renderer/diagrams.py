# servers/ditaa-renderer/src/mcp_ditaa_renderer/diagrams.py
"""
Diagrams: ditaa source + resolved options + an output location.

Two variants share one interface (``url``, ``write``, ``img_tag``):

  - DocumentDiagram: a whole ``*.ditaa`` document rendered where the document
    itself would be published; re-rendered when the document is newer than
    its image.
  - EmbeddedDiagram: a diagram embedded in another page; its image is named
    after a SHA-1 of content + renderer flags, so an existing file is reused
    as-is.

Option resolution, rendering and freshness are delegated to ``options``,
``renderer`` and ``staleness``.
"""
from __future__ import annotations

import html
import posixpath
import re
import weakref
from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, Union

from common.logging import get_logger
from common.os_paths import join_output_path, modified_time

from .documents import DEFAULT_OUTPUT_EXT, Document
from .errors import ConfigurationError
from .hashing import fingerprint
from .models.site_config import SiteConfig
from .options import (
    EMBEDDED_FALLBACKS,
    EMBEDDED_OPTIONS,
    HASH_PLACEHOLDER,
    LEGACY_FALLBACKS,
    OPTIONS,
    DiagramOptions,
    EmbeddedDiagramOptions,
    FallbackRule,
    resolve_options,
)
from .renderer import RendererInvoker, build_arguments
from .staleness import ContentAddressPolicy, ModifiedTimePolicy, StalenessPolicy

logger = get_logger("mcp.ditaa.diagram")

SiteLike = Union[SiteConfig, Mapping[str, Any], None]
RootLike = Union[str, Path, None]


class Diagram(ABC):
    options_model: Type[DiagramOptions] = DiagramOptions
    option_names: Tuple[str, ...] = OPTIONS
    fallbacks: Tuple[FallbackRule, ...] = LEGACY_FALLBACKS

    def __init__(
        self,
        site: SiteLike,
        options: Optional[Mapping[str, Any]] = None,
        renderer: Optional[RendererInvoker] = None,
    ):
        # Fail on a missing ditaa before touching anything else.
        self.renderer = renderer if renderer is not None else RendererInvoker.locate()
        self.site = SiteConfig.from_mapping(site)

        if options is not None and not isinstance(options, Mapping):
            raise ConfigurationError("ditaa", options, "options must be a mapping")
        self.options = resolve_options(
            self.options_model, options, self.site, self.option_names, self.fallbacks
        )

    @property
    @abstractmethod
    def content(self) -> str:
        ...

    @property
    def source(self) -> str:
        """Text handed to ditaa."""
        return self.content

    @property
    @abstractmethod
    def relative_destination(self) -> str:
        """Output path relative to the output root."""
        ...

    @property
    @abstractmethod
    def staleness(self) -> StalenessPolicy:
        ...

    @property
    def url(self) -> str:
        return self.relative_destination

    @property
    def output_ext(self) -> str:
        return posixpath.splitext(self.relative_destination)[1]

    @property
    def arguments(self) -> List[str]:
        return build_arguments(self.options)

    def destination(self, root: RootLike) -> Path:
        return join_output_path(root, self.relative_destination)

    def img_tag(self) -> str:
        return f'<img src="{html.escape(self.url, quote=True)}" />'

    @property
    def output(self) -> str:
        return self.img_tag()

    def write(self, root: RootLike) -> bool:
        """Render into ``root`` unless the existing output is fresh.

        Returns True only when ditaa left a file at the destination.
        """
        dest = self.destination(root)
        if self.staleness.is_fresh(dest):
            logger.debug("diagram.fresh", dest=str(dest), url=self.url)
            return False
        return self.renderer.invoke(self.options, self.source, dest)

    def to_dict(self) -> Dict[str, Any]:
        """Template payload for the document pipeline."""
        return {
            "url": self.url,
            "content": self.content,
            "output": self.output,
            "ditaa": self.options.model_dump(),
        }

    def __str__(self) -> str:
        return self.content or ""


class DocumentDiagram(Diagram):
    """A ``*.ditaa`` document of the source tree, published as an image."""

    def __init__(
        self,
        site: SiteLike,
        document: Document,
        renderer: Optional[RendererInvoker] = None,
    ):
        # The pipeline owns the document; we only look things up through it.
        self._document = weakref.ref(document)
        data = document.data or {}
        super().__init__(site, data.get("ditaa"), renderer)

    @property
    def document(self) -> Document:
        doc = self._document()
        if doc is None:
            raise ReferenceError("the source document of this diagram no longer exists")
        return doc

    @property
    def content(self) -> str:
        return self.document.content

    @property
    def path(self) -> str:
        return str(self.document.path)

    @property
    def relative_path(self) -> str:
        return self.document.relative_path

    @property
    def url(self) -> str:
        return self.document.url

    @property
    def output_ext(self) -> str:
        if self.document.permalink:
            return self.document.output_ext
        return DEFAULT_OUTPUT_EXT

    @property
    def relative_destination(self) -> str:
        doc = self.document
        if doc.permalink:
            return "/" + doc.destination(None).as_posix()
        return posixpath.join(doc.dir, f"{doc.basename}{self.output_ext}")

    def destination(self, root: RootLike) -> Path:
        if self.document.permalink:
            return self.document.destination(root)
        return super().destination(root)

    @property
    def mtime(self) -> float:
        return modified_time(self.document.path)

    @property
    def staleness(self) -> StalenessPolicy:
        return ModifiedTimePolicy(lambda: self.document.path)

    def to_dict(self) -> Dict[str, Any]:
        return {**self.document.to_dict(), **super().to_dict()}


def unescape_source(content: str) -> str:
    """Undo the escaping applied to diagrams embedded in template markup."""
    source = content.replace("\\n", "\n")
    source = re.sub(r"^\n", "", source, flags=re.MULTILINE)
    source = re.sub(r'^\["\n', "", source, flags=re.MULTILINE)
    source = re.sub(r'"\]$', "", source, flags=re.MULTILINE)
    return source.replace("\\\\", "\\")


class EmbeddedDiagram(Diagram):
    """A diagram embedded in a page, stored under a content-addressed name."""

    options_model = EmbeddedDiagramOptions
    option_names = EMBEDDED_OPTIONS
    fallbacks = EMBEDDED_FALLBACKS

    options: EmbeddedDiagramOptions

    def __init__(
        self,
        site: SiteLike,
        content: str,
        options: Optional[Mapping[str, Any]] = None,
        renderer: Optional[RendererInvoker] = None,
    ):
        self._content = content
        super().__init__(site, options, renderer)

    @property
    def content(self) -> str:
        return self._content

    @property
    def source(self) -> str:
        return unescape_source(self._content)

    @cached_property
    def cache_key(self) -> str:
        return fingerprint(self._content, self.arguments)

    @property
    def dir(self) -> str:
        return self.options.dirname.replace(HASH_PLACEHOLDER, self.cache_key)

    @property
    def name(self) -> str:
        return self.options.name.replace(HASH_PLACEHOLDER, self.cache_key)

    @property
    def relative_destination(self) -> str:
        return f"{self.dir.rstrip('/')}/{self.name.lstrip('/')}"

    @property
    def staleness(self) -> StalenessPolicy:
        return ContentAddressPolicy(lambda: self.cache_key, lambda: self.relative_destination)
