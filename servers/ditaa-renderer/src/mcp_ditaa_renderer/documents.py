# servers/ditaa-renderer/src/mcp_ditaa_renderer/documents.py
from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol, Union

from common.os_paths import join_output_path

DOCUMENT_EXTENSION = ".ditaa"
DEFAULT_OUTPUT_EXT = ".png"


class Document(Protocol):
    """What a DocumentDiagram needs from the pipeline's document entity."""

    @property
    def content(self) -> str: ...

    @property
    def path(self) -> Union[str, Path]: ...

    @property
    def relative_path(self) -> str: ...

    @property
    def url(self) -> str: ...

    @property
    def data(self) -> Mapping[str, Any]: ...

    @property
    def permalink(self) -> Optional[str]: ...

    @property
    def output_ext(self) -> str: ...

    @property
    def dir(self) -> str: ...

    @property
    def basename(self) -> str: ...

    def destination(self, root: Union[str, Path, None]) -> Path: ...

    def to_dict(self) -> Dict[str, Any]: ...


@dataclass(eq=False)
class SourceDocument:
    """A ``*.ditaa`` file of the source tree, addressed like any other page."""

    path: Path
    relative_path: str
    content: str
    data: Dict[str, Any] = field(default_factory=dict)
    output_ext: str = DEFAULT_OUTPUT_EXT

    @classmethod
    def read(
        cls,
        source_root: Union[str, Path],
        path: Union[str, Path],
        encoding: str = "utf-8",
        data: Optional[Mapping[str, Any]] = None,
    ) -> "SourceDocument":
        root = Path(source_root)
        p = Path(path)
        if not p.is_absolute():
            p = root / p
        rel = p.relative_to(root).as_posix()
        return cls(path=p, relative_path=rel, content=p.read_text(encoding=encoding), data=dict(data or {}))

    @property
    def permalink(self) -> Optional[str]:
        return self.data.get("permalink")

    @property
    def dir(self) -> str:
        return "/" + posixpath.dirname(self.relative_path)

    @property
    def basename(self) -> str:
        return posixpath.splitext(posixpath.basename(self.relative_path))[0]

    @property
    def url(self) -> str:
        if self.permalink:
            return self.permalink
        return posixpath.join(self.dir, f"{self.basename}{self.output_ext}")

    def destination(self, root: Union[str, Path, None]) -> Path:
        url = self.url
        if url.endswith("/"):
            url = f"{url}index{self.output_ext}"
        return join_output_path(root, url)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.data,
            "path": self.relative_path,
            "url": self.url,
            "content": self.content,
        }
