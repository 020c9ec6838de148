# servers/ditaa-renderer/src/mcp_ditaa_renderer/staleness.py
"""
Freshness checks for existing diagram outputs.

A policy answers one question: given that the destination file exists, can
the render be skipped?
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Protocol, Union

from common.os_paths import PathError, modified_time


class StalenessPolicy(Protocol):
    def is_fresh(self, destination: Path) -> bool:
        ...


class ModifiedTimePolicy:
    """Fresh iff the output is strictly newer than its source document.

    A source file that can no longer be stat'ed counts as stale.
    """

    def __init__(self, source_path: Callable[[], Union[str, "os.PathLike[str]"]]):
        self._source_path = source_path

    def is_fresh(self, destination: Path) -> bool:
        if not destination.exists():
            return False
        try:
            source_mtime = modified_time(self._source_path())
        except PathError:
            return False
        return source_mtime < modified_time(destination)


class ContentAddressPolicy:
    """
    Fresh iff the output exists and its site-relative path carries the cache
    key. Content-addressed files are never rewritten once present.
    """

    def __init__(self, cache_key: Callable[[], str], relative_destination: Callable[[], str]):
        self._cache_key = cache_key
        self._relative_destination = relative_destination

    def is_fresh(self, destination: Path) -> bool:
        if not destination.exists():
            return False
        return self._cache_key() in self._relative_destination()
