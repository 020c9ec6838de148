# servers/ditaa-renderer/src/mcp_ditaa_renderer/hashing.py
from __future__ import annotations

import hashlib
from typing import Iterable


def fingerprint(content: str, flags: Iterable[str]) -> str:
    """SHA-1 hex digest of ``content`` followed directly by the space-joined flags.

    The layout matches previously generated cache directories; do not add a
    separator between content and flags.
    """
    h = hashlib.sha1()
    h.update(f"{content}{' '.join(flags)}".encode("utf-8"))
    return h.hexdigest()
