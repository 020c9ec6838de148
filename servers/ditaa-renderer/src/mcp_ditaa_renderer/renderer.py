# servers/ditaa-renderer/src/mcp_ditaa_renderer/renderer.py
from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import sys
import tempfile
import time
from pathlib import Path
from typing import List, Union

from common.logging import get_logger
from common.os_paths import PathError, ensure_parent_directory

from .errors import MissingDependencyError
from .options import DiagramOptions

logger = get_logger("mcp.ditaa.renderer")

DEFAULT_EXECUTABLE = "ditaa"
INSTALL_HINT = "install it with: [sudo] apt-get install ditaa"

DEFAULT_SCALE = 1.0
DEFAULT_TABS = 8


def locate_renderer(executable: str = DEFAULT_EXECUTABLE) -> str:
    """
    Resolve the ditaa executable (a name on PATH or an explicit path).
    Raises MissingDependencyError when it cannot be found.
    """
    found = shutil.which(executable)
    if not found:
        logger.error("ditaa.missing", executable=executable, hint=INSTALL_HINT)
        raise MissingDependencyError(executable, INSTALL_HINT)
    return found


def build_arguments(options: DiagramOptions) -> List[str]:
    """
    ditaa flags for ``options``. The order is part of every cache key, so it
    must not change:
      -v  -A  -d  -E  -e <enc>  -r  -s <scale>  -S  -t <tabs>  -o
    """
    args: List[str] = []

    if options.verbose:
        args.append("-v")
    if not options.antialias:
        args.append("-A")
    if options.debug:
        args.append("-d")
    if not options.separation:
        args.append("-E")
    if options.encoding:
        args += ["-e", options.encoding]
    if options.round:
        args.append("-r")
    if options.scale != DEFAULT_SCALE:
        args += ["-s", str(options.scale)]
    if not options.shadows:
        args.append("-S")
    if options.tabs != DEFAULT_TABS:
        args += ["-t", str(options.tabs)]
    # overwrite an existing output file
    args.append("-o")

    return args


class RendererInvoker:
    """Runs ditaa against a source buffer. Success is judged by the output file existing."""

    def __init__(self, executable: str):
        self.executable = executable

    @classmethod
    def locate(cls, executable: str = DEFAULT_EXECUTABLE) -> "RendererInvoker":
        return cls(locate_renderer(executable))

    def command(self, options: DiagramOptions, input_path: Union[str, Path], destination: Union[str, Path]) -> List[str]:
        return [self.executable, *build_arguments(options), str(input_path), str(destination)]

    def invoke(self, options: DiagramOptions, source: str, destination: Union[str, Path]) -> bool:
        dest = Path(destination)
        echo = options.debug or options.verbose

        fd, tmp_path = tempfile.mkstemp(prefix="ditaa", suffix=".txt")
        try:
            try:
                with open(fd, "w", encoding=options.encoding or "utf-8", newline="") as tmp:
                    tmp.write(source)
                ensure_parent_directory(dest)
            except (UnicodeError, PathError) as e:
                logger.warning("ditaa.prepare_failed", dest=str(dest), error=str(e))
                return dest.exists()

            cmd = self.command(options, tmp_path, dest)
            logger.info("ditaa.exec", cmd=" ".join(shlex.quote(p) for p in cmd))

            t0 = time.time()
            try:
                proc = subprocess.run(
                    cmd,
                    stdout=subprocess.PIPE if echo else subprocess.DEVNULL,
                    stderr=None if echo else subprocess.DEVNULL,
                    text=True,
                    errors="replace",
                    check=False,
                )
            except OSError as e:
                logger.warning("ditaa.spawn_failed", dest=str(dest), error=str(e))
                return dest.exists()
            dt = time.time() - t0

            # stdout may be the stdio transport; echo on stderr
            if echo and proc.stdout:
                sys.stderr.write(proc.stdout)
                sys.stderr.flush()
        finally:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass

        written = dest.exists()
        if written:
            logger.info("ditaa.rendered", dest=str(dest), returncode=proc.returncode, seconds=round(dt, 3))
        else:
            logger.warning("ditaa.no_output", dest=str(dest), returncode=proc.returncode, seconds=round(dt, 3))
        return written
