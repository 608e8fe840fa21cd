"""Locate and invoke the MoonBit `moon` CLI."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from functools import lru_cache
from pathlib import Path

from moon_dst.config import get_settings
from moon_dst.errors import ToolFailedError, ToolUnavailableError

logger = logging.getLogger(__name__)

MOON = "moon"
HOME_RELATIVE_BIN = Path(".moon/bin/moon")


def _probe(binary: str) -> bool:
    try:
        proc = subprocess.run(
            [binary, "version"],
            capture_output=True,
            check=False,
        )
    except OSError:
        return False
    return proc.returncode == 0


@lru_cache(maxsize=1)
def resolve_moon_bin() -> str:
    """PATH `moon` if it answers `moon version`, else ``$HOME/.moon/bin/moon``, else bare `moon`."""
    if _probe(MOON):
        return MOON
    home = get_settings().home.strip()
    if home:
        candidate = Path(home) / HOME_RELATIVE_BIN
        if candidate.exists():
            logger.debug("using moon from %s", candidate)
            return str(candidate)
    return MOON


def check_moon_available() -> str:
    binary = resolve_moon_bin()
    if not _probe(binary):
        raise ToolUnavailableError()
    return binary


def run_moon(args: Sequence[str], cwd: Path) -> str:
    """Run `moon <args>` in *cwd* and return its stdout.

    Raises ToolFailedError on a non-zero exit; the exit code is -1 when the
    process was killed by a signal or could not be started.
    """
    cmd = [resolve_moon_bin(), *args]
    logger.debug("running %s in %s", " ".join(cmd), cwd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as exc:
        raise ToolFailedError(-1, f"Failed to execute moon {' '.join(args)}: {exc}") from exc
    if proc.returncode == 0:
        return proc.stdout
    code = proc.returncode if proc.returncode > 0 else -1
    raise ToolFailedError(code, proc.stderr)
