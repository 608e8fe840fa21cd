"""Diagnostic logging for moon-dst.

Report output (scan listings, apply results) is written to stdout with
click. Everything else goes through the stdlib ``logging`` tree, rendered
by structlog onto stderr, so ``scan --json`` stays machine-readable even
with ``-v``. Worker threads tag their records with the repository root.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

VERBOSE_LEVEL = "DEBUG"


def resolve_level(verbose: bool, configured: str) -> int:
    """``-v`` always means DEBUG; otherwise MOON_DST_LOG_LEVEL, falling back to WARNING."""
    if verbose:
        return logging.DEBUG
    level = logging.getLevelName(configured.strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(level: int, json_output: bool = False) -> None:
    """Route all moon_dst loggers to a single stderr handler.

    Called once per CLI invocation; a repeat call replaces the handler so
    the stream always points at the current ``sys.stderr``.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]
    if json_output:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


@contextmanager
def repo_context(repo_root: object) -> Iterator[None]:
    """Attach ``repo=<root>`` to every record logged by the current worker thread."""
    structlog.contextvars.bind_contextvars(repo=str(repo_root))
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars("repo")
