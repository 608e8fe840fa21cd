"""Install the MoonBit task-runner justfile into a repository."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click

from moon_dst.apply.types import JustfileMode
from moon_dst.errors import JustfileWriteError

logger = logging.getLogger(__name__)

JUSTFILE_NAME = "justfile"

JUSTFILE_TEMPLATE = """\
# https://github.com/mizchi/moonbit-template
# SPDX-License-Identifier: MIT
# MoonBit Project Commands

target := "js"

default: check test

fmt:
    moon fmt

check:
    moon check --deny-warn --target {{target}}

test:
    moon test --target {{target}}

test-update:
    moon test --update --target {{target}}

run:
    moon run src/main --target {{target}}

info:
    moon info

clean:
    moon clean

release-check: fmt info check test
"""


def _write_atomic(path: Path, content: str) -> None:
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        tmp_path.write_text(content, encoding="utf-8")
        os.replace(tmp_path, path)
    except OSError as exc:
        if tmp_path.exists():
            tmp_path.unlink()
        raise JustfileWriteError(path, exc) from exc


def install_justfile(
    repo_root: Path,
    mode: JustfileMode = JustfileMode.CREATE,
    *,
    dry_run: bool = False,
    verbose: bool = False,
) -> bool:
    """Write the template justfile under *mode*; return True when a file was (or would be) created."""
    path = repo_root / JUSTFILE_NAME

    if mode is JustfileMode.SKIP:
        if verbose:
            click.echo(f"[{repo_root}] Skipping justfile (skip mode)")
        return False

    if mode is JustfileMode.MERGE:
        # Merging into an existing justfile is not supported; behave like skip.
        logger.info("justfile merge mode is not implemented; leaving %s untouched", path)
        if verbose:
            click.echo(f"[{repo_root}] Merge mode not implemented")
        return False

    if path.exists():
        if verbose:
            click.echo(f"[{repo_root}] justfile already exists, skipping")
        return False
    if verbose or dry_run:
        click.echo(f"[{repo_root}] Creating justfile")
    if not dry_run:
        _write_atomic(path, JUSTFILE_TEMPLATE)
    return True
