"""Walk a directory tree and collect parsed moon.mod.json manifests."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from moon_dst.discovery.ignore import is_ignored
from moon_dst.discovery.types import MANIFEST_NAME, Manifest
from moon_dst.errors import BadRootError, ManifestParseError, WalkError

logger = logging.getLogger(__name__)


def canonical_root(root: Path | str) -> Path:
    try:
        resolved = Path(root).expanduser().resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise BadRootError(root, str(exc)) from exc
    if not resolved.is_dir():
        raise BadRootError(root, "not a directory")
    return resolved


def parse_manifest(path: Path) -> list[str]:
    """Return the sorted dependency names declared in a moon.mod.json file."""
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestParseError(path, str(exc)) from exc
    try:
        decoded = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        # JSONDecodeError, oversized integer literals and runaway nesting
        raise ManifestParseError(path, str(exc)) from exc
    if not isinstance(decoded, dict):
        raise ManifestParseError(path, "expected a JSON object")
    if "deps" not in decoded:
        return []
    deps = decoded["deps"]
    if not isinstance(deps, dict):
        raise ManifestParseError(path, "'deps' must be a JSON object")
    return sorted(deps)


def _raise_walk_error(exc: OSError) -> None:
    raise WalkError(Path(exc.filename or "."), exc)


def scan_manifests(
    root: Path | str,
    ignore_set: frozenset[str],
    verbose: bool = False,
) -> list[Manifest]:
    """Find every readable moon.mod.json under *root*.

    Ignored directories are pruned before descent, symlinks are never
    followed, and unparseable manifests are skipped with a warning.
    """
    base = canonical_root(root)
    manifests: list[Manifest] = []
    if is_ignored(base, ignore_set):
        logger.warning("root %s is inside an ignored directory; nothing to scan", base)
        return manifests

    for dirpath, dirnames, filenames in os.walk(base, onerror=_raise_walk_error):
        current = Path(dirpath)
        # Prune in place so os.walk never enters ignored or symlinked directories.
        dirnames[:] = sorted(
            name
            for name in dirnames
            if not (current / name).is_symlink()
            and not is_ignored(current / name, ignore_set)
        )
        if MANIFEST_NAME not in filenames:
            continue
        path = current / MANIFEST_NAME
        if path.is_symlink() or is_ignored(path, ignore_set):
            continue
        try:
            deps = parse_manifest(path)
        except ManifestParseError as exc:
            logger.warning("Failed to parse %s: %s", path, exc.cause)
            continue
        if verbose:
            logger.info("Found: %s", path)
        manifests.append(Manifest(path=path, deps=tuple(deps)))

    return manifests
