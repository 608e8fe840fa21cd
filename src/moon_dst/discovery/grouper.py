"""Group manifests under the repository that owns them."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from moon_dst.discovery.ignore import build_ignore_set
from moon_dst.discovery.scanner import scan_manifests
from moon_dst.discovery.types import Manifest, Repository

VCS_MARKER = ".git"


def find_repo_root(manifest_path: Path) -> Path:
    """Nearest ancestor holding a `.git` entry, else the manifest's own directory.

    `.git` may be a file (submodules, worktrees) or a directory.
    """
    directory = manifest_path.parent
    for candidate in (directory, *directory.parents):
        if (candidate / VCS_MARKER).exists():
            return candidate
    return directory


def group_repositories(manifests: Iterable[Manifest]) -> list[Repository]:
    grouped: dict[Path, Repository] = {}
    for manifest in manifests:
        root = find_repo_root(manifest.path)
        repo = grouped.get(root)
        if repo is None:
            repo = grouped[root] = Repository(root=root)
        repo.manifests.append(manifest)
    return sorted(grouped.values(), key=lambda item: item.root)


def discover_repositories(
    root: Path | str,
    ignores: Iterable[str] = (),
    *,
    use_default_ignores: bool = True,
    verbose: bool = False,
) -> list[Repository]:
    ignore_set = build_ignore_set(ignores, use_defaults=use_default_ignores)
    return group_repositories(scan_manifests(root, ignore_set, verbose=verbose))
