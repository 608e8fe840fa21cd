"""Manifest discovery package."""

from moon_dst.discovery.grouper import (
    discover_repositories,
    find_repo_root,
    group_repositories,
)
from moon_dst.discovery.ignore import DEFAULT_IGNORES, build_ignore_set, is_ignored
from moon_dst.discovery.scanner import parse_manifest, scan_manifests
from moon_dst.discovery.types import Manifest, Repository

__all__ = [
    "DEFAULT_IGNORES",
    "Manifest",
    "Repository",
    "build_ignore_set",
    "discover_repositories",
    "find_repo_root",
    "group_repositories",
    "is_ignored",
    "parse_manifest",
    "scan_manifests",
]
