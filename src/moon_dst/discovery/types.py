"""Types for discovered manifests and the repositories that own them."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

MANIFEST_NAME = "moon.mod.json"


@dataclass(frozen=True, slots=True)
class Manifest:
    path: Path
    deps: tuple[str, ...] = ()

    @property
    def directory(self) -> Path:
        return self.path.parent


@dataclass(slots=True)
class Repository:
    root: Path
    manifests: list[Manifest] = field(default_factory=list)

    def dependencies(self) -> list[str]:
        """Union of all manifest deps, first-seen order across manifests sorted by path."""
        seen: dict[str, None] = {}
        for manifest in sorted(self.manifests, key=lambda item: item.path):
            for dep in manifest.deps:
                seen.setdefault(dep, None)
        return list(seen)

    def relative_path(self, manifest: Manifest) -> Path:
        try:
            return manifest.path.relative_to(self.root)
        except ValueError:
            return manifest.path
