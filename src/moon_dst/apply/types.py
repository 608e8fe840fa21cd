"""Plan inputs and per-repository results for `moon-dst apply`."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class JustfileMode(str, Enum):
    SKIP = "skip"
    CREATE = "create"
    MERGE = "merge"


@dataclass(frozen=True, slots=True)
class ApplyOptions:
    skip_update: bool = False
    repeat: int = 1
    packages: tuple[str, ...] = ()
    fail_fast: bool = False
    write_justfile: bool = True
    justfile_mode: JustfileMode = JustfileMode.CREATE

    def __post_init__(self) -> None:
        if self.repeat < 1:
            raise ValueError("repeat must be >= 1")


@dataclass(frozen=True, slots=True)
class PlanInputs:
    root: Path
    ignore_set: frozenset[str]
    jobs: int
    dry_run: bool = False
    verbose: bool = False
    apply: ApplyOptions = field(default_factory=ApplyOptions)


@dataclass(slots=True)
class RepoResult:
    repo_root: Path
    success: bool = True
    updated_packages: list[str] = field(default_factory=list)
    failed_packages: list[tuple[str, str]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def record_added(self, dep: str) -> None:
        if dep not in self.updated_packages:
            self.updated_packages.append(dep)

    def record_failed(self, dep: str, message: str) -> None:
        self.failed_packages.append((dep, message))
        self.success = False

    def record_error(self, message: str, *, fails: bool = True) -> None:
        self.errors.append(message)
        if fails:
            self.success = False


@dataclass(slots=True)
class ApplyReport:
    results: list[RepoResult]
    total_repos: int
    fail_fast: bool = False

    @property
    def succeeded(self) -> int:
        return sum(1 for item in self.results if item.success)

    @property
    def stopped_early(self) -> bool:
        return self.fail_fast and len(self.results) < self.total_repos

    @property
    def success(self) -> bool:
        return all(item.success for item in self.results) and not self.stopped_early
