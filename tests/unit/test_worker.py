"""Tests for the per-repository apply plan."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from moon_dst.apply.justfile import JUSTFILE_TEMPLATE
from moon_dst.apply.types import ApplyOptions, JustfileMode
from moon_dst.apply.worker import process_repo, select_dependencies
from moon_dst.discovery.types import Manifest, Repository
from moon_dst.errors import JustfileWriteError, ToolFailedError


class FakeMoon:
    def __init__(self, failing: Sequence[str] = (), fail_update: bool = False) -> None:
        self.calls: list[list[str]] = []
        self.failing = set(failing)
        self.fail_update = fail_update

    def __call__(self, args: Sequence[str], cwd: Path) -> str:
        self.calls.append(list(args))
        if args[0] == "update" and self.fail_update:
            raise ToolFailedError(1, "registry unreachable")
        if args[0] == "add" and args[1] in self.failing:
            raise ToolFailedError(2, f"cannot resolve {args[1]}")
        return ""


@pytest.fixture
def repo(tmp_path: Path) -> Repository:
    return Repository(
        root=tmp_path,
        manifests=[
            Manifest(tmp_path / "a" / "moon.mod.json", ("x/core",)),
            Manifest(tmp_path / "b" / "moon.mod.json", ("x/core", "y/util")),
        ],
    )


def _run(repo: Repository, fake: FakeMoon, **options: object):
    with patch("moon_dst.apply.worker.run_moon", fake):
        return process_repo(repo, ApplyOptions(**options))  # type: ignore[arg-type]


class TestSelectDependencies:
    def test_dedup_keeps_first_seen_order(self) -> None:
        assert select_dependencies(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]

    def test_substring_filter(self) -> None:
        deps = ["x/core", "y/util", "moonbitlang/core", "z/Core"]
        assert select_dependencies(deps, ["core"]) == ["x/core", "moonbitlang/core"]

    def test_any_filter_matches(self) -> None:
        assert select_dependencies(["x/core", "y/util", "z/io"], ["util", "io"]) == [
            "y/util",
            "z/io",
        ]


def test_full_plan(repo: Repository) -> None:
    fake = FakeMoon()
    result = _run(repo, fake)
    assert fake.calls == [["update"], ["add", "x/core"], ["add", "y/util"]]
    assert result.success is True
    assert result.updated_packages == ["x/core", "y/util"]
    assert result.failed_packages == []
    assert (repo.root / "justfile").read_text(encoding="utf-8") == JUSTFILE_TEMPLATE


def test_skip_update(repo: Repository) -> None:
    fake = FakeMoon()
    _run(repo, fake, skip_update=True, write_justfile=False)
    assert ["update"] not in fake.calls


def test_update_failure_returns_early(repo: Repository) -> None:
    fake = FakeMoon(fail_update=True)
    result = _run(repo, fake)
    assert fake.calls == [["update"]]
    assert result.success is False
    assert result.errors == ["moon update failed: exit code 1: registry unreachable"]
    assert not (repo.root / "justfile").exists()


def test_add_failure_continues(repo: Repository) -> None:
    fake = FakeMoon(failing=["x/core"])
    result = _run(repo, fake, write_justfile=False)
    assert fake.calls[-1] == ["add", "y/util"]
    assert result.success is False
    assert result.updated_packages == ["y/util"]
    assert result.failed_packages == [("x/core", "exit code 2: cannot resolve x/core")]


def test_add_failure_still_installs_justfile(repo: Repository) -> None:
    result = _run(repo, FakeMoon(failing=["y/util"]))
    assert result.success is False
    assert (repo.root / "justfile").exists()


def test_repeat_keeps_updated_set(repo: Repository) -> None:
    fake = FakeMoon()
    once = _run(repo, fake, write_justfile=False)
    twice = _run(repo, FakeMoon(), repeat=2, write_justfile=False)
    assert set(twice.updated_packages) == set(once.updated_packages)
    assert twice.updated_packages == ["x/core", "y/util"]


def test_repeat_records_each_failed_attempt(repo: Repository) -> None:
    fake = FakeMoon(failing=["x/core"])
    result = _run(repo, fake, repeat=3, skip_update=True, write_justfile=False)
    assert len(fake.calls) == 6
    assert [dep for dep, _ in result.failed_packages] == ["x/core"] * 3
    assert result.updated_packages == ["y/util"]


def test_package_filter(repo: Repository) -> None:
    fake = FakeMoon()
    result = _run(repo, fake, packages=("core",), write_justfile=False)
    assert fake.calls == [["update"], ["add", "x/core"]]
    assert result.updated_packages == ["x/core"]


def test_justfile_failure_does_not_fail_repo(repo: Repository) -> None:
    failing_install = MagicMock(
        side_effect=JustfileWriteError(repo.root / "justfile", PermissionError("read-only"))
    )
    with patch("moon_dst.apply.worker.install_justfile", failing_install):
        result = _run(repo, FakeMoon())
    assert result.success is True
    assert len(result.errors) == 1
    assert result.errors[0].startswith("justfile handling failed:")


def test_justfile_mode_passed_through(repo: Repository) -> None:
    result = _run(repo, FakeMoon(), justfile_mode=JustfileMode.SKIP)
    assert result.success is True
    assert not (repo.root / "justfile").exists()


def test_dry_run_never_invokes_tool(repo: Repository, capsys: pytest.CaptureFixture[str]) -> None:
    fake = FakeMoon(fail_update=True, failing=["x/core"])
    with patch("moon_dst.apply.worker.run_moon", fake):
        result = process_repo(repo, ApplyOptions(repeat=2), dry_run=True)
    assert fake.calls == []
    assert result.success is True
    assert result.updated_packages == []
    assert not (repo.root / "justfile").exists()
    out = capsys.readouterr().out
    assert f"[{repo.root}] moon update" in out
    assert out.count(f"[{repo.root}] moon add x/core") == 2
    assert f"[{repo.root}] Creating justfile" in out


def test_repeat_must_be_positive() -> None:
    with pytest.raises(ValueError, match="repeat"):
        ApplyOptions(repeat=0)
