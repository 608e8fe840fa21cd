"""Per-repository apply plan: moon update, moon add for each dep, justfile."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

import click

from moon_dst.apply.justfile import install_justfile
from moon_dst.apply.types import ApplyOptions, RepoResult
from moon_dst.discovery.types import Repository
from moon_dst.errors import JustfileWriteError, ToolFailedError
from moon_dst.logging import repo_context
from moon_dst.tooling.moon import run_moon

logger = logging.getLogger(__name__)


def select_dependencies(deps: Iterable[str], filters: Sequence[str] = ()) -> list[str]:
    """Deduplicate *deps* keeping first-seen order; keep names containing any filter."""
    selected: dict[str, None] = {}
    for dep in deps:
        if filters and not any(pattern in dep for pattern in filters):
            continue
        selected.setdefault(dep, None)
    return list(selected)


def process_repo(
    repo: Repository,
    options: ApplyOptions,
    *,
    dry_run: bool = False,
    verbose: bool = False,
) -> RepoResult:
    result = RepoResult(repo_root=repo.root)
    with repo_context(repo.root):
        _run_plan(repo, options, result, dry_run=dry_run, verbose=verbose)
    return result


def _run_plan(
    repo: Repository,
    options: ApplyOptions,
    result: RepoResult,
    *,
    dry_run: bool,
    verbose: bool,
) -> None:
    root = repo.root

    if not options.skip_update:
        if verbose or dry_run:
            click.echo(f"[{root}] moon update")
        if not dry_run:
            try:
                run_moon(["update"], root)
            except ToolFailedError as exc:
                logger.warning("moon update failed in %s: %s", root, exc)
                result.record_error(f"moon update failed: {exc}")
                return
            if verbose:
                click.echo(f"[{root}] moon update succeeded")

    deps = select_dependencies(repo.dependencies(), options.packages)
    logger.debug("%d dependencies selected in %s", len(deps), root)

    for _ in range(options.repeat):
        for dep in deps:
            if verbose or dry_run:
                click.echo(f"[{root}] moon add {dep}")
            if dry_run:
                continue
            try:
                run_moon(["add", dep], root)
            except ToolFailedError as exc:
                logger.warning("moon add %s failed in %s: %s", dep, root, exc)
                result.record_failed(dep, str(exc))
            else:
                result.record_added(dep)

    if options.write_justfile:
        try:
            install_justfile(root, options.justfile_mode, dry_run=dry_run, verbose=verbose)
        except JustfileWriteError as exc:
            result.record_error(f"justfile handling failed: {exc}", fails=False)
