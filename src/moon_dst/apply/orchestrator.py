"""Run the per-repository plan across a bounded thread pool."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

from moon_dst.apply.types import ApplyOptions, ApplyReport, RepoResult
from moon_dst.apply.worker import process_repo
from moon_dst.config import default_jobs
from moon_dst.discovery.types import Repository

logger = logging.getLogger(__name__)

_pool_lock = threading.Lock()
_pool_size: int | None = None


def configure_pool(jobs: int | None = None) -> int:
    """Fix the process-wide worker count on first call; later calls keep the first value."""
    global _pool_size
    with _pool_lock:
        if _pool_size is None:
            _pool_size = max(1, jobs or default_jobs())
        elif jobs and jobs != _pool_size:
            logger.debug(
                "worker pool already configured with %d threads; ignoring %d", _pool_size, jobs
            )
        return _pool_size


def _reset_pool() -> None:
    global _pool_size
    with _pool_lock:
        _pool_size = None


def run_plan(
    repos: Sequence[Repository],
    options: ApplyOptions,
    *,
    jobs: int | None = None,
    dry_run: bool = False,
    verbose: bool = False,
) -> ApplyReport:
    """Process every repository and collect results sorted by repo root.

    With fail-fast, the first failed result stops new repositories from
    starting; repositories already running always finish.
    """
    workers = configure_pool(jobs)
    stop = threading.Event()
    lock = threading.Lock()
    results: list[RepoResult] = []

    def _work(repo: Repository) -> None:
        if options.fail_fast and stop.is_set():
            logger.info("fail-fast: skipping %s", repo.root)
            return
        result = process_repo(repo, options, dry_run=dry_run, verbose=verbose)
        with lock:
            results.append(result)
        if options.fail_fast and not result.success:
            stop.set()

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="moon-dst") as pool:
        futures = [pool.submit(_work, repo) for repo in repos]
        for future in as_completed(futures):
            future.result()

    results.sort(key=lambda item: item.repo_root)
    return ApplyReport(results=results, total_repos=len(repos), fail_fast=options.fail_fast)
