"""Click CLI group: scan, apply, and just commands."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from moon_dst import __version__
from moon_dst.apply.justfile import install_justfile
from moon_dst.apply.orchestrator import run_plan
from moon_dst.apply.types import ApplyOptions, JustfileMode, PlanInputs
from moon_dst.cli.render import render_apply_report, render_scan_json, render_scan_text
from moon_dst.config import default_jobs, get_settings
from moon_dst.discovery.grouper import group_repositories
from moon_dst.discovery.ignore import build_ignore_set
from moon_dst.discovery.scanner import scan_manifests
from moon_dst.discovery.types import Repository
from moon_dst.errors import JustfileWriteError, MoonDstError
from moon_dst.logging import configure_logging, resolve_level
from moon_dst.tooling.moon import check_moon_available

NO_MANIFESTS = "No moon.mod.json files found."
MODE_CHOICE = click.Choice([mode.value for mode in JustfileMode])

_COMMON_OPTIONS: list[Callable[[Any], Any]] = [
    click.option(
        "--root",
        type=click.Path(path_type=Path),
        default=Path("."),
        show_default=True,
        help="Root directory to search from.",
    ),
    click.option(
        "--ignore",
        "-i",
        "ignores",
        multiple=True,
        help="Directory name to ignore (repeatable).",
    ),
    click.option("--no-default-ignore", is_flag=True, help="Disable default ignore rules."),
    click.option(
        "--jobs",
        "-j",
        type=click.IntRange(min=1),
        default=None,
        help="Number of parallel jobs (default: CPU cores / 2).",
    ),
    click.option("--dry-run", is_flag=True, help="Show commands without executing."),
    click.option("--verbose", "-v", is_flag=True, help="Enable verbose output."),
]


def common_options(func: Callable[..., Any]) -> Callable[..., Any]:
    for option in reversed(_COMMON_OPTIONS):
        func = option(func)
    return func


def _plan_inputs(
    *,
    root: Path,
    ignores: tuple[str, ...],
    no_default_ignore: bool,
    jobs: int | None,
    dry_run: bool,
    verbose: bool,
    apply: ApplyOptions | None = None,
) -> PlanInputs:
    settings = get_settings()
    configure_logging(
        resolve_level(verbose, settings.log_level),
        json_output=int(settings.log_json) == 1,
    )
    return PlanInputs(
        root=root,
        ignore_set=build_ignore_set(ignores, use_defaults=not no_default_ignore),
        jobs=jobs or default_jobs(settings),
        dry_run=dry_run,
        verbose=verbose,
        apply=apply or ApplyOptions(),
    )


def _discover(inputs: PlanInputs) -> list[Repository]:
    """Pre-flight the moon CLI, then scan and group manifests."""
    try:
        check_moon_available()
        manifests = scan_manifests(inputs.root, inputs.ignore_set, verbose=inputs.verbose)
    except MoonDstError as exc:
        raise click.ClickException(str(exc)) from exc
    return group_repositories(manifests)


@click.group()
@click.version_option(__version__, prog_name="moon-dst")
def cli() -> None:
    """MoonBit dependency updater CLI (moon dust)."""


@cli.command()
@common_options
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format.")
def scan(json_output: bool, **common: Any) -> None:
    """Scan for moon.mod.json files and list dependencies."""
    repos = _discover(_plan_inputs(**common))
    click.echo(render_scan_json(repos) if json_output else render_scan_text(repos))


@cli.command()
@common_options
@click.option("--skip-update", is_flag=True, help="Skip the initial moon update.")
@click.option(
    "--repeat",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of times to repeat moon add.",
)
@click.option(
    "--package",
    "-p",
    "packages",
    multiple=True,
    help="Only update dependencies containing this substring (repeatable).",
)
@click.option("--fail-fast", is_flag=True, help="Stop starting new repos after the first failure.")
@click.option("--no-justfile", is_flag=True, help="Skip adding a justfile to repos.")
@click.option(
    "--justfile-mode",
    type=MODE_CHOICE,
    default=JustfileMode.CREATE.value,
    show_default=True,
    help="Justfile handling mode.",
)
def apply(
    skip_update: bool,
    repeat: int,
    packages: tuple[str, ...],
    fail_fast: bool,
    no_justfile: bool,
    justfile_mode: str,
    **common: Any,
) -> None:
    """Apply dependency updates (moon update + moon add)."""
    options = ApplyOptions(
        skip_update=skip_update,
        repeat=repeat,
        packages=packages,
        fail_fast=fail_fast,
        write_justfile=not no_justfile,
        justfile_mode=JustfileMode(justfile_mode),
    )
    inputs = _plan_inputs(apply=options, **common)
    repos = _discover(inputs)
    if not repos:
        click.echo(NO_MANIFESTS)
        return

    report = run_plan(
        repos,
        inputs.apply,
        jobs=inputs.jobs,
        dry_run=inputs.dry_run,
        verbose=inputs.verbose,
    )
    click.echo(render_apply_report(report))
    if not report.success:
        sys.exit(1)


@cli.command()
@common_options
@click.option(
    "--mode",
    type=MODE_CHOICE,
    default=JustfileMode.CREATE.value,
    show_default=True,
    help="Justfile handling mode.",
)
def just(mode: str, **common: Any) -> None:
    """Add the MoonBit justfile to every discovered repo."""
    inputs = _plan_inputs(**common)
    repos = _discover(inputs)
    if not repos:
        click.echo(NO_MANIFESTS)
        return

    created = 0
    skipped = 0
    for repo in repos:
        try:
            was_created = install_justfile(
                repo.root,
                JustfileMode(mode),
                dry_run=inputs.dry_run,
                verbose=inputs.verbose,
            )
        except JustfileWriteError as exc:
            click.echo(f"[{repo.root}] Error: {exc}", err=True)
            continue
        if was_created:
            created += 1
        else:
            skipped += 1

    click.echo(f"\nSummary: {created} created, {skipped} skipped")


def main() -> None:
    """Console entry point; every failure, usage errors included, exits with status 1."""
    try:
        code = cli.main(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        sys.exit(1)
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    sys.exit(code if isinstance(code, int) else 0)
