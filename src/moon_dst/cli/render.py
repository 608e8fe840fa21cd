"""Human and JSON renderings of scan and apply results."""

from __future__ import annotations

import json
from collections.abc import Sequence

from moon_dst.apply.types import ApplyReport
from moon_dst.discovery.types import Repository


def scan_payload(repos: Sequence[Repository]) -> dict[str, object]:
    return {
        "repos": [
            {
                "repo_root": str(repo.root),
                "moon_mods": [
                    {"path": str(repo.relative_path(manifest)), "deps": list(manifest.deps)}
                    for manifest in repo.manifests
                ],
            }
            for repo in repos
        ]
    }


def render_scan_json(repos: Sequence[Repository]) -> str:
    return json.dumps(scan_payload(repos), indent=2, ensure_ascii=False)


def render_scan_text(repos: Sequence[Repository]) -> str:
    lines: list[str] = []
    for repo in repos:
        lines.append(f"Repository: {repo.root}")
        for manifest in repo.manifests:
            lines.append(f"  {repo.relative_path(manifest)}")
            lines.extend(f"    - {dep}" for dep in manifest.deps)
        lines.append("")

    total_mods = sum(len(repo.manifests) for repo in repos)
    total_deps = sum(len(manifest.deps) for repo in repos for manifest in repo.manifests)
    lines.append(
        f"Summary: {len(repos)} repos, {total_mods} moon.mod.json files, {total_deps} dependencies"
    )
    return "\n".join(lines)


def render_apply_report(report: ApplyReport) -> str:
    lines = ["", "=== Results ===", ""]
    for result in report.results:
        status = "OK" if result.success else "FAILED"
        lines.append(f"[{status}] {result.repo_root}")
        if result.updated_packages:
            lines.append(f"  Updated: {len(result.updated_packages)} packages")
        if result.failed_packages:
            lines.append("  Failed packages:")
            lines.extend(f"    - {dep}: {message}" for dep, message in result.failed_packages)
        lines.extend(f"  Error: {message}" for message in result.errors)

    lines.append("")
    lines.append(f"Summary: {report.succeeded}/{len(report.results)} repos succeeded")
    if report.stopped_early:
        skipped = report.total_repos - len(report.results)
        lines.append(f"Stopped early (--fail-fast): {skipped} repos not processed")
    return "\n".join(lines)
