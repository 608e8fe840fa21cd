"""Apply plan package."""

from moon_dst.apply.justfile import JUSTFILE_TEMPLATE, install_justfile
from moon_dst.apply.orchestrator import configure_pool, run_plan
from moon_dst.apply.types import ApplyOptions, ApplyReport, JustfileMode, PlanInputs, RepoResult
from moon_dst.apply.worker import process_repo, select_dependencies

__all__ = [
    "JUSTFILE_TEMPLATE",
    "ApplyOptions",
    "ApplyReport",
    "JustfileMode",
    "PlanInputs",
    "RepoResult",
    "configure_pool",
    "install_justfile",
    "process_repo",
    "run_plan",
    "select_dependencies",
]
