"""External tool adapters."""

from moon_dst.tooling.moon import check_moon_available, resolve_moon_bin, run_moon

__all__ = ["check_moon_available", "resolve_moon_bin", "run_moon"]
