"""Path-component ignore rules applied while walking the tree."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import PurePath

DEFAULT_IGNORES: frozenset[str] = frozenset(
    {"target", "node_modules", "dist", "build", "vendor", "skills"}
)


def build_ignore_set(extra: Iterable[str] = (), *, use_defaults: bool = True) -> frozenset[str]:
    names = set(extra)
    if use_defaults:
        names |= DEFAULT_IGNORES
    return frozenset(names)


def is_ignored(path: PurePath | str, ignore_set: Iterable[str]) -> bool:
    """True when any normal component is hidden (dot-prefixed) or named in *ignore_set*.

    The dot-prefix rule holds even when *ignore_set* is empty.
    """
    names = ignore_set if isinstance(ignore_set, (set, frozenset)) else set(ignore_set)
    pure = PurePath(path)
    for part in pure.parts:
        if part == pure.anchor or part == "..":
            continue
        if part.startswith(".") or part in names:
            return True
    return False
