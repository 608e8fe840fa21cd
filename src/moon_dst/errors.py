"""moon-dst exception hierarchy.

All moon-dst exceptions inherit from MoonDstError. ``fatal`` marks the
errors that abort a command; the rest are recorded per repository or
per manifest and the run continues.
"""

from __future__ import annotations

from pathlib import Path


class MoonDstError(Exception):
    """Base exception for all moon-dst errors."""

    def __init__(self, message: str = "", *, fatal: bool = False) -> None:
        super().__init__(message)
        self.fatal = fatal


class BadRootError(MoonDstError):
    """The scan root does not exist or is not a directory."""

    def __init__(self, root: Path | str, reason: str = "") -> None:
        message = f"Invalid root path: {root}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, fatal=True)
        self.root = Path(root)


class WalkError(MoonDstError):
    """A directory could not be listed during discovery."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"Failed to walk {path}: {cause}", fatal=True)
        self.path = path
        self.cause = cause


class ManifestParseError(MoonDstError):
    """A single moon.mod.json could not be read or decoded."""

    def __init__(self, path: Path, cause: str) -> None:
        super().__init__(f"Failed to parse {path}: {cause}")
        self.path = path
        self.cause = cause


class ToolUnavailableError(MoonDstError):
    """The moon CLI could not be found or did not answer `moon version`."""

    def __init__(self, message: str = "") -> None:
        super().__init__(
            message
            or "'moon' CLI not found. Checked PATH and ~/.moon/bin/moon. "
            "Please install MoonBit first.",
            fatal=True,
        )


class ToolFailedError(MoonDstError):
    """A moon sub-command exited with a non-zero status."""

    def __init__(self, exit_code: int, stderr: str) -> None:
        super().__init__(f"exit code {exit_code}: {stderr}")
        self.exit_code = exit_code
        self.stderr = stderr


class JustfileWriteError(MoonDstError):
    """The justfile could not be written."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"Failed to write {path}: {cause}")
        self.path = path
        self.cause = cause
