"""
Errors raised while locating, loading and validating hookfiles.

Every error carries the offending hookfile path so a failed run can be
attributed to the file that caused it.
"""

from pathlib import Path
from typing import Optional


class HookfileError(Exception):
    """Base exception for all hookfile errors."""

    def __init__(self, path: Path | str, message: str) -> None:
        self.path = Path(path)
        super().__init__(message)


class HookfileNotFoundError(HookfileError):
    """Raised when an explicitly configured hookfile does not exist."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(path, f"Hookfile not found: {path}")


class HookfileLoadError(HookfileError):
    """Raised when a hookfile fails while being imported."""

    def __init__(self, path: Path | str, cause: Optional[BaseException] = None,
                 message: Optional[str] = None) -> None:
        self.cause = cause
        if message is None:
            detail = f"{type(cause).__name__}: {cause}" if cause else "unknown error"
            message = f"Error during hookfile execution. hookfile: {path}. {detail}"
        super().__init__(path, message)


class InvalidHookError(HookfileError):
    """Raised when a declared hook has the wrong shape."""

    def __init__(self, path: Path | str, category: str, reason: str) -> None:
        self.category = category
        super().__init__(path, f"hooks.{category} {reason} (in {path})")


class BadReadPackageHookError(HookfileError):
    """Raised when a read_package hook returns something that is not a manifest."""

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(path, f"{message} (in {path})")
