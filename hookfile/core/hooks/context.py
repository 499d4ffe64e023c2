"""
Execution contexts handed to hooks at call time.

A context is created once per wrapped hook and closes over its origin,
category and project root. Every ``log`` call emits exactly one record to
the sink; nothing is buffered here.
"""

from pathlib import Path
from typing import Optional

from hookfile.core.hooks.categories import HookCategory
from hookfile.lib.logger import HookLogSink, get_hook_sink


class HookContext:
    """Second argument of read_package, after_all_resolved and filter_log."""

    __slots__ = ("origin", "category", "project_root", "_sink")

    def __init__(self, origin: Path | str, project_root: Path | str,
                 category: HookCategory, sink: HookLogSink):
        self.origin = str(origin)
        self.project_root = str(project_root)
        self.category = category
        self._sink = sink

    def log(self, message: str) -> None:
        self._sink.debug({
            "from": self.origin,
            "hook": self.category.value,
            "message": message,
            "prefix": self.project_root,
        })

    def __repr__(self) -> str:
        return f"HookContext(hook={self.category.value!r}, from={self.origin!r})"


class PreResolutionLogger:
    """Logger passed to the global pre_resolution hook."""

    __slots__ = ("project_root", "_sink")

    def __init__(self, project_root: Path | str, sink: HookLogSink):
        self.project_root = str(project_root)
        self._sink = sink

    def _record(self, message: str) -> dict:
        return {
            "message": message,
            "prefix": self.project_root,
            "hook": HookCategory.PRE_RESOLUTION.value,
        }

    def info(self, message: str) -> None:
        self._sink.info(self._record(message))

    def warn(self, message: str) -> None:
        self._sink.warn(self._record(message))


def make_context(
    origin: Path | str,
    project_root: Path | str,
    category: HookCategory,
    sink: Optional[HookLogSink] = None,
) -> HookContext:
    """Create the logging context for one hook from one hookfile."""
    return HookContext(origin, project_root, category, sink or get_hook_sink())


def make_pre_resolution_logger(
    project_root: Path | str,
    sink: Optional[HookLogSink] = None,
) -> PreResolutionLogger:
    """Create the info/warn logger for the pre_resolution hook."""
    return PreResolutionLogger(project_root, sink or get_hook_sink())
