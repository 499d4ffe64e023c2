"""
Hookfile path resolution.
"""

from pathlib import Path
from typing import Optional

# Project-scope hookfile looked up in the project root when not overridden
DEFAULT_HOOKFILE_NAME = ".hookfile.py"


def resolve_path(path: Path | str, base: Path | str) -> Path:
    """Resolve ``path`` against ``base`` unless it is already absolute.

    A leading ``~`` is expanded first, so ``~/hooks.py`` never ends up
    inside the project.
    """
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return Path(base) / p


def get_hookfile_path(project_root: Path | str, hookfile: Optional[Path | str] = None) -> Path:
    """Path of the project-scope hookfile."""
    if not hookfile:
        return Path(project_root) / DEFAULT_HOOKFILE_NAME
    return resolve_path(hookfile, project_root)
