"""
Hook declaration and cooked-hook models.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping, Optional

from hookfile.core.hooks.categories import HookCategory


@dataclass(frozen=True)
class HookDeclarationSet:
    """Hooks exported by a single hookfile.

    ``filename`` identifies where the hooks came from and is used as the
    ``from`` field of every log record the hooks emit.
    """

    filename: Path
    read_package: Optional[Callable[..., Any]] = None
    after_all_resolved: Optional[Callable[..., Any]] = None
    filter_log: Optional[Callable[..., Any]] = None
    import_package: Optional[Callable[..., Any]] = None
    pre_resolution: Optional[Callable[..., Any]] = None
    fetchers: Optional[Mapping[str, Callable[..., Any]]] = None

    def get(self, category: HookCategory) -> Any:
        return getattr(self, category.value)

    def declared(self) -> list[HookCategory]:
        """Categories this hookfile actually defines."""
        return [c for c in HookCategory if self.get(c) is not None]


@dataclass(frozen=True)
class CookedHooks:
    """Merged, wrapped hooks handed to the resolution pipeline.

    Sequence categories are always present (possibly empty) so callers never
    branch on presence. ``CookedHooks()`` is the bundle for "no hookfiles".
    """

    read_package: tuple[Callable[[Any], Any], ...] = ()
    after_all_resolved: tuple[Callable[[Any], Any], ...] = ()
    filter_log: tuple[Callable[[Any], Any], ...] = ()
    import_package: Optional[Callable[..., Any]] = None
    pre_resolution: Optional[Callable[[Any], Any]] = None
    fetchers: Optional[Mapping[str, Callable[..., Any]]] = None
    calculate_checksum: Optional[Callable[[], Awaitable[str]]] = None
