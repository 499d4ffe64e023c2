"""
Hook composer: merges global and project hookfiles into one CookedHooks.

Precedence rules:
    - read_package, after_all_resolved and filter_log run in a fixed order,
      global hookfile first, then project hookfile. The project hook sees the
      output of the global one, so a global policy can be refined but not
      bypassed.
    - import_package, pre_resolution and fetchers come from the global
      hookfile only. A project hookfile cannot change install mechanics,
      fetching or the pre-resolution step.
    - calculate_checksum exists iff a project hookfile was found, whether or
      not it declares any hook.

Composition does no I/O and raises nothing; hook failures surface to
whoever calls the cooked hook.
"""

import functools
import inspect
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Iterable, Optional

from hookfile.core.checksum import create_base32_hash_from_file
from hookfile.core.hooks.categories import GLOBAL_ONLY_CATEGORIES, MULTI_VALUE_CATEGORIES, HookCategory
from hookfile.core.hooks.context import HookContext, make_context, make_pre_resolution_logger
from hookfile.core.hooks.loader import load_hookfile
from hookfile.core.hooks.models import CookedHooks, HookDeclarationSet
from hookfile.core.paths import get_hookfile_path, resolve_path
from hookfile.lib.logger import HookLogSink, get_hook_sink

logger = logging.getLogger(__name__)

ChecksumFn = Callable[[Path], Awaitable[str]]


def _bind(hook: Callable[..., Any], context: HookContext) -> Callable[[Any], Any]:
    def cooked(value: Any) -> Any:
        return hook(value, context)

    cooked.__name__ = getattr(hook, "__name__", context.category.value)
    cooked.__qualname__ = cooked.__name__
    return cooked


def _bind_pre_resolution(hook: Callable[..., Any], project_root: Path, sink: HookLogSink) -> Callable[[Any], Any]:
    pre_logger = make_pre_resolution_logger(project_root, sink)

    def pre_resolution(ctx: Any) -> Any:
        return hook(ctx, pre_logger)

    return pre_resolution


def compose_hooks(
    project_root: Path | str,
    global_hooks: Optional[HookDeclarationSet],
    project_hooks: Optional[HookDeclarationSet],
    *,
    sink: Optional[HookLogSink] = None,
    checksum: ChecksumFn = create_base32_hash_from_file,
) -> CookedHooks:
    """Merge two optional declaration sets into a CookedHooks bundle."""
    if global_hooks is None and project_hooks is None:
        return CookedHooks()

    project_root = Path(project_root)
    sink = sink or get_hook_sink()

    # Explicit precedence: global before project
    ordered = [d for d in (global_hooks, project_hooks) if d is not None]

    sequences: dict[str, tuple[Callable[[Any], Any], ...]] = {}
    for category in MULTI_VALUE_CATEGORIES:
        sequences[category.value] = tuple(
            _bind(decl.get(category), make_context(decl.filename, project_root, category, sink))
            for decl in ordered
            if decl.get(category) is not None
        )

    if project_hooks is not None:
        for category in GLOBAL_ONLY_CATEGORIES:
            if project_hooks.get(category) is not None:
                logger.debug(
                    f"Ignoring {category.value} from project hookfile {project_hooks.filename}: "
                    f"only the global hookfile may define it"
                )

    singles: dict[str, Any] = {c.value: None for c in GLOBAL_ONLY_CATEGORIES}
    if global_hooks is not None:
        singles[HookCategory.IMPORT_PACKAGE.value] = global_hooks.import_package
        if global_hooks.fetchers is not None:
            singles[HookCategory.FETCHERS.value] = MappingProxyType(dict(global_hooks.fetchers))
        if global_hooks.pre_resolution is not None:
            singles[HookCategory.PRE_RESOLUTION.value] = _bind_pre_resolution(
                global_hooks.pre_resolution, project_root, sink
            )

    calculate_checksum = None
    if project_hooks is not None:
        calculate_checksum = functools.partial(checksum, project_hooks.filename)

    return CookedHooks(**sequences, **singles, calculate_checksum=calculate_checksum)


def load_declarations(
    project_root: Path | str,
    *,
    global_hookfile: Optional[Path | str] = None,
    hookfile: Optional[Path | str] = None,
) -> tuple[Optional[HookDeclarationSet], Optional[HookDeclarationSet]]:
    """Load the (global, project) declaration sets.

    A configured global hookfile or an explicit project ``hookfile`` that
    does not exist is an error; a missing default ``.hookfile.py`` just
    means the project has no hooks.
    """
    project_root = Path(project_root)

    global_hooks = None
    if global_hookfile:
        global_hooks = load_hookfile(
            resolve_path(global_hookfile, project_root), project_root, required=True
        )

    project_hooks = load_hookfile(
        get_hookfile_path(project_root, hookfile), project_root, required=bool(hookfile)
    )
    return global_hooks, project_hooks


def require_hooks(
    project_root: Path | str,
    *,
    global_hookfile: Optional[Path | str] = None,
    hookfile: Optional[Path | str] = None,
    ignore_hookfile: bool = False,
    sink: Optional[HookLogSink] = None,
    checksum: ChecksumFn = create_base32_hash_from_file,
) -> CookedHooks:
    """Locate, load and compose the global and project hookfiles.

    With ``ignore_hookfile`` neither hookfile is read and the empty bundle
    is returned.
    """
    if ignore_hookfile:
        return CookedHooks()
    global_hooks, project_hooks = load_declarations(
        project_root, global_hookfile=global_hookfile, hookfile=hookfile
    )
    return compose_hooks(project_root, global_hooks, project_hooks, sink=sink, checksum=checksum)


async def run_hook_chain(transforms: Iterable[Callable[[Any], Any]], value: Any) -> Any:
    """Feed ``value`` through ``transforms`` in order, awaiting async results."""
    for transform in transforms:
        value = transform(value)
        if inspect.isawaitable(value):
            value = await value
    return value


def filter_log(hooks: CookedHooks, log: Any) -> bool:
    """Return True if every filter_log hook accepts ``log``.

    All filters are invoked, global first, even after one rejects.
    """
    results = [bool(f(log)) for f in hooks.filter_log]
    return all(results)
