"""
Hookfile system: global and project hookfiles composed into one set of hooks.
"""

from hookfile.core.hooks.categories import HookCategory
from hookfile.core.hooks.composer import (
    compose_hooks,
    filter_log,
    load_declarations,
    require_hooks,
    run_hook_chain,
)
from hookfile.core.hooks.context import HookContext, PreResolutionLogger
from hookfile.core.hooks.errors import (
    BadReadPackageHookError,
    HookfileError,
    HookfileLoadError,
    HookfileNotFoundError,
    InvalidHookError,
)
from hookfile.core.hooks.loader import load_hookfile
from hookfile.core.hooks.models import CookedHooks, HookDeclarationSet

__all__ = [
    "BadReadPackageHookError",
    "CookedHooks",
    "HookCategory",
    "HookContext",
    "HookDeclarationSet",
    "HookfileError",
    "HookfileLoadError",
    "HookfileNotFoundError",
    "InvalidHookError",
    "PreResolutionLogger",
    "compose_hooks",
    "filter_log",
    "load_declarations",
    "load_hookfile",
    "require_hooks",
    "run_hook_chain",
]
