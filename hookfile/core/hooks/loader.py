"""
Hookfile loader: imports a hookfile and extracts its hook declarations.

A hookfile is a Python script exporting a module-level ``hooks`` mapping:

    # .hookfile.py
    def read_package(pkg, context):
        if pkg["name"] == "left-pad":
            context.log("pinning left-pad")
            pkg["dependencies"] = {}
        return pkg

    hooks = {"read_package": read_package}

Unknown keys are ignored with a warning; everything downstream only ever
sees the fixed set of HookCategory values.
"""

import functools
import importlib.util
import inspect
import logging
from collections.abc import Mapping, MutableMapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Optional

from hookfile.core.hooks.categories import HookCategory
from hookfile.core.hooks.errors import (
    BadReadPackageHookError,
    HookfileLoadError,
    HookfileNotFoundError,
    InvalidHookError,
)
from hookfile.core.hooks.models import HookDeclarationSet

logger = logging.getLogger(__name__)

# Manifest fields a read_package hook must leave as mappings
DEPENDENCY_FIELDS = (
    "dependencies",
    "devDependencies",
    "optionalDependencies",
    "peerDependencies",
)


def load_hookfile(
    path: Path | str,
    project_root: Path | str,
    *,
    required: bool = False,
) -> Optional[HookDeclarationSet]:
    """Load the hookfile at ``path``.

    Returns None when the file does not exist, unless ``required`` is set,
    in which case HookfileNotFoundError is raised. Errors raised while the
    hookfile executes are re-raised as HookfileLoadError.
    """
    path = Path(path)
    if not path.is_file():
        if required:
            raise HookfileNotFoundError(path)
        logger.debug(f"No hookfile at {path}")
        return None

    module = _import_hookfile(path)

    raw_hooks = getattr(module, "hooks", None)
    if raw_hooks is None:
        logger.info(
            f"Hookfile {path} defines no hooks",
            extra={"extra": {"prefix": str(project_root)}},
        )
        return HookDeclarationSet(filename=path)
    if not isinstance(raw_hooks, Mapping):
        raise HookfileLoadError(
            path,
            message=f"hooks must be a mapping, got {type(raw_hooks).__name__} (in {path})",
        )

    declarations = _parse_hooks(path, raw_hooks)
    logger.info(
        f"Using hooks from: {path}",
        extra={"extra": {"prefix": str(project_root)}},
    )
    return HookDeclarationSet(filename=path, **declarations)


def _import_hookfile(path: Path) -> Any:
    name = path.stem.strip(".") or "module"
    spec = importlib.util.spec_from_file_location(f"hookfile_{name}", path)
    if not spec or not spec.loader:
        raise HookfileLoadError(path, message=f"Cannot import hookfile: {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        logger.error(f"A syntax or runtime error in the hookfile {path}: {e}")
        raise HookfileLoadError(path, e) from e
    return module


def _parse_hooks(path: Path, raw_hooks: Mapping) -> dict[str, Any]:
    known = {c.value for c in HookCategory}
    declarations: dict[str, Any] = {}

    for key, value in raw_hooks.items():
        if key not in known:
            logger.warning(f"Ignoring unknown hook {key!r} in {path}")
            continue
        if value is None:
            continue

        category = HookCategory(key)
        if category == HookCategory.FETCHERS:
            declarations[key] = _check_fetchers(path, value)
        elif not callable(value):
            raise InvalidHookError(path, key, "should be a function")
        elif category == HookCategory.READ_PACKAGE:
            declarations[key] = _checked_read_package(path, value)
        else:
            declarations[key] = value

    return declarations


def _check_fetchers(path: Path, fetchers: Any) -> Mapping[str, Callable[..., Any]]:
    if not isinstance(fetchers, Mapping):
        raise InvalidHookError(path, "fetchers", "should be a mapping of fetcher functions")
    for name, fetcher in fetchers.items():
        if not callable(fetcher):
            raise InvalidHookError(path, f"fetchers.{name}", "should be a function")
    return MappingProxyType(dict(fetchers))


def _validate_manifest(path: Path, manifest: Any) -> Any:
    if manifest is None:
        raise BadReadPackageHookError(
            path, "read_package hook did not return a package manifest object."
        )
    if not isinstance(manifest, Mapping):
        raise BadReadPackageHookError(
            path,
            f"read_package hook returned {type(manifest).__name__} instead of a package manifest object.",
        )
    for field in DEPENDENCY_FIELDS:
        value = manifest.get(field)
        if value is not None and not isinstance(value, Mapping):
            raise BadReadPackageHookError(
                path,
                f"read_package hook returned package manifest object's property '{field}' must be a mapping.",
            )
    return manifest


def _checked_read_package(path: Path, hook: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap a read_package hook so a broken manifest fails at the hook, not later."""

    async def _await_and_validate(pending: Any) -> Any:
        return _validate_manifest(path, await pending)

    @functools.wraps(hook)
    def read_package(pkg: Any, *args: Any, **kwargs: Any) -> Any:
        if isinstance(pkg, MutableMapping):
            for field in DEPENDENCY_FIELDS:
                if pkg.get(field) is None:
                    pkg[field] = {}
        result = hook(pkg, *args, **kwargs)
        if inspect.isawaitable(result):
            return _await_and_validate(result)
        return _validate_manifest(path, result)

    return read_package
