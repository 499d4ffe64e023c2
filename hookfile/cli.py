"""
hookfile CLI.

Usage:
    hookfile inspect                   # Show active hooks and where they come from
    hookfile inspect --json            # Same, as JSON
    hookfile checksum                  # Checksum of the project hookfile
    hookfile config show               # Show current config
    hookfile config set KEY VALUE      # Set a value in hookfile.yaml
    hookfile config get KEY            # Get a config value

Global options:
    --dir PATH                 Project root (default: cwd)
    --global-hookfile PATH     Global hookfile
    --hookfile PATH            Project hookfile (default: <dir>/.hookfile.py)
    --ignore-hookfile          Ignore both hookfiles
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from hookfile.config import (
    CONFIG_KEYS,
    Settings,
    _load_yaml_config,
    get_config_path,
    get_settings,
    save_yaml_config,
)
from hookfile.core.hooks.composer import compose_hooks, load_declarations
from hookfile.core.hooks.errors import HookfileError
from hookfile.lib.logger import setup_logging
from hookfile.models.report import HookReport


# --- Helpers ---


def _resolve_settings(args: argparse.Namespace) -> Settings:
    """Settings with command-line options applied on top."""
    project_dir = getattr(args, "dir", None)
    settings = Settings(project_root=Path(project_dir).resolve()) if project_dir else get_settings()

    overrides = {}
    if getattr(args, "global_hookfile", None):
        overrides["global_hookfile"] = Path(args.global_hookfile)
    if getattr(args, "hookfile", None):
        overrides["hookfile"] = Path(args.hookfile)
    if getattr(args, "ignore_hookfile", False):
        overrides["ignore_hookfile"] = True
    return settings.model_copy(update=overrides) if overrides else settings


def _build_report(settings: Settings) -> HookReport:
    project_root = settings.project_root
    if settings.ignore_hookfile:
        return HookReport(project_root=str(project_root))

    global_hooks, project_hooks = load_declarations(
        project_root,
        global_hookfile=settings.global_hookfile,
        hookfile=settings.hookfile,
    )
    hooks = compose_hooks(project_root, global_hooks, project_hooks)

    checksum: Optional[str] = None
    if hooks.calculate_checksum is not None:
        checksum = asyncio.run(hooks.calculate_checksum())

    return HookReport.from_declarations(
        str(project_root), global_hooks, project_hooks, checksum=checksum
    )


def _parse_value(key: str, value: str):
    if key == "ignore_hookfile":
        return value.lower() in ("1", "true", "yes", "on")
    return value


# --- Commands ---


def cmd_inspect(args: argparse.Namespace) -> None:
    """Print the hooks that will run for this project."""
    report = _build_report(_resolve_settings(args))

    if args.json:
        print(report.model_dump_json(by_alias=True, indent=2))
        return

    print(f"\nProject: {report.project_root}")
    print(f"Global hookfile:  {report.global_hookfile or '(none)'}")
    print(f"Project hookfile: {report.hookfile or '(none)'}\n")

    if not report.active:
        print("No active hooks.")
    else:
        name_width = max(len(e.hook.value) for e in report.active)
        for entry in report.active:
            print(f"  {entry.hook.value:<{name_width}}  {entry.scope:<8}  {entry.origin}")

    if report.ignored:
        print("\nIgnored (only the global hookfile may define these):")
        for entry in report.ignored:
            print(f"  {entry.hook.value}  {entry.origin}")

    if report.checksum:
        print(f"\nChecksum: {report.checksum}")


def cmd_checksum(args: argparse.Namespace) -> None:
    """Print the project hookfile checksum."""
    report = _build_report(_resolve_settings(args))
    print(report.checksum or "(none)")


def cmd_config(args: argparse.Namespace) -> None:
    """Config management: show, set, get."""
    action = getattr(args, "action", None)
    project_root = _resolve_settings(args).project_root
    if action == "set":
        _config_set(project_root, args.key, args.value)
    elif action == "get":
        _config_get(project_root, args.key)
    else:
        _config_show(project_root)


def _config_show(project_root: Path) -> None:
    """Show merged configuration."""
    settings = Settings(project_root=project_root)
    config_file = get_config_path(project_root)
    print(f"\nConfig file: {config_file}{'' if config_file.exists() else ' (not created)'}\n")
    for key in sorted(CONFIG_KEYS):
        value = getattr(settings, key)
        print(f"  {key}: {value if value is not None else '(not set)'}")
    print()


def _config_set(project_root: Path, key: str, value: str) -> None:
    """Set a config value in hookfile.yaml."""
    if key not in CONFIG_KEYS:
        print(f"Unknown config key: {key}")
        print(f"Valid keys: {', '.join(sorted(CONFIG_KEYS))}")
        sys.exit(1)

    config = _load_yaml_config(project_root)
    config[key] = _parse_value(key, value)
    config_file = save_yaml_config(project_root, config)
    print(f"Set {key} = {config[key]} in {config_file}")


def _config_get(project_root: Path, key: str) -> None:
    """Get a config value."""
    if key not in CONFIG_KEYS:
        print(f"Unknown config key: {key}")
        sys.exit(1)

    config = _load_yaml_config(project_root)
    if key in config:
        print(config[key])
        return

    value = getattr(Settings(project_root=project_root), key)
    print(value if value is not None else "(not set)")


# --- Main ---


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        prog="hookfile",
        description="hookfile: inspect global and project package-manager hooks",
    )
    parser.add_argument("--dir", "-C", help="Project root (default: cwd)")
    parser.add_argument("--global-hookfile", help="Path to the global hookfile")
    parser.add_argument("--hookfile", help="Path to the project hookfile")
    parser.add_argument(
        "--ignore-hookfile", action="store_true",
        help="Ignore both hookfiles",
    )
    parser.add_argument("--log-level", help="Log level (default: from config)")
    subparsers = parser.add_subparsers(dest="command")

    # inspect
    inspect_parser = subparsers.add_parser("inspect", help="Show active hooks")
    inspect_parser.add_argument("--json", action="store_true", help="Print JSON")

    # checksum
    subparsers.add_parser("checksum", help="Print the project hookfile checksum")

    # config subcommand
    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_sub = config_parser.add_subparsers(dest="action")
    config_sub.add_parser("show", help="Show current config")
    config_set_parser = config_sub.add_parser("set", help="Set a config value")
    config_set_parser.add_argument("key", help="Config key")
    config_set_parser.add_argument("value", help="Config value")
    config_get_parser = config_sub.add_parser("get", help="Get a config value")
    config_get_parser.add_argument("key", help="Config key")

    args = parser.parse_args(argv)

    setup_logging(level=args.log_level)

    try:
        if args.command == "inspect":
            cmd_inspect(args)
        elif args.command == "checksum":
            cmd_checksum(args)
        elif args.command == "config":
            cmd_config(args)
        else:
            parser.print_help()
    except HookfileError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
