"""
Configuration management for hookfile.

Precedence: env vars > .env file > hookfile.yaml > defaults

Config file: <project_root>/hookfile.yaml
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "hookfile.yaml"

# Known config keys that can be set via `hookfile config set`
CONFIG_KEYS = {
    "global_hookfile", "hookfile", "ignore_hookfile", "log_level", "hook_log_level",
}


def _resolve_project_root() -> Path:
    """Resolve project root from env or cwd, before Settings init."""
    raw = os.environ.get("HOOKFILE_PROJECT_ROOT", "")
    if raw:
        return Path(raw).expanduser().resolve()
    return Path.cwd().resolve()


def _load_yaml_config(project_root: Path) -> dict[str, Any]:
    """Load hookfile.yaml from the project root."""
    config_file = get_config_path(project_root)
    if not config_file.exists():
        return {}
    try:
        with open(config_file) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            logger.warning(f"{CONFIG_FILENAME} is not a dict, ignoring: {config_file}")
            return {}
        return data
    except Exception as e:
        logger.warning(f"Error loading {CONFIG_FILENAME}: {e}")
        return {}


def save_yaml_config(project_root: Path, data: dict[str, Any]) -> Path:
    """Write config values to <project_root>/hookfile.yaml."""
    config_file = get_config_path(project_root)
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    return config_file


def get_config_path(project_root: Path) -> Path:
    """Get the hookfile.yaml path for a project."""
    return project_root / CONFIG_FILENAME


class Settings(BaseSettings):
    """Hookfile configuration. Precedence: env vars > .env > hookfile.yaml > defaults."""

    project_root: Path = Field(
        default_factory=Path.cwd,
        description="Project directory hooks are resolved against",
    )
    global_hookfile: Optional[Path] = Field(
        default=None,
        description="Path to the global hookfile (relative paths resolve against project_root)",
    )
    hookfile: Optional[Path] = Field(
        default=None,
        description="Override for the project hookfile (defaults to <project_root>/.hookfile.py)",
    )
    ignore_hookfile: bool = Field(
        default=False,
        description="Skip both hookfiles entirely",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    hook_log_level: str = Field(
        default="DEBUG",
        description="Level for context.log output from hookfiles (hookfile.hooks logger)",
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )

    model_config = {
        "env_prefix": "HOOKFILE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @model_validator(mode="before")
    @classmethod
    def _inject_yaml_config(cls, data: Any) -> Any:
        """Inject hookfile.yaml values as fallbacks below env vars and .env."""
        if not isinstance(data, dict):
            data = {}

        project_root = data.get("project_root")
        project_root = Path(project_root) if project_root else _resolve_project_root()
        yaml_config = _load_yaml_config(project_root)

        for key, value in yaml_config.items():
            if key not in data or data[key] is None:
                env_val = os.environ.get(f"HOOKFILE_{key.upper()}")
                if env_val is None:
                    data[key] = value

        data.setdefault("project_root", project_root)
        return data


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings

