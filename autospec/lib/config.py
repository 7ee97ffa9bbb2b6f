"""
Configuration loader for autospec.

Settings are layered, highest priority first:
- AUTOSPEC_* environment variables
- Project config (.autospec/config.yml)
- User config (~/.config/autospec/config.yml)
- Built-in defaults
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import yaml

from autospec.lib import validate
from autospec.lib.constants import (
    DEFAULT_MAX_HISTORY_ENTRIES,
    DEFAULT_SPECS_DIR,
    DEFAULT_STATE_DIR,
)
from autospec.lib.errors import ConfigError

logger = logging.getLogger(__name__)

PROJECT_CONFIG_PATH = Path(".autospec") / "config.yml"
ENV_PREFIX = "AUTOSPEC_"

DEFAULTS = {
    "specs_dir": DEFAULT_SPECS_DIR,
    "state_dir": DEFAULT_STATE_DIR,
    "max_history_entries": DEFAULT_MAX_HISTORY_ENTRIES,
}


@dataclass
class Config:
    """Resolved autospec configuration."""
    specs_dir: Path
    state_dir: Path  # Holds history.yaml
    max_history_entries: int  # 0 keeps every entry


def user_config_path() -> Path:
    """XDG user config location."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "autospec" / "config.yml"


def _load_yaml_config(path: Path) -> dict:
    """Load and validate one config file. Missing file -> {}."""
    if not path.exists():
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from None
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read {path}: {e}") from None

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping of settings")

    known = {k: v for k, v in data.items() if k in DEFAULTS}
    for key in data.keys() - known.keys():
        logger.warning(f"Ignoring unknown config key '{key}' in {path}")

    try:
        validate.validate(known, "config")
    except validate.ValidationError as e:
        raise ConfigError(f"{path}: {e}") from None
    return known


def _load_env_overrides(env: Mapping[str, str]) -> dict:
    overrides = {}
    for key in DEFAULTS:
        value = env.get(ENV_PREFIX + key.upper())
        if value is None or value == "":
            continue
        if key == "max_history_entries":
            try:
                parsed = int(value)
            except ValueError:
                raise ConfigError(
                    f"{ENV_PREFIX}{key.upper()} must be an integer, got '{value}'"
                ) from None
            if parsed < 0:
                raise ConfigError(f"{ENV_PREFIX}{key.upper()} must be >= 0, got {parsed}")
            overrides[key] = parsed
        else:
            overrides[key] = value
    return overrides


def load_config(
    project_config: Path | None = None,
    user_config: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Config:
    """
    Load layered configuration.

    Args:
        project_config: Project config file (default: .autospec/config.yml in cwd)
        user_config: User config file (default: XDG user config)
        env: Environment mapping (default: os.environ)

    Raises:
        ConfigError: If a config file or override is invalid
    """
    env = os.environ if env is None else env
    merged = dict(DEFAULTS)
    merged.update(_load_yaml_config(user_config or user_config_path()))
    merged.update(_load_yaml_config(project_config or PROJECT_CONFIG_PATH))
    merged.update(_load_env_overrides(env))

    return Config(
        specs_dir=Path(merged["specs_dir"]).expanduser(),
        state_dir=Path(merged["state_dir"]).expanduser(),
        max_history_entries=merged["max_history_entries"],
    )
