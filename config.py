"""
Settings for the shell, read from a key-value config file.

The file uses KEY=VALUE lines (python-dotenv syntax):

    database=nfl_stats.db
    default_season=2023
    bootstrap_script=nfl.sql

Only `database` is required. Relative paths resolve against the directory
holding the config file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

from errors import ConfigError


CONFIG_FILE = "auth.cfg"
CONFIG_ENV_VAR = "NFL_SHELL_CONFIG"
DEFAULT_SEASON = 2023


@dataclass(frozen=True)
class Settings:
    database: Path
    default_season: int = DEFAULT_SEASON
    bootstrap_script: Optional[Path] = None


def resolve_config_path(path: Optional[str] = None) -> Path:
    """CLI argument first, then $NFL_SHELL_CONFIG, then ./auth.cfg."""
    return Path(path or os.environ.get(CONFIG_ENV_VAR) or CONFIG_FILE)


def load_settings(path: Optional[str] = None) -> Settings:
    """Load and validate settings. Raises ConfigError on any problem."""
    config_path = resolve_config_path(path)
    if not config_path.is_file():
        raise ConfigError(f"Could not find config file: {config_path}")

    try:
        values = dotenv_values(config_path)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Error reading config file {config_path}: {e}") from e

    # Keys are matched case-insensitively
    values = {k.strip().lower(): (v or "").strip() for k, v in values.items()}
    base_dir = config_path.resolve().parent

    database = values.get("database")
    if not database:
        raise ConfigError(f"'database' not provided in {config_path}.")

    default_season = DEFAULT_SEASON
    if values.get("default_season"):
        try:
            default_season = int(values["default_season"])
        except ValueError:
            raise ConfigError(
                f"'default_season' must be a whole number, got {values['default_season']!r}."
            ) from None

    script = values.get("bootstrap_script")

    return Settings(
        database=_resolve(base_dir, database),
        default_season=default_season,
        bootstrap_script=_resolve(base_dir, script) if script else None,
    )


def _resolve(base_dir: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else base_dir / path
