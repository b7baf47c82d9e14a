"""Settings loading with bundled defaults and external override support.

Search order for the settings file:
    1. An explicit path handed to :func:`load_settings`
    2. The file named by the ``PARAPRIM_CONFIG`` environment variable
    3. The user config file (~/.config/paraprim/settings.yaml)
    4. The bundled ``data/defaults.yaml``

Keys missing from a user file fall back to the bundled defaults.

Environment Variables:
    PARAPRIM_CONFIG: path to a YAML settings file.

Example:
    export PARAPRIM_CONFIG="$HOME/projects/antenna/paraprim.yaml"
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

__all__ = [
    "PARAPRIM_CONFIG",
    "Settings",
    "load_settings",
    "settings_path",
    "clear_cache",
]

# Environment variable name for a custom settings file
PARAPRIM_CONFIG = "PARAPRIM_CONFIG"

# Bundled data location (relative to this file)
_BUNDLED_DEFAULTS = Path(__file__).parent / "data" / "defaults.yaml"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Runtime settings for classification and diagnostics."""
    tolerance: float = 0.0
    warn_unused: bool = True
    log_level: str = "WARNING"
    source: Optional[str] = None


def clear_cache() -> None:
    """Clear cached settings.

    Call this after editing a settings file or changing PARAPRIM_CONFIG.
    """
    _load_settings_cached.cache_clear()


def _user_config_file() -> Path:
    if sys.platform == "win32":
        config_base = Path(os.environ.get("APPDATA", "~")).expanduser()
    else:
        config_base = Path.home() / ".config"
    return config_base / "paraprim" / "settings.yaml"


def settings_path(path: Optional[str] = None) -> Path:
    """Return the settings file that :func:`load_settings` would read.

    Raises:
        FileNotFoundError: if an explicit or environment path does not exist
    """
    if path:
        explicit = Path(path).expanduser()
        if not explicit.exists():
            raise FileNotFoundError(f"Settings file not found: {explicit}")
        return explicit

    env_path = os.environ.get(PARAPRIM_CONFIG)
    if env_path:
        from_env = Path(env_path.strip()).expanduser()
        if not from_env.exists():
            raise FileNotFoundError(
                f"Settings file from {PARAPRIM_CONFIG} not found: {from_env}"
            )
        return from_env

    user_file = _user_config_file()
    if user_file.is_file():
        return user_file

    return _BUNDLED_DEFAULTS


def _read_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML settings file and check its schema version."""
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid settings format in {path}: expected dict at root")

    schema_version = data.get("schema_version", "1.0")
    if not isinstance(schema_version, str) or not schema_version.startswith("1."):
        raise ValueError(
            f"Unsupported schema version '{schema_version}' in {path}. "
            f"Expected version 1.x"
        )
    return data


def _build_settings(data: Dict[str, Any], source: Path) -> Settings:
    tolerance = data.get("tolerance", 0.0)
    if isinstance(tolerance, bool) or not isinstance(tolerance, (int, float)) or tolerance < 0:
        raise ValueError(f"'tolerance' must be a non-negative number in {source}")

    warn_unused = data.get("warn_unused", True)
    if not isinstance(warn_unused, bool):
        raise ValueError(f"'warn_unused' must be true or false in {source}")

    log_level = str(data.get("log_level", "WARNING")).upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(
            f"Unknown log_level '{log_level}' in {source}. Expected one of {list(_LOG_LEVELS)}"
        )

    return Settings(
        tolerance=float(tolerance),
        warn_unused=warn_unused,
        log_level=log_level,
        source=str(source),
    )


@lru_cache(maxsize=8)
def _load_settings_cached(path_str: str) -> Settings:
    """Cached settings loading (string path for hashability)."""
    path = Path(path_str)
    data = _read_yaml(_BUNDLED_DEFAULTS)
    if path != _BUNDLED_DEFAULTS:
        data.update(_read_yaml(path))
    settings = _build_settings(data, path)
    logger.info("Loaded settings from %s", path)
    return settings


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings, resolving the file as described in the module docstring.

    Args:
        path: Optional explicit settings file

    Returns:
        Frozen Settings instance

    Raises:
        FileNotFoundError: if an explicit or environment path does not exist
        ValueError: if the file is malformed
    """
    return _load_settings_cached(str(settings_path(path)))
