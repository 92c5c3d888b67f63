"""
User settings for pipeml.

Settings live in ``config.json`` inside the pipeml configuration directory:
  ~/.pipeml/config.json  (default)

The directory can be moved with:
  - Environment variable: PIPEML_CONFIG_DIR
  - Environment variable: XDG_DATA_HOME (uses $XDG_DATA_HOME/pipeml)

Recognized keys:
  - collaborator_modules: list of module names exposing COLLABORATOR_SPECS
  - log_level: logging level name used when neither --debug nor --verbose is given

Additional collaborator modules can be listed in PIPEML_COLLABORATORS
(comma-separated).
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"
COLLABORATORS_ENV_VAR = "PIPEML_COLLABORATORS"


def get_config_dir() -> Path:
    """
    Get the pipeml configuration directory.

    Checks in order:
    1. PIPEML_CONFIG_DIR environment variable
    2. XDG_DATA_HOME environment variable (if set)
    3. ~/.pipeml/
    """
    if "PIPEML_CONFIG_DIR" in os.environ:
        base = Path(os.environ["PIPEML_CONFIG_DIR"])
    elif "XDG_DATA_HOME" in os.environ:
        base = Path(os.environ["XDG_DATA_HOME"]) / "pipeml"
    else:
        base = Path.home() / ".pipeml"
    return base.expanduser()


def get_config_file() -> Path:
    return get_config_dir() / CONFIG_FILE_NAME


def read_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Read pipeml settings.

    A missing file yields an empty dict.

    Raises:
        ConfigurationError: if the file cannot be parsed or is not a JSON object.
    """
    config_path = path or get_config_file()
    if not config_path.exists():
        return {}
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid settings file {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {config_path} must contain a JSON object")
    logger.debug("Loaded settings from %s", config_path)
    return data


def get_collaborator_modules(config: Optional[Dict[str, Any]] = None) -> List[str]:
    """Module names to import for collaborator specs (settings file first, then environment)."""
    if config is None:
        config = read_config()
    modules = config.get("collaborator_modules") or []
    if isinstance(modules, str):
        modules = [modules]
    if not isinstance(modules, list):
        raise ConfigurationError("'collaborator_modules' must be a list of module names")
    names = [str(name).strip() for name in modules if str(name).strip()]
    env_value = os.environ.get(COLLABORATORS_ENV_VAR, "")
    for name in env_value.split(","):
        name = name.strip()
        if name and name not in names:
            names.append(name)
    return names


def get_log_level(config: Optional[Dict[str, Any]] = None, default: int = logging.WARNING) -> int:
    if config is None:
        config = read_config()
    name = config.get("log_level")
    if not name:
        return default
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log_level '{name}' in settings")
    return level
