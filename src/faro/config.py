"""Optional YAML/JSON configuration file supplying defaults for CLI flags."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

import yaml

from faro.constants import Constants
from faro.errors import ConfigError

logger = logging.getLogger(__name__)

# key -> accepted Python types
CONFIG_KEYS: Dict[str, tuple] = {
    "filter": (str,),
    "all": (bool,),
    "cooldown": (int,),
    "format": (str,),
    "manager": (str,),
    "vulnerabilities": (bool,),
}


def _user_config_path() -> str:
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(base, Constants.USER_CONFIG_RELPATH)


def find_config(work_dir: str) -> Optional[str]:
    """Return the first default config file that exists, if any."""
    candidates = [os.path.join(work_dir, name) for name in Constants.CONFIG_FILE_NAMES]
    candidates.append(_user_config_path())
    for path in candidates:
        if os.path.isfile(path):
            return path
    return None


def _read(path: str) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.lower().endswith(".json"):
                return json.load(fh)
            return yaml.safe_load(fh)
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"invalid config file {path}: {exc}") from exc


def validate_config(data: Any, source: str = "config") -> Dict[str, Any]:
    """Check types of the recognised keys; unknown keys are logged and dropped.

    Raises:
        ConfigError: If the document is not a mapping or a value has the wrong type.
    """
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: top-level value must be a mapping")
    section = data.get("faro", data)
    if not isinstance(section, dict):
        raise ConfigError(f"{source}: 'faro' section must be a mapping")

    result: Dict[str, Any] = {}
    for key, value in section.items():
        if key not in CONFIG_KEYS:
            logger.warning("Ignoring unknown config key %r in %s", key, source)
            continue
        expected = CONFIG_KEYS[key]
        # bool is a subclass of int; reject it where a number is wanted.
        if not isinstance(value, expected) or (expected == (int,) and isinstance(value, bool)):
            raise ConfigError(
                f"{source}: {key!r} must be of type {expected[0].__name__}, got {type(value).__name__}"
            )
        result[key] = value
    return result


def load_config(path: Optional[str] = None, work_dir: str = ".") -> Dict[str, Any]:
    """Load configuration from ``path`` or from the default locations.

    Raises:
        ConfigError: If an explicit ``path`` does not exist or any file is malformed.
    """
    if path:
        if not os.path.isfile(path):
            raise ConfigError(f"config file not found: {path}")
    else:
        path = find_config(work_dir)
        if path is None:
            return {}
    logger.debug("Loading config from %s", path)
    return validate_config(_read(path), path)
