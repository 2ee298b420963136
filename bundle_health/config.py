"""Configuration for the bundle health CLI.

Settings come from an optional YAML file, with environment variables taking
precedence over the file.

Config file lookup:
1. $BUNDLE_HEALTH_CONFIG, if set
2. .bundle-health.yaml in the current directory
3. Built-in defaults

Example .bundle-health.yaml:

    mode: fast            # fast | comprehensive
    format: text          # text | json
    strict: false         # warnings also fail the exit code
    disabled_checks:
      - module_list_format

Environment overrides:
    BUNDLE_HEALTH_MODE, BUNDLE_HEALTH_FORMAT, BUNDLE_HEALTH_STRICT,
    BUNDLE_HEALTH_DISABLED_CHECKS (comma-separated)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .types import CheckMode

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "BUNDLE_HEALTH_CONFIG"
DEFAULT_CONFIG_FILENAME = ".bundle-health.yaml"

VALID_FORMATS = ("text", "json")
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")

_cached_config: Optional["HealthConfig"] = None


class ConfigError(ValueError):
    """Configuration file or environment holds an invalid value."""


@dataclass
class HealthConfig:
    """Resolved CLI settings.

    Attributes:
        mode: Default check mode when no flag is given.
        output_format: "text" or "json".
        strict: If True, warnings fail the exit code too.
        disabled_checks: Default check names to leave out.
        source: Where the values came from ("default" or the config file path).
    """

    mode: CheckMode = CheckMode.FAST
    output_format: str = "text"
    strict: bool = False
    disabled_checks: List[str] = field(default_factory=list)
    source: str = "default"


def _config_path() -> Path:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.cwd() / DEFAULT_CONFIG_FILENAME


def _read_config_file(path: Path) -> Dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def _parse_mode(value: Any, origin: str) -> CheckMode:
    try:
        return CheckMode(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(m.value for m in CheckMode)
        raise ConfigError(f"Invalid mode '{value}' in {origin} (must be one of: {valid})") from None


def _parse_format(value: Any, origin: str) -> str:
    fmt = str(value).strip().lower()
    if fmt not in VALID_FORMATS:
        raise ConfigError(f"Invalid format '{value}' in {origin} (must be one of: {', '.join(VALID_FORMATS)})")
    return fmt


def _parse_bool(value: Any, origin: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean '{value}' in {origin}")


def _parse_check_list(value: Any, origin: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [name.strip() for name in value.split(",") if name.strip()]
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return [v.strip() for v in value if v.strip()]
    raise ConfigError(f"Invalid disabled_checks in {origin} (must be a list of check names)")


def load_config() -> HealthConfig:
    """Load configuration, with caching.

    Environment variable precedence (highest to lowest):
    1. BUNDLE_HEALTH_* variables
    2. Config file value
    3. Default

    Raises:
        ConfigError: If any value is invalid.
    """
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    config = HealthConfig()
    path = _config_path()

    if path.exists():
        origin = str(path)
        data = _read_config_file(path)
        config.source = origin
        if "mode" in data:
            config.mode = _parse_mode(data["mode"], origin)
        if "format" in data:
            config.output_format = _parse_format(data["format"], origin)
        if "strict" in data:
            config.strict = _parse_bool(data["strict"], origin)
        if "disabled_checks" in data:
            config.disabled_checks = _parse_check_list(data["disabled_checks"], origin)
        unknown = sorted(set(data) - {"mode", "format", "strict", "disabled_checks"})
        if unknown:
            logger.warning("Ignoring unknown keys in %s: %s", origin, ", ".join(unknown))
    elif os.environ.get(CONFIG_ENV_VAR):
        raise ConfigError(f"Config file named by {CONFIG_ENV_VAR} does not exist: {path}")

    mode_env = os.environ.get("BUNDLE_HEALTH_MODE")
    if mode_env:
        config.mode = _parse_mode(mode_env, "BUNDLE_HEALTH_MODE")

    format_env = os.environ.get("BUNDLE_HEALTH_FORMAT")
    if format_env:
        config.output_format = _parse_format(format_env, "BUNDLE_HEALTH_FORMAT")

    strict_env = os.environ.get("BUNDLE_HEALTH_STRICT")
    if strict_env is not None:
        config.strict = _parse_bool(strict_env, "BUNDLE_HEALTH_STRICT")

    disabled_env = os.environ.get("BUNDLE_HEALTH_DISABLED_CHECKS")
    if disabled_env is not None:
        config.disabled_checks = _parse_check_list(disabled_env, "BUNDLE_HEALTH_DISABLED_CHECKS")

    _cached_config = config
    return config


def reset_config() -> None:
    """Reset cached config (for testing)."""
    global _cached_config
    _cached_config = None
