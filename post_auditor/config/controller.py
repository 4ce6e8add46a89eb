import os
import logging
from pathlib import Path
from typing import Dict, Any, Optional

import json5
from dotenv import load_dotenv
from pydash import get as pydash_get

from post_auditor.errors import ConfigError
from post_auditor.config.shared_constants import (
    DEFAULT_SETTINGS,
    DEFAULT_CONFIG_FILE,
    ENV_OVERRIDES,
    SEVERITIES,
)

logger = logging.getLogger(__name__)


def load_config(config_path) -> Dict[str, Any]:
    """Read a JSON5 config file. Missing files yield an empty config."""
    path = Path(config_path)
    if not path.exists():
        return {}

    try:
        with path.open("r", encoding="utf-8") as f:
            config = json5.load(f)
    except ValueError as e:
        raise ConfigError(f"Config file {path} is not valid JSON5: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Config file {path} must contain an object")
    return config


def load_settings(config_path: Optional[str] = None, overrides: Optional[Dict] = None,
                  use_env: bool = True) -> Dict[str, Any]:
    """
    Build audit settings from defaults, config file, environment and overrides.

    Later sources win: defaults < config file "defaults" block < environment
    < explicit overrides (usually CLI flags). Overrides set to None are ignored.
    """
    explicit_path = config_path is not None
    config_path = config_path or DEFAULT_CONFIG_FILE
    if explicit_path and not Path(config_path).exists():
        raise ConfigError(f"Config file not found: {config_path}")

    config = load_config(config_path)
    file_defaults = pydash_get(config, "defaults", {}) or {}

    settings = {
        **DEFAULT_SETTINGS,
        **{k: v for k, v in file_defaults.items() if v is not None},
    }

    if use_env:
        load_dotenv()
        for env_name, key in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                settings[key] = value

    settings.update({k: v for k, v in (overrides or {}).items() if v is not None})

    validate_settings(settings)
    logger.debug(f"Loaded settings: {settings}")
    return settings


def validate_settings(settings: Dict[str, Any]) -> None:
    # Imported here so the checks package can be used without the config layer
    from post_auditor.checks import CHECKS

    if settings.get("fail_on") not in SEVERITIES:
        raise ConfigError(
            f"fail_on must be one of {', '.join(SEVERITIES)}, got {settings.get('fail_on')!r}"
        )

    unknown = [name for name in settings.get("disabled_checks", []) if name not in CHECKS]
    if unknown:
        raise ConfigError(f"Unknown checks in disabled_checks: {', '.join(unknown)}")

    overrides = settings.get("severity_overrides") or {}
    if not isinstance(overrides, dict):
        raise ConfigError("severity_overrides must be an object of check name to severity")
    for name, severity in overrides.items():
        if name not in CHECKS:
            raise ConfigError(f"Unknown check in severity_overrides: {name}")
        if severity not in SEVERITIES:
            raise ConfigError(f"Invalid severity {severity!r} for check {name}")

    extensions = settings.get("extensions")
    if not extensions or not all(isinstance(ext, str) and ext.startswith(".") for ext in extensions):
        raise ConfigError("extensions must be a non-empty list like ['.md']")
