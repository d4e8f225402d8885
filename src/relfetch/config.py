"""
Configuration loading for relfetch.

Settings live in a YAML file under the platformdirs user config directory.
Missing keys fall back to DEFAULT_CONFIG; the GitHub token may also come from
the GITHUB_TOKEN environment variable when ALLOW_ENV_TOKEN is enabled.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import platformdirs
import yaml

from relfetch.constants import (
    APP_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG,
    GITHUB_TOKEN_ENV_VAR,
)
from relfetch.exceptions import ConfigFileError, ConfigValidationError
from relfetch.log_utils import add_file_logging, logger, set_log_level


def get_config_file_path() -> Path:
    """Return the platformdirs-managed location of the relfetch config file."""
    return Path(platformdirs.user_config_dir(APP_NAME)) / CONFIG_FILE_NAME


def _validate_config(config: Dict[str, Any]) -> None:
    url = config.get("REPO_API_URL")
    if not isinstance(url, str) or not url.startswith(("http://", "https://")):
        raise ConfigValidationError(
            "REPO_API_URL must be an http(s) URL",
            field="REPO_API_URL",
            value=str(url),
        )

    timeout = config.get("REQUEST_TIMEOUT")
    # bool is an int subclass
    if (
        isinstance(timeout, bool)
        or not isinstance(timeout, (int, float))
        or timeout <= 0
    ):
        raise ConfigValidationError(
            "REQUEST_TIMEOUT must be a positive number of seconds",
            field="REQUEST_TIMEOUT",
            value=str(timeout),
        )

    token = config.get("GITHUB_TOKEN")
    if token is not None and not isinstance(token, str):
        raise ConfigValidationError(
            "GITHUB_TOKEN must be a string", field="GITHUB_TOKEN"
        )


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load the relfetch configuration, merged over the defaults.

    Parameters:
        path (Optional[Union[str, Path]]): Explicit config file to read. When omitted the
            platformdirs location is used; a missing file there simply yields the defaults.

    Returns:
        Dict[str, Any]: The effective configuration mapping.

    Raises:
        ConfigFileError: If an explicit path does not exist, the file cannot be read,
            is not valid YAML, or does not contain a mapping.
        ConfigValidationError: If a configured value has the wrong type or range.
    """
    config: Dict[str, Any] = dict(DEFAULT_CONFIG)
    config_path = Path(path) if path is not None else get_config_file_path()

    if not config_path.exists():
        if path is not None:
            raise ConfigFileError(
                "Configuration file not found", details=str(config_path)
            )
        logger.debug("No config file at %s; using defaults", config_path)
    else:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except OSError as e:
            raise ConfigFileError(
                "Could not read configuration file", details=f"{config_path}: {e}"
            ) from e
        except yaml.YAMLError as e:
            raise ConfigFileError(
                "Configuration file is not valid YAML", details=f"{config_path}: {e}"
            ) from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigFileError(
                "Configuration file must contain a mapping", details=str(config_path)
            )
        config.update(loaded)
        logger.debug("Loaded configuration from %s", config_path)

    _validate_config(config)
    return config


def get_effective_github_token(config: Dict[str, Any]) -> Optional[str]:
    """
    Resolve the GitHub token to use for API requests.

    An explicit, non-blank GITHUB_TOKEN in the config wins. Otherwise the
    GITHUB_TOKEN environment variable is used when ALLOW_ENV_TOKEN is truthy.

    Returns:
        Optional[str]: The stripped token, or None when no token is available.
    """
    token = config.get("GITHUB_TOKEN")
    if isinstance(token, str) and token.strip():
        return token.strip()

    if config.get("ALLOW_ENV_TOKEN", True):
        env_token = os.environ.get(GITHUB_TOKEN_ENV_VAR, "").strip()
        if env_token:
            return env_token

    return None


def apply_logging_config(config: Dict[str, Any]) -> None:
    """
    Apply the LOG_LEVEL and LOG_DIR settings to the relfetch logger.

    File logging is only enabled when LOG_DIR is set.
    """
    level_name = str(config.get("LOG_LEVEL") or "INFO")
    set_log_level(level_name)

    log_dir = config.get("LOG_DIR")
    if log_dir:
        add_file_logging(Path(log_dir), level_name)
