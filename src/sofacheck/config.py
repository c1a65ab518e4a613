"""
Configuration loading for sofacheck.

The feed URL, user agent, cache directory and request timeout travel together in
an immutable FeedConfig that is passed explicitly to the fetcher and report
functions. Values come from built-in defaults, an optional YAML file and a
couple of environment variables, in increasing order of precedence.
"""

import os
import platform
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union
from urllib.parse import urlparse

import platformdirs
import yaml

from sofacheck.constants import (
    APP_NAME,
    CACHE_DIR_ENV_VAR,
    CONFIG_FILE_NAME,
    FEED_REQUEST_TIMEOUT,
    FEED_URL_ENV_VAR,
    MACOS_CACHE_DIR,
    SOFA_FEED_URL,
    SOFA_USER_AGENT,
)
from sofacheck.exceptions import ConfigFileError, ConfigurationError
from sofacheck.log_utils import logger

CONFIG_DIR = platformdirs.user_config_dir(APP_NAME)
CONFIG_FILE = os.path.join(CONFIG_DIR, CONFIG_FILE_NAME)


def get_default_cache_dir() -> Path:
    """
    Return the default cache directory for the SOFA feed.

    macOS hosts share the system-wide /private/var/tmp/sofa directory used by other
    SOFA tooling; elsewhere the platformdirs user cache directory is used.
    """
    if platform.system() == "Darwin":
        return Path(MACOS_CACHE_DIR)
    return Path(platformdirs.user_cache_dir(APP_NAME))


@dataclass(frozen=True)
class FeedConfig:
    """Settings for one feed fetch."""

    url: str = SOFA_FEED_URL
    user_agent: str = SOFA_USER_AGENT
    cache_dir: Optional[Path] = None
    timeout: float = FEED_REQUEST_TIMEOUT

    @classmethod
    def default(cls) -> "FeedConfig":
        return cls(cache_dir=get_default_cache_dir())

    @property
    def resolved_cache_dir(self) -> Path:
        return Path(self.cache_dir) if self.cache_dir else get_default_cache_dir()


def validate_feed_url(url: str) -> str:
    """
    Ensure the feed URL uses http(s) and names a host.

    Raises:
        ConfigurationError: If the URL is not an absolute http or https URL.
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError("Unsupported or invalid feed URL", details=url)
    return url


def _read_config_file(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigFileError("Invalid YAML in config file", path, str(e)) from e
    except OSError as e:
        raise ConfigFileError("Could not read config file", path, str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(
            "Config file must contain a mapping", path, type(data).__name__
        )
    return data


def _parse_timeout(value: Any, path: Optional[str]) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigFileError("TIMEOUT_SECONDS must be a number", path, str(e)) from e
    if timeout <= 0:
        raise ConfigFileError("TIMEOUT_SECONDS must be positive", path, str(value))
    return timeout


def load_config(path: Optional[Union[str, Path]] = None) -> FeedConfig:
    """
    Build a FeedConfig from defaults, an optional YAML file and the environment.

    Parameters:
        path: Explicit config file path. When omitted, the platformdirs config
            location is consulted and silently skipped if the file does not exist.
            An explicit path that does not exist is an error.

    Returns:
        FeedConfig: The resolved, validated configuration.

    Raises:
        ConfigFileError: If the file cannot be read, is not valid YAML, is not a
            mapping, or carries an invalid timeout.
        ConfigurationError: If the resolved feed URL is invalid.
    """
    config = FeedConfig.default()

    config_path: Optional[str] = None
    if path is not None:
        config_path = str(path)
        if not os.path.exists(config_path):
            raise ConfigFileError("Config file not found", config_path)
    elif os.path.exists(CONFIG_FILE):
        config_path = CONFIG_FILE

    if config_path:
        logger.debug(f"Loading configuration from {config_path}")
        data = _read_config_file(config_path)
        overrides: Dict[str, Any] = {}
        if data.get("FEED_URL"):
            overrides["url"] = str(data["FEED_URL"])
        if data.get("USER_AGENT"):
            overrides["user_agent"] = str(data["USER_AGENT"])
        if data.get("CACHE_DIR"):
            overrides["cache_dir"] = Path(os.path.expanduser(str(data["CACHE_DIR"])))
        if data.get("TIMEOUT_SECONDS") is not None:
            overrides["timeout"] = _parse_timeout(data["TIMEOUT_SECONDS"], config_path)
        config = replace(config, **overrides)

    env_url = os.environ.get(FEED_URL_ENV_VAR)
    if env_url:
        config = replace(config, url=env_url)
    env_cache_dir = os.environ.get(CACHE_DIR_ENV_VAR)
    if env_cache_dir:
        config = replace(config, cache_dir=Path(os.path.expanduser(env_cache_dir)))

    validate_feed_url(config.url)
    return config
