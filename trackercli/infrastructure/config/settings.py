"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a YAML
configuration file (~/.trackercli/config.yaml). Keys are flat snake_case
names (e.g. 'redacted_api_key'); the matching environment variable is the
upper-cased key (REDACTED_API_KEY).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".trackercli"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# (max requests, timeframe seconds) per indexer
DEFAULT_RATE_LIMITS: Dict[str, Tuple[int, float]] = {
    "redacted": (10, 10.0),
    "ops": (5, 10.0),
}

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}  # For testing purposes
_loaded = False


def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. Load from YAML file (Lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r') as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(yaml_config)
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. Load from .env file (Medium priority)
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        # override=False: ENV VARS take precedence
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (no .env found at or above current directory).")

    # 3. Environment Variables (Highest priority) are handled by os.environ in get_config

    _loaded = True
    logger.debug("Configuration loading process completed.")


def reset_configuration() -> None:
    """Forgets loaded configuration so the next load_configuration() reloads it."""
    global _config, _loaded
    _config = {}
    _loaded = False


def _coerce(value: str) -> Any:
    """Converts common string forms from environment variables."""
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except (ValueError, TypeError):
        return value


def get_config(key: str, default: Any = None, coerce: bool = True) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable (upper-cased key)
    3. YAML config
    4. Default value

    Args:
        key: The configuration key
        default: Default value if the key is not found
        coerce: Convert environment strings to bool/int/float. Secrets must
            be read with coerce=False so "00417" stays "00417".

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = key.upper()
    if env_key in os.environ:
        value = os.environ[env_key]
        return _coerce(value) if coerce else value

    if key in _config:
        return _config[key]

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


# --- Convenience Functions ---

def get_api_key(reference: str) -> Optional[str]:
    """Returns the API key stored under `reference` (e.g. 'redacted_api_key')."""
    key = get_config(reference, coerce=False)
    if key is None:
        return None
    if not isinstance(key, str):
        # YAML has already turned an unquoted numeric key into a number
        logger.warning(f"Setting '{reference}' is not a string; quote API keys in the YAML config.")
    return str(key)


def get_rate_limit(indexer: str) -> Optional[Tuple[int, float]]:
    """Returns (max requests, timeframe seconds) for `indexer`, or None if unset."""
    default_requests, default_seconds = DEFAULT_RATE_LIMITS.get(indexer, (None, None))
    max_requests = get_config(f"{indexer}_rate_limit_requests", default_requests)
    timeframe = get_config(f"{indexer}_rate_limit_seconds", default_seconds)
    if max_requests is None or timeframe is None:
        return None
    try:
        return int(max_requests), float(timeframe)
    except (TypeError, ValueError):
        logger.warning(f"Invalid rate limit for {indexer}: {max_requests} / {timeframe}s. Ignoring.")
        return None


def get_rate_limits(indexers: Iterable[str]) -> Dict[str, Tuple[int, float]]:
    """Returns the configured rate limits for every indexer that has one."""
    limits = {}
    for indexer in indexers:
        limit = get_rate_limit(indexer)
        if limit is not None:
            limits[indexer] = limit
    return limits


def get_cache_dir() -> Optional[Path]:
    """Directory of the disk cache, or None to keep responses in memory only."""
    cache_dir = get_config('cache_dir')
    return Path(str(cache_dir)).expanduser() if cache_dir else None


def get_cache_ttl() -> Optional[int]:
    ttl = get_config('cache_ttl')
    return int(ttl) if ttl is not None else None


def get_log_level() -> int:
    level_name = str(get_config('log_level', 'INFO')).upper()
    return getattr(logging, level_name, logging.INFO)


def get_log_file() -> Optional[str]:
    log_file = get_config('log_file')
    return str(log_file) if log_file else None


def get_log_format() -> str:
    return str(get_config('log_format', DEFAULT_LOG_FORMAT))


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
