"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and the user
configuration file (~/.weathercli/config.yaml).
"""

import logging
import os
from datetime import timedelta
from pathlib import Path
from typing import Any, Optional, Dict

import yaml
from dotenv import load_dotenv

from weathercli.domain.models.weather import DEFAULT_FORECAST_DAYS

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".weathercli"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
DEFAULT_BASE_URL = "https://api.weatherapi.com/v1/forecast.json"
DEFAULT_CACHE_TTL_MINUTES = 30
DEFAULT_CACHE_MAX_ENTRIES = 100
MAX_FORECAST_DAYS = 14

# --- Global Configuration Store (Simple Approach) ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False
_config_file: Path = DEFAULT_CONFIG_FILE


def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None, force: bool = False) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
        force: Reload even if configuration was already loaded.
    """
    global _config, _loaded, _config_file
    if _loaded and not force:
        logger.debug("Configuration already loaded.")
        return

    _config = {}
    _config_file = Path(config_file)

    # 1. Load from YAML file (Lowest priority)
    _config.update(_read_yaml(_config_file))

    # 2. Load from .env file (Medium priority)
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        # override=False: real environment variables take precedence
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("No .env file found at or above the current directory.")

    # 3. Environment Variables (Highest priority) are handled in get_config

    _loaded = True
    logger.debug("Configuration loading process completed.")


def _read_yaml(config_file: Path) -> Dict[str, Any]:
    if not config_file.exists():
        logger.debug(f"YAML config file not found: {config_file}")
        return {}
    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            yaml_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
        return {}
    if isinstance(yaml_config, dict):
        logger.info(f"Loaded configuration from YAML: {config_file}")
        return yaml_config
    if yaml_config is not None:
        logger.warning(f"YAML config file {config_file} did not contain a mapping.")
    return {}


def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by key.

    Priority:
    1. Test configuration (if set)
    2. Environment variable (key upper-cased, dots replaced by underscores)
    3. YAML config
    4. Default value

    Args:
        key: The configuration key
        default: Default value if the key is not found

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = key.upper().replace('.', '_')
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    if key in _config:
        return _config[key]

    # Nested lookup so YAML can use sections ("cache: {ttl_minutes: 10}")
    node: Any = _config
    for part in key.split('.'):
        if not isinstance(node, dict) or part not in node:
            node = None
            break
        node = node[part]
    if node is not None:
        return node

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default


def _coerce(value: str) -> Any:
    """Converts common string forms from the environment to bool/int/float."""
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


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    try:
        cwd = Path.cwd()
        for path in [cwd] + list(cwd.parents):
            env_path = path / ENV_FILE_NAME
            if env_path.is_file():
                return env_path
    except OSError as e:
        logger.warning(f"Error searching for .env file: {e}")
    return None


def set_config(key: str, value: Any) -> None:
    """Sets a configuration value for the current process only."""
    logger.debug(f"Setting config: {key} = {value!r}")
    _config[key] = value


def config_file_path() -> Path:
    """The YAML file user settings are persisted to."""
    return _config_file


def save_user_config(updates: Dict[str, Any]) -> None:
    """Merges top-level keys into the YAML config file and writes it owner-only.

    Raises:
        OSError: If the file cannot be written.
    """
    path = config_file_path()
    current = _read_yaml(path)
    current.update(updates)
    path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, 'w', encoding='utf-8') as f:
        yaml.safe_dump(current, f, default_flow_style=False)
    os.chmod(path, 0o600)
    _config.update(updates)
    logger.info(f"Updated user configuration: {path}")


def remove_user_config_key(key: str) -> bool:
    """Deletes a top-level key from the YAML config file.

    Returns:
        True if the key was present and removed.
    """
    path = config_file_path()
    current = _read_yaml(path)
    _config.pop(key, None)
    if key not in current:
        return False
    del current[key]
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, 'w', encoding='utf-8') as f:
        yaml.safe_dump(current, f, default_flow_style=False)
    logger.info(f"Removed '{key}' from user configuration: {path}")
    return True

# --- Convenience Functions ---

def get_base_url() -> str:
    return str(get_config('weather.base_url', DEFAULT_BASE_URL))


def get_forecast_days() -> int:
    """Number of forecast days to request, clamped to what the provider serves."""
    try:
        days = int(get_config('weather.days', DEFAULT_FORECAST_DAYS))
    except (TypeError, ValueError):
        logger.warning("Invalid weather.days setting, using default.")
        days = DEFAULT_FORECAST_DAYS
    return max(1, min(days, MAX_FORECAST_DAYS))


def get_bool(key: str, default: bool) -> bool:
    flag = get_config(key, default)
    if isinstance(flag, str):
        if flag.lower() in ('true', 'yes', '1'):
            return True
        if flag.lower() in ('false', 'no', '0'):
            return False
        logger.warning(f"Unexpected string value for {key}: '{flag}'. Defaulting to {default}.")
        return default
    if flag is None:
        return default
    return bool(flag)


def get_cache_ttl() -> timedelta:
    try:
        minutes = float(get_config('cache.ttl_minutes', DEFAULT_CACHE_TTL_MINUTES))
    except (TypeError, ValueError):
        logger.warning("Invalid cache.ttl_minutes setting, using default.")
        minutes = DEFAULT_CACHE_TTL_MINUTES
    return timedelta(minutes=max(minutes, 0))


def get_cache_max_entries() -> int:
    try:
        value = int(get_config('cache.max_entries', DEFAULT_CACHE_MAX_ENTRIES))
    except (TypeError, ValueError):
        logger.warning("Invalid cache.max_entries setting, using default.")
        value = DEFAULT_CACHE_MAX_ENTRIES
    return max(value, 1)


def get_cache_path() -> Optional[Path]:
    value = get_config('cache.path')
    return Path(str(value)).expanduser() if value else None


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
