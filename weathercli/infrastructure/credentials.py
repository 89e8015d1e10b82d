"""API key storage for the weather provider.

Lookup order:
1. WEATHER_API_KEY environment variable (including one loaded from .env)
2. `weather_api_key` in the user config file, written by `weather-cli --setup`
"""

import logging
import os

from weathercli.domain.interfaces.user_interface import UserInterface
from weathercli.domain.models.errors import ConfigurationError, MissingApiKeyError
from weathercli.infrastructure.config import settings

logger = logging.getLogger(__name__)

ENV_VAR_NAME = "WEATHER_API_KEY"
CONFIG_KEY = "weather_api_key"
SIGNUP_URL = "https://www.weatherapi.com/"


def get_api_key() -> str:
    """Returns the configured API key.

    Raises:
        MissingApiKeyError: If no key is configured anywhere.
    """
    settings.load_configuration()
    # Read the raw variable: get_config would coerce an all-digit key to int
    key = os.environ.get(ENV_VAR_NAME, "").strip()
    if key:
        logger.debug("Using API key from environment.")
        return key

    stored = settings.get_config(CONFIG_KEY)
    if stored is not None and str(stored).strip():
        logger.debug(f"Using API key from {settings.config_file_path()}")
        return str(stored).strip()

    raise MissingApiKeyError("No API key configured")


def set_api_key(key: str) -> None:
    """Stores the key in the user config file (owner-only permissions).

    Raises:
        ConfigurationError: If the key is blank or cannot be written.
    """
    key = key.strip()
    if not key:
        raise ConfigurationError("API key cannot be empty")
    try:
        settings.save_user_config({CONFIG_KEY: key})
    except OSError as e:
        raise ConfigurationError(f"Failed to store API key: {e}") from e


def delete_api_key() -> bool:
    """Removes the stored key. Deleting a key that is not stored is not an error.

    Returns:
        True if a stored key was removed.
    """
    try:
        return settings.remove_user_config_key(CONFIG_KEY)
    except OSError as e:
        raise ConfigurationError(f"Failed to delete API key: {e}") from e


def has_stored_api_key() -> bool:
    stored = settings.get_config(CONFIG_KEY)
    return stored is not None and bool(str(stored).strip())


def prompt_for_api_key(ui: UserInterface) -> str:
    """Asks the user for a key without echoing it.

    Raises:
        ConfigurationError: If the entered key is blank.
    """
    ui.display_info(f"Get a free API key from {SIGNUP_URL}")
    key = ui.get_secret("Enter your Weather API key: ").strip()
    if not key:
        raise ConfigurationError("API key cannot be empty")
    return key
