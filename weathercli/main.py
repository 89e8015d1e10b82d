"""Main entry point for the weather-cli application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines the CLI command, and delegates execution to the CommandHandler.
"""

import logging
from typing import Annotated, Any, Dict, Optional

import typer

from weathercli import __version__

# --- Core Layer ---
from weathercli.core.command_handler import EXIT_ERROR, CommandHandler

# --- Infrastructure Layer ---
# Config
from weathercli.infrastructure.config.settings import (
    MAX_FORECAST_DAYS,
    get_base_url,
    get_bool,
    get_cache_max_entries,
    get_cache_path,
    get_cache_ttl,
    get_config,
    get_forecast_days,
    load_configuration,
)
# UI
from weathercli.infrastructure.cli.display import ConsoleDisplay
# Weather provider
from weathercli.infrastructure.api.weather_client import WeatherApiClient
# Cache
from weathercli.infrastructure.cache.caching_service import CachingService
# Monitoring
from weathercli.infrastructure.monitoring.logger_setup import DEFAULT_LOG_FORMAT, setup_logging

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130

# --- Dependency Injection Container (Manual) ---

def create_dependencies(verbose: bool = False) -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root. Called per invocation rather than at
    import time so tests can swap configuration first.
    """
    # 1. Load Configuration First
    load_configuration()
    if verbose:
        log_level = logging.DEBUG
    else:
        log_level_name = str(get_config('logging.level', 'WARNING')).upper()
        log_level = getattr(logging, log_level_name, logging.WARNING)
    setup_logging(
        log_level=log_level,
        log_format=get_config('logging.format', DEFAULT_LOG_FORMAT),
        log_file=get_config('logging.file'),
    )
    logger.info("Configuration and logging initialized.")

    dependencies: Dict[str, Any] = {}

    # 2. Instantiate Infrastructure Adapters
    dependencies['ui'] = ConsoleDisplay()
    try:
        dependencies['cache'] = CachingService(
            ttl=get_cache_ttl(),
            max_entries=get_cache_max_entries(),
            cache_path=get_cache_path(),
        )
    except (OSError, ValueError) as e:
        logger.warning(f"Weather cache unavailable, continuing without it: {e}")
        dependencies['cache'] = None

    base_url = get_base_url()

    def provider_factory(api_key: str) -> WeatherApiClient:
        return WeatherApiClient(api_key=api_key, base_url=base_url)

    # 3. Instantiate Command Handler
    dependencies['command_handler'] = CommandHandler(
        ui=dependencies['ui'],
        provider_factory=provider_factory,
        cache=dependencies['cache'],
    )
    logger.info("All dependencies initialized successfully.")
    return dependencies

# --- Typer App Definition ---
app = typer.Typer(
    name="weather-cli",
    help="Weather forecasts in your terminal, with a local response cache.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"weather-cli {__version__}")
        raise typer.Exit()

# --- CLI Command ---

@app.command()
def main(
    location: Annotated[
        Optional[str],
        typer.Argument(help="City, postcode or 'lat,lon'. Detected from your IP address if omitted.")
    ] = None,
    days: Annotated[
        Optional[int],
        typer.Option("--days", "-d", min=1, max=MAX_FORECAST_DAYS, help="Number of forecast days.")
    ] = None,
    setup: Annotated[bool, typer.Option("--setup", help="Store your Weather API key.")] = False,
    delete_key: Annotated[bool, typer.Option("--delete-key", help="Delete the stored Weather API key.")] = False,
    clear_cache: Annotated[bool, typer.Option("--clear-cache", help="Remove all cached forecasts.")] = False,
    cache_info: Annotated[bool, typer.Option("--cache-info", help="Show cache location and entry counts.")] = False,
    no_cache: Annotated[bool, typer.Option("--no-cache", help="Bypass the cache for this lookup.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit.")
    ] = False,
):
    """Show the weather forecast for a location."""
    try:
        handler: CommandHandler = create_dependencies(verbose=verbose)['command_handler']

        if setup:
            exit_code = handler.handle_setup()
        elif delete_key:
            exit_code = handler.handle_delete_key()
        elif clear_cache:
            exit_code = handler.handle_clear_cache()
        elif cache_info:
            exit_code = handler.handle_cache_info()
        else:
            exit_code = handler.handle_weather(
                location=location,
                days=days or get_forecast_days(),
                use_cache=not no_cache,
                include_aqi=get_bool('weather.include_aqi', True),
                alerts=get_bool('weather.alerts', True),
            )
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
        typer.echo("\nInterrupted.", err=True)
        raise typer.Exit(code=EXIT_INTERRUPTED)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=EXIT_ERROR)

    raise typer.Exit(code=exit_code)

# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
