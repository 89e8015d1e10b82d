import logging
from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.box import HEAVY, SIMPLE
from rich.text import Text

from weathercli.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None, error_console: Optional[Console] = None):
        """Initializes the rich Consoles (reports on stdout, diagnostics on stderr)."""
        self._console = console or Console()
        self._error_console = error_console or Console(stderr=True)

    @property
    def console(self) -> Console:
        """Get the Rich console instance for direct operations."""
        return self._console

    @property
    def error_console(self) -> Console:
        return self._error_console

    def display_output(self, output: Any, **kwargs: Any) -> None:
        """Prints a string or rich renderable (e.g. a rendered WeatherReport) to stdout."""
        try:
            self.console.print(output)
        except Exception as e:
            # Fallback if Rich formatting fails
            logger.error(f"Error displaying formatted output: {e}")
            self.console.print(str(output), markup=False)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style.

        Args:
            error_message: The error message to display.
        """
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.error_console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        panel = Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message with enhanced styling.

        Args:
            warning_message: The warning message to display.
        """
        logger.debug(f"Display warning: {warning_message}")
        panel = Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1)
        )
        self.error_console.print(panel)

    def get_secret(self, prompt_message: str) -> str:
        """Reads hidden input (e.g. an API key) from the terminal."""
        return self.console.input(f"[bold green]{prompt_message}[/bold green]", password=True)
