import pytest
from unittest.mock import MagicMock
from rich.panel import Panel
from rich.text import Text

from weathercli.infrastructure.cli.display import ConsoleDisplay


@pytest.fixture
def mock_console():
    """Fixture to create a mock rich Console object."""
    return MagicMock()


@pytest.fixture
def mock_error_console():
    return MagicMock()


@pytest.fixture
def console_display(mock_console: MagicMock, mock_error_console: MagicMock):
    """Fixture to create a ConsoleDisplay instance with mocked consoles."""
    return ConsoleDisplay(console=mock_console, error_console=mock_error_console)


def printed_panel(console: MagicMock) -> Panel:
    console.print.assert_called_once()
    args, _ = console.print.call_args
    assert isinstance(args[0], Panel)
    return args[0]


def test_display_output_prints_renderable(console_display, mock_console):
    renderable = Text("Weather Forecast for London")
    console_display.display_output(renderable)
    mock_console.print.assert_called_once_with(renderable)


def test_display_output_falls_back_to_plain_text(console_display, mock_console):
    mock_console.print.side_effect = [ValueError("bad markup"), None]

    console_display.display_output("[broken")

    assert mock_console.print.call_count == 2
    mock_console.print.assert_called_with("[broken", markup=False)


def test_display_error_goes_to_stderr(console_display, mock_console, mock_error_console):
    console_display.display_error("Something went wrong")

    panel = printed_panel(mock_error_console)
    assert panel.renderable.plain == "Something went wrong"
    assert "Error" in panel.title
    mock_console.print.assert_not_called()


def test_display_warning_goes_to_stderr(console_display, mock_error_console):
    console_display.display_warning("Failed to cache weather data")

    panel = printed_panel(mock_error_console)
    assert panel.renderable.plain == "Failed to cache weather data"
    assert "Warning" in panel.title


def test_display_info(console_display, mock_console):
    console_display.display_info("API key saved successfully.")

    panel = printed_panel(mock_console)
    assert panel.renderable.plain == "API key saved successfully."
    assert "Info" in panel.title


def test_get_secret_hides_input(console_display, mock_console):
    mock_console.input.return_value = "abc123"

    assert console_display.get_secret("Enter your Weather API key: ") == "abc123"
    mock_console.input.assert_called_once_with(
        "[bold green]Enter your Weather API key: [/bold green]", password=True
    )
