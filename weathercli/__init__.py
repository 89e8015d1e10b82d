"""weathercli: terminal weather forecasts backed by a local response cache."""

__version__ = "1.2.0"
