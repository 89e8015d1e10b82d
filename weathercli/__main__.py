"""Main entry point when executing weathercli as a package.

This allows running the package using python -m weathercli.
"""

from weathercli.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
