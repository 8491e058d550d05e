"""Main entry point when executing trackercli as a package.

This allows running the package using python -m trackercli.
"""

from trackercli.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
