"""bugsheet command-line interface."""

from bugsheet.cli.app import app

__all__ = ["app"]
