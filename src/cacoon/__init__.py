"""Command-line client for the Cacoo diagram API."""

__version__ = "0.1.0"
