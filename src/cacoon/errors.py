"""Exception hierarchy shared by the client modules."""

from __future__ import annotations

EXIT_USAGE = 1
EXIT_FAILURE = 86


class CliError(Exception):
    """Raised when the CLI encounters an expected error condition."""

    exit_code = EXIT_USAGE


class ConfigError(CliError):
    """Raised when required configuration is missing or unreadable."""


class TransportError(CliError):
    """Raised when a request never produced an HTTP response."""

    exit_code = EXIT_FAILURE


class PayloadError(CliError):
    """Raised when a request body cannot be encoded as a JSON object."""

    exit_code = EXIT_FAILURE


class DecodeError(CliError):
    """Raised when a response body does not decode into the expected shape."""

    exit_code = EXIT_FAILURE
