"""Configuration loading for the Cacoo CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional

from dotenv import dotenv_values

from .errors import ConfigError


CONFIG_ENV_PREFIX = "CACOON_"
DEFAULT_ENDPOINT = "https://cacoo.com/api/v1"
DEFAULT_ENV_FILE = Path(".env")
OUTPUT_FORMATS = ("json", "yaml")
LOG_FORMATS = ("plain", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ClientConfig:
    """Credentials and presentation settings for one CLI invocation."""

    api_key: str
    endpoint: str = DEFAULT_ENDPOINT
    output: str = "json"
    log_level: str = "WARNING"
    log_format: str = "plain"

    def __post_init__(self) -> None:
        _validate_config(self)

    def logging_dict(self) -> Dict[str, Any]:
        """Return a sanitized mapping suitable for structured logging."""

        return {
            "api_key": "***REDACTED***" if self.api_key else None,
            "endpoint": self.endpoint,
            "output": self.output,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }


def _validate_config(config: ClientConfig) -> None:
    if not config.api_key or not config.api_key.strip():
        raise ValueError(f"api_key is required (env: {CONFIG_ENV_PREFIX}API_KEY).")
    if not config.endpoint.startswith(("http://", "https://")):
        raise ValueError(f"endpoint must be an http(s) URL; got {config.endpoint}.")
    _validate_choice("output", config.output, OUTPUT_FORMATS)
    _validate_choice("log_format", config.log_format, LOG_FORMATS)
    _validate_choice("log_level", config.log_level, LOG_LEVELS)


def _validate_choice(name: str, value: str, allowed: tuple) -> None:
    if value not in allowed:
        raise ValueError(f"{name} must be one of {list(allowed)}; got {value}.")


def _load_env_file(path: Optional[Path]) -> Dict[str, Any]:
    if path is None:
        if not DEFAULT_ENV_FILE.is_file():
            return {}
        path = DEFAULT_ENV_FILE
    elif not path.is_file():
        raise ConfigError(f"Env file not found: {path}")
    try:
        values = dotenv_values(path, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Error loading env file {path}: {exc}") from exc
    return _strip_prefix(values)


def _load_env_config(environ: Mapping[str, str]) -> Dict[str, Any]:
    return _strip_prefix(environ)


def _strip_prefix(values: Mapping[str, Optional[str]]) -> Dict[str, Any]:
    mapping: Dict[str, Any] = {}
    for field in fields(ClientConfig):
        env_key = f"{CONFIG_ENV_PREFIX}{field.name}".upper()
        if values.get(env_key) is not None:
            mapping[field.name] = values[env_key]
    return mapping


def _apply_mapping(values: MutableMapping[str, Any], overrides: Mapping[str, Any]) -> None:
    for key, value in overrides.items():
        if value is None:
            continue
        if key == "endpoint":
            values[key] = str(value).strip().rstrip("/")
        elif key == "api_key":
            values[key] = str(value).strip()
        elif key == "log_level":
            values[key] = str(value).upper()
        elif key in {"output", "log_format"}:
            values[key] = str(value).lower()
        else:
            values[key] = value


def load_config(
    env_file: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ClientConfig:
    """Load configuration from defaults, env file, environment and CLI (in that order)."""

    values: Dict[str, Any] = {}
    _apply_mapping(values, _load_env_file(env_file))
    _apply_mapping(values, _load_env_config(os.environ if environ is None else environ))
    _apply_mapping(values, overrides or {})
    if not values.get("api_key"):
        raise ConfigError(f"{CONFIG_ENV_PREFIX}API_KEY is not set")
    try:
        return ClientConfig(**values)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc

