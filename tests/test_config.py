from pathlib import Path

import pytest

from cacoon.config import DEFAULT_ENDPOINT, ClientConfig, load_config
from cacoon.errors import ConfigError


@pytest.fixture(autouse=True)
def _isolated_cwd(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)


def test_defaults_from_environment() -> None:
    config = load_config(environ={"CACOON_API_KEY": "k1"})
    assert config.api_key == "k1"
    assert config.endpoint == DEFAULT_ENDPOINT
    assert config.output == "json"


def test_missing_api_key_is_fatal() -> None:
    with pytest.raises(ConfigError, match="CACOON_API_KEY"):
        load_config(environ={"CACOON_ENDPOINT": "https://example.test/api"})


def test_blank_api_key_is_fatal() -> None:
    with pytest.raises(ConfigError):
        load_config(environ={"CACOON_API_KEY": "   "})


def test_endpoint_override_strips_trailing_slash() -> None:
    config = load_config(
        environ={"CACOON_API_KEY": "k1", "CACOON_ENDPOINT": "https://example.test/api/v1/"}
    )
    assert config.endpoint == "https://example.test/api/v1"


def test_default_env_file_seeds_values(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "# local settings\nCACOON_API_KEY=from-file\nCACOON_OUTPUT=yaml\n",
        encoding="utf-8",
    )
    config = load_config(environ={})
    assert config.api_key == "from-file"
    assert config.output == "yaml"


def test_environment_overrides_env_file(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("CACOON_API_KEY=from-file\n", encoding="utf-8")
    config = load_config(environ={"CACOON_API_KEY": "from-env"})
    assert config.api_key == "from-env"


def test_cli_overrides_win(tmp_path: Path) -> None:
    config = load_config(
        environ={"CACOON_API_KEY": "k1", "CACOON_LOG_LEVEL": "info"},
        overrides={"log_level": "debug", "output": None},
    )
    assert config.log_level == "DEBUG"
    assert config.output == "json"


def test_explicit_env_file_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(env_file=tmp_path / "missing.env", environ={"CACOON_API_KEY": "k1"})


def test_explicit_env_file(tmp_path: Path) -> None:
    env_file = tmp_path / "cacoo.env"
    env_file.write_text('CACOON_API_KEY="quoted-key"\n', encoding="utf-8")
    config = load_config(env_file=env_file, environ={})
    assert config.api_key == "quoted-key"


def test_env_file_does_not_touch_process_environment(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("CACOON_API_KEY", raising=False)
    (tmp_path / ".env").write_text("CACOON_API_KEY=from-file\n", encoding="utf-8")
    load_config(environ={})
    import os

    assert "CACOON_API_KEY" not in os.environ


@pytest.mark.parametrize(
    "field,value,error",
    [
        ("output", "xml", "output"),
        ("log_format", "pretty", "log_format"),
        ("log_level", "LOUD", "log_level"),
        ("endpoint", "ftp://cacoo.com", "endpoint"),
    ],
)
def test_bounds_enforced(field: str, value: str, error: str) -> None:
    with pytest.raises(ValueError, match=error):
        ClientConfig(api_key="k1", **{field: value})


def test_invalid_value_from_environment_is_config_error() -> None:
    with pytest.raises(ConfigError, match="output"):
        load_config(environ={"CACOON_API_KEY": "k1", "CACOON_OUTPUT": "xml"})


def test_logging_dict_masks_secrets() -> None:
    logged = ClientConfig(api_key="secret-key").logging_dict()
    assert logged["api_key"] == "***REDACTED***"
    assert "secret-key" not in logged.values()
