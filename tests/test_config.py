from __future__ import annotations

from pathlib import Path

import pytest

from userdesk.config import load_config, resolve_config_path


def test_defaults_without_file_or_environment(tmp_path: Path) -> None:
    config = load_config(tmp_path / "missing.yaml", environ={})

    assert config.host == "0.0.0.0"
    assert config.port == 8000
    assert config.log_level == "INFO"
    assert config.database_path.name == "userdesk.sqlite3"


def test_yaml_values_resolve_relative_paths(tmp_path: Path) -> None:
    config_file = tmp_path / "userdesk.yaml"
    config_file.write_text(
        "database_path: db/users.sqlite3\nhost: 127.0.0.1\nport: 9000\nlog_level: debug\n",
        encoding="utf-8",
    )

    config = load_config(config_file, environ={})

    assert config.database_path == (tmp_path / "db" / "users.sqlite3").resolve()
    assert config.host == "127.0.0.1"
    assert config.port == 9000
    assert config.log_level == "DEBUG"


def test_environment_overrides_file(tmp_path: Path) -> None:
    config_file = tmp_path / "userdesk.yaml"
    config_file.write_text("port: 9000\n", encoding="utf-8")

    config = load_config(
        config_file,
        environ={
            "USERDESK_PORT": "9100",
            "USERDESK_HOST": "localhost",
            "USERDESK_DB_PATH": str(tmp_path / "env.sqlite3"),
            "USERDESK_LOG_LEVEL": "warning",
        },
    )

    assert config.port == 9100
    assert config.host == "localhost"
    assert config.database_path == (tmp_path / "env.sqlite3").resolve()
    assert config.log_level == "WARNING"


def test_config_path_from_environment(tmp_path: Path) -> None:
    config_file = tmp_path / "custom.yaml"
    config_file.write_text("port: 8123\n", encoding="utf-8")

    config = load_config(environ={"USERDESK_CONFIG": str(config_file)})

    assert config.port == 8123
    assert resolve_config_path(str(config_file)) == config_file.resolve()


@pytest.mark.parametrize(
    ("environ", "message"),
    [
        ({"USERDESK_PORT": "http"}, "Port must be an integer"),
        ({"USERDESK_PORT": "70000"}, "between 1 and 65535"),
        ({"USERDESK_LOG_LEVEL": "chatty"}, "Unknown log level"),
    ],
)
def test_invalid_values_raise(tmp_path: Path, environ: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        load_config(tmp_path / "missing.yaml", environ=environ)


def test_non_mapping_file_is_rejected(tmp_path: Path) -> None:
    config_file = tmp_path / "userdesk.yaml"
    config_file.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="must contain a mapping"):
        load_config(config_file, environ={})
