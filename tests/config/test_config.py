from __future__ import annotations

import logging
from pathlib import Path  # noqa: TC003

import pytest

from bundlemint.config import (
    BASE_URL_ENV_VAR,
    InvalidConfigurationError,
    MissingConfigurationError,
    StorageConfig,
    configure_logging,
    get_database_config,
    get_server_config,
    get_storage_config,
    optional_env_var,
    require_env_var,
    require_env_vars,
)


def test_require_env_vars_returns_stripped_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "  value ")

    assert require_env_vars(["EXAMPLE_VAR"]) == {"EXAMPLE_VAR": "value"}


def test_require_env_vars_reports_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.setenv("MISSING_A", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_optional_env_var_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "\t")

    assert optional_env_var("EXAMPLE_VAR") is None
    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_server_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(BASE_URL_ENV_VAR, "https://server.test/fhir/")

    assert get_server_config().base_url == "https://server.test/fhir"


def test_server_config_prefers_explicit_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(BASE_URL_ENV_VAR, "https://server.test/fhir")

    config = get_server_config(base_url="http://localhost:8080/r4")

    assert config.base_url == "http://localhost:8080/r4"


def test_server_config_requires_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(BASE_URL_ENV_VAR, raising=False)

    with pytest.raises(MissingConfigurationError, match=BASE_URL_ENV_VAR):
        get_server_config()


def test_server_config_rejects_relative_base_url() -> None:
    with pytest.raises(InvalidConfigurationError, match="--base-url"):
        get_server_config(base_url="server.test/fhir")


def test_storage_config_prefers_explicit_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("BUNDLEMINT_DATA_DIR", str(custom))

    assert get_storage_config().data_dir == custom


def test_storage_config_defaults_to_xdg_data_home(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("BUNDLEMINT_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    assert get_storage_config().data_dir == tmp_path.resolve() / "bundlemint"


def test_database_config_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert get_database_config().uri == "sqlite:///override.db"


def test_database_config_creates_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    storage = StorageConfig(data_dir=tmp_path / "data-dir")

    uri = get_database_config(storage=storage).uri

    expected_path = (tmp_path / "data-dir" / "identifiers.db").resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()


def test_configure_logging_reads_level_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", list(root.handlers))
    monkeypatch.setattr(root, "level", root.level)
    monkeypatch.setenv("BUNDLEMINT_LOG_LEVEL", "debug")

    configure_logging(force=True)

    assert logging.getLogger().level == logging.DEBUG
    configure_logging(level=logging.WARNING, force=True)
    assert logging.getLogger().level == logging.WARNING
