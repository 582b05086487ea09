# SPDX-License-Identifier: MIT
"""Tests for configuration loading."""

import pytest

from hostconfig.settings import load_settings
from hostconfig.weights import ROCKS_DB_READ, ROCKS_DB_WRITE, RuntimeDbWeight


def test_load_settings_defaults() -> None:
    """Without file or environment the defaults apply."""
    settings = load_settings()
    assert settings.pallet == "Configuration"
    assert settings.log_level == "warn"
    assert settings.logfire_token is None
    assert settings.db_weight() == RuntimeDbWeight(ROCKS_DB_READ, ROCKS_DB_WRITE)


def test_load_settings_reads_env(monkeypatch) -> None:
    """Environment variables should populate the settings model."""
    monkeypatch.setenv("HC_PALLET", "HostConfig")
    monkeypatch.setenv("HC_LOG_LEVEL", "debug")
    monkeypatch.setenv("HC_DB_READ_WEIGHT", "7")
    settings = load_settings()
    assert settings.pallet == "HostConfig"
    assert settings.log_level == "debug"
    assert settings.db_weight().read == 7


def test_load_settings_reads_yaml(tmp_path) -> None:
    """Values are read from a YAML file."""
    path = tmp_path / "config.yaml"
    path.write_text("pallet: Parachains\ndb_write_weight: 11\n", encoding="utf-8")
    settings = load_settings(path)
    assert settings.pallet == "Parachains"
    assert settings.db_write_weight == 11


def test_env_overrides_file(monkeypatch, tmp_path) -> None:
    """Environment variables win over file values."""
    path = tmp_path / "config.yaml"
    path.write_text("pallet: FromFile\nlog_level: info\n", encoding="utf-8")
    monkeypatch.setenv("HC_PALLET", "FromEnv")
    settings = load_settings(path)
    assert settings.pallet == "FromEnv"
    assert settings.log_level == "info"


def test_empty_file_uses_defaults(tmp_path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    assert load_settings(path).pallet == "Configuration"


@pytest.mark.parametrize(
    "content",
    ["log_level: loud\n", "db_read_weight: -1\n", "pallet: ''\n", "- a\n- b\n"],
)
def test_invalid_file_raises(tmp_path, content: str) -> None:
    """Invalid values should raise ``RuntimeError``."""
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(RuntimeError):
        load_settings(path)


def test_missing_file_raises(tmp_path) -> None:
    with pytest.raises(RuntimeError, match="Cannot read configuration file"):
        load_settings(tmp_path / "missing.yaml")


def test_invalid_env_raises(monkeypatch) -> None:
    monkeypatch.setenv("HC_DB_WRITE_WEIGHT", "heavy")
    with pytest.raises(RuntimeError, match="Invalid configuration"):
        load_settings()
