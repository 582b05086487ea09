# SPDX-License-Identifier: MIT
"""Centralised configuration for the migration engine.

This module exposes :class:`Settings`, a ``pydantic-settings`` model that
combines values from an optional YAML configuration file and environment
variables prefixed with ``HC_``. Environment variables take precedence over
file-based values and the merged configuration is validated before use.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_PALLET
from .monitoring import LogLevel
from .weights import ROCKS_DB_READ, ROCKS_DB_WRITE, RuntimeDbWeight

ENV_PREFIX = "HC_"


class Settings(BaseSettings):
    """Migration settings combining file-based and environment configuration."""

    pallet: str = Field(
        DEFAULT_PALLET,
        min_length=1,
        description="Storage prefix owning the host configuration records.",
    )
    log_level: LogLevel = Field("warn", description="Logging verbosity level.")
    logfire_token: str | None = Field(
        None, description="Logfire authentication token, if available.", repr=False
    )
    db_read_weight: int = Field(
        ROCKS_DB_READ, ge=0, description="Cost of one storage read."
    )
    db_write_weight: int = Field(
        ROCKS_DB_WRITE, ge=0, description="Cost of one storage write."
    )

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore")

    def db_weight(self) -> RuntimeDbWeight:
        """Return the storage cost model described by these settings."""
        return RuntimeDbWeight(read=self.db_read_weight, write=self.db_write_weight)


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        raise RuntimeError(f"Cannot read configuration file '{path}': {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"Configuration file '{path}' must contain a mapping")
    return data


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load and validate migration settings.

    Values from ``config_path`` are used only for keys without a matching
    ``HC_`` environment variable, so the environment always wins.

    Args:
        config_path: Optional path to a YAML configuration file.

    Returns:
        Settings: Fully validated configuration.

    Raises:
        RuntimeError: If the file cannot be read or values are invalid.
    """

    file_values = _read_config_file(Path(config_path)) if config_path else {}
    overrides = {
        name: value
        for name, value in file_values.items()
        if f"{ENV_PREFIX}{name}".upper() not in os.environ
    }
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        # Summarise validation issues so the caller receives clear feedback.
        details = "; ".join(
            f"{'.'.join(map(str, error['loc']))}: {error['msg']}"
            for error in exc.errors()
        )
        raise RuntimeError(f"Invalid configuration: {details}") from exc


__all__ = ["ENV_PREFIX", "Settings", "load_settings"]
