# SPDX-License-Identifier: MIT
"""Helpers for enabling Pydantic Logfire telemetry."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Literal

import logfire

if TYPE_CHECKING:
    from .settings import Settings

LogLevel = Literal["fatal", "error", "warn", "notice", "info", "debug", "trace"]

SERVICE_NAME = "hostconfig-migrations"


def _mask_token(value: str | None) -> str | None:
    """Return a masked representation of ``value`` for safe logging."""

    if not value:
        return None
    return f"{value[:4]}..."


def init_logfire(token: str | None = None, min_log_level: LogLevel = "warn") -> None:
    """Configure Logfire for the migration engine.

    Args:
        token: Optional Logfire API token. If omitted, ``HC_LOGFIRE_TOKEN`` from
            the environment is used. Missing tokens keep telemetry local.
        min_log_level: Minimum level for console and telemetry output.
    """

    key = token or os.getenv("HC_LOGFIRE_TOKEN")
    masked = _mask_token(key)
    if key and hasattr(logfire, "add_masking_rule"):
        logfire.add_masking_rule(key)
    logfire.debug("Configuring logfire", token=masked)
    logfire.configure(
        token=key,
        send_to_logfire="if-token-present",
        service_name=SERVICE_NAME,
        console=logfire.ConsoleOptions(
            min_log_level=min_log_level,
            show_project_link=False,
            verbose=True,
        ),
        min_level=min_log_level,
    )


def configure_from_settings(settings: Settings) -> None:
    """Configure Logfire from the token and level held in ``settings``."""

    init_logfire(settings.logfire_token, settings.log_level)


__all__ = ["LogLevel", "SERVICE_NAME", "init_logfire", "configure_from_settings"]
