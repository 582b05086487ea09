# SPDX-License-Identifier: MIT
"""Defensive fallbacks for conditions that should never happen.

A defensive failure is logged at error level with a ``defensive`` tag so
operators can tell it apart from ordinary diagnostics, counted, and then
execution continues with a well-defined fallback value. Nothing in this
module raises.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

import logfire

from . import telemetry
from .constants import LOG_TARGET
from .errors import DecodeError

T = TypeVar("T")

DEFENSIVE_TAG = "defensive"

_defensive_failures = logfire.metric_counter("hostconfig_defensive_failures")


def defensive(message: str, **attributes: Any) -> None:
    """Signal a defensive failure described by ``message``."""

    logfire.error(
        "Defensive failure: {reason}",
        reason=message,
        target=LOG_TARGET,
        _tags=[DEFENSIVE_TAG],
        **attributes,
    )
    _defensive_failures.add(1)
    telemetry.record_defensive(message)


def defensive_unwrap_or_default(
    loader: Callable[[], T | None], default_factory: Callable[[], T], proof: str
) -> T:
    """Return ``loader()`` or a default when it yields nothing usable.

    Args:
        loader: Callable reading the value; may return ``None`` or raise
            :class:`~hostconfig.errors.DecodeError`.
        default_factory: Produces the fallback value.
        proof: Why the value is expected to be present. Logged when it is not.

    Returns:
        The loaded value or ``default_factory()``.
    """

    try:
        value = loader()
    except DecodeError as exc:
        defensive(proof, error=str(exc), key=exc.key)
        return default_factory()
    if value is None:
        defensive(proof, error="value is absent")
        return default_factory()
    return value


__all__ = ["DEFENSIVE_TAG", "defensive", "defensive_unwrap_or_default"]
