# SPDX-License-Identifier: MIT
"""Aggregate migration outcomes for end-of-upgrade reporting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List

import logfire

from .weights import Weight


@dataclass
class MigrationOutcome:
    """Result of a single ``run()`` of a migration."""

    name: str
    executed: bool
    weight: Weight


_outcomes: List[MigrationOutcome] = []
_defensive_messages: List[str] = []


def record_migration(name: str, *, executed: bool, weight: Weight) -> None:
    """Record that migration ``name`` ran (``executed``) or was skipped."""

    _outcomes.append(MigrationOutcome(name=name, executed=executed, weight=weight))


def record_defensive(message: str) -> None:
    """Track a defensive substitution."""

    _defensive_messages.append(message)


def defensive_count() -> int:
    """Return the number of defensive substitutions since the last reset."""

    return len(_defensive_messages)


def iter_outcomes() -> Iterator[MigrationOutcome]:
    """Yield recorded migration outcomes in execution order."""

    return iter(list(_outcomes))


def reset() -> None:
    """Clear all recorded outcomes and defensive messages."""

    _outcomes.clear()
    _defensive_messages.clear()


def log_summary() -> None:
    """Emit one log per recorded outcome followed by the totals."""

    if not _outcomes:
        return
    total = Weight.zero()
    for outcome in _outcomes:
        total = total + outcome.weight
        logfire.info(
            "Migration outcome",
            migration=outcome.name,
            executed=outcome.executed,
            reads=outcome.weight.reads,
            writes=outcome.weight.writes,
            ref_time=outcome.weight.ref_time,
        )
    logfire.info(
        "Migration totals",
        migrations=len(_outcomes),
        executed=sum(1 for o in _outcomes if o.executed),
        reads=total.reads,
        writes=total.writes,
        ref_time=total.ref_time,
        defensive=len(_defensive_messages),
    )


__all__ = [
    "MigrationOutcome",
    "record_migration",
    "record_defensive",
    "defensive_count",
    "iter_outcomes",
    "reset",
    "log_summary",
]
