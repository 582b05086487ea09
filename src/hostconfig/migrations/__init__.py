# SPDX-License-Identifier: MIT
"""Host configuration storage migrations and the upgrade executor.

``MIGRATIONS`` lists the migrations for this record family in the order the
host applies them. Each one is version gated, so the whole tuple can be run on
every upgrade; migrations whose precondition no longer holds cost a single
read and log a reminder that they can be removed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

import logfire

from .. import telemetry
from ..monitoring import configure_from_settings
from ..settings import Settings, load_settings
from ..storage import KeyValueStore, OverlayStore
from ..weights import Weight
from .base import OnRuntimeUpgrade
from .v9 import MigrateToV9

MIGRATIONS: tuple[type[OnRuntimeUpgrade], ...] = (MigrateToV9,)


@dataclass
class DryRunReport:
    """Outcome of :func:`try_execute_upgrades`."""

    weight: Weight
    changes: dict[str, bytes] = field(default_factory=dict)
    checked: list[str] = field(default_factory=list)


def execute_upgrades(
    store: KeyValueStore,
    migrations: Sequence[type[OnRuntimeUpgrade]] | None = None,
    settings: Settings | None = None,
) -> Weight:
    """Run ``migrations`` against ``store`` and return their summed weight."""

    settings = settings or load_settings()
    telemetry.reset()
    total = Weight.zero()
    for migration_cls in migrations if migrations is not None else MIGRATIONS:
        total = total + migration_cls(store, settings).run()
    telemetry.log_summary()
    return total


def try_execute_upgrades(
    store: KeyValueStore,
    migrations: Sequence[type[OnRuntimeUpgrade]] | None = None,
    settings: Settings | None = None,
    checks: bool = True,
) -> DryRunReport:
    """Run ``migrations`` in offline verification mode.

    Migrations execute against an :class:`~hostconfig.storage.OverlayStore`
    over ``store``; ``store`` itself is never written. With ``checks`` enabled
    each ``run()`` is bracketed by its ``pre_check`` and ``post_check``.

    Returns:
        The summed weight and the writes the upgrade would perform.

    Raises:
        MigrationCheckError: If a post-upgrade check fails.
    """

    settings = settings or load_settings()
    overlay = OverlayStore(store)
    telemetry.reset()
    report = DryRunReport(weight=Weight.zero())
    with logfire.span("migrations.try_execute_upgrades", attributes={"checks": checks}):
        for migration_cls in migrations if migrations is not None else MIGRATIONS:
            migration = migration_cls(overlay, settings)
            state = migration.pre_check() if checks else b""
            report.weight = report.weight + migration.run()
            if checks:
                migration.post_check(state)
                report.checked.append(migration.name)
        report.changes = overlay.changes
        logfire.info(
            "Dry run complete",
            migrations=len(report.checked),
            changed_keys=sorted(report.changes),
            reads=report.weight.reads,
            writes=report.weight.writes,
        )
        telemetry.log_summary()
    return report


def upgrade(
    store: KeyValueStore,
    config_path: Path | str | None = None,
    *,
    dry_run: bool = False,
) -> Weight | DryRunReport:
    """Load settings, configure Logfire and run the registered migrations.

    Args:
        store: Backend holding the host configuration records.
        config_path: Optional YAML configuration file for :func:`load_settings`.
        dry_run: Run through :func:`try_execute_upgrades` instead of writing.

    Returns:
        The summed weight, or the dry-run report when ``dry_run`` is set.
    """

    settings = load_settings(config_path)
    configure_from_settings(settings)
    try:
        if dry_run:
            return try_execute_upgrades(store, settings=settings)
        return execute_upgrades(store, settings=settings)
    finally:
        logfire.force_flush()


__all__ = [
    "MIGRATIONS",
    "OnRuntimeUpgrade",
    "MigrateToV9",
    "DryRunReport",
    "execute_upgrades",
    "try_execute_upgrades",
    "upgrade",
]
