# SPDX-License-Identifier: MIT
"""Versioned storage migrations for host configuration records.

Exports:
    HostConfiguration: Current (v9) configuration schema.
    MigrateToV9: Version-gated v8 to v9 migration.
    execute_upgrades: Run the registered migrations and sum their weight.
    try_execute_upgrades: Run the migrations offline with pre/post checks.
    upgrade: Settings-driven driver that also configures Logfire.
    InMemoryStore: Dictionary backed key/value store.
    Weight: Cost reported to the execution-budget accountant.
"""

from .configuration import HostConfiguration
from .migrations import (
    MIGRATIONS,
    DryRunReport,
    MigrateToV9,
    OnRuntimeUpgrade,
    execute_upgrades,
    try_execute_upgrades,
    upgrade,
)
from .settings import Settings, load_settings
from .storage import InMemoryStore, KeyValueStore, OverlayStore
from .weights import RuntimeDbWeight, Weight

__all__ = [
    "HostConfiguration",
    "MIGRATIONS",
    "DryRunReport",
    "MigrateToV9",
    "OnRuntimeUpgrade",
    "execute_upgrades",
    "try_execute_upgrades",
    "upgrade",
    "Settings",
    "load_settings",
    "InMemoryStore",
    "KeyValueStore",
    "OverlayStore",
    "RuntimeDbWeight",
    "Weight",
]
