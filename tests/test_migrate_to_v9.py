# SPDX-License-Identifier: MIT
"""Behavioural tests for the version-gated v8 to v9 migration."""

from __future__ import annotations

import pytest

from hostconfig import telemetry
from hostconfig.configuration import HostConfiguration
from hostconfig.constants import DEFAULT_PALLET as PALLET
from hostconfig.constants import LEGACY_MIN_BACKING_VOTES
from hostconfig.migrations import v8, v9
from hostconfig.migrations.v9 import MigrateToV9
from hostconfig.settings import Settings
from hostconfig.storage import InMemoryStore, StorageVersion
from hostconfig.weights import ROCKS_DB_READ, ROCKS_DB_WRITE


def _run(store: InMemoryStore, settings):
    return MigrateToV9(store, settings).run()


def _defensive_logs(log_calls) -> list:
    return [
        c
        for c in log_calls
        if c.level == "error" and "defensive" in c.kwargs.get("_tags", [])
    ]


def test_migrates_active_and_pending_configs(store, settings, seed_v8) -> None:
    """Known values survive and the new field takes the legacy constant."""

    active = v8.HostConfigurationV8(
        needed_approvals=69,
        paras_availability_period=55,
        hrmp_recipient_deposit=1337,
        max_pov_size=1111,
        minimum_validation_upgrade_delay=20,
    )
    pending = [(100, active), (300, active)]
    seed_v8(store, active=active, pending=pending)

    _run(store, settings)

    migrated = v9.active_config(store, PALLET).get()
    assert migrated is not None
    assert migrated.needed_approvals == 69
    assert migrated.paras_availability_period == 55
    assert migrated.hrmp_recipient_deposit == 1337
    assert migrated.max_pov_size == 1111
    assert migrated.minimum_validation_upgrade_delay == 20
    assert migrated.minimum_backing_votes == LEGACY_MIN_BACKING_VOTES

    migrated_pending = v9.pending_configs(store, PALLET).get()
    assert migrated_pending == [(100, migrated), (300, migrated)]


def test_absent_active_config_uses_default(store, settings, log_calls, seed_v8) -> None:
    seed_v8(store, pending=[])

    _run(store, settings)

    assert v9.active_config(store, PALLET).get() == HostConfiguration()
    failures = _defensive_logs(log_calls)
    assert len(failures) == 1
    assert failures[0].kwargs["reason"] == "Could not decode old config"
    assert telemetry.defensive_count() == 1


def test_corrupt_active_config_uses_default(
    store, settings, log_calls, seed_v8
) -> None:
    seed_v8(store, pending=[])
    store.set(v8.active_config(store, PALLET).key, b'{"max_code_size": -1}')

    _run(store, settings)

    assert v9.active_config(store, PALLET).get() == HostConfiguration()
    failures = _defensive_logs(log_calls)
    assert [f.kwargs["reason"] for f in failures] == ["Could not decode old config"]
    assert failures[0].kwargs["key"] == "Configuration::ActiveConfig@v8"


def test_pending_order_is_preserved(store, settings, populated_v8, seed_v8) -> None:
    """Entries keep their stored order even when sessions are not sorted."""

    other = v8.HostConfigurationV8(max_code_size=1)
    pending = [(7, populated_v8), (3, other), (12, populated_v8)]
    seed_v8(store, active=other, pending=pending)

    _run(store, settings)

    migrated = v9.pending_configs(store, PALLET).get()
    assert migrated is not None
    assert [session for session, _ in migrated] == [7, 3, 12]
    assert migrated[0][1] == v9.translate(populated_v8)
    assert migrated[1][1] == v9.translate(other)


def test_absent_pending_list_becomes_empty(
    store, settings, populated_v8, log_calls, seed_v8
) -> None:
    seed_v8(store, active=populated_v8)

    weight = _run(store, settings)

    assert v9.pending_configs(store, PALLET).get() == []
    assert weight.as_tuple() == (1, 1)
    assert _defensive_logs(log_calls) == []


def test_corrupt_pending_list_becomes_empty(
    store, settings, populated_v8, log_calls, seed_v8
) -> None:
    seed_v8(store, active=populated_v8)
    store.set(v8.pending_configs(store, PALLET).key, b"not json")

    weight = _run(store, settings)

    assert v9.pending_configs(store, PALLET).get() == []
    assert v9.active_config(store, PALLET).get() == v9.translate(populated_v8)
    assert weight.as_tuple() == (1, 1)
    failures = _defensive_logs(log_calls)
    assert [f.kwargs["reason"] for f in failures] == [
        "Could not decode pending configs"
    ]


@pytest.mark.parametrize("count", [0, 1, 4])
def test_weight_counts_every_configuration(
    store, settings, populated_v8, count, seed_v8
) -> None:
    pending = [(i, populated_v8) for i in range(count)]
    seed_v8(store, active=populated_v8, pending=pending)

    weight = _run(store, settings)

    expected = count + 1
    assert weight.as_tuple() == (expected, expected)
    assert weight.ref_time == expected * ROCKS_DB_READ + expected * ROCKS_DB_WRITE


def test_gate_open_bumps_version(
    store, settings, populated_v8, log_calls, seed_v8
) -> None:
    seed_v8(store, active=populated_v8, pending=[])
    store.reads = store.writes = 0

    _run(store, settings)

    assert StorageVersion(store, PALLET).get() == v9.VERSION
    # active record, pending list and version marker
    assert store.writes == 3
    messages = [c.message for c in log_calls if c.level == "info"]
    assert "HostConfiguration MigrateToV9 started" in messages
    assert "HostConfiguration MigrateToV9 executed successfully" in messages
    [outcome] = list(telemetry.iter_outcomes())
    assert outcome.executed is True


@pytest.mark.parametrize("version", [None, 0, 7, 9, 10])
def test_gate_closed_is_noop(
    store, settings, populated_v8, log_calls, version, seed_v8
) -> None:
    seed_v8(store, active=populated_v8, pending=[(1, populated_v8)], version=version)
    before = store.snapshot()
    store.reads = store.writes = 0

    weight = _run(store, settings)

    assert store.snapshot() == before
    assert store.writes == 0
    assert store.reads == 1
    assert weight == settings.db_weight().reads(1)
    warnings = [c for c in log_calls if c.level == "warning"]
    assert [w.message for w in warnings] == [
        "HostConfiguration MigrateToV9 should be removed."
    ]
    assert warnings[0].kwargs["on_chain_version"] == (version or 0)
    [outcome] = list(telemetry.iter_outcomes())
    assert outcome.executed is False


def test_second_run_is_noop(store, settings, populated_v8, seed_v8) -> None:
    seed_v8(store, active=populated_v8, pending=[(5, populated_v8)])
    _run(store, settings)
    after_first = store.snapshot()

    weight = _run(store, settings)

    assert store.snapshot() == after_first
    assert weight.as_tuple() == (1, 0)


def test_v8_records_are_left_in_place(store, settings, populated_v8, seed_v8) -> None:
    seed_v8(store, active=populated_v8, pending=[(2, populated_v8)])
    active_key = v8.active_config(store, PALLET).key
    pending_key = v8.pending_configs(store, PALLET).key
    before = store.snapshot()

    _run(store, settings)

    after = store.snapshot()
    assert after[active_key] == before[active_key]
    assert after[pending_key] == before[pending_key]
    assert v8.active_config(store, PALLET).get() == populated_v8


def test_corrupt_version_marker_skips_migration(
    store, settings, populated_v8, log_calls, seed_v8
) -> None:
    seed_v8(store, active=populated_v8, version=None)
    store.set(StorageVersion(store, PALLET).key, b"eight")

    weight = _run(store, settings)

    assert weight.as_tuple() == (1, 0)
    assert not v9.active_config(store, PALLET).exists()
    warnings = [c.message for c in log_calls if c.level == "warning"]
    assert "Storage version marker is undecodable; treating as 0" in warnings


def test_custom_pallet_and_weights(store, populated_v8) -> None:
    custom = Settings(pallet="HostConfig", db_read_weight=1, db_write_weight=10)
    v8.active_config(store, "HostConfig").set(populated_v8)
    StorageVersion(store, "HostConfig").put(v8.VERSION)

    weight = MigrateToV9(store, custom).run()

    assert weight.ref_time == 11
    assert v9.active_config(store, "HostConfig").get() == v9.translate(populated_v8)
    assert StorageVersion(store, PALLET).get() == 0


@pytest.mark.parametrize("marker", [b'"8"', b"8.0", b"-8", b"true"])
def test_non_integer_version_marker_keeps_gate_closed(
    store, settings, populated_v8, log_calls, seed_v8, marker
) -> None:
    """Only a plain JSON integer 8 opens the gate."""

    seed_v8(store, active=populated_v8, version=None)
    store.set(StorageVersion(store, PALLET).key, marker)

    weight = _run(store, settings)

    assert weight.as_tuple() == (1, 0)
    assert not v9.active_config(store, PALLET).exists()
    assert store.snapshot()[StorageVersion(store, PALLET).key] == marker
