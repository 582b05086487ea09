# SPDX-License-Identifier: MIT
"""Test configuration for hostconfig.

Keeps Logfire local, isolates ``HC_`` environment variables and resets the
process-wide telemetry between tests.
"""

from __future__ import annotations

import os
from types import SimpleNamespace
from typing import Any, Callable

import logfire
import pytest

from hostconfig import telemetry
from hostconfig.constants import DEFAULT_PALLET
from hostconfig.migrations import v8
from hostconfig.primitives import AsyncBackingParams, ExecutorParam
from hostconfig.settings import Settings
from hostconfig.storage import InMemoryStore, StorageVersion

@pytest.fixture(scope="session", autouse=True)
def _configure_logfire():
    """Configure Logfire without console output or remote export."""

    logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Remove ``HC_`` variables so settings come from defaults."""

    for name in list(os.environ):
        if name.upper().startswith("HC_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_telemetry():
    telemetry.reset()
    yield
    telemetry.reset()


@pytest.fixture()
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture()
def settings() -> Settings:
    return Settings()


@pytest.fixture()
def log_calls(monkeypatch) -> list[SimpleNamespace]:
    """Record calls to the module-level Logfire logging functions."""

    calls: list[SimpleNamespace] = []

    def recorder(level: str):
        def _log(msg_template: str, /, *args: Any, **kwargs: Any) -> None:
            calls.append(
                SimpleNamespace(level=level, message=msg_template, kwargs=kwargs)
            )

        return _log

    for level in ("trace", "debug", "info", "warning", "error"):
        monkeypatch.setattr(logfire, level, recorder(level))
    return calls


@pytest.fixture()
def populated_v8() -> v8.HostConfigurationV8:
    """Return a v8 configuration with no field left at its default."""

    return v8.HostConfigurationV8(
        max_code_size=3_145_728,
        max_head_data_size=32_768,
        max_upward_queue_count=174_762,
        max_upward_queue_size=1_048_576,
        max_upward_message_size=65_531,
        max_upward_message_num_per_candidate=16,
        hrmp_max_message_num_per_candidate=10,
        validation_upgrade_cooldown=14_400,
        validation_upgrade_delay=600,
        async_backing_params=AsyncBackingParams(
            max_candidate_depth=3, allowed_ancestry_len=2
        ),
        max_pov_size=5_242_880,
        max_downward_message_size=51_200,
        hrmp_max_parachain_outbound_channels=30,
        hrmp_sender_deposit=100_000_000_000,
        hrmp_recipient_deposit=200_000_000_000,
        hrmp_channel_max_capacity=1_000,
        hrmp_channel_max_total_size=102_400,
        hrmp_max_parachain_inbound_channels=31,
        hrmp_channel_max_message_size=1_048_576,
        executor_params=(
            ExecutorParam(kind="max_memory_pages", value=8_192),
            ExecutorParam(
                kind="pvf_prep_timeout", value=60_000, timeout_kind="precheck"
            ),
            ExecutorParam(kind="wasm_ext_bulk_memory"),
        ),
        code_retention_period=28_800,
        on_demand_cores=4,
        on_demand_retries=3,
        on_demand_queue_max_size=500,
        on_demand_target_queue_utilization=500_000_000,
        on_demand_fee_variability=40_000_000,
        on_demand_base_fee=7_000_000,
        on_demand_ttl=9,
        group_rotation_frequency=20,
        paras_availability_period=4,
        scheduling_lookahead=2,
        max_validators_per_core=5,
        max_validators=300,
        dispute_period=7,
        dispute_post_conclusion_acceptance_period=150,
        no_show_slots=3,
        n_delay_tranches=25,
        zeroth_delay_tranche_width=1,
        needed_approvals=30,
        relay_vrf_modulo_samples=6,
        pvf_voting_ttl=3,
        minimum_validation_upgrade_delay=21,
    )


@pytest.fixture()
def seed_v8() -> Callable[..., None]:
    """Return a helper writing v8 records and the version marker."""

    def _seed(
        store: InMemoryStore,
        active: v8.HostConfigurationV8 | None = None,
        pending: v8.PendingConfigsV8 | None = None,
        version: int | None = v8.VERSION,
    ) -> None:
        if active is not None:
            v8.active_config(store, DEFAULT_PALLET).set(active)
        if pending is not None:
            v8.pending_configs(store, DEFAULT_PALLET).set(pending)
        if version is not None:
            StorageVersion(store, DEFAULT_PALLET).put(version)

    return _seed
