# SPDX-License-Identifier: MIT
"""Storage migration of the host configuration from v8 to v9.

v9 adds ``minimum_backing_votes``. Configurations written under v8 predate the
field and receive :data:`~hostconfig.constants.LEGACY_MIN_BACKING_VOTES`.

Both the active configuration and every queued pending configuration are
translated. v8 keys are left in place; once nothing references the v8 types
they are unreachable and a later step may prune them.
"""

from __future__ import annotations

import logfire
from pydantic_core import to_json

from .. import telemetry
from ..codec import decode
from ..configuration import HostConfigurationV9
from ..constants import LEGACY_MIN_BACKING_VOTES, LOG_TARGET
from ..defensive import defensive, defensive_unwrap_or_default
from ..errors import DecodeError, MigrationCheckError
from ..primitives import SessionIndex, StrictModel
from ..storage import KeyValueStore, StorageValue, StorageVersion, storage_key
from ..weights import RuntimeDbWeight, Weight
from . import v8
from .base import OnRuntimeUpgrade
from .v8 import HostConfigurationV8

VERSION = 9

PendingConfigsV9 = list[tuple[SessionIndex, HostConfigurationV9]]


def active_config(store: KeyValueStore, pallet: str) -> StorageValue[HostConfigurationV9]:
    """Return the accessor for the v9 active configuration."""
    return StorageValue(
        store, storage_key(pallet, "ActiveConfig", VERSION), HostConfigurationV9
    )


def pending_configs(store: KeyValueStore, pallet: str) -> StorageValue[PendingConfigsV9]:
    """Return the accessor for the v9 pending configurations."""
    return StorageValue(
        store, storage_key(pallet, "PendingConfigs", VERSION), PendingConfigsV9
    )


def translate(pre: HostConfigurationV8) -> HostConfigurationV9:
    """Return the v9 equivalent of ``pre``.

    Every field is assigned explicitly so the mapping can be audited line by
    line. A field added in a later version must be added here by hand.
    """

    # fmt: off
    return HostConfigurationV9(
        max_code_size                            = pre.max_code_size,
        max_head_data_size                       = pre.max_head_data_size,
        max_upward_queue_count                   = pre.max_upward_queue_count,
        max_upward_queue_size                    = pre.max_upward_queue_size,
        max_upward_message_size                  = pre.max_upward_message_size,
        max_upward_message_num_per_candidate     = pre.max_upward_message_num_per_candidate,
        hrmp_max_message_num_per_candidate       = pre.hrmp_max_message_num_per_candidate,
        validation_upgrade_cooldown              = pre.validation_upgrade_cooldown,
        validation_upgrade_delay                 = pre.validation_upgrade_delay,
        max_pov_size                             = pre.max_pov_size,
        max_downward_message_size                = pre.max_downward_message_size,
        hrmp_sender_deposit                      = pre.hrmp_sender_deposit,
        hrmp_recipient_deposit                   = pre.hrmp_recipient_deposit,
        hrmp_channel_max_capacity                = pre.hrmp_channel_max_capacity,
        hrmp_channel_max_total_size              = pre.hrmp_channel_max_total_size,
        hrmp_max_parachain_inbound_channels      = pre.hrmp_max_parachain_inbound_channels,
        hrmp_max_parachain_outbound_channels     = pre.hrmp_max_parachain_outbound_channels,
        hrmp_channel_max_message_size            = pre.hrmp_channel_max_message_size,
        code_retention_period                    = pre.code_retention_period,
        on_demand_cores                          = pre.on_demand_cores,
        on_demand_retries                        = pre.on_demand_retries,
        group_rotation_frequency                 = pre.group_rotation_frequency,
        paras_availability_period                = pre.paras_availability_period,
        scheduling_lookahead                     = pre.scheduling_lookahead,
        max_validators_per_core                  = pre.max_validators_per_core,
        max_validators                           = pre.max_validators,
        dispute_period                           = pre.dispute_period,
        dispute_post_conclusion_acceptance_period= pre.dispute_post_conclusion_acceptance_period,
        no_show_slots                            = pre.no_show_slots,
        n_delay_tranches                         = pre.n_delay_tranches,
        zeroth_delay_tranche_width               = pre.zeroth_delay_tranche_width,
        needed_approvals                         = pre.needed_approvals,
        relay_vrf_modulo_samples                 = pre.relay_vrf_modulo_samples,
        pvf_voting_ttl                           = pre.pvf_voting_ttl,
        minimum_validation_upgrade_delay         = pre.minimum_validation_upgrade_delay,
        async_backing_params                     = pre.async_backing_params,
        executor_params                          = pre.executor_params,
        on_demand_queue_max_size                 = pre.on_demand_queue_max_size,
        on_demand_base_fee                       = pre.on_demand_base_fee,
        on_demand_fee_variability                = pre.on_demand_fee_variability,
        on_demand_target_queue_utilization       = pre.on_demand_target_queue_utilization,
        on_demand_ttl                            = pre.on_demand_ttl,
        minimum_backing_votes                    = LEGACY_MIN_BACKING_VOTES,
    )
    # fmt: on


def load_active(store: KeyValueStore, pallet: str) -> HostConfigurationV8:
    """Return the v8 active configuration, or its default when unusable."""

    return defensive_unwrap_or_default(
        v8.active_config(store, pallet).get,
        HostConfigurationV8,
        "Could not decode old config",
    )


def migrate_active(store: KeyValueStore, pallet: str) -> None:
    """Translate the active configuration and store it under the v9 key."""

    active_config(store, pallet).set(translate(load_active(store, pallet)))


def migrate_pending(store: KeyValueStore, pallet: str) -> int:
    """Translate every pending configuration, keeping session order.

    An absent v8 list is a valid empty list. A list that is present but does
    not decode is replaced by an empty list after a defensive signal. The v9
    list is written even when empty.

    Returns:
        Number of pending entries migrated.
    """

    source = v8.pending_configs(store, pallet)
    try:
        pending_v8 = source.get() or []
    except DecodeError as exc:
        defensive("Could not decode pending configs", error=str(exc), key=source.key)
        pending_v8 = []

    pending_v9: PendingConfigsV9 = []
    for session, config in pending_v8:
        pending_v9.append((session, translate(config)))
    pending_configs(store, pallet).set(pending_v9)
    return len(pending_v9)


def migrate_to_v9(store: KeyValueStore, pallet: str, db_weight: RuntimeDbWeight) -> Weight:
    """Migrate the active and pending configurations.

    Returns:
        One read and one write per migrated configuration.
    """

    migrate_active(store, pallet)
    num_configs = migrate_pending(store, pallet) + 1
    return db_weight.reads_writes(num_configs, num_configs)


class PreUpgradeState(StrictModel):
    """State captured by :meth:`MigrateToV9.pre_check`."""

    on_chain_version: int
    pending_count: int | None = None


class MigrateToV9(OnRuntimeUpgrade):
    """Version-gated v8 to v9 host configuration migration."""

    name = "HostConfiguration MigrateToV9"

    @property
    def pallet(self) -> str:
        return self.settings.pallet

    def run(self) -> Weight:
        """Migrate when the stored version is 8, otherwise do nothing.

        Returns:
            The migration weight, or the cost of the single version read when
            the migration does not apply.
        """
        marker = StorageVersion(self.store, self.pallet)
        with logfire.span(
            "configuration.migrate_to_v9", attributes={"pallet": self.pallet}
        ):
            logfire.info(f"{self.name} started", target=LOG_TARGET)
            on_chain = marker.get()
            if on_chain == v8.VERSION:
                weight = migrate_to_v9(self.store, self.pallet, self.db_weight)
                logfire.info(
                    f"{self.name} executed successfully",
                    target=LOG_TARGET,
                    reads=weight.reads,
                    writes=weight.writes,
                )
                marker.put(VERSION)
                telemetry.record_migration(self.name, executed=True, weight=weight)
                return weight

            logfire.warning(
                f"{self.name} should be removed.",
                target=LOG_TARGET,
                on_chain_version=on_chain,
            )
            weight = self.db_weight.reads(1)
            telemetry.record_migration(self.name, executed=False, weight=weight)
            return weight

    def pre_check(self) -> bytes:
        logfire.trace(f"Running pre_check() for {self.name}", target=LOG_TARGET)
        on_chain = StorageVersion(self.store, self.pallet).get()
        pending_count: int | None = None
        if on_chain == v8.VERSION:
            try:
                pending_count = len(v8.pending_configs(self.store, self.pallet).get() or [])
            except DecodeError:
                pending_count = None
        state = PreUpgradeState(on_chain_version=on_chain, pending_count=pending_count)
        return to_json(state)

    def post_check(self, state: bytes) -> None:
        logfire.trace(f"Running post_check() for {self.name}", target=LOG_TARGET)
        if StorageVersion(self.store, self.pallet).get() < VERSION:
            raise MigrationCheckError(
                f"Storage version should be >= {VERSION} after the migration"
            )
        if not state:
            return
        try:
            pre = decode(state, PreUpgradeState)
        except DecodeError as exc:
            raise MigrationCheckError(f"Invalid pre-upgrade state: {exc}") from exc
        if pre.on_chain_version != v8.VERSION:
            return

        try:
            active = active_config(self.store, self.pallet).get()
            pending = pending_configs(self.store, self.pallet).get()
        except DecodeError as exc:
            raise MigrationCheckError(f"Migrated configuration is unreadable: {exc}") from exc
        if active is None:
            raise MigrationCheckError("Active configuration missing after the migration")
        if pending is None:
            raise MigrationCheckError("Pending configurations missing after the migration")
        if pre.pending_count is not None and len(pending) != pre.pending_count:
            raise MigrationCheckError(
                f"Expected {pre.pending_count} pending configurations, found {len(pending)}"
            )


__all__ = [
    "VERSION",
    "PendingConfigsV9",
    "active_config",
    "pending_configs",
    "translate",
    "load_active",
    "migrate_active",
    "migrate_pending",
    "migrate_to_v9",
    "PreUpgradeState",
    "MigrateToV9",
]
