# SPDX-License-Identifier: MIT
"""Host configuration as persisted under storage version 8.

This is a frozen snapshot of the v8 shape. It is intentionally not derived
from :class:`~hostconfig.configuration.HostConfiguration`; edits to the
current schema must never change how v8 bytes decode. Defaults match the v8
defaults exactly.
"""

from __future__ import annotations

from ..constants import ON_DEMAND_DEFAULT_QUEUE_MAX_SIZE
from ..primitives import (
    U32,
    AsyncBackingParams,
    Balance,
    BlockNumber,
    ExecutorParams,
    Perbill,
    SessionIndex,
    StrictModel,
    perbill_from_percent,
)
from ..storage import KeyValueStore, StorageValue, storage_key

VERSION = 8


class HostConfigurationV8(StrictModel):
    """Schema v8 of the host configuration."""

    max_code_size: U32 = 0
    max_head_data_size: U32 = 0
    max_upward_queue_count: U32 = 0
    max_upward_queue_size: U32 = 0
    max_upward_message_size: U32 = 0
    max_upward_message_num_per_candidate: U32 = 0
    hrmp_max_message_num_per_candidate: U32 = 0
    validation_upgrade_cooldown: BlockNumber = 0
    validation_upgrade_delay: BlockNumber = 2
    async_backing_params: AsyncBackingParams = AsyncBackingParams()
    max_pov_size: U32 = 0
    max_downward_message_size: U32 = 0
    hrmp_max_parachain_outbound_channels: U32 = 0
    hrmp_sender_deposit: Balance = 0
    hrmp_recipient_deposit: Balance = 0
    hrmp_channel_max_capacity: U32 = 0
    hrmp_channel_max_total_size: U32 = 0
    hrmp_max_parachain_inbound_channels: U32 = 0
    hrmp_channel_max_message_size: U32 = 0
    executor_params: ExecutorParams = ()
    code_retention_period: BlockNumber = 0
    on_demand_cores: U32 = 0
    on_demand_retries: U32 = 0
    on_demand_queue_max_size: U32 = ON_DEMAND_DEFAULT_QUEUE_MAX_SIZE
    on_demand_target_queue_utilization: Perbill = perbill_from_percent(25)
    on_demand_fee_variability: Perbill = perbill_from_percent(3)
    on_demand_base_fee: Balance = 10_000_000
    on_demand_ttl: BlockNumber = 5
    group_rotation_frequency: BlockNumber = 1
    paras_availability_period: BlockNumber = 1
    scheduling_lookahead: U32 = 1
    max_validators_per_core: U32 | None = None
    max_validators: U32 | None = None
    dispute_period: SessionIndex = 6
    dispute_post_conclusion_acceptance_period: BlockNumber = 100
    no_show_slots: U32 = 1
    n_delay_tranches: U32 = 0
    zeroth_delay_tranche_width: U32 = 0
    needed_approvals: U32 = 0
    relay_vrf_modulo_samples: U32 = 0
    pvf_voting_ttl: SessionIndex = 2
    minimum_validation_upgrade_delay: BlockNumber = 2


PendingConfigsV8 = list[tuple[SessionIndex, HostConfigurationV8]]


def active_config(store: KeyValueStore, pallet: str) -> StorageValue[HostConfigurationV8]:
    """Return the accessor for the v8 active configuration."""
    return StorageValue(
        store, storage_key(pallet, "ActiveConfig", VERSION), HostConfigurationV8
    )


def pending_configs(store: KeyValueStore, pallet: str) -> StorageValue[PendingConfigsV8]:
    """Return the accessor for the v8 pending configurations."""
    return StorageValue(
        store, storage_key(pallet, "PendingConfigs", VERSION), PendingConfigsV8
    )


__all__ = [
    "VERSION",
    "HostConfigurationV8",
    "PendingConfigsV8",
    "active_config",
    "pending_configs",
]
