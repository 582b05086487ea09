# SPDX-License-Identifier: MIT
"""Current host configuration schema.

:class:`HostConfiguration` is the shape persisted under the latest storage
version. Older shapes live next to the migration that retires them (see
``hostconfig.migrations``) and are never derived from this class, so a change
here cannot silently alter how legacy bytes are decoded.
"""

from __future__ import annotations

from pydantic import Field

from .constants import LEGACY_MIN_BACKING_VOTES, ON_DEMAND_DEFAULT_QUEUE_MAX_SIZE
from .primitives import (
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


class HostConfiguration(StrictModel):
    """Limits governing parachain validation and scheduling (schema v9).

    Every field is an independent scalar or a small nested value; no field
    depends on another for validity.
    """

    max_code_size: U32 = Field(0, description="Maximum validation code size in bytes.")
    max_head_data_size: U32 = Field(0, description="Maximum head-data size in bytes.")
    max_upward_queue_count: U32 = Field(
        0, description="Total number of individual messages allowed in the upward queue."
    )
    max_upward_queue_size: U32 = Field(
        0, description="Total size of messages allowed in the upward queue."
    )
    max_upward_message_size: U32 = Field(
        0, description="Maximum size of a single upward message."
    )
    max_upward_message_num_per_candidate: U32 = Field(
        0, description="Maximum number of upward messages sent by one candidate."
    )
    hrmp_max_message_num_per_candidate: U32 = Field(
        0, description="Maximum number of outbound HRMP messages per candidate."
    )
    validation_upgrade_cooldown: BlockNumber = Field(
        0, description="Blocks to wait between two code upgrades."
    )
    validation_upgrade_delay: BlockNumber = Field(
        2, description="Delay in blocks before an upgrade is applied."
    )
    async_backing_params: AsyncBackingParams = Field(
        default_factory=AsyncBackingParams,
        description="Asynchronous backing parameters.",
    )
    max_pov_size: U32 = Field(0, description="Maximum proof-of-validity size in bytes.")
    max_downward_message_size: U32 = Field(
        0, description="Maximum size of a downward message."
    )
    hrmp_max_parachain_outbound_channels: U32 = Field(
        0, description="Maximum outbound HRMP channels per parachain."
    )
    hrmp_sender_deposit: Balance = Field(
        0, description="Deposit a sender reserves to open a channel."
    )
    hrmp_recipient_deposit: Balance = Field(
        0, description="Deposit a recipient reserves to accept a channel."
    )
    hrmp_channel_max_capacity: U32 = Field(
        0, description="Maximum number of messages queued in one channel."
    )
    hrmp_channel_max_total_size: U32 = Field(
        0, description="Maximum total size of messages queued in one channel."
    )
    hrmp_max_parachain_inbound_channels: U32 = Field(
        0, description="Maximum inbound HRMP channels per parachain."
    )
    hrmp_channel_max_message_size: U32 = Field(
        0, description="Maximum size of a single HRMP message."
    )
    executor_params: ExecutorParams = Field(
        default_factory=tuple, description="Executor environment parameters."
    )
    code_retention_period: BlockNumber = Field(
        0, description="Blocks for which replaced validation code is kept."
    )
    on_demand_cores: U32 = Field(0, description="Number of on-demand execution cores.")
    on_demand_retries: U32 = Field(
        0, description="Retries allowed for an on-demand claim."
    )
    on_demand_queue_max_size: U32 = Field(
        ON_DEMAND_DEFAULT_QUEUE_MAX_SIZE,
        description="Maximum length of the on-demand order queue.",
    )
    on_demand_target_queue_utilization: Perbill = Field(
        perbill_from_percent(25),
        description="Queue utilisation above which the spot price rises.",
    )
    on_demand_fee_variability: Perbill = Field(
        perbill_from_percent(3),
        description="Spot price multiplier applied when above the target.",
    )
    on_demand_base_fee: Balance = Field(
        10_000_000, description="Minimum on-demand order price."
    )
    on_demand_ttl: BlockNumber = Field(
        5, description="Blocks an on-demand claim stays valid."
    )
    group_rotation_frequency: BlockNumber = Field(
        1, description="Blocks between validator group rotations."
    )
    paras_availability_period: BlockNumber = Field(
        1, description="Blocks a candidate has to become available."
    )
    scheduling_lookahead: U32 = Field(
        1, description="Blocks ahead for which the scheduler plans."
    )
    max_validators_per_core: U32 | None = Field(
        None, description="Upper bound of validators assigned to one core."
    )
    max_validators: U32 | None = Field(
        None, description="Upper bound of active validators."
    )
    dispute_period: SessionIndex = Field(
        6, description="Sessions after inclusion during which disputes are accepted."
    )
    dispute_post_conclusion_acceptance_period: BlockNumber = Field(
        100, description="Blocks after a dispute concludes during which votes count."
    )
    no_show_slots: U32 = Field(
        1, description="Delay tranches after which an unresponsive checker is a no-show."
    )
    n_delay_tranches: U32 = Field(0, description="Number of approval delay tranches.")
    zeroth_delay_tranche_width: U32 = Field(
        0, description="Width of the zeroth delay tranche."
    )
    needed_approvals: U32 = Field(
        0, description="Validators needed to approve a block."
    )
    relay_vrf_modulo_samples: U32 = Field(
        0, description="Number of samples for relay VRF modulo assignments."
    )
    pvf_voting_ttl: SessionIndex = Field(
        2, description="Sessions a PVF pre-checking vote stays open."
    )
    minimum_validation_upgrade_delay: BlockNumber = Field(
        2, description="Lower bound for the upgrade delay of a parachain."
    )
    minimum_backing_votes: U32 = Field(
        LEGACY_MIN_BACKING_VOTES,
        description="Backing votes a candidate needs before inclusion.",
    )


HostConfigurationV9 = HostConfiguration


__all__ = ["HostConfiguration", "HostConfigurationV9"]
