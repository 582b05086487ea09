# SPDX-License-Identifier: MIT
"""Project-wide constants for the host configuration record family.

This module centralises small constants that are imported across the
package. Keep this file minimal and free of side effects.
"""

from __future__ import annotations

# Value assigned to ``minimum_backing_votes`` for configurations written before
# the field existed.
LEGACY_MIN_BACKING_VOTES = 2

ON_DEMAND_DEFAULT_QUEUE_MAX_SIZE = 10_000

DEFAULT_PALLET = "Configuration"

LOG_TARGET = "runtime::configuration"

__all__ = [
    "LEGACY_MIN_BACKING_VOTES",
    "ON_DEMAND_DEFAULT_QUEUE_MAX_SIZE",
    "DEFAULT_PALLET",
    "LOG_TARGET",
]
