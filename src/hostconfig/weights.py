# SPDX-License-Identifier: MIT
"""Execution cost accounting for storage migrations."""

from __future__ import annotations

from dataclasses import dataclass

# Reference costs in picoseconds of a single database read and write.
ROCKS_DB_READ = 25_000_000
ROCKS_DB_WRITE = 100_000_000


@dataclass(frozen=True)
class Weight:
    """Cost reported to the execution-budget accountant.

    ``reads`` and ``writes`` count storage operations; ``ref_time`` is their
    cost under the :class:`RuntimeDbWeight` that produced the value. Weights
    are purely additive.
    """

    reads: int = 0
    writes: int = 0
    ref_time: int = 0

    @classmethod
    def zero(cls) -> "Weight":
        return cls()

    def __add__(self, other: "Weight") -> "Weight":
        if not isinstance(other, Weight):
            return NotImplemented
        return Weight(
            reads=self.reads + other.reads,
            writes=self.writes + other.writes,
            ref_time=self.ref_time + other.ref_time,
        )

    def as_tuple(self) -> tuple[int, int]:
        """Return ``(reads, writes)``."""
        return self.reads, self.writes


@dataclass(frozen=True)
class RuntimeDbWeight:
    """Per-operation cost of the storage backend."""

    read: int = ROCKS_DB_READ
    write: int = ROCKS_DB_WRITE

    def __post_init__(self) -> None:
        if self.read < 0 or self.write < 0:
            raise ValueError("database weights must be non-negative")

    def reads(self, count: int) -> Weight:
        return self.reads_writes(count, 0)

    def writes(self, count: int) -> Weight:
        return self.reads_writes(0, count)

    def reads_writes(self, reads: int, writes: int) -> Weight:
        """Return the weight of ``reads`` reads and ``writes`` writes.

        Raises:
            ValueError: If either count is negative.
        """
        if reads < 0 or writes < 0:
            raise ValueError("operation counts must be non-negative")
        return Weight(
            reads=reads,
            writes=writes,
            ref_time=self.read * reads + self.write * writes,
        )


__all__ = ["ROCKS_DB_READ", "ROCKS_DB_WRITE", "Weight", "RuntimeDbWeight"]
