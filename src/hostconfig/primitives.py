# SPDX-License-Identifier: MIT
"""Scalar and nested types shared by every host configuration schema.

Integer aliases carry the bounds of the ledger's fixed-width types so that a
stored value outside the range fails decoding instead of being accepted
silently. Composite values are frozen: records are replaced, never mutated.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1
PERBILL_ACCURACY = 1_000_000_000

U32 = Annotated[int, Field(ge=0, le=U32_MAX)]
U64 = Annotated[int, Field(ge=0, le=U64_MAX)]
Balance = Annotated[int, Field(ge=0, le=U128_MAX)]
BlockNumber = U32
SessionIndex = U32
Perbill = Annotated[int, Field(ge=0, le=PERBILL_ACCURACY)]


def perbill_from_percent(percent: int) -> int:
    """Return ``percent`` expressed in parts per billion."""

    if not 0 <= percent <= 100:
        raise ValueError(f"percent must be within 0..=100, got {percent}")
    return percent * (PERBILL_ACCURACY // 100)


class StrictModel(BaseModel):
    """Base model with strict, immutable settings to prevent shape drift."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class AsyncBackingParams(StrictModel):
    """Candidate depth limits used by asynchronous backing."""

    max_candidate_depth: U32 = Field(
        0, description="Maximum candidate depth allowed for a parachain block."
    )
    allowed_ancestry_len: U32 = Field(
        0, description="How many ancestors of a relay parent are allowed."
    )


ExecutorParamKind = Literal[
    "max_memory_pages",
    "stack_logical_max",
    "stack_native_max",
    "prechecking_max_memory",
    "pvf_prep_timeout",
    "pvf_exec_timeout",
    "wasm_ext_bulk_memory",
]
PvfTimeoutKind = Literal["precheck", "lenient", "backing", "approval"]

_TIMEOUT_KINDS = {"pvf_prep_timeout", "pvf_exec_timeout"}
_U32_KINDS = {"max_memory_pages", "stack_logical_max", "stack_native_max"}


class ExecutorParam(StrictModel):
    """Single parameter handed to the validation code executor."""

    kind: ExecutorParamKind
    value: U64 | None = Field(
        None, description="Numeric argument; absent only for flag parameters."
    )
    timeout_kind: PvfTimeoutKind | None = Field(
        None, description="Timeout class for the PVF timeout parameters."
    )

    @model_validator(mode="after")
    def _check_shape(self) -> "ExecutorParam":
        """Ensure the arguments match what ``kind`` expects."""

        if self.kind == "wasm_ext_bulk_memory":
            if self.value is not None or self.timeout_kind is not None:
                raise ValueError("wasm_ext_bulk_memory takes no arguments")
            return self
        if self.value is None:
            raise ValueError(f"{self.kind} requires a value")
        if self.kind in _U32_KINDS and self.value > U32_MAX:
            raise ValueError(f"{self.kind} value must fit in 32 bits")
        if (self.kind in _TIMEOUT_KINDS) != (self.timeout_kind is not None):
            raise ValueError(f"timeout_kind is only valid for {sorted(_TIMEOUT_KINDS)}")
        return self


ExecutorParams = tuple[ExecutorParam, ...]


__all__ = [
    "U32_MAX",
    "U64_MAX",
    "U128_MAX",
    "PERBILL_ACCURACY",
    "U32",
    "U64",
    "Balance",
    "BlockNumber",
    "SessionIndex",
    "Perbill",
    "perbill_from_percent",
    "StrictModel",
    "AsyncBackingParams",
    "ExecutorParamKind",
    "PvfTimeoutKind",
    "ExecutorParam",
    "ExecutorParams",
]
