# SPDX-License-Identifier: MIT
"""Self-describing codec for persisted records.

Values are stored as JSON produced by ``pydantic_core``; field names travel
with the payload so a record can be inspected without its schema. Decoding
validates against the requested type and reports any mismatch as
:class:`~hostconfig.errors.DecodeError`.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from .errors import DecodeError

T = TypeVar("T")


@lru_cache(maxsize=None)
def _adapter(value_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(value_type)


def _summarise(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(map(str, error['loc'])) or '<root>'}: {error['msg']}"
        for error in exc.errors()
    )


def encode(value: Any, value_type: Any) -> bytes:
    """Return the stored representation of ``value``.

    Args:
        value: Record to serialise.
        value_type: Declared type of ``value``; selects the serialiser.

    Returns:
        UTF-8 encoded JSON bytes.
    """

    return _adapter(value_type).dump_json(value)


def decode(raw: bytes, value_type: type[T] | Any, *, key: str | None = None) -> T:
    """Decode ``raw`` as ``value_type``.

    Args:
        raw: Bytes previously produced by :func:`encode`.
        value_type: Type the bytes are expected to hold.
        key: Storage key the bytes were read from, used in error messages.

    Returns:
        The validated value.

    Raises:
        DecodeError: If ``raw`` is not JSON or does not validate.
    """

    try:
        return _adapter(value_type).validate_json(raw)
    except ValidationError as exc:
        raise DecodeError(key, f"cannot decode value: {_summarise(exc)}") from exc


__all__ = ["encode", "decode"]
