# SPDX-License-Identifier: MIT
"""Key/value storage abstractions and typed accessors.

The migration engine only ever reads and writes single keys; it never
enumerates the store. :class:`KeyValueStore` captures that contract.
Records of different schema versions live under distinct keys built by
:func:`storage_key`, so old and new data never share a slot and the old keys
remain readable until a later step prunes them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Annotated, Any, Generic, TypeVar

import logfire
from pydantic import Field, Strict

from .codec import decode, encode
from .errors import DecodeError

T = TypeVar("T")

VERSION_ITEM = ":__STORAGE_VERSION__:"

# A single non-negative JSON integer; strings and floats are rejected.
VersionNumber = Annotated[int, Strict(), Field(ge=0)]


def storage_key(pallet: str, item: str, version: int | None = None) -> str:
    """Return the key for ``item`` of ``pallet``, tagged with ``version``.

    Examples:
        >>> storage_key("Configuration", "ActiveConfig", 8)
        'Configuration::ActiveConfig@v8'
        >>> storage_key("Configuration", VERSION_ITEM)
        'Configuration:::__STORAGE_VERSION__:'
    """

    key = f"{pallet}::{item}"
    return key if version is None else f"{key}@v{version}"


class KeyValueStore(ABC):
    """Interface for the persisted key/value backend.

    Implementations are owned exclusively by the caller for the duration of a
    migration; no locking is performed here.
    """

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the bytes stored under ``key`` or ``None`` when absent."""

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""


class InMemoryStore(KeyValueStore):
    """Dictionary backed store that counts accesses."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})
        self.reads = 0
        self.writes = 0

    def get(self, key: str) -> bytes | None:
        self.reads += 1
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self.writes += 1
        self._data[key] = bytes(value)

    def snapshot(self) -> dict[str, bytes]:
        """Return a copy of the stored data without counting a read."""
        return dict(self._data)


class OverlayStore(KeyValueStore):
    """Copy-on-write view over another store.

    Reads fall through to ``base`` unless the key was written through the
    overlay. Writes are held in :attr:`changes` until :meth:`commit` is
    called, so the base store is untouched by anything run against the
    overlay.
    """

    def __init__(self, base: KeyValueStore) -> None:
        self._base = base
        self._changes: dict[str, bytes] = {}

    @property
    def changes(self) -> dict[str, bytes]:
        """Return the writes accumulated since creation or the last commit."""
        return dict(self._changes)

    def get(self, key: str) -> bytes | None:
        if key in self._changes:
            return self._changes[key]
        return self._base.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._changes[key] = bytes(value)

    def commit(self) -> int:
        """Write pending changes to the base store and return their count."""
        count = len(self._changes)
        for key, value in self._changes.items():
            self._base.set(key, value)
        self._changes.clear()
        logfire.debug("Overlay committed", keys=count)
        return count


class StorageValue(Generic[T]):
    """Typed accessor for a single value stored under a fixed key.

    ``value_type`` determines how stored bytes are decoded; two accessors with
    different types over different keys model two schema versions of the
    same logical item.
    """

    def __init__(self, store: KeyValueStore, key: str, value_type: Any) -> None:
        self._store = store
        self.key = key
        self.value_type = value_type

    def get(self) -> T | None:
        """Return the stored value, or ``None`` when the key is absent.

        Raises:
            DecodeError: If bytes are present but do not decode.
        """
        raw = self._store.get(self.key)
        if raw is None:
            return None
        return decode(raw, self.value_type, key=self.key)

    def set(self, value: T) -> None:
        """Encode and persist ``value``."""
        self._store.set(self.key, encode(value, self.value_type))

    def exists(self) -> bool:
        return self._store.get(self.key) is not None


class StorageVersion:
    """Schema version marker of a record family.

    An absent marker reads as ``0``. A marker that is not a single
    non-negative integer also reads as ``0`` after a warning, which makes every version-gated migration
    a no-op until an operator repairs it.
    """

    def __init__(self, store: KeyValueStore, pallet: str) -> None:
        self._value: StorageValue[int] = StorageValue(
            store, storage_key(pallet, VERSION_ITEM), VersionNumber
        )

    @property
    def key(self) -> str:
        return self._value.key

    def get(self) -> int:
        try:
            version = self._value.get()
        except DecodeError as exc:
            logfire.warning(
                "Storage version marker is undecodable; treating as 0",
                key=self.key,
                error=str(exc),
            )
            return 0
        return 0 if version is None else version

    def put(self, version: int) -> None:
        if version < 0:
            raise ValueError(f"storage version must be non-negative, got {version}")
        self._value.set(version)


__all__ = [
    "VERSION_ITEM",
    "VersionNumber",
    "storage_key",
    "KeyValueStore",
    "InMemoryStore",
    "OverlayStore",
    "StorageValue",
    "StorageVersion",
]
