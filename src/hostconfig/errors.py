# SPDX-License-Identifier: MIT
"""Exception types raised by the host configuration migration engine."""

from __future__ import annotations


class HostConfigError(Exception):
    """Base class for all host configuration errors."""


class DecodeError(HostConfigError, ValueError):
    """Stored bytes could not be decoded as the requested type."""

    def __init__(self, key: str | None, message: str) -> None:
        self.key = key
        super().__init__(f"{key}: {message}" if key else message)


class MigrationCheckError(HostConfigError):
    """A pre- or post-upgrade check found an inconsistent state."""


__all__ = ["HostConfigError", "DecodeError", "MigrationCheckError"]
