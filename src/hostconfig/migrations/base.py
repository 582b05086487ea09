# SPDX-License-Identifier: MIT
"""Interface implemented by every storage migration."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..settings import Settings, load_settings
from ..storage import KeyValueStore
from ..weights import Weight


class OnRuntimeUpgrade(ABC):
    """A storage migration invoked by the host at an upgrade checkpoint.

    The host calls :meth:`run` once per upgrade and adds the returned weight
    to its execution budget. :meth:`run` must be a safe no-op when its
    precondition does not hold, since the host may keep a migration wired in
    after it has been applied.

    :meth:`pre_check` and :meth:`post_check` exist for offline verification.
    They never write to the store; the state returned by :meth:`pre_check` is
    handed back unchanged to :meth:`post_check`.
    """

    name: str = ""

    def __init__(self, store: KeyValueStore, settings: Settings | None = None) -> None:
        self.store = store
        self.settings = settings or load_settings()
        self.db_weight = self.settings.db_weight()

    @abstractmethod
    def run(self) -> Weight:
        """Apply the migration and return its cost."""

    def pre_check(self) -> bytes:
        """Capture state before :meth:`run`."""
        return b""

    def post_check(self, state: bytes) -> None:
        """Verify state after :meth:`run`.

        Raises:
            MigrationCheckError: If the post-upgrade state is inconsistent.
        """


__all__ = ["OnRuntimeUpgrade"]
