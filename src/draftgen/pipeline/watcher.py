# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Debounced trigger that offers a full reimport when generated files disappear.

The watcher does not watch the file system itself. A host forwards change
notifications for the generated source directory to :meth:`notify_change`
and calls :meth:`poll` regularly (e.g. from its idle loop). Once no change
has arrived for the debounce window, the watcher queries the import status
and, if generated files are missing and the user confirms, requests a full
reimport through the coordinator.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from draftgen.pipeline.coordinator import ImportCoordinator
from draftgen.pipeline.pipeline import ImportStatus

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_DEBOUNCE_SECONDS = 1.0


class GeneratedCodeWatcher:
    """Collects change notifications and reacts to them after a quiet period.

    Args:
        coordinator: Coordinator whose run callable performs a full reimport.
        status: Returns the current import status.
        confirm: Asked before reimporting; returns True to proceed.
        debounce_seconds: Quiet period after the last notification.
        clock: Monotonic time source, in seconds.
    """

    def __init__(
        self,
        coordinator: ImportCoordinator,
        status: Callable[[], ImportStatus],
        confirm: Callable[[ImportStatus], bool],
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._coordinator = coordinator
        self._status = status
        self._confirm = confirm
        self._debounce = debounce_seconds
        self._clock = clock
        self._pending: set[Path] = set()
        self._last_change: float | None = None

    @property
    def pending(self) -> frozenset[Path]:
        return frozenset(self._pending)

    def notify_change(self, path: Path) -> None:
        """Record that *path* in the generated source directory changed or was removed."""
        self._pending.add(path)
        self._last_change = self._clock()

    def poll(self) -> ImportStatus | None:
        """Act on the collected notifications once the debounce window has passed.

        Returns:
            The status that was checked, or ``None`` if nothing was due.
        """
        if self._last_change is None or self._clock() - self._last_change < self._debounce:
            return None
        logger.debug("Checking import status after %d change(s)", len(self._pending))
        self._pending.clear()
        self._last_change = None

        status = self._status()
        if status is ImportStatus.REQUIRED_FILE_MISSING and self._confirm(status):
            logger.info("Generated files are missing, requesting a full reimport")
            self._coordinator.request()
        return status
