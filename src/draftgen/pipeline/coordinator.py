# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Re-entrancy guard for import passes.

A request that arrives while a pass is running, or while the host reports
that imports are blocked (e.g. during an interactive session), is queued.
Any number of queued requests collapse into one, which is replayed exactly
once as soon as the running pass ends or the host calls
:meth:`ImportCoordinator.notify_unblocked`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class ImportCoordinator:
    """Serializes import passes on the calling thread."""

    def __init__(self, run: Callable[[], Any], is_blocked: Callable[[], bool] | None = None) -> None:
        self._run = run
        self._is_blocked = is_blocked or (lambda: False)
        self._running = False
        self._queued = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def has_queued(self) -> bool:
        return self._queued

    def request(self) -> Any:
        """Run a pass now, or queue it if a pass is running or imports are blocked.

        Returns:
            The result of the last pass run by this call, or ``None`` if the
            request was queued.

        Raises:
            Exception: The first exception raised by a pass of this call,
                after every request queued meanwhile has been replayed.
        """
        if self._running or self._is_blocked():
            if not self._queued:
                logger.info("Import queued until the current operation ends")
            self._queued = True
            return None
        return self._drain()

    def notify_unblocked(self) -> Any:
        """Replay the queued request, if any, now that the host no longer blocks imports.

        Returns:
            The result of the replayed pass, or ``None`` if nothing ran.
        """
        if self._running or not self._queued or self._is_blocked():
            return None
        self._queued = False
        logger.info("Running queued import")
        return self._drain()

    def _drain(self) -> Any:
        """Run one pass, then replay a request queued meanwhile, until none is left.

        A failed pass still ends the operation: the request queued during it
        is replayed, and the first exception is raised once nothing is left.
        """
        error: Exception | None = None
        result = None
        while True:
            try:
                result = self._execute()
            except Exception as exc:
                logger.error("Import pass failed: %s", exc)
                if error is None:
                    error = exc
            if not self._queued or self._is_blocked():
                break
            self._queued = False
            logger.info("Running queued import")
        if error is not None:
            raise error
        return result

    def _execute(self) -> Any:
        self._running = True
        try:
            return self._run()
        finally:
            self._running = False
