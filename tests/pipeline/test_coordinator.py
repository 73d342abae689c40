# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the import re-entrancy guard."""

import pytest

from draftgen.pipeline import ImportCoordinator


class _Host:
    """Counts passes and lets a test request further passes from inside one."""

    def __init__(self) -> None:
        self.runs = 0
        self.blocked = False
        self.coordinator = ImportCoordinator(self.run, lambda: self.blocked)
        self.nested_requests = 0

    def run(self) -> int:
        self.runs += 1
        for _ in range(self.nested_requests):
            assert self.coordinator.request() is None
        self.nested_requests = 0
        return self.runs


def test_request_runs_immediately() -> None:
    """An idle, unblocked coordinator runs the pass at once."""
    host = _Host()
    assert host.coordinator.request() == 1
    assert not host.coordinator.is_running
    assert not host.coordinator.has_queued


def test_requests_during_a_pass_collapse_into_one() -> None:
    """Any number of requests during a pass cause exactly one follow-up pass."""
    host = _Host()
    host.nested_requests = 3
    assert host.coordinator.request() == 2
    assert host.runs == 2
    assert not host.coordinator.has_queued


def test_blocked_request_is_replayed_once() -> None:
    """Requests while blocked are queued and replayed once when unblocked."""
    host = _Host()
    host.blocked = True
    assert host.coordinator.request() is None
    assert host.coordinator.request() is None
    assert host.runs == 0
    assert host.coordinator.has_queued

    assert host.coordinator.notify_unblocked() is None
    host.blocked = False
    assert host.coordinator.notify_unblocked() == 1
    assert host.runs == 1
    assert host.coordinator.notify_unblocked() is None


def test_failed_pass_releases_the_guard() -> None:
    """An exception from the pass propagates and leaves the coordinator idle."""

    def fail() -> None:
        raise RuntimeError("boom")

    coordinator = ImportCoordinator(fail)
    with pytest.raises(RuntimeError, match="boom"):
        coordinator.request()
    assert not coordinator.is_running


def test_request_queued_during_failed_pass_is_replayed() -> None:
    """A request queued while a pass fails runs once before the failure propagates."""
    runs: list[str] = []

    def run() -> str:
        runs.append("pass")
        if len(runs) == 1:
            assert coordinator.request() is None
            raise RuntimeError("first pass failed")
        return "replayed"

    coordinator = ImportCoordinator(run)
    with pytest.raises(RuntimeError, match="first pass failed"):
        coordinator.request()

    assert len(runs) == 2
    assert not coordinator.has_queued
    assert not coordinator.is_running
    assert coordinator.notify_unblocked() is None
    assert len(runs) == 2
