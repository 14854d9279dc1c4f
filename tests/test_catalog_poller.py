# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for background catalog polling."""
import threading

import pytest

from orbitview.adapters.catalog_poller import CatalogPoller
from orbitview.domain.errors import CatalogError
from orbitview.domain.simulation import InputSnapshot, SimulationLoop, create_simulation_state
from orbitview.domain.tle import ISS_TLE, parse_tle
from orbitview.domain.tracked_object import TrackedObject


# ── Helpers ──────────────────────────────────────────────────────────

def _objects(n):
    return [TrackedObject(str(i), f"OBJ {i}", "", "", 0.0, 0.0, 500.0) for i in range(n)]


class _GatedSource:
    """Catalog source that blocks until released."""

    def __init__(self, result=None, error=None):
        self.release = threading.Event()
        self.calls = []
        self._result = result if result is not None else _objects(2)
        self._error = error

    def fetch_nearby(self, lat, lon):
        self.calls.append((lat, lon))
        self.release.wait(timeout=5.0)
        if self._error is not None:
            raise self._error
        return self._result


# ── CatalogPoller ────────────────────────────────────────────────────

class TestCatalogPoller:

    def test_nothing_requested(self):
        with CatalogPoller(_GatedSource(), 1.0, 2.0) as poller:
            assert poller.poll() is None
            assert not poller.pending

    def test_poll_does_not_block(self):
        source = _GatedSource()
        with CatalogPoller(source, 1.0, 2.0) as poller:
            assert poller.request_refresh()
            assert poller.poll() is None
            assert poller.pending
            source.release.set()

    def test_result_delivered_once_as_tuple(self):
        source = _GatedSource()
        with CatalogPoller(source, 49.6, 6.1) as poller:
            poller.request_refresh()
            source.release.set()
            objects = poller.wait(timeout=5.0)
            assert isinstance(objects, tuple)
            assert len(objects) == 2
            assert poller.poll() is None
            assert poller.completed_fetches == 1
        assert source.calls == [(49.6, 6.1)]

    def test_single_fetch_in_flight(self):
        source = _GatedSource()
        with CatalogPoller(source, 0.0, 0.0) as poller:
            assert poller.request_refresh()
            assert not poller.request_refresh()
            source.release.set()
            poller.wait(timeout=5.0)
            assert poller.request_refresh()
            poller.wait(timeout=5.0)
        assert len(source.calls) == 2

    def test_failure_recorded_not_raised(self):
        source = _GatedSource(error=CatalogError("N2YO connection failed: down"))
        with CatalogPoller(source, 0.0, 0.0) as poller:
            poller.request_refresh()
            source.release.set()
            assert poller.wait(timeout=5.0) is None
            assert isinstance(poller.last_error, CatalogError)
            assert poller.completed_fetches == 0

    def test_raw_transport_error_recorded(self):
        source = _GatedSource(error=ConnectionResetError("peer reset"))
        source.release.set()
        with CatalogPoller(source, 0.0, 0.0) as poller:
            poller.request_refresh()
            assert poller.wait(timeout=5.0) is None
            assert isinstance(poller.last_error, ConnectionResetError)
            assert not poller.pending

    def test_failure_logged(self, caplog):
        source = _GatedSource(error=CatalogError("boom"))
        source.release.set()
        with caplog.at_level("WARNING", logger="orbitview"):
            with CatalogPoller(source, 0.0, 0.0) as poller:
                poller.request_refresh()
                poller.wait(timeout=5.0)
        assert "Catalog fetch failed: boom" in caplog.text

    def test_success_clears_last_error(self):
        source = _GatedSource(error=CatalogError("boom"))
        source.release.set()
        with CatalogPoller(source, 0.0, 0.0) as poller:
            poller.request_refresh()
            poller.wait(timeout=5.0)
            source._error = None
            poller.request_refresh()
            assert poller.wait(timeout=5.0) is not None
            assert poller.last_error is None

    def test_wait_times_out(self):
        source = _GatedSource()
        with CatalogPoller(source, 0.0, 0.0) as poller:
            poller.request_refresh()
            assert poller.wait(timeout=0.01) is None
            assert poller.pending
            source.release.set()


# ── Integration with the tick loop ───────────────────────────────────

class TestPollerInLoop:

    def test_update_appears_after_fetch_completes(self):
        name, line1, line2 = ISS_TLE
        source = _GatedSource(result=_objects(3))
        with CatalogPoller(source, 0.0, 0.0) as poller:
            loop = SimulationLoop(
                create_simulation_state(parse_tle(line1, line2, name=name)),
                catalog_poll=poller.poll,
            )
            poller.request_refresh()
            before = loop.step(InputSnapshot())
            assert before.tracked_objects == ()

            source.release.set()
            poller._future.exception(timeout=5.0)
            after = loop.step(InputSnapshot())
            assert len(after.tracked_objects) == 3
            again = loop.step(InputSnapshot())
            assert again.tracked_objects == after.tracked_objects

    def test_failed_fetch_keeps_loop_running(self):
        name, line1, line2 = ISS_TLE
        source = _GatedSource(error=ConnectionResetError("peer reset"))
        source.release.set()
        with CatalogPoller(source, 0.0, 0.0) as poller:
            loop = SimulationLoop(
                create_simulation_state(parse_tle(line1, line2, name=name)),
                catalog_poll=poller.poll,
            )
            poller.request_refresh()
            poller._future.exception(timeout=5.0)
            scene = loop.step(InputSnapshot())
            assert scene.tracked_objects == ()
            assert isinstance(poller.last_error, ConnectionResetError)
            assert loop.step(InputSnapshot()).satellite_position is not None
