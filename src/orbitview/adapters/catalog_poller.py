# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Background catalog polling for the tick loop.

A single-worker ThreadPoolExecutor runs the blocking catalog fetch; the
tick loop checks the Future without waiting on it. A finished fetch is
handed over once, as a whole tuple, so the tracked-object list is
replaced atomically and never observed half-built.
"""
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

from orbitview.domain.tracked_object import TrackedObject
from orbitview.ports.catalog import CatalogSource


_log = logging.getLogger(__name__)


class CatalogPoller:
    """
    Runs CatalogSource.fetch_nearby off the tick thread.

    Args:
        source: Catalog adapter.
        lat: Observer latitude in degrees.
        lon: Observer longitude in degrees.
    """

    def __init__(self, source: CatalogSource, lat: float, lon: float):
        self._source = source
        self._lat = lat
        self._lon = lon
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="catalog")
        self._future: Future | None = None
        self.last_error: Exception | None = None
        self.completed_fetches = 0

    @property
    def pending(self) -> bool:
        return self._future is not None and not self._future.done()

    def request_refresh(self) -> bool:
        """
        Start a fetch unless one is already running.

        Returns:
            True if a new fetch was submitted.
        """
        if self._future is not None:
            return False
        _log.info("Requesting nearby objects for (%.4f, %.4f)", self._lat, self._lon)
        self._future = self._executor.submit(self._fetch)
        return True

    def _fetch(self) -> tuple[TrackedObject, ...]:
        return tuple(self._source.fetch_nearby(self._lat, self._lon))

    def poll(self) -> tuple[TrackedObject, ...] | None:
        """
        Non-blocking check for a finished fetch.

        Returns:
            The fetched objects exactly once, or None if nothing finished
            (still running, nothing requested, or the fetch failed).
        """
        future = self._future
        if future is None or not future.done():
            return None
        self._future = None
        try:
            objects = future.result()
        except (OSError, ValueError) as e:
            self.last_error = e
            _log.warning("Catalog fetch failed: %s", e)
            return None
        self.last_error = None
        self.completed_fetches += 1
        return objects

    def wait(self, timeout: float | None = None) -> tuple[TrackedObject, ...] | None:
        """Block until the running fetch finishes (CLI and tests only)."""
        future = self._future
        if future is None:
            return None
        try:
            future.exception(timeout=timeout)
        except FutureTimeoutError:
            _log.warning("Catalog fetch still running after %s s", timeout)
            return None
        return self.poll()

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> "CatalogPoller":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
