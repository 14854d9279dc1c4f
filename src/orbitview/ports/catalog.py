# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for nearby-object catalogs.

Adapters handle the actual HTTP/API calls.
"""
from typing import Protocol, runtime_checkable

from orbitview.domain.tracked_object import TrackedObject


@runtime_checkable
class CatalogSource(Protocol):
    """Port for fetching objects currently above an observer."""

    def fetch_nearby(self, lat: float, lon: float) -> list[TrackedObject]:
        """
        Fetch tracked objects above (lat, lon).

        Raises:
            CatalogError: On any failure; never returns a partial list.
        """
        ...
