# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces for propagation backends, rendering and catalogs.

Adapters implement these; the simulation core depends only on them.
"""
from orbitview.ports.catalog import CatalogSource
from orbitview.ports.propagation import StatePropagator
from orbitview.ports.rendering import SceneRenderer

__all__ = ["CatalogSource", "SceneRenderer", "StatePropagator"]
