# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Adapters for element-set input, catalogs, propagation backends and scene output.

External dependencies (urllib, json, sgp4, file I/O) are confined to this layer.
"""
from orbitview.domain.tle import OrbitalElements, parse_tle_text
from orbitview.adapters.n2yo import N2yoAdapter
from orbitview.adapters.catalog_poller import CatalogPoller
from orbitview.adapters.scene_recorder import (
    JsonLinesSceneWriter,
    RecordedFrame,
    RecordingRenderer,
    scene_to_dict,
)
from orbitview.adapters.sgp4_propagator import Sgp4Propagator


class TleFileReader:
    """Reads a two- or three-line element set from a text file."""

    def __init__(self, verify_checksum: bool = True):
        self._verify_checksum = verify_checksum

    def read_elements(self, path: str) -> OrbitalElements:
        with open(path, encoding='ascii', errors='replace') as f:
            return parse_tle_text(f.read(), verify_checksum=self._verify_checksum)


__all__ = [
    "CatalogPoller",
    "JsonLinesSceneWriter",
    "N2yoAdapter",
    "RecordedFrame",
    "RecordingRenderer",
    "Sgp4Propagator",
    "TleFileReader",
    "scene_to_dict",
]
