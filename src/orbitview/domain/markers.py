# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Fixed reference markers.

Named scene points computed once from geographic coordinates: a set of
capitals and the two poles. They pass through the same scene mapping as
the satellite so relative geometry is preserved.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from orbitview.domain.coordinate_frames import (
    DEFAULT_SCALE_KM_PER_UNIT,
    SceneVector,
    geodetic_to_ecef,
    to_scene,
)
from orbitview.domain.orbital_mechanics import OrbitalConstants


@dataclass(frozen=True)
class GeographicSite:
    """A named point on the Earth's surface."""
    name: str
    lat_deg: float
    lon_deg: float
    color: str


@dataclass(frozen=True)
class FixedMarker:
    """A named, coloured point in scene space."""
    name: str
    position: SceneVector
    color: str


DEFAULT_SITES: tuple[GeographicSite, ...] = (
    GeographicSite("Luxembourg", 49.6116, 6.1319, "skyblue"),
    GeographicSite("Berlin", 52.5200, 13.4050, "yellow"),
    GeographicSite("Warsaw", 52.2297, 21.0122, "white"),
    GeographicSite("Paris", 48.8566, 2.3522, "red"),
    GeographicSite("Brasilia", -15.7975, -47.8919, "green"),
)


def build_fixed_markers(
    scale_km_per_unit: float = DEFAULT_SCALE_KM_PER_UNIT,
    sites: tuple[GeographicSite, ...] = DEFAULT_SITES,
) -> Mapping[str, FixedMarker]:
    """
    Build the read-only marker set.

    Sites are placed on the WGS84 surface; the poles sit on the body
    model's rotation axis at one equatorial radius.

    Returns:
        Read-only mapping of marker name → FixedMarker, in insertion order.
    """
    markers: dict[str, FixedMarker] = {}
    for site in sites:
        ecef_km = geodetic_to_ecef(site.lat_deg, site.lon_deg)
        markers[site.name] = FixedMarker(
            name=site.name,
            position=to_scene(ecef_km, scale_km_per_unit),
            color=site.color,
        )

    r = OrbitalConstants.R_EARTH_KM
    markers["North Pole"] = FixedMarker(
        "North Pole", to_scene((0.0, 0.0, r), scale_km_per_unit), "purple"
    )
    markers["South Pole"] = FixedMarker(
        "South Pole", to_scene((0.0, 0.0, -r), scale_km_per_unit), "brown"
    )
    return MappingProxyType(markers)
