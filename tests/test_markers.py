# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for fixed reference markers."""
import pytest

from orbitview.domain.coordinate_frames import SceneVector
from orbitview.domain.markers import (
    DEFAULT_SITES,
    FixedMarker,
    GeographicSite,
    build_fixed_markers,
)
from orbitview.domain.orbital_mechanics import OrbitalConstants


class TestBuildFixedMarkers:

    def test_default_names_in_order(self):
        markers = build_fixed_markers()
        assert list(markers) == [
            "Luxembourg", "Berlin", "Warsaw", "Paris", "Brasilia",
            "North Pole", "South Pole",
        ]

    def test_sites_on_surface(self):
        markers = build_fixed_markers()
        for site in DEFAULT_SITES:
            r = markers[site.name].position.norm()
            assert 6.35 < r < 6.38

    def test_poles_on_scene_vertical(self):
        markers = build_fixed_markers()
        r = OrbitalConstants.R_EARTH_KM / 1000.0
        assert markers["North Pole"].position == SceneVector(0.0, r, 0.0)
        assert markers["South Pole"].position == SceneVector(0.0, -r, 0.0)

    def test_northern_sites_above_equator(self):
        markers = build_fixed_markers()
        assert markers["Berlin"].position.y > 0.0
        assert markers["Brasilia"].position.y < 0.0

    def test_colors(self):
        markers = build_fixed_markers()
        assert markers["Paris"].color == "red"
        assert markers["North Pole"].color == "purple"
        assert markers["South Pole"].color == "brown"

    def test_scale_applies(self):
        near = build_fixed_markers(1000.0)["Berlin"].position
        far = build_fixed_markers(2000.0)["Berlin"].position
        assert far.norm() == pytest.approx(near.norm() / 2.0)

    def test_read_only(self):
        markers = build_fixed_markers()
        with pytest.raises(TypeError):
            markers["Extra"] = FixedMarker("Extra", SceneVector(0.0, 0.0, 0.0), "white")

    def test_custom_sites(self):
        markers = build_fixed_markers(sites=(GeographicSite("Null Island", 0.0, 0.0, "white"),))
        assert list(markers) == ["Null Island", "North Pole", "South Pole"]
        # Earth-fixed x maps to scene z.
        assert markers["Null Island"].position.z == pytest.approx(6.378137)
