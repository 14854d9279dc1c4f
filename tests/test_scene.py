# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for scene description and draw command expansion."""
import pytest

from orbitview.adapters.scene_recorder import RecordingRenderer
from orbitview.domain.camera import CameraState
from orbitview.domain.coordinate_frames import SceneVector
from orbitview.domain.markers import build_fixed_markers
from orbitview.domain.scene import (
    EQUATOR_SEGMENTS,
    HUD_TITLE,
    MARKER_SIZE,
    PALETTE,
    Primitive,
    SceneDescription,
    earth_radius_units,
    equator_points,
    render_scene,
    scene_draw_commands,
)


# ── Helpers ──────────────────────────────────────────────────────────

def _scene(satellite=SceneVector(6.8, 0.0, 0.0), stale=False):
    return SceneDescription(
        viewpoint=CameraState(SceneVector(15.94, 0.0, 14.0)),
        satellite_position=satellite,
        fixed_markers=build_fixed_markers(),
        elapsed_minutes=12.3,
        earth_radius=earth_radius_units(1000.0),
        satellite_stale=stale,
        satellite_name="ISS (ZARYA)",
    )


def _count(commands, primitive):
    return sum(1 for c in commands if c.primitive is primitive)


# ── Equator ──────────────────────────────────────────────────────────

class TestEquator:

    def test_closed_polyline(self):
        points = equator_points(1000.0, 8)
        assert len(points) == 9
        assert (points[0] - points[-1]).norm() < 1e-9

    def test_lies_on_scene_horizontal_plane(self):
        for p in equator_points(1000.0):
            assert abs(p.y) < 1e-12
            assert p.norm() == pytest.approx(earth_radius_units(1000.0))

    def test_too_few_segments(self):
        with pytest.raises(ValueError):
            equator_points(1000.0, 2)


# ── Draw commands ────────────────────────────────────────────────────

class TestSceneDrawCommands:

    def test_primitive_counts(self):
        commands = scene_draw_commands(_scene(), 1000.0)
        assert _count(commands, Primitive.SPHERE) == 1
        assert _count(commands, Primitive.LINE) == 3 + EQUATOR_SEGMENTS
        assert _count(commands, Primitive.CUBE) == 7 + 1
        assert _count(commands, Primitive.TEXT) == 2

    def test_axes_twice_earth_radius(self):
        commands = scene_draw_commands(_scene(), 1000.0)
        axes = commands[:3]
        radius = earth_radius_units(1000.0)
        for axis in axes:
            assert axis.transform.end.norm() == pytest.approx(2.0 * radius)
        assert [a.color for a in axes] == [PALETTE["red"], PALETTE["green"], PALETTE["blue"]]

    def test_earth_sphere(self):
        sphere = [c for c in scene_draw_commands(_scene(), 1000.0) if c.primitive is Primitive.SPHERE][0]
        assert sphere.transform.size == pytest.approx(6.378135)
        assert sphere.color == PALETTE["blue"]

    def test_satellite_cube_last_cube(self):
        cubes = [c for c in scene_draw_commands(_scene(), 1000.0) if c.primitive is Primitive.CUBE]
        satellite = cubes[-1]
        assert satellite.transform.origin == SceneVector(6.8, 0.0, 0.0)
        assert satellite.transform.size == MARKER_SIZE
        assert satellite.transform.text == "ISS (ZARYA)"

    def test_marker_colors(self):
        cubes = [c for c in scene_draw_commands(_scene(), 1000.0) if c.primitive is Primitive.CUBE]
        assert cubes[0].color == PALETTE["skyblue"]

    def test_no_satellite_cube_without_position(self):
        commands = scene_draw_commands(_scene(satellite=None), 1000.0)
        assert _count(commands, Primitive.CUBE) == 7

    def test_hud_text(self):
        texts = [c.transform.text for c in scene_draw_commands(_scene(), 1000.0)
                 if c.primitive is Primitive.TEXT]
        assert texts == [HUD_TITLE, "T+12.3 min"]

    def test_stale_banner(self):
        commands = scene_draw_commands(_scene(stale=True), 1000.0)
        texts = [c.transform.text for c in commands if c.primitive is Primitive.TEXT]
        assert len(texts) == 3
        assert "stale" in texts[-1]

    def test_text_in_screen_space(self):
        for c in scene_draw_commands(_scene(), 1000.0):
            assert c.transform.screen_space == (c.primitive is Primitive.TEXT)


# ── Rendering boundary ───────────────────────────────────────────────

class TestRenderScene:

    def test_one_frame_per_call(self):
        renderer = RecordingRenderer()
        drawn = render_scene(_scene(), renderer, 1000.0)
        assert len(renderer.frames) == 1
        assert len(renderer.frames[0].commands) == drawn
        assert renderer.frames[0].viewpoint == _scene().viewpoint

    def test_matches_draw_commands(self):
        renderer = RecordingRenderer()
        render_scene(_scene(), renderer, 1000.0)
        assert renderer.frames[0].commands == scene_draw_commands(_scene(), 1000.0)
