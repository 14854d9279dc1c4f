# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Scene description and draw commands.

A SceneDescription is everything the rendering boundary needs for one
frame, in scene units. scene_draw_commands() expands it into backend-
neutral primitives:

    - Earth sphere (equatorial radius) with its equator polyline
    - X/Y/Z axes, twice the Earth radius long (red/green/blue)
    - a cube per fixed marker and one for the satellite
    - HUD text in screen coordinates
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from orbitview.domain.camera import CameraState
from orbitview.domain.coordinate_frames import ORIGIN, SceneVector, to_scene
from orbitview.domain.markers import FixedMarker
from orbitview.domain.orbital_mechanics import OrbitalConstants
from orbitview.domain.tracked_object import TrackedObject


Color = tuple[float, float, float, float]

PALETTE: dict[str, Color] = {
    "black": (0.0, 0.0, 0.0, 1.0),
    "white": (1.0, 1.0, 1.0, 1.0),
    "red": (0.9, 0.16, 0.22, 1.0),
    "green": (0.0, 0.89, 0.19, 1.0),
    "blue": (0.0, 0.47, 0.95, 1.0),
    "yellow": (0.99, 0.98, 0.0, 1.0),
    "skyblue": (0.4, 0.75, 1.0, 1.0),
    "purple": (0.78, 0.48, 1.0, 1.0),
    "brown": (0.5, 0.42, 0.31, 1.0),
}

MARKER_SIZE = 0.2
EQUATOR_SEGMENTS = 100
HUD_TITLE = "Space Station orbit simulation"


class Primitive(str, Enum):
    SPHERE = "sphere"
    LINE = "line"
    CUBE = "cube"
    TEXT = "text"


@dataclass(frozen=True)
class Transform:
    """
    Placement of one primitive.

    sphere: origin + size (radius); cube: origin + size (edge);
    line: origin → end; text: screen origin (x, y) + size (font size).
    """
    origin: SceneVector
    size: float = 0.0
    end: SceneVector | None = None
    text: str = ""
    screen_space: bool = False


@dataclass(frozen=True)
class DrawCommand:
    primitive: Primitive
    transform: Transform
    color: Color


@dataclass(frozen=True)
class SceneDescription:
    """One frame handed to the rendering boundary."""
    viewpoint: CameraState
    satellite_position: SceneVector | None
    fixed_markers: Mapping[str, FixedMarker]
    elapsed_minutes: float
    earth_radius: float
    satellite_stale: bool = False
    satellite_name: str = ""
    tracked_objects: tuple[TrackedObject, ...] = field(default=())


def earth_radius_units(scale_km_per_unit: float) -> float:
    return OrbitalConstants.R_EARTH_KM / scale_km_per_unit


def equator_points(scale_km_per_unit: float, segments: int = EQUATOR_SEGMENTS) -> list[SceneVector]:
    """
    Closed polyline around the equator, mapped like every other entity.

    Returns segments + 1 points; the last repeats the first.
    """
    if segments < 3:
        raise ValueError(f"segments must be >= 3, got {segments}")
    r = OrbitalConstants.R_EARTH_KM
    points = []
    for i in range(segments + 1):
        theta = 2.0 * math.pi * i / segments
        points.append(to_scene((r * math.cos(theta), r * math.sin(theta), 0.0), scale_km_per_unit))
    return points


def _axes(length: float) -> list[DrawCommand]:
    return [
        DrawCommand(Primitive.LINE, Transform(ORIGIN, end=SceneVector(length, 0.0, 0.0)), PALETTE["red"]),
        DrawCommand(Primitive.LINE, Transform(ORIGIN, end=SceneVector(0.0, length, 0.0)), PALETTE["green"]),
        DrawCommand(Primitive.LINE, Transform(ORIGIN, end=SceneVector(0.0, 0.0, length)), PALETTE["blue"]),
    ]


def _hud_text(text: str, y: float) -> DrawCommand:
    return DrawCommand(
        Primitive.TEXT,
        Transform(SceneVector(20.0, y, 0.0), size=30.0, text=text, screen_space=True),
        PALETTE["white"],
    )


def scene_draw_commands(
    scene: SceneDescription,
    scale_km_per_unit: float,
    equator_segments: int = EQUATOR_SEGMENTS,
) -> list[DrawCommand]:
    """Expand a scene description into draw commands, back to front."""
    radius = scene.earth_radius
    commands = _axes(radius * 2.0)
    commands.append(DrawCommand(Primitive.SPHERE, Transform(ORIGIN, size=radius), PALETTE["blue"]))

    ring = equator_points(scale_km_per_unit, equator_segments)
    for start, end in zip(ring, ring[1:]):
        commands.append(DrawCommand(Primitive.LINE, Transform(start, end=end), PALETTE["yellow"]))

    for marker in scene.fixed_markers.values():
        color = PALETTE.get(marker.color, PALETTE["white"])
        commands.append(DrawCommand(Primitive.CUBE, Transform(marker.position, size=MARKER_SIZE), color))

    if scene.satellite_position is not None:
        commands.append(DrawCommand(
            Primitive.CUBE,
            Transform(scene.satellite_position, size=MARKER_SIZE, text=scene.satellite_name),
            PALETTE["red"],
        ))

    commands.append(_hud_text(HUD_TITLE, 20.0))
    commands.append(_hud_text(f"T+{scene.elapsed_minutes:.1f} min", 60.0))
    if scene.satellite_stale:
        commands.append(_hud_text("Propagation stale: showing last position", 100.0))
    return commands


def render_scene(scene: SceneDescription, renderer, scale_km_per_unit: float) -> int:
    """
    Draw one frame through a SceneRenderer.

    Returns:
        Number of primitives drawn.
    """
    commands = scene_draw_commands(scene, scale_km_per_unit)
    renderer.begin_frame(scene.viewpoint)
    for command in commands:
        renderer.draw(command.primitive, command.transform, command.color)
    renderer.end_frame()
    return len(commands)
