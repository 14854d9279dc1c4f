# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Headless scene output.

RecordingRenderer implements the SceneRenderer port by collecting draw
calls in memory. JsonLinesSceneWriter serialises one SceneDescription per
line. External dependencies (json, file I/O) are confined to this adapter.
"""
import json
from dataclasses import dataclass, field
from typing import Any, TextIO

from orbitview.domain.camera import CameraState
from orbitview.domain.coordinate_frames import SceneVector
from orbitview.domain.scene import Color, DrawCommand, Primitive, SceneDescription, Transform


def _vec(v: SceneVector | None) -> list[float] | None:
    if v is None:
        return None
    return [round(v.x, 6), round(v.y, 6), round(v.z, 6)]


def scene_to_dict(scene: SceneDescription) -> dict[str, Any]:
    """JSON-ready dictionary for one scene."""
    return {
        'elapsed_minutes': round(scene.elapsed_minutes, 6),
        'camera': {
            'position': _vec(scene.viewpoint.position),
            'target': _vec(scene.viewpoint.target),
            'up': _vec(scene.viewpoint.up),
        },
        'satellite': {
            'name': scene.satellite_name,
            'position': _vec(scene.satellite_position),
            'stale': scene.satellite_stale,
        },
        'earth_radius': round(scene.earth_radius, 6),
        'markers': {
            name: {'position': _vec(marker.position), 'color': marker.color}
            for name, marker in scene.fixed_markers.items()
        },
        'tracked_objects': [
            {
                'id': obj.id,
                'name': obj.name,
                'designator': obj.designator,
                'launch_date': obj.launch_date,
                'lat': obj.lat,
                'lon': obj.lon,
                'alt': obj.alt,
            }
            for obj in scene.tracked_objects
        ],
    }


@dataclass
class RecordedFrame:
    """One frame captured by RecordingRenderer."""
    viewpoint: CameraState
    commands: list[DrawCommand] = field(default_factory=list)

    def count(self, primitive: Primitive) -> int:
        return sum(1 for c in self.commands if c.primitive is primitive)


class RecordingRenderer:
    """SceneRenderer that keeps every frame in memory."""

    def __init__(self, keep_frames: int | None = None):
        self.frames: list[RecordedFrame] = []
        self._keep = keep_frames
        self._current: RecordedFrame | None = None

    def begin_frame(self, viewpoint: CameraState) -> None:
        if self._current is not None:
            raise RuntimeError("begin_frame called twice without end_frame")
        self._current = RecordedFrame(viewpoint)

    def draw(self, primitive: Primitive, transform: Transform, color: Color) -> None:
        if self._current is None:
            raise RuntimeError("draw called outside a frame")
        self._current.commands.append(DrawCommand(primitive, transform, color))

    def end_frame(self) -> None:
        if self._current is None:
            raise RuntimeError("end_frame called outside a frame")
        self.frames.append(self._current)
        self._current = None
        if self._keep is not None and len(self.frames) > self._keep:
            del self.frames[:-self._keep]

    @property
    def last_frame(self) -> RecordedFrame | None:
        return self.frames[-1] if self.frames else None


class JsonLinesSceneWriter:
    """Writes scenes as JSON lines to an open text stream."""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self.written = 0

    def write(self, scene: SceneDescription) -> None:
        self._stream.write(json.dumps(scene_to_dict(scene), ensure_ascii=False))
        self._stream.write('\n')
        self.written += 1

    def write_all(self, scenes) -> int:
        for scene in scenes:
            self.write(scene)
        return self.written
