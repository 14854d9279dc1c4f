# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for the rendering backend.

The backend owns windows, fonts and primitive drawing; the simulation only
describes what to draw for each frame.
"""
from typing import Protocol, runtime_checkable

from orbitview.domain.camera import CameraState
from orbitview.domain.scene import Color, Primitive, Transform


@runtime_checkable
class SceneRenderer(Protocol):
    """Port for drawing one frame of the scene."""

    def begin_frame(self, viewpoint: CameraState) -> None:
        """Clear the frame and set the 3D camera."""
        ...

    def draw(self, primitive: Primitive, transform: Transform, color: Color) -> None:
        """Draw one primitive."""
        ...

    def end_frame(self) -> None:
        """Present the frame."""
        ...
