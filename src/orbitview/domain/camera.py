# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Orbit-style camera control.

The camera looks at a pivot target with scene +Y as up. Angles are
measured from the target:

    azimuth   θ = atan2(dz, dx)        in the horizontal XZ plane
    elevation φ = asin(dy / r)         clamped to [-π/2 + ε, π/2 - ε]

Rotations preserve r = |position - target|. At the poles the azimuth is
undefined, so elevation stops ε short of them. When the camera sits on
the target (r below DEGENERATE_RADIUS) rotations leave the state alone.
"""
import logging
import math
from dataclasses import dataclass, replace
from enum import Enum

from orbitview.domain.coordinate_frames import ORIGIN, SCENE_UP, SceneVector


_log = logging.getLogger(__name__)

DEGENERATE_RADIUS = 1e-9
DEFAULT_ELEVATION_MARGIN = 0.1
DEFAULT_TRANSLATION_STEP = 0.1
DEFAULT_ROTATION_STEP = 0.01


class ControlCommand(str, Enum):
    """Discrete camera commands, one per held key."""
    PAN_UP = "pan-up"
    PAN_DOWN = "pan-down"
    PAN_LEFT = "pan-left"
    PAN_RIGHT = "pan-right"
    PAN_NEAR = "pan-near"
    PAN_FAR = "pan-far"
    ROTATE_CW = "rotate-cw"
    ROTATE_CCW = "rotate-ccw"
    PITCH_UP = "pitch-up"
    PITCH_DOWN = "pitch-down"
    REPORT_POSITION = "report-position"

    @classmethod
    def parse(cls, name: str) -> "ControlCommand":
        """Parse a command name; raises ValueError listing valid names."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            valid = ", ".join(c.value for c in cls)
            raise ValueError(f"Unknown control command {name!r} (valid: {valid})") from None


# Unit translation direction per pan command (scene axes).
_PAN_DIRECTIONS = {
    ControlCommand.PAN_UP: SceneVector(0.0, 1.0, 0.0),
    ControlCommand.PAN_DOWN: SceneVector(0.0, -1.0, 0.0),
    ControlCommand.PAN_LEFT: SceneVector(-1.0, 0.0, 0.0),
    ControlCommand.PAN_RIGHT: SceneVector(1.0, 0.0, 0.0),
    ControlCommand.PAN_NEAR: SceneVector(0.0, 0.0, -1.0),
    ControlCommand.PAN_FAR: SceneVector(0.0, 0.0, 1.0),
}


@dataclass(frozen=True)
class CameraState:
    """Viewpoint: eye position, pivot target and up vector."""
    position: SceneVector
    target: SceneVector = ORIGIN
    up: SceneVector = SCENE_UP

    @property
    def offset(self) -> SceneVector:
        return self.position - self.target

    @property
    def radius(self) -> float:
        return self.offset.norm()

    @property
    def azimuth(self) -> float:
        d = self.offset
        return math.atan2(d.z, d.x)

    @property
    def elevation(self) -> float:
        r = self.radius
        if r < DEGENERATE_RADIUS:
            return 0.0
        return math.asin(max(-1.0, min(1.0, self.offset.y / r)))


def spherical_offset(radius: float, azimuth: float, elevation: float) -> SceneVector:
    """Offset from the target for (r, θ, φ) in the camera's convention."""
    return SceneVector(
        radius * math.cos(elevation) * math.cos(azimuth),
        radius * math.sin(elevation),
        radius * math.cos(elevation) * math.sin(azimuth),
    )


class CameraController:
    """
    Owns a CameraState and applies control deltas to it.

    Every operation replaces the held state and returns the new one. No
    operation raises on numeric input: out-of-range elevation is clamped,
    and non-finite deltas are dropped.
    """

    def __init__(
        self,
        state: CameraState,
        elevation_margin: float = DEFAULT_ELEVATION_MARGIN,
        translation_step: float = DEFAULT_TRANSLATION_STEP,
        rotation_step: float = DEFAULT_ROTATION_STEP,
    ):
        if not 0.0 < elevation_margin < math.pi / 2:
            raise ValueError(f"elevation_margin must be in (0, π/2), got {elevation_margin}")
        self._state = state
        self.elevation_margin = elevation_margin
        self.translation_step = translation_step
        self.rotation_step = rotation_step

    @property
    def state(self) -> CameraState:
        return self._state

    @property
    def elevation_limits(self) -> tuple[float, float]:
        limit = math.pi / 2 - self.elevation_margin
        return -limit, limit

    def translate(self, delta: SceneVector) -> CameraState:
        """Move the eye by delta; the target stays put."""
        if not delta.is_finite():
            _log.warning("Ignoring non-finite camera translation %s", delta.as_tuple())
            return self._state
        self._state = replace(self._state, position=self._state.position + delta)
        return self._state

    def rotate_horizontal(self, delta_angle_rad: float) -> CameraState:
        """
        Rotate the eye about the target's vertical axis.

        A positive angle increases atan2(dz, dx), carrying +X toward +Z:
        clockwise when seen from above (+Y). Height above the target and
        horizontal distance are kept, so the radius is preserved exactly
        (up to rounding).
        """
        if not math.isfinite(delta_angle_rad):
            _log.warning("Ignoring non-finite horizontal rotation %r", delta_angle_rad)
            return self._state
        state = self._state
        if state.radius < DEGENERATE_RADIUS:
            _log.debug("Horizontal rotation skipped: camera on target")
            return state

        d = state.offset
        horizontal = math.hypot(d.x, d.z)
        if horizontal < DEGENERATE_RADIUS:
            # Directly above or below the target: the bearing has no effect.
            return state
        theta = math.atan2(d.z, d.x) + delta_angle_rad
        new_offset = SceneVector(
            horizontal * math.cos(theta),
            d.y,
            horizontal * math.sin(theta),
        )
        self._state = replace(state, position=state.target + new_offset)
        return self._state

    def rotate_vertical(self, delta_angle_rad: float) -> CameraState:
        """
        Tilt the eye toward or away from the poles about the target.

        The new elevation is clamped short of ±π/2 by the elevation margin;
        radius and horizontal bearing are preserved.
        """
        if not math.isfinite(delta_angle_rad):
            _log.warning("Ignoring non-finite vertical rotation %r", delta_angle_rad)
            return self._state
        state = self._state
        r = state.radius
        if r < DEGENERATE_RADIUS:
            _log.debug("Vertical rotation skipped: camera on target")
            return state

        low, high = self.elevation_limits
        phi = min(max(state.elevation + delta_angle_rad, low), high)
        new_offset = spherical_offset(r, state.azimuth, phi)
        self._state = replace(state, position=state.target + new_offset)
        return self._state

    def apply(self, command: ControlCommand) -> CameraState:
        """Apply one command with the controller's fixed per-tick step."""
        if command in _PAN_DIRECTIONS:
            return self.translate(_PAN_DIRECTIONS[command] * self.translation_step)
        # Directions as seen looking down the +Y axis onto the target.
        if command is ControlCommand.ROTATE_CW:
            return self.rotate_horizontal(self.rotation_step)
        if command is ControlCommand.ROTATE_CCW:
            return self.rotate_horizontal(-self.rotation_step)
        if command is ControlCommand.PITCH_UP:
            return self.rotate_vertical(self.rotation_step)
        if command is ControlCommand.PITCH_DOWN:
            return self.rotate_vertical(-self.rotation_step)
        if command is ControlCommand.REPORT_POSITION:
            p = self._state.position
            _log.info("Camera Position: x = %.2f, y = %.2f, z = %.2f", p.x, p.y, p.z)
            return self._state
        raise ValueError(f"Unhandled control command {command!r}")
