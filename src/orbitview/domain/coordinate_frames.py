# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Coordinate frame conversions.

Pure transformations between the inertial frame used by the propagator,
the Earth-fixed frame of geographic reference points, and scene space.

Reference frames:
    Inertial — Earth-centred, non-rotating, +Z toward the north pole (km)
    ECEF     — Earth-Centered Earth-Fixed (km)
    Scene    — right-handed, +Y vertical, abstract units

Scene mapping: divide by the scale (km per scene unit), then permute axes
cyclically (x, y, z) → (y, z, x) so inertial +Z lands on scene +Y. A
cyclic permutation is a proper rotation, so handedness and distances
(up to scale) are preserved.
"""
import math
from dataclasses import dataclass

from orbitview.domain.errors import NonFiniteError


DEFAULT_SCALE_KM_PER_UNIT = 1000.0

# WGS84 ellipsoid, km
_WGS84_A_KM = 6378.137
_WGS84_E_SQUARED = 0.00669437999014


@dataclass(frozen=True)
class SceneVector:
    """A point or offset in scene units."""
    x: float
    y: float
    z: float

    def __add__(self, other: "SceneVector") -> "SceneVector":
        return SceneVector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "SceneVector") -> "SceneVector":
        return SceneVector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, k: float) -> "SceneVector":
        return SceneVector(self.x * k, self.y * k, self.z * k)

    __rmul__ = __mul__

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def norm(self) -> float:
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


ORIGIN = SceneVector(0.0, 0.0, 0.0)
SCENE_UP = SceneVector(0.0, 1.0, 0.0)


def _check_scale(scale_km_per_unit: float) -> None:
    if not math.isfinite(scale_km_per_unit) or scale_km_per_unit <= 0.0:
        raise NonFiniteError(
            f"scale must be a positive finite number, got {scale_km_per_unit}"
        )


def to_scene(
    position_km: tuple[float, float, float],
    scale_km_per_unit: float = DEFAULT_SCALE_KM_PER_UNIT,
) -> SceneVector:
    """
    Map an inertial position (km) to scene space.

    Args:
        position_km: (x, y, z) in km, inertial or Earth-fixed.
        scale_km_per_unit: Kilometres per scene unit.

    Returns:
        SceneVector(y/s, z/s, x/s).

    Raises:
        NonFiniteError: If any component or the scale is NaN/Inf, or the
            scale is not positive.
    """
    _check_scale(scale_km_per_unit)
    x, y, z = position_km
    if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(z)):
        raise NonFiniteError(f"position is not finite: {tuple(position_km)}")
    return SceneVector(
        y / scale_km_per_unit,
        z / scale_km_per_unit,
        x / scale_km_per_unit,
    )


def to_inertial(
    point: SceneVector,
    scale_km_per_unit: float = DEFAULT_SCALE_KM_PER_UNIT,
) -> tuple[float, float, float]:
    """Inverse of to_scene: scene point back to inertial km."""
    _check_scale(scale_km_per_unit)
    if not point.is_finite():
        raise NonFiniteError(f"scene point is not finite: {point.as_tuple()}")
    return (
        point.z * scale_km_per_unit,
        point.x * scale_km_per_unit,
        point.y * scale_km_per_unit,
    )


def geodetic_to_ecef(
    lat_deg: float,
    lon_deg: float,
    alt_km: float = 0.0,
) -> tuple[float, float, float]:
    """
    Convert geodetic coordinates to ECEF position (WGS84 ellipsoid).

    Args:
        lat_deg: Geodetic latitude in degrees [-90, 90].
        lon_deg: Geodetic longitude in degrees.
        alt_km: Altitude above the ellipsoid in km.

    Returns:
        (x, y, z) in km, ECEF frame.
    """
    a = _WGS84_A_KM
    e2 = _WGS84_E_SQUARED

    lat_rad = math.radians(lat_deg)
    lon_rad = math.radians(lon_deg)

    sin_lat = math.sin(lat_rad)
    cos_lat = math.cos(lat_rad)

    n = a / math.sqrt(1.0 - e2 * sin_lat**2)

    x = (n + alt_km) * cos_lat * math.cos(lon_rad)
    y = (n + alt_km) * cos_lat * math.sin(lon_rad)
    z = (n * (1.0 - e2) + alt_km) * sin_lat

    return x, y, z
