# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Orbital mechanics functions.

Constants and pure conversions shared by the mean-element propagator:
perifocal-to-inertial rotation and Kepler's equation.

Two-line element sets are fitted against the WGS-72 Earth model, so the
propagator works in WGS-72 earth radii and minutes. The spherical body
model drawn in the scene uses the same equatorial radius.
"""
import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class _OrbitalConstants:
    """WGS-72 constants used by two-line element propagation."""
    MU_EARTH_KM: float = 398600.8          # km³/s², gravitational parameter
    R_EARTH_KM: float = 6378.135           # km, equatorial radius
    J2_EARTH: float = 1.082616e-3          # J2 zonal harmonic
    MINUTES_PER_DAY: float = 1440.0
    SECONDS_PER_MINUTE: float = 60.0

    @property
    def XKE(self) -> float:
        """sqrt(mu) in earth radii^1.5 per minute."""
        return 60.0 / math.sqrt(self.R_EARTH_KM**3 / self.MU_EARTH_KM)

    @property
    def CK2(self) -> float:
        """Half of J2 (earth radii² units with AE = 1)."""
        return 0.5 * self.J2_EARTH


OrbitalConstants: _OrbitalConstants = _OrbitalConstants()

KEPLER_TOLERANCE_RAD = 1e-8
KEPLER_MAX_ITERATIONS = 50


class KeplerConvergenceError(ArithmeticError):
    """Kepler's equation did not converge within the iteration bound."""

    def __init__(self, mean_anomaly_rad: float, eccentricity: float, iterations: int):
        self.mean_anomaly_rad = mean_anomaly_rad
        self.eccentricity = eccentricity
        self.iterations = iterations
        super().__init__(
            f"Kepler's equation did not converge after {iterations} iterations "
            f"(M={mean_anomaly_rad:.6f} rad, e={eccentricity:.7f})"
        )


def solve_kepler(
    mean_anomaly_rad: float,
    eccentricity: float,
    tolerance: float = KEPLER_TOLERANCE_RAD,
    max_iterations: int = KEPLER_MAX_ITERATIONS,
) -> float:
    """
    Solve Kepler's equation E - e·sin(E) = M by Newton iteration.

    The starting guess is M for moderate eccentricity and π for e >= 0.8,
    which keeps Newton monotone on the whole [0, 2π) interval.

    Args:
        mean_anomaly_rad: Mean anomaly (radians, any value; wrapped to [0, 2π)).
        eccentricity: Eccentricity in [0, 1).
        tolerance: Convergence threshold on |ΔE| (radians).
        max_iterations: Iteration bound.

    Returns:
        Eccentric anomaly in radians, in the same revolution as the wrapped M.

    Raises:
        KeplerConvergenceError: If |ΔE| stays above tolerance, or the
            iteration produces a non-finite value.
    """
    m = math.fmod(mean_anomaly_rad, 2.0 * math.pi)
    if m < 0.0:
        m += 2.0 * math.pi

    e_anom = math.pi if eccentricity >= 0.8 else m
    for _ in range(max_iterations):
        f = e_anom - eccentricity * math.sin(e_anom) - m
        f_prime = 1.0 - eccentricity * math.cos(e_anom)
        delta = f / f_prime
        e_anom -= delta
        if not math.isfinite(e_anom):
            break
        if abs(delta) < tolerance:
            return e_anom

    raise KeplerConvergenceError(mean_anomaly_rad, eccentricity, max_iterations)


def true_anomaly_from_eccentric(eccentric_anomaly_rad: float, eccentricity: float) -> float:
    """True anomaly via atan2; regular at e = 0 (no division by e)."""
    beta = math.sqrt(1.0 - eccentricity**2)
    return math.atan2(
        beta * math.sin(eccentric_anomaly_rad),
        math.cos(eccentric_anomaly_rad) - eccentricity,
    )


def perifocal_rotation(
    raan_rad: float,
    arg_perigee_rad: float,
    inclination_rad: float,
) -> np.ndarray:
    """
    Rotation matrix from the perifocal (PQW) frame to the inertial frame.

    R = R3(-Ω) · R1(-i) · R3(-ω). Contains no division, so equatorial
    orbits (i = 0) are a regular case.
    """
    cO = math.cos(raan_rad)
    sO = math.sin(raan_rad)
    co = math.cos(arg_perigee_rad)
    so = math.sin(arg_perigee_rad)
    ci = math.cos(inclination_rad)
    si = math.sin(inclination_rad)

    return np.array([
        [cO * co - sO * so * ci, -cO * so - sO * co * ci, sO * si],
        [sO * co + cO * so * ci, -sO * so + cO * co * ci, -cO * si],
        [so * si, co * si, ci],
    ])


def kepler_to_cartesian(
    a: float,
    e: float,
    i_rad: float,
    omega_big_rad: float,
    omega_small_rad: float,
    nu_rad: float,
    mu: float = OrbitalConstants.MU_EARTH_KM,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Convert Keplerian orbital elements to inertial Cartesian position/velocity.

    Units follow mu: with the default (km³/s²), a is in km and the result
    is (km, km/s). With mu = XKE² and a in earth radii, the result is
    (earth radii, earth radii/min).

    Args:
        a: Semi-major axis
        e: Eccentricity (0 for circular)
        i_rad: Inclination (radians)
        omega_big_rad: RAAN / longitude of ascending node (radians)
        omega_small_rad: Argument of perigee (radians)
        nu_rad: True anomaly (radians)
        mu: Gravitational parameter in matching units

    Returns:
        (position [x,y,z], velocity [vx,vy,vz]) as numpy arrays
    """
    cos_nu = math.cos(nu_rad)
    sin_nu = math.sin(nu_rad)

    p = a * (1 - e**2)
    r = p / (1 + e * cos_nu)

    p_factor = math.sqrt(mu / p)
    pos_pqw = np.array([r * cos_nu, r * sin_nu, 0.0])
    vel_pqw = np.array([
        -p_factor * sin_nu,
        p_factor * (e + cos_nu),
        0.0,
    ])

    rotation = perifocal_rotation(omega_big_rad, omega_small_rad, i_rad)
    return rotation @ pos_pqw, rotation @ vel_pqw


def orbital_period_minutes(mean_motion_rev_per_day: float) -> float:
    """Orbital period in minutes for a mean motion in revolutions per day."""
    if mean_motion_rev_per_day <= 0:
        raise ValueError(f"Mean motion must be positive, got {mean_motion_rev_per_day}")
    return OrbitalConstants.MINUTES_PER_DAY / mean_motion_rev_per_day
