# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Mean-element orbit propagation.

Keplerian motion from a two-line element set with secular corrections:

    - Mean motion and semi-major axis recovered from the element set's
      (Kozai) mean motion, as SGP4 does at initialisation.
    - First-order J2 secular rates of RAAN, argument of perigee and
      mean anomaly.
    - Drag from the element set's mean motion derivatives: quadratic and
      cubic mean anomaly drift, semi-major axis decay at constant perigee.

Internal units are WGS-72 earth radii and minutes; StateVector carries
km and km/s. Kepler's equation is solved by bounded Newton iteration.
"""
import math
from dataclasses import dataclass

import numpy as np

from orbitview.domain.errors import (
    DivergenceError,
    InvalidElementsError,
    OrbitDecayedError,
)
from orbitview.domain.orbital_mechanics import (
    KEPLER_MAX_ITERATIONS,
    KEPLER_TOLERANCE_RAD,
    KeplerConvergenceError,
    OrbitalConstants,
    kepler_to_cartesian,
    solve_kepler,
    true_anomaly_from_eccentric,
)
from orbitview.domain.tle import OrbitalElements, validate_elements


_TWO_PI = 2.0 * math.pi
_MIN_ECCENTRICITY = 1e-6
_MAX_ECCENTRICITY = 0.999999


@dataclass(frozen=True)
class PropagatorConstants:
    """Coefficients derived once from an element set."""
    mean_motion_rad_min: float         # recovered (un-Kozai) mean motion
    semi_major_axis_er: float          # recovered semi-major axis
    perigee_radius_er: float
    mean_anomaly_rate: float           # rad/min, includes J2 secular term
    raan_rate: float                   # rad/min
    arg_perigee_rate: float            # rad/min
    mean_motion_dot: float             # rad/min², n-dot / 2
    mean_motion_ddot: float            # rad/min³, n-double-dot / 6
    has_drag: bool


@dataclass(frozen=True)
class StateVector:
    """Inertial position/velocity at an offset from the element epoch."""
    position_km: tuple[float, float, float]
    velocity_km_s: tuple[float, float, float]
    minutes_since_epoch: float

    @property
    def radius_km(self) -> float:
        return math.sqrt(sum(c * c for c in self.position_km))

    @property
    def speed_km_s(self) -> float:
        return math.sqrt(sum(c * c for c in self.velocity_km_s))


def derive_propagator_constants(elements: OrbitalElements) -> PropagatorConstants:
    """
    Derive the cached coefficients for an element set.

    Recovery of the mean motion removes the J2 part folded into the
    element set's mean motion:

        a1 = (ke / n0)^(2/3)
        δ1 = 3/2 · k2 · (3cos²i - 1) / (a1² · β0³)
        a0 = a1 · (1 - δ1/3 - δ1² - 134/81 · δ1³)
        δ0 = 3/2 · k2 · (3cos²i - 1) / (a0² · β0³)
        n0'' = n0 / (1 + δ0),   a0'' = a0 / (1 - δ0)

    Secular rates with p = a0''(1 - e²):

        dΩ/dt = -3 · k2 · n0'' · cos(i) / p²
        dω/dt = 3/2 · k2 · n0'' · (5cos²i - 1) / p²
        dM/dt = n0'' · (1 + 3/2 · k2 · (3cos²i - 1) / (a0''² · β0³))

    No term divides by eccentricity or sin(i).

    Raises:
        InvalidElementsError: If the element set violates its invariants,
            or its recovered orbit lies inside the Earth.
    """
    validate_elements(elements)
    c = OrbitalConstants

    n0 = elements.mean_motion_rev_per_day * _TWO_PI / c.MINUTES_PER_DAY
    e0 = elements.eccentricity
    cos_i = math.cos(elements.inclination_rad)
    x3thm1 = 3.0 * cos_i**2 - 1.0
    beta0_sq = 1.0 - e0**2
    beta0_cubed = beta0_sq * math.sqrt(beta0_sq)

    a1 = (c.XKE / n0) ** (2.0 / 3.0)
    delta1 = 1.5 * c.CK2 * x3thm1 / (a1**2 * beta0_cubed)
    a0 = a1 * (1.0 - delta1 / 3.0 - delta1**2 - 134.0 / 81.0 * delta1**3)
    delta0 = 1.5 * c.CK2 * x3thm1 / (a0**2 * beta0_cubed)
    n0_dp = n0 / (1.0 + delta0)
    a0_dp = a0 / (1.0 - delta0)

    perigee = a0_dp * (1.0 - e0)
    if perigee < 1.0:
        raise InvalidElementsError(
            "mean_motion_rev_per_day",
            f"perigee {perigee * c.R_EARTH_KM:.1f} km is inside the Earth",
        )

    p_sq = (a0_dp * beta0_sq) ** 2
    raan_rate = -3.0 * c.CK2 * n0_dp * cos_i / p_sq
    arg_perigee_rate = 1.5 * c.CK2 * n0_dp * (5.0 * cos_i**2 - 1.0) / p_sq
    mean_anomaly_rate = n0_dp * (1.0 + 1.5 * c.CK2 * x3thm1 / (a0_dp**2 * beta0_cubed))

    rev_to_rad = _TWO_PI
    ndot = elements.mean_motion_dot * rev_to_rad / c.MINUTES_PER_DAY**2
    nddot = elements.mean_motion_ddot * rev_to_rad / c.MINUTES_PER_DAY**3

    return PropagatorConstants(
        mean_motion_rad_min=n0_dp,
        semi_major_axis_er=a0_dp,
        perigee_radius_er=perigee,
        mean_anomaly_rate=mean_anomaly_rate,
        raan_rate=raan_rate,
        arg_perigee_rate=arg_perigee_rate,
        mean_motion_dot=ndot,
        mean_motion_ddot=nddot,
        has_drag=(ndot != 0.0 or nddot != 0.0),
    )


def _drag_adjusted_shape(
    constants: PropagatorConstants,
    eccentricity: float,
    tsince: float,
) -> tuple[float, float]:
    """
    Semi-major axis and eccentricity at tsince under the drag terms.

        n(t) = n0 + 2·(ṅ/2)·t + 3·(n̈/6)·t²
        a(t) = a0 · (n0 / n(t))^(2/3)
        e(t) = 1 - q0 / a(t)      (perigee radius q0 held constant)

    Near-circular orbits keep their eccentricity; e(t) is clamped to
    [0, 1).
    """
    if not constants.has_drag:
        return constants.semi_major_axis_er, eccentricity

    n0 = constants.mean_motion_rad_min
    n_t = n0 + 2.0 * constants.mean_motion_dot * tsince + 3.0 * constants.mean_motion_ddot * tsince**2
    if n_t <= 0.0:
        raise OrbitDecayedError(tsince, "drag terms drive mean motion non-positive")

    a_t = constants.semi_major_axis_er * (n0 / n_t) ** (2.0 / 3.0)
    if eccentricity < _MIN_ECCENTRICITY:
        e_t = eccentricity
    else:
        e_t = min(max(1.0 - constants.perigee_radius_er / a_t, 0.0), _MAX_ECCENTRICITY)
    return a_t, e_t


def propagate_elements(
    elements: OrbitalElements,
    constants: PropagatorConstants,
    minutes_since_epoch: float,
) -> StateVector:
    """
    Evaluate the mean-element model at an offset from the element epoch.

    Args:
        elements: Element set the constants were derived from.
        constants: From derive_propagator_constants(elements).
        minutes_since_epoch: Offset in minutes; negative is before epoch.

    Returns:
        StateVector in the inertial frame (km, km/s).

    Raises:
        DivergenceError: Non-finite offset, Kepler non-convergence, or a
            non-finite result.
        OrbitDecayedError: The drag model puts perigee below the surface.
    """
    tsince = minutes_since_epoch
    if not math.isfinite(tsince):
        raise DivergenceError(tsince, "time offset is not finite")

    c = OrbitalConstants
    a, e = _drag_adjusted_shape(constants, elements.eccentricity, tsince)
    if a * (1.0 - e) < 1.0:
        raise OrbitDecayedError(
            tsince, f"perigee {a * (1.0 - e) * c.R_EARTH_KM:.1f} km is inside the Earth"
        )

    raan = elements.raan_rad + constants.raan_rate * tsince
    arg_perigee = elements.arg_perigee_rad + constants.arg_perigee_rate * tsince
    mean_anomaly = (
        elements.mean_anomaly_rad
        + constants.mean_anomaly_rate * tsince
        + constants.mean_motion_dot * tsince**2
        + constants.mean_motion_ddot * tsince**3
    )

    try:
        ecc_anomaly = solve_kepler(
            mean_anomaly, e,
            tolerance=KEPLER_TOLERANCE_RAD,
            max_iterations=KEPLER_MAX_ITERATIONS,
        )
    except KeplerConvergenceError as exc:
        raise DivergenceError(tsince, str(exc), iterations=exc.iterations) from exc

    nu = true_anomaly_from_eccentric(ecc_anomaly, e)
    # mu = ke² in er³/min², so the state comes back in earth radii and er/min
    pos_er, vel_er_min = kepler_to_cartesian(
        a, e, elements.inclination_rad, raan, arg_perigee, nu, mu=c.XKE**2,
    )
    pos_km = pos_er * c.R_EARTH_KM
    vel_km_s = vel_er_min * (c.R_EARTH_KM / c.SECONDS_PER_MINUTE)

    if not (np.all(np.isfinite(pos_km)) and np.all(np.isfinite(vel_km_s))):
        raise DivergenceError(tsince, "propagated state is not finite")

    return StateVector(
        position_km=(float(pos_km[0]), float(pos_km[1]), float(pos_km[2])),
        velocity_km_s=(float(vel_km_s[0]), float(vel_km_s[1]), float(vel_km_s[2])),
        minutes_since_epoch=tsince,
    )


class OrbitPropagator:
    """
    Mean-element propagator with memoized derived constants.

    Constants are recomputed only when a different element set is passed.
    """

    name = "mean-elements"

    def __init__(self):
        self._elements: OrbitalElements | None = None
        self._constants: PropagatorConstants | None = None

    def constants_for(self, elements: OrbitalElements) -> PropagatorConstants:
        if self._constants is None or self._elements != elements:
            self._constants = derive_propagator_constants(elements)
            self._elements = elements
        return self._constants

    def propagate(self, elements: OrbitalElements, minutes_since_epoch: float) -> StateVector:
        """
        Propagate an element set to minutes_since_epoch.

        Raises:
            InvalidElementsError: Element set out of domain (fatal to caller).
            DivergenceError: Solver failure for this offset (recoverable).
            OrbitDecayedError: Orbit decayed at this offset (recoverable).
        """
        constants = self.constants_for(elements)
        return propagate_elements(elements, constants, minutes_since_epoch)
