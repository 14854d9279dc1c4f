# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
SGP4 propagation backend.

Wraps the sgp4 library behind the StatePropagator port, so the scene can
be driven by the full SGP4 theory instead of the built-in mean-element
model. External dependency (sgp4) is confined to this layer and imported
lazily.

SGP4 error codes map onto the domain taxonomy:
    6       → OrbitDecayedError
    1-5     → DivergenceError (the state at this offset is unusable)
    init    → InvalidElementsError
"""
import logging
import math
from datetime import datetime, timezone

from orbitview.domain.errors import (
    DivergenceError,
    InvalidElementsError,
    OrbitDecayedError,
)
from orbitview.domain.propagation import StateVector
from orbitview.domain.tle import OrbitalElements, validate_elements


_log = logging.getLogger(__name__)

_SGP4_REFERENCE_EPOCH = datetime(1949, 12, 31, tzinfo=timezone.utc)
_MINUTES_PER_DAY = 1440.0

_SGP4_ERRORS = {
    1: "mean eccentricity out of range",
    2: "mean motion below zero",
    3: "perturbed eccentricity out of range",
    4: "semi-latus rectum below zero",
    6: "orbit decayed",
}


def _require_sgp4():
    """Import sgp4 lazily; raise clear error if not installed."""
    try:
        from sgp4.api import Satrec, WGS72
    except ImportError:
        raise ImportError(
            "sgp4 is required for the SGP4 backend. "
            "Install with: pip install orbitview[sgp4]"
        ) from None
    return Satrec, WGS72


def _epoch_to_sgp4_days(epoch: datetime) -> float:
    """SGP4 epoch offset: fractional days since 1949-12-31."""
    delta = epoch - _SGP4_REFERENCE_EPOCH
    return delta.days + delta.seconds / 86400.0 + delta.microseconds / 86400e6


def build_satrec(elements: OrbitalElements):
    """
    Build an initialised Satrec for an element set.

    Uses the source lines when the elements came from a TLE, so
    SGP4 sees exactly the published values; otherwise initialises from
    the parsed fields.

    Raises:
        InvalidElementsError: If SGP4 initialisation reports an error.
    """
    Satrec, WGS72 = _require_sgp4()
    validate_elements(elements)

    if elements.source_lines is not None:
        line1, line2 = elements.source_lines
        sat = Satrec.twoline2rv(line1, line2, WGS72)
    else:
        rev_per_day = 2.0 * math.pi / _MINUTES_PER_DAY
        sat = Satrec()
        sat.sgp4init(
            WGS72,
            'i',
            elements.catalog_number,
            _epoch_to_sgp4_days(elements.epoch),
            elements.bstar_drag,
            elements.mean_motion_dot * rev_per_day / _MINUTES_PER_DAY,
            elements.mean_motion_ddot * rev_per_day / _MINUTES_PER_DAY**2,
            elements.eccentricity,
            elements.arg_perigee_rad,
            elements.inclination_rad,
            elements.mean_anomaly_rad,
            elements.mean_motion_rev_per_day * rev_per_day,
            elements.raan_rad,
        )

    if sat.error != 0:
        reason = _SGP4_ERRORS.get(sat.error, f"error {sat.error}")
        raise InvalidElementsError("elements", f"SGP4 initialisation failed: {reason}")
    return sat


class Sgp4Propagator:
    """StatePropagator backed by sgp4.api.Satrec, memoized per element set."""

    name = "sgp4"

    def __init__(self):
        _require_sgp4()
        self._elements: OrbitalElements | None = None
        self._satrec = None

    def _satrec_for(self, elements: OrbitalElements):
        if self._satrec is None or self._elements != elements:
            self._satrec = build_satrec(elements)
            self._elements = elements
            _log.debug("Initialised SGP4 for catalog number %d", elements.catalog_number)
        return self._satrec

    def propagate(self, elements: OrbitalElements, minutes_since_epoch: float) -> StateVector:
        """
        Propagate with SGP4 to minutes_since_epoch.

        Raises:
            InvalidElementsError: SGP4 rejects the element set.
            DivergenceError: Non-finite offset or SGP4 error 1-5.
            OrbitDecayedError: SGP4 error 6.
        """
        sat = self._satrec_for(elements)
        if not math.isfinite(minutes_since_epoch):
            raise DivergenceError(minutes_since_epoch, "time offset is not finite")

        fr = sat.jdsatepochF + minutes_since_epoch / _MINUTES_PER_DAY
        error_code, position_km, velocity_km_s = sat.sgp4(sat.jdsatepoch, fr)
        if error_code == 6:
            raise OrbitDecayedError(minutes_since_epoch, _SGP4_ERRORS[6])
        if error_code != 0:
            reason = _SGP4_ERRORS.get(error_code, f"error {error_code}")
            raise DivergenceError(minutes_since_epoch, f"SGP4 {reason}")

        return StateVector(
            position_km=(position_km[0], position_km[1], position_km[2]),
            velocity_km_s=(velocity_km_s[0], velocity_km_s[1], velocity_km_s[2]),
            minutes_since_epoch=minutes_since_epoch,
        )
