# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for orbit propagation backends.

The built-in mean-element propagator and the SGP4 adapter both satisfy it.
"""
from typing import Protocol, runtime_checkable

from orbitview.domain.propagation import StateVector
from orbitview.domain.tle import OrbitalElements


@runtime_checkable
class StatePropagator(Protocol):
    """Port for propagating an element set to a time offset."""

    name: str

    def propagate(self, elements: OrbitalElements, minutes_since_epoch: float) -> StateVector:
        """
        Propagate to minutes_since_epoch.

        Raises:
            InvalidElementsError: Element set unusable (fatal).
            DivergenceError / OrbitDecayedError: This offset failed (recoverable).
        """
        ...
