# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
orbitview

Propagate a satellite from two-line elements and present it in a 3D scene
around the Earth: mean-element propagation with J2 secular rates and drag
terms, inertial-to-scene mapping, orbit camera control, fixed geographic
markers, and a background catalog of objects above an observer.
"""

from orbitview.domain.orbital_mechanics import (
    OrbitalConstants,
    KeplerConvergenceError,
    solve_kepler,
    kepler_to_cartesian,
)
from orbitview.domain.errors import (
    PropagationError,
    InvalidElementsError,
    TleParseError,
    DivergenceError,
    OrbitDecayedError,
    TransformError,
    NonFiniteError,
    CatalogError,
)
from orbitview.domain.tle import (
    ISS_TLE,
    OrbitalElements,
    parse_tle,
    parse_tle_text,
    tle_checksum,
)
from orbitview.domain.propagation import (
    OrbitPropagator,
    PropagatorConstants,
    StateVector,
    derive_propagator_constants,
    propagate_elements,
)
from orbitview.domain.coordinate_frames import (
    SceneVector,
    to_scene,
    to_inertial,
    geodetic_to_ecef,
)
from orbitview.domain.markers import (
    FixedMarker,
    build_fixed_markers,
)
from orbitview.domain.camera import (
    CameraController,
    CameraState,
    ControlCommand,
)
from orbitview.domain.tracked_object import (
    TrackedObject,
    parse_tracked_objects,
)
from orbitview.domain.scene import (
    SceneDescription,
    scene_draw_commands,
    render_scene,
)
from orbitview.domain.simulation import (
    InputSnapshot,
    SimulationClock,
    SimulationConfig,
    SimulationLoop,
    SimulationState,
    create_simulation_state,
    tick,
)

__all__ = [
    "OrbitalConstants",
    "KeplerConvergenceError",
    "solve_kepler",
    "kepler_to_cartesian",
    "PropagationError",
    "InvalidElementsError",
    "TleParseError",
    "DivergenceError",
    "OrbitDecayedError",
    "TransformError",
    "NonFiniteError",
    "CatalogError",
    "ISS_TLE",
    "OrbitalElements",
    "parse_tle",
    "parse_tle_text",
    "tle_checksum",
    "OrbitPropagator",
    "PropagatorConstants",
    "StateVector",
    "derive_propagator_constants",
    "propagate_elements",
    "SceneVector",
    "to_scene",
    "to_inertial",
    "geodetic_to_ecef",
    "FixedMarker",
    "build_fixed_markers",
    "CameraController",
    "CameraState",
    "ControlCommand",
    "TrackedObject",
    "parse_tracked_objects",
    "SceneDescription",
    "scene_draw_commands",
    "render_scene",
    "InputSnapshot",
    "SimulationClock",
    "SimulationConfig",
    "SimulationLoop",
    "SimulationState",
    "create_simulation_state",
    "tick",
]
