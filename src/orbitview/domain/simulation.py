# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Simulation tick loop.

One tick: apply the input snapshot to the camera, advance the clock,
propagate, map to scene space, and emit a SceneDescription. All mutable
state lives in an explicit SimulationState; nothing is global.

Per-tick numeric failures (solver divergence, decay, non-finite values)
are absorbed here: the last good satellite position is reused and the
loop keeps running. Invalid elements are not absorbed.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterable, Iterator, Mapping

from orbitview.domain.camera import (
    DEFAULT_ELEVATION_MARGIN,
    DEFAULT_ROTATION_STEP,
    DEFAULT_TRANSLATION_STEP,
    CameraController,
    CameraState,
    ControlCommand,
)
from orbitview.domain.coordinate_frames import (
    DEFAULT_SCALE_KM_PER_UNIT,
    SceneVector,
    to_scene,
)
from orbitview.domain.errors import (
    DivergenceError,
    NonFiniteError,
    OrbitDecayedError,
)
from orbitview.domain.markers import FixedMarker, build_fixed_markers
from orbitview.domain.propagation import OrbitPropagator, StateVector
from orbitview.domain.scene import SceneDescription, earth_radius_units, render_scene
from orbitview.domain.tle import OrbitalElements
from orbitview.domain.tracked_object import TrackedObject

if TYPE_CHECKING:
    from orbitview.ports.propagation import StatePropagator
    from orbitview.ports.rendering import SceneRenderer


_log = logging.getLogger(__name__)

BACKENDS = ("mean-elements", "sgp4")


@dataclass(frozen=True)
class SimulationConfig:
    """Immutable simulation settings."""
    scale_km_per_unit: float = DEFAULT_SCALE_KM_PER_UNIT
    minutes_per_tick: float = 0.1
    start_minutes: float = 0.0
    translation_step: float = DEFAULT_TRANSLATION_STEP
    rotation_step: float = DEFAULT_ROTATION_STEP
    elevation_margin: float = DEFAULT_ELEVATION_MARGIN
    initial_camera_position: tuple[float, float, float] = (15.94, 0.0, 14.0)
    camera_target: tuple[float, float, float] = (0.0, 0.0, 0.0)
    backend: str = "mean-elements"

    def __post_init__(self):
        for name in ("scale_km_per_unit", "minutes_per_tick", "start_minutes",
                     "translation_step", "rotation_step", "elevation_margin"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        if self.scale_km_per_unit <= 0:
            raise ValueError(f"scale_km_per_unit must be positive, got {self.scale_km_per_unit}")
        if self.minutes_per_tick < 0:
            raise ValueError(f"minutes_per_tick must be >= 0, got {self.minutes_per_tick}")
        if not 0.0 < self.elevation_margin < math.pi / 2:
            raise ValueError(f"elevation_margin must be in (0, π/2), got {self.elevation_margin}")
        if self.backend not in BACKENDS:
            raise ValueError(f"backend must be one of {BACKENDS}, got {self.backend!r}")


class SimulationClock:
    """Monotonic simulated time in minutes since the element epoch."""

    def __init__(self, elapsed_minutes: float = 0.0):
        if not math.isfinite(elapsed_minutes):
            raise ValueError(f"elapsed_minutes must be finite, got {elapsed_minutes}")
        self._elapsed = elapsed_minutes

    @property
    def elapsed_minutes(self) -> float:
        return self._elapsed

    def advance(self, step_minutes: float) -> float:
        if not math.isfinite(step_minutes) or step_minutes < 0:
            raise ValueError(f"clock step must be finite and >= 0, got {step_minutes}")
        self._elapsed += step_minutes
        return self._elapsed


@dataclass(frozen=True)
class InputSnapshot:
    """Commands held during one tick."""
    active: frozenset[ControlCommand] = frozenset()

    @classmethod
    def of(cls, *commands: ControlCommand | str) -> "InputSnapshot":
        return cls(frozenset(
            c if isinstance(c, ControlCommand) else ControlCommand.parse(c)
            for c in commands
        ))

    def ordered(self) -> list[ControlCommand]:
        """Active commands in enumeration order, for deterministic replay."""
        return [c for c in ControlCommand if c in self.active]


@dataclass
class SimulationState:
    """Everything a tick reads and mutates."""
    config: SimulationConfig
    elements: OrbitalElements
    clock: SimulationClock
    camera: CameraController
    propagator: "StatePropagator"
    fixed_markers: Mapping[str, FixedMarker]
    last_satellite_position: SceneVector | None = None
    last_state_vector: StateVector | None = None
    tracked_objects: tuple[TrackedObject, ...] = field(default=())
    failed_ticks: int = 0


def create_simulation_state(
    elements: OrbitalElements,
    config: SimulationConfig | None = None,
    propagator: "StatePropagator | None" = None,
) -> SimulationState:
    """
    Build the startup state: clock, camera, markers, propagator.

    The element set is checked by propagating once at the start time; an
    InvalidElementsError escapes to the caller.

    Raises:
        ValueError: If the propagator does not match config.backend, or the
            sgp4 backend is selected without passing its adapter.
    """
    config = config or SimulationConfig()
    if propagator is None:
        if config.backend != OrbitPropagator.name:
            raise ValueError(
                f"backend {config.backend!r} needs its propagator passed in explicitly"
            )
        propagator = OrbitPropagator()
    elif propagator.name != config.backend:
        raise ValueError(
            f"propagator {propagator.name!r} does not match backend {config.backend!r}"
        )
    camera = CameraController(
        CameraState(
            position=SceneVector(*config.initial_camera_position),
            target=SceneVector(*config.camera_target),
        ),
        elevation_margin=config.elevation_margin,
        translation_step=config.translation_step,
        rotation_step=config.rotation_step,
    )
    state = SimulationState(
        config=config,
        elements=elements,
        clock=SimulationClock(config.start_minutes),
        camera=camera,
        propagator=propagator,
        fixed_markers=build_fixed_markers(config.scale_km_per_unit),
    )
    try:
        propagator.propagate(elements, config.start_minutes)
    except (DivergenceError, OrbitDecayedError) as e:
        _log.warning("Start-time propagation failed: %s", e)
    return state


def tick(
    state: SimulationState,
    snapshot: InputSnapshot,
    catalog_update: tuple[TrackedObject, ...] | None = None,
) -> SceneDescription:
    """
    Advance the simulation by one tick.

    Args:
        state: Mutable simulation state (camera, clock, last position).
        snapshot: Commands held this tick.
        catalog_update: A completed catalog fetch; replaces the tracked
            object tuple as a whole.

    Returns:
        SceneDescription for the rendering boundary.

    Raises:
        InvalidElementsError: If the element set cannot be propagated at all.
    """
    for command in snapshot.ordered():
        state.camera.apply(command)

    t = state.clock.advance(state.config.minutes_per_tick)

    satellite_position = state.last_satellite_position
    stale = False
    try:
        sv = state.propagator.propagate(state.elements, t)
    except (DivergenceError, OrbitDecayedError) as e:
        _log.warning("Propagation failed, reusing last position: %s", e)
        state.failed_ticks += 1
        stale = True
    else:
        try:
            satellite_position = to_scene(sv.position_km, state.config.scale_km_per_unit)
        except NonFiniteError as e:
            _log.warning("Skipping satellite this tick: %s", e)
            state.failed_ticks += 1
            satellite_position = None
            stale = True
        else:
            state.last_satellite_position = satellite_position
            state.last_state_vector = sv

    if catalog_update is not None:
        state.tracked_objects = tuple(catalog_update)

    return SceneDescription(
        viewpoint=state.camera.state,
        satellite_position=satellite_position,
        fixed_markers=state.fixed_markers,
        elapsed_minutes=t,
        earth_radius=earth_radius_units(state.config.scale_km_per_unit),
        satellite_stale=stale,
        satellite_name=state.elements.name,
        tracked_objects=state.tracked_objects,
    )


class SimulationLoop:
    """
    Drives tick() over a sequence of input snapshots.

    Args:
        state: Startup state from create_simulation_state().
        renderer: Optional SceneRenderer; every scene is drawn through it.
        catalog_poll: Optional zero-argument callable returning a completed
            catalog fetch or None; it must not block.
    """

    def __init__(
        self,
        state: SimulationState,
        renderer: "SceneRenderer | None" = None,
        catalog_poll: Callable[[], tuple[TrackedObject, ...] | None] | None = None,
    ):
        self.state = state
        self._renderer = renderer
        self._catalog_poll = catalog_poll
        self.ticks = 0

    def step(self, snapshot: InputSnapshot = InputSnapshot()) -> SceneDescription:
        update = self._catalog_poll() if self._catalog_poll is not None else None
        scene = tick(self.state, snapshot, catalog_update=update)
        if self._renderer is not None:
            render_scene(scene, self._renderer, self.state.config.scale_km_per_unit)
        self.ticks += 1
        return scene

    def run(self, snapshots: Iterable[InputSnapshot]) -> Iterator[SceneDescription]:
        """Yield one scene per snapshot; control returns to the caller between ticks."""
        for snapshot in snapshots:
            yield self.step(snapshot)
