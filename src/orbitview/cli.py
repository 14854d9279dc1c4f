# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Command-line interface for the headless orbit scene simulation.

Usage:
    # Default ISS element set, 100 ticks, no input
    orbitview --ticks 100

    # Own element set, camera held rotating, scenes to JSON lines
    orbitview --tle iss.tle --ticks 600 --commands rotate-cw,pitch-up -o scenes.jsonl

    # Replay a control script (one comma-separated snapshot per line)
    orbitview --script controls.txt --draw-commands

    # SGP4 backend (requires sgp4)
    orbitview --backend sgp4 --ticks 1000

    # Objects above the observer (requires N2YO_API_KEY, LATITUDE, LONGITUDE)
    orbitview --fetch-nearby
"""
import argparse
import logging
import sys
from dataclasses import replace

from orbitview.adapters import (
    CatalogPoller,
    JsonLinesSceneWriter,
    N2yoAdapter,
    RecordingRenderer,
    TleFileReader,
)
from orbitview.config import load_catalog_config, load_simulation_config
from orbitview.domain.coordinate_frames import to_inertial
from orbitview.domain.orbital_mechanics import orbital_period_minutes
from orbitview.domain.scene import Primitive, SceneDescription
from orbitview.domain.simulation import (
    BACKENDS,
    InputSnapshot,
    SimulationConfig,
    SimulationLoop,
    create_simulation_state,
)
from orbitview.domain.tle import ISS_TLE, OrbitalElements, parse_tle
from orbitview.logging_config import setup_logging
from orbitview.ports.propagation import StatePropagator
from orbitview.ports.rendering import SceneRenderer


_log = logging.getLogger(__name__)

CATALOG_WAIT_SECONDS = 30.0


def parse_commands(text: str) -> InputSnapshot:
    """Parse 'rotate-cw, pitch-up' into a snapshot. Empty text is no input."""
    names = [part.strip() for part in text.split(',') if part.strip()]
    return InputSnapshot.of(*names)


def read_script(path: str) -> list[InputSnapshot]:
    """
    Read a control script: one snapshot per line, '#' starts a comment.

    An empty line is a tick with no input.
    """
    snapshots = []
    with open(path, encoding='utf-8') as f:
        for line_number, line in enumerate(f, start=1):
            text = line.split('#', 1)[0]
            try:
                snapshots.append(parse_commands(text))
            except ValueError as e:
                raise ValueError(f"{path}:{line_number}: {e}") from e
    return snapshots


def load_elements(tle_path: str | None) -> OrbitalElements:
    if tle_path is None:
        name, line1, line2 = ISS_TLE
        return parse_tle(line1, line2, name=name)
    return TleFileReader().read_elements(tle_path)


def make_propagator(backend: str) -> StatePropagator | None:
    if backend == "sgp4":
        from orbitview.adapters.sgp4_propagator import Sgp4Propagator
        return Sgp4Propagator()
    return None


def run(
    elements: OrbitalElements,
    snapshots: list[InputSnapshot],
    config: SimulationConfig | None = None,
    output_path: str | None = None,
    renderer: SceneRenderer | None = None,
    poller: CatalogPoller | None = None,
) -> tuple[list[SceneDescription], SimulationLoop]:
    """
    Run the simulation over the given snapshots.

    Returns:
        (scenes, loop) — every emitted scene and the finished loop.
    """
    config = config or SimulationConfig()
    state = create_simulation_state(elements, config, make_propagator(config.backend))
    loop = SimulationLoop(
        state,
        renderer=renderer,
        catalog_poll=poller.poll if poller is not None else None,
    )
    if poller is not None:
        poller.request_refresh()

    if output_path is None:
        scenes = list(loop.run(snapshots))
    else:
        with open(output_path, 'w', encoding='utf-8') as f:
            writer = JsonLinesSceneWriter(f)
            scenes = []
            for scene in loop.run(snapshots):
                writer.write(scene)
                scenes.append(scene)
    return scenes, loop


def _print_summary(scenes: list[SceneDescription], loop: SimulationLoop) -> None:
    state = loop.state
    period = orbital_period_minutes(state.elements.mean_motion_rev_per_day)
    print(f"Object: {state.elements.name or state.elements.catalog_number}  "
          f"period: {period:.1f} min")
    print(f"Ticks: {loop.ticks}  elapsed: {state.clock.elapsed_minutes:.1f} min  "
          f"stale ticks: {state.failed_ticks}")
    if scenes and scenes[-1].satellite_position is not None:
        p = scenes[-1].satellite_position
        x, y, z = to_inertial(p, state.config.scale_km_per_unit)
        print(f"Satellite (scene): ({p.x:.3f}, {p.y:.3f}, {p.z:.3f})  "
              f"ECI km: ({x:.1f}, {y:.1f}, {z:.1f})")
    else:
        print("Satellite: no position")
    sv = state.last_state_vector
    if sv is not None:
        print(f"Last good state: t = {sv.minutes_since_epoch:.1f} min  "
              f"radius {sv.radius_km:.1f} km  speed {sv.speed_km_s:.3f} km/s")
    c = state.camera.state.position
    print(f"Camera Position: x = {c.x:.2f}, y = {c.y:.2f}, z = {c.z:.2f}")


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Headless orbit scene simulation (two-line elements to scene space)"
    )
    parser.add_argument(
        '--tle',
        help="Path to a two- or three-line element file (default: built-in ISS set)"
    )
    parser.add_argument(
        '--ticks', type=int, default=100,
        help="Number of ticks to run with --commands (default: 100)"
    )
    parser.add_argument(
        '--commands', default="",
        help="Comma-separated commands held every tick (e.g. rotate-cw,pitch-up)"
    )
    parser.add_argument(
        '--script',
        help="Control script: one comma-separated snapshot per line (overrides --ticks)"
    )

    sim_group = parser.add_argument_group('simulation')
    sim_group.add_argument(
        '--minutes-per-tick', type=float,
        help="Simulated minutes per tick (default: 0.1)"
    )
    sim_group.add_argument(
        '--scale', type=float,
        help="Kilometres per scene unit (default: 1000)"
    )
    sim_group.add_argument(
        '--backend', choices=BACKENDS,
        help="Propagation backend (default: mean-elements)"
    )

    output_group = parser.add_argument_group('output')
    output_group.add_argument(
        '--output', '-o',
        help="Write every scene as JSON lines to this path"
    )
    output_group.add_argument(
        '--draw-commands', action='store_true', default=False,
        help="Record draw calls and report the last frame's primitive counts"
    )
    output_group.add_argument(
        '--fetch-nearby', action='store_true', default=False,
        help="Fetch objects above the observer from N2YO in the background"
    )
    output_group.add_argument(
        '--log-level', default='WARNING',
        help="Logging level (default: WARNING)"
    )
    output_group.add_argument('--log-file', help="Also write logs to this file")

    args = parser.parse_args(argv)

    try:
        setup_logging(args.log_level, args.log_file)

        config = load_simulation_config()
        overrides = {}
        if args.minutes_per_tick is not None:
            overrides['minutes_per_tick'] = args.minutes_per_tick
        if args.scale is not None:
            overrides['scale_km_per_unit'] = args.scale
        if args.backend is not None:
            overrides['backend'] = args.backend
        config = replace(config, **overrides)

        if args.ticks < 0:
            raise ValueError(f"--ticks must be >= 0, got {args.ticks}")
        if args.script:
            snapshots = read_script(args.script)
        else:
            snapshots = [parse_commands(args.commands)] * args.ticks

        elements = load_elements(args.tle)
        renderer = RecordingRenderer(keep_frames=1) if args.draw_commands else None

        poller = None
        if args.fetch_nearby:
            catalog = load_catalog_config()
            source = N2yoAdapter(catalog.api_key, timeout=catalog.timeout)
            poller = CatalogPoller(source, catalog.latitude, catalog.longitude)

        try:
            scenes, loop = run(elements, snapshots, config, args.output, renderer, poller)
            _print_summary(scenes, loop)

            if renderer is not None and renderer.last_frame is not None:
                frame = renderer.last_frame
                counts = ", ".join(
                    f"{p.value}={frame.count(p)}" for p in Primitive
                )
                print(f"Last frame: {len(frame.commands)} primitives ({counts})")

            if poller is not None:
                objects = loop.state.tracked_objects
                if poller.completed_fetches == 0:
                    late = poller.wait(timeout=CATALOG_WAIT_SECONDS)
                    if late is not None:
                        objects = late
                if poller.last_error is not None:
                    print(f"Catalog fetch failed: {poller.last_error}", file=sys.stderr)
                else:
                    print(f"Nearby objects: {len(objects)}")
                    for obj in objects:
                        print(f"  {obj.id:>6}  {obj.name:<24} "
                              f"lat {obj.lat:7.2f}  lon {obj.lon:8.2f}  alt {obj.alt:8.1f} km")
        finally:
            if poller is not None:
                poller.close()

        if args.output:
            print(f"Wrote {len(scenes)} scenes to {args.output}")

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ImportError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
