# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Environment configuration.

Catalog access is configured by N2YO_API_KEY, LATITUDE and LONGITUDE.
Simulation defaults can be overridden with ORBITVIEW_* variables; CLI
flags override both. Every error names the offending variable.
"""
import math
import os
from dataclasses import dataclass, replace
from typing import Mapping

from orbitview.domain.simulation import BACKENDS, SimulationConfig


@dataclass(frozen=True)
class CatalogConfig:
    """Observer location and credentials for the nearby-object catalog."""
    api_key: str
    latitude: float
    longitude: float
    timeout: int = 30


def _float_var(environ: Mapping[str, str], name: str) -> float:
    raw = environ[name]
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {raw!r}")
    return value


def load_catalog_config(environ: Mapping[str, str] | None = None) -> CatalogConfig:
    """
    Read the catalog configuration from the environment.

    Raises:
        ValueError: If a variable is missing, malformed or out of range.
    """
    environ = os.environ if environ is None else environ
    for name in ("N2YO_API_KEY", "LATITUDE", "LONGITUDE"):
        if not environ.get(name, "").strip():
            raise ValueError(f"{name} is not set")

    lat = _float_var(environ, "LATITUDE")
    lon = _float_var(environ, "LONGITUDE")
    if not -90.0 <= lat <= 90.0:
        raise ValueError(f"LATITUDE must be in [-90, 90], got {lat}")
    if not -180.0 <= lon <= 180.0:
        raise ValueError(f"LONGITUDE must be in [-180, 180], got {lon}")

    timeout = CatalogConfig.timeout
    if environ.get("N2YO_TIMEOUT"):
        timeout = int(_float_var(environ, "N2YO_TIMEOUT"))
        if timeout <= 0:
            raise ValueError(f"N2YO_TIMEOUT must be positive, got {timeout}")

    return CatalogConfig(
        api_key=environ["N2YO_API_KEY"].strip(),
        latitude=lat,
        longitude=lon,
        timeout=timeout,
    )


_SIMULATION_VARS = {
    "ORBITVIEW_SCALE_KM_PER_UNIT": "scale_km_per_unit",
    "ORBITVIEW_MINUTES_PER_TICK": "minutes_per_tick",
    "ORBITVIEW_START_MINUTES": "start_minutes",
    "ORBITVIEW_TRANSLATION_STEP": "translation_step",
    "ORBITVIEW_ROTATION_STEP": "rotation_step",
    "ORBITVIEW_ELEVATION_MARGIN": "elevation_margin",
}


def load_simulation_config(
    environ: Mapping[str, str] | None = None,
    base: SimulationConfig | None = None,
) -> SimulationConfig:
    """
    Apply ORBITVIEW_* overrides to a SimulationConfig.

    Raises:
        ValueError: If an override is malformed or the result is invalid.
    """
    environ = os.environ if environ is None else environ
    overrides: dict[str, object] = {}
    for var, field_name in _SIMULATION_VARS.items():
        if environ.get(var):
            overrides[field_name] = _float_var(environ, var)

    backend = environ.get("ORBITVIEW_BACKEND")
    if backend:
        if backend not in BACKENDS:
            raise ValueError(f"ORBITVIEW_BACKEND must be one of {BACKENDS}, got {backend!r}")
        overrides["backend"] = backend

    base = base or SimulationConfig()
    return replace(base, **overrides)
