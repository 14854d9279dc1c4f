# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for environment configuration."""
import pytest

from orbitview.config import CatalogConfig, load_catalog_config, load_simulation_config
from orbitview.domain.simulation import SimulationConfig


_ENV = {"N2YO_API_KEY": "secret", "LATITUDE": "49.6116", "LONGITUDE": "6.1319"}


# ── Catalog config ───────────────────────────────────────────────────

class TestLoadCatalogConfig:

    def test_reads_environment(self):
        config = load_catalog_config(_ENV)
        assert config == CatalogConfig("secret", 49.6116, 6.1319)
        assert config.timeout == 30

    @pytest.mark.parametrize("missing", ["N2YO_API_KEY", "LATITUDE", "LONGITUDE"])
    def test_missing_variable_named(self, missing):
        env = {k: v for k, v in _ENV.items() if k != missing}
        with pytest.raises(ValueError, match=missing):
            load_catalog_config(env)

    def test_blank_variable_is_missing(self):
        with pytest.raises(ValueError, match="N2YO_API_KEY"):
            load_catalog_config({**_ENV, "N2YO_API_KEY": "  "})

    def test_malformed_latitude_named(self):
        with pytest.raises(ValueError, match="LATITUDE"):
            load_catalog_config({**_ENV, "LATITUDE": "north"})

    def test_longitude_out_of_range(self):
        with pytest.raises(ValueError, match="LONGITUDE"):
            load_catalog_config({**_ENV, "LONGITUDE": "200"})

    def test_non_finite_rejected(self):
        with pytest.raises(ValueError, match="LATITUDE"):
            load_catalog_config({**_ENV, "LATITUDE": "nan"})

    def test_timeout_override(self):
        assert load_catalog_config({**_ENV, "N2YO_TIMEOUT": "5"}).timeout == 5

    def test_reads_process_environment(self, monkeypatch):
        for key, value in _ENV.items():
            monkeypatch.setenv(key, value)
        assert load_catalog_config().api_key == "secret"


# ── Simulation config ────────────────────────────────────────────────

class TestLoadSimulationConfig:

    def test_no_overrides(self):
        assert load_simulation_config({}) == SimulationConfig()

    def test_overrides(self):
        config = load_simulation_config({
            "ORBITVIEW_SCALE_KM_PER_UNIT": "500",
            "ORBITVIEW_MINUTES_PER_TICK": "1.5",
            "ORBITVIEW_BACKEND": "sgp4",
        })
        assert config.scale_km_per_unit == 500.0
        assert config.minutes_per_tick == 1.5
        assert config.backend == "sgp4"

    def test_base_kept_for_unset(self):
        base = SimulationConfig(rotation_step=0.05)
        config = load_simulation_config({"ORBITVIEW_MINUTES_PER_TICK": "2"}, base)
        assert config.rotation_step == 0.05

    def test_malformed_override_named(self):
        with pytest.raises(ValueError, match="ORBITVIEW_ROTATION_STEP"):
            load_simulation_config({"ORBITVIEW_ROTATION_STEP": "fast"})

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="ORBITVIEW_BACKEND"):
            load_simulation_config({"ORBITVIEW_BACKEND": "rk4"})

    def test_invalid_value_rejected(self):
        with pytest.raises(ValueError, match="scale_km_per_unit"):
            load_simulation_config({"ORBITVIEW_SCALE_KM_PER_UNIT": "-1"})
