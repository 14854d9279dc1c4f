# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the orbitview command-line driver."""
import json
import logging
from unittest.mock import patch

import pytest

from orbitview.adapters.n2yo import N2yoAdapter
from orbitview.cli import main, parse_commands, read_script
from orbitview.domain.camera import ControlCommand
from orbitview.domain.errors import CatalogError
from orbitview.domain.tle import ISS_TLE


# ── Helpers ──────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def _isolated_logging_and_env(monkeypatch):
    for key in ("N2YO_API_KEY", "LATITUDE", "LONGITUDE", "N2YO_TIMEOUT",
                "ORBITVIEW_SCALE_KM_PER_UNIT", "ORBITVIEW_MINUTES_PER_TICK",
                "ORBITVIEW_BACKEND"):
        monkeypatch.delenv(key, raising=False)
    logger = logging.getLogger("orbitview")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


def _catalog_env(monkeypatch):
    monkeypatch.setenv("N2YO_API_KEY", "secret")
    monkeypatch.setenv("LATITUDE", "49.6116")
    monkeypatch.setenv("LONGITUDE", "6.1319")


_ABOVE = {
    "info": {"satcount": 2},
    "above": [
        {"satid": 7530, "satname": "OSCAR 7", "intDesignator": "1974-089B",
         "launchDate": "1974-11-15", "satlat": 48.2, "satlng": 4.1, "satalt": 1447.0},
        {"satid": 24278, "satname": "FO-29", "intDesignator": "1996-046B",
         "launchDate": "1996-08-17", "satlat": 55.8, "satlng": -2.4, "satalt": 1190.5},
    ],
}


# ── Parsing helpers ──────────────────────────────────────────────────

class TestParseCommands:

    def test_comma_separated(self):
        snapshot = parse_commands("rotate-cw, pitch-up")
        assert snapshot.active == {ControlCommand.ROTATE_CW, ControlCommand.PITCH_UP}

    def test_empty_is_no_input(self):
        assert parse_commands("").active == frozenset()

    def test_script(self, tmp_path):
        script = tmp_path / "controls.txt"
        script.write_text("pan-up\n\n# pause\nrotate-ccw,pitch-down  # both\n")
        snapshots = read_script(str(script))
        assert len(snapshots) == 4
        assert snapshots[0].active == {ControlCommand.PAN_UP}
        assert snapshots[1].active == frozenset()
        assert snapshots[3].active == {ControlCommand.ROTATE_CCW, ControlCommand.PITCH_DOWN}

    def test_script_error_names_line(self, tmp_path):
        script = tmp_path / "controls.txt"
        script.write_text("pan-up\nhyperspace\n")
        with pytest.raises(ValueError, match=":2:"):
            read_script(str(script))


# ── main() ───────────────────────────────────────────────────────────

class TestMain:

    def test_default_run(self, capsys):
        main(["--ticks", "5"])
        out = capsys.readouterr().out
        assert "Object: ISS (ZARYA)" in out
        assert "Ticks: 5" in out
        assert "elapsed: 0.5 min" in out
        assert "Last good state: t = 0.5 min" in out
        assert "period: 92.9 min" in out
        assert "Camera Position: x = 15.94, y = 0.00, z = 14.00" in out

    def test_held_commands_move_camera(self, capsys):
        main(["--ticks", "3", "--commands", "pan-up"])
        out = capsys.readouterr().out
        assert "Camera Position: x = 15.94, y = 0.30, z = 14.00" in out

    def test_minutes_per_tick_flag(self, capsys):
        main(["--ticks", "4", "--minutes-per-tick", "2.5"])
        assert "elapsed: 10.0 min" in capsys.readouterr().out

    def test_flag_overrides_environment(self, capsys, monkeypatch):
        monkeypatch.setenv("ORBITVIEW_MINUTES_PER_TICK", "5")
        main(["--ticks", "2"])
        assert "elapsed: 10.0 min" in capsys.readouterr().out
        main(["--ticks", "2", "--minutes-per-tick", "1"])
        assert "elapsed: 2.0 min" in capsys.readouterr().out

    def test_tle_file(self, capsys, tmp_path):
        name, line1, line2 = ISS_TLE
        path = tmp_path / "iss.tle"
        path.write_text(f"0 SPACE STATION\n{line1}\n{line2}\n")
        main(["--tle", str(path), "--ticks", "1"])
        assert "Object: SPACE STATION" in capsys.readouterr().out

    def test_script_sets_tick_count(self, capsys, tmp_path):
        script = tmp_path / "controls.txt"
        script.write_text("rotate-cw\nrotate-cw\n\n")
        main(["--script", str(script)])
        assert "Ticks: 3" in capsys.readouterr().out

    def test_output_jsonl(self, capsys, tmp_path):
        out_path = tmp_path / "scenes.jsonl"
        main(["--ticks", "4", "-o", str(out_path)])
        lines = out_path.read_text().splitlines()
        assert len(lines) == 4
        assert json.loads(lines[-1])['elapsed_minutes'] == pytest.approx(0.4)
        assert f"Wrote 4 scenes to {out_path}" in capsys.readouterr().out

    def test_draw_commands(self, capsys):
        main(["--ticks", "2", "--draw-commands"])
        out = capsys.readouterr().out
        assert "Last frame: 114 primitives" in out
        assert "cube=8" in out


# ── Errors ───────────────────────────────────────────────────────────

class TestMainErrors:

    def test_unknown_command(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--commands", "warp"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_missing_tle_file(self, capsys, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["--tle", str(tmp_path / "absent.tle")])
        assert exc_info.value.code == 1

    def test_malformed_tle_names_field(self, capsys, tmp_path):
        name, line1, line2 = ISS_TLE
        path = tmp_path / "bad.tle"
        path.write_text(f"{line1[:60]}\n{line2}\n")
        with pytest.raises(SystemExit) as exc_info:
            main(["--tle", str(path)])
        assert exc_info.value.code == 1
        assert "line_length" in capsys.readouterr().err

    def test_negative_ticks(self, capsys):
        with pytest.raises(SystemExit):
            main(["--ticks", "-1"])

    def test_bad_scale(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--scale", "0"])
        assert "scale_km_per_unit" in capsys.readouterr().err


# ── Nearby objects ───────────────────────────────────────────────────

class TestFetchNearby:

    def test_missing_configuration(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--ticks", "1", "--fetch-nearby"])
        assert exc_info.value.code == 1
        assert "N2YO_API_KEY" in capsys.readouterr().err

    def test_lists_objects(self, capsys, monkeypatch):
        _catalog_env(monkeypatch)
        with patch.object(N2yoAdapter, '_fetch_json', return_value=_ABOVE):
            main(["--ticks", "3", "--fetch-nearby"])
        out = capsys.readouterr().out
        assert "Nearby objects: 2" in out
        assert "OSCAR 7" in out

    def test_failure_is_not_fatal(self, capsys, monkeypatch):
        _catalog_env(monkeypatch)
        with patch.object(N2yoAdapter, '_fetch_json', side_effect=CatalogError("down")):
            main(["--ticks", "3", "--fetch-nearby"])
        captured = capsys.readouterr()
        assert "Ticks: 3" in captured.out
        assert "Catalog fetch failed: down" in captured.err
