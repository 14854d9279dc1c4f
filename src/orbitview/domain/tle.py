# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Two-line element (TLE) parsing.

Converts a fixed-width two-line element record into an immutable
OrbitalElements value. No external dependencies — only stdlib.

TLE format: https://celestrak.org/NORAD/documentation/tle-fmt.php
Lines 1 and 2 are exactly 69 characters with a modulo-10 checksum in the
last column. Every parse failure raises TleParseError naming the field.
"""
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from orbitview.domain.errors import InvalidElementsError, TleParseError


TLE_LINE_LENGTH = 69

# (field name, start, end): zero-based, end-exclusive column slices
_LINE1_FIELDS = {
    "catalog_number": (2, 7),
    "classification": (7, 8),
    "international_designator": (9, 17),
    "epoch_year": (18, 20),
    "epoch_day": (20, 32),
    "mean_motion_dot": (33, 43),
    "mean_motion_ddot": (44, 52),
    "bstar_drag": (53, 61),
    "ephemeris_type": (62, 63),
    "element_set_number": (64, 68),
}

_LINE2_FIELDS = {
    "catalog_number": (2, 7),
    "inclination": (8, 16),
    "raan": (17, 25),
    "eccentricity": (26, 33),
    "arg_perigee": (34, 42),
    "mean_anomaly": (43, 51),
    "mean_motion": (52, 63),
    "revolution_number": (63, 68),
}

_EXPONENT_FIELD = re.compile(r"^([+-]?)(\d{1,5})([+-]\d)$")


@dataclass(frozen=True)
class OrbitalElements:
    """Mean orbital elements of one object at its epoch."""
    catalog_number: int
    epoch: datetime
    inclination_rad: float
    raan_rad: float
    eccentricity: float
    arg_perigee_rad: float
    mean_anomaly_rad: float
    mean_motion_rev_per_day: float
    bstar_drag: float = 0.0
    mean_motion_dot: float = 0.0       # rev/day², first derivative / 2
    mean_motion_ddot: float = 0.0      # rev/day³, second derivative / 6
    classification: str = "U"
    international_designator: str = ""
    ephemeris_type: int = 0
    element_set_number: int = 0
    revolution_number: int = 0
    name: str = ""
    source_lines: tuple[str, str] | None = field(default=None, compare=False)

    def __post_init__(self):
        validate_elements(self)


def validate_elements(elements: OrbitalElements) -> None:
    """
    Check the domain invariants of an element set.

    Raises:
        InvalidElementsError: naming the first field out of range.
    """
    for name in (
        "inclination_rad", "raan_rad", "eccentricity", "arg_perigee_rad",
        "mean_anomaly_rad", "mean_motion_rev_per_day", "bstar_drag",
        "mean_motion_dot", "mean_motion_ddot",
    ):
        value = getattr(elements, name)
        if not isinstance(value, (int, float)) or not math.isfinite(value):
            raise InvalidElementsError(name, f"must be a finite number, got {value!r}")

    if not 0.0 <= elements.eccentricity < 1.0:
        raise InvalidElementsError(
            "eccentricity", f"must be in [0, 1), got {elements.eccentricity}"
        )
    if not 0.0 <= elements.inclination_rad <= math.pi:
        raise InvalidElementsError(
            "inclination_rad", f"must be in [0, π], got {elements.inclination_rad}"
        )
    if elements.mean_motion_rev_per_day <= 0.0:
        raise InvalidElementsError(
            "mean_motion_rev_per_day",
            f"must be positive, got {elements.mean_motion_rev_per_day}",
        )
    if elements.epoch.tzinfo is None:
        raise InvalidElementsError("epoch", "must be timezone-aware (UTC)")


def tle_checksum(line: str) -> int:
    """Compute TLE checksum: sum digits ('-' counts as 1), mod 10."""
    total = 0
    for ch in line[:68]:
        if ch.isdigit():
            total += int(ch)
        elif ch == "-":
            total += 1
    return total % 10


def _slice(line: str, fields: dict[str, tuple[int, int]], name: str) -> str:
    start, end = fields[name]
    return line[start:end]


def _parse_float(text: str, field_name: str, line_number: int) -> float:
    stripped = text.strip()
    if not stripped:
        raise TleParseError(field_name, "field is blank", line_number)
    try:
        value = float(stripped)
    except ValueError:
        raise TleParseError(
            field_name, f"not a number: {stripped!r}", line_number
        ) from None
    if not math.isfinite(value):
        raise TleParseError(field_name, f"not finite: {stripped!r}", line_number)
    return value


def _parse_int(text: str, field_name: str, line_number: int, default: int | None = None) -> int:
    stripped = text.strip()
    if not stripped:
        if default is not None:
            return default
        raise TleParseError(field_name, "field is blank", line_number)
    try:
        return int(stripped)
    except ValueError:
        raise TleParseError(
            field_name, f"not an integer: {stripped!r}", line_number
        ) from None


def _parse_implied_decimal(text: str, field_name: str, line_number: int) -> float:
    """Parse an implied-decimal exponent field such as ' 12345-4' → 0.12345e-4."""
    stripped = text.strip()
    if not stripped:
        return 0.0
    match = _EXPONENT_FIELD.match(stripped)
    if match is None:
        raise TleParseError(
            field_name, f"malformed exponent field: {stripped!r}", line_number
        )
    sign, digits, exponent = match.groups()
    value = float(f"0.{digits}") * 10.0 ** int(exponent)
    return -value if sign == "-" else value


def _parse_epoch(year_text: str, day_text: str) -> datetime:
    two_digit_year = _parse_int(year_text, "epoch_year", 1)
    day_of_year = _parse_float(day_text, "epoch_day", 1)
    if not 1.0 <= day_of_year < 367.0:
        raise TleParseError("epoch_day", f"day of year out of range: {day_of_year}", 1)
    # Two-digit years 57-99 are 1957-1999; 00-56 are 2000-2056.
    year = 1900 + two_digit_year if two_digit_year >= 57 else 2000 + two_digit_year
    start = datetime(year, 1, 1, tzinfo=timezone.utc)
    return start + timedelta(days=day_of_year - 1.0)


def _check_line(line: str, line_number: int, verify_checksum: bool) -> str:
    line = line.rstrip("\r\n")
    if len(line) != TLE_LINE_LENGTH:
        raise TleParseError(
            "line_length",
            f"expected {TLE_LINE_LENGTH} characters, got {len(line)}",
            line_number,
        )
    if line[0] != str(line_number):
        raise TleParseError(
            "line_number", f"expected '{line_number}', got {line[0]!r}", line_number
        )
    if verify_checksum:
        expected = _parse_int(line[68], "checksum", line_number)
        actual = tle_checksum(line)
        if expected != actual:
            raise TleParseError(
                "checksum", f"expected {expected}, computed {actual}", line_number
            )
    return line


def parse_tle(
    line1: str,
    line2: str,
    name: str = "",
    verify_checksum: bool = True,
) -> OrbitalElements:
    """
    Parse a two-line element record into OrbitalElements.

    Args:
        line1: First element line (69 columns; a trailing newline is ignored).
        line2: Second element line.
        name: Optional object name (from a preceding title line).
        verify_checksum: Reject lines whose modulo-10 checksum is wrong.

    Returns:
        Immutable OrbitalElements with angles in radians.

    Raises:
        TleParseError: On wrong line length, line number, catalog number
            mismatch, checksum, or any non-numeric field. The error's
            ``field`` attribute names the offending field.
        InvalidElementsError: If parsed values violate element invariants.
    """
    line1 = _check_line(line1, 1, verify_checksum)
    line2 = _check_line(line2, 2, verify_checksum)

    catalog_1 = _parse_int(_slice(line1, _LINE1_FIELDS, "catalog_number"), "catalog_number", 1)
    catalog_2 = _parse_int(_slice(line2, _LINE2_FIELDS, "catalog_number"), "catalog_number", 2)
    if catalog_1 != catalog_2:
        raise TleParseError(
            "catalog_number", f"lines disagree: {catalog_1} vs {catalog_2}", 2
        )

    epoch = _parse_epoch(
        _slice(line1, _LINE1_FIELDS, "epoch_year"),
        _slice(line1, _LINE1_FIELDS, "epoch_day"),
    )
    mean_motion_dot = _parse_float(
        _slice(line1, _LINE1_FIELDS, "mean_motion_dot"), "mean_motion_dot", 1
    )
    mean_motion_ddot = _parse_implied_decimal(
        _slice(line1, _LINE1_FIELDS, "mean_motion_ddot"), "mean_motion_ddot", 1
    )
    bstar = _parse_implied_decimal(
        _slice(line1, _LINE1_FIELDS, "bstar_drag"), "bstar_drag", 1
    )
    ephemeris_type = _parse_int(
        _slice(line1, _LINE1_FIELDS, "ephemeris_type"), "ephemeris_type", 1, default=0
    )
    element_set_number = _parse_int(
        _slice(line1, _LINE1_FIELDS, "element_set_number"), "element_set_number", 1, default=0
    )

    inclination_deg = _parse_float(_slice(line2, _LINE2_FIELDS, "inclination"), "inclination", 2)
    raan_deg = _parse_float(_slice(line2, _LINE2_FIELDS, "raan"), "raan", 2)
    ecc_text = _slice(line2, _LINE2_FIELDS, "eccentricity").strip()
    if not ecc_text.isdigit():
        raise TleParseError("eccentricity", f"expected digits, got {ecc_text!r}", 2)
    eccentricity = float(f"0.{ecc_text}")
    arg_perigee_deg = _parse_float(_slice(line2, _LINE2_FIELDS, "arg_perigee"), "arg_perigee", 2)
    mean_anomaly_deg = _parse_float(_slice(line2, _LINE2_FIELDS, "mean_anomaly"), "mean_anomaly", 2)
    mean_motion = _parse_float(_slice(line2, _LINE2_FIELDS, "mean_motion"), "mean_motion", 2)
    revolution_number = _parse_int(
        _slice(line2, _LINE2_FIELDS, "revolution_number"), "revolution_number", 2, default=0
    )

    if not 0.0 <= inclination_deg <= 180.0:
        raise TleParseError("inclination", f"out of range [0, 180]: {inclination_deg}", 2)
    if mean_motion <= 0.0:
        raise TleParseError("mean_motion", f"must be positive, got {mean_motion}", 2)

    return OrbitalElements(
        catalog_number=catalog_1,
        epoch=epoch,
        inclination_rad=math.radians(inclination_deg),
        raan_rad=math.radians(raan_deg),
        eccentricity=eccentricity,
        arg_perigee_rad=math.radians(arg_perigee_deg),
        mean_anomaly_rad=math.radians(mean_anomaly_deg),
        mean_motion_rev_per_day=mean_motion,
        bstar_drag=bstar,
        mean_motion_dot=mean_motion_dot,
        mean_motion_ddot=mean_motion_ddot,
        classification=_slice(line1, _LINE1_FIELDS, "classification").strip() or "U",
        international_designator=_slice(line1, _LINE1_FIELDS, "international_designator").strip(),
        ephemeris_type=ephemeris_type,
        element_set_number=element_set_number,
        revolution_number=revolution_number,
        name=name.strip(),
        source_lines=(line1, line2),
    )


def parse_tle_text(text: str, verify_checksum: bool = True) -> OrbitalElements:
    """
    Parse a TLE record given as text: two element lines, optionally
    preceded by a title line. Blank lines are ignored.

    Raises:
        TleParseError: If the text does not hold 2 or 3 lines.
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) == 2:
        return parse_tle(lines[0], lines[1], verify_checksum=verify_checksum)
    if len(lines) == 3:
        name = lines[0]
        if name.startswith("0 "):
            name = name[2:]
        return parse_tle(lines[1], lines[2], name=name, verify_checksum=verify_checksum)
    raise TleParseError("record", f"expected 2 or 3 lines, got {len(lines)}")


# Built-in object: ISS element set, epoch 2020-07-12.
ISS_TLE = (
    "ISS (ZARYA)",
    "1 25544U 98067A   20194.88612269 -.00002218  00000-0 -31515-4 0  9992",
    "2 25544  51.6461 221.2784 0001413  89.1723 280.4612 15.49507896236008",
)
