# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Tracked objects reported by a nearby-object catalog.

Converts catalog JSON records (N2YO "above" format) into immutable
domain objects. No external dependencies — only stdlib.
"""
import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TrackedObject:
    """An object currently above an observer, with its sub-point."""
    id: str
    name: str
    designator: str
    launch_date: str
    lat: float
    lon: float
    alt: float


def _require_number(record: dict[str, Any], key: str) -> float:
    if key not in record:
        raise KeyError(f"Catalog record missing {key!r}")
    value = record[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Catalog field {key!r} is not a number: {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"Catalog field {key!r} is not finite: {value!r}")
    return value


def _text(record: dict[str, Any], key: str) -> str:
    if key not in record:
        raise KeyError(f"Catalog record missing {key!r}")
    value = record[key]
    return "" if value is None else str(value)


def parse_tracked_object(record: dict[str, Any]) -> TrackedObject:
    """
    Parse one catalog record.

    Args:
        record: Dict with satid, satname, intDesignator, launchDate,
            satlat, satlng, satalt.

    Returns:
        TrackedObject domain object.

    Raises:
        KeyError: If a required field is missing.
        ValueError: If a position field is not a finite number.
    """
    return TrackedObject(
        id=_text(record, "satid"),
        name=_text(record, "satname"),
        designator=_text(record, "intDesignator"),
        launch_date=_text(record, "launchDate"),
        lat=_require_number(record, "satlat"),
        lon=_require_number(record, "satlng"),
        alt=_require_number(record, "satalt"),
    )


def parse_tracked_objects(records: list[dict[str, Any]]) -> tuple[TrackedObject, ...]:
    """Parse a whole response; any bad record fails the whole batch."""
    return tuple(parse_tracked_object(record) for record in records)
