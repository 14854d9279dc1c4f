# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
N2YO adapter: fetches the objects currently above an observer.

External dependencies (urllib, json) are confined to this layer.

Data source:
    N2YO REST API "above" — https://www.n2yo.com/api/#above
    /satellite/above/{lat}/{lng}/{alt}/{radius}/{category}/&apiKey={key}

Every failure (transport, HTTP status, JSON, or a bad record) surfaces as
a single CatalogError. A partial list is never returned. There is no retry.
"""
import http.client
import json
import logging
import urllib.error
import urllib.request
from typing import Any
from urllib.parse import quote

from orbitview.domain.errors import CatalogError
from orbitview.domain.tracked_object import TrackedObject, parse_tracked_objects
from orbitview.ports.catalog import CatalogSource


_log = logging.getLogger(__name__)

BASE_URL = "https://api.n2yo.com/rest/v1/satellite"

# Search radius (degrees) and category (32 = Amateur radio) for the nearby-objects view.
DEFAULT_SEARCH_RADIUS_DEG = 70
DEFAULT_CATEGORY = 32


class N2yoAdapter(CatalogSource):
    """
    Fetches tracked objects above an observer from the N2YO API.

    Args:
        api_key: N2YO API key.
        base_url: API root.
        timeout: HTTP request timeout in seconds.
        observer_alt_m: Observer altitude above sea level in metres.
        search_radius_deg: Search radius around the zenith (0-90).
        category: N2YO category id (0 = all).
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = BASE_URL,
        timeout: int = 30,
        observer_alt_m: float = 0,
        search_radius_deg: int = DEFAULT_SEARCH_RADIUS_DEG,
        category: int = DEFAULT_CATEGORY,
    ):
        if not api_key:
            raise ValueError("N2YO API key must not be empty")
        if not 0 <= search_radius_deg <= 90:
            raise ValueError(f"search_radius_deg must be in [0, 90], got {search_radius_deg}")
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._observer_alt_m = observer_alt_m
        self._search_radius_deg = search_radius_deg
        self._category = category

    def above_url(self, lat: float, lon: float) -> str:
        return (
            f"{self._base_url}/above/{lat}/{lon}/{self._observer_alt_m:g}/"
            f"{self._search_radius_deg}/{self._category}/&apiKey={quote(self._api_key)}"
        )

    def fetch_nearby(self, lat: float, lon: float) -> list[TrackedObject]:
        """
        Fetch tracked objects above (lat, lon).

        Raises:
            ValueError: If lat/lon are out of range.
            CatalogError: On any fetch or parse failure.
        """
        if not -90.0 <= lat <= 90.0:
            raise ValueError(f"Latitude must be in [-90, 90], got {lat}")
        if not -180.0 <= lon <= 180.0:
            raise ValueError(f"Longitude must be in [-180, 180], got {lon}")

        payload = self._fetch_json(self.above_url(lat, lon))
        if "error" in payload:
            raise CatalogError(f"N2YO API error: {payload['error']}")
        records = payload.get("above")
        if records is None:
            # N2YO omits the list when nothing is above the observer.
            count = payload.get("info", {}).get("satcount", 0)
            if count:
                raise CatalogError(f"N2YO response lists {count} objects but no 'above' array")
            return []
        if not isinstance(records, list):
            raise CatalogError("N2YO 'above' field is not a list")

        try:
            objects = parse_tracked_objects(records)
        except (KeyError, ValueError, TypeError) as e:
            raise CatalogError(f"Malformed N2YO record: {e}") from e
        _log.info("Fetched %d tracked objects above (%.4f, %.4f)", len(objects), lat, lon)
        return list(objects)

    def _fetch_json(self, url: str) -> dict[str, Any]:
        """Fetch JSON data from the N2YO API."""
        req = urllib.request.Request(url, headers={"User-Agent": "orbitview/0.1"})
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as response:
                text = response.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            raise CatalogError(f"N2YO API error {e.code}: {e.reason}") from e
        except urllib.error.URLError as e:
            raise CatalogError(f"N2YO connection failed: {e.reason}") from e
        except TimeoutError as e:
            raise CatalogError("N2YO request timed out") from e
        except (OSError, http.client.HTTPException) as e:
            raise CatalogError(f"N2YO response could not be read: {e!r}") from e
        except UnicodeDecodeError as e:
            raise CatalogError(f"N2YO response is not UTF-8: {e}") from e
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise CatalogError(f"N2YO returned invalid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise CatalogError("N2YO returned a non-object JSON document")
        return payload
