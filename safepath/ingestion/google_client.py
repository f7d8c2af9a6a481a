"""
SafePath - Google Maps Platform Clients
Places Nearby Search (emergency facilities) and Directions (driving routes).

Both APIs answer HTTP 200 with a `status` field; OK and ZERO_RESULTS are
success, anything else is reported as a bad status with `error_message`.

Documentation:
    https://developers.google.com/maps/documentation/places/web-service/search-nearby
    https://developers.google.com/maps/documentation/directions/start
"""

import logging
import math
from typing import Any, Dict, List, Optional

import httpx

from safepath.core.config import settings
from safepath.core.exceptions import ProviderErrorKind
from safepath.core.geo_utils import Coordinate, decode_polyline
from safepath.core.models import DirectionsRoute, FacilityPlace
from safepath.ingestion.base import ProviderClient

logger = logging.getLogger(__name__)

SUCCESS_STATUSES = ("OK", "ZERO_RESULTS")


class GoogleMapsClient(ProviderClient):
    """Common key handling and status checking."""

    def __init__(self, http: httpx.AsyncClient, api_key: str, timeout: Optional[float] = None):
        super().__init__(http, timeout)
        self.api_key = api_key

    def _check_status(self, body: Dict[str, Any], *, required: bool) -> str:
        status = body.get("status")
        if status is None:
            if required:
                raise self._error(ProviderErrorKind.UNPARSEABLE, "response has no status")
            return "OK"
        if status not in SUCCESS_STATUSES:
            message = body.get("error_message") or "Unknown error"
            raise self._error(ProviderErrorKind.BAD_STATUS, f"{status} - {message}")
        return status


class PlacesClient(GoogleMapsClient):
    """Places search for one facility type (hospital, fire_station, ...)."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        facility_type: str,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
        max_radius_m: Optional[float] = None,
    ):
        super().__init__(http, api_key, timeout)
        self.facility_type = facility_type
        self.name = f"places:{facility_type}"
        self.base_url = base_url or settings.places_url
        self.max_radius_m = max_radius_m or settings.places_max_radius_m

    async def fetch(self, center: Coordinate, radius_m: float) -> List[FacilityPlace]:
        params = {
            "location": f"{center.latitude},{center.longitude}",
            "radius": int(min(radius_m, self.max_radius_m)),
            "type": self.facility_type,
            "key": self.api_key,
        }
        payload = await self._get_json(self.base_url, params=params)
        places = self.parse(payload, center, radius_m)
        logger.info(f"Places returned {len(places)} {self.facility_type} results")
        return places

    def parse(self, payload: Any, center: Coordinate, radius_m: float) -> List[FacilityPlace]:
        body = self._require_dict(payload)
        self._check_status(body, required=True)

        places = []
        for result in self._require_list(body, "results"):
            try:
                name = result["name"]
                location = result["geometry"]["location"]
                point = Coordinate(latitude=float(location["lat"]), longitude=float(location["lng"]))
            except (KeyError, TypeError, ValueError) as e:
                self._skip(f"missing field {e}", result)
                continue

            if not (math.isfinite(point.latitude) and math.isfinite(point.longitude)):
                self._skip("non-finite location", result)
                continue
            if not name:
                self._skip("empty name", result)
                continue

            places.append(FacilityPlace(
                place_id=str(result.get("place_id") or f"{self.facility_type}:{point.latitude:.5f},{point.longitude:.5f}"),
                name=str(name),
                location=point,
                facility_type=self.facility_type,
                vicinity=result.get("vicinity"),
            ))

        return places


class DirectionsClient(GoogleMapsClient):
    """Driving directions from the search center to one fixed destination."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        destination: Coordinate,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
        label: Optional[str] = None,
    ):
        super().__init__(http, api_key, timeout)
        self.destination = destination
        self.name = f"directions:{label}" if label else "directions"
        self.base_url = base_url or settings.directions_url

    async def fetch(self, center: Coordinate, radius_m: float) -> List[DirectionsRoute]:
        params = {
            "origin": f"{center.latitude},{center.longitude}",
            "destination": f"{self.destination.latitude},{self.destination.longitude}",
            "mode": "driving",
            "alternatives": "true",
            "key": self.api_key,
        }
        payload = await self._get_json(self.base_url, params=params)
        return self.parse(payload, center, radius_m)

    def parse(self, payload: Any, center: Coordinate, radius_m: float) -> List[DirectionsRoute]:
        body = self._require_dict(payload)
        self._check_status(body, required=False)

        routes = []
        for route in self._require_list(body, "routes"):
            try:
                leg = route["legs"][0]
                duration = float(leg["duration"]["value"])
                distance = float(leg["distance"]["value"])
                points = route["overview_polyline"]["points"]
            except (KeyError, IndexError, TypeError, ValueError) as e:
                self._skip(f"missing field {e}", route)
                continue

            waypoints = decode_polyline(points) if isinstance(points, str) else []
            if len(waypoints) < 2:
                self._skip("polyline has fewer than 2 points", route)
                continue
            if duration <= 0:
                self._skip("non-positive duration", route)
                continue

            routes.append(DirectionsRoute(
                waypoints=tuple(waypoints),
                duration_seconds=duration,
                distance_m=distance,
            ))

        return routes
