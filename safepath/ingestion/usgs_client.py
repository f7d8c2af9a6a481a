"""
USGS Earthquake Client for SafePath

Queries the USGS FDSN event service for recent earthquakes around a point.

Response (GeoJSON):
    features[].geometry.coordinates = [lon, lat, depth]
    features[].properties.{mag, title, time (epoch ms)}

API Documentation: https://earthquake.usgs.gov/fdsnws/event/1/
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, List, Optional

import httpx

from safepath.core.config import settings
from safepath.core.geo_utils import Coordinate
from safepath.core.models import SeismicEvent
from safepath.ingestion.base import ProviderClient

logger = logging.getLogger(__name__)

# FDSN rejects maxradiuskm beyond half the circumference
MAX_RADIUS_KM = 20001.6


class USGSClient(ProviderClient):
    """
    Seismic feed: earthquakes within the search radius.

    Usage:
        async with httpx.AsyncClient() as http:
            events = await USGSClient(http).fetch(Coordinate(37.77, -122.42), 25000)
    """

    name = "usgs"

    def __init__(
        self,
        http: httpx.AsyncClient,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
        min_magnitude: Optional[float] = None,
    ):
        super().__init__(http, timeout)
        self.base_url = base_url or settings.usgs_url
        self.min_magnitude = min_magnitude if min_magnitude is not None else settings.usgs_min_magnitude

    async def fetch(self, center: Coordinate, radius_m: float) -> List[SeismicEvent]:
        params = {
            "format": "geojson",
            "latitude": round(center.latitude, 5),
            "longitude": round(center.longitude, 5),
            "maxradiuskm": round(min(radius_m / 1000, MAX_RADIUS_KM), 3),
            "minmagnitude": self.min_magnitude,
            "orderby": "time",
        }

        logger.info(f"Fetching earthquakes near {center.latitude:.4f},{center.longitude:.4f} "
                    f"within {params['maxradiuskm']} km")
        payload = await self._get_json(self.base_url, params=params)
        events = self.parse(payload, center, radius_m)
        logger.info(f"Retrieved {len(events)} earthquakes")

        return events

    def parse(self, payload: Any, center: Coordinate, radius_m: float) -> List[SeismicEvent]:
        """Parse GeoJSON features, dropping any without geometry or core properties."""
        features = self._require_list(self._require_dict(payload), "features")

        events = []
        for feature in features:
            try:
                geometry = feature["geometry"]
                properties = feature["properties"]
                epicenter = Coordinate.from_lonlat(geometry["coordinates"])
                magnitude = float(properties["mag"])
                title = properties["title"]
                epoch_ms = float(properties["time"])
                time = datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc)
            except (KeyError, TypeError, ValueError, OverflowError, OSError) as e:
                self._skip(f"missing field {e}", feature)
                continue

            if not title:
                self._skip("empty title", feature)
                continue
            if not all(math.isfinite(v) for v in (magnitude, epicenter.latitude, epicenter.longitude)):
                self._skip("non-finite magnitude or position", feature)
                continue

            events.append(SeismicEvent(
                event_id=str(feature.get("id") or f"{epicenter.latitude:.4f},{epicenter.longitude:.4f}@{int(epoch_ms)}"),
                magnitude=magnitude,
                epicenter=epicenter,
                time=time,
                title=str(title),
            ))

        return events
