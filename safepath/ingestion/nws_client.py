"""
SafePath - National Weather Service Alerts Client
Active weather alerts for a point (free, no authentication required).

API Documentation: https://www.weather.gov/documentation/services-web-api
"""

import logging
from typing import Any, List, Optional

import httpx

from safepath.core.config import settings
from safepath.core.geo_utils import Coordinate
from safepath.core.models import WeatherAlert
from safepath.ingestion.base import ProviderClient

logger = logging.getLogger(__name__)


class NWSAlertsClient(ProviderClient):
    """Weather-alerts feed. The radius is ignored; NWS answers per point."""

    name = "nws"

    def __init__(self, http: httpx.AsyncClient, timeout: Optional[float] = None,
                 base_url: Optional[str] = None):
        super().__init__(http, timeout)
        self.base_url = base_url or settings.nws_alerts_url

    async def fetch(self, center: Coordinate, radius_m: float) -> List[WeatherAlert]:
        params = {"point": f"{center.latitude:.4f},{center.longitude:.4f}"}

        payload = await self._get_json(
            self.base_url,
            params=params,
            headers={"Accept": "application/geo+json"},
        )
        alerts = self.parse(payload, center, radius_m)
        logger.info(f"NWS reported {len(alerts)} active alerts for {params['point']}")

        return alerts

    def parse(self, payload: Any, center: Coordinate, radius_m: float) -> List[WeatherAlert]:
        features = self._require_list(self._require_dict(payload), "features")

        alerts = []
        for feature in features:
            properties = feature.get("properties") if isinstance(feature, dict) else None
            if not isinstance(properties, dict):
                self._skip("no properties", feature)
                continue

            required = [properties.get(k) for k in ("id", "event", "headline", "severity")]
            if not all(isinstance(v, str) and v for v in required):
                self._skip("missing id/event/headline/severity", feature)
                continue

            alert_id, event, headline, severity = required
            alerts.append(WeatherAlert(
                alert_id=alert_id,
                event=event,
                headline=headline,
                severity=severity,
                description=properties.get("description") or "",
            ))

        return alerts
