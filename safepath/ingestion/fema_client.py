"""
SafePath - OpenFEMA Client
Recent federal disaster declarations.

Response:
    {metadata: {count}, DisasterDeclarationsSummaries: [{disasterNumber, declarationTitle, incidentType}]}

API Documentation: https://www.fema.gov/about/openfema/api
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx

from safepath.core.config import settings
from safepath.core.geo_utils import Coordinate
from safepath.core.models import DisasterDeclaration
from safepath.ingestion.base import ProviderClient

logger = logging.getLogger(__name__)


class FEMAClient(ProviderClient):
    """
    Disaster-declarations feed.

    Declarations carry a state but no coordinates. The query is scoped to
    the configured state and summaries from other states are dropped; the
    provider factory leaves this client out when no state is configured.
    """

    name = "fema"

    def __init__(
        self,
        http: httpx.AsyncClient,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
        lookback_days: Optional[int] = None,
        state: Optional[str] = None,
        page_size: Optional[int] = None,
    ):
        super().__init__(http, timeout)
        self.base_url = base_url or settings.fema_url
        self.lookback_days = lookback_days if lookback_days is not None else settings.fema_lookback_days
        self.state = state if state is not None else settings.fema_state
        self.page_size = page_size or settings.fema_page_size

    def build_params(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        since = (now - timedelta(days=self.lookback_days)).strftime("%Y-%m-%d")

        clauses = [f"declarationDate ge '{since}'"]
        if self.state:
            clauses.append(f"state eq '{self.state.upper()}'")

        return {
            "$filter": " and ".join(clauses),
            "$orderby": "declarationDate desc",
            "$top": self.page_size,
            "$inlinecount": "allpages",
        }

    async def fetch(self, center: Coordinate, radius_m: float) -> List[DisasterDeclaration]:
        params = self.build_params()
        payload = await self._get_json(self.base_url, params=params)
        declarations = self.parse(payload, center, radius_m)
        logger.info(f"FEMA returned {len(declarations)} declarations ({params['$filter']})")
        return declarations

    def parse(self, payload: Any, center: Coordinate, radius_m: float) -> List[DisasterDeclaration]:
        body = self._require_dict(payload)

        metadata = body.get("metadata") or {}
        count = metadata.get("count") if isinstance(metadata, dict) else None
        if count is not None and count == 0:
            return []

        declarations = []
        seen = set()
        for item in self._require_list(body, "DisasterDeclarationsSummaries"):
            if not isinstance(item, dict):
                self._skip("not an object", item)
                continue

            number = item.get("disasterNumber")
            title = item.get("declarationTitle")
            incident = item.get("incidentType")
            if number is None or not title or not incident:
                self._skip("missing disasterNumber/declarationTitle/incidentType", item)
                continue

            area = item.get("state")
            if self.state and str(area or "").upper() != self.state.upper():
                self._skip(f"outside {self.state.upper()}", item)
                continue

            # Summaries repeat per designated area; one declaration is enough
            number = str(number)
            if number in seen:
                continue
            seen.add(number)

            declarations.append(DisasterDeclaration(
                disaster_number=number,
                title=str(title),
                incident_type=str(incident),
                state=str(area) if area else None,
            ))

        return declarations
