"""
SafePath - OpenStreetMap Client
Major roads around a point via the Overpass API, used as evacuation corridors.
"""

import logging
import math
from typing import Any, Dict, List, Optional

import httpx

from safepath.core.config import settings
from safepath.core.constants import EVACUATION_HIGHWAYS
from safepath.core.geo_utils import BoundingBox, Coordinate, bounding_box
from safepath.core.models import RoadWay
from safepath.ingestion.base import ProviderClient

logger = logging.getLogger(__name__)


class OverpassClient(ProviderClient):
    """
    Road-network feed.

    The query asks for the ways and then recurses down to their nodes, so one
    response carries both; ways are resolved against the node table here.
    """

    name = "overpass"

    def __init__(
        self,
        http: httpx.AsyncClient,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
        max_bbox_degrees: Optional[float] = None,
        highway_types: Optional[List[str]] = None,
    ):
        super().__init__(http, timeout)
        self.base_url = base_url or settings.overpass_url
        self.max_bbox_degrees = max_bbox_degrees or settings.overpass_max_bbox_degrees
        self.highway_types = highway_types or EVACUATION_HIGHWAYS

    def build_query(self, bbox: BoundingBox) -> str:
        highway_filter = "|".join(self.highway_types)
        return f"""
        [out:json][timeout:15];
        (
          way["highway"~"{highway_filter}"]({bbox.to_overpass()});
        );
        (._;>;);
        out body;
        """

    async def fetch(self, center: Coordinate, radius_m: float) -> List[RoadWay]:
        bbox = bounding_box(center, radius_m, self.max_bbox_degrees)
        payload = await self._post_json(self.base_url, data={"data": self.build_query(bbox)})
        roads = self.parse(payload, center, radius_m)
        logger.info(f"Overpass returned {len(roads)} major roads in {bbox.to_overpass()}")
        return roads

    def parse(self, payload: Any, center: Coordinate, radius_m: float) -> List[RoadWay]:
        elements = self._require_list(self._require_dict(payload), "elements")

        # Parse nodes first, ways reference them by id
        nodes: Dict[int, Coordinate] = {}
        for element in elements:
            if not isinstance(element, dict) or element.get("type") != "node":
                continue
            try:
                node_id = element["id"]
                lat, lon = float(element["lat"]), float(element["lon"])
            except (KeyError, TypeError, ValueError) as e:
                self._skip(f"bad node {e}", element)
                continue
            if not (math.isfinite(lat) and math.isfinite(lon)):
                self._skip("non-finite node position", element)
                continue
            nodes[node_id] = Coordinate(latitude=lat, longitude=lon)

        roads = []
        for element in elements:
            if not isinstance(element, dict) or element.get("type") != "way":
                continue

            tags = element.get("tags") or {}
            node_ids = element.get("nodes") or []
            if not isinstance(tags, dict) or not isinstance(node_ids, list):
                self._skip("malformed tags or node list", element)
                continue

            highway = tags.get("highway")
            if "id" not in element or not highway:
                self._skip("way without id or highway tag", element)
                continue

            if any(nid not in nodes for nid in node_ids):
                self._skip("way references missing nodes", element)
                continue
            if len(node_ids) < 2:
                self._skip("way has fewer than 2 nodes", element)
                continue

            roads.append(RoadWay(
                osm_id=element["id"],
                highway=highway,
                waypoints=tuple(nodes[nid] for nid in node_ids),
                name=tags.get("name"),
                ref=tags.get("ref"),
            ))

        return roads
