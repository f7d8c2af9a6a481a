"""
Pytest configuration and fixtures
"""
import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from safepath.aggregation.orchestrator import EmergencyAggregator, ProviderFactory
from safepath.aggregation.synthetic import SyntheticGenerator
from safepath.core.constants import AUTHORITY_GOOGLE, AUTHORITY_USGS
from safepath.core.geo_utils import Coordinate
from safepath.core.models import EvacuationRoute, HazardCategory, SafeZone
from safepath.ingestion.base import ProviderClient

SAN_FRANCISCO = Coordinate(latitude=37.7749, longitude=-122.4194)
FIXED_TIME = datetime(2026, 1, 27, 14, 30, tzinfo=timezone.utc)


class StubProvider(ProviderClient):
    """Provider returning canned features, an error, or nothing at all after a delay."""

    def __init__(self, name, features=(), error_kind=None, raises=None, delay=0.0, timeout=5.0):
        super().__init__(http=None, timeout=timeout)
        self.name = name
        self.features = list(features)
        self.error_kind = error_kind
        self.raises = raises
        self.delay = delay
        self.calls = 0
        self.cancelled = False

    async def fetch(self, center, radius_m):
        self.calls += 1
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise

        if self.raises is not None:
            raise self.raises
        if self.error_kind is not None:
            raise self._error(self.error_kind, "stubbed failure")
        return list(self.features)


class StubFactory(ProviderFactory):
    """Serves fixed provider lists per tier."""

    def __init__(self, hazards=(), weather=(), directions=(), roads=(), facilities=()):
        self.hazards = list(hazards)
        self.weather = list(weather)
        self.directions = list(directions)
        self.roads = list(roads)
        self.facilities = list(facilities)

    def all_providers(self):
        return self.hazards + self.weather + self.directions + self.roads + self.facilities

    def hazard_providers(self, http):
        return self.hazards

    def weather_providers(self, http):
        return self.weather

    def directions_providers(self, http, origin, radius_m):
        return self.directions

    def road_providers(self, http):
        return self.roads

    def facility_providers(self, http):
        return self.facilities


def _offline_transport(request: httpx.Request) -> httpx.Response:
    return httpx.Response(503)


@pytest.fixture
def origin():
    """San Francisco city hall area."""
    return SAN_FRANCISCO


@pytest.fixture
def stub_provider():
    """The StubProvider class."""
    return StubProvider


@pytest.fixture
def stub_factory():
    """The StubFactory class."""
    return StubFactory


@pytest.fixture
def make_aggregator():
    """Build an aggregator over stubbed tiers with a seeded generator."""
    def make(factory, seed=7, max_routes=None):
        return EmergencyAggregator(
            factory=factory,
            generator=SyntheticGenerator(seed=seed),
            http_client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(_offline_transport)),
            max_routes=max_routes,
        )
    return make


@pytest.fixture
def mock_http():
    """Async HTTP client answering through a handler function."""
    def make(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return make


@pytest.fixture
def make_route():
    """Route between two points with sensible defaults."""
    def make(start, end, authority=AUTHORITY_GOOGLE, safety_level=3, route_id="r", name="Route"):
        return EvacuationRoute(
            route_id=route_id,
            name=name,
            description="test route",
            waypoints=[start, end],
            category=HazardCategory.GENERAL,
            estimated_travel_time=600.0,
            last_updated=FIXED_TIME,
            safety_level=safety_level,
            authority=authority,
            source="test",
        )
    return make


@pytest.fixture
def official_authority():
    return AUTHORITY_USGS


@pytest.fixture
def make_zone():
    """Safe zone at a point with sensible defaults."""
    def make(center, name="Zone", capacity=100, occupancy=10):
        return SafeZone(
            zone_id=name.lower(),
            name=name,
            description="test zone",
            center=center,
            radius_m=100.0,
            capacity=capacity,
            current_occupancy=occupancy,
            resources=["Water"],
            last_updated=FIXED_TIME,
            safety_level=4,
        )
    return make


@pytest.fixture
def usgs_payload():
    """USGS GeoJSON with one usable quake and one without a magnitude."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "id": "nc75095651",
                "properties": {
                    "mag": 6.0,
                    "title": "M 6.0 - 5km SW of Daly City, CA",
                    "time": 1769524200000,
                },
                "geometry": {"type": "Point", "coordinates": [-122.4194, 37.7749, 8.2]},
            },
            {
                "type": "Feature",
                "id": "nc75095652",
                "properties": {"mag": None, "title": "M ? - unknown", "time": 1769524200000},
                "geometry": {"type": "Point", "coordinates": [-122.3, 37.8, 5.0]},
            },
        ],
    }
