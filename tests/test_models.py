"""
Tests for domain models
"""
import pytest

from safepath.core.constants import AUTHORITY_GENERATED, AUTHORITY_GOOGLE, AUTHORITY_OSM, AUTHORITY_USGS
from safepath.core.geo_utils import Coordinate, destination_point
from safepath.core.models import (
    DisasterDeclaration,
    EvacuationRoute,
    HazardCategory,
    RoadWay,
    WeatherAlert,
)


class TestEvacuationRoute:
    """Test suite for route invariants."""

    def test_valid_route(self, origin, make_route):
        """Test a well-formed route and its derived fields."""
        end = destination_point(origin, 0.0, 2000.0)
        route = make_route(origin, end)

        assert route.start == origin
        assert route.end == end
        assert route.length_m == pytest.approx(2000.0, rel=1e-3)
        assert isinstance(route.waypoints, tuple)

    def test_needs_two_waypoints(self, origin, make_route):
        """Test a single waypoint is rejected."""
        route = make_route(origin, origin)
        with pytest.raises(ValueError):
            EvacuationRoute(**{**route.__dict__, "waypoints": [origin]})

    @pytest.mark.parametrize("travel_time", [0.0, -10.0])
    def test_travel_time_positive(self, origin, make_route, travel_time):
        """Test non-positive travel times are rejected."""
        route = make_route(origin, destination_point(origin, 0.0, 100.0))
        with pytest.raises(ValueError):
            EvacuationRoute(**{**route.__dict__, "estimated_travel_time": travel_time})

    @pytest.mark.parametrize("level", [0, 6, 2.5, True])
    def test_safety_level_range(self, origin, make_route, level):
        """Test safety level must be an integer in 1..5."""
        with pytest.raises(ValueError):
            make_route(origin, destination_point(origin, 0.0, 100.0), safety_level=level)

    @pytest.mark.parametrize("authority,official", [
        (AUTHORITY_USGS, True),
        (AUTHORITY_GOOGLE, False),
        (AUTHORITY_OSM, False),
        (AUTHORITY_GENERATED, False),
    ])
    def test_is_official(self, origin, make_route, authority, official):
        """Test government issuers are official."""
        route = make_route(origin, destination_point(origin, 0.0, 100.0), authority=authority)
        assert route.is_official is official

    def test_to_dict(self, origin, make_route):
        """Test JSON view uses latitude/longitude objects."""
        data = make_route(origin, destination_point(origin, 0.0, 100.0), route_id="abc").to_dict()

        assert data["id"] == "abc"
        assert data["waypoints"][0] == {"latitude": origin.latitude, "longitude": origin.longitude}
        assert data["category"] == "general"
        assert data["last_updated"].startswith("2026-01-27T14:30")


class TestSafeZone:
    """Test suite for safe zone invariants."""

    def test_occupancy_fields(self, origin, make_zone):
        """Test occupancy ratio and available capacity."""
        zone = make_zone(origin, capacity=200, occupancy=50)

        assert zone.occupancy_ratio == 0.25
        assert zone.available_capacity == 150
        assert not zone.is_over_capacity

    def test_over_capacity_allowed(self, origin, make_zone):
        """Test occupancy above capacity is kept and reported."""
        zone = make_zone(origin, capacity=100, occupancy=130)

        assert zone.is_over_capacity
        assert zone.occupancy_ratio == pytest.approx(1.3)
        assert zone.available_capacity == 0

    @pytest.mark.parametrize("capacity,occupancy", [(0, 0), (-1, 0), (10, -1)])
    def test_invalid_counts(self, origin, make_zone, capacity, occupancy):
        """Test capacity must be positive and occupancy non-negative."""
        with pytest.raises(ValueError):
            make_zone(origin, capacity=capacity, occupancy=occupancy)

    def test_to_dict(self, origin, make_zone):
        data = make_zone(origin, name="Clinic", capacity=100, occupancy=25).to_dict()

        assert data["id"] == "clinic"
        assert data["occupancy_percent"] == 25.0
        assert data["center"]["latitude"] == origin.latitude
        assert data["resources"] == ["Water"]


class TestHazardCategory:
    """Test suite for hazard keyword mapping."""

    @pytest.mark.parametrize("text,category", [
        ("Flood Warning", HazardCategory.FLOOD),
        ("Flash Flood Watch", HazardCategory.FLOOD),
        ("Hurricane Warning", HazardCategory.HURRICANE),
        ("Tropical Storm Watch", HazardCategory.HURRICANE),
        ("Red Flag Warning", HazardCategory.FIRE),
        ("Fire", HazardCategory.FIRE),
        ("Tsunami Warning", HazardCategory.TSUNAMI),
        ("Earthquake", HazardCategory.EARTHQUAKE),
        ("Chemical", HazardCategory.CHEMICAL),
        ("Hazardous Materials Warning", HazardCategory.CHEMICAL),
        ("Winter Storm Warning", HazardCategory.GENERAL),
        ("", HazardCategory.GENERAL),
        (None, HazardCategory.GENERAL),
    ])
    def test_from_text(self, text, category):
        assert HazardCategory.from_text(text) == category

    def test_alert_and_declaration_categories(self):
        """Test signals expose their category."""
        alert = WeatherAlert("a1", "Coastal Flood Advisory", "Flooding likely", "Moderate")
        declaration = DisasterDeclaration("4834", "WILDFIRES", "Fire")

        assert alert.category == HazardCategory.FLOOD
        assert declaration.category == HazardCategory.FIRE


class TestRoadWay:
    """Test suite for road naming."""

    @pytest.mark.parametrize("name,ref,expected", [
        ("Bayshore Freeway", "US 101", "Bayshore Freeway"),
        (None, "I 280", "I 280"),
        (None, None, "Motorway Road"),
    ])
    def test_display_name(self, name, ref, expected):
        road = RoadWay(1, "motorway", (Coordinate(0, 0), Coordinate(0, 1)), name=name, ref=ref)
        assert road.display_name == expected
