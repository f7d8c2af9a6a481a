"""
Tests for the synthetic data generator
"""
import re
from datetime import datetime, timezone

import pytest

from safepath.aggregation.synthetic import SyntheticGenerator, hazard_safety_level, spread_bearings
from safepath.core.constants import AUTHORITY_GENERATED, AUTHORITY_USGS, THREE_WAY_BEARINGS
from safepath.core.geo_utils import Coordinate, bearing_description, haversine_distance
from safepath.core.models import HazardCategory, SeismicEvent


def quake(magnitude, epicenter=Coordinate(37.70, -122.45)):
    return SeismicEvent(
        event_id="nc1",
        magnitude=magnitude,
        epicenter=epicenter,
        time=datetime(2026, 1, 27, 14, 30, tzinfo=timezone.utc),
        title=f"M {magnitude} - Test Quake",
    )


class TestDirectionalRoutes:
    """Test suite for directionless synthetic routes."""

    def setup_method(self):
        self.generator = SyntheticGenerator(seed=42)

    def test_eight_way(self, origin):
        """Test one route per compass point, stepping 500 m to 10 km."""
        routes = self.generator.directional_routes(origin, spread_bearings("eight"))

        assert len(routes) == 8
        assert [r.name for r in routes] == [
            "Evacuation Route North", "Evacuation Route Northeast", "Evacuation Route East",
            "Evacuation Route Southeast", "Evacuation Route South", "Evacuation Route Southwest",
            "Evacuation Route West", "Evacuation Route Northwest",
        ]
        for route in routes:
            assert len(route.waypoints) == 21
            assert route.start == origin
            assert haversine_distance(origin, route.end) == pytest.approx(10_000.0, rel=1e-3)
            assert haversine_distance(route.waypoints[0], route.waypoints[1]) == pytest.approx(500.0, rel=1e-3)
            assert route.safety_level == 3
            assert route.estimated_travel_time == 1000.0
            assert route.authority == AUTHORITY_GENERATED
            assert route.source == "Directional Algorithm"
            assert route.category == HazardCategory.GENERAL

    def test_heading_matches_name(self, origin):
        """Test each route actually heads the way it is named."""
        for route in self.generator.directional_routes(origin, spread_bearings("eight")):
            heading = bearing_description(route.start, route.end)
            assert route.name.endswith(heading.capitalize())

    def test_three_way(self, origin):
        routes = self.generator.directional_routes(origin, THREE_WAY_BEARINGS)

        assert len(routes) == 3
        assert routes[0].description == "Evacuation route heading North from your location"

    def test_unknown_spread_defaults_to_eight(self):
        assert len(spread_bearings("sideways")) == 8
        assert len(spread_bearings("THREE")) == 3

    def test_ids_unique(self, origin):
        routes = self.generator.directional_routes(origin, spread_bearings("eight"))
        assert len({r.route_id for r in routes}) == 8


class TestHazardAvoidanceRoute:
    """Test suite for routes away from an epicenter."""

    def setup_method(self):
        self.generator = SyntheticGenerator(seed=1)

    def test_magnitude_six(self, origin):
        """Test a magnitude 6 quake gives an 11 km, safety 1 route from the origin."""
        route = self.generator.hazard_avoidance_route(origin, quake(6.0))

        assert route.start == origin
        assert route.safety_level == 1
        assert len(route.waypoints) == 9
        assert haversine_distance(origin, route.end) == pytest.approx(11_000.0, rel=1e-3)
        assert route.estimated_travel_time == pytest.approx(1100.0)
        assert route.authority == AUTHORITY_USGS
        assert route.category == HazardCategory.EARTHQUAKE
        assert route.last_updated == datetime(2026, 1, 27, 14, 30, tzinfo=timezone.utc)

    def test_points_away_from_epicenter(self, origin):
        """Test each step moves further from the epicenter."""
        event = quake(5.0)
        route = self.generator.hazard_avoidance_route(origin, event)
        distances = [haversine_distance(event.epicenter, w) for w in route.waypoints]

        assert distances == sorted(distances)
        assert distances[-1] > distances[0] + 9000.0

    def test_epicenter_at_origin(self, origin):
        """Test a quake right under the person still yields a route."""
        route = self.generator.hazard_avoidance_route(origin, quake(4.0, epicenter=origin))

        assert route.end.latitude > origin.latitude

    @pytest.mark.parametrize("magnitude,level", [
        (0.5, 5), (2.5, 4), (3.9, 3), (4.0, 2), (5.2, 1), (6.0, 1), (9.1, 1), (-1.0, 5),
    ])
    def test_safety_level(self, magnitude, level):
        """Test safety is max(1, min(5, 6 - int(magnitude)))."""
        assert hazard_safety_level(magnitude) == level


class TestSyntheticSafeZones:
    """Test suite for synthetic shelters."""

    def test_three_archetypes(self, origin):
        """Test one hospital, school and community center 1-3 km out."""
        zones = SyntheticGenerator(seed=3).safe_zones(origin)

        assert [z.name for z in zones] == [
            "Hospital Safe Zone", "School Safe Zone", "Community Center Safe Zone",
        ]
        assert [z.capacity for z in zones] == [450, 800, 300]
        assert "Power" in zones[0].resources

        for zone in zones:
            assert 1000.0 <= haversine_distance(origin, zone.center) <= 3000.0 * 1.001
            assert 0 <= zone.current_occupancy <= zone.capacity // 2
            assert zone.safety_level == 4
            assert zone.description == "Emergency evacuation site"
            assert re.fullmatch(r"Near \d+\.\dkm (North|Southeast|Southwest) of your location", zone.address)

    def test_seed_reproducible(self, origin):
        """Test the same seed gives the same zones."""
        first = SyntheticGenerator(seed=99).safe_zones(origin)
        second = SyntheticGenerator(seed=99).safe_zones(origin)

        assert [(z.zone_id, z.center, z.current_occupancy) for z in first] == \
               [(z.zone_id, z.center, z.current_occupancy) for z in second]


class TestTotality:
    """Test suite for output on any valid coordinate."""

    @pytest.mark.parametrize("lat,lon", [
        (90.0, 180.0), (-90.0, -180.0), (0.0, 0.0), (89.9999, -179.9999), (-45.0, 179.999),
    ])
    def test_extreme_coordinates(self, lat, lon):
        """Test poles and the antimeridian still give valid entities."""
        generator = SyntheticGenerator(seed=5)
        point = Coordinate(lat, lon)

        assert len(generator.directional_routes(point, spread_bearings("eight"))) == 8
        assert len(generator.safe_zones(point)) == 3
        assert generator.hazard_avoidance_route(point, quake(7.0)).safety_level == 1
