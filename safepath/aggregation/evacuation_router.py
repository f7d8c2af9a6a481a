"""
SafePath - Evacuation Route Builder
Turns raw provider features into evacuation routes and safe zones.
"""

import logging
import math
import random
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from safepath.core.config import settings
from safepath.core.constants import (
    AUTHORITY_GOOGLE,
    AUTHORITY_OSM,
    DEFAULT_FACILITY_PROFILE,
    DEFAULT_HIGHWAY_PROFILE,
    DIRECTIONS_ROUTE_SAFETY,
    FACILITY_PROFILES,
    HIGHWAY_PROFILES,
    SOURCE_DIRECTIONS,
    SOURCE_OVERPASS,
)
from safepath.core.geo_utils import (
    Coordinate,
    bearing_description,
    destination_point,
    path_length,
)
from safepath.core.models import (
    DirectionsRoute,
    EvacuationRoute,
    FacilityPlace,
    HazardCategory,
    RoadWay,
    SafeZone,
)

logger = logging.getLogger(__name__)

# Cardinal destinations for the directions feed, (label, bearing degrees)
SAFE_DESTINATION_BEARINGS: List[Tuple[str, float]] = [
    ("north", 0.0),
    ("east", 90.0),
    ("south", 180.0),
    ("west", 270.0),
]


def find_safe_destinations(
    origin: Coordinate,
    radius_m: float,
    min_distance_m: Optional[float] = None,
) -> List[Tuple[str, Coordinate]]:
    """
    Points far enough out to be clear of the search area.

    Args:
        origin: Person's location
        radius_m: Search radius
        min_distance_m: Floor on the projection distance (default 25 km)

    Returns:
        (label, coordinate) pairs for north, east, south and west
    """
    if min_distance_m is None:
        min_distance_m = settings.safe_destination_min_m
    distance = max(min_distance_m, radius_m * 2)

    return [
        (label, destination_point(origin, math.radians(bearing), distance))
        for label, bearing in SAFE_DESTINATION_BEARINGS
    ]


def routes_from_directions(
    features: Iterable[DirectionsRoute],
    category: HazardCategory = HazardCategory.GENERAL,
    now: Optional[datetime] = None,
) -> List[EvacuationRoute]:
    """
    Build routes from directions results, numbered in provider order.

    Args:
        features: Decoded directions alternatives
        category: Hazard the routes evacuate from
        now: Timestamp for last_updated

    Returns:
        One route per usable alternative
    """
    now = now or datetime.now(timezone.utc)

    routes = []
    for feature in features:
        index = len(routes)
        try:
            routes.append(EvacuationRoute(
                route_id=f"directions-{index + 1}",
                name=f"Evacuation Route to Safety {index + 1}",
                description=f"Evacuation route via major roads. Distance: {int(feature.distance_m / 1000)} km",
                waypoints=feature.waypoints,
                category=category,
                estimated_travel_time=feature.duration_seconds,
                last_updated=now,
                safety_level=DIRECTIONS_ROUTE_SAFETY,
                authority=AUTHORITY_GOOGLE,
                source=SOURCE_DIRECTIONS,
            ))
        except ValueError as e:
            logger.debug(f"Skipping directions route: {e}")

    return routes


def routes_from_roads(
    origin: Coordinate,
    roads: Iterable[RoadWay],
    category: HazardCategory = HazardCategory.GENERAL,
    now: Optional[datetime] = None,
) -> List[EvacuationRoute]:
    """
    Build routes from major roads.

    Travel time is the road length at the evacuation speed for its class;
    motorways and trunks rate safer than primaries.

    Args:
        origin: Person's location, used to name the direction of travel
        roads: Resolved road ways
        category: Hazard the routes evacuate from
        now: Timestamp for last_updated
    """
    now = now or datetime.now(timezone.utc)

    routes = []
    for road in roads:
        safety, speed = HIGHWAY_PROFILES.get(road.highway, DEFAULT_HIGHWAY_PROFILE)
        length = path_length(road.waypoints)
        if length <= 0:
            logger.debug(f"Skipping zero-length way {road.osm_id}")
            continue

        name = road.display_name
        direction = bearing_description(origin, road.waypoints[-1])

        routes.append(EvacuationRoute(
            route_id=f"osm-way-{road.osm_id}",
            name=f"Evacuation via {name}",
            description=f"Evacuation route to the {direction} along {road.highway} {name}",
            waypoints=road.waypoints,
            category=category,
            estimated_travel_time=length / speed,
            last_updated=now,
            safety_level=safety,
            authority=AUTHORITY_OSM,
            source=SOURCE_OVERPASS,
        ))

    return routes


def safe_zones_from_places(
    places: Iterable[FacilityPlace],
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> List[SafeZone]:
    """
    Build safe zones from facility search results.

    Capacity, radius, resources and safety come from the facility-type
    profile. Live occupancy is not published by the feed, so it is
    estimated between a quarter and a half of capacity.

    Args:
        places: Facilities in provider order
        rng: Random source for the occupancy estimate
        now: Timestamp for last_updated
    """
    rng = rng or random.Random()
    now = now or datetime.now(timezone.utc)

    zones = []
    for place in places:
        profile = FACILITY_PROFILES.get(place.facility_type, DEFAULT_FACILITY_PROFILE)
        capacity = profile["capacity"]

        zones.append(SafeZone(
            zone_id=place.place_id,
            name=place.name,
            description=profile["description"],
            center=place.location,
            radius_m=profile["radius"],
            capacity=capacity,
            current_occupancy=rng.randint(capacity // 4, capacity // 2),
            resources=profile["resources"],
            last_updated=now,
            safety_level=profile["safety_level"],
            address=place.vicinity,
        ))

    return zones
