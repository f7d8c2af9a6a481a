"""
SafePath - Synthetic Data Generator
Algorithmic routes and safe zones for when no provider has anything.

Everything here is total: for any valid coordinate the output is non-empty
and every entity satisfies its model invariants. Randomness comes from an
injected random.Random so results are reproducible under a seed.
"""

import math
import random
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from safepath.core.config import settings
from safepath.core.constants import (
    AUTHORITY_GENERATED,
    AUTHORITY_USGS,
    EIGHT_WAY_BEARINGS,
    HAZARD_BASE_DISTANCE_M,
    HAZARD_DISTANCE_PER_MAGNITUDE_M,
    HAZARD_SEGMENTS,
    SOURCE_DIRECTIONAL,
    SOURCE_USGS,
    SYNTHETIC_MAX_DISTANCE_M,
    SYNTHETIC_ROUTE_SAFETY,
    SYNTHETIC_SPEED_MS,
    SYNTHETIC_STEP_M,
    SYNTHETIC_ZONE_ARCHETYPES,
    SYNTHETIC_ZONE_MAX_DISTANCE_M,
    SYNTHETIC_ZONE_MIN_DISTANCE_M,
    SYNTHETIC_ZONE_SAFETY,
    THREE_WAY_BEARINGS,
)
from safepath.core.geo_utils import (
    Coordinate,
    compass_direction,
    destination_point,
    planar_bearing,
)
from safepath.core.models import EvacuationRoute, HazardCategory, SafeZone, SeismicEvent


def hazard_safety_level(magnitude: float) -> int:
    """Stronger quakes give less safe routes: 6 - int(magnitude), clamped to 1..5."""
    return max(1, min(5, 6 - int(magnitude)))


def spread_bearings(spread: Optional[str] = None) -> Sequence[float]:
    """Bearing set for the configured synthetic spread ("eight" or "three")."""
    spread = (spread or settings.synthetic_route_spread).lower()
    return THREE_WAY_BEARINGS if spread == "three" else EIGHT_WAY_BEARINGS


class SyntheticGenerator:
    """
    Fallback data source.

    Usage:
        generator = SyntheticGenerator(seed=42)
        routes = generator.directional_routes(Coordinate(37.77, -122.42))
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        if rng is None:
            rng = random.Random(seed if seed is not None else settings.synthetic_seed)
        self.rng = rng

    def _new_id(self) -> str:
        return str(uuid.UUID(int=self.rng.getrandbits(128), version=4))

    def directional_routes(
        self,
        origin: Coordinate,
        bearings: Optional[Sequence[float]] = None,
    ) -> List[EvacuationRoute]:
        """
        One straight-line route per bearing.

        Waypoints are the origin plus a point every 500 m out to 10 km.

        Args:
            origin: Where the person is
            bearings: Degrees; defaults to the configured spread

        Returns:
            One route per bearing, in bearing order
        """
        if bearings is None:
            bearings = spread_bearings()

        now = datetime.now(timezone.utc)
        steps = int(SYNTHETIC_MAX_DISTANCE_M // SYNTHETIC_STEP_M)

        routes = []
        for bearing in bearings:
            radians = math.radians(bearing)
            waypoints = [origin] + [
                destination_point(origin, radians, SYNTHETIC_STEP_M * i)
                for i in range(1, steps + 1)
            ]
            direction = compass_direction(bearing).capitalize()

            routes.append(EvacuationRoute(
                route_id=self._new_id(),
                name=f"Evacuation Route {direction}",
                description=f"Evacuation route heading {direction} from your location",
                waypoints=waypoints,
                category=HazardCategory.GENERAL,
                estimated_travel_time=SYNTHETIC_MAX_DISTANCE_M / SYNTHETIC_SPEED_MS,
                last_updated=now,
                safety_level=SYNTHETIC_ROUTE_SAFETY,
                authority=AUTHORITY_GENERATED,
                source=SOURCE_DIRECTIONAL,
            ))

        return routes

    def hazard_avoidance_route(self, origin: Coordinate, event: SeismicEvent) -> EvacuationRoute:
        """
        Route pointing directly away from an earthquake epicentre.

        Distance grows 1 km per magnitude unit on a 5 km base and is split
        into 8 equal segments. If the person stands on the epicentre the
        bearing degenerates to north.
        """
        bearing = planar_bearing(event.epicenter, origin)
        distance = HAZARD_BASE_DISTANCE_M + HAZARD_DISTANCE_PER_MAGNITUDE_M * max(event.magnitude, 0.0)

        waypoints = [origin] + [
            destination_point(origin, bearing, distance * i / HAZARD_SEGMENTS)
            for i in range(1, HAZARD_SEGMENTS + 1)
        ]

        return EvacuationRoute(
            route_id=f"usgs-{event.event_id}",
            name=f"Earthquake Evacuation: {event.title}",
            description=f"Magnitude {event.magnitude:.1f} earthquake - evacuate away from epicenter",
            waypoints=waypoints,
            category=HazardCategory.EARTHQUAKE,
            estimated_travel_time=distance / SYNTHETIC_SPEED_MS,
            last_updated=event.time,
            safety_level=hazard_safety_level(event.magnitude),
            authority=AUTHORITY_USGS,
            source=SOURCE_USGS,
        )

    def safe_zones(self, origin: Coordinate) -> List[SafeZone]:
        """Three archetype shelters at 0/120/240 degrees, 1-3 km out."""
        now = datetime.now(timezone.utc)

        zones = []
        for bearing, (kind, radius, capacity, resources) in zip(THREE_WAY_BEARINGS, SYNTHETIC_ZONE_ARCHETYPES):
            distance = self.rng.uniform(SYNTHETIC_ZONE_MIN_DISTANCE_M, SYNTHETIC_ZONE_MAX_DISTANCE_M)
            direction = compass_direction(bearing).capitalize()

            zones.append(SafeZone(
                zone_id=self._new_id(),
                name=f"{kind} Safe Zone",
                description="Emergency evacuation site",
                center=destination_point(origin, math.radians(bearing), distance),
                radius_m=radius,
                capacity=capacity,
                current_occupancy=self.rng.randint(0, capacity // 2),
                resources=resources,
                last_updated=now,
                safety_level=SYNTHETIC_ZONE_SAFETY,
                address=f"Near {distance / 1000:.1f}km {direction} of your location",
            ))

        return zones
