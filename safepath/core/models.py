"""
SafePath - Domain Models
Immutable value objects produced by one aggregation call.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from safepath.core.constants import HAZARD_KEYWORDS, OFFICIAL_AUTHORITIES
from safepath.core.geo_utils import Coordinate, path_length


class HazardCategory(str, Enum):
    """What an evacuation route is evacuating from."""
    FIRE = "fire"
    FLOOD = "flood"
    EARTHQUAKE = "earthquake"
    HURRICANE = "hurricane"
    TSUNAMI = "tsunami"
    CHEMICAL = "chemical"
    GENERAL = "general"

    @classmethod
    def from_text(cls, text: Optional[str]) -> "HazardCategory":
        """Map an NWS event name or FEMA incident type to a category."""
        if not text:
            return cls.GENERAL
        lowered = text.lower()
        for keyword, value in HAZARD_KEYWORDS:
            if keyword in lowered:
                return cls(value)
        return cls.GENERAL


def _check_safety_level(level: int) -> None:
    if not isinstance(level, int) or isinstance(level, bool) or not 1 <= level <= 5:
        raise ValueError(f"safety_level must be an integer in [1, 5], got {level!r}")


@dataclass(frozen=True)
class EvacuationRoute:
    """
    A candidate path away from danger.

    Attributes:
        route_id: Opaque identifier
        name: Display name
        description: Free text
        waypoints: Ordered path, first point next to the origin, last the terminus
        category: Hazard being evacuated from
        estimated_travel_time: Seconds
        last_updated: When the underlying data was produced
        safety_level: 1-5, 5 safest
        authority: Who issued the route
        source: Which feed or algorithm produced it
    """

    route_id: str
    name: str
    description: str
    waypoints: Tuple[Coordinate, ...]
    category: HazardCategory
    estimated_travel_time: float
    last_updated: datetime
    safety_level: int
    authority: str
    source: str

    def __post_init__(self):
        object.__setattr__(self, "waypoints", tuple(self.waypoints))
        if len(self.waypoints) < 2:
            raise ValueError(f"route needs at least 2 waypoints, got {len(self.waypoints)}")
        if not self.estimated_travel_time > 0:
            raise ValueError("estimated_travel_time must be positive")
        _check_safety_level(self.safety_level)

    @property
    def start(self) -> Coordinate:
        return self.waypoints[0]

    @property
    def end(self) -> Coordinate:
        return self.waypoints[-1]

    @property
    def is_official(self) -> bool:
        """Issued by a government authority."""
        return self.authority in OFFICIAL_AUTHORITIES

    @property
    def length_m(self) -> float:
        return path_length(self.waypoints)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.route_id,
            "name": self.name,
            "description": self.description,
            "waypoints": [w.to_dict() for w in self.waypoints],
            "category": self.category.value,
            "estimated_travel_time_seconds": round(self.estimated_travel_time, 1),
            "length_km": round(self.length_m / 1000, 2),
            "last_updated": self.last_updated.isoformat(),
            "safety_level": self.safety_level,
            "authority": self.authority,
            "source": self.source,
        }


@dataclass(frozen=True)
class SafeZone:
    """
    A shelter-class facility, real or synthesized.

    Occupancy above capacity is allowed and reported as-is.
    """

    zone_id: str
    name: str
    description: str
    center: Coordinate
    radius_m: float
    capacity: int
    current_occupancy: int
    resources: Tuple[str, ...]
    last_updated: datetime
    safety_level: int
    address: Optional[str] = None
    contact: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "resources", tuple(self.resources))
        if not self.radius_m > 0:
            raise ValueError("radius_m must be positive")
        if self.capacity <= 0:
            raise ValueError("capacity must be positive")
        if self.current_occupancy < 0:
            raise ValueError("current_occupancy cannot be negative")
        _check_safety_level(self.safety_level)

    @property
    def occupancy_ratio(self) -> float:
        """Occupancy / capacity; can exceed 1.0."""
        if self.capacity <= 0:
            return 0.0
        return self.current_occupancy / self.capacity

    @property
    def available_capacity(self) -> int:
        return max(0, self.capacity - self.current_occupancy)

    @property
    def is_over_capacity(self) -> bool:
        return self.current_occupancy > self.capacity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.zone_id,
            "name": self.name,
            "description": self.description,
            "center": self.center.to_dict(),
            "radius_m": self.radius_m,
            "capacity": self.capacity,
            "current_occupancy": self.current_occupancy,
            "occupancy_percent": round(self.occupancy_ratio * 100, 1),
            "available_capacity": self.available_capacity,
            "resources": list(self.resources),
            "last_updated": self.last_updated.isoformat(),
            "safety_level": self.safety_level,
            "address": self.address,
            "contact": self.contact,
        }


# =============================================================================
# Hazard signals (internal)
# =============================================================================

@dataclass(frozen=True)
class SeismicEvent:
    """Earthquake from the seismic feed."""
    event_id: str
    magnitude: float
    epicenter: Coordinate
    time: datetime
    title: str


@dataclass(frozen=True)
class WeatherAlert:
    """Active weather alert for the queried point."""
    alert_id: str
    event: str
    headline: str
    severity: str
    description: str = ""

    @property
    def category(self) -> HazardCategory:
        return HazardCategory.from_text(self.event)


@dataclass(frozen=True)
class DisasterDeclaration:
    """Federal disaster declaration; located only by its state."""
    disaster_number: str
    title: str
    incident_type: str
    state: Optional[str] = None

    @property
    def category(self) -> HazardCategory:
        return HazardCategory.from_text(self.incident_type)


HazardSignal = Union[SeismicEvent, WeatherAlert, DisasterDeclaration]


# =============================================================================
# Raw provider features (internal)
# =============================================================================

@dataclass(frozen=True)
class FacilityPlace:
    """A facility returned by the places search."""
    place_id: str
    name: str
    location: Coordinate
    facility_type: str
    vicinity: Optional[str] = None


@dataclass(frozen=True)
class DirectionsRoute:
    """One alternative from the directions feed."""
    waypoints: Tuple[Coordinate, ...]
    duration_seconds: float
    distance_m: float


@dataclass(frozen=True)
class RoadWay:
    """A major road resolved against its node table."""
    osm_id: int
    highway: str
    waypoints: Tuple[Coordinate, ...]
    name: Optional[str] = None
    ref: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Road name with fallbacks: name, ref, then the highway class."""
        return self.name or self.ref or f"{self.highway.capitalize()} Road"


RawFeature = Union[SeismicEvent, WeatherAlert, DisasterDeclaration, FacilityPlace, DirectionsRoute, RoadWay]


@dataclass
class AggregationResult:
    """What an aggregation call produced and how it got there."""
    items: List[Any] = field(default_factory=list)
    state: str = ""
    synthetic: bool = False
    provider_errors: List[str] = field(default_factory=list)
