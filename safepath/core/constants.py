"""
SafePath - Constants and Reference Data
Static lookup tables used by the providers and the synthetic generator.
"""

from typing import Dict, List, Tuple

# =============================================================================
# COMPASS
# =============================================================================

COMPASS_LABELS: List[str] = [
    "north", "northeast", "east", "southeast",
    "south", "southwest", "west", "northwest",
]

# Route spreads used when no provider has data (degrees)
EIGHT_WAY_BEARINGS: Tuple[float, ...] = (0.0, 45.0, 90.0, 135.0, 180.0, 225.0, 270.0, 315.0)
THREE_WAY_BEARINGS: Tuple[float, ...] = (0.0, 120.0, 240.0)

# =============================================================================
# AUTHORITIES / SOURCES
# =============================================================================

AUTHORITY_USGS = "USGS Earthquake Hazards Program"
AUTHORITY_GOOGLE = "Google Maps Directions"
AUTHORITY_OSM = "OpenStreetMap"
AUTHORITY_GENERATED = "Generated Evacuation Route"

# Government issuers; their routes claim a compass bucket during merge
OFFICIAL_AUTHORITIES: Tuple[str, ...] = (AUTHORITY_USGS,)

SOURCE_USGS = "USGS Earthquake API"
SOURCE_DIRECTIONS = "Google Maps Directions API"
SOURCE_OVERPASS = "OpenStreetMap Overpass API"
SOURCE_DIRECTIONAL = "Directional Algorithm"

# =============================================================================
# ROUTES
# =============================================================================

# Synthetic directional routes: a waypoint every 500 m out to 10 km
SYNTHETIC_STEP_M = 500.0
SYNTHETIC_MAX_DISTANCE_M = 10000.0
SYNTHETIC_SPEED_MS = 10.0
SYNTHETIC_ROUTE_SAFETY = 3

# Hazard-avoidance routes: 5 km plus 1 km per magnitude unit
HAZARD_BASE_DISTANCE_M = 5000.0
HAZARD_DISTANCE_PER_MAGNITUDE_M = 1000.0
HAZARD_SEGMENTS = 8

DIRECTIONS_ROUTE_SAFETY = 4

# Overpass highway classes queried, with (safety level, speed m/s)
EVACUATION_HIGHWAYS: List[str] = ["motorway", "trunk", "primary"]

HIGHWAY_PROFILES: Dict[str, Tuple[int, float]] = {
    "motorway": (4, 16.7),   # ~60 km/h in an evacuation
    "trunk": (4, 13.9),      # ~50 km/h
    "primary": (3, 11.1),    # ~40 km/h
}
DEFAULT_HIGHWAY_PROFILE: Tuple[int, float] = (2, 8.3)

# =============================================================================
# HAZARD CATEGORIES
# =============================================================================

# Keyword -> category value, checked in order against NWS events and FEMA incident types
HAZARD_KEYWORDS: List[Tuple[str, str]] = [
    ("tsunami", "tsunami"),
    ("earthquake", "earthquake"),
    ("hurricane", "hurricane"),
    ("tropical", "hurricane"),
    ("typhoon", "hurricane"),
    ("coastal storm", "hurricane"),
    ("flood", "flood"),
    ("levee", "flood"),
    ("fire", "fire"),
    ("red flag", "fire"),
    ("chemical", "chemical"),
    ("hazardous material", "chemical"),
    ("biological", "chemical"),
    ("toxic", "chemical"),
]

# =============================================================================
# FACILITIES
# =============================================================================

PLACES_FACILITY_TYPES: List[str] = ["hospital", "fire_station", "police", "school"]

# Places type -> description, radius (m), capacity, resources, safety level
FACILITY_PROFILES: Dict[str, dict] = {
    "hospital": {
        "description": "Medical Facility",
        "radius": 300.0,
        "capacity": 500,
        "resources": ["Medical Aid", "Water", "Food", "Shelter"],
        "safety_level": 5,
    },
    "fire_station": {
        "description": "Fire & Rescue Station",
        "radius": 200.0,
        "capacity": 100,
        "resources": ["Water", "Rescue Equipment", "First Aid"],
        "safety_level": 4,
    },
    "police": {
        "description": "Police Station",
        "radius": 150.0,
        "capacity": 100,
        "resources": ["Security", "First Aid", "Communication"],
        "safety_level": 4,
    },
    "school": {
        "description": "School Shelter",
        "radius": 250.0,
        "capacity": 800,
        "resources": ["Shelter", "Water", "Food"],
        "safety_level": 3,
    },
}

DEFAULT_FACILITY_PROFILE: dict = {
    "description": "Emergency Facility",
    "radius": 150.0,
    "capacity": 150,
    "resources": ["Shelter", "Water"],
    "safety_level": 2,
}

# Synthetic safe zones: archetype -> radius (m), capacity, resources
SYNTHETIC_ZONE_ARCHETYPES: List[Tuple[str, float, int, List[str]]] = [
    ("Hospital", 300.0, 450, ["Medical Aid", "Water", "Food", "Shelter", "Power"]),
    ("School", 250.0, 800, ["Water", "Food", "Shelter", "First Aid"]),
    ("Community Center", 200.0, 300, ["Water", "Food", "Shelter"]),
]
SYNTHETIC_ZONE_MIN_DISTANCE_M = 1000.0
SYNTHETIC_ZONE_MAX_DISTANCE_M = 3000.0
SYNTHETIC_ZONE_SAFETY = 4
