"""
SafePath - Core Utilities
Configuration, logging, errors, geometry and the domain model.
"""

from safepath.core.config import settings
from safepath.core.exceptions import (
    SafePathError,
    ProviderError,
    ProviderErrorKind,
    InvalidInputError,
)
from safepath.core.geo_utils import (
    Coordinate,
    haversine_distance,
    destination_point,
    bearing_description,
    compass_direction,
    decode_polyline,
    encode_polyline,
)
from safepath.core.models import (
    EvacuationRoute,
    SafeZone,
    HazardCategory,
)

__all__ = [
    "settings",
    "SafePathError",
    "ProviderError",
    "ProviderErrorKind",
    "InvalidInputError",
    "Coordinate",
    "haversine_distance",
    "destination_point",
    "bearing_description",
    "compass_direction",
    "decode_polyline",
    "encode_polyline",
    "EvacuationRoute",
    "SafeZone",
    "HazardCategory",
]
