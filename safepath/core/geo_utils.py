"""
SafePath - Geospatial Utilities
Great-circle geometry, compass naming and polyline codec.
"""

import math
from typing import Iterable, List, Optional, Sequence, Tuple
from dataclasses import dataclass

from safepath.core.constants import COMPASS_LABELS
from safepath.core.exceptions import InvalidInputError

# Earth's radius in meters
EARTH_RADIUS_M = 6371000.0

# Rough length of one degree of latitude, used for query boxes
METERS_PER_DEGREE = 111000.0


@dataclass(frozen=True)
class Coordinate:
    """Geographic point with latitude and longitude."""
    latitude: float
    longitude: float

    @classmethod
    def from_lonlat(cls, pair: Sequence[float]) -> "Coordinate":
        """Build from a GeoJSON [longitude, latitude(, depth)] position."""
        if len(pair) < 2:
            raise ValueError(f"position needs at least 2 values, got {len(pair)}")
        return cls(latitude=float(pair[1]), longitude=float(pair[0]))

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class BoundingBox:
    """Geographic bounding box."""
    west: float   # min longitude
    south: float  # min latitude
    east: float   # max longitude
    north: float  # max latitude

    def contains(self, point: Coordinate) -> bool:
        """Check if a point is within the bounding box."""
        return (
            self.west <= point.longitude <= self.east and
            self.south <= point.latitude <= self.north
        )

    def to_overpass(self) -> str:
        """Overpass QL order: south,west,north,east."""
        return f"{self.south},{self.west},{self.north},{self.east}"


def validate_coordinate(latitude: float, longitude: float) -> Coordinate:
    """
    Check that a caller-supplied position is usable.

    Raises:
        InvalidInputError: non-finite or out-of-range values
    """
    values = {}
    for name, raw in (("latitude", latitude), ("longitude", longitude)):
        if raw is None or isinstance(raw, bool):
            raise InvalidInputError(f"{name} is required", field=name)
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise InvalidInputError(f"{name} must be a number", field=name, value=repr(raw))
        if not math.isfinite(value):
            raise InvalidInputError(f"{name} must be finite", field=name, value=repr(raw))
        values[name] = value

    lat, lon = values["latitude"], values["longitude"]
    if not -90.0 <= lat <= 90.0:
        raise InvalidInputError("latitude out of range [-90, 90]", field="latitude", value=lat)
    if not -180.0 <= lon <= 180.0:
        raise InvalidInputError("longitude out of range [-180, 180]", field="longitude", value=lon)

    return Coordinate(latitude=lat, longitude=lon)


def validate_radius(radius_m: float) -> float:
    """Search radius must be a finite, positive number of meters."""
    try:
        radius = float(radius_m)
    except (TypeError, ValueError):
        raise InvalidInputError("radius must be a number", field="radius", value=repr(radius_m))
    if not math.isfinite(radius):
        raise InvalidInputError("radius must be finite", field="radius", value=repr(radius_m))
    if radius <= 0:
        raise InvalidInputError("radius must be positive", field="radius", value=radius)
    return radius


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Args:
        a, b: Coordinates in decimal degrees

    Returns:
        Distance in meters
    """
    lat1_rad = math.radians(a.latitude)
    lat2_rad = math.radians(b.latitude)
    delta_lat = math.radians(b.latitude - a.latitude)
    delta_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return EARTH_RADIUS_M * c


def destination_point(
    origin: Coordinate,
    bearing_radians: float,
    distance_m: float
) -> Coordinate:
    """
    Calculate destination point given start, bearing, and distance.

    Args:
        origin: Start point
        bearing_radians: Bearing in radians (0=North, pi/2=East)
        distance_m: Distance to travel in meters

    Returns:
        Destination coordinate
    """
    lat_rad = math.radians(origin.latitude)
    lon_rad = math.radians(origin.longitude)
    angular_distance = distance_m / EARTH_RADIUS_M

    dest_lat = math.asin(
        math.sin(lat_rad) * math.cos(angular_distance) +
        math.cos(lat_rad) * math.sin(angular_distance) * math.cos(bearing_radians)
    )

    dest_lon = lon_rad + math.atan2(
        math.sin(bearing_radians) * math.sin(angular_distance) * math.cos(lat_rad),
        math.cos(angular_distance) - math.sin(lat_rad) * math.sin(dest_lat)
    )

    # Wrap longitude into [-180, 180)
    longitude = (math.degrees(dest_lon) + 540.0) % 360.0 - 180.0

    return Coordinate(latitude=math.degrees(dest_lat), longitude=longitude)


def planar_bearing(start: Coordinate, end: Coordinate) -> float:
    """
    Bearing in radians from atan2(dlon, dlat).

    Ignores meridian convergence; good enough to point a route away
    from a hazard a few kilometers off.
    """
    return math.atan2(end.longitude - start.longitude, end.latitude - start.latitude)


def compass_direction(bearing_degrees: float) -> str:
    """
    Convert bearing in degrees to one of 8 compass labels.

    Args:
        bearing_degrees: Bearing in degrees, any range

    Returns:
        north, northeast, east, southeast, south, southwest, west or northwest
    """
    # Half-open 45 degree sectors: [337.5, 22.5) is north, [22.5, 67.5) northeast, ...
    index = int(((bearing_degrees % 360) + 22.5) // 45) % 8
    return COMPASS_LABELS[index]


def bearing_description(start: Coordinate, end: Coordinate) -> str:
    """Compass label for the direction of travel from start to end."""
    degrees = (math.degrees(planar_bearing(start, end)) + 360) % 360
    return compass_direction(degrees)


def bounding_box(
    center: Coordinate,
    radius_m: float,
    max_degrees: Optional[float] = None
) -> BoundingBox:
    """
    Square box around a point, radius converted at ~111 km per degree.

    Args:
        center: Box center
        radius_m: Half-width in meters
        max_degrees: Cap on the half-width to keep provider queries small
    """
    delta = radius_m / METERS_PER_DEGREE
    if max_degrees is not None:
        delta = min(max_degrees, delta)

    return BoundingBox(
        west=center.longitude - delta,
        south=center.latitude - delta,
        east=center.longitude + delta,
        north=center.latitude + delta,
    )


def path_length(waypoints: Sequence[Coordinate]) -> float:
    """Total length in meters of a polyline."""
    total = 0.0
    for i in range(len(waypoints) - 1):
        total += haversine_distance(waypoints[i], waypoints[i + 1])
    return total


def _decode_value(encoded: str, index: int) -> Tuple[Optional[int], int]:
    """Read one zig-zag varint; returns (None, index) if the input ends mid-value."""
    result = 0
    shift = 0
    while index < len(encoded):
        chunk = ord(encoded[index]) - 63
        index += 1
        result |= (chunk & 0x1F) << shift
        shift += 5
        if chunk < 0x20:
            value = ~(result >> 1) if result & 1 else result >> 1
            return value, index
    return None, index


def decode_polyline(encoded: str) -> List[Coordinate]:
    """
    Decode a Google Encoded Polyline string.

    Truncated input (a chunk whose continuation bit never clears) stops
    decoding; the points decoded up to that position are returned.

    Args:
        encoded: Polyline string

    Returns:
        List of coordinates
    """
    coordinates: List[Coordinate] = []
    index = 0
    lat = 0
    lng = 0

    while index < len(encoded):
        d_lat, index = _decode_value(encoded, index)
        if d_lat is None:
            break
        d_lng, index = _decode_value(encoded, index)
        if d_lng is None:
            break

        lat += d_lat
        lng += d_lng
        coordinates.append(Coordinate(latitude=lat / 1e5, longitude=lng / 1e5))

    return coordinates


def _encode_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else value << 1
    chunks = []
    while value >= 0x20:
        chunks.append(chr((0x20 | (value & 0x1F)) + 63))
        value >>= 5
    chunks.append(chr(value + 63))
    return "".join(chunks)


def encode_polyline(coordinates: Iterable[Coordinate]) -> str:
    """Encode coordinates (rounded to 5 decimals) as a Google polyline."""
    output = []
    prev_lat = 0
    prev_lng = 0

    for point in coordinates:
        lat = int(round(point.latitude * 1e5))
        lng = int(round(point.longitude * 1e5))
        output.append(_encode_value(lat - prev_lat))
        output.append(_encode_value(lng - prev_lng))
        prev_lat, prev_lng = lat, lng

    return "".join(output)
