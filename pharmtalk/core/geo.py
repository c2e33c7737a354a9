"""Great-circle distance and coordinate conversion helpers."""

import math
from typing import Any, Optional

EARTH_RADIUS_METERS = 6371000.0
# Local search returns WGS-84 degrees multiplied by 10^7 as integer strings.
PROJECTED_SCALE = 10_000_000


def haversine_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Return the Haversine distance in meters between two WGS-84 points."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2.0) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2.0) ** 2
    )
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def from_projected(value: Any) -> Optional[float]:
    """Convert a scaled integer string (``mapx``/``mapy``) into degrees."""
    if value is None:
        return None
    try:
        scaled = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(scaled):
        return None
    return int(scaled) / PROJECTED_SCALE


def is_valid_coordinate(lat: float, lng: float) -> bool:
    if math.isnan(lat) or math.isnan(lng):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0
