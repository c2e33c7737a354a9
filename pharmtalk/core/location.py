"""Resolve a coordinate to the administrative area used for search queries."""

import logging
from typing import Any, Callable, Dict, Optional

from pharmtalk.etl.transform import parse_area
from pharmtalk.models import AreaDescriptor, Coordinate
from pharmtalk.vendors import nominatim

logger = logging.getLogger(__name__)

# Most precise first: building, street, suburb.
ZOOM_LEVELS = (18, 16, 14)

GeocodeFn = Callable[[float, float, int], Dict[str, Any]]


def nominatim_geocoder(user_agent: str) -> GeocodeFn:
    def _geocode(lat: float, lng: float, zoom: int) -> Dict[str, Any]:
        return nominatim.reverse(lat, lng, zoom=zoom, user_agent=user_agent)

    return _geocode


def resolve_area(coordinate: Coordinate, geocode: Optional[GeocodeFn] = None, user_agent: str = "PharmTalk/1.0") -> AreaDescriptor:
    """Try each zoom level until one yields a neighborhood or district.

    Failures are never raised; an empty descriptor means "unknown area".
    """
    if geocode is None:
        geocode = nominatim_geocoder(user_agent)

    for zoom in ZOOM_LEVELS:
        try:
            address = geocode(coordinate.lat, coordinate.lng, zoom)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Reverse geocoding failed at zoom=%s: %s", zoom, exc)
            continue

        area = parse_area(address or {})
        if not area.is_empty:
            logger.info("Resolved area zoom=%s district=%s neighborhood=%s", zoom, area.district, area.neighborhood)
            return area

    logger.warning("Could not resolve area for lat=%s lng=%s", coordinate.lat, coordinate.lng)
    return AreaDescriptor()
