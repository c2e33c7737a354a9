"""Reverse geocoding through OpenStreetMap Nominatim."""

import logging
from typing import Any, Dict

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://nominatim.openstreetmap.org/reverse"


class GeocodeError(RuntimeError):
    """Raised when a reverse geocoding attempt does not produce a usable payload."""


def reverse(lat: float, lng: float, zoom: int, user_agent: str, language: str = "ko") -> Dict[str, Any]:
    """Return the ``address`` mapping for a coordinate at the given zoom level."""
    params = {
        "lat": lat,
        "lon": lng,
        "format": "json",
        "zoom": zoom,
        "accept-language": language,
    }
    try:
        response = _SESSION.get(_BASE_URL, params=params, headers={"User-Agent": user_agent}, timeout=10)
    except requests.RequestException as exc:
        raise GeocodeError(str(exc)) from exc

    if not response.ok:
        raise GeocodeError(f"reverse geocoding returned status={response.status_code}")

    try:
        payload = response.json()
    except ValueError as exc:
        raise GeocodeError(f"invalid JSON from reverse geocoding: {exc}") from exc

    address = payload.get("address") if isinstance(payload, dict) else None
    return address if isinstance(address, dict) else {}
