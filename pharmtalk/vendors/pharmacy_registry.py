"""Client for the public-data pharmacy registry (HIRA pharmacy info service)."""

import json
import logging
from typing import Any, Dict, List

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://apis.data.go.kr/B551182/pharmacyInfoService/getParmacyBasisList"
_SUCCESS_CODE = "00"


class RegistryError(RuntimeError):
    """Raised when the registry response cannot be used."""


def fetch_nearby(
    lat: float,
    lng: float,
    service_key: str,
    radius: int = 3000,
    rows: int = 30,
) -> List[Dict[str, Any]]:
    """Return raw registry items around a coordinate (first page only)."""
    # The service key is already URL-encoded by the portal; passing it through
    # ``params`` would encode it twice.
    query = (
        f"serviceKey={service_key}&numOfRows={rows}&pageNo=1"
        f"&xPos={lng}&yPos={lat}&radius={radius}&_type=json"
    )
    try:
        response = _SESSION.get(f"{_BASE_URL}?{query}", timeout=10)
    except requests.RequestException as exc:
        raise RegistryError(str(exc)) from exc

    if not response.ok:
        raise RegistryError(f"registry returned status={response.status_code}")

    return parse_registry_payload(response.text)


def parse_registry_payload(text: str) -> List[Dict[str, Any]]:
    body = (text or "").strip()
    if body.startswith("<") or body == "Unauthorized":
        raise RegistryError("registry returned a non-JSON body")

    try:
        data = json.loads(body)
    except ValueError as exc:
        raise RegistryError(f"invalid JSON from registry: {exc}") from exc

    response = data.get("response") if isinstance(data, dict) else None
    if not isinstance(response, dict):
        raise RegistryError("registry payload missing 'response'")

    header = response.get("header")
    result_code = header.get("resultCode") if isinstance(header, dict) else None
    if result_code != _SUCCESS_CODE:
        raise RegistryError(f"registry resultCode={result_code}")

    body_node = response.get("body")
    items = body_node.get("items") if isinstance(body_node, dict) else None
    if not isinstance(items, dict):
        return []
    item = items.get("item")
    if not item:
        return []
    if isinstance(item, dict):
        return [item]
    return [entry for entry in item if isinstance(entry, dict)]
