"""Client utilities for the Naver local search API."""

import logging
from typing import Any, Dict, List

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://openapi.naver.com/v1/search/local.json"


class NaverSearchError(RuntimeError):
    """Raised when the local search API cannot be reached."""


def search_local(
    query: str,
    client_id: str,
    client_secret: str,
    display: int = 5,
    sort: str = "comment",
) -> List[Dict[str, Any]]:
    """Return the raw ``items`` for a text query.

    A non-success HTTP status yields an empty list; transport failures raise
    :class:`NaverSearchError`.
    """
    params = {"query": query, "display": display, "sort": sort}
    headers = {
        "X-Naver-Client-Id": client_id,
        "X-Naver-Client-Secret": client_secret,
    }
    try:
        response = _SESSION.get(_BASE_URL, params=params, headers=headers, timeout=10)
    except requests.RequestException as exc:
        logger.error("search_local failed for query=%s: %s", query, exc)
        raise NaverSearchError(str(exc)) from exc

    if not response.ok:
        logger.warning("search_local non-success: status=%s query=%s", response.status_code, query)
        return []

    try:
        payload = response.json()
    except ValueError as exc:
        raise NaverSearchError(f"invalid JSON from local search: {exc}") from exc

    items = payload.get("items") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]
