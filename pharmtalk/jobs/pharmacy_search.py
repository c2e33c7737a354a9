"""Run the nearby pharmacy search against the live upstream services."""

import argparse
import json
import logging
from datetime import datetime
from functools import partial
from typing import Optional

from pharmtalk.core.config import Settings, get_settings
from pharmtalk.core.location import nominatim_geocoder
from pharmtalk.core.pharmacy_search import search_pharmacies
from pharmtalk.models import Coordinate, SearchResponse
from pharmtalk.vendors import naver_local, pharmacy_registry

logger = logging.getLogger(__name__)

REGISTRY_RADIUS_METERS = 3000
REGISTRY_ROWS = 30
RESULTS_PER_QUERY = 5


def run_pharmacy_search(
    *,
    lat: float,
    lng: float,
    settings: Optional[Settings] = None,
    now: Optional[datetime] = None,
) -> SearchResponse:
    settings = settings or get_settings()
    settings.require_search_credentials()

    search = partial(
        naver_local.search_local,
        client_id=settings.naver_client_id,
        client_secret=settings.naver_client_secret,
        display=RESULTS_PER_QUERY,
        sort="comment",
    )

    registry_fetch = None
    if settings.public_data_api_key:
        registry_fetch = partial(
            pharmacy_registry.fetch_nearby,
            service_key=settings.public_data_api_key,
            radius=REGISTRY_RADIUS_METERS,
            rows=REGISTRY_ROWS,
        )

    logger.info("Running pharmacy search for lat=%s lng=%s", lat, lng)
    response = search_pharmacies(
        Coordinate(lat=lat, lng=lng),
        search=search,
        geocode=nominatim_geocoder(settings.geocoder_user_agent),
        registry_fetch=registry_fetch,
        now=now,
        max_distance=settings.search_radius_meters,
    )
    logger.info(
        "Completed search: pharmacies=%d has_real_hours=%s", len(response.pharmacies), response.has_real_hours
    )
    return response


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search pharmacies near a coordinate")
    parser.add_argument("--lat", dest="lat", type=float, required=True, help="Latitude (WGS-84)")
    parser.add_argument("--lng", dest="lng", type=float, required=True, help="Longitude (WGS-84)")
    return parser


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args()

    response = run_pharmacy_search(lat=args.lat, lng=args.lng)
    print(json.dumps(response.to_dict(), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
