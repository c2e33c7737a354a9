"""Nearby pharmacy search: local search results merged with registry opening hours.

The pipeline is a pure function of the request coordinate and three injected
callables (local search, reverse geocoding, registry fetch) so tests can
replace every upstream service.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from pharmtalk.core.geo import haversine_meters, is_valid_coordinate
from pharmtalk.core.hours import estimate_status, has_24h_marker, kst_now, registry_status
from pharmtalk.core.location import GeocodeFn, resolve_area
from pharmtalk.etl.transform import (
    candidate_coordinate,
    normalize_name,
    strip_markup,
    to_candidate,
    to_registry_record,
)
from pharmtalk.models import (
    AreaDescriptor,
    CandidateRecord,
    Coordinate,
    PharmacyResult,
    RegistryRecord,
    SearchResponse,
)

logger = logging.getLogger(__name__)

TARGET_CATEGORY = "약국"
FALLBACK_QUERY = "내주변 약국"
MAX_DISTANCE_METERS = 5000.0

SearchFn = Callable[[str], List[Dict[str, Any]]]
RegistryFn = Callable[[float, float], List[Dict[str, Any]]]


def build_queries(area: AreaDescriptor) -> List[str]:
    """Query strings from most to least specific."""
    queries: List[str] = []
    if area.neighborhood and area.district:
        queries.append(f"{area.district} {area.neighborhood} 약국")
    if area.neighborhood:
        queries.append(f"{area.neighborhood} 약국")
    if area.district:
        queries.append(f"{area.district} 약국")
    if area.neighborhood:
        queries.append(f"{area.neighborhood} 근처 약국")
    if not queries:
        queries.append(FALLBACK_QUERY)
    return queries


def aggregate_candidates(area: AreaDescriptor, search: SearchFn) -> List[CandidateRecord]:
    """Run every query in order and keep the first pharmacy seen per address."""
    candidates: List[CandidateRecord] = []
    seen = set()

    for query in build_queries(area):
        items = search(query)
        logger.info("Local search query=%s returned %d items", query, len(items))
        for item in items:
            candidate = to_candidate(item)
            if TARGET_CATEGORY not in candidate.category:
                continue
            key = candidate.dedup_key
            if key and key not in seen:
                seen.add(key)
                candidates.append(candidate)

    return candidates


def load_registry(coordinate: Coordinate, fetch: Optional[RegistryFn]) -> List[RegistryRecord]:
    """Fetch registry records, degrading to an empty list on any failure."""
    if fetch is None:
        return []
    try:
        items = fetch(coordinate.lat, coordinate.lng)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Registry lookup failed, falling back to estimated hours: %s", exc)
        return []

    records = []
    for item in items:
        record = to_registry_record(item)
        if record is not None:
            records.append(record)
    return records


def build_registry_index(records: Iterable[RegistryRecord]) -> Dict[str, RegistryRecord]:
    return {normalize_name(record.name): record for record in records}


def evaluate_candidate(
    candidate: CandidateRecord,
    origin: Coordinate,
    registry_index: Dict[str, RegistryRecord],
    now_local: datetime,
    max_distance: float = MAX_DISTANCE_METERS,
) -> Optional[PharmacyResult]:
    lat, lng = candidate_coordinate(candidate)
    if lat is None or lng is None:
        logger.debug("Skipping candidate without coordinates: %s", candidate.title)
        return None

    # An unknown origin keeps every candidate at distance zero.
    distance = haversine_meters(origin.lat, origin.lng, lat, lng) if origin.lat and origin.lng else 0.0
    if distance > max_distance:
        return None

    name = strip_markup(candidate.title)
    marker_24h = has_24h_marker(name, candidate.category, candidate.description)

    matched = registry_index.get(normalize_name(name))
    if matched is not None:
        status = registry_status(matched, now_local)
        is_24h = status.is_24h or marker_24h
    else:
        status = estimate_status(marker_24h, now_local)
        is_24h = marker_24h

    return PharmacyResult(
        name=name,
        address=candidate.address,
        road_address=candidate.road_address,
        phone=candidate.telephone,
        distance_meters=round(distance),
        lat=lat,
        lng=lng,
        external_link=candidate.link,
        category=candidate.category,
        is_24h=is_24h,
        open_status=status.open_status,
        open_label=status.open_label,
        today_hours=status.today_hours,
    )


def evaluate_registry_only(
    record: RegistryRecord,
    origin: Coordinate,
    now_local: datetime,
    max_distance: float = MAX_DISTANCE_METERS,
) -> Optional[PharmacyResult]:
    if not record.lat or not record.lng or not is_valid_coordinate(record.lat, record.lng):
        return None

    distance = haversine_meters(origin.lat, origin.lng, record.lat, record.lng)
    if distance > max_distance:
        return None

    status = registry_status(record, now_local)
    return PharmacyResult(
        name=record.name,
        address=record.address,
        road_address=record.address,
        phone=record.phone,
        distance_meters=round(distance),
        lat=record.lat,
        lng=record.lng,
        external_link="",
        category=TARGET_CATEGORY,
        is_24h=status.is_24h or has_24h_marker(record.name),
        open_status=status.open_status,
        open_label=status.open_label,
        today_hours=status.today_hours,
    )


def search_pharmacies(
    coordinate: Coordinate,
    *,
    search: SearchFn,
    geocode: Optional[GeocodeFn] = None,
    registry_fetch: Optional[RegistryFn] = None,
    now: Optional[datetime] = None,
    max_distance: float = MAX_DISTANCE_METERS,
) -> SearchResponse:
    """Return nearby pharmacies sorted by distance.

    ``now`` is a KST wall-clock datetime; when omitted the current time is used.
    Errors raised by ``search`` propagate to the caller.
    """
    now_local = now if now is not None else kst_now()

    with ThreadPoolExecutor(max_workers=2) as executor:
        area_future = executor.submit(resolve_area, coordinate, geocode)
        registry_future = executor.submit(load_registry, coordinate, registry_fetch)
        area = area_future.result()
        registry = registry_future.result()

    registry_index = build_registry_index(registry)
    candidates = aggregate_candidates(area, search)
    logger.info("Collected %d candidates and %d registry records", len(candidates), len(registry))

    pharmacies: List[PharmacyResult] = []
    for candidate in candidates:
        result = evaluate_candidate(candidate, coordinate, registry_index, now_local, max_distance)
        if result is not None:
            pharmacies.append(result)

    if registry:
        existing = {normalize_name(pharmacy.name) for pharmacy in pharmacies}
        for record in registry:
            if normalize_name(record.name) in existing:
                continue
            result = evaluate_registry_only(record, coordinate, now_local, max_distance)
            if result is not None:
                pharmacies.append(result)

    pharmacies.sort(key=lambda pharmacy: pharmacy.distance_meters)
    return SearchResponse(pharmacies=pharmacies, has_real_hours=bool(registry))
