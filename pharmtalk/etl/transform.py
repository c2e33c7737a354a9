"""Utilities for transforming upstream API payloads into typed records."""

import logging
import math
import re
from typing import Any, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

from pharmtalk.core.geo import from_projected
from pharmtalk.models import (
    AreaDescriptor,
    CandidateRecord,
    ChatMessage,
    HealthProfile,
    MedicationSnapshot,
    MedicationType,
    RegistryRecord,
)

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_REGISTRY_DAYS = range(1, 9)
_CHAT_ROLES = ("user", "assistant")

# Nominatim field names, most specific first.
_NEIGHBORHOOD_FIELDS = ("neighbourhood", "quarter", "suburb")
_DISTRICT_FIELDS = ("city_district", "county")
_CITY_FIELDS = ("city", "town", "village")


def strip_markup(value: Any) -> str:
    """Drop HTML tags (search titles highlight matches with ``<b>``)."""
    text = _as_text(value)
    if "<" not in text:
        return text.strip()
    return BeautifulSoup(text, "html.parser").get_text().strip()


def normalize_name(name: Any) -> str:
    return _WHITESPACE.sub("", _as_text(name))


def to_candidate(item: Dict[str, Any]) -> CandidateRecord:
    return CandidateRecord(
        title=_as_text(item.get("title")),
        category=_as_text(item.get("category")),
        description=_as_text(item.get("description")),
        telephone=_as_text(item.get("telephone")),
        address=_as_text(item.get("address")),
        road_address=_as_text(item.get("roadAddress")),
        mapx=_as_text(item.get("mapx")),
        mapy=_as_text(item.get("mapy")),
        link=_as_text(item.get("link")),
    )


def candidate_coordinate(candidate: CandidateRecord) -> Tuple[Optional[float], Optional[float]]:
    """Return ``(lat, lng)`` for a search candidate."""
    return from_projected(candidate.mapy), from_projected(candidate.mapx)


def to_registry_record(item: Dict[str, Any]) -> Optional[RegistryRecord]:
    name = _as_text(item.get("dutyName")).strip()
    if not name:
        logger.debug("Skipping registry item without dutyName: %s", item)
        return None

    hours = {
        day: (_hhmm(item.get(f"dutyTime{day}s")), _hhmm(item.get(f"dutyTime{day}c")))
        for day in _REGISTRY_DAYS
    }
    return RegistryRecord(
        name=name,
        address=_as_text(item.get("dutyAddr")),
        phone=_as_text(item.get("dutyTel1")),
        hours=hours,
        lat=_safe_float(item.get("wgs84Lat")),
        lng=_safe_float(item.get("wgs84Lon")),
    )


def parse_area(address: Dict[str, Any]) -> AreaDescriptor:
    return AreaDescriptor(
        neighborhood=_first_field(address, _NEIGHBORHOOD_FIELDS),
        district=_first_field(address, _DISTRICT_FIELDS),
        city=_first_field(address, _CITY_FIELDS),
    )


def _first_field(address: Dict[str, Any], names: Tuple[str, ...]) -> str:
    for name in names:
        value = address.get(name)
        if value:
            return _as_text(value)
    return ""


def _hhmm(value: Any) -> Optional[str]:
    """Registry times arrive as ``"0900"`` or sometimes as the number ``900``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        value = str(int(value))
    text = str(value).strip()
    if not text.isdigit():
        return None
    return text.zfill(4)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None or value == "":
            return None
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def to_medication_snapshots(items: Any) -> List[MedicationSnapshot]:
    if not isinstance(items, list):
        return []
    snapshots = []
    for item in items:
        if not isinstance(item, dict) or not item.get("name"):
            continue
        snapshots.append(
            MedicationSnapshot(
                name=_as_text(item.get("name")),
                type=_as_text(item.get("type")) or MedicationType.MEDICINE.value,
                dosage=_as_text(item.get("dosage")) or None,
            )
        )
    return snapshots


def to_health_profile(data: Any) -> Optional[HealthProfile]:
    if not isinstance(data, dict):
        return None
    return HealthProfile(
        gender=_as_text(data.get("gender")) or None,
        birth_date=_as_text(data.get("birth_date")) or None,
        height_cm=_safe_float(data.get("height_cm")),
        weight_kg=_safe_float(data.get("weight_kg")),
        conditions=_text_list(data.get("conditions")),
        allergies=_text_list(data.get("allergies")),
        pregnancy_status=_as_text(data.get("pregnancy_status")) or None,
    )


def to_chat_messages(items: Any) -> List[ChatMessage]:
    if not isinstance(items, list):
        return []
    messages = []
    for item in items:
        if not isinstance(item, dict) or item.get("role") not in _CHAT_ROLES:
            continue
        messages.append(ChatMessage(role=item["role"], content=_as_text(item.get("content"))))
    return messages


def _text_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(entry) for entry in value if entry]
