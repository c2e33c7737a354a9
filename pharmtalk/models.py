"""Core data models shared by the pharmacy search and assistant endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class OpenStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class MedicationType(str, Enum):
    MEDICINE = "medicine"
    SUPPLEMENT = "supplement"


@dataclass(frozen=True, slots=True)
class Coordinate:
    """WGS-84 point in decimal degrees."""

    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class AreaDescriptor:
    """Coarse administrative area resolved from a coordinate."""

    neighborhood: str = ""
    district: str = ""
    city: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.neighborhood or self.district)


@dataclass(slots=True)
class CandidateRecord:
    """Pharmacy returned by the local-business search, before enrichment."""

    title: str
    category: str = ""
    description: str = ""
    telephone: str = ""
    address: str = ""
    road_address: str = ""
    mapx: str = ""
    mapy: str = ""
    link: str = ""

    @property
    def dedup_key(self) -> str:
        return (self.road_address or self.address).strip()


@dataclass(slots=True)
class RegistryRecord:
    """Authoritative registry entry with weekly opening hours.

    ``hours`` maps the registry weekday key (1=Monday .. 7=Sunday, 8=holiday)
    to a raw ``(start, end)`` pair of HHMM strings; either side may be None.
    """

    name: str
    address: str = ""
    phone: str = ""
    hours: Dict[int, Tuple[Optional[str], Optional[str]]] = field(default_factory=dict)
    lat: Optional[float] = None
    lng: Optional[float] = None


@dataclass(frozen=True, slots=True)
class OpeningStatus:
    open_status: OpenStatus
    open_label: str
    today_hours: str
    is_24h: bool = False


@dataclass(frozen=True, slots=True)
class PharmacyResult:
    name: str
    address: str
    road_address: str
    phone: str
    distance_meters: int
    lat: float
    lng: float
    external_link: str
    category: str
    is_24h: bool
    open_status: OpenStatus
    open_label: str
    today_hours: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "address": self.address,
            "roadAddress": self.road_address,
            "phone": self.phone,
            "distance": self.distance_meters,
            "lat": self.lat,
            "lng": self.lng,
            "naverLink": self.external_link,
            "category": self.category,
            "is24h": self.is_24h,
            "openStatus": self.open_status.value,
            "openLabel": self.open_label,
            "todayHours": self.today_hours,
        }


@dataclass(slots=True)
class SearchResponse:
    pharmacies: List[PharmacyResult]
    has_real_hours: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pharmacies": [pharmacy.to_dict() for pharmacy in self.pharmacies],
            "hasRealHours": self.has_real_hours,
        }


@dataclass(slots=True)
class Medication:
    name: str
    type: MedicationType = MedicationType.MEDICINE
    dosage: str = ""
    frequency: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "type": self.type.value,
            "dosage": self.dosage,
            "frequency": self.frequency,
        }


@dataclass(slots=True)
class MedicationSnapshot:
    name: str
    type: str = MedicationType.MEDICINE.value
    dosage: Optional[str] = None


@dataclass(slots=True)
class HealthProfile:
    gender: Optional[str] = None
    birth_date: Optional[str] = None
    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None
    conditions: List[str] = field(default_factory=list)
    allergies: List[str] = field(default_factory=list)
    pregnancy_status: Optional[str] = None


@dataclass(slots=True)
class ChatMessage:
    role: str
    content: str


@dataclass(slots=True)
class AnswerBlock:
    """Untitled chunk of an answer: a paragraph, a bullet list or a warning."""

    kind: str
    text: str = ""
    items: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "text": self.text, "items": list(self.items)}


@dataclass(slots=True)
class AnswerSection:
    title: str
    body: str
    kind: str = "default"

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "body": self.body, "kind": self.kind}
