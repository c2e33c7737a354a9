"""Patient-context fragments shared by the assistant prompts."""

from datetime import date
from typing import List, Optional

from pharmtalk.models import HealthProfile, MedicationSnapshot, MedicationType

NO_MEDICATIONS = "등록된 약 없음"
NO_PROFILE = "건강정보 미등록"


def gender_label(gender: Optional[str]) -> Optional[str]:
    if gender == "male":
        return "남성"
    if gender == "female":
        return "여성"
    return None


def age_from_birth_date(birth_date: Optional[str], today: Optional[date] = None) -> Optional[int]:
    """Age by calendar year difference."""
    if not birth_date:
        return None
    try:
        born = date.fromisoformat(birth_date[:10])
    except ValueError:
        return None
    today = today or date.today()
    return today.year - born.year


def medication_lines(medications: List[MedicationSnapshot], with_type: bool = False) -> str:
    if not medications:
        return NO_MEDICATIONS
    lines = []
    for medication in medications:
        line = f"- {medication.name}"
        if medication.dosage:
            line += f" ({medication.dosage})"
        if with_type:
            line += " [영양제]" if medication.type == MedicationType.SUPPLEMENT.value else " [의약품]"
        lines.append(line)
    return "\n".join(lines)


def profile_summary(profile: Optional[HealthProfile], today: Optional[date] = None) -> str:
    """One-line summary used by the question organizer."""
    if profile is None:
        return NO_PROFILE
    age = age_from_birth_date(profile.birth_date, today)
    parts = [
        gender_label(profile.gender),
        f"{age}세" if age is not None else None,
        f"기저질환: {', '.join(profile.conditions)}" if profile.conditions else None,
        f"알레르기: {', '.join(profile.allergies)}" if profile.allergies else None,
    ]
    summary = ", ".join(part for part in parts if part)
    return summary or NO_PROFILE


def health_details(profile: Optional[HealthProfile], today: Optional[date] = None) -> str:
    """Slash-separated details used by the pharmacist prompts."""
    parts: List[str] = []
    if profile is not None:
        if profile.gender:
            parts.append("남성" if profile.gender == "male" else "여성")
        age = age_from_birth_date(profile.birth_date, today)
        if age is not None:
            parts.append(f"{age}세")
        if profile.height_cm:
            parts.append(f"{_number(profile.height_cm)}cm")
        if profile.weight_kg:
            parts.append(f"{_number(profile.weight_kg)}kg")
        if profile.conditions:
            parts.append(f"기저질환: {', '.join(profile.conditions)}")
        if profile.allergies:
            parts.append(f"알레르기: {', '.join(profile.allergies)}")
        if profile.pregnancy_status == "pregnant":
            parts.append("임신 중")
        elif profile.pregnancy_status == "nursing":
            parts.append("수유 중")
    return " / ".join(parts) if parts else NO_PROFILE


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
