"""Post-processing for raw model output."""

import json
import logging
import re
from typing import Any, List, Tuple

from pharmtalk.models import Medication, MedicationType

logger = logging.getLogger(__name__)

_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"\*(.+?)\*")
_HEADING = re.compile(r"^#{1,4}\s+", re.MULTILINE)
_BULLET = re.compile(r"^[-*]\s+", re.MULTILINE)
_NUMBERED = re.compile(r"^\d+\.\s+", re.MULTILINE)
_INLINE_CODE = re.compile(r"`(.+?)`")
_CODE_FENCE_JSON = re.compile(r"```json\s*")
_CODE_FENCE = re.compile(r"```\s*")

SUGGESTION_START = "---제안---"
SUGGESTION_END = "---끝---"
_SUGGESTION_BLOCK = re.compile(re.escape(SUGGESTION_START) + r"([\s\S]*?)" + re.escape(SUGGESTION_END))


def strip_markdown(text: str, strip_lists: bool = False) -> str:
    """Remove emphasis, headings and inline code; optionally list markers too."""
    cleaned = _BOLD.sub(r"\1", text or "")
    cleaned = _ITALIC.sub(r"\1", cleaned)
    cleaned = _HEADING.sub("", cleaned)
    if strip_lists:
        cleaned = _BULLET.sub("", cleaned)
        cleaned = _NUMBERED.sub("", cleaned)
    cleaned = _INLINE_CODE.sub(r"\1", cleaned)
    return cleaned.strip()


def split_suggestion(text: str) -> Tuple[str, str]:
    """Return ``(message, suggested_content)`` for a consult-assist reply."""
    match = _SUGGESTION_BLOCK.search(text)
    if not match:
        return text.strip(), ""
    message = (text[: match.start()] + text[match.end():]).strip()
    return message, match.group(1).strip()


def parse_medications(content: str) -> List[Medication]:
    """Parse the extractor's JSON array; malformed output yields an empty list."""
    cleaned = _CODE_FENCE.sub("", _CODE_FENCE_JSON.sub("", content or "")).strip()
    try:
        parsed = json.loads(cleaned)
    except ValueError:
        logger.warning("Image analysis returned non-JSON content: %s", cleaned[:200])
        return []

    if not isinstance(parsed, list):
        return []

    medications = []
    for item in parsed:
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            continue
        medications.append(
            Medication(
                name=item["name"],
                type=_medication_type(item.get("type")),
                dosage=_text_or_empty(item.get("dosage")),
                frequency=_text_or_empty(item.get("frequency")),
            )
        )
    return medications


def _medication_type(value: Any) -> MedicationType:
    try:
        return MedicationType(value)
    except (TypeError, ValueError):
        return MedicationType.MEDICINE


def _text_or_empty(value: Any) -> str:
    if value is None:
        return ""
    return str(value)
