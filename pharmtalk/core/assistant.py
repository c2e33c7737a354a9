"""LLM-backed helpers: medication photo extraction and consultation writing aids."""

import logging
from datetime import date
from typing import List, Optional, Tuple

from pharmtalk.core.config import Settings
from pharmtalk.etl.llm_output import parse_medications, split_suggestion, strip_markdown
from pharmtalk.models import ChatMessage, HealthProfile, Medication, MedicationSnapshot
from pharmtalk.prompts.consult import get_consult_system_prompt
from pharmtalk.prompts.image_analysis import build_image_messages
from pharmtalk.prompts.pharmacist import (
    get_patient_context,
    get_pharmacist_system_prompt,
    get_pharmacist_user_content,
)
from pharmtalk.vendors import openrouter

logger = logging.getLogger(__name__)


def _complete(settings: Settings, messages, *, max_tokens: int, temperature: Optional[float] = None) -> str:
    return openrouter.chat_completion(
        messages,
        api_key=settings.openrouter_api_key,
        model=settings.openrouter_model,
        base_url=settings.openrouter_base_url,
        max_tokens=max_tokens,
        temperature=temperature,
    )


def analyze_image(image_data_url: str, settings: Settings) -> List[Medication]:
    content = _complete(settings, build_image_messages(image_data_url), max_tokens=1024)
    medications = parse_medications(content or "[]")
    logger.info("Image analysis extracted %d medications", len(medications))
    return medications


def consult_assist(
    messages: List[ChatMessage],
    consult_type: str,
    medications: List[MedicationSnapshot],
    profile: Optional[HealthProfile],
    settings: Settings,
    today: Optional[date] = None,
) -> Tuple[str, str]:
    """Return ``(message, suggested_content)`` for the next organizer turn."""
    system_prompt = get_consult_system_prompt(consult_type, medications, profile, today)
    chat = [{"role": "system", "content": system_prompt}]
    chat.extend({"role": message.role, "content": message.content} for message in messages)

    raw = _complete(settings, chat, max_tokens=512, temperature=0.7)
    return split_suggestion(strip_markdown(raw))


def pharmacist_assist(
    *,
    mode: str,
    consult_type: str,
    question: str,
    medications: List[MedicationSnapshot],
    health: Optional[HealthProfile],
    settings: Settings,
    draft: str = "",
    followup_question: str = "",
    previous_answer: str = "",
    today: Optional[date] = None,
) -> str:
    patient_context = get_patient_context(medications, health, today)
    chat = [
        {"role": "system", "content": get_pharmacist_system_prompt(mode, consult_type, patient_context)},
        {
            "role": "user",
            "content": get_pharmacist_user_content(
                mode,
                question,
                draft=draft,
                followup_question=followup_question,
                previous_answer=previous_answer,
            ),
        },
    ]
    raw = _complete(settings, chat, max_tokens=1024, temperature=0.5)
    return strip_markdown(raw, strip_lists=True)
