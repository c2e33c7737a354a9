"""Prompt for extracting medications and supplements from a photo."""

from typing import Any, Dict, List

IMAGE_ANALYSIS_PROMPT = """이 이미지에서 약 또는 영양제 정보를 추출해주세요.
처방전, 약 봉투, 약 상자, 영양제 병, 영양제 패키지 등에서 제품명과 복용법을 찾아주세요.

반드시 아래 JSON 형식으로만 답변해주세요. 다른 텍스트는 포함하지 마세요:
[
  {
    "name": "제품명 (용량 포함)",
    "type": "medicine 또는 supplement (처방약/일반약이면 medicine, 비타민/오메가3/유산균/영양보충제이면 supplement)",
    "dosage": "복용량 (예: 1정, 2캡슐)",
    "frequency": "복용 주기 (예: 매일 1회, 매일 2회, 매일 3회, 필요시, 주 1회, 주 2~3회)"
  }
]

약이나 영양제 정보를 찾을 수 없는 경우 빈 배열 []을 반환해주세요."""


def build_image_messages(image_data_url: str) -> List[Dict[str, Any]]:
    """Build a single multimodal user message carrying the prompt and the image."""
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": IMAGE_ANALYSIS_PROMPT},
                {"type": "image_url", "image_url": {"url": image_data_url}},
            ],
        }
    ]
