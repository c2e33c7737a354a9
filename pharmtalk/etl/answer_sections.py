"""Split a pharmacist's answer into titled sections for display.

Answers are written with ``[제목]`` section headers (the drafting prompts ask
for that form), but pharmacists also type ``## 제목`` or ``**제목**`` by hand.
Answers with no headers at all are broken into paragraph blocks instead.
"""

import re
from typing import Any, Dict, List

from pharmtalk.models import AnswerBlock, AnswerSection

_BRACKET_HEADER = re.compile(r"^[ \t]*\[(.+?)\][ \t]*(.*)$", re.MULTILINE)
_LINE_HEADER = re.compile(r"^[ \t]*(?:#{1,3}[ \t]+(.+?)|\*\*(.+?)\*\*)[ \t]*$", re.MULTILINE)
_PARAGRAPH_BREAK = re.compile(r"\n\n+")
_BULLET_PREFIX = re.compile(r"^[-·•]\s*")

SECTION_KINDS = (
    ("답변", "answer"),
    ("요약", "summary"),
    ("주의", "warning"),
    ("금기", "warning"),
    ("부작용", "warning"),
    ("복용법", "guide"),
    ("권장", "guide"),
    ("추천", "guide"),
    ("참고", "info"),
)
WARNING_KEYWORDS = ("주의", "금기", "부작용")


def section_kind(title: str) -> str:
    for keyword, kind in SECTION_KINDS:
        if keyword in title:
            return kind
    return "default"


def _find_headers(content: str) -> List[Dict[str, Any]]:
    headers = []
    for match in _BRACKET_HEADER.finditer(content):
        headers.append(
            {
                "title": match.group(1).strip(),
                "start": match.start(),
                "body_start": match.start(2),
            }
        )
    for match in _LINE_HEADER.finditer(content):
        headers.append(
            {
                "title": (match.group(1) or match.group(2)).strip(),
                "start": match.start(),
                "body_start": match.end(),
            }
        )
    headers.sort(key=lambda header: header["start"])
    return headers


def parse_sections(content: str) -> List[AnswerSection]:
    """Return titled sections; an empty list when the text has no headers."""
    headers = _find_headers(content)
    if not headers:
        return []

    sections: List[AnswerSection] = []
    preamble = content[: headers[0]["start"]].strip()
    if preamble:
        sections.append(AnswerSection(title="", body=preamble, kind="default"))

    for index, header in enumerate(headers):
        end = headers[index + 1]["start"] if index + 1 < len(headers) else len(content)
        body = content[header["body_start"]:end].strip()
        sections.append(AnswerSection(title=header["title"], body=body, kind=section_kind(header["title"])))
    return sections


def parse_blocks(content: str) -> List[AnswerBlock]:
    paragraphs = [paragraph for paragraph in _PARAGRAPH_BREAK.split(content) if paragraph.strip()]
    if len(paragraphs) <= 1:
        return [AnswerBlock(kind="paragraph", text=content)] if content.strip() else []

    blocks: List[AnswerBlock] = []
    for paragraph in paragraphs:
        lines = [line.strip() for line in paragraph.split("\n") if line.strip()]
        if len(lines) > 1 and all(_BULLET_PREFIX.match(line) for line in lines):
            items = [_BULLET_PREFIX.sub("", line) for line in lines]
            blocks.append(AnswerBlock(kind="list", items=items))
        elif any(keyword in paragraph for keyword in WARNING_KEYWORDS):
            blocks.append(AnswerBlock(kind="warning", text=paragraph))
        else:
            blocks.append(AnswerBlock(kind="paragraph", text=paragraph))
    return blocks


def build_report(content: str) -> Dict[str, Any]:
    sections = parse_sections(content)
    if sections:
        return {"sections": [section.to_dict() for section in sections], "blocks": []}
    return {"sections": [], "blocks": [block.to_dict() for block in parse_blocks(content)]}
