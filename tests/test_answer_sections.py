from pharmtalk.etl import answer_sections


def test_bracket_sections_with_preamble():
    content = (
        "안녕하세요, 약사입니다.\n"
        "[요약]\n같이 드셔도 괜찮습니다.\n"
        "[주의사항]\n음주는 피해주세요.\n"
        "[권장사항] 식후에 드세요."
    )

    sections = answer_sections.parse_sections(content)

    assert [(s.title, s.kind) for s in sections] == [
        ("", "default"),
        ("요약", "summary"),
        ("주의사항", "warning"),
        ("권장사항", "guide"),
    ]
    assert sections[0].body == "안녕하세요, 약사입니다."
    assert sections[1].body == "같이 드셔도 괜찮습니다."
    assert sections[3].body == "식후에 드세요."


def test_markdown_style_headers():
    content = "## 답변\n드셔도 됩니다.\n\n**참고**\n약국에 문의하세요."

    sections = answer_sections.parse_sections(content)

    assert [(s.title, s.kind, s.body) for s in sections] == [
        ("답변", "answer", "드셔도 됩니다."),
        ("참고", "info", "약국에 문의하세요."),
    ]


def test_section_kind_defaults():
    assert answer_sections.section_kind("상세 설명") == "default"
    assert answer_sections.section_kind("부작용 안내") == "warning"
    assert answer_sections.section_kind("복용법") == "guide"


def test_plain_text_blocks():
    content = "식후에 드세요.\n\n- 하루 3회\n· 물과 함께\n\n부작용이 있으면 중단하세요."

    assert answer_sections.parse_sections(content) == []
    blocks = answer_sections.parse_blocks(content)

    assert [block.kind for block in blocks] == ["paragraph", "list", "warning"]
    assert blocks[1].items == ["하루 3회", "물과 함께"]


def test_single_paragraph_is_kept_whole():
    blocks = answer_sections.parse_blocks("주의해서 드세요.")

    assert len(blocks) == 1
    assert blocks[0].kind == "paragraph"
    assert blocks[0].text == "주의해서 드세요."
    assert answer_sections.parse_blocks("   ") == []


def test_build_report_shapes():
    with_sections = answer_sections.build_report("[요약]\n괜찮습니다.")
    assert with_sections["sections"] == [{"title": "요약", "body": "괜찮습니다.", "kind": "summary"}]
    assert with_sections["blocks"] == []

    without_sections = answer_sections.build_report("괜찮습니다.")
    assert without_sections["sections"] == []
    assert without_sections["blocks"][0]["kind"] == "paragraph"
