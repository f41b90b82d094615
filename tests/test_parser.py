# tests/test_parser.py
import pytest

from atsresume.services.parser import (
    ParsedResume, ResumeHeader, extract_contact_info, is_heuristic_header,
    is_keyword_header, parse_resume, section_key,
)


def test_concrete_scenario():
    parsed = parse_resume("JANE DOE\n555-1234\nEXPERIENCE\nDid X\nEDUCATION\nBS CS")
    assert parsed.header.name == "JANE DOE"
    assert parsed.header.as_dict()["name"] == "JANE DOE"
    assert parsed.header.contact_line == "555-1234"
    assert [s.as_dict() for s in parsed.sections] == [
        {"title": "EXPERIENCE", "contentLines": ["Did X"]},
        {"title": "EDUCATION", "contentLines": ["BS CS"]},
    ]


@pytest.mark.parametrize("text", ["", None, "   \n\n  \t"])
def test_empty_input_yields_empty_shape(text):
    parsed = parse_resume(text)
    assert parsed.as_dict() == {"header": {}, "sections": []}


def test_non_string_input_does_not_raise():
    assert parse_resume(12345).sections == ()


@pytest.mark.parametrize("line", ["AI", "• TEAM LEAD", "• REACT", "555-1234", "2024", "BS CS", "IT / HR", "- AWS LEAD", "Did X"])
def test_lines_that_are_not_headers(line):
    assert not is_heuristic_header(line)


@pytest.mark.parametrize("line", ["EXPERIENCE", "TEAM LEAD", "SKILLS & TOOLS", "WORK HISTORY (2019-2024)"])
def test_lines_that_are_headers(line):
    assert is_heuristic_header(line)


def test_acronym_and_bullet_lines_stay_in_section():
    text = "Jane\nEXPERIENCE\nAI\n• TEAM LEAD\nShipped things"
    parsed = parse_resume(text)
    assert parsed.titles == ["EXPERIENCE"]
    assert parsed.sections[0].content_lines == ("AI", "• TEAM LEAD", "Shipped things")


def test_all_caps_line_always_opens_section():
    text = "Name\nContact\nLocation\nSUMMARY\nText\nLEADERSHIP\nMore"
    parsed = parse_resume(text)
    assert parsed.titles == ["SUMMARY", "LEADERSHIP"]


def test_content_before_first_section_is_dropped():
    text = "Name\nphone\nemail\nstray line one\nstray line two\nSKILLS\nPython"
    parsed = parse_resume(text)
    assert parsed.titles == ["SKILLS"]
    assert parsed.sections[0].content_lines == ("Python",)
    assert "stray" not in parsed.to_text()


def test_header_takes_at_most_two_contact_lines():
    parsed = parse_resume("Name\nline a\nline b\nline c\nSKILLS\nx")
    assert parsed.header.contact_lines == ("line a", "line b")
    assert parsed.header.contact_line == "line a | line b"


def test_order_and_blank_lines():
    text = "Name\n\nmail\n\nPROJECTS\n\n  Thing one  \nEXPERIENCE\nJob\nEDUCATION\n"
    parsed = parse_resume(text)
    assert parsed.titles == ["PROJECTS", "EXPERIENCE", "EDUCATION"]
    assert parsed.sections[0].content_lines == ("Thing one",)
    assert parsed.sections[2].content_lines == ()


def test_every_section_has_title():
    text = "A\nB\nC\nONE\nx\nTWO\nTHREE\ny"
    assert all(s.title for s in parse_resume(text).sections)


@pytest.mark.parametrize("strategy", ["heuristic", "keyword", "combined"])
def test_reparse_of_reconstruction_is_stable(strategy):
    text = (
        "Jane Doe\njane@x.io\n\nWORK EXPERIENCE\n• Led team\nNotes\n"
        "Skills\nPython, SQL\nEDUCATION\nBS CS\nPROJECTS\nThing"
    )
    first = parse_resume(text, strategy)
    second = parse_resume(first.to_text(), strategy)
    assert second.titles == first.titles
    assert second == first


def test_result_is_immutable():
    parsed = parse_resume("A\nSKILLS\nx")
    assert isinstance(parsed, ParsedResume)
    with pytest.raises(AttributeError):
        parsed.sections = ()


def test_unknown_strategy_rejected():
    with pytest.raises(ValueError):
        parse_resume("x", "fuzzy")


# ---------- keyword strategy ----------
def test_keyword_strategy_ignores_capitalized_non_header():
    text = "Jane Doe\njane@x.io\nEXPERIENCE\nACME CORP\nDid things\nTechnical Skills\nPython"
    assert parse_resume(text, "heuristic").titles == ["EXPERIENCE", "ACME CORP"]
    assert parse_resume(text, "keyword").titles == ["EXPERIENCE", "Technical Skills"]
    assert parse_resume(text, "combined").titles == ["EXPERIENCE", "ACME CORP", "Technical Skills"]


@pytest.mark.parametrize("line, expected", [
    ("Work Experience", True),
    ("Education:", True),
    ("CORE COMPETENCIES", True),
    ("PROFESSIONAL EXPERIENCE & LEADERSHIP", True),
    ("Experience with mobile development", False),
    ("• SKILLS", False),
    ("Hobbies", False),
])
def test_keyword_header(line, expected):
    assert is_keyword_header(line) is expected


def test_section_key_aliases():
    assert section_key("Professional Experience") == "experience"
    assert section_key("ACADEMIC BACKGROUND") == "education"
    assert section_key("Key Projects") == "projects"
    assert section_key("Hobbies") is None


# ---------- contact extraction ----------
def test_extract_contact_info_from_header():
    header = ResumeHeader(
        name="Jane Doe",
        contact_lines=("Backend Engineer", "jane@example.com | 555-123-4567 | linkedin.com/in/jane | github.com/jane"),
    )
    info = extract_contact_info(header)
    assert info.name == "Jane Doe"
    assert info.title == "Backend Engineer"
    assert info.email == "jane@example.com"
    assert info.phone == "555-123-4567"
    assert info.linkedin == "linkedin.com/in/jane"
    assert info.github == "github.com/jane"


def test_extract_contact_info_from_lines():
    info = extract_contact_info(["John Smith", "Austin, TX", "Data Analyst", "555-1234"])
    assert info.name == "John Smith"
    assert info.title == "Austin, TX"
    assert info.location == "Data Analyst"
    assert info.phone == "555-1234"


def test_extract_contact_info_empty():
    assert extract_contact_info(ResumeHeader()).as_dict()["name"] == ""
