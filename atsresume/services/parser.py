# atsresume/services/parser.py
"""
Resume text -> {header, sections} for template rendering.

Three header-detection strategies are available:

* ``heuristic``: a line is a section title when it is all caps
  (``str.isupper()``), longer than two characters, carries no bullet and has
  at least one word longer than two letters. The last rule keeps degree
  lines such as ``BS CS`` as content; the cost is that a title made only of
  short acronyms (``IT / HR``) never opens a section. Use ``keyword`` or
  ``combined`` for such resumes.
* ``keyword``: a line is a section title when it names one of the known
  sections (EXPERIENCE, EDUCATION, SKILLS, PROJECTS, CONTACT and aliases).
* ``combined``: keyword match first, heuristic as fallback.

Parsing never raises on bad input; ``None`` or blank text yields an empty result.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

BULLET_CHARS = ("•", "●", "▪", "◦", "‣")
LEADING_BULLET = re.compile(r"^[\-\*]\s+")
HEADER_CONTACT_LINES = 2
KEYWORD_HEADER_MAX_LEN = 40

SECTION_ALIASES: Dict[str, Tuple[str, ...]] = {
    "experience": ("EXPERIENCE", "WORK EXPERIENCE", "PROFESSIONAL EXPERIENCE", "EMPLOYMENT"),
    "education":  ("EDUCATION", "ACADEMIC BACKGROUND"),
    "skills":     ("SKILLS", "TECHNICAL SKILLS", "CORE COMPETENCIES"),
    "projects":   ("PROJECTS", "KEY PROJECTS"),
    "contact":    ("CONTACT", "CONTACT INFORMATION"),
}
_ALL_ALIASES = {a for aliases in SECTION_ALIASES.values() for a in aliases}

EMAIL_PAT = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.I)
PHONE_PAT = re.compile(r"\+?\d[\d\-\s().]{5,}\d")
WORD_PAT  = re.compile(r"[^\W\d_]+")


# ========= Types =========
@dataclass(frozen=True)
class ResumeSection:
    title: str
    content_lines: Tuple[str, ...] = ()

    @property
    def key(self) -> Optional[str]:
        return section_key(self.title)

    def as_dict(self) -> dict:
        return {"title": self.title, "contentLines": list(self.content_lines)}


@dataclass(frozen=True)
class ResumeHeader:
    name: str = ""
    contact_lines: Tuple[str, ...] = ()

    @property
    def contact_line(self) -> str:
        return " | ".join(self.contact_lines)

    @property
    def lines(self) -> Tuple[str, ...]:
        return ((self.name,) if self.name else ()) + self.contact_lines

    def as_dict(self) -> dict:
        if not self.name:
            return {}
        return {"name": self.name, "contactLine": self.contact_line}


@dataclass(frozen=True)
class ParsedResume:
    header: ResumeHeader = field(default_factory=ResumeHeader)
    sections: Tuple[ResumeSection, ...] = ()

    @property
    def titles(self) -> List[str]:
        return [s.title for s in self.sections]

    def section(self, key: str) -> Optional[ResumeSection]:
        """First section whose title maps to ``key`` (e.g. "education")."""
        return next((s for s in self.sections if s.key == key), None)

    def to_text(self) -> str:
        out = list(self.header.lines)
        for s in self.sections:
            out.append(s.title)
            out.extend(s.content_lines)
        return "\n".join(out)

    def as_dict(self) -> dict:
        return {"header": self.header.as_dict(), "sections": [s.as_dict() for s in self.sections]}


@dataclass(frozen=True)
class ContactInfo:
    name: str = ""
    title: str = ""
    phone: str = ""
    email: str = ""
    linkedin: str = ""
    github: str = ""
    location: str = ""

    def as_dict(self) -> dict:
        return dict(self.__dict__)


# ========= Line classifiers =========
def has_bullet(line: str) -> bool:
    s = (line or "").strip()
    return any(b in s for b in BULLET_CHARS) or bool(LEADING_BULLET.match(s))

def _longest_word(s: str) -> int:
    return max((len(w) for w in WORD_PAT.findall(s)), default=0)

def is_heuristic_header(line: str) -> bool:
    # isupper() also demands a cased letter, so "555-1234" or "2024" never qualify.
    # Lines made only of short acronyms ("AI", "BS CS") stay content.
    s = (line or "").strip()
    return s.isupper() and len(s) > 2 and not has_bullet(s) and _longest_word(s) > 2

def section_key(line: str) -> Optional[str]:
    upper = (line or "").strip().upper()
    for key, aliases in SECTION_ALIASES.items():
        if any(a in upper for a in aliases):
            return key
    return None

def is_keyword_header(line: str) -> bool:
    s = (line or "").strip()
    if not s or len(s) > KEYWORD_HEADER_MAX_LEN or has_bullet(s):
        return False
    upper = s.upper()
    bare = re.sub(r"[^A-Z ]+", " ", upper)
    bare = re.sub(r"\s+", " ", bare).strip()
    if bare in _ALL_ALIASES:
        return True
    # mixed-case sentences like "Experience with React" stay content
    return s.isupper() and section_key(s) is not None

def is_combined_header(line: str) -> bool:
    return is_keyword_header(line) or is_heuristic_header(line)

STRATEGIES: Dict[str, Callable[[str], bool]] = {
    "heuristic": is_heuristic_header,
    "keyword": is_keyword_header,
    "combined": is_combined_header,
}


# ========= Parser =========
def parse_resume(text: Optional[str], strategy: str = "heuristic") -> ParsedResume:
    try:
        is_header = STRATEGIES[strategy]
    except KeyError:
        raise ValueError(f"Unknown parser strategy: {strategy!r}") from None

    if not text or not isinstance(text, str):
        return ParsedResume()

    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
    if not lines:
        return ParsedResume()

    # name, then up to two contact lines; a section title ends the header early
    idx = 1
    while idx <= HEADER_CONTACT_LINES and idx < len(lines) and not is_header(lines[idx]):
        idx += 1
    header = ResumeHeader(name=lines[0], contact_lines=tuple(lines[1:idx]))

    sections: List[ResumeSection] = []
    title, body = None, []
    for ln in lines[idx:]:
        if is_header(ln):
            if title is not None:
                sections.append(ResumeSection(title, tuple(body)))
            title, body = ln, []
        elif title is not None:
            body.append(ln)
    if title is not None:
        sections.append(ResumeSection(title, tuple(body)))

    return ParsedResume(header=header, sections=tuple(sections))


def extract_contact_info(header: ResumeHeader | Iterable[str]) -> ContactInfo:
    """Classify header pieces into structured contact fields."""
    if isinstance(header, ResumeHeader):
        name, rest = header.name, list(header.contact_lines)
    else:
        lines = [ln.strip() for ln in header if ln and ln.strip()]
        name, rest = (lines[0] if lines else ""), lines[1:]

    found = {"name": name}
    pieces = [p.strip() for ln in rest for p in ln.split("|") if p.strip()]
    for piece in pieces:
        lower = piece.lower()
        if "@" in piece and "email" not in found:
            m = EMAIL_PAT.search(piece)
            found["email"] = m.group() if m else piece
        elif "linkedin" in lower and "linkedin" not in found:
            found["linkedin"] = piece
        elif "github" in lower and "github" not in found:
            found["github"] = piece
        elif PHONE_PAT.search(piece) and "phone" not in found:
            found["phone"] = piece
        elif "title" not in found:
            found["title"] = piece
        elif "location" not in found:
            found["location"] = piece
    return ContactInfo(**found)
