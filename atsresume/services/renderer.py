# atsresume/services/renderer.py
from __future__ import annotations

import re, logging
from dataclasses import dataclass
from io import BytesIO
from typing import Dict, List, Optional

from flask import current_app, render_template
import docx
from docx.shared import Pt

from .parser import ParsedResume, ResumeSection, extract_contact_info, parse_resume

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "professional"
SIDEBAR_KEYS = ("education", "skills", "contact")
BULLET_PREFIX = re.compile(r"^\s*(?:[•●▪◦‣]|[\-\*](?=\s))\s*")

PDF_CSS_OVERRIDES = """
@page { size: A4; margin: 0.75in; }
* { box-shadow: none !important; }
@media print {
  html, body { background: white !important; }
  .resume { box-shadow: none !important; }
  h1, h2, h3 { page-break-after: avoid; }
  ul.bullets { margin-top: 6px !important; }
}
"""


@dataclass(frozen=True)
class TemplateInfo:
    id: str
    name: str
    description: str
    layout: str

    def as_dict(self) -> dict:
        return dict(self.__dict__)


TEMPLATES: Dict[str, TemplateInfo] = {
    t.id: t for t in (
        TemplateInfo("professional", "Professional",
                     "Clean and modern design perfect for corporate roles", "single-column"),
        TemplateInfo("ivy-league", "Ivy League",
                     "Elegant academic style favored by top universities", "traditional"),
        TemplateInfo("modern-tech", "Modern Tech",
                     "Contemporary design ideal for tech and startup roles", "two-column"),
        TemplateInfo("creative", "Creative Pro",
                     "Distinctive design for creative and marketing professionals", "creative"),
    )
}


def resolve_template(template_id: Optional[str]) -> TemplateInfo:
    tpl = TEMPLATES.get((template_id or "").strip().lower())
    if tpl is None:
        if template_id:
            logger.info("Unknown template %r, falling back to %s", template_id, DEFAULT_TEMPLATE)
        tpl = TEMPLATES[DEFAULT_TEMPLATE]
    return tpl


def _strategy(strategy: Optional[str]) -> str:
    return strategy or current_app.config.get("PARSER_STRATEGY", "heuristic")


def _blocks(lines) -> List[dict]:
    """Group consecutive bullet lines into lists; everything else is a paragraph."""
    blocks: List[dict] = []
    for ln in lines:
        if BULLET_PREFIX.match(ln):
            item = BULLET_PREFIX.sub("", ln, count=1)
            if blocks and blocks[-1]["kind"] == "bullets":
                blocks[-1]["items"].append(item)
            else:
                blocks.append({"kind": "bullets", "items": [item]})
        else:
            blocks.append({"kind": "para", "text": ln})
    return blocks


def _section_ctx(s: ResumeSection) -> dict:
    return {"title": s.title, "key": s.key, "blocks": _blocks(s.content_lines)}


def build_context(parsed: ParsedResume, tpl: TemplateInfo) -> dict:
    sections = list(parsed.sections)
    sidebar: List[ResumeSection] = []
    if tpl.layout == "traditional":
        # education leads on academic layouts
        sections.sort(key=lambda s: 0 if s.key == "education" else 1)
    elif tpl.layout == "two-column":
        sidebar = [s for s in sections if s.key in SIDEBAR_KEYS]
        sections = [s for s in sections if s.key not in SIDEBAR_KEYS]
    return {
        "template": tpl,
        "header": parsed.header,
        "contact": extract_contact_info(parsed.header),
        "sections": [_section_ctx(s) for s in sections],
        "sidebar": [_section_ctx(s) for s in sidebar],
    }


def render_html(text: str, template_id: Optional[str] = None,
                strategy: Optional[str] = None, for_pdf: bool = False) -> str:
    tpl = resolve_template(template_id)
    parsed = parse_resume(text, _strategy(strategy))
    ctx = build_context(parsed, tpl)
    return render_template(f"resumes/{tpl.id}.html", for_pdf=for_pdf, **ctx)


def render_pdf(html: str) -> bytes:
    # WeasyPrint needs pango at import time; keep it off the import path of the app
    from weasyprint import HTML, CSS
    return HTML(string=html, base_url=current_app.root_path).write_pdf(
        stylesheets=[CSS(string=PDF_CSS_OVERRIDES)]
    )


def render_docx(text: str, strategy: Optional[str] = None) -> BytesIO:
    parsed = parse_resume(text, _strategy(strategy))
    doc = docx.Document()
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    if parsed.header.name:
        doc.add_heading(parsed.header.name, level=0)
    if parsed.header.contact_line:
        doc.add_paragraph(parsed.header.contact_line)
    for s in parsed.sections:
        doc.add_heading(s.title, level=1)
        for block in _blocks(s.content_lines):
            if block["kind"] == "bullets":
                for item in block["items"]:
                    doc.add_paragraph(item, style="List Bullet")
            else:
                doc.add_paragraph(block["text"])

    buf = BytesIO()
    doc.save(buf); buf.seek(0)
    return buf


def render_plaintext(text: str, strategy: Optional[str] = None) -> str:
    return parse_resume(text, _strategy(strategy)).to_text()
