# atsresume/services/ai.py
from __future__ import annotations

import re, json, math, logging
from dataclasses import dataclass, field
from typing import List, Optional

from flask import current_app

logger = logging.getLogger(__name__)

FALLBACK_KEYWORDS = ["Unable to analyze keywords"]

SYSTEM_PROMPT = """You are an assistant that rewrites resumes to be ATS-friendly.
- Keep real experience, don't invent jobs/dates.
- Use concise bullet points.
- Include keywords from the JD only where truthful.
- Return ONLY the optimized resume text. Do NOT include match score or missing keywords in the resume text.
- The resume should be clean, professional text without any JSON or metadata.
- Format the resume professionally with clear sections in ALL CAPS and proper spacing."""

ANALYSIS_PROMPT = """Analyze this resume against the job description and provide:
1. A match score (0-100) based on how well the resume aligns with the job requirements
2. Missing keywords that should be considered for inclusion
3. Up to 5 short, actionable suggestions

Job Description:
{jd}

Resume:
{resume}

Respond with ONLY a JSON object in this exact format (no markdown, no code blocks): {{"matchScore": number, "missingKeywords": ["keyword1", "keyword2"], "suggestions": ["..."]}}"""

_FENCED = re.compile(r"```(?:json)?\s*\n?([\s\S]*?)\n?```", re.I)
_OBJECT = re.compile(r"\{[\s\S]*\}")


@dataclass
class Analysis:
    match_score: Optional[int]
    missing_keywords: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    recovered: bool = True


@dataclass
class OptimizationResult:
    optimized_resume: str
    analysis: Analysis

    def as_dict(self) -> dict:
        return {
            "optimizedResume": self.optimized_resume,
            "matchScore": self.analysis.match_score,
            "missingKeywords": self.analysis.missing_keywords,
            "suggestions": self.analysis.suggestions,
        }


def call_ai(prompt: str, model: Optional[str] = None, system: Optional[str] = None) -> str:
    client = current_app.config["OPENAI_CLIENT"]
    messages = [{"role": "system", "content": system}] if system else []
    messages.append({"role": "user", "content": prompt})
    resp = client.chat.completions.create(
        model=model or current_app.config["OPENAI_MODEL"],
        messages=messages,
        temperature=current_app.config.get("OPENAI_TEMPERATURE", 0.3),
    )
    return (resp.choices[0].message.content or "").strip()


def extract_json(text: str) -> str:
    """Pull a JSON payload out of a raw, fenced or chatty model reply."""
    text = text or ""
    m = _FENCED.search(text)
    if m:
        return m.group(1).strip()
    m = _OBJECT.search(text)
    if m:
        return m.group(0).strip()
    return text.strip()


def _clamp_score(value) -> Optional[int]:
    if value is None:
        return None
    try:
        score = float(value)
    except (TypeError, ValueError):
        return None
    # json.loads accepts Infinity/NaN and 1e999
    if not math.isfinite(score):
        return None
    return max(0, min(100, int(round(score))))


def _as_str_list(value) -> List[str]:
    if isinstance(value, str):
        value = [s.strip() for s in re.split(r"[,\n]", value)]
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if str(v).strip()]


def _from_payload(js: dict) -> Analysis:
    return Analysis(
        match_score=_clamp_score(js.get("matchScore")),
        missing_keywords=_as_str_list(js.get("missingKeywords")),
        suggestions=_as_str_list(js.get("suggestions")),
    )


def _scan_for_object(text: str) -> Optional[dict]:
    """First decodable JSON object starting at any '{' in ``text``."""
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start >= 0:
        try:
            js, _ = decoder.raw_decode(text, start)
            if isinstance(js, dict):
                return js
        except ValueError:
            pass
        start = text.find("{", start + 1)
    return None


def parse_analysis(text: str, default_score: int = 75) -> Analysis:
    """
    Best-effort recovery of the analysis JSON. Two passes (fenced/first object,
    then a bare object scan); if both fail the hardcoded defaults are returned
    with ``recovered=False``. Never raises.
    """
    try:
        js = json.loads(extract_json(text))
        if isinstance(js, dict):
            return _from_payload(js)
    except ValueError as e:
        logger.warning("Analysis JSON parse error: %s", e)

    js = _scan_for_object(text or "")
    if js is not None:
        logger.info("Analysis parsed using fallback method")
        return _from_payload(js)

    logger.warning("Could not parse analysis, using defaults. Raw: %.200s", text)
    return Analysis(match_score=default_score, missing_keywords=list(FALLBACK_KEYWORDS), recovered=False)


def clean_resume_text(text: str) -> str:
    # models sometimes wrap the whole resume in a fence or a {"text": ...} object
    text = (text or "").strip()
    m = _FENCED.fullmatch(text)
    if m:
        text = m.group(1).strip()
    if text.startswith("{"):
        try:
            js = json.loads(text)
            if isinstance(js, dict):
                text = str(js.get("text") or js.get("content") or js.get("optimizedResume") or text)
        except ValueError:
            pass
    return text.strip()


def optimize_resume(resume_text: str, job_description: str) -> OptimizationResult:
    """Two sequential model calls: rewrite, then analysis. Client errors propagate."""
    optimize_prompt = (
        f"Job Description:\n{job_description}\n\n"
        f"Resume:\n{resume_text}\n\n"
        "Rewrite this resume to be ATS-friendly and tailored to the job description."
    )
    optimized = clean_resume_text(call_ai(optimize_prompt, system=SYSTEM_PROMPT))

    raw = call_ai(ANALYSIS_PROMPT.format(jd=job_description, resume=resume_text))
    analysis = parse_analysis(raw, default_score=current_app.config.get("DEFAULT_MATCH_SCORE", 75))
    logger.info(
        "Optimization complete - Match Score: %s, Missing Keywords: %d",
        analysis.match_score, len(analysis.missing_keywords),
    )
    return OptimizationResult(optimized_resume=optimized, analysis=analysis)
