# atsresume/routes/resumes.py
from __future__ import annotations

import time
from datetime import datetime

from flask import Blueprint, request, jsonify, current_app, make_response, send_file
from werkzeug.utils import secure_filename

from ..services.extractor import (
    ExtractionError, FileTooLargeError, UnsupportedFileError,
    extract_text, file_kind, spooled_upload,
)
from ..services.ai import optimize_resume
from ..services.parser import STRATEGIES, extract_contact_info, parse_resume
from ..services.renderer import (
    TEMPLATES, render_docx, render_html, render_pdf, render_plaintext, resolve_template,
)

resumes_bp = Blueprint("resumes", __name__, url_prefix="/resume")

_STARTED = time.monotonic()
RENDER_FORMATS = ("html", "pdf", "docx", "txt")
DOCX_MIMETYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# ---------- small helpers only used by routes ----------
def _text_field(data: dict, key: str) -> str:
    val = data.get(key)
    return val.strip() if isinstance(val, str) else ""

def _strategy_or_none(data: dict):
    strategy = (data.get("strategy") or "").strip().lower() or None
    if strategy and strategy not in STRATEGIES:
        return None, (jsonify(error="bad_strategy",
                              message=f"Unknown strategy. Use one of: {', '.join(STRATEGIES)}."), 400)
    return strategy, None

def _run_optimize(rerun: bool):
    data = request.get_json(silent=True) or {}
    resume_text = _text_field(data, "resumeText")
    job_description = _text_field(data, "jobDescription")

    if not resume_text or not job_description:
        return jsonify(error="bad_request", message="resumeText and jobDescription required"), 400
    min_chars = current_app.config["JOB_DESCRIPTION_MIN_CHARS"]
    if len(job_description) < min_chars:
        return jsonify(
            error="job_description_too_short",
            message="Job description seems too short. Please provide a more detailed description.",
        ), 400

    current_app.logger.info(
        "%s resume, text length: %d", "Re-optimizing (user request)" if rerun else "Optimizing", len(resume_text)
    )
    try:
        result = optimize_resume(resume_text, job_description)
    except Exception:
        current_app.logger.exception("Optimization error")
        return jsonify(error="ai_error", message="Optimization failed. Please try again."), 502
    return jsonify(result.as_dict())

# ========== ROUTES ==========

# 1) Upload & text extraction
@resumes_bp.post("/upload")
def upload_resume():
    cfg = current_app.config
    f = request.files.get("resume")
    if f is None or not f.filename:
        return jsonify(error="no_file", message="No file uploaded"), 400

    current_app.logger.info("Processing file: name=%s mimetype=%s", f.filename, f.mimetype)
    if f.mimetype not in cfg["ALLOWED_MIMETYPES"]:
        return jsonify(
            error="bad_type",
            message=f"Invalid file type: {f.mimetype}. Please upload PDF, DOC, or DOCX files only.",
        ), 400

    filename = secure_filename(f.filename)
    try:
        kind = file_kind(filename, f.mimetype, cfg["ALLOWED_MIMETYPES"])
        with spooled_upload(f.stream, cfg["MAX_UPLOAD_BYTES"], suffix=f".{kind}") as (path, size):
            text = extract_text(path, kind)
    except UnsupportedFileError as e:
        return jsonify(error="bad_type", message=str(e)), 400
    except FileTooLargeError as e:
        return jsonify(error="too_large", message=str(e)), 400
    except ExtractionError as e:
        current_app.logger.warning("Extraction failed for %s: %s", filename, e)
        return jsonify(error="extraction_failed", message=str(e)), 400
    except Exception:
        current_app.logger.exception("Unhandled error in /resume/upload")
        return jsonify(error="server_error", message="Error processing resume"), 500

    if len(text.strip()) < cfg["MIN_EXTRACTED_CHARS"]:
        current_app.logger.info("Insufficient text extracted from %s", filename)
        return jsonify(
            error="insufficient_text",
            message="Could not extract readable text from the file. Please ensure your resume contains text content.",
        ), 400

    current_app.logger.info("Upload completed: %s (%d bytes, %d chars)", filename, size, len(text))
    return jsonify(textContent=text, filename=filename, size=size)

# 2) AI optimize (first run and explicit user re-run)
@resumes_bp.post("/optimize")
def optimize():
    return _run_optimize(rerun=False)

@resumes_bp.post("/optimize/rerun")
def optimize_rerun():
    return _run_optimize(rerun=True)

# 3) Parse resume text into header/sections
@resumes_bp.post("/parse")
def parse():
    data = request.get_json(silent=True) or {}
    strategy, err = _strategy_or_none(data)
    if err:
        return err
    parsed = parse_resume(_text_field(data, "resumeText"),
                          strategy or current_app.config["PARSER_STRATEGY"])
    out = parsed.as_dict()
    out["contact"] = extract_contact_info(parsed.header).as_dict()
    return jsonify(out)

# 4) Template render → HTML/PDF/DOCX/TXT
@resumes_bp.post("/render")
def render():
    data = request.get_json(silent=True) or {}
    text = _text_field(data, "resumeText")
    fmt = (data.get("format") or "html").strip().lower()
    if not text:
        return jsonify(error="bad_request", message="resumeText required"), 400
    if fmt not in RENDER_FORMATS:
        return jsonify(error="bad_format", message=f"Unsupported format. Use one of: {', '.join(RENDER_FORMATS)}."), 400
    strategy, err = _strategy_or_none(data)
    if err:
        return err

    tpl = resolve_template(data.get("template"))
    stamp = datetime.utcnow().strftime("%Y-%m-%d")

    if fmt == "docx":
        return send_file(render_docx(text, strategy), mimetype=DOCX_MIMETYPE,
                         as_attachment=True, download_name=f"optimized-resume-{stamp}.docx")
    if fmt == "txt":
        resp = make_response(render_plaintext(text, strategy))
        resp.headers["Content-Type"] = "text/plain; charset=utf-8"
        resp.headers["Content-Disposition"] = f"attachment; filename=optimized-resume-{stamp}.txt"
        return resp

    html = render_html(text, tpl.id, strategy, for_pdf=(fmt == "pdf"))
    if fmt == "pdf":
        try:
            pdf_bytes = render_pdf(html)
        except Exception:
            current_app.logger.exception("Resume PDF failed")
            return jsonify(error="pdf_failed", message="PDF generation failed"), 500
        resp = make_response(pdf_bytes)
        resp.headers["Content-Type"] = "application/pdf"
        resp.headers["Content-Disposition"] = f"inline; filename=optimized-resume-{stamp}.pdf"
        return resp

    resp = make_response(html)
    resp.headers["Content-Type"] = "text/html; charset=utf-8"
    resp.headers["X-Resume-Template"] = tpl.id
    return resp

# 5) Template catalog
@resumes_bp.get("/templates")
def templates():
    return jsonify(templates=[t.as_dict() for t in TEMPLATES.values()])

@resumes_bp.get("/test")
def test():
    return jsonify(message="Resume routes working!")

@resumes_bp.get("/health")
def health():
    return jsonify(
        status="Resume service healthy",
        timestamp=datetime.utcnow().isoformat(),
        uptime=round(time.monotonic() - _STARTED, 3),
    )
