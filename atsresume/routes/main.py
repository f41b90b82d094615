# atsresume/routes/main.py
from __future__ import annotations

from datetime import datetime

from flask import Blueprint, render_template, jsonify, current_app

from ..services.renderer import TEMPLATES, DEFAULT_TEMPLATE

main_bp = Blueprint("main", __name__)

@main_bp.get("/")
def index():
    return jsonify(
        status="ATS Resume Builder backend is running!",
        timestamp=datetime.utcnow().isoformat(),
        env=current_app.config.get("ENV_NAME", "production"),
    )

@main_bp.get("/health")
def health():
    return jsonify(
        status="Server is running!",
        timestamp=datetime.utcnow().isoformat(),
        aiConfigured=current_app.config.get("OPENAI_CLIENT") is not None,
    )

@main_bp.get("/app")
def single_page():
    cfg = current_app.config
    return render_template(
        "index.html",
        templates=list(TEMPLATES.values()),
        default_template=DEFAULT_TEMPLATE,
        max_upload_mb=cfg["MAX_UPLOAD_MB"],
        jd_min_chars=cfg["JOB_DESCRIPTION_MIN_CHARS"],
    )
