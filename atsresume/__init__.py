# atsresume/__init__.py
from __future__ import annotations
import logging
from datetime import datetime

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .config import get_config
from .extensions import init_openai
from .routes import register_routes

__version__ = "1.0.0"

def create_app(env: str | None = None, **overrides) -> Flask:
    app = Flask(__name__, static_folder="static", static_url_path="/static")
    app.config.from_object(get_config(env))
    app.config.update(overrides)

    # CORS & logging
    CORS(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)
    logging.basicConfig(level=logging.INFO)
    logging.getLogger("PyPDF2").setLevel(logging.ERROR)

    # Missing credential is the one fatal condition: halt before serving anything
    if "OPENAI_CLIENT" not in overrides:
        app.config["OPENAI_CLIENT"] = init_openai(app.config.get("OPENAI_API_KEY"))

    @app.before_request
    def _log_request():
        current = datetime.utcnow().isoformat()
        app.logger.info("%s - %s %s", current, request.method, request.path)

    # ---------- Blueprints ----------
    register_routes(app)

    @app.get("/healthz")
    def health():
        return {"ok": True, "ts": datetime.utcnow().isoformat()}

    # ---------- Error handlers ----------
    @app.errorhandler(404)
    def _eh_404(e):
        app.logger.warning("404 - Route not found: %s %s", request.method, request.path)
        return jsonify(
            error="not_found",
            message="Route not found",
            requestedUrl=request.path,
            method=request.method,
            availableRoutes=sorted(
                f"{','.join(sorted(r.methods - {'HEAD', 'OPTIONS'}))} {r.rule}"
                for r in app.url_map.iter_rules() if r.endpoint != "static"
            ),
        ), 404

    @app.errorhandler(413)
    def _eh_413(e):
        limit_mb = app.config["MAX_UPLOAD_MB"]
        return jsonify(error="too_large", message=f"File too large. Maximum size is {limit_mb}MB."), 400

    @app.errorhandler(Exception)
    def _eh_500(e):
        if isinstance(e, HTTPException):
            return e
        app.logger.exception("Unhandled server error")
        detail = str(e) if app.config.get("DEBUG") else "Something went wrong"
        return jsonify(error="server_error", message="Internal server error", detail=detail), 500

    app.logger.info(
        "ATS Resume Builder ready (env=%s, model=%s, max upload=%sMB)",
        app.config.get("ENV_NAME"), app.config.get("OPENAI_MODEL"), app.config.get("MAX_UPLOAD_MB"),
    )
    return app
