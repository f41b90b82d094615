# atsresume/config.py
from __future__ import annotations
import os

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173"

class Config:
    """Settings are read from the environment when the config is instantiated,
    so a ``.env`` loaded after import is still honoured."""
    ENV_NAME = "production"
    DEBUG = False

    ALLOWED_MIMETYPES = {
        "application/pdf": "pdf",
        "application/msword": "doc",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    }

    def __init__(self):
        env = os.environ.get

        # Flask
        self.SECRET_KEY = env("SECRET_KEY", "dev-key")

        # OpenAI
        self.OPENAI_API_KEY = env("OPENAI_API_KEY", "")
        self.OPENAI_MODEL = env("OPENAI_MODEL", "gpt-4o-mini")
        self.OPENAI_TEMPERATURE = float(env("OPENAI_TEMPERATURE", "0.3"))

        # Uploads (backend is source of truth; the UI mirrors these numbers)
        self.MAX_UPLOAD_MB = int(env("MAX_UPLOAD_MB", "10"))
        self.MAX_UPLOAD_BYTES = self.MAX_UPLOAD_MB * 1024 * 1024
        # small slack so multipart framing of a file right at the limit is not cut off by Flask
        self.MAX_CONTENT_LENGTH = self.MAX_UPLOAD_BYTES + 64 * 1024
        self.MIN_EXTRACTED_CHARS = int(env("MIN_EXTRACTED_CHARS", "10"))

        # Optimize
        self.JOB_DESCRIPTION_MIN_CHARS = int(env("JOB_DESCRIPTION_MIN_CHARS", "50"))
        self.DEFAULT_MATCH_SCORE = int(env("DEFAULT_MATCH_SCORE", "75"))

        # Section parser: heuristic | keyword | combined
        self.PARSER_STRATEGY = env("PARSER_STRATEGY", "heuristic").strip().lower()

        # CORS origins (comma-separated)
        self.CORS_ORIGINS = [
            s.strip() for s in env("CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",") if s.strip()
        ]

class DevConfig(Config):
    DEBUG = True
    ENV_NAME = "development"

class ProdConfig(Config):
    pass

class TestConfig(Config):
    TESTING = True
    DEBUG = True
    ENV_NAME = "testing"

    def __init__(self):
        super().__init__()
        # the real client is swapped for a fake in tests; a key only has to be present
        self.OPENAI_API_KEY = self.OPENAI_API_KEY or "test-key"

def get_config(env: str | None = None) -> Config:
    """Resolve config by env string or environment variables."""
    env = (env or os.environ.get("ATSRESUME_ENV") or os.environ.get("FLASK_ENV") or "production").lower()
    if env in ("dev", "development"):
        return DevConfig()
    if env in ("test", "testing"):
        return TestConfig()
    return ProdConfig()
