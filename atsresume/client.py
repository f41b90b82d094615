# atsresume/client.py
"""
HTTP client for the resume backend.

Build one per configuration with :func:`build_client`; there is no shared
module-level instance. Re-running an optimization is an explicit call
(:meth:`ResumeApiClient.rerun`), never an automatic retry.
"""
from __future__ import annotations

import os, logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_TIMEOUT = 60  # seconds; AI calls are slow
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024

UPLOAD_MIMETYPES = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

TIMEOUT_MESSAGE = "Request timeout - AI processing is taking longer than expected"
CONNECTION_MESSAGE = "Cannot connect to server. Please check your connection."


class ApiError(Exception):
    def __init__(self, status: Optional[int], error: str, message: str):
        self.status = status
        self.error = error
        self.message = message
        super().__init__(f"[{status or '-'}] {error}: {message}")


def _log_response(resp: requests.Response, *args, **kwargs):
    logger.info("API Response: %s %s %s", resp.status_code, resp.request.method, resp.url)


class ResumeApiClient:
    def __init__(self, base_url: str, timeout: float, max_upload_bytes: int,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_upload_bytes = max_upload_bytes
        self.session = session or requests.Session()
        self.session.hooks["response"].append(_log_response)
        self._last_optimize: Optional[dict] = None

    # ---------- transport ----------
    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.debug("API Request: %s %s", method.upper(), url)
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            raise ApiError(None, "timeout", TIMEOUT_MESSAGE) from e
        except requests.ConnectionError as e:
            raise ApiError(None, "connection_error", CONNECTION_MESSAGE) from e

        if not resp.ok:
            try:
                body = resp.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            logger.error("Response Error: %s %s %s", resp.status_code, url, body)
            raise ApiError(resp.status_code, body.get("error") or "http_error",
                           body.get("message") or resp.reason or "Request failed")
        return resp

    # ---------- operations ----------
    def health(self) -> dict:
        return self._request("get", "/health").json()

    def templates(self) -> list:
        return self._request("get", "/resume/templates").json().get("templates", [])

    def upload_resume(self, path: str) -> str:
        ext = os.path.splitext(path)[1].lower()
        mimetype = UPLOAD_MIMETYPES.get(ext)
        if not mimetype:
            raise ApiError(None, "bad_type", "Please select a PDF, DOC, or DOCX file")
        if os.path.getsize(path) > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes // (1024 * 1024)
            raise ApiError(None, "too_large", f"File size must be less than {limit_mb}MB")

        with open(path, "rb") as fh:
            files = {"resume": (os.path.basename(path), fh, mimetype)}
            data = self._request("post", "/resume/upload", files=files).json()
        return data.get("textContent", "")

    def optimize(self, resume_text: str, job_description: str) -> dict:
        payload = {"resumeText": resume_text, "jobDescription": job_description}
        # remembered before sending so a failed run can be re-run
        self._last_optimize = payload
        return self._request("post", "/resume/optimize", json=payload).json()

    def rerun(self) -> dict:
        """Repeat the last optimization; the caller decides when."""
        if self._last_optimize is None:
            raise ApiError(None, "nothing_to_rerun", "Run an optimization first")
        return self._request("post", "/resume/optimize/rerun", json=self._last_optimize).json()

    def render(self, resume_text: str, template: str = "professional", fmt: str = "html") -> bytes:
        payload = {"resumeText": resume_text, "template": template, "format": fmt}
        return self._request("post", "/resume/render", json=payload).content


def build_client(base_url: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT,
                 max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
                 session: Optional[requests.Session] = None) -> ResumeApiClient:
    # ATSRESUME_API_URL is read per call so a .env loaded by the CLI applies
    base_url = base_url or os.getenv("ATSRESUME_API_URL", DEFAULT_BASE_URL)
    return ResumeApiClient(base_url, timeout, max_upload_bytes, session=session)
