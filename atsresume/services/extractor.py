# atsresume/services/extractor.py
from __future__ import annotations

import os, logging, tempfile
from contextlib import contextmanager
from typing import IO, Iterator, Optional

import docx
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
SUPPORTED_EXTENSIONS = ("pdf", "doc", "docx")

DOC_GUIDANCE = "Could not process DOC file. Please try converting to PDF or DOCX format."
PDF_GUIDANCE = "Unable to extract PDF text (corrupt or scanned). Upload a text-based PDF or DOCX."
DOCX_GUIDANCE = "Unable to read DOCX. Re-save as .docx and try again."


class UnsupportedFileError(ValueError):
    """File kind is not one we can extract text from."""


class FileTooLargeError(ValueError):
    def __init__(self, limit_bytes: int):
        self.limit_bytes = limit_bytes
        super().__init__(f"File too large. Maximum size is {limit_bytes // (1024 * 1024)}MB.")


class ExtractionError(RuntimeError):
    """Text extraction failed; message is safe to show to the user."""


def file_kind(filename: str, mimetype: Optional[str] = None, allowed: Optional[dict] = None) -> str:
    """Resolve pdf/doc/docx from the filename extension, falling back to the mimetype."""
    ext = os.path.splitext(filename or "")[1].lower().lstrip(".")
    if ext in SUPPORTED_EXTENSIONS:
        return ext
    if allowed and mimetype in allowed and not ext:
        return allowed[mimetype]
    raise UnsupportedFileError(
        f"Unsupported file type: .{ext or '?'}. Please use PDF, DOC, or DOCX format."
    )


@contextmanager
def spooled_upload(stream: IO[bytes], max_bytes: int, suffix: str = "") -> Iterator[tuple[str, int]]:
    """
    Stream an upload into a named temp file, enforcing ``max_bytes``.
    Yields ``(path, size)``; the file is removed on exit whether or not the
    body raised.
    """
    tmp = tempfile.NamedTemporaryFile(delete=False, suffix=suffix)
    try:
        total = 0
        chunk = stream.read(CHUNK_SIZE)
        while chunk:
            total += len(chunk)
            if total > max_bytes:
                raise FileTooLargeError(max_bytes)
            tmp.write(chunk)
            chunk = stream.read(CHUNK_SIZE)
        tmp.flush()
        tmp.close()
        yield tmp.name, total
    finally:
        tmp.close()
        try:
            os.unlink(tmp.name)
            logger.info("Temporary upload %s cleaned up", tmp.name)
        except FileNotFoundError:
            pass


def pdf_to_text(path: str) -> str:
    try:
        reader = PdfReader(path)
        return "\n".join((p.extract_text() or "") for p in reader.pages)
    except (PdfReadError, ValueError, KeyError, TypeError) as e:
        logger.warning("PDF extraction failed: %s", e)
        raise ExtractionError(PDF_GUIDANCE) from e


def docx_to_text(path: str, guidance: str = DOCX_GUIDANCE) -> str:
    try:
        d = docx.Document(path)
    except Exception as e:
        # python-docx raises a mix of zipfile/lxml/KeyError/PackageNotFoundError here
        logger.warning("Word extraction failed: %s", e)
        raise ExtractionError(guidance) from e
    parts = [p.text for p in d.paragraphs]
    for table in d.tables:
        for row in table.rows:
            parts.append(" | ".join(c.text.strip() for c in row.cells if c.text.strip()))
    return "\n".join(parts)


def extract_text(path: str, kind: str) -> str:
    """Plain text of the document at ``path``; ``kind`` is pdf, doc or docx."""
    if kind == "pdf":
        text = pdf_to_text(path)
    elif kind == "docx":
        text = docx_to_text(path)
    elif kind == "doc":
        # legacy binary .doc only works when it is really an OOXML package renamed
        text = docx_to_text(path, guidance=DOC_GUIDANCE)
    else:
        raise UnsupportedFileError(f"Unsupported file type: .{kind}. Please use PDF, DOC, or DOCX format.")
    logger.info("Extracted %d characters from %s", len(text), kind.upper())
    return text
