# tests/conftest.py
from io import BytesIO
from types import SimpleNamespace

import docx
import pytest

from atsresume import create_app


class FakeOpenAI:
    """Stands in for openai.OpenAI: replays canned replies, records prompts."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        content = self.replies.pop(0) if self.replies else ""
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def make_pdf(lines):
    """Smallest PDF PyPDF2 can pull text from: one page, Helvetica, one line per Td."""
    ops = ["BT", "/F1 12 Tf", "72 720 Td"]
    for i, ln in enumerate(lines):
        if i:
            ops.append("0 -16 Td")
        esc = ln.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        ops.append(f"({esc}) Tj")
    ops.append("ET")
    stream = "\n".join(ops).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for num, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % num + body + b"\nendobj\n"
    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for off in offsets:
        out += b"%010d 00000 n \n" % off
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)


def make_docx(lines):
    d = docx.Document()
    for ln in lines:
        d.add_paragraph(ln)
    buf = BytesIO()
    d.save(buf)
    return buf.getvalue()


SAMPLE_LINES = [
    "Jane Doe",
    "jane@example.com | 555-123-4567",
    "Software Engineer",
    "EXPERIENCE",
    "Acme Corp, Senior Developer 2019 - Present",
    "Built Python APIs serving 2M requests per day",
    "EDUCATION",
    "BS Computer Science, State University",
]

SAMPLE_RESUME = "\n".join(SAMPLE_LINES)

SAMPLE_JD = (
    "We are hiring a backend engineer with strong Python, Flask and PostgreSQL "
    "experience. Docker and AWS knowledge is a plus."
)


@pytest.fixture
def fake_ai():
    return FakeOpenAI()


@pytest.fixture
def app(fake_ai):
    return create_app("test", OPENAI_CLIENT=fake_ai)


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c
