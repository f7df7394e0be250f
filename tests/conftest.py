"""Shared fixtures.

``make_pdf`` builds a tiny single-page PDF whose only content is one line of
Helvetica text, with a correct xref table so ``pypdf`` reads it without
falling back to repair mode.
"""

from __future__ import annotations

import base64
from typing import Callable

import pytest

from quizsolver.config import Settings


def _build_pdf(text: str) -> bytes:
    escaped = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
    stream = f"BT /F1 12 Tf 72 720 Td ({escaped}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        (
            b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>"
        ),
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
    out += b"startxref\n%d\n%%%%EOF\n" % xref_at
    return bytes(out)


@pytest.fixture()
def make_pdf() -> Callable[[str], bytes]:
    return _build_pdf


@pytest.fixture()
def encode() -> Callable[[str], str]:
    """Base64-encode text, padding it with spaces so the run is >= 100 chars."""

    def _encode(text: str) -> str:
        raw = text.encode("utf-8")
        if len(raw) < 80:
            raw += b" " * (80 - len(raw))
        return base64.b64encode(raw).decode("ascii")

    return _encode


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        secret="s3cret",
        default_submit_url="https://example.com/submit",
        total_budget=180.0,
        safety_margin=5.0,
        cleanup_slack=1.0,
        settle_delay=0.0,
    )
