from __future__ import annotations

import sys
import warnings
from collections.abc import Callable, Sequence
from pathlib import Path

import fitz
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))


def _pymupdf_deprecation_messages() -> tuple[str, ...]:
    return (
        r"builtin type SwigPyPacked has no __module__ attribute",
        r"builtin type SwigPyObject has no __module__ attribute",
        r"builtin type swigvarlink has no __module__ attribute",
    )


for _message in _pymupdf_deprecation_messages():
    warnings.filterwarnings("ignore", message=_message, category=DeprecationWarning)


def _pdf_bytes(pages: Sequence[str], **save_options) -> bytes:
    """Render ``pages`` (one string per page, ``\\n`` for new lines) to PDF."""
    doc = fitz.open()
    try:
        for text in pages:
            page = doc.new_page()
            page.insert_text((72, 72), text, fontsize=11)
        return doc.tobytes(**save_options)
    finally:
        doc.close()


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    return _pdf_bytes


@pytest.fixture
def footer_pdf() -> bytes:
    """Five pages sharing a running footer, with a word hyphenated across lines."""
    bodies = [
        "Chapter one starts here.\nThe verifica-\ntion step runs.",
        "Second page body text.",
        "Third page body text.",
        "Fourth page body text.",
        "Fifth page body text.",
    ]
    return _pdf_bytes([f"{body}\nAcme Report 2024" for body in bodies])


@pytest.fixture
def encrypted_pdf() -> bytes:
    return _pdf_bytes(
        ["Top secret"],
        encryption=fitz.PDF_ENCRYPT_AES_256,
        owner_pw="owner",
        user_pw="user",
    )
