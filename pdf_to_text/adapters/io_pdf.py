"""PDF IO adapter: PyMuPDF page text as raw fragment lists."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import fitz

from pdf_to_text.errors import ExtractionError

logger = logging.getLogger(__name__)


def _open(source: str | os.PathLike | bytes) -> Any:
    """Open ``source`` from disk or memory, wrapping parser failures."""
    try:
        if isinstance(source, (bytes, bytearray)):
            return fitz.open(stream=bytes(source), filetype="pdf")
        return fitz.open(str(Path(source)), filetype="pdf")
    except (RuntimeError, ValueError) as exc:
        raise ExtractionError(f"cannot open PDF: {exc}") from exc


def _page_fragments(page: Any) -> list[str]:
    """Lines of ``page`` text, keeping their terminators."""
    return page.get_text("text").splitlines(keepends=True)


def extract_pages(doc: Any) -> list[list[str]]:
    """Return one fragment list per page of an opened document."""
    if doc.needs_pass:
        raise ExtractionError("PDF is encrypted")
    if doc.page_count == 0:
        raise ExtractionError("PDF has no pages")
    pages: Iterable[Any] = doc
    try:
        return [_page_fragments(page) for page in pages]
    except RuntimeError as exc:
        raise ExtractionError(f"cannot read page text: {exc}") from exc


def read_pages(source: str | os.PathLike | bytes) -> list[list[str]]:
    """Return raw page fragments for the PDF at ``source``."""
    doc = _open(source)
    try:
        pages = extract_pages(doc)
    finally:
        doc.close()
    logger.debug("read_pages: %d page(s)", len(pages))
    return pages
