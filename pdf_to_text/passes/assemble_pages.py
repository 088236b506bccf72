from __future__ import annotations

from collections.abc import Sequence

from pdf_to_text.framework import Artifact, register, with_metrics
from pdf_to_text.text_cleaning import assemble_pages as _assemble


class _AssemblePagesPass:
    """Join raw per-page fragments into a single document string."""

    name = "assemble_pages"
    input_type = list
    output_type = str

    def __call__(self, a: Artifact) -> Artifact:
        payload = a.payload
        if isinstance(payload, str):
            return a
        pages: Sequence = payload if payload is not None else ()
        text = _assemble(pages)
        return with_metrics(a, self.name, text, pages=len(pages), characters=len(text))


assemble_pages = register(_AssemblePagesPass())
