from __future__ import annotations

from pdf_to_text.framework import Artifact, register, with_metrics
from pdf_to_text.text_cleaning import normalize_whitespace as _normalize


class _NormalizeWhitespacePass:
    name = "normalize_whitespace"
    input_type = str
    output_type = str

    def __call__(self, a: Artifact) -> Artifact:
        if not isinstance(a.payload, str):
            return a
        cleaned = _normalize(a.payload)
        return with_metrics(
            a, self.name, cleaned, chars_removed=len(a.payload) - len(cleaned)
        )


normalize_whitespace = register(_NormalizeWhitespacePass())
