from __future__ import annotations

from pdf_to_text.framework import Artifact, register, with_metrics
from pdf_to_text.text_cleaning import join_letter_runs as _join


class _JoinLetterRunsPass:
    """Fuse glyph-by-glyph words such as ``H I S T O R I A`` into one token."""

    name = "join_letter_runs"
    input_type = str
    output_type = str

    def __call__(self, a: Artifact) -> Artifact:
        if not isinstance(a.payload, str):
            return a
        joined = _join(a.payload)
        return with_metrics(
            a, self.name, joined, spaces_removed=len(a.payload) - len(joined)
        )


join_letter_runs = register(_JoinLetterRunsPass())
