from __future__ import annotations

from pdf_to_text.framework import Artifact, register, with_metrics
from pdf_to_text.text_cleaning import HYPHEN_BREAK_RE, HYPHEN_SPACE_RE


class _RepairHyphenationPass:
    name = "repair_hyphenation"
    input_type = str
    output_type = str

    def __call__(self, a: Artifact) -> Artifact:
        if not isinstance(a.payload, str):
            return a
        # Same order as text_cleaning.repair_hyphenation, counting each rule.
        unbroken, linebreaks = HYPHEN_BREAK_RE.subn("", a.payload)
        rejoined, spaced = HYPHEN_SPACE_RE.subn("", unbroken)
        return with_metrics(
            a,
            self.name,
            rejoined,
            linebreaks_joined=linebreaks,
            spaced_joined=spaced,
        )


repair_hyphenation = register(_RepairHyphenationPass())
