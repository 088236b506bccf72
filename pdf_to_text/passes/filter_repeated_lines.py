from __future__ import annotations

from dataclasses import dataclass, field

from pdf_to_text.framework import Artifact, Pass, register, with_metrics
from pdf_to_text.page_artifacts import (
    DEFAULT_MAX_FREQUENCY,
    DEFAULT_MAX_LENGTH,
    filter_lines,
)


@dataclass(frozen=True)
class _FilterRepeatedLinesPass:
    """Remove running headers/footers and consecutive duplicate lines."""

    name: str = field(default="filter_repeated_lines", init=False)
    input_type: type = field(default=str, init=False)
    output_type: type = field(default=str, init=False)
    max_frequency: int = DEFAULT_MAX_FREQUENCY
    max_length: int = DEFAULT_MAX_LENGTH

    def __post_init__(self) -> None:
        if self.max_frequency < 1:
            raise ValueError("max_frequency must be at least 1")
        if self.max_length < 1:
            raise ValueError("max_length must be at least 1")

    def __call__(self, a: Artifact) -> Artifact:
        if not isinstance(a.payload, str):
            return a
        result = filter_lines(a.payload, self.max_frequency, self.max_length)
        return with_metrics(
            a,
            self.name,
            result.text,
            lines_removed=result.removed,
            duplicates_collapsed=result.duplicates,
        )


filter_repeated_lines: Pass = register(_FilterRepeatedLinesPass())
