"""Running header/footer detection based on line repetition.

A line that appears more than ``max_frequency`` times in the document and is
shorter than ``max_length`` characters is treated as a page artifact (running
header, footer or page number). Long repeated lines, such as a disclaimer
paragraph printed on every page, are kept.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_FREQUENCY = 2
DEFAULT_MAX_LENGTH = 80


@dataclass(frozen=True)
class LineFilterResult:
    lines: List[str]
    removed: int
    duplicates: int

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def _trimmed_lines(text: str) -> List[str]:
    return [line.strip() for line in text.split("\n")]


def line_frequencies(lines: Iterable[str]) -> Counter[str]:
    """Count every non-empty trimmed line across the whole document."""
    return Counter(line for line in lines if line)


def is_repeated_artifact(
    line: str,
    frequencies: Counter[str],
    max_frequency: int = DEFAULT_MAX_FREQUENCY,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> bool:
    """Return True for short lines repeated more than ``max_frequency`` times."""
    return frequencies[line] > max_frequency and len(line) < max_length


def _drop_trailing_blanks(lines: List[str]) -> List[str]:
    end = len(lines)
    while end and not lines[end - 1]:
        end -= 1
    return lines[:end]


def filter_lines(
    text: str,
    max_frequency: int = DEFAULT_MAX_FREQUENCY,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> LineFilterResult:
    """Drop repeated short lines and collapse consecutive duplicates.

    Frequencies are taken over the full line list before any deduplication.
    Duplicates are consecutive when only blank or removed lines sit between
    them. At most one blank line is kept between surviving lines.
    """
    lines = _trimmed_lines(text)
    frequencies = line_frequencies(lines)

    kept: List[str] = []
    previous: Optional[str] = None
    removed = duplicates = 0
    for line in lines:
        if not line:
            if kept and kept[-1]:
                kept.append("")
        elif is_repeated_artifact(line, frequencies, max_frequency, max_length):
            removed += 1
        elif line == previous:
            duplicates += 1
        else:
            kept.append(line)
            previous = line

    if removed or duplicates:
        logger.debug(
            "filter_lines: removed=%d duplicates=%d distinct=%d",
            removed,
            duplicates,
            len(frequencies),
        )
    return LineFilterResult(_drop_trailing_blanks(kept), removed, duplicates)


def remove_repeated_lines(
    text: str,
    max_frequency: int = DEFAULT_MAX_FREQUENCY,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> str:
    """Return ``text`` without running headers, footers and stacked duplicates."""
    return filter_lines(text, max_frequency, max_length).text
