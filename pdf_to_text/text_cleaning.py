"""text_cleaning

Public API (stable):
- assemble_pages
- normalize_newlines
- collapse_blank_lines
- collapse_inline_whitespace
- normalize_whitespace
- join_letter_runs
- fix_hyphenated_linebreaks
- rejoin_spaced_hyphens
- repair_hyphenation

Notes:
- Functions are pure (no side effects) except for logging.
- Regexes are precompiled and grouped for readability.
- Composition uses `pipe()` for a declarative flow.
- Once whitespace is normalized, every transform either returns its input
  unchanged or a strictly shorter string.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterator, Sequence, Tuple, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")

RawPage = Union[str, Sequence[str]]

# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------

PREVIEW_LEN = 100


def pipe(value: T, *funcs: Callable[[T], T]) -> T:
    """Left-to-right function composition for a single value."""
    for fn in funcs:
        value = fn(value)
    return value


def _preview(s: str, n: int = PREVIEW_LEN) -> str:
    """Return a safe preview slice for debug logs."""
    return repr(s[:n])


# ---------------------------------------------------------------------------
# Patterns & Constants
# ---------------------------------------------------------------------------

PAGE_SEPARATOR = "\n\n"
FRAGMENT_SEPARATOR = " "

# Horizontal whitespace: any whitespace except the line feed itself.
_HSPACE = r"[^\S\n]"

CRLF_RE = re.compile(r"\r\n?")
BLANK_LINES_RE = re.compile(rf"\n(?:{_HSPACE}*\n)+")
INLINE_SPACE_RE = re.compile(rf"{_HSPACE}+")
SPACE_AROUND_BREAK_RE = re.compile(r" ?\n ?")

LETTERS = "A-Za-záéíóúñÁÉÍÓÚÑ"
# One-letter token bounded by whitespace; trailing punctuation may close it.
SINGLE_LETTER_RE = re.compile(rf"(?<!\S)[{LETTERS}](?=[\s,.;:!?)]|\Z)")

# Hyphens treated as line-wrap markers: ASCII, unicode hyphen, soft hyphen.
_HYPHEN_CHARS = "-\u2010\u00ad"
HYPHEN_CHARS_ESC = re.escape(_HYPHEN_CHARS)
_LETTER = r"[^\W\d_]"
# Line-wrap breaks join any word characters (`ISO-\n9001`); spaced hyphens
# join letters only so numeric ranges such as `10 - 20` survive.
HYPHEN_BREAK_RE = re.compile(rf"(?<=\w)[{HYPHEN_CHARS_ESC}]{_HSPACE}*\n\s*(?=\w)")
HYPHEN_SPACE_RE = re.compile(
    rf"(?<={_LETTER}){_HSPACE}*[{HYPHEN_CHARS_ESC}]{_HSPACE}+(?={_LETTER})"
)


# ---------------------------------------------------------------------------
# Page assembly
# ---------------------------------------------------------------------------


def _page_text(page: RawPage) -> str:
    """Join a page's fragments; a bare string is a single fragment."""
    return page if isinstance(page, str) else FRAGMENT_SEPARATOR.join(page)


def assemble_pages(pages: Sequence[RawPage]) -> str:
    """Concatenate per-page fragments into one document string.

    Fragments within a page are joined with a single space and pages with a
    blank line, in the order given. Nothing is dropped.
    """
    return PAGE_SEPARATOR.join(_page_text(page) for page in pages)


# ---------------------------------------------------------------------------
# Whitespace
# ---------------------------------------------------------------------------


def normalize_newlines(text: str) -> str:
    """Convert ``\\r\\n`` and lone ``\\r`` to ``\\n``."""
    return CRLF_RE.sub("\n", text)


def collapse_blank_lines(text: str) -> str:
    """Keep at most one blank line between paragraphs."""
    return BLANK_LINES_RE.sub(PAGE_SEPARATOR, text)


def collapse_inline_whitespace(text: str) -> str:
    """Collapse horizontal whitespace runs and trim spaces at line breaks."""
    return pipe(
        text,
        lambda t: INLINE_SPACE_RE.sub(" ", t),
        lambda t: SPACE_AROUND_BREAK_RE.sub("\n", t),
    )


def normalize_whitespace(text: str) -> str:
    """Normalize line endings, blank lines and intra-line spacing.

    Blank lines are collapsed before spaces so that page separators survive
    as paragraph breaks. Idempotent.
    """
    return pipe(
        text,
        normalize_newlines,
        collapse_blank_lines,
        collapse_inline_whitespace,
        str.strip,
    )


# ---------------------------------------------------------------------------
# Letter runs
# ---------------------------------------------------------------------------


def _is_run_gap(text: str, start: int, end: int) -> bool:
    """True when ``text[start:end]`` is non-empty horizontal whitespace."""
    gap = text[start:end]
    return bool(gap) and "\n" not in gap and gap.isspace()


def _letter_runs(text: str) -> Iterator[Tuple[int, int]]:
    """Yield ``(start, end)`` spans of maximal single-letter runs.

    Single pass over the single-letter matches; each gap is inspected once.
    """
    run_start = run_end = -1
    count = 0
    for match in SINGLE_LETTER_RE.finditer(text):
        if count and _is_run_gap(text, run_end, match.start()):
            run_end = match.end()
            count += 1
            continue
        if count >= 2:
            yield run_start, run_end
        run_start, run_end, count = match.start(), match.end(), 1
    if count >= 2:
        yield run_start, run_end


def _squeeze(span: str) -> str:
    return "".join(span.split())


def join_letter_runs(text: str) -> str:
    """Fuse runs like ``H I S T O R I A S`` into ``HISTORIAS``.

    A lone single letter (an article or an initial) is left as is, and so are
    letters separated by punctuation or line breaks.
    """
    pieces: list[str] = []
    last = 0
    for start, end in _letter_runs(text):
        pieces.append(text[last:start])
        pieces.append(_squeeze(text[start:end]))
        last = end
    if not pieces:
        return text
    pieces.append(text[last:])
    joined = "".join(pieces)
    logger.debug("join_letter_runs: %s -> %s", _preview(text), _preview(joined))
    return joined


# ---------------------------------------------------------------------------
# Hyphenation
# ---------------------------------------------------------------------------


def fix_hyphenated_linebreaks(text: str) -> str:
    """Join words split by a hyphen at the end of a line (``verifica-\\nción``)."""
    return HYPHEN_BREAK_RE.sub("", text)


def rejoin_spaced_hyphens(text: str) -> str:
    """Join words broken by a spaced hyphen on one line (``verifica - ción``)."""
    return HYPHEN_SPACE_RE.sub("", text)


def repair_hyphenation(text: str) -> str:
    """Undo line-wrap hyphenation without touching compounds like ``well-known``."""
    return pipe(text, fix_hyphenated_linebreaks, rejoin_spaced_hyphens)
