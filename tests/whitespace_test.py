import pytest

from pdf_to_text.text_cleaning import (
    collapse_blank_lines,
    collapse_inline_whitespace,
    normalize_whitespace,
)


def test_four_blank_lines_become_one():
    text = "First paragraph.\n\n\n\n\nSecond paragraph."
    assert normalize_whitespace(text) == "First paragraph.\n\nSecond paragraph."


def test_three_spaces_become_one():
    assert normalize_whitespace("alpha   beta") == "alpha beta"


def test_tabs_and_mixed_spaces_collapse():
    assert normalize_whitespace("alpha \t\t beta\tgamma") == "alpha beta gamma"


def test_whitespace_only_lines_count_as_blank():
    text = "one\n   \n\t\n  \ntwo"
    assert normalize_whitespace(text) == "one\n\ntwo"


def test_page_separator_survives_as_paragraph_break():
    assert normalize_whitespace("end of page \n\n start of next") == (
        "end of page\n\nstart of next"
    )


def test_single_line_breaks_are_kept():
    assert normalize_whitespace("line one\nline two") == "line one\nline two"


def test_crlf_is_normalized():
    cleaned = normalize_whitespace("a line\r\n\r\n\r\nnext\rlast")
    assert cleaned == "a line\n\nnext\nlast"


def test_document_is_trimmed():
    assert normalize_whitespace("\n\n   body text  \n\n") == "body text"


def test_spaces_touching_line_breaks_are_dropped():
    assert collapse_inline_whitespace("left  \n  right") == "left\nright"


def test_collapse_blank_lines_keeps_single_breaks():
    assert collapse_blank_lines("a\nb\n\n\nc") == "a\nb\n\nc"


@pytest.mark.parametrize(
    "text",
    [
        "a  b\n\n\n\nc",
        " \t lead\n \n trail \t",
        "x\r\n\r\n  y  z",
    ],
)
def test_normalize_whitespace_is_idempotent(text):
    once = normalize_whitespace(text)
    assert normalize_whitespace(once) == once
