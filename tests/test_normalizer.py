"""Tests for note_pages.normalizer — whitespace canonicalization."""

import pytest

from note_pages.normalizer import clean_text_for_search


def test_line_breaks_become_spaces():
    assert clean_text_for_search("brown\nfox") == "brown fox"


def test_tab_and_carriage_return():
    assert clean_text_for_search("a\tb\r\nc") == "a b c"


def test_trims_outer_whitespace():
    assert clean_text_for_search("  hello  ") == "hello"


def test_double_space_collapsed():
    assert clean_text_for_search("a  b") == "a b"


def test_long_space_runs_fully_collapsed():
    assert clean_text_for_search("a   b     c") == "a b c"


def test_wrapped_line_matches_unwrapped():
    wrapped = "the quick brown\r\nfox jumps"
    assert clean_text_for_search(wrapped) == clean_text_for_search("the quick brown fox jumps")


def test_empty_string():
    assert clean_text_for_search("") == ""


def test_whitespace_only():
    assert clean_text_for_search(" \t\n\r ") == ""


@pytest.mark.parametrize("text", [
    "plain",
    "\tleading tab",
    "trailing newline\n",
    "mixed\t\r\n \t whitespace\n\n",
    "   \n  many   \t\t spaces  \r",
])
def test_no_control_whitespace_or_padding(text):
    result = clean_text_for_search(text)
    assert not any(c in result for c in "\t\n\r")
    assert result == result.strip()
    assert "  " not in result
