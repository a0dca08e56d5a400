"""Whitespace canonicalization shared by both sides of every match."""

import re

_LINE_BREAKS = re.compile(r'[\t\n\r]')
_SPACE_RUNS = re.compile(r' {2,}')


def clean_text_for_search(text: str) -> str:
    """Standardize text so PDF line wrapping does not break a match.

    Tabs, line feeds and carriage returns become spaces, runs of spaces
    collapse to one, and the result is trimmed.
    """
    if not text:
        return ""
    text = _LINE_BREAKS.sub(' ', text)
    text = _SPACE_RUNS.sub(' ', text)
    return text.strip()
