"""Split one page of extracted text into display-sized paragraphs.

Building Block: split_into_paragraphs
    Input Data:  Raw page text (tabs already replaced)
    Output Data: Ordered, non-empty list of paragraph strings
    Setup Data:  LONG_PARAGRAPH (500) and CHUNK_LIMIT (400) character targets

Both limits are readability targets, not hard caps: a single sentence
longer than CHUNK_LIMIT stays whole.
"""

import re

LONG_PARAGRAPH = 500
CHUNK_LIMIT = 400

_SENTENCE_END = re.compile(r'[.!?]')


def _split_blank_lines(text: str) -> list[str]:
    """Paragraphs separated by a double newline."""
    return [p.strip() for p in text.split("\n\n") if p.strip()]


def _group_lines(text: str) -> list[str]:
    """Join consecutive non-blank lines; a blank line ends a paragraph."""
    paragraphs = []
    current: list[str] = []
    for line in text.split("\n"):
        line = line.strip()
        if line:
            current.append(line)
        elif current:
            paragraphs.append(" ".join(current))
            current = []
    if current:
        paragraphs.append(" ".join(current))
    return paragraphs


def _has_long_paragraphs(paragraphs: list[str]) -> bool:
    return any(len(p) > LONG_PARAGRAPH for p in paragraphs)


def _chunk_sentences(paragraph: str) -> list[str]:
    """Re-pack a long paragraph into chunks of whole sentences.

    Every fragment except the last gets a period back, so '!' and '?'
    terminators come out as '.'.
    """
    sentences = [s for s in _SENTENCE_END.split(paragraph) if s]
    chunks = []
    current = ""
    for i, sentence in enumerate(sentences):
        sentence = sentence.strip()
        if not sentence:
            continue
        if i < len(sentences) - 1:
            sentence += "."

        if current and len(current) + len(sentence) + 1 > CHUNK_LIMIT:
            chunks.append(current.strip())
            current = sentence
        elif current:
            current += " " + sentence
        else:
            current = sentence

    if current:
        chunks.append(current.strip())
    return chunks


def break_down_long_paragraphs(paragraphs: list[str]) -> list[str]:
    """Replace every paragraph over LONG_PARAGRAPH chars with sentence chunks."""
    result = []
    for paragraph in paragraphs:
        if len(paragraph) <= LONG_PARAGRAPH:
            result.append(paragraph)
        else:
            result.extend(_chunk_sentences(paragraph))
    return result


def split_into_paragraphs(text: str) -> list[str]:
    """Split page text into paragraphs for sequential display.

    Strategy (in order):
    1. Blank-line boundaries
    2. Fewer than two found: group non-blank lines instead
    3. One paragraph left, or any too long: re-chunk by sentences
    4. Nothing produced: the whole trimmed text
    """
    paragraphs = _split_blank_lines(text)

    if len(paragraphs) <= 1 and "\n" in text:
        paragraphs = _group_lines(text)

    if len(paragraphs) == 1 or _has_long_paragraphs(paragraphs):
        paragraphs = break_down_long_paragraphs(paragraphs)

    if not paragraphs:
        paragraphs = [text.strip()]
    return paragraphs
