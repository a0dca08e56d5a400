"""Match a note's excerpt to the first page that contains it.

Building Block: resolve_page
    Input Data:  {page_number: normalized text} for one book, excerpt string
    Output Data: PageResolution (found page, or unresolved)
    Setup Data:  UNRESOLVED_PAGE sentinel used when storing the result
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from note_pages.normalizer import clean_text_for_search

# Stored in the note's page field when no page matched.
UNRESOLVED_PAGE = 999


@dataclass(frozen=True)
class PageResolution:
    """Outcome of resolving one excerpt: a page number, or None when unresolved."""

    page: Optional[int] = None

    @property
    def found(self) -> bool:
        return self.page is not None

    @property
    def stored_page(self) -> int:
        """Value written to the record store."""
        return self.page if self.page is not None else UNRESOLVED_PAGE

    @classmethod
    def unresolved(cls) -> "PageResolution":
        return cls(None)


def resolve_page(page_map: Mapping[int, str], quote: str) -> PageResolution:
    """Return the lowest page number whose text contains the quote.

    Page text is expected to be normalized already. An empty quote
    never matches.
    """
    target = clean_text_for_search(quote)
    if not target:
        return PageResolution.unresolved()

    for page_num in sorted(page_map):
        if target in page_map[page_num]:
            return PageResolution(page_num)
    return PageResolution.unresolved()
