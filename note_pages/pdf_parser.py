"""Low-level PDF text extraction.

Building Block: extract_all_pages / extract_page_text
    Input Data:  Path to a PDF file (and a 1-based page for the read path)
    Output Data: {page_number: normalized text}, or one page's raw text
    Setup Data:  pdfplumber library
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Optional, TypeVar

import pdfplumber

from note_pages.errors import (
    ExtractionError,
    ExtractionTimeoutError,
    NotePagesError,
    PageOutOfRangeError,
)
from note_pages.normalizer import clean_text_for_search

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _has_content(page) -> bool:
    """False when /Contents is missing or resolves only to null objects."""
    return any(c is not None for c in page.page_obj.contents)


def extract_all_pages(pdf_path: Path, max_pages: Optional[int] = None) -> dict[int, str]:
    """Read the whole PDF once and return normalized text per page.

    Pages without a content stream are left out of the map. Raises
    ExtractionError on any failure; a partial map is never returned.
    """
    results: dict[int, str] = {}
    try:
        with pdfplumber.open(pdf_path) as pdf:
            total = len(pdf.pages)
            if max_pages is not None and total > max_pages:
                raise ExtractionError(
                    f"{pdf_path} has {total} pages (limit {max_pages})"
                )
            for i, page in enumerate(pdf.pages, start=1):
                if not _has_content(page):
                    continue
                results[i] = clean_text_for_search(page.extract_text() or "")
    except NotePagesError:
        raise
    except Exception as exc:
        raise ExtractionError(f"Failed to read PDF {pdf_path}: {exc}") from exc

    logger.debug("Extracted %d/%d pages from %s", len(results), total, pdf_path)
    return results


def extract_page_text(pdf_path: Path, page_number: int) -> str:
    """Extract one page's text with tabs replaced, otherwise untouched.

    Raises PageOutOfRangeError when page_number is outside the document.
    """
    if page_number < 1:
        raise PageOutOfRangeError(page_number)
    try:
        with pdfplumber.open(pdf_path) as pdf:
            total = len(pdf.pages)
            if page_number > total:
                raise PageOutOfRangeError(page_number, total)
            page = pdf.pages[page_number - 1]
            if not _has_content(page):
                return ""
            text = page.extract_text() or ""
    except NotePagesError:
        raise
    except Exception as exc:
        raise ExtractionError(f"Failed to read PDF {pdf_path}: {exc}") from exc

    return text.replace("\t", " ")


def run_with_timeout(func: Callable[..., T], *args, timeout: Optional[float] = None) -> T:
    """Call func(*args), giving up after timeout seconds.

    The call runs on a daemon thread. A thread that times out cannot be
    killed; it is abandoned and does not hold up interpreter exit.
    """
    if timeout is None:
        return func(*args)

    outcome: dict = {}

    def _target():
        try:
            outcome["value"] = func(*args)
        except BaseException as exc:
            outcome["error"] = exc

    worker = threading.Thread(target=_target, name="extract", daemon=True)
    worker.start()
    worker.join(timeout)
    if worker.is_alive():
        logger.warning("Abandoning extraction thread after %gs", timeout)
        raise ExtractionTimeoutError(f"Extraction did not finish within {timeout:g}s")
    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]
