"""Book text source: fetch, cache and paragraph extraction.

The plain-text edition of a Project Gutenberg book is downloaded once and
cached on disk. The license header and footer are stripped using the
standard START/END markers, and the body is split into whitespace-normalized
paragraphs at blank lines.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from gutenpost.config import GutenpostConfig

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================


class TextSourceError(Exception):
    """Raised when the book text cannot be fetched or parsed."""

    pass


# =============================================================================
# CONSTANTS
# =============================================================================

START_MARKER = "*** START OF THE PROJECT GUTENBERG EBOOK"
END_MARKER = "*** END OF THE PROJECT GUTENBERG EBOOK"

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_WHITESPACE_RUN = re.compile(r"\s+")


# =============================================================================
# FETCH AND CACHE
# =============================================================================


def fetch_text(url: str, timeout: float = 30.0) -> str:
    """Download the book text.

    Args:
        url: Plain-text book URL
        timeout: Request timeout in seconds

    Returns:
        Response body decoded as text

    Raises:
        TextSourceError: On transport errors or a non-success status
    """
    logger.info("Fetching book text from %s", url)
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
    except httpx.HTTPError as e:
        raise TextSourceError(f"Failed to fetch {url}: {e}") from e

    if not response.is_success:
        raise TextSourceError(
            f"Failed to fetch {url}: {response.status_code} {response.reason_phrase}"
        )
    return response.text


def get_raw_text(config: GutenpostConfig) -> str:
    """Return the raw book text, preferring the local cache.

    Args:
        config: Project configuration (source_url, cache_path, timeout)

    Returns:
        Full book text including the Gutenberg wrapper
    """
    cache_path: Path = config.cache_path
    if cache_path.exists():
        logger.info("Using cached book text at %s", cache_path)
        return cache_path.read_text(encoding="utf-8")

    text = fetch_text(config.source_url, timeout=config.request_timeout_seconds)
    cache_path.parent.mkdir(parents=True, exist_ok=True)
    cache_path.write_text(text, encoding="utf-8")
    logger.info("Cached book text at %s", cache_path)
    return text


# =============================================================================
# PARSING
# =============================================================================


def strip_gutenberg_wrapper(text: str) -> str:
    """Remove the Project Gutenberg header and footer.

    Args:
        text: Full book text

    Returns:
        Text between the line after the START marker and the END marker

    Raises:
        TextSourceError: If either marker is missing or the START marker
            line is not terminated
    """
    start_index = text.find(START_MARKER)
    if start_index == -1:
        raise TextSourceError("Could not find Gutenberg start marker")

    after_start = text.find("\n", start_index)
    if after_start == -1:
        raise TextSourceError("Malformed Gutenberg text: start marker line is not terminated")

    end_index = text.find(END_MARKER)
    if end_index == -1:
        raise TextSourceError("Could not find Gutenberg end marker")

    return text[after_start + 1 : end_index]


def extract_paragraphs(text: str) -> list[str]:
    """Split text into whitespace-normalized paragraphs.

    Args:
        text: Book body with paragraphs separated by blank lines

    Returns:
        Non-empty paragraphs with internal whitespace collapsed to single spaces

    Examples:
        >>> extract_paragraphs("One\\nline.\\n\\n\\nTwo.")
        ['One line.', 'Two.']
    """
    paragraphs = (_WHITESPACE_RUN.sub(" ", p.strip()) for p in _PARAGRAPH_BREAK.split(text))
    return [p for p in paragraphs if p]


def get_paragraphs(config: GutenpostConfig) -> list[str]:
    """Load the book and return its paragraphs."""
    return extract_paragraphs(strip_gutenberg_wrapper(get_raw_text(config)))


class TextSource:
    """Paragraph access for one run, loading the book at most once."""

    def __init__(self, config: GutenpostConfig) -> None:
        self._config = config
        self._paragraphs: list[str] | None = None

    @property
    def paragraphs(self) -> list[str]:
        if self._paragraphs is None:
            self._paragraphs = get_paragraphs(self._config)
            logger.debug("Loaded %d paragraphs", len(self._paragraphs))
        return self._paragraphs

    @property
    def total(self) -> int:
        return len(self.paragraphs)

    def paragraph(self, index: int) -> str | None:
        """Return the paragraph at index, or None when out of range."""
        if index < 0 or index >= self.total:
            return None
        return self.paragraphs[index]
