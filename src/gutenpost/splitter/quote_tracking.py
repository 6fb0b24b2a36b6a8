"""Lexical quotation-balance tracking.

Quote state is a parity check, not a parser: every double quote toggles the
double-quote state, and single quotes toggle the single-quote state unless
they look like an apostrophe. Curly quotes are not recognized.
"""

from __future__ import annotations

from collections.abc import Sequence

DOUBLE_QUOTE = '"'
SINGLE_QUOTE = "'"

# Characters after which a letter-preceded single quote reads as possessive
_POSSESSIVE_FOLLOWERS = frozenset(".,;:!?")


def _is_letter(char: str | None) -> bool:
    return char is not None and char.isascii() and char.isalpha()


def _is_apostrophe(prev: str | None, next_: str | None) -> bool:
    """Classify a single quote as a contraction or possessive apostrophe.

    Args:
        prev: Character before the quote (None at start of text)
        next_: Character after the quote (None at end of text)

    Returns:
        True for contractions (don't) and trailing possessives (Johnson's,
        the Joneses'), which must not affect quote balance.
    """
    if not _is_letter(prev):
        return False
    if _is_letter(next_):
        return True
    return next_ is None or next_.isspace() or next_ in _POSSESSIVE_FOLLOWERS


def has_unclosed_quote(text: str) -> bool:
    """Check whether text leaves a quotation open.

    Args:
        text: Text to scan from the start

    Returns:
        True if either the double-quote or the single-quote state is open
        after the scan

    Examples:
        >>> has_unclosed_quote('She said "hello')
        True
        >>> has_unclosed_quote("Johnson's book")
        False
    """
    in_double_quote = False
    in_single_quote = False

    for i, char in enumerate(text):
        if char == DOUBLE_QUOTE:
            in_double_quote = not in_double_quote
        elif char == SINGLE_QUOTE:
            prev = text[i - 1] if i > 0 else None
            next_ = text[i + 1] if i + 1 < len(text) else None
            if not _is_apostrophe(prev, next_):
                in_single_quote = not in_single_quote

    return in_double_quote or in_single_quote


def is_inside_quote(chunks: Sequence[str], end_index: int) -> bool:
    """Check whether a quotation is open after chunks[0..end_index].

    The prefix always starts at the first chunk; chunks are joined with single
    spaces, as they read when posted in sequence.
    """
    return has_unclosed_quote(" ".join(chunks[: end_index + 1]))
