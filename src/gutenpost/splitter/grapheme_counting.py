"""Grapheme counting utilities.

Post limits on Bluesky are measured in user-perceived characters, not code
points: a flag emoji or an accented letter built from combining marks counts
once. Counting is delegated to the grapheme package, which implements the
Unicode extended grapheme cluster rules (UAX #29).
"""

from __future__ import annotations

import grapheme


def count_graphemes(text: str) -> int:
    """Count user-perceived characters in text.

    Args:
        text: Text to measure

    Returns:
        Number of grapheme clusters (0 for empty string)
    """
    if not text:
        return 0
    return int(grapheme.length(text))
