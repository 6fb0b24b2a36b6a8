"""Word-level packing for sentences that exceed the post limit.

This is the fallback used when a single sentence cannot fit in one post.
Words are never split: a lone word longer than the limit becomes its own
oversized fragment rather than being truncated.
"""

from __future__ import annotations

from gutenpost.splitter.grapheme_counting import count_graphemes
from gutenpost.splitter.models import DEFAULT_CONFIG, SplitConfig


def split_on_words(text: str, config: SplitConfig = DEFAULT_CONFIG) -> list[str]:
    """Greedily pack whitespace-separated words into bounded fragments.

    Args:
        text: Text to split (typically one oversized sentence)
        config: Split configuration providing max_graphemes

    Returns:
        Ordered fragments joined by single spaces. Each is within
        config.max_graphemes unless it is a single word longer than the limit.
    """
    fragments: list[str] = []
    current = ""

    for word in text.split():
        candidate = f"{current} {word}" if current else word

        if count_graphemes(candidate) <= config.max_graphemes:
            current = candidate
        else:
            if current:
                fragments.append(current)
            current = word

    if current:
        fragments.append(current)

    return fragments
