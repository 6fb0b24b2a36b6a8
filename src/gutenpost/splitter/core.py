"""Core chunk assembly: paragraph to post-sized chunks.

Design rationale:
- Paragraphs that fit in one post are never touched
- Sentence boundaries are the preferred split points
- Word boundaries are the fallback for oversized sentences
- Nothing is dropped or truncated; only whitespace between pieces is
  normalized to a single space
"""

from __future__ import annotations

import logging

from gutenpost.splitter.grapheme_counting import count_graphemes
from gutenpost.splitter.models import DEFAULT_CONFIG, Chunk, SplitConfig
from gutenpost.splitter.sentence_splitting import split_into_sentences
from gutenpost.splitter.word_packing import split_on_words

logger = logging.getLogger(__name__)


def split_into_post_chunks(paragraph: str, config: SplitConfig = DEFAULT_CONFIG) -> list[Chunk]:
    """Split a paragraph into chunks that each fit in a single post.

    Algorithm:
    1. A paragraph within max_graphemes is returned unchanged as one chunk
    2. Otherwise sentences are packed greedily into a running chunk
    3. A sentence longer than max_graphemes flushes the running chunk and is
       word-packed; its fragments become chunks of their own

    Args:
        paragraph: Paragraph text (whitespace already normalized)
        config: Split configuration providing max_graphemes

    Returns:
        Ordered list of chunks, never empty (an empty paragraph yields [""])
    """
    if count_graphemes(paragraph) <= config.max_graphemes:
        return [paragraph]

    chunks: list[Chunk] = []
    current = ""

    for sentence in split_into_sentences(paragraph):
        if count_graphemes(sentence) > config.max_graphemes:
            if current:
                chunks.append(current)
                current = ""
            chunks.extend(split_on_words(sentence, config))
            continue

        candidate = f"{current} {sentence}" if current else sentence

        if count_graphemes(candidate) <= config.max_graphemes:
            current = candidate
        else:
            if current:
                chunks.append(current)
            current = sentence

    if current:
        chunks.append(current)

    logger.debug(
        "Split %d-grapheme paragraph into %d chunks",
        count_graphemes(paragraph),
        len(chunks),
    )
    return chunks
