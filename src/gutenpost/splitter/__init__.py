"""Splitter package - paragraphs to post-sized chunks and reply-chain threads.

This package turns a paragraph of prose into posts that respect the Bluesky
grapheme limit, then groups those posts into threads without breaking inside
an open quotation.

Public API:
- SplitConfig: Frozen configuration dataclass
- count_graphemes: User-perceived character counting
- split_into_sentences: Abbreviation-aware sentence splitting
- split_on_words: Word packing for oversized sentences
- split_into_post_chunks: Main paragraph chunking function
- has_unclosed_quote / is_inside_quote: Quote-balance tracking
- group_chunks_into_threads: Thread grouping
"""

from gutenpost.splitter.core import split_into_post_chunks
from gutenpost.splitter.grapheme_counting import count_graphemes
from gutenpost.splitter.models import (
    DEFAULT_CONFIG,
    MAX_GRAPHEMES,
    MAX_THREAD_LENGTH,
    THREAD_OVERFLOW,
    Chunk,
    SplitConfig,
    Thread,
)
from gutenpost.splitter.quote_tracking import has_unclosed_quote, is_inside_quote
from gutenpost.splitter.sentence_splitting import (
    ABBREVIATIONS,
    is_abbreviation,
    split_into_sentences,
)
from gutenpost.splitter.thread_grouping import group_chunks_into_threads
from gutenpost.splitter.word_packing import split_on_words

__all__ = [
    # Constants
    "ABBREVIATIONS",
    "DEFAULT_CONFIG",
    "MAX_GRAPHEMES",
    "MAX_THREAD_LENGTH",
    "THREAD_OVERFLOW",
    # Models
    "Chunk",
    "SplitConfig",
    "Thread",
    # Public API - Splitting
    "split_into_post_chunks",
    "split_into_sentences",
    "split_on_words",
    # Public API - Threads
    "group_chunks_into_threads",
    "has_unclosed_quote",
    "is_inside_quote",
    # Public API - Utilities
    "count_graphemes",
    "is_abbreviation",
]
