"""Episode assembly: which paragraphs to post next and how.

An episode is the unit of one run. It starts at the reading cursor and keeps
pulling in paragraphs while the last one ends with a colon, so a paragraph
that introduces a quotation or a list is never posted without it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gutenpost.splitter import (
    DEFAULT_CONFIG,
    Chunk,
    SplitConfig,
    Thread,
    group_chunks_into_threads,
    split_into_post_chunks,
)

if TYPE_CHECKING:
    from gutenpost.poster.text_source import TextSource


@dataclass
class Episode:
    """Paragraphs of one run with their chunks and threads.

    Attributes:
        start_index: Index of the first paragraph (0-indexed)
        paragraphs: Paragraph texts in reading order
        chunks: All chunks of all paragraphs, in order
        threads: Chunks grouped into reply-chains
        chunk_counts: Number of chunks each paragraph produced
    """

    start_index: int
    paragraphs: list[str]
    chunks: list[Chunk] = field(default_factory=list)
    threads: list[Thread] = field(default_factory=list)
    chunk_counts: list[int] = field(default_factory=list)

    @property
    def consumed(self) -> int:
        """Number of paragraphs this episode covers."""
        return len(self.paragraphs)

    @property
    def next_index(self) -> int:
        return self.start_index + self.consumed

    def paragraphs_completed(self, chunks_posted: int) -> int:
        """Count leading paragraphs whose chunks are all among the first chunks_posted.

        Examples:
            >>> episode = Episode(0, ["a", "b"], chunk_counts=[3, 3])
            >>> episode.paragraphs_completed(2), episode.paragraphs_completed(3)
            (0, 1)
        """
        completed = 0
        running_total = 0
        for count in self.chunk_counts:
            running_total += count
            if running_total > chunks_posted:
                break
            completed += 1
        return completed


def ends_with_colon(text: str) -> bool:
    return text.rstrip().endswith(":")


def collect_paragraphs(source: TextSource, start: int) -> list[str]:
    """Collect paragraphs from start, following colon continuations.

    Args:
        source: Paragraph source
        start: Index of the first paragraph

    Returns:
        Paragraphs in order; empty if start is past the end of the book
    """
    paragraphs: list[str] = []
    index = start

    while index < source.total:
        paragraph = source.paragraph(index)
        if paragraph is None:
            break

        paragraphs.append(paragraph)
        index += 1

        if not ends_with_colon(paragraph):
            break

    return paragraphs


def build_episode(
    paragraphs: list[str],
    start_index: int = 0,
    config: SplitConfig = DEFAULT_CONFIG,
) -> Episode:
    """Split paragraphs into chunks and group them into threads.

    Chunks of all paragraphs form one sequence before grouping, so a thread
    may span a paragraph boundary.
    """
    chunks: list[Chunk] = []
    chunk_counts: list[int] = []
    for paragraph in paragraphs:
        paragraph_chunks = split_into_post_chunks(paragraph, config)
        chunk_counts.append(len(paragraph_chunks))
        chunks.extend(paragraph_chunks)

    return Episode(
        start_index=start_index,
        paragraphs=paragraphs,
        chunks=chunks,
        threads=group_chunks_into_threads(chunks, config),
        chunk_counts=chunk_counts,
    )
