"""Core data models for the post splitting pipeline.

This module contains the types shared by every splitting stage:
- SplitConfig: Length limits for chunks and threads
- Chunk / Thread: Aliases naming the pipeline's units of output
"""

from __future__ import annotations

from dataclasses import dataclass

# A chunk is the text of one post; a thread is an ordered reply-chain of chunks.
Chunk = str
Thread = list[Chunk]

MAX_GRAPHEMES = 300
MAX_THREAD_LENGTH = 3
THREAD_OVERFLOW = 2


@dataclass(frozen=True)
class SplitConfig:
    """Configuration for post splitting and thread grouping.

    Attributes:
        max_graphemes: Maximum user-perceived characters per post (default: 300,
            the Bluesky post-length cap)
        max_thread_length: Nominal posts per reply-chain before a break is
            considered (default: 3)
        thread_overflow: Extra posts a thread may absorb while a quotation is
            still open (default: 2). The hard ceiling is
            max_thread_length + thread_overflow.
    """

    max_graphemes: int = MAX_GRAPHEMES
    max_thread_length: int = MAX_THREAD_LENGTH
    thread_overflow: int = THREAD_OVERFLOW

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_graphemes <= 0:
            raise ValueError("max_graphemes must be positive")
        if self.max_thread_length <= 0:
            raise ValueError("max_thread_length must be positive")
        if self.thread_overflow < 0:
            raise ValueError("thread_overflow must be non-negative")

    @property
    def thread_ceiling(self) -> int:
        """Largest thread size allowed while deferring a break inside a quote."""
        return self.max_thread_length + self.thread_overflow


DEFAULT_CONFIG = SplitConfig()
