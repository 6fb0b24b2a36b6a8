"""Grouping of chunks into reply-chain threads.

Threads break every max_thread_length chunks, except that a break landing
inside an open quotation is deferred so dialogue stays in one reply-chain.
Deferral is capped at max_thread_length + thread_overflow chunks; past that
the thread is broken even though the quotation spans the boundary.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from gutenpost.splitter.models import DEFAULT_CONFIG, Chunk, SplitConfig, Thread
from gutenpost.splitter.quote_tracking import is_inside_quote

logger = logging.getLogger(__name__)


def group_chunks_into_threads(
    chunks: Sequence[Chunk], config: SplitConfig = DEFAULT_CONFIG
) -> list[Thread]:
    """Partition chunks into ordered threads.

    Args:
        chunks: Ordered chunks of one episode
        config: Split configuration providing thread limits

    Returns:
        Threads whose concatenation equals chunks. An empty input yields an
        empty list; up to max_thread_length chunks yield a single thread.
    """
    if not chunks:
        return []
    if len(chunks) <= config.max_thread_length:
        return [list(chunks)]

    threads: list[Thread] = []
    current: Thread = []
    last_index = len(chunks) - 1

    for i, chunk in enumerate(chunks):
        current.append(chunk)

        if len(current) < config.max_thread_length:
            continue

        if i == last_index or not is_inside_quote(chunks, i):
            threads.append(current)
            current = []
        elif len(current) >= config.thread_ceiling:
            logger.debug(
                "Forcing thread break inside open quote after %d chunks",
                len(current),
            )
            threads.append(current)
            current = []

    if current:
        threads.append(current)

    return threads
