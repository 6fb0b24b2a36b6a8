"""Reading progress persisted between runs.

State is a small JSON document:
    {"currentParagraph": 12, "lastPostUri": "at://...", "lastPostAt": "..."}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class PostingState:
    """Position in the book and the most recent post.

    Attributes:
        current_paragraph: Index of the next unposted paragraph (0-indexed)
        last_post_uri: URI of the most recent thread root, if any
        last_post_at: ISO-8601 UTC timestamp of the most recent post
    """

    current_paragraph: int = 0
    last_post_uri: str | None = None
    last_post_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"currentParagraph": self.current_paragraph}
        if self.last_post_uri is not None:
            data["lastPostUri"] = self.last_post_uri
        if self.last_post_at is not None:
            data["lastPostAt"] = self.last_post_at
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PostingState:
        return cls(
            current_paragraph=int(data.get("currentParagraph", 0)),
            last_post_uri=data.get("lastPostUri"),
            last_post_at=data.get("lastPostAt"),
        )

    def record_post(self, uri: str) -> None:
        """Remember uri as the latest post, stamped with the current time."""
        self.last_post_uri = uri
        self.last_post_at = datetime.now(UTC).isoformat()


def load_state(path: Path) -> PostingState:
    """Load state from path, falling back to defaults.

    A missing file means nothing has been posted yet. A corrupt file is
    logged and replaced by defaults on the next save.
    """
    if not path.exists():
        return PostingState()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return PostingState.from_dict(data)
    except (json.JSONDecodeError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Failed to parse state file %s, using defaults: %s", path, e)
        return PostingState()


def save_state(state: PostingState, path: Path) -> None:
    """Write state to path as indented JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(state.to_dict(), indent=2), encoding="utf-8")


def advance_state(
    state: PostingState, path: Path, uri: str, current_paragraph: int
) -> PostingState:
    """Record a successful post and move the cursor, then save.

    Args:
        state: State to update in place
        path: State file location
        uri: URI of the post just made
        current_paragraph: First paragraph not yet fully posted

    Returns:
        The saved state
    """
    state.current_paragraph = current_paragraph
    state.record_post(uri)
    save_state(state, path)
    return state
