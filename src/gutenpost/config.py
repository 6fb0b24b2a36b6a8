"""Project configuration loaded from pyproject.toml and the environment."""

from __future__ import annotations

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel

from gutenpost.splitter.models import SplitConfig

DEFAULT_SOURCE_URL = "https://www.gutenberg.org/cache/epub/1564/pg1564.txt"


class GutenpostConfig(BaseModel):
    """Configuration for the gutenpost project."""

    # Splitting limits (graphemes per post, posts per thread)
    max_graphemes: int = 300
    max_thread_length: int = 3
    thread_overflow: int = 2

    # Book source
    source_url: str = DEFAULT_SOURCE_URL
    cache_path: Path = Path("data/book.txt")

    # Reading progress
    state_path: Path = Path("data/state.json")

    # Posting service
    service_url: str = "https://bsky.social"
    request_timeout_seconds: float = 30.0

    def split_config(self) -> SplitConfig:
        """Build the splitter configuration from the project limits."""
        return SplitConfig(
            max_graphemes=self.max_graphemes,
            max_thread_length=self.max_thread_length,
            thread_overflow=self.thread_overflow,
        )


@lru_cache(maxsize=1)
def load_config() -> GutenpostConfig:
    """Load configuration from pyproject.toml and environment overrides.

    Returns:
        GutenpostConfig with settings from the [tool.gutenpost] section,
        falling back to defaults if not found. GUTENBERG_URL (from the
        environment or a .env file) overrides source_url.
    """
    load_dotenv()

    tool_config: dict[str, Any] = {}
    pyproject_path = _find_pyproject()
    if pyproject_path is not None:
        with pyproject_path.open("rb") as f:
            data = tomllib.load(f)
        tool_config = dict(data.get("tool", {}).get("gutenpost", {}))

    source_url = os.getenv("GUTENBERG_URL")
    if source_url:
        tool_config["source_url"] = source_url

    return GutenpostConfig(**tool_config)


def _find_pyproject() -> Path | None:
    """Find pyproject.toml by walking up from current file."""
    current = Path(__file__).resolve().parent
    for _ in range(10):  # Max 10 levels up
        candidate = current / "pyproject.toml"
        if candidate.exists():
            return candidate
        if current.parent == current:
            break
        current = current.parent
    return None
