"""Shared pytest fixtures for gutenpost tests."""

from pathlib import Path

import pytest

from gutenpost.config import GutenpostConfig

FIXTURES_DIR = Path(__file__).parent / "fixtures"
BOOK_FIXTURES_DIR = FIXTURES_DIR / "book"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def sample_book_text() -> str:
    """Small Gutenberg-style book with header, body and footer."""
    return (BOOK_FIXTURES_DIR / "sample_book.txt").read_text(encoding="utf-8")


@pytest.fixture
def sample_paragraphs() -> list[str]:
    """Paragraphs expected from the sample book body."""
    return [
        "CHAPTER I",
        "It was a bright cold day in April. Dr. Smith arrived at the station and looked about him.",
        "He wrote the following note:",
        '"Meet me at the old mill."',
        "The end came quickly.",
    ]


@pytest.fixture
def gutenpost_config(tmp_path: Path) -> GutenpostConfig:
    """Config whose cache and state live in a temporary directory."""
    return GutenpostConfig(
        source_url="https://example.org/book.txt",
        cache_path=tmp_path / "data" / "book.txt",
        state_path=tmp_path / "data" / "state.json",
    )


@pytest.fixture
def cached_config(gutenpost_config: GutenpostConfig, sample_book_text: str) -> GutenpostConfig:
    """Config with the sample book already in the cache (no network needed)."""
    gutenpost_config.cache_path.parent.mkdir(parents=True, exist_ok=True)
    gutenpost_config.cache_path.write_text(sample_book_text, encoding="utf-8")
    return gutenpost_config


@pytest.fixture
def long_paragraph() -> str:
    """Paragraph of about 900 graphemes with dialogue spanning sentences."""
    sentences = [
        "The morning fog lay heavy over the harbour, and the fishing boats rocked gently at their moorings.",
        "Old Tom, who had sailed these waters for fifty years, stood at the end of the pier watching the tide.",
        '"You\'ll not see a day like this again," he said to the boy beside him.',
        "The boy did not answer at first; he was counting the gulls that circled above the lighthouse.",
        '"Why not?" he asked at last. "It looks like any other day to me."',
        "Tom laughed, a low rumbling sound that seemed to come from somewhere deep in his chest.",
        '"That\'s what they all say," he replied. "Until the day comes when they\'d give anything to see it once more."',
        "They stood together in silence until the bell of St. Mary's rang out across the water.",
        "Then, without another word, the old man turned and walked slowly back towards the village.",
    ]
    return " ".join(sentences)
