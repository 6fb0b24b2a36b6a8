"""Unit tests for grapheme counting, word packing and chunk assembly.

Test strategy:
- Test grapheme counting on combined characters and emoji
- Test word packing limits and the oversized-word exception
- Test sentence packing, oversized-sentence fallback and invariants
"""

import pytest

from gutenpost.splitter import (
    MAX_GRAPHEMES,
    SplitConfig,
    count_graphemes,
    split_into_post_chunks,
    split_on_words,
)

# =============================================================================
# CONFIG TESTS
# =============================================================================


class TestSplitConfig:
    """Tests for SplitConfig defaults and validation."""

    @pytest.mark.unit
    def test_defaults(self) -> None:
        """Should default to the Bluesky limits."""
        config = SplitConfig()
        assert config.max_graphemes == 300
        assert config.max_thread_length == 3
        assert config.thread_overflow == 2
        assert config.thread_ceiling == 5

    @pytest.mark.unit
    def test_immutable(self) -> None:
        """Config should be a frozen dataclass."""
        config = SplitConfig()
        with pytest.raises(AttributeError):
            config.max_graphemes = 500  # type: ignore[misc]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "kwargs",
        [{"max_graphemes": 0}, {"max_thread_length": 0}, {"thread_overflow": -1}],
    )
    def test_rejects_invalid_values(self, kwargs: dict[str, int]) -> None:
        """Non-positive limits are configuration errors."""
        with pytest.raises(ValueError):
            SplitConfig(**kwargs)


# =============================================================================
# GRAPHEME COUNTING TESTS
# =============================================================================


class TestCountGraphemes:
    """Tests for count_graphemes."""

    @pytest.mark.unit
    def test_empty(self) -> None:
        assert count_graphemes("") == 0

    @pytest.mark.unit
    def test_ascii(self) -> None:
        assert count_graphemes("abc def") == 7

    @pytest.mark.unit
    def test_combining_mark_counts_once(self) -> None:
        """e + combining acute accent is one user-perceived character."""
        text = "cafe\u0301"
        assert len(text) == 5
        assert count_graphemes(text) == 4

    @pytest.mark.unit
    def test_flag_counts_once(self) -> None:
        """A regional-indicator pair is one grapheme."""
        assert count_graphemes("\U0001f1eb\U0001f1f7") == 1


# =============================================================================
# WORD PACKING TESTS
# =============================================================================


class TestSplitOnWords:
    """Tests for split_on_words."""

    @pytest.mark.unit
    def test_packs_greedily(self) -> None:
        """Words are added while the fragment stays within the limit."""
        config = SplitConfig(max_graphemes=10)
        assert split_on_words("aaaa bbbb cccc", config) == ["aaaa bbbb", "cccc"]

    @pytest.mark.unit
    def test_exact_fit(self) -> None:
        """A fragment exactly at the limit is allowed."""
        config = SplitConfig(max_graphemes=9)
        assert split_on_words("aaaa bbbb", config) == ["aaaa bbbb"]

    @pytest.mark.unit
    def test_collapses_whitespace_runs(self) -> None:
        config = SplitConfig(max_graphemes=100)
        assert split_on_words("one  two\tthree\n four", config) == ["one two three four"]

    @pytest.mark.unit
    def test_single_oversized_word_passes_through(self) -> None:
        """A 400-grapheme word is returned whole, never truncated."""
        word = "a" * 400
        fragments = split_on_words(word)
        assert fragments == [word]
        assert count_graphemes(fragments[0]) == 400

    @pytest.mark.unit
    def test_oversized_word_between_words(self) -> None:
        """An oversized word gets a fragment of its own."""
        config = SplitConfig(max_graphemes=10)
        long_word = "x" * 15
        assert split_on_words(f"ab {long_word} cd", config) == ["ab", long_word, "cd"]

    @pytest.mark.unit
    def test_empty_text(self) -> None:
        assert split_on_words("") == []


# =============================================================================
# CHUNK ASSEMBLY TESTS
# =============================================================================


class TestSplitIntoPostChunks:
    """Tests for split_into_post_chunks."""

    @pytest.mark.unit
    def test_short_paragraph_unchanged(self) -> None:
        """A paragraph within the limit is returned as-is."""
        paragraph = "Short  paragraph. With odd spacing."
        assert split_into_post_chunks(paragraph) == [paragraph]

    @pytest.mark.unit
    def test_exactly_at_limit(self) -> None:
        paragraph = "a" * MAX_GRAPHEMES
        assert split_into_post_chunks(paragraph) == [paragraph]

    @pytest.mark.unit
    def test_limit_counts_graphemes_not_code_points(self) -> None:
        """300 accented letters built from combining marks still fit one post."""
        paragraph = "e\u0301" * MAX_GRAPHEMES
        assert len(paragraph) == 2 * MAX_GRAPHEMES
        assert split_into_post_chunks(paragraph) == [paragraph]

    @pytest.mark.unit
    def test_packs_sentences(self) -> None:
        """Sentences are packed greedily up to the limit."""
        config = SplitConfig(max_graphemes=40)
        paragraph = "The cat sat. The dog ran far away. A bird sang loudly today."
        assert split_into_post_chunks(paragraph, config) == [
            "The cat sat. The dog ran far away.",
            "A bird sang loudly today.",
        ]

    @pytest.mark.unit
    def test_oversized_sentence_falls_back_to_words(self) -> None:
        """Word fragments of a long sentence become chunks of their own."""
        config = SplitConfig(max_graphemes=20)
        paragraph = "Short one. This sentence is definitely far too long to fit. End."
        assert split_into_post_chunks(paragraph, config) == [
            "Short one.",
            "This sentence is",
            "definitely far too",
            "long to fit.",
            "End.",
        ]

    @pytest.mark.unit
    def test_single_huge_word(self) -> None:
        """A paragraph that is one oversized word stays one chunk."""
        word = "z" * 450
        assert split_into_post_chunks(word) == [word]

    @pytest.mark.unit
    def test_empty_paragraph(self) -> None:
        assert split_into_post_chunks("") == [""]


class TestChunkInvariants:
    """Invariants that must hold for any paragraph."""

    @pytest.mark.unit
    def test_long_paragraph_is_split(self, long_paragraph: str) -> None:
        assert count_graphemes(long_paragraph) > MAX_GRAPHEMES
        assert len(split_into_post_chunks(long_paragraph)) > 1

    @pytest.mark.unit
    @pytest.mark.parametrize("max_graphemes", [25, 60, 120, 300])
    def test_words_reconstructed_in_order(self, long_paragraph: str, max_graphemes: int) -> None:
        """Joining chunks with spaces reproduces the paragraph's words."""
        chunks = split_into_post_chunks(long_paragraph, SplitConfig(max_graphemes=max_graphemes))
        assert " ".join(chunks).split() == long_paragraph.split()

    @pytest.mark.unit
    @pytest.mark.parametrize("max_graphemes", [10, 25, 60, 300])
    def test_chunks_within_limit_or_single_word(
        self, long_paragraph: str, max_graphemes: int
    ) -> None:
        """Every chunk fits, unless it is a single word longer than the limit."""
        chunks = split_into_post_chunks(long_paragraph, SplitConfig(max_graphemes=max_graphemes))
        for chunk in chunks:
            assert chunk
            assert count_graphemes(chunk) <= max_graphemes or len(chunk.split()) == 1
