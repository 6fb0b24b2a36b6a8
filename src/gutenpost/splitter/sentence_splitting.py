"""Sentence boundary detection for English prose.

A sentence ends at ``.``, ``!`` or ``?`` followed by a single space or the end
of the paragraph. Two heuristics suppress false boundaries after a period:
- the word before the period is a known abbreviation (``Dr.``, ``etc.``)
- the next word starts with a lowercase letter (``a.m. on Tuesday``)
"""

from __future__ import annotations

import re

# Words that end with a period without ending the sentence
ABBREVIATIONS: frozenset[str] = frozenset(
    {
        # Titles and ranks
        "Mr", "Mrs", "Ms", "Dr", "Prof", "Rev", "Hon", "Sr", "Jr",
        "St", "Mt", "Ft", "Lt", "Gen", "Col", "Capt", "Sgt",
        # Latin and reference shorthand
        "vs", "etc", "al", "eg", "ie", "viz", "cf",
        # Months
        "Jan", "Feb", "Mar", "Apr", "Jun", "Jul", "Aug", "Sep", "Sept", "Oct", "Nov", "Dec",
        # Bibliographic
        "vol", "Vol", "no", "No", "pp", "ed", "Ed",
    }
)  # fmt: skip

SENTENCE_TERMINATORS = frozenset(".!?")

_TRAILING_WORD_PATTERN = re.compile(r"(\w+)\.$", re.ASCII)
_LOWERCASE_PATTERN = re.compile(r"[a-z]")


def is_abbreviation(text: str) -> bool:
    """Check whether text ends with a known abbreviation and its period.

    Args:
        text: Accumulated sentence text ending in a period

    Returns:
        True if the last word before the final period is in ABBREVIATIONS

    Examples:
        >>> is_abbreviation("He met Dr.")
        True
        >>> is_abbreviation("He arrived.")
        False
    """
    match = _TRAILING_WORD_PATTERN.search(text)
    if match is None:
        return False
    return match.group(1) in ABBREVIATIONS


def _continues_in_lowercase(text: str, index: int) -> bool:
    """Check whether the character after the space at index + 1 is lowercase."""
    after_space_index = index + 2
    if after_space_index >= len(text):
        return False
    return _LOWERCASE_PATTERN.match(text[after_space_index]) is not None


def split_into_sentences(text: str) -> list[str]:
    """Split a paragraph into sentences, keeping terminal punctuation.

    The text is scanned character by character. A terminator followed by end
    of input or a single space closes the current sentence unless one of the
    abbreviation heuristics applies. The separating space is consumed and each
    sentence is trimmed.

    Args:
        text: Paragraph text (whitespace already normalized)

    Returns:
        Ordered list of sentences. Text without terminal punctuation yields a
        single sentence; empty or whitespace-only text yields an empty list.

    Examples:
        >>> split_into_sentences("Dr. Smith arrived. He sat down.")
        ['Dr. Smith arrived.', 'He sat down.']
    """
    sentences: list[str] = []
    current = ""
    i = 0
    length = len(text)

    while i < length:
        char = text[i]
        current += char

        if char in SENTENCE_TERMINATORS:
            next_char = text[i + 1] if i + 1 < length else None
            if next_char is None or next_char == " ":
                is_false_boundary = char == "." and (
                    is_abbreviation(current)
                    or (next_char == " " and _continues_in_lowercase(text, i))
                )
                if not is_false_boundary:
                    sentences.append(current.strip())
                    current = ""
                    if next_char == " ":
                        i += 1

        i += 1

    if current.strip():
        sentences.append(current.strip())

    return sentences
