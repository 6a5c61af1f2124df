from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple

# ASCII word characters; contractions and hyphenated words split into parts.
WORD_PATTERN = re.compile(r"\b\w+\b", re.ASCII)
SENTENCE_SPLIT_PATTERN = re.compile(r"[.!?]+")
PARAGRAPH_SPLIT_PATTERN = re.compile(r"\n\s*\n")
LETTER_PATTERN = re.compile(r"[a-zA-Z]")


@dataclass(frozen=True, slots=True)
class TextSegments:
    """Words, sentences and paragraphs of a text plus the counts derived from them."""

    text: str
    words: Tuple[str, ...]
    sentences: Tuple[str, ...]
    paragraphs: Tuple[str, ...]

    @property
    def char_count(self) -> int:
        return len(self.text)

    @property
    def word_count(self) -> int:
        return len(self.words)

    @property
    def sentence_count(self) -> int:
        return len(self.sentences)

    @property
    def paragraph_count(self) -> int:
        return len(self.paragraphs)

    @property
    def letter_count(self) -> int:
        return count_letters(self.text)


def tokenize_words(text: str) -> list[str]:
    """Return every run of word characters in order of appearance."""
    return WORD_PATTERN.findall(text)


def split_sentences(text: str) -> list[str]:
    """
    Split on runs of terminal punctuation, dropping blank fragments.

    Fragments keep their surrounding whitespace so callers can locate them in
    the source text. Abbreviations such as "Mr." end a sentence.
    """
    return [part for part in SENTENCE_SPLIT_PATTERN.split(text) if part.strip()]


def split_paragraphs(text: str) -> list[str]:
    """Split on blank lines, dropping blank fragments."""
    return [part for part in PARAGRAPH_SPLIT_PATTERN.split(text) if part.strip()]


def count_letters(text: str) -> int:
    return len(LETTER_PATTERN.findall(text))


def segment_text(text: str) -> TextSegments:
    """Decompose text into the word, sentence and paragraph sequences."""
    return TextSegments(
        text=text,
        words=tuple(tokenize_words(text)),
        sentences=tuple(split_sentences(text)),
        paragraphs=tuple(split_paragraphs(text)),
    )
