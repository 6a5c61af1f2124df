from __future__ import annotations

from pathlib import Path


def long_sentence(word_count: int, word: str = "cat") -> str:
    """Build a sentence of word_count copies of word without terminal punctuation."""
    return " ".join([word] * word_count)


def write_sample_corpus(root: Path) -> Path:
    """Create a small corpus of markdown and text files plus an ignored file."""
    corpus_dir = root / "corpus"
    (corpus_dir / "notes").mkdir(parents=True)
    (corpus_dir / "intro.md").write_text(
        "# Intro\n\nHe ran quickly and carefully. I think this is kind of good.\n",
        encoding="utf-8",
    )
    (corpus_dir / "notes" / "draft.txt").write_text(
        "The cake was eaten by the dog.\n\nThe cat sat.",
        encoding="utf-8",
    )
    (corpus_dir / "cover.png").write_bytes(b"\x89PNG")
    return corpus_dir
