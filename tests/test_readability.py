import pytest

from prose_lens.readability import (
    FLESCH_DIFFICULTY_BANDS,
    _round_half_up,
    difficulty_note,
    flesch_reading_ease,
    grade_level,
)
from prose_lens.syllables import syllable_count


@pytest.mark.parametrize(
    ("word", "expected"),
    [
        ("a", 1),
        ("cat", 1),
        ("xyz", 1),
        ("make", 1),
        ("baked", 1),
        ("table", 2),
        ("yellow", 2),
        ("crwth", 1),
        ("Don't!", 1),
        ("beautiful", 4),
        ("readability", 5),
    ],
)
def test_syllable_count_heuristic(word: str, expected: int):
    assert syllable_count(word) == expected


def test_syllable_count_readability_is_polysyllabic():
    assert syllable_count("readability") >= 3


def test_flesch_reading_ease_is_zero_without_words_or_sentences():
    assert flesch_reading_ease([], 0) == 0
    assert flesch_reading_ease(["cat"], 0) == 0
    assert flesch_reading_ease([], 3) == 0


def test_flesch_reading_ease_is_not_upper_clamped():
    assert flesch_reading_ease(["The", "cat", "sat"], 1) == pytest.approx(119.19)


def test_flesch_reading_ease_clamps_at_zero():
    words = ["internationalization"] * 30

    assert flesch_reading_ease(words, 1) == 0


def test_grade_level_rounds_half_up_and_can_be_negative():
    # 4.71 * 3 + 0.5 * 3 - 21.43 = -5.8
    assert grade_level(letter_count=9, word_count=3, sentence_count=1) == -6
    assert grade_level(letter_count=0, word_count=0, sentence_count=1) == 0
    assert grade_level(letter_count=9, word_count=3, sentence_count=0) == 0


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0.5, 1),
        (1.5, 2),
        (2.5, 3),
        (-0.5, 0),
        (-1.5, -1),
        (-2.5, -2),
        (2.49, 2),
        (-2.51, -3),
    ],
)
def test_round_half_up_exact_halves(value, expected):
    assert _round_half_up(value) == expected


def test_difficulty_note_breakpoints():
    assert [minimum for minimum, _ in FLESCH_DIFFICULTY_BANDS] == [
        90.0,
        80.0,
        70.0,
        60.0,
        50.0,
        30.0,
        10.0,
    ]
    assert difficulty_note(119.0) == "Very easy"
    assert difficulty_note(90) == "Very easy"
    assert difficulty_note(89.9) == "Easy"
    assert difficulty_note(80) == "Easy"
    assert difficulty_note(70) == "Fairly easy"
    assert difficulty_note(60) == "Standard"
    assert difficulty_note(50) == "Fairly difficult"
    assert difficulty_note(30) == "Difficult"
    assert difficulty_note(10) == "Very difficult"
    assert difficulty_note(9.99) == "Extremely difficult"
    assert difficulty_note(0) == "Extremely difficult"
