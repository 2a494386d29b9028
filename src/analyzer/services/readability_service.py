# src/analyzer/services/readability_service.py
import math
import re
from typing import List, NamedTuple

from analyzer.model import ReadabilityScores

_VOWEL_GROUPS = re.compile(r"[aeiouy]+")
_NON_ALPHA = re.compile(r"[^a-z]")
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")

GRADE_LABELS = (
    (6, "Elementary"),
    (8, "Middle School"),
    (12, "High School"),
    (16, "College"),
)

DIFFICULTY_LABELS = (
    (90, "Very Easy"),
    (80, "Easy"),
    (70, "Fairly Easy"),
    (60, "Standard"),
    (50, "Fairly Difficult"),
    (30, "Difficult"),
)


class TextStats(NamedTuple):
    words: int
    sentences: int
    syllables: int
    complex_words: int
    characters: int


def split_words(text: str) -> List[str]:
    return [w for w in (text or "").split() if w]


def split_sentences(text: str) -> List[str]:
    return [s for s in _SENTENCE_SPLIT.split(text or "") if s.strip()]


def count_syllables(word: str) -> int:
    """
    Heuristic English syllable count based on vowel groups.
    Words of up to three letters count as one syllable.
    """
    word = _NON_ALPHA.sub("", (word or "").lower())
    if not word:
        return 0
    if len(word) <= 3:
        return 1

    count = len(_VOWEL_GROUPS.findall(word))
    if word.endswith("e"):
        count -= 1
    if word.endswith("le") and word[-3] not in "aeiouy":
        count += 1
    return max(count, 1)


def simple_syllable_count(text: str) -> int:
    """Vowel-group count over a whole text, used by the quick reading-ease figure."""
    return len(re.split(r"[aeiouy]+", text or "", flags=re.IGNORECASE)) - 1


def text_stats(text: str) -> TextStats:
    words = split_words(text)
    syllables = 0
    complex_words = 0
    characters = 0
    for word in words:
        s = count_syllables(word)
        syllables += s
        if s >= 3:
            complex_words += 1
        characters += len(_NON_ALNUM.sub("", word))
    return TextStats(
        words=len(words),
        sentences=len(split_sentences(text)),
        syllables=syllables,
        complex_words=complex_words,
        characters=characters,
    )


def simple_reading_ease(text: str) -> float:
    """206.835 - 1.015 * (words / sentences) - 84.6 * (syllables / words)."""
    words = len(split_words(text))
    if words == 0:
        return 0.0
    sentences = len(split_sentences(text))
    syllables = simple_syllable_count(text)
    score = 206.835 - 1.015 * (words / max(sentences, 1)) - 84.6 * (syllables / max(words, 1))
    return round(score, 2)


def calculate_scores(stats: TextStats) -> ReadabilityScores:
    """
    Computes the six classic readability formulas.

    Args:
        stats: Aggregated counts for the text.

    Returns:
        ReadabilityScores: All formulas rounded to two decimals; zeros for empty text.
    """
    if stats.words == 0:
        return ReadabilityScores()

    w = stats.words
    s = max(stats.sentences, 1)
    syl = stats.syllables
    complex_words = stats.complex_words
    chars = stats.characters

    words_per_sentence = w / s
    letters_per_100 = chars / w * 100
    sentences_per_100 = s / w * 100

    return ReadabilityScores(
        flesch_kincaid=round(0.39 * words_per_sentence + 11.8 * (syl / w) - 15.59, 2),
        flesch_reading_ease=round(206.835 - 1.015 * words_per_sentence - 84.6 * (syl / w), 2),
        smog=round(1.043 * math.sqrt(complex_words * (30 / s)) + 3.1291, 2),
        ari=round(4.71 * (chars / w) + 0.5 * words_per_sentence - 21.43, 2),
        coleman_liau=round(0.0588 * letters_per_100 - 0.296 * sentences_per_100 - 15.8, 2),
        gunning_fog=round(0.4 * (words_per_sentence + 100 * (complex_words / w)), 2),
    )


def overall_readability(scores: ReadabilityScores) -> float:
    """Mean of reading ease and the grade formulas mapped onto 0..100."""
    normalized = [max(0.0, min(100.0, scores.flesch_reading_ease))]
    for grade in (scores.flesch_kincaid, scores.smog, scores.ari, scores.coleman_liau, scores.gunning_fog):
        normalized.append(max(0.0, 100 - grade * 5))
    return round(sum(normalized) / len(normalized), 2)


def grade_label(grade: float) -> str:
    for limit, label in GRADE_LABELS:
        if grade <= limit:
            return label
    return "Graduate"


def difficulty_label(reading_ease: float) -> str:
    for limit, label in DIFFICULTY_LABELS:
        if reading_ease >= limit:
            return label
    return "Very Difficult"
