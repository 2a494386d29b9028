# tests/engine/test_readability.py
import pytest

from analyzer.model import ReadabilityScores
from analyzer.services import readability_service as rs

TEXT = "The cat sat. A beautiful day!"


@pytest.mark.parametrize("word, expected", [
    ("the", 1),
    ("cake", 1),
    ("table", 2),
    ("beautiful", 3),
    ("rhythm", 1),
    ("Reading,", 2),
    ("", 0),
    ("123", 0),
])
def test_count_syllables(word, expected):
    assert rs.count_syllables(word) == expected


def test_text_stats():
    stats = rs.text_stats(TEXT)
    assert stats.words == 6
    assert stats.sentences == 2
    assert stats.syllables == 8
    assert stats.complex_words == 1
    assert stats.characters == 22


def test_calculate_scores_formulas():
    scores = rs.calculate_scores(rs.text_stats(TEXT))
    assert scores.flesch_kincaid == pytest.approx(1.31, abs=0.01)
    assert scores.flesch_reading_ease == pytest.approx(90.99, abs=0.01)
    assert scores.gunning_fog == pytest.approx(7.87, abs=0.01)
    assert scores.smog == pytest.approx(7.17, abs=0.01)
    assert scores.ari == pytest.approx(-2.66, abs=0.01)
    assert scores.coleman_liau == pytest.approx(-4.11, abs=0.01)


def test_empty_text_scores_zero():
    assert rs.calculate_scores(rs.text_stats("")) == ReadabilityScores()
    assert rs.simple_reading_ease("") == 0.0


def test_simple_reading_ease_prefers_short_words():
    easy = rs.simple_reading_ease("The dog ran. The cat sat. We had fun.")
    hard = rs.simple_reading_ease(
        "Comprehensive organizational methodologies necessitate interdisciplinary collaboration."
    )
    assert easy > 60 > hard


def test_overall_readability_is_bounded():
    value = rs.overall_readability(rs.calculate_scores(rs.text_stats(TEXT)))
    assert 0 <= value <= 100


@pytest.mark.parametrize("grade, label", [(5, "Elementary"), (7.5, "Middle School"), (10, "High School"), (20, "Graduate")])
def test_grade_label(grade, label):
    assert rs.grade_label(grade) == label


@pytest.mark.parametrize("ease, label", [(95, "Very Easy"), (65, "Standard"), (55, "Fairly Difficult"), (10, "Very Difficult")])
def test_difficulty_label(ease, label):
    assert rs.difficulty_label(ease) == label
