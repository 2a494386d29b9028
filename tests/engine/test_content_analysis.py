# tests/engine/test_content_analysis.py
from datetime import timedelta

import pytest

from analyzer.config import DEFAULT_CONFIG
from analyzer.model import ContentFacts, OnPageFacts, PageFacts
from analyzer.result_model import ContentInsights
from analyzer.services.content_analysis_service import ContentAnalysisService, band_score, has_skipped_levels
from conftest import REFERENCE_TIME


@pytest.fixture
def service():
    return ContentAnalysisService(DEFAULT_CONFIG.content)


def make_facts(content=None, onpage=None):
    return PageFacts(
        url="https://example.com/basil",
        content=content or ContentFacts(word_count=1200, paragraph_count=12, sentence_count=100),
        onpage=onpage or OnPageFacts(
            headings={"h1": ("Basil",), "h2": ("Sowing", "Harvest"), "h3": (), "h4": (), "h5": (), "h6": ()},
            heading_outline=(1, 2, 2),
        ),
    )


def test_band_score():
    bands = ((100, 90), (50, 60))
    assert band_score(150, bands, 10) == 90
    assert band_score(50, bands, 10) == 60
    assert band_score(49, bands, 10) == 10


@pytest.mark.parametrize("outline, skipped", [
    ((1, 2, 3), False),
    ((2, 1, 2, 3), False),
    ((1, 3), True),
    ((1, 2, 4), True),
    ((), False),
])
def test_has_skipped_levels(outline, skipped):
    assert has_skipped_levels(outline) is skipped


def test_depth_well_structured(service):
    depth = service.analyze_depth(make_facts())
    assert depth.score == 80
    assert depth.reading_time_minutes == 5
    assert depth.average_sentence_length == 12.0
    assert depth.structure.well_organized
    assert depth.structure.logical_flow
    assert depth.structure.heading_counts == {"h1": 1, "h2": 2}
    assert depth.recommendations == ()


def test_depth_penalises_skipped_heading_levels(service):
    onpage = OnPageFacts(heading_outline=(1, 3))
    depth = service.analyze_depth(make_facts(onpage=onpage))
    assert depth.score == 70
    assert not depth.structure.well_organized
    assert any("skipped heading levels" in r for r in depth.recommendations)


def test_quality_of_thin_repetitive_content(service):
    content = ContentFacts(
        word_count=80, is_thin_content=True, keyword_token_count=60, unique_word_ratio=0.2, duplicate_h1=True,
    )
    quality = service.analyze_quality(make_facts(content=content))
    assert quality.score == 80 - 20 - 15 - 5
    assert len(quality.issues) == 3
    assert quality.grammar_errors is None
    assert quality.spelling_errors is None


def test_quality_bonus_for_long_clean_content(service):
    content = ContentFacts(word_count=1500, keyword_token_count=700, unique_word_ratio=0.6)
    assert service.analyze_quality(make_facts(content=content)).score == 90


def test_keyword_stuffing_and_distribution(service):
    content = ContentFacts(
        word_count=100,
        top_keywords={"basil": 5, "garden": 2},
        first_paragraph="Basil is easy to grow.",
    )
    onpage = OnPageFacts(title="Basil guide", headings={"h1": ("Growing basil",)})
    keywords = service.analyze_keywords(make_facts(content=content, onpage=onpage))

    assert keywords.primary_keyword == "basil"
    assert keywords.density == {"basil": 0.05, "garden": 0.02}
    assert keywords.stuffing_risk
    assert keywords.distribution.in_title
    assert keywords.distribution.in_h1
    assert keywords.distribution.in_first_paragraph
    assert not keywords.distribution.in_meta_description
    assert keywords.score == 70 + 10 + 10 + 5 - 30


def test_keywords_without_text(service):
    keywords = service.analyze_keywords(make_facts(content=ContentFacts()))
    assert keywords.primary_keyword is None
    assert keywords.recommendations


@pytest.mark.parametrize("age_days, score, needs_update, frequency", [
    (10, 100, False, "recently updated"),
    (60, 80, False, "periodically updated"),
    (200, 40, True, "rarely updated"),
    (900, 20, True, "rarely updated"),
])
def test_freshness_bands(service, age_days, score, needs_update, frequency):
    content = ContentFacts(word_count=500, modified_at=REFERENCE_TIME - timedelta(days=age_days))
    freshness = service.analyze_freshness(make_facts(content=content), REFERENCE_TIME)
    assert freshness.days_since_update == age_days
    assert freshness.score == score
    assert freshness.needs_update is needs_update
    assert freshness.update_frequency == frequency


def test_freshness_uses_latest_date(service):
    content = ContentFacts(
        published_at=REFERENCE_TIME - timedelta(days=400),
        last_modified=REFERENCE_TIME - timedelta(days=3),
    )
    freshness = service.analyze_freshness(make_facts(content=content), REFERENCE_TIME)
    assert freshness.age_days == 400
    assert freshness.days_since_update == 3
    assert freshness.modified_at == REFERENCE_TIME - timedelta(days=3)


def test_freshness_without_dates(service):
    freshness = service.analyze_freshness(make_facts(content=ContentFacts()), REFERENCE_TIME)
    assert freshness.score == 70
    assert freshness.days_since_update is None
    assert not freshness.needs_update


def test_readability_without_words(service):
    readability = service.analyze_readability(make_facts(content=ContentFacts()))
    assert readability.score == 0
    assert readability.suggestions == ("Add readable body text.",)


def test_unknown_content_yields_empty_insights(service):
    facts = make_facts(content=ContentFacts.unknown("boom"))
    assert service.analyze(facts, REFERENCE_TIME) == ContentInsights()


def test_analyze_is_reproducible(service):
    facts = make_facts()
    assert service.analyze(facts, REFERENCE_TIME) == service.analyze(facts, REFERENCE_TIME)
