# tests/engine/test_recommendations.py
import pytest

from analyzer.config import DEFAULT_CONFIG
from analyzer.model import ContentFacts, OnPageFacts, PageFacts, PerformanceMetrics, StructuredDataFacts, TechnicalFacts
from analyzer.services.content_analysis_service import ContentAnalysisService
from analyzer.services.issue_detection_service import IssueDetectionService
from analyzer.services.recommendation_service import RecommendationService, estimate_business_impact
from analyzer.services.scoring_service import ScoringService
from conftest import REFERENCE_TIME


@pytest.fixture
def service():
    return RecommendationService(DEFAULT_CONFIG)


def build(facts):
    scores = ScoringService(DEFAULT_CONFIG.scoring).score(facts)
    insights = ContentAnalysisService(DEFAULT_CONFIG.content).analyze(facts, REFERENCE_TIME)
    issues = IssueDetectionService(DEFAULT_CONFIG).analyze(facts, scores, insights)
    return issues, RecommendationService(DEFAULT_CONFIG).generate(facts, issues)


@pytest.fixture
def broken_page():
    return PageFacts(
        url="http://example.com/",
        technical=TechnicalFacts(),
        onpage=OnPageFacts(images_missing_alt=1, image_count=1),
        content=ContentFacts(word_count=60, sentence_count=6, reading_ease=80.0, is_thin_content=True),
        structured=StructuredDataFacts(),
        performance=PerformanceMetrics(performance_score=0.2, accessibility_score=0.9),
        reference_time=REFERENCE_TIME,
    )


def test_one_recommendation_per_issue(broken_page):
    issues, recs = build(broken_page)
    derived = [r for r in recs.recommendations if r.issue_id is not None]
    assert sorted(r.issue_id for r in derived) == sorted(i.id for i in issues.issues)
    assert all(r.id == f"rec-{r.issue_id}" for r in derived)


def test_quick_win_invariant(broken_page):
    issues, recs = build(broken_page)
    for rec in recs.recommendations:
        if rec.issue_id is None:
            assert rec.quick_win is False
            continue
        issue = issues.get(rec.issue_id)
        assert rec.quick_win == (issue.fix_complexity == "easy" and issue.severity in ("critical", "high"))


def test_specific_template_used_for_known_issue(service, broken_page):
    issues, _ = build(broken_page)
    rec = service.from_issue(issues.get("no-ssl"))
    assert rec.priority == "immediate"
    assert rec.timeline == "immediate"
    assert rec.strategic_value == 8
    assert not rec.quick_win
    assert rec.implementation.difficulty == "intermediate"
    assert [s.title for s in rec.implementation.steps] == [
        "Obtain a certificate", "Redirect HTTP to HTTPS", "Enable HSTS",
    ]
    assert rec.implementation.resources.tools == ("https://www.ssllabs.com/ssltest/",)


def test_generic_template_falls_back_to_issue_guidance(service, broken_page):
    issues, _ = build(broken_page)
    issue = issues.get("missing-canonical")
    rec = service.from_issue(issue)
    assert rec.priority == "medium"
    assert rec.timeline == "medium-term"
    assert rec.implementation.estimated_time == issue.estimated_time
    assert [s.description for s in rec.implementation.steps] == list(issue.implementation_steps)
    assert rec.implementation.steps[0].step == 1
    assert rec.implementation.validation.testing_steps == issue.validation_criteria


def test_severe_performance_is_an_expert_long_term_goal(broken_page):
    _, recs = build(broken_page)
    rec = recs.get("rec-severe-performance")
    assert rec.implementation.difficulty == "expert"
    assert "rec-severe-performance" in recs.strategy.long_term_goals


def test_strategic_value_is_clamped(service):
    assert service.strategic_value("high", "easy") == 9
    assert service.strategic_value("low", "hard") == 4
    tuned = RecommendationService(DEFAULT_CONFIG.from_overrides({"recommendations": {"strategic_base": 12}}))
    assert tuned.strategic_value("high", "easy") == 10
    tuned = RecommendationService(DEFAULT_CONFIG.from_overrides({"recommendations": {"strategic_base": -5}}))
    assert tuned.strategic_value("low", "hard") == 1


def test_ordering_by_priority_then_strategic_value(broken_page):
    _, recs = build(broken_page)
    weights = DEFAULT_CONFIG.recommendations.priority_weights
    keys = [(-weights[r.priority], -r.strategic_value) for r in recs.recommendations]
    assert keys == sorted(keys)


def test_strategy_groups(broken_page):
    _, recs = build(broken_page)
    by_id = {r.id: r for r in recs.recommendations}
    strategy = recs.strategy
    assert all(by_id[i].quick_win for i in strategy.quick_wins)
    assert all(by_id[i].strategic_value >= 7 and not by_id[i].quick_win for i in strategy.strategic_initiatives)
    matrix = strategy.priority_matrix
    placed = list(matrix.immediate) + list(matrix.short_term) + list(matrix.medium_term) + list(matrix.long_term)
    assert sorted(placed) == sorted(by_id)


def test_summary(broken_page):
    _, recs = build(broken_page)
    summary = recs.summary
    assert summary.total == len(recs.recommendations)
    assert sum(summary.priority_distribution.values()) == summary.total
    assert sum(summary.category_distribution.values()) == summary.total
    assert summary.quick_wins == len(recs.strategy.quick_wins)
    assert 1 <= summary.average_strategic_value <= 10


def test_proactive_recommendations_for_healthy_long_page(service):
    facts = PageFacts(
        url="https://example.com/",
        onpage=OnPageFacts(internal_links=1),
        content=ContentFacts(word_count=900),
        structured=StructuredDataFacts(json_ld_count=1, schema_types=("Organization",)),
    )
    recs = service.proactive(facts, issue_ids=set(), taken=set())
    assert [r.id for r in recs] == [
        "proactive-content-enhancement", "proactive-rich-results", "proactive-internal-linking",
    ]
    assert all(r.issue_id is None and not r.quick_win for r in recs)
    assert recs[0].business_impact.estimate == "Moderate engagement improvement"


def test_proactive_recommendations_follow_priority_and_value_rules(service):
    facts = PageFacts(
        url="https://example.com/",
        onpage=OnPageFacts(internal_links=0),
        content=ContentFacts(word_count=900),
        structured=StructuredDataFacts(json_ld_count=1, schema_types=("Organization",)),
    )
    recs = {r.id: r for r in service.proactive(facts, issue_ids=set(), taken=set())}
    assert recs["proactive-content-enhancement"].timeline == "medium-term"
    assert recs["proactive-rich-results"].timeline == "long-term"
    assert recs["proactive-internal-linking"].timeline == "long-term"
    assert {r.strategic_value for r in recs.values()} == {7}
    rules = DEFAULT_CONFIG.recommendations
    for rec in recs.values():
        assert rec.timeline == rules.priority_to_timeline[rec.priority]


def test_proactive_skipped_for_unknown_facts(service):
    facts = PageFacts(
        url="https://example.com/",
        content=ContentFacts.unknown("boom"),
        structured=StructuredDataFacts.unknown("boom"),
    )
    assert service.proactive(facts, issue_ids=set(), taken=set()) == []


def test_no_issues_no_derived_recommendations():
    facts = PageFacts(
        url="https://example.com/",
        technical=TechnicalFacts(
            has_https=True, canonical="https://example.com/", robots_meta="index",
            security_headers=("a", "b", "c"), has_viewport=True,
        ),
        onpage=OnPageFacts(
            title="t" * 45, meta_description="d" * 140, headings={"h1": ("H",)},
            open_graph={"title": "T"}, favicon="/f.ico", html_lang="en", internal_links=4,
        ),
        content=ContentFacts(word_count=300, sentence_count=30, reading_ease=80.0),
        structured=StructuredDataFacts(json_ld_count=1, schema_types=("Article",), rich_results_eligible=True),
        reference_time=REFERENCE_TIME,
    )
    issues, recs = build(facts)
    assert issues.summary.total == 0
    assert recs.recommendations == ()
    assert recs.summary.estimated_implementation_time == "n/a"


def test_business_impact_estimate():
    estimate = estimate_business_impact("high", "technical")
    assert estimate.estimate == "Significant ranking and crawlability gains"
    assert estimate.traffic_impact == "+10-25% organic traffic"
    assert estimate_business_impact("high", "unknown").estimate == "Improvement expected"
