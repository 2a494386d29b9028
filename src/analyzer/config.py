# src/analyzer/config.py
"""
Versioned constant tables for every analysis phase.

Scoring, prioritization and recommendation logic read their thresholds,
penalties and weights from an AnalyzerConfig instance, so each phase is a pure
function of (facts, config). The tables are frozen; tuning happens by building
a new config via AnalyzerConfig.from_overrides().
"""
from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field

CONFIG_VERSION = "2024.1"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ExtractionConfig(_Frozen):
    security_headers: Tuple[str, ...] = (
        "content-security-policy",
        "x-content-type-options",
        "x-frame-options",
        "strict-transport-security",
        "x-xss-protection",
        "referrer-policy",
        "permissions-policy",
    )
    rich_result_types: Tuple[str, ...] = ("BreadcrumbList", "Article", "Product", "FAQPage")
    thin_content_words: int = 100
    top_keywords: int = 5
    min_keyword_length: int = 3


class TechnicalPenalties(_Frozen):
    no_https: int = 20
    no_viewport: int = 10
    no_canonical: int = 10
    no_robots_meta: int = 10
    robots_txt_missing: int = 10
    few_security_headers: int = 10
    redirect: int = 5


class OnPagePenalties(_Frozen):
    no_title: int = 20
    no_meta_description: int = 10
    no_h1: int = 10
    multiple_h1: int = 10
    images_missing_alt: int = 10


class ContentPenalties(_Frozen):
    thin_content: int = 20
    poor_readability: int = 10
    duplicate_title: int = 10
    duplicate_description: int = 10
    duplicate_h1: int = 10


class StructuredPenalties(_Frozen):
    no_json_ld: int = 20
    json_ld_errors: int = 10
    duplicate_schemas: int = 10


class VitalThreshold(_Frozen):
    good: float
    needs_improvement: float
    weight: float


class ScoringConfig(_Frozen):
    technical: TechnicalPenalties = Field(default_factory=TechnicalPenalties)
    onpage: OnPagePenalties = Field(default_factory=OnPagePenalties)
    content: ContentPenalties = Field(default_factory=ContentPenalties)
    structured: StructuredPenalties = Field(default_factory=StructuredPenalties)

    # Subfactor weights per category, used for the score breakdown.
    subfactor_weights: Dict[str, Dict[str, float]] = Field(default_factory=lambda: {
        "technical": {"security": 0.4, "crawlability": 0.4, "mobile": 0.2},
        "onpage": {"meta_tags": 0.5, "headings": 0.3, "images": 0.2},
        "content": {"depth": 0.4, "readability": 0.3, "uniqueness": 0.3},
        "structured": {"presence": 0.5, "validity": 0.3, "uniqueness": 0.2},
    })

    # Overall weights. UX is folded in per present subscore.
    category_weights: Dict[str, float] = Field(default_factory=lambda: {
        "technical": 0.30,
        "content": 0.25,
        "onpage": 0.25,
        "structured": 0.15,
    })
    ux_weights: Dict[str, float] = Field(default_factory=lambda: {
        "performance": 0.05,
        "accessibility": 0.05,
    })

    min_security_headers: int = 3
    readability_threshold: float = 60.0
    unknown_category_score: int = 60

    # Core Web Vitals grading.
    vital_grades: Tuple[int, int, int] = (100, 75, 25)
    vitals: Dict[str, VitalThreshold] = Field(default_factory=lambda: {
        "lcp": VitalThreshold(good=2500, needs_improvement=4000, weight=0.3),
        "fid": VitalThreshold(good=100, needs_improvement=300, weight=0.3),
        "inp": VitalThreshold(good=200, needs_improvement=500, weight=0.3),
        "cls": VitalThreshold(good=0.1, needs_improvement=0.25, weight=0.3),
        "fcp": VitalThreshold(good=1800, needs_improvement=3000, weight=0.05),
        "ttfb": VitalThreshold(good=600, needs_improvement=1200, weight=0.05),
    })

    risk_per_severity: Dict[str, int] = Field(default_factory=lambda: {"critical": 10, "high": 5})


class ContentAnalysisConfig(_Frozen):
    words_per_minute: int = 250
    depth_bands: Tuple[Tuple[int, int], ...] = (
        (2000, 100), (1500, 90), (1000, 80), (500, 60), (300, 40),
    )
    depth_floor: int = 20
    readability_bands: Tuple[Tuple[float, int], ...] = (
        (90, 100), (80, 90), (70, 80), (60, 70), (50, 60), (30, 40),
    )
    readability_floor: int = 20
    freshness_bands: Tuple[Tuple[int, int], ...] = (
        (30, 100), (90, 80), (180, 60), (365, 40),
    )
    freshness_floor: int = 20
    freshness_unknown: int = 70
    stale_after_days: int = 180
    stuffing_density: float = 0.03
    quality_base: int = 80
    min_uniqueness: float = 0.3
    keyword_base: int = 70


class IssueConfig(_Frozen):
    title_max_length: int = 60
    title_min_length: int = 30
    meta_description_max_length: int = 160
    meta_description_min_length: int = 120
    severe_performance: int = 30
    poor_performance: int = 50
    mobile_performance: int = 50
    min_accessibility: int = 50
    min_internal_links: int = 3


class RecommendationConfig(_Frozen):
    severity_to_priority: Dict[str, str] = Field(default_factory=lambda: {
        "critical": "immediate", "high": "high", "medium": "medium", "low": "low",
    })
    priority_to_timeline: Dict[str, str] = Field(default_factory=lambda: {
        "immediate": "immediate", "high": "short-term", "medium": "medium-term", "low": "long-term",
    })
    priority_weights: Dict[str, int] = Field(default_factory=lambda: {
        "immediate": 4, "high": 3, "medium": 2, "low": 1,
    })
    strategic_base: int = 5
    impact_bonus: Dict[str, int] = Field(default_factory=lambda: {"high": 2, "medium": 1, "low": 0})
    complexity_bonus: Dict[str, int] = Field(default_factory=lambda: {"easy": 2, "medium": 1, "hard": -1})
    strategic_threshold: int = 7
    proactive_content_words: int = 500


class ConfidenceConfig(_Frozen):
    start: int = 100
    no_metrics: int = 15
    not_rendered: int = 10
    phase_error: int = 25
    few_issues: int = 10
    few_issues_threshold: int = 5
    floor: int = 50


class AnalyzerConfig(_Frozen):
    version: str = CONFIG_VERSION
    analysis_version: str = "2.0.0"
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    content: ContentAnalysisConfig = Field(default_factory=ContentAnalysisConfig)
    issues: IssueConfig = Field(default_factory=IssueConfig)
    recommendations: RecommendationConfig = Field(default_factory=RecommendationConfig)
    confidence: ConfidenceConfig = Field(default_factory=ConfidenceConfig)

    @classmethod
    def from_overrides(cls, overrides: Dict[str, Any]) -> "AnalyzerConfig":
        """
        Builds a config from the defaults with nested overrides applied,
        e.g. {"issues": {"title_max_length": 70}}.
        """
        merged = _deep_merge(DEFAULT_CONFIG.model_dump(), overrides or {})
        return cls.model_validate(merged)


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _deep_merge(out[key], value)
        else:
            out[key] = value
    return out


DEFAULT_CONFIG = AnalyzerConfig()
