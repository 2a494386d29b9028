# src/analyzer/services/scoring_service.py
import logging
from typing import Dict, List, Optional, Tuple

from analyzer.config import ScoringConfig
from analyzer.model import PageFacts, PerformanceMetrics
from analyzer.result_model import CategoryScore, CategoryScores, SubScore

logger = logging.getLogger(__name__)


def clamp(value: float, low: int = 0, high: int = 100) -> int:
    return int(max(low, min(high, round(value))))


class _Penalties:
    """Collects (subfactor, reason, points) triples for one category."""

    def __init__(self, subfactors: Dict[str, float]):
        self._weights = subfactors
        self._items: List[Tuple[str, str, int]] = []

    def add(self, condition: bool, subfactor: str, reason: str, points: int) -> None:
        if condition:
            self._items.append((subfactor, reason, points))

    def to_score(self) -> CategoryScore:
        total = sum(points for _, _, points in self._items)
        breakdown = {}
        for name, weight in self._weights.items():
            lost = sum(points for sub, _, points in self._items if sub == name)
            breakdown[name] = SubScore(score=clamp(100 - lost), weight=weight)
        return CategoryScore(
            score=clamp(100 - total),
            breakdown=breakdown,
            penalties=tuple(reason for _, reason, _ in self._items),
        )


def _grade_vital(value: float, good: float, needs_improvement: float, grades: Tuple[int, int, int]) -> int:
    if value <= good:
        return grades[0]
    if value <= needs_improvement:
        return grades[1]
    return grades[2]


def performance_subscore(metrics: Optional[PerformanceMetrics], config: ScoringConfig) -> Optional[int]:
    """
    Performance on a 0..100 scale: the collaborator's own score when present,
    otherwise a weighted Core Web Vitals grade. None without any metric.
    """
    if metrics is None:
        return None
    if metrics.performance_score is not None:
        return clamp(metrics.performance_score * 100)

    values = {
        "lcp": metrics.lcp,
        "cls": metrics.cls,
        "fcp": metrics.fcp,
        "ttfb": metrics.ttfb,
    }
    # INP supersedes FID for responsiveness.
    if metrics.inp is not None:
        values["inp"] = metrics.inp
    else:
        values["fid"] = metrics.fid

    weighted = 0.0
    total_weight = 0.0
    for name, value in values.items():
        if value is None:
            continue
        threshold = config.vitals[name]
        weighted += threshold.weight * _grade_vital(
            value, threshold.good, threshold.needs_improvement, config.vital_grades
        )
        total_weight += threshold.weight
    if total_weight == 0:
        return None
    return clamp(weighted / total_weight)


def accessibility_subscore(metrics: Optional[PerformanceMetrics]) -> Optional[int]:
    if metrics is None or metrics.accessibility_score is None:
        return None
    return clamp(metrics.accessibility_score * 100)


class ScoringService:
    """
    Converts PageFacts into category scores and a weighted overall score.
    Pure function of (facts, config); holds no per-run state.
    """

    def __init__(self, config: ScoringConfig):
        self.config = config

    # -------- Category scores --------

    def score(self, facts: PageFacts) -> CategoryScores:
        return CategoryScores(
            technical=self._guard(facts, "technical", self._score_technical),
            onpage=self._guard(facts, "onpage", self._score_onpage),
            content=self._guard(facts, "content", self._score_content),
            structured=self._guard(facts, "structured", self._score_structured),
            ux=self._score_ux(facts),
        )

    def _guard(self, facts: PageFacts, namespace: str, scorer) -> CategoryScore:
        if not facts.is_known(namespace):
            logger.debug("Facts for '%s' unknown; using sentinel score.", namespace)
            return CategoryScore(score=self.config.unknown_category_score, status="unknown")
        return scorer(facts)

    def _score_technical(self, facts: PageFacts) -> CategoryScore:
        t = facts.technical
        p = self.config.technical
        acc = _Penalties(self.config.subfactor_weights["technical"])
        acc.add(not t.has_https, "security", "no_https", p.no_https)
        acc.add(len(t.security_headers) < self.config.min_security_headers,
                "security", "few_security_headers", p.few_security_headers)
        acc.add(not t.canonical, "crawlability", "no_canonical", p.no_canonical)
        acc.add(not t.robots_meta, "crawlability", "no_robots_meta", p.no_robots_meta)
        acc.add(t.robots_txt_status == "missing", "crawlability", "robots_txt_missing", p.robots_txt_missing)
        acc.add(t.is_redirect, "crawlability", "redirect", p.redirect)
        acc.add(not t.has_viewport, "mobile", "no_viewport", p.no_viewport)
        return acc.to_score()

    def _score_onpage(self, facts: PageFacts) -> CategoryScore:
        o = facts.onpage
        p = self.config.onpage
        acc = _Penalties(self.config.subfactor_weights["onpage"])
        acc.add(not o.title, "meta_tags", "no_title", p.no_title)
        acc.add(not o.meta_description, "meta_tags", "no_meta_description", p.no_meta_description)
        acc.add(o.h1_count == 0, "headings", "no_h1", p.no_h1)
        acc.add(o.h1_count > 1, "headings", "multiple_h1", p.multiple_h1)
        acc.add(o.images_missing_alt > 0, "images", "images_missing_alt", p.images_missing_alt)
        return acc.to_score()

    def _score_content(self, facts: PageFacts) -> CategoryScore:
        c = facts.content
        p = self.config.content
        acc = _Penalties(self.config.subfactor_weights["content"])
        acc.add(c.is_thin_content, "depth", "thin_content", p.thin_content)
        acc.add(c.word_count > 0 and c.reading_ease < self.config.readability_threshold,
                "readability", "poor_readability", p.poor_readability)
        acc.add(c.duplicate_title is True, "uniqueness", "duplicate_title", p.duplicate_title)
        acc.add(c.duplicate_description is True, "uniqueness", "duplicate_description", p.duplicate_description)
        acc.add(c.duplicate_h1, "uniqueness", "duplicate_h1", p.duplicate_h1)
        return acc.to_score()

    def _score_structured(self, facts: PageFacts) -> CategoryScore:
        s = facts.structured
        p = self.config.structured
        acc = _Penalties(self.config.subfactor_weights["structured"])
        acc.add(s.json_ld_count == 0, "presence", "no_json_ld", p.no_json_ld)
        acc.add(bool(s.errors), "validity", "json_ld_errors", p.json_ld_errors)
        acc.add(s.duplicate_schemas, "uniqueness", "duplicate_schemas", p.duplicate_schemas)
        return acc.to_score()

    def _score_ux(self, facts: PageFacts) -> Optional[CategoryScore]:
        """UX/performance exists only when the metrics collaborator supplied data."""
        subscores = {
            "performance": performance_subscore(facts.performance, self.config),
            "accessibility": accessibility_subscore(facts.performance),
        }
        present = {k: v for k, v in subscores.items() if v is not None}
        if not present:
            return None

        total_weight = sum(self.config.ux_weights[k] for k in present)
        breakdown = {
            k: SubScore(score=v, weight=round(self.config.ux_weights[k] / total_weight, 4))
            for k, v in present.items()
        }
        score = sum(v * self.config.ux_weights[k] for k, v in present.items()) / total_weight
        return CategoryScore(score=clamp(score), breakdown=breakdown)

    # -------- Overall --------

    def category_weights(self, scores: CategoryScores) -> Dict[str, float]:
        """Effective (renormalized) weight of every supplied category."""
        raw = dict(self.config.category_weights)
        if scores.ux is not None:
            raw["ux"] = sum(self.config.ux_weights[k] for k in scores.ux.breakdown)
        total = sum(raw.values())
        return {name: weight / total for name, weight in raw.items()}

    def weighted_score(self, scores: CategoryScores) -> float:
        weights = self.category_weights(scores)
        value = sum(weights[name] * cs.score for name, cs in scores.items())
        return round(value, 4)

    def risk_adjustment(self, severity_counts: Dict[str, int]) -> int:
        return sum(
            self.config.risk_per_severity.get(severity, 0) * count
            for severity, count in severity_counts.items()
        )

    def overall(self, base_score: float, severity_counts: Dict[str, int]) -> Tuple[int, int]:
        """Risk-adjusted overall score and the adjustment that was applied."""
        adjustment = self.risk_adjustment(severity_counts)
        return clamp(round(base_score) - adjustment), adjustment
