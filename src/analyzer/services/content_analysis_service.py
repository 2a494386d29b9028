# src/analyzer/services/content_analysis_service.py
import logging
import math
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from analyzer.config import ContentAnalysisConfig
from analyzer.model import PageFacts
from analyzer.result_model import (
    ContentDepth,
    ContentInsights,
    ContentQuality,
    ContentStructure,
    FreshnessAnalysis,
    KeywordAnalysis,
    KeywordDistribution,
    ReadabilityAnalysis,
)
from analyzer.services import readability_service
from analyzer.services.scoring_service import clamp

logger = logging.getLogger(__name__)


def band_score(value: float, bands: Iterable[Tuple[float, int]], floor: int) -> int:
    """First band whose lower bound the value reaches; bands are ordered high to low."""
    for threshold, score in bands:
        if value >= threshold:
            return score
    return floor


def has_skipped_levels(outline: Sequence[int]) -> bool:
    """True when a heading jumps more than one level deeper than its predecessor."""
    return any(nxt > prev + 1 for prev, nxt in zip(outline, outline[1:]))


class ContentAnalysisService:
    """
    Depth, quality, readability, keyword and freshness analysis of a page.

    Works purely on PageFacts; the reference time for freshness is passed in
    so repeated runs over the same facts stay reproducible.
    """

    def __init__(self, config: ContentAnalysisConfig):
        self.config = config

    def analyze(self, facts: PageFacts, reference_time: datetime) -> ContentInsights:
        if not facts.is_known("content"):
            logger.debug("Content facts unknown for %s; skipping sub-analysis.", facts.url)
            return ContentInsights()

        return ContentInsights(
            depth=self.analyze_depth(facts),
            quality=self.analyze_quality(facts),
            readability=self.analyze_readability(facts),
            keywords=self.analyze_keywords(facts),
            freshness=self.analyze_freshness(facts, reference_time),
        )

    # -------- Depth --------

    def analyze_depth(self, facts: PageFacts) -> ContentDepth:
        c = facts.content
        outline = facts.onpage.heading_outline if facts.is_known("onpage") else ()
        structure = ContentStructure(
            well_organized=bool(outline) and not has_skipped_levels(outline),
            logical_flow=bool(outline) and outline[0] == 1,
            heading_counts={
                level: len(texts) for level, texts in facts.onpage.headings.items() if texts
            } if facts.is_known("onpage") else {},
        )

        score = band_score(c.word_count, self.config.depth_bands, self.config.depth_floor)
        if outline and not structure.well_organized:
            score -= 10

        recommendations: List[str] = []
        if c.word_count < 300:
            recommendations.append("Expand the content to at least 300 words covering the topic in depth.")
        if c.paragraph_count < 3:
            recommendations.append("Break the text into more paragraphs for easier scanning.")
        if outline and has_skipped_levels(outline):
            recommendations.append("Fix skipped heading levels so the outline reads h1 > h2 > h3.")
        if not outline:
            recommendations.append("Add headings to structure the content.")

        return ContentDepth(
            word_count=c.word_count,
            reading_time_minutes=math.ceil(c.word_count / self.config.words_per_minute),
            paragraph_count=c.paragraph_count,
            average_sentence_length=round(c.word_count / max(c.sentence_count, 1), 2),
            topic_coverage=tuple(c.top_keywords),
            structure=structure,
            score=clamp(score),
            recommendations=tuple(recommendations),
        )

    # -------- Quality --------

    def analyze_quality(self, facts: PageFacts) -> ContentQuality:
        """
        Single-page quality signals. Duplicate detection across pages and
        grammar/spelling checks are not performed; they stay unset.
        """
        c = facts.content
        score = self.config.quality_base
        issues: List[str] = []

        if c.is_thin_content:
            score -= 20
            issues.append("Content is too thin to satisfy search intent.")
        if c.keyword_token_count >= 50 and c.unique_word_ratio < self.config.min_uniqueness:
            score -= 15
            issues.append("Wording is highly repetitive.")
        if c.duplicate_h1:
            score -= 5
            issues.append("The same H1 text appears more than once.")
        if c.word_count >= 1000 and not issues:
            score += 10

        return ContentQuality(
            duplicate_content=False,
            uniqueness=c.unique_word_ratio,
            grammar_errors=None,
            spelling_errors=c.spelling_errors,
            score=clamp(score),
            issues=tuple(issues),
        )

    # -------- Readability --------

    def analyze_readability(self, facts: PageFacts) -> ReadabilityAnalysis:
        c = facts.content
        scores = c.readability
        if c.word_count == 0:
            return ReadabilityAnalysis(suggestions=("Add readable body text.",))

        suggestions: List[str] = []
        if c.word_count / max(c.sentence_count, 1) > 20:
            suggestions.append("Shorten sentences to 20 words or fewer on average.")
        if c.complex_word_count / c.word_count > 0.15:
            suggestions.append("Replace complex words with simpler alternatives.")
        if scores.flesch_reading_ease < 60:
            suggestions.append("Aim for a reading ease of 60 or higher.")

        return ReadabilityAnalysis(
            **scores.model_dump(),
            overall=readability_service.overall_readability(scores),
            grade_level=readability_service.grade_label(scores.flesch_kincaid),
            difficulty=readability_service.difficulty_label(scores.flesch_reading_ease),
            score=band_score(
                scores.flesch_reading_ease, self.config.readability_bands, self.config.readability_floor
            ),
            suggestions=tuple(suggestions),
        )

    # -------- Keywords --------

    def analyze_keywords(self, facts: PageFacts) -> KeywordAnalysis:
        c = facts.content
        if not c.top_keywords or c.word_count == 0:
            return KeywordAnalysis(recommendations=("Add topical body text with a clear focus keyword.",))

        primary = next(iter(c.top_keywords))
        density = {kw: round(count / c.word_count, 4) for kw, count in c.top_keywords.items()}

        def contains(text: Optional[str]) -> bool:
            return bool(text) and primary in text.lower()

        onpage_known = facts.is_known("onpage")
        distribution = KeywordDistribution(
            in_title=onpage_known and contains(facts.onpage.title),
            in_h1=onpage_known and any(contains(h) for h in facts.onpage.headings.get("h1", ())),
            in_meta_description=onpage_known and contains(facts.onpage.meta_description),
            in_first_paragraph=contains(c.first_paragraph),
            in_last_paragraph=contains(c.last_paragraph),
        )
        stuffing = any(d > self.config.stuffing_density for d in density.values())

        score = self.config.keyword_base
        score += 10 if distribution.in_title else 0
        score += 10 if distribution.in_h1 else 0
        score += 5 if distribution.in_meta_description else 0
        score += 5 if distribution.in_first_paragraph else 0
        score -= 30 if stuffing else 0

        recommendations: List[str] = []
        if not distribution.in_title:
            recommendations.append(f"Use the focus keyword '{primary}' in the title.")
        if not distribution.in_h1:
            recommendations.append(f"Use the focus keyword '{primary}' in the H1.")
        if not distribution.in_first_paragraph:
            recommendations.append("Mention the focus keyword in the opening paragraph.")
        if stuffing:
            recommendations.append("Reduce keyword repetition; keep density under 3%.")

        return KeywordAnalysis(
            primary_keyword=primary,
            density=density,
            distribution=distribution,
            stuffing_risk=stuffing,
            score=clamp(score),
            recommendations=tuple(recommendations),
        )

    # -------- Freshness --------

    def analyze_freshness(self, facts: PageFacts, reference_time: datetime) -> FreshnessAnalysis:
        c = facts.content
        updates = [d for d in (c.modified_at, c.last_modified, c.published_at) if d is not None]
        latest = max(updates) if updates else None

        def days_since(moment: Optional[datetime]) -> Optional[int]:
            if moment is None:
                return None
            return max(0, (reference_time - moment).days)

        days_since_update = days_since(latest)
        if days_since_update is None:
            return FreshnessAnalysis(
                score=self.config.freshness_unknown,
                recommendations=("Publish visible publication and update dates.",),
            )

        # Freshness bands count days upwards, so negate to reuse band_score.
        score = band_score(
            -days_since_update,
            ((-limit, s) for limit, s in self.config.freshness_bands),
            self.config.freshness_floor,
        )
        needs_update = days_since_update > self.config.stale_after_days
        if days_since_update <= 30:
            frequency = "recently updated"
        elif not needs_update:
            frequency = "periodically updated"
        else:
            frequency = "rarely updated"

        return FreshnessAnalysis(
            published_at=c.published_at,
            modified_at=c.modified_at or c.last_modified,
            age_days=days_since(c.published_at),
            days_since_update=days_since_update,
            needs_update=needs_update,
            update_frequency=frequency,
            score=score,
            recommendations=("Review and refresh this content.",) if needs_update else (),
        )
