# src/analyzer/services/recommendation_service.py
import logging
from typing import Any, Dict, List, Optional, Sequence, Set

from analyzer.config import AnalyzerConfig
from analyzer.model import PageFacts
from analyzer.recommendations.templates import (
    BUSINESS_IMPACT,
    CONVERSION_IMPACT,
    GENERIC_TEMPLATES,
    PROACTIVE_TEMPLATES,
    SPECIFIC_TEMPLATES,
    TRAFFIC_IMPACT,
)
from analyzer.result_model import (
    BusinessImpactEstimate,
    ImplementationPlan,
    ImplementationStep,
    Issue,
    IssueReport,
    PriorityMatrix,
    Recommendation,
    RecommendationReport,
    RecommendationStrategy,
    RecommendationSummary,
    ValidationPlan,
)
from analyzer.utils.time_estimates import format_hours, total_hours

logger = logging.getLogger(__name__)

PRIORITY_ORDER = ("immediate", "high", "medium", "low")
TIMELINE_FIELDS = {
    "immediate": "immediate",
    "short-term": "short_term",
    "medium-term": "medium_term",
    "long-term": "long_term",
}


def estimate_business_impact(business_impact: str, category: str) -> BusinessImpactEstimate:
    estimate = BUSINESS_IMPACT.get((business_impact, category), "Improvement expected")
    return BusinessImpactEstimate(
        estimate=estimate,
        traffic_impact=TRAFFIC_IMPACT.get(business_impact, ""),
        conversion_impact=CONVERSION_IMPACT.get(business_impact, ""),
    )


class RecommendationService:
    """
    Turns issues into implementation plans, adds proactive suggestions and
    groups everything into a strategy.
    """

    def __init__(self, config: AnalyzerConfig):
        self.config = config
        self.rules = config.recommendations

    # -------- Templates --------

    def build_plan(self, issue: Issue) -> ImplementationPlan:
        """
        Implementation plan for an issue: the (category, id) template when one
        exists, otherwise the category-generic template filled with the issue's
        own steps and validation criteria.
        """
        specific = SPECIFIC_TEMPLATES.get((issue.category, issue.id))
        if specific is not None:
            return ImplementationPlan.model_validate(specific)

        generic: Dict[str, Any] = GENERIC_TEMPLATES.get(issue.category, GENERIC_TEMPLATES["generic"])
        return ImplementationPlan(
            difficulty=generic["difficulty"],
            estimated_time=issue.estimated_time or generic["estimated_time"],
            required_skills=generic["required_skills"],
            steps=tuple(
                ImplementationStep(step=n, title=f"Step {n}", description=text)
                for n, text in enumerate(issue.implementation_steps, start=1)
            ),
            validation=ValidationPlan(testing_steps=issue.validation_criteria),
            resources=generic.get("resources", {}),
        )

    # -------- Derivation --------

    def strategic_value(self, business_impact: str, fix_complexity: str) -> int:
        value = (
            self.rules.strategic_base
            + self.rules.impact_bonus.get(business_impact, 0)
            + self.rules.complexity_bonus.get(fix_complexity, 0)
        )
        return max(1, min(10, value))

    def from_issue(self, issue: Issue) -> Recommendation:
        priority = self.rules.severity_to_priority[issue.severity]
        return Recommendation(
            id=f"rec-{issue.id}",
            issue_id=issue.id,
            category=issue.category,
            title=issue.title,
            description=issue.description,
            fix_complexity=issue.fix_complexity,
            priority=priority,
            timeline=self.rules.priority_to_timeline[priority],
            strategic_value=self.strategic_value(issue.business_impact, issue.fix_complexity),
            quick_win=issue.fix_complexity == "easy" and issue.severity in ("critical", "high"),
            implementation=self.build_plan(issue),
            business_impact=estimate_business_impact(issue.business_impact, issue.category),
        )

    def proactive(self, facts: PageFacts, issue_ids: Set[str], taken: Set[str]) -> List[Recommendation]:
        """Opportunities that no issue asked for; appended after issue-derived ones."""
        candidates: List[str] = []
        content = facts.content if facts.is_known("content") else None
        structured = facts.structured if facts.is_known("structured") else None
        onpage = facts.onpage if facts.is_known("onpage") else None

        if content and content.word_count > self.rules.proactive_content_words:
            candidates.append("proactive-content-enhancement")
        if structured and structured.schema_types and not structured.rich_results_eligible:
            candidates.append("proactive-rich-results")
        if (
                onpage and content and not content.is_thin_content
                and onpage.internal_links < self.config.issues.min_internal_links
        ):
            candidates.append("proactive-internal-linking")

        out: List[Recommendation] = []
        for rec_id in candidates:
            if rec_id in taken or rec_id.removeprefix("proactive-") in issue_ids:
                continue
            template = dict(PROACTIVE_TEMPLATES[rec_id])
            impact = template.pop("business_impact")
            out.append(Recommendation(
                id=rec_id,
                timeline=self.rules.priority_to_timeline[template["priority"]],
                strategic_value=self.strategic_value(impact, template["fix_complexity"]),
                quick_win=False,
                business_impact=estimate_business_impact(impact, template["category"]),
                **template,
            ))
        return out

    # -------- Ordering & grouping --------

    def sort(self, recommendations: Sequence[Recommendation]) -> List[Recommendation]:
        weights = self.rules.priority_weights
        return sorted(recommendations, key=lambda r: (-weights[r.priority], -r.strategic_value))

    def build_strategy(self, recommendations: Sequence[Recommendation]) -> RecommendationStrategy:
        quick_wins = [r.id for r in recommendations if r.quick_win]
        strategic = [
            r.id for r in recommendations
            if r.strategic_value >= self.rules.strategic_threshold and not r.quick_win
        ]
        long_term = [
            r.id for r in recommendations
            if r.timeline == "long-term" or r.implementation.difficulty == "expert"
        ]
        matrix: Dict[str, List[str]] = {field: [] for field in TIMELINE_FIELDS.values()}
        for r in recommendations:
            matrix[TIMELINE_FIELDS[r.timeline]].append(r.id)

        return RecommendationStrategy(
            quick_wins=tuple(quick_wins),
            strategic_initiatives=tuple(strategic),
            long_term_goals=tuple(long_term),
            priority_matrix=PriorityMatrix(**{k: tuple(v) for k, v in matrix.items()}),
        )

    def summarize(self, recommendations: Sequence[Recommendation], strategy: RecommendationStrategy) -> RecommendationSummary:
        categories: Dict[str, int] = {}
        for r in recommendations:
            categories[r.category] = categories.get(r.category, 0) + 1
        hours = total_hours(r.implementation.estimated_time for r in recommendations)
        average: Optional[float] = None
        if recommendations:
            average = round(sum(r.strategic_value for r in recommendations) / len(recommendations), 2)

        return RecommendationSummary(
            total=len(recommendations),
            quick_wins=len(strategy.quick_wins),
            strategic_initiatives=len(strategy.strategic_initiatives),
            estimated_implementation_time=format_hours(hours) if hours else "n/a",
            priority_distribution={
                p: sum(1 for r in recommendations if r.priority == p) for p in PRIORITY_ORDER
            },
            category_distribution=categories,
            average_strategic_value=average or 0.0,
        )

    def generate(self, facts: PageFacts, issues: IssueReport) -> RecommendationReport:
        derived = [self.from_issue(issue) for issue in issues.issues]
        taken = {r.id for r in derived}
        issue_ids = {issue.id for issue in issues.issues}
        extra = self.proactive(facts, issue_ids, taken)

        ordered = self.sort(derived + extra)
        strategy = self.build_strategy(ordered)
        logger.debug(
            "%d recommendations (%d proactive, %d quick wins) for %s",
            len(ordered), len(extra), len(strategy.quick_wins), facts.url,
        )
        return RecommendationReport(
            recommendations=tuple(ordered),
            strategy=strategy,
            summary=self.summarize(ordered, strategy),
        )
