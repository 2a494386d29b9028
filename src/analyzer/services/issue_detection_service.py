# src/analyzer/services/issue_detection_service.py
import logging
from typing import Dict, List, Optional, Sequence

from analyzer.config import AnalyzerConfig
from analyzer.model import PageFacts
from analyzer.result_model import (
    SEVERITIES,
    CategoryScores,
    ContentInsights,
    ImpactMatrix,
    Issue,
    IssuePrioritization,
    IssueReport,
    IssueSummary,
)
from analyzer.rules.core import RuleContext, RuleSet, build_issue
from analyzer.rules.registry import RuleRegistry
from analyzer.utils.time_estimates import average_hours, format_hours

logger = logging.getLogger(__name__)

SEVERITY_RANK = {severity: rank for rank, severity in enumerate(SEVERITIES)}
HIGH_SEVERITIES = ("critical", "high")


def sort_for_display(issues: Sequence[Issue]) -> List[Issue]:
    """Severity first; equal severities keep detection order."""
    return sorted(issues, key=lambda issue: SEVERITY_RANK[issue.severity])


def prioritize(issues: Sequence[Issue]) -> IssuePrioritization:
    """
    Splits issues into immediate / short-term / long-term buckets (a partition),
    picks quick wins and fills the impact x effort matrix.
    """
    immediate: List[str] = []
    short_term: List[str] = []
    long_term: List[str] = []
    quick_wins: List[str] = []
    matrix: Dict[str, List[str]] = {
        "high_impact_easy_fix": [],
        "high_impact_hard_fix": [],
        "low_impact_easy_fix": [],
        "low_impact_hard_fix": [],
    }

    for issue in issues:
        easy = issue.fix_complexity == "easy"
        if issue.severity == "critical" or (issue.severity == "high" and easy):
            immediate.append(issue.id)
        elif issue.severity == "high" or (issue.severity == "medium" and issue.business_impact == "high"):
            short_term.append(issue.id)
        else:
            long_term.append(issue.id)

        if easy and issue.severity in HIGH_SEVERITIES:
            quick_wins.append(issue.id)

        impact = "high_impact" if issue.severity in HIGH_SEVERITIES else "low_impact"
        effort = "easy_fix" if easy else "hard_fix"
        matrix[f"{impact}_{effort}"].append(issue.id)

    return IssuePrioritization(
        immediate=tuple(immediate),
        short_term=tuple(short_term),
        long_term=tuple(long_term),
        quick_wins=tuple(quick_wins),
        impact_matrix=ImpactMatrix(**{k: tuple(v) for k, v in matrix.items()}),
    )


def summarize(issues: Sequence[Issue], prioritization: IssuePrioritization) -> IssueSummary:
    counts = {severity: 0 for severity in SEVERITIES}
    for issue in issues:
        counts[issue.severity] += 1
    avg = average_hours(issue.estimated_time for issue in issues)
    return IssueSummary(
        total=len(issues),
        cross_category=sum(1 for issue in issues if issue.type == "cross-category"),
        quick_wins=len(prioritization.quick_wins),
        average_fix_time=format_hours(avg) if avg is not None else "n/a",
        **counts,
    )


class IssueDetectionService:
    """
    Evaluates the rule table against PageFacts (plus category scores and the
    content insights) and classifies the resulting issues.
    """

    def __init__(self, config: AnalyzerConfig, rulesets: Optional[List[RuleSet]] = None):
        self.config = config
        self.rulesets = rulesets if rulesets is not None else RuleRegistry.get_all()

    def detect(self, facts: PageFacts, scores: CategoryScores, insights: ContentInsights) -> List[Issue]:
        """
        Runs every applicable rule once, in ruleset order.

        Rules whose input namespaces are unknown (or need metrics that were
        not supplied) are skipped rather than evaluated on default values.
        """
        ux_breakdown = scores.ux.breakdown if scores.ux is not None else {}
        ctx = RuleContext(
            facts=facts,
            scores=scores,
            insights=insights,
            config=self.config,
            performance_score=ux_breakdown["performance"].score if "performance" in ux_breakdown else None,
            accessibility_score=ux_breakdown["accessibility"].score if "accessibility" in ux_breakdown else None,
        )

        issues: List[Issue] = []
        skipped = 0
        for ruleset in self.rulesets:
            for rule in ruleset.rules:
                spec = rule.spec
                if not all(facts.is_known(ns) for ns in spec.reads):
                    skipped += 1
                    continue
                params = rule(ctx)
                if params is None:
                    continue
                issues.append(build_issue(spec, params, ruleset.cross_category))

        logger.debug("%d issues detected for %s (%d rules skipped)", len(issues), facts.url, skipped)
        return issues

    def build_report(self, issues: Sequence[Issue]) -> IssueReport:
        ordered = sort_for_display(issues)
        prioritization = prioritize(ordered)
        return IssueReport(
            issues=tuple(ordered),
            by_severity={
                severity: tuple(i.id for i in ordered if i.severity == severity)
                for severity in SEVERITIES
            },
            cross_category=tuple(i.id for i in ordered if i.type == "cross-category"),
            prioritization=prioritization,
            summary=summarize(ordered, prioritization),
        )

    def analyze(self, facts: PageFacts, scores: CategoryScores, insights: ContentInsights) -> IssueReport:
        return self.build_report(self.detect(facts, scores, insights))
