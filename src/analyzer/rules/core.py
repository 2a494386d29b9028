from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..config import AnalyzerConfig
from ..model import PageFacts
from ..result_model import BusinessImpact, CategoryScores, ContentInsights, FixComplexity, Issue, Severity


class IssueSpec(BaseModel):
    """Fixed classification and guidance attached to one issue rule."""
    model_config = ConfigDict(frozen=True)

    id: str
    severity: Severity
    category: str
    fix_complexity: FixComplexity
    business_impact: BusinessImpact
    title: str
    description: str
    impact: str = ""
    estimated_time: str = ""
    affected_elements: Tuple[str, ...] = ()
    implementation_steps: Tuple[str, ...] = ()
    validation_criteria: Tuple[str, ...] = ()
    reads: Tuple[str, ...] = ()
    affected_categories: Tuple[str, ...] = ()


def issue_spec(**spec):
    """
    Decorator to attach an IssueSpec to a rule predicate.
    Facilitates auto-discovery by the RuleRegistry.
    """
    def decorator(func):
        func.spec = IssueSpec(**spec)
        return func
    return decorator


class RuleContext(NamedTuple):
    """Everything a rule predicate may read. Nothing in it is mutable."""
    facts: PageFacts
    scores: CategoryScores
    insights: ContentInsights
    config: AnalyzerConfig
    performance_score: Optional[int]
    accessibility_score: Optional[int]


# A predicate returns None for "no issue", or the description parameters of the
# issue. The optional key 'elements' overrides the affected elements.
RulePredicate = Callable[[RuleContext], Optional[Dict[str, Any]]]


class RuleSet:
    """A named, ordered group of rules exported by a rules module as RULESET."""

    def __init__(self, name: str, order: int, rules: List[RulePredicate], cross_category: bool = False):
        self.name = name
        self.order = order
        self.rules = rules
        self.cross_category = cross_category
        for rule in rules:
            if not hasattr(rule, "spec"):
                raise ValueError(f"Rule {rule.__name__} in ruleset '{name}' has no @issue_spec")

    @property
    def ids(self) -> List[str]:
        return [rule.spec.id for rule in self.rules]


def build_issue(spec: IssueSpec, params: Dict[str, Any], cross_category: bool) -> Issue:
    params = dict(params)
    elements = params.pop("elements", None)
    return Issue(
        id=spec.id,
        type="cross-category" if cross_category else spec.severity,
        severity=spec.severity,
        category=spec.category,
        fix_complexity=spec.fix_complexity,
        business_impact=spec.business_impact,
        title=spec.title,
        description=spec.description.format(**params),
        impact=spec.impact,
        estimated_time=spec.estimated_time,
        affected_elements=tuple(elements) if elements is not None else spec.affected_elements,
        implementation_steps=spec.implementation_steps,
        validation_criteria=spec.validation_criteria,
        affected_categories=spec.affected_categories if cross_category else (),
    )
