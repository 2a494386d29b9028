from typing import Any, Dict, Optional

from .core import RuleContext, RuleSet, issue_spec


@issue_spec(
    id="poor-mobile-experience",
    severity="high",
    category="ux",
    fix_complexity="hard",
    business_impact="high",
    title="Poor mobile experience",
    description="The page is not responsive and scores {score}/100 for mobile performance.",
    impact="Mobile visitors, usually the majority, get a slow, unscaled page.",
    estimated_time="1-2 weeks",
    affected_elements=('meta[name="viewport"]', "page"),
    implementation_steps=(
        "Add a viewport meta tag and responsive CSS breakpoints",
        "Optimise assets for mobile networks",
        "Test on real devices",
    ),
    validation_criteria=("Mobile-friendly test passes", "Mobile performance score of 50 or higher"),
    reads=("technical", "performance"),
    affected_categories=("technical", "ux", "onpage"),
)
def check_mobile_experience(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    score = ctx.performance_score
    if (
            not ctx.facts.technical.has_viewport
            and ctx.facts.performance.device == "mobile"
            and score is not None
            and score < ctx.config.issues.mobile_performance
    ):
        return {"score": score}
    return None


@issue_spec(
    id="thin-unstructured-content",
    severity="medium",
    category="content",
    fix_complexity="medium",
    business_impact="medium",
    title="Thin page without structured data",
    description="The page has {words} words and no structured data to explain it to search engines.",
    impact="Search engines have little text and no entity markup to understand the page.",
    estimated_time="3-5 hours",
    affected_elements=("body", "head"),
    implementation_steps=(
        "Expand the copy around the page's main entity",
        "Describe that entity with schema.org JSON-LD",
    ),
    validation_criteria=("Word count above 300", "Structured data detected"),
    reads=("content", "structured"),
    affected_categories=("content", "structured-data"),
)
def check_thin_unstructured(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    c = ctx.facts.content
    s = ctx.facts.structured
    if c.is_thin_content and s.json_ld_count == 0 and not s.microdata_types:
        return {"words": c.word_count}
    return None


RULESET = RuleSet(
    name="cross-category",
    order=90,
    rules=[check_mobile_experience, check_thin_unstructured],
    cross_category=True,
)
