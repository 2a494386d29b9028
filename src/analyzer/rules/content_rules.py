from typing import Any, Dict, Optional

from .core import RuleContext, RuleSet, issue_spec


@issue_spec(
    id="thin-content",
    severity="medium",
    category="content",
    fix_complexity="medium",
    business_impact="high",
    title="Thin content",
    description="The page has only {words} words of body text.",
    impact="Thin pages rarely satisfy search intent and rank poorly.",
    estimated_time="2-4 hours",
    affected_elements=("body",),
    implementation_steps=(
        "Research the questions searchers ask about this topic",
        "Expand the page to at least 300 words of original content",
        "Add examples, data or media that support the topic",
    ),
    validation_criteria=("Word count above 300", "Content answers the main search intent"),
    reads=("content",),
)
def check_thin_content(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    c = ctx.facts.content
    return {"words": c.word_count} if c.is_thin_content else None


@issue_spec(
    id="poor-readability",
    severity="medium",
    category="content",
    fix_complexity="medium",
    business_impact="medium",
    title="Text is hard to read",
    description="The reading ease score is {score}; 60 or higher reads comfortably.",
    impact="Visitors skim and leave; engagement signals drop.",
    estimated_time="1-2 hours",
    affected_elements=("p",),
    implementation_steps=(
        "Split long sentences",
        "Prefer short, common words",
        "Use lists and subheadings to break up text",
    ),
    validation_criteria=("Reading ease of 60 or higher",),
    reads=("content",),
)
def check_readability(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    c = ctx.facts.content
    if c.word_count > 0 and c.reading_ease < ctx.config.scoring.readability_threshold:
        return {"score": round(c.reading_ease, 1)}
    return None


@issue_spec(
    id="keyword-stuffing",
    severity="medium",
    category="content",
    fix_complexity="easy",
    business_impact="medium",
    title="Keyword stuffing risk",
    description="'{keyword}' makes up {density}% of the text.",
    impact="Over-optimised text reads poorly and can be demoted.",
    estimated_time="30-60 minutes",
    affected_elements=("body",),
    implementation_steps=("Replace repetitions with synonyms and related terms",),
    validation_criteria=("No keyword above 3% density",),
    reads=("content",),
)
def check_keyword_stuffing(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    kw = ctx.insights.keywords
    if not kw.stuffing_risk:
        return None
    keyword, density = max(kw.density.items(), key=lambda item: item[1])
    return {"keyword": keyword, "density": round(density * 100, 1)}


@issue_spec(
    id="stale-content",
    severity="medium",
    category="content",
    fix_complexity="medium",
    business_impact="medium",
    title="Content is out of date",
    description="The content was last updated {days} days ago.",
    impact="Outdated pages lose rankings to fresher competitors.",
    estimated_time="1-2 hours",
    affected_elements=("time", 'meta[property="article:modified_time"]'),
    implementation_steps=(
        "Review facts, figures and links for accuracy",
        "Add recent developments",
        "Update the visible and structured modification date",
    ),
    validation_criteria=("Modification date within the last 180 days",),
    reads=("content",),
)
def check_freshness(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    freshness = ctx.insights.freshness
    return {"days": freshness.days_since_update} if freshness.needs_update else None


@issue_spec(
    id="duplicate-h1",
    severity="low",
    category="content",
    fix_complexity="easy",
    business_impact="low",
    title="Repeated H1 text",
    description="The same H1 text appears more than once on the page.",
    estimated_time="5-10 minutes",
    affected_elements=("h1",),
    implementation_steps=("Keep a single unique H1",),
    validation_criteria=("No repeated H1 text",),
    reads=("content",),
)
def check_duplicate_h1(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    return {} if ctx.facts.content.duplicate_h1 else None


RULESET = RuleSet(
    name="content",
    order=30,
    rules=[check_thin_content, check_readability, check_keyword_stuffing, check_freshness, check_duplicate_h1],
)
