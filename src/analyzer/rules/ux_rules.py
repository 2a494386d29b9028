from typing import Any, Dict, List, Optional

from .core import RuleContext, RuleSet, issue_spec


@issue_spec(
    id="severe-performance",
    severity="critical",
    category="technical",
    fix_complexity="hard",
    business_impact="high",
    title="Severe performance problems",
    description="The performance score is {score}/100.",
    impact="Most visitors abandon pages this slow; Core Web Vitals fail.",
    estimated_time="1-2 weeks",
    affected_elements=("page",),
    implementation_steps=(
        "Profile the page with Lighthouse and a waterfall chart",
        "Remove render-blocking scripts and defer non-critical JavaScript",
        "Compress and resize images; serve modern formats",
        "Enable caching and a CDN",
    ),
    validation_criteria=("Performance score above 50", "LCP under 4 seconds"),
    reads=("performance",),
)
def check_severe_performance(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    score = ctx.performance_score
    if score is not None and score < ctx.config.issues.severe_performance:
        return {"score": score}
    return None


@issue_spec(
    id="poor-page-speed",
    severity="high",
    category="technical",
    fix_complexity="medium",
    business_impact="high",
    title="Slow page speed",
    description="The performance score is {score}/100.",
    impact="Slow pages convert worse and rank lower.",
    estimated_time="1-2 days",
    affected_elements=("page",),
    implementation_steps=(
        "Optimise the largest images",
        "Defer third-party scripts",
        "Reduce server response time",
    ),
    validation_criteria=("Performance score of 50 or higher",),
    reads=("performance",),
)
def check_page_speed(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    score = ctx.performance_score
    issues = ctx.config.issues
    if score is not None and issues.severe_performance <= score < issues.poor_performance:
        return {"score": score}
    return None


@issue_spec(
    id="poor-core-web-vitals",
    severity="medium",
    category="ux",
    fix_complexity="hard",
    business_impact="high",
    title="Core Web Vitals fail",
    description="Metrics in the poor range: {metrics}.",
    impact="Page experience signals count against the page in rankings.",
    estimated_time="3-5 days",
    implementation_steps=(
        "LCP: preload the hero image and cut server time",
        "CLS: reserve space for images, ads and embeds",
        "INP/FID: break up long JavaScript tasks",
    ),
    validation_criteria=("All Core Web Vitals in the good or needs-improvement range",),
    reads=("performance",),
)
def check_core_web_vitals(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    metrics = ctx.facts.performance
    vitals = ctx.config.scoring.vitals
    poor: List[str] = []
    for name in ("lcp", "inp", "fid", "cls"):
        value = getattr(metrics, name)
        if value is not None and value > vitals[name].needs_improvement:
            poor.append(name.upper())
    return {"metrics": ", ".join(poor), "elements": poor} if poor else None


@issue_spec(
    id="low-accessibility",
    severity="medium",
    category="ux",
    fix_complexity="medium",
    business_impact="medium",
    title="Accessibility problems",
    description="The accessibility score is {score}/100.",
    impact="Part of the audience cannot use the page; legal exposure grows.",
    estimated_time="1-2 days",
    affected_elements=("page",),
    implementation_steps=(
        "Run an accessibility audit (axe, Lighthouse)",
        "Fix contrast, labels and keyboard navigation first",
    ),
    validation_criteria=("Accessibility score of 50 or higher",),
    reads=("performance",),
)
def check_accessibility(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    score = ctx.accessibility_score
    if score is not None and score < ctx.config.issues.min_accessibility:
        return {"score": score}
    return None


@issue_spec(
    id="missing-favicon",
    severity="low",
    category="ux",
    fix_complexity="easy",
    business_impact="low",
    title="Missing favicon",
    description="No favicon link was found.",
    impact="Tabs, bookmarks and mobile results show a generic icon.",
    estimated_time="10-15 minutes",
    affected_elements=('link[rel="icon"]',),
    implementation_steps=('Add <link rel="icon" href="/favicon.ico"> to the <head>',),
    validation_criteria=("Favicon visible in the browser tab",),
    reads=("onpage",),
)
def check_favicon(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    return None if ctx.facts.onpage.favicon else {}


RULESET = RuleSet(
    name="ux",
    order=50,
    rules=[check_severe_performance, check_page_speed, check_core_web_vitals, check_accessibility, check_favicon],
)
