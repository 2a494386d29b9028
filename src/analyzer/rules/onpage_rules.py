from typing import Any, Dict, Optional

from .core import RuleContext, RuleSet, issue_spec


@issue_spec(
    id="missing-title",
    severity="critical",
    category="onpage",
    fix_complexity="easy",
    business_impact="high",
    title="Missing page title",
    description="The page has no <title>, or it is empty.",
    impact="Search results show an auto-generated headline; rankings and click-through suffer.",
    estimated_time="10-15 minutes",
    affected_elements=("title",),
    implementation_steps=(
        "Add a <title> element to the <head>",
        "Put the primary keyword near the start",
        "Keep it between 30 and 60 characters",
    ),
    validation_criteria=("Title present and unique", "Title length between 30 and 60 characters"),
    reads=("onpage",),
)
def check_title_present(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    return None if ctx.facts.onpage.title else {}


@issue_spec(
    id="title-too-long",
    severity="high",
    category="onpage",
    fix_complexity="easy",
    business_impact="medium",
    title="Title too long",
    description="The title is {length} characters; search engines truncate beyond {limit}.",
    impact="The truncated title loses its message in search results.",
    estimated_time="5-10 minutes",
    affected_elements=("title",),
    implementation_steps=("Shorten the title to 60 characters or fewer", "Keep the primary keyword"),
    validation_criteria=("Title length at most 60 characters",),
    reads=("onpage",),
)
def check_title_too_long(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    title = ctx.facts.onpage.title
    limit = ctx.config.issues.title_max_length
    if title and len(title) > limit:
        return {"length": len(title), "limit": limit}
    return None


@issue_spec(
    id="missing-meta-description",
    severity="high",
    category="onpage",
    fix_complexity="easy",
    business_impact="medium",
    title="Missing meta description",
    description="The page has no meta description.",
    impact="Search engines pick a random snippet, lowering click-through.",
    estimated_time="10-15 minutes",
    affected_elements=('meta[name="description"]',),
    implementation_steps=(
        'Add <meta name="description" content="..."> to the <head>',
        "Summarise the page in 120-160 characters with a call to action",
    ),
    validation_criteria=("Meta description present", "Length between 120 and 160 characters"),
    reads=("onpage",),
)
def check_meta_description(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    return None if ctx.facts.onpage.meta_description else {}


@issue_spec(
    id="missing-h1",
    severity="high",
    category="onpage",
    fix_complexity="easy",
    business_impact="medium",
    title="Missing H1 heading",
    description="The page has no <h1> heading.",
    impact="Search engines and screen readers lack the main topic signal.",
    estimated_time="5-10 minutes",
    affected_elements=("h1",),
    implementation_steps=("Add one descriptive <h1> containing the primary keyword",),
    validation_criteria=("Exactly one H1 present",),
    reads=("onpage",),
)
def check_h1_present(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    return {} if ctx.facts.onpage.h1_count == 0 else None


@issue_spec(
    id="multiple-h1",
    severity="medium",
    category="onpage",
    fix_complexity="easy",
    business_impact="low",
    title="Multiple H1 headings",
    description="The page contains {count} <h1> headings.",
    impact="The main topic of the page becomes ambiguous.",
    estimated_time="10-15 minutes",
    affected_elements=("h1",),
    implementation_steps=("Keep one H1 and demote the others to H2",),
    validation_criteria=("Exactly one H1 present",),
    reads=("onpage",),
)
def check_multiple_h1(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    count = ctx.facts.onpage.h1_count
    return {"count": count} if count > 1 else None


@issue_spec(
    id="images-missing-alt",
    severity="medium",
    category="onpage",
    fix_complexity="easy",
    business_impact="medium",
    title="Images without alt text",
    description="{count} of {total} images have no alt text.",
    impact="Lost image-search traffic and an accessibility barrier.",
    estimated_time="15-30 minutes",
    affected_elements=("img",),
    implementation_steps=(
        "Write a short, descriptive alt attribute for every content image",
        'Use alt="" only for purely decorative images',
    ),
    validation_criteria=("Every content image has alt text",),
    reads=("onpage",),
)
def check_images_alt(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    o = ctx.facts.onpage
    if o.images_missing_alt > 0:
        return {"count": o.images_missing_alt, "total": o.image_count}
    return None


@issue_spec(
    id="meta-description-too-long",
    severity="medium",
    category="onpage",
    fix_complexity="easy",
    business_impact="low",
    title="Meta description too long",
    description="The meta description is {length} characters; it is truncated beyond {limit}.",
    impact="The end of the snippet, often the call to action, gets cut off.",
    estimated_time="5-10 minutes",
    affected_elements=('meta[name="description"]',),
    implementation_steps=("Trim the description to 160 characters or fewer",),
    validation_criteria=("Meta description length at most 160 characters",),
    reads=("onpage",),
)
def check_meta_description_too_long(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    desc = ctx.facts.onpage.meta_description
    limit = ctx.config.issues.meta_description_max_length
    if desc and len(desc) > limit:
        return {"length": len(desc), "limit": limit}
    return None


@issue_spec(
    id="canonical-mismatch",
    severity="medium",
    category="onpage",
    fix_complexity="easy",
    business_impact="medium",
    title="Canonical points to another URL",
    description="The canonical URL {canonical} differs from the analyzed URL.",
    impact="Search engines may index the canonical target instead of this page.",
    estimated_time="10-15 minutes",
    affected_elements=('link[rel="canonical"]',),
    implementation_steps=(
        "Confirm which URL should rank",
        "Make the canonical self-referencing unless this page is a deliberate duplicate",
    ),
    validation_criteria=("Canonical matches the preferred URL",),
    reads=("onpage", "technical"),
)
def check_canonical_consistency(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    canonical = ctx.facts.technical.canonical
    if canonical and not ctx.facts.onpage.canonical_matches:
        return {"canonical": canonical}
    return None


@issue_spec(
    id="title-too-short",
    severity="low",
    category="onpage",
    fix_complexity="easy",
    business_impact="low",
    title="Title too short",
    description="The title is only {length} characters; aim for at least {limit}.",
    impact="A short title wastes space to describe the page and its keywords.",
    estimated_time="5-10 minutes",
    affected_elements=("title",),
    implementation_steps=("Expand the title with the primary keyword and a benefit",),
    validation_criteria=("Title length between 30 and 60 characters",),
    reads=("onpage",),
)
def check_title_too_short(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    title = ctx.facts.onpage.title
    limit = ctx.config.issues.title_min_length
    if title and len(title) < limit:
        return {"length": len(title), "limit": limit}
    return None


@issue_spec(
    id="meta-description-too-short",
    severity="low",
    category="onpage",
    fix_complexity="easy",
    business_impact="low",
    title="Meta description too short",
    description="The meta description is only {length} characters; aim for at least {limit}.",
    impact="The snippet under-sells the page.",
    estimated_time="5-10 minutes",
    affected_elements=('meta[name="description"]',),
    implementation_steps=("Expand the description to 120-160 characters",),
    validation_criteria=("Meta description length between 120 and 160 characters",),
    reads=("onpage",),
)
def check_meta_description_too_short(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    desc = ctx.facts.onpage.meta_description
    limit = ctx.config.issues.meta_description_min_length
    if desc and len(desc) < limit:
        return {"length": len(desc), "limit": limit}
    return None


@issue_spec(
    id="missing-open-graph",
    severity="low",
    category="onpage",
    fix_complexity="easy",
    business_impact="low",
    title="Missing Open Graph tags",
    description="No og:title, og:description or og:image tags were found.",
    impact="Social shares show a bare link without preview.",
    estimated_time="15-30 minutes",
    affected_elements=('meta[property^="og:"]',),
    implementation_steps=("Add og:title, og:description and og:image meta tags",),
    validation_criteria=("Sharing debugger shows a rich preview",),
    reads=("onpage",),
)
def check_open_graph(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    return None if ctx.facts.onpage.open_graph.is_present else {}


@issue_spec(
    id="missing-lang",
    severity="low",
    category="onpage",
    fix_complexity="easy",
    business_impact="low",
    title="Missing language declaration",
    description="The <html> element has no lang attribute.",
    impact="Search engines and screen readers must guess the language.",
    estimated_time="5 minutes",
    affected_elements=("html",),
    implementation_steps=('Add lang="en" (or the right code) to the <html> element',),
    validation_criteria=("html[lang] present",),
    reads=("onpage",),
)
def check_lang(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    return None if ctx.facts.onpage.html_lang else {}


RULESET = RuleSet(
    name="onpage",
    order=20,
    rules=[
        check_title_present,
        check_title_too_long,
        check_meta_description,
        check_h1_present,
        check_multiple_h1,
        check_images_alt,
        check_meta_description_too_long,
        check_canonical_consistency,
        check_title_too_short,
        check_meta_description_too_short,
        check_open_graph,
        check_lang,
    ],
)
