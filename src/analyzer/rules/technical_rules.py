from typing import Any, Dict, Optional

from .core import RuleContext, RuleSet, issue_spec


@issue_spec(
    id="noindex-detected",
    severity="critical",
    category="technical",
    fix_complexity="easy",
    business_impact="high",
    title="Page is excluded from search indexes",
    description="The robots meta tag contains a noindex directive, so search engines will drop this page.",
    impact="The page cannot rank or receive organic traffic.",
    estimated_time="5-10 minutes",
    affected_elements=('meta[name="robots"]',),
    implementation_steps=(
        "Confirm the page is meant to be indexed",
        "Remove 'noindex' from the robots meta tag and any X-Robots-Tag header",
        "Request re-indexing in Search Console",
    ),
    validation_criteria=(
        "Robots meta tag no longer contains noindex",
        "URL Inspection reports the page as indexable",
    ),
    reads=("onpage",),
)
def check_noindex(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    return {} if ctx.facts.onpage.noindex else None


@issue_spec(
    id="no-ssl",
    severity="critical",
    category="technical",
    fix_complexity="medium",
    business_impact="high",
    title="Page is not served over HTTPS",
    description="The page was delivered over plain HTTP; browsers flag it as not secure.",
    impact="Ranking penalty, browser warnings and lost visitor trust.",
    estimated_time="2-4 hours",
    affected_elements=("url",),
    implementation_steps=(
        "Install a TLS certificate for the domain",
        "Redirect every HTTP URL to its HTTPS counterpart with a 301",
        "Update internal links, canonicals and sitemaps to HTTPS",
    ),
    validation_criteria=(
        "Page loads over HTTPS without certificate warnings",
        "HTTP requests answer with a 301 to HTTPS",
    ),
    reads=("technical",),
)
def check_ssl(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    return None if ctx.facts.technical.has_https else {}


@issue_spec(
    id="missing-viewport",
    severity="high",
    category="technical",
    fix_complexity="easy",
    business_impact="high",
    title="Missing viewport meta tag",
    description="No viewport meta tag was found, so mobile browsers render the desktop layout.",
    impact="Poor mobile usability under mobile-first indexing.",
    estimated_time="5-10 minutes",
    affected_elements=('meta[name="viewport"]',),
    implementation_steps=(
        'Add <meta name="viewport" content="width=device-width, initial-scale=1"> to the <head>',
        "Check the layout on small screens",
    ),
    validation_criteria=("Viewport meta tag present", "Mobile-friendly test passes"),
    reads=("technical",),
)
def check_viewport(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    return None if ctx.facts.technical.has_viewport else {}


@issue_spec(
    id="missing-robots-txt",
    severity="high",
    category="technical",
    fix_complexity="easy",
    business_impact="medium",
    title="robots.txt is missing",
    description="The site does not serve a robots.txt file.",
    impact="Crawlers get no guidance on what to crawl and where the sitemap lives.",
    estimated_time="15-30 minutes",
    affected_elements=("/robots.txt",),
    implementation_steps=(
        "Create a robots.txt at the site root",
        "Add crawl rules for private sections",
        "Reference the XML sitemap with a Sitemap: line",
    ),
    validation_criteria=("/robots.txt answers 200", "robots.txt tester reports no errors"),
    reads=("technical",),
)
def check_robots_txt(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    return {} if ctx.facts.technical.robots_txt_status == "missing" else None


@issue_spec(
    id="missing-canonical",
    severity="medium",
    category="technical",
    fix_complexity="easy",
    business_impact="medium",
    title="Missing canonical URL",
    description="The page does not declare a canonical URL.",
    impact="Duplicate URL variants can split ranking signals.",
    estimated_time="10-15 minutes",
    affected_elements=('link[rel="canonical"]',),
    implementation_steps=(
        'Add <link rel="canonical" href="..."> pointing at the preferred URL',
        "Use absolute HTTPS URLs for canonicals",
    ),
    validation_criteria=("Canonical tag present and self-referencing",),
    reads=("technical",),
)
def check_canonical(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    return None if ctx.facts.technical.canonical else {}


@issue_spec(
    id="missing-security-headers",
    severity="medium",
    category="technical",
    fix_complexity="medium",
    business_impact="medium",
    title="Security headers are missing",
    description="Only {present} of the recommended security headers are set; missing: {missing}.",
    impact="Weaker protection against XSS, clickjacking and protocol downgrades.",
    estimated_time="1-2 hours",
    implementation_steps=(
        "Add Strict-Transport-Security, Content-Security-Policy and X-Frame-Options at the server or CDN",
        "Add X-Content-Type-Options: nosniff and a Referrer-Policy",
        "Roll out CSP in report-only mode first",
    ),
    validation_criteria=("At least three recommended security headers present",),
    reads=("technical",),
)
def check_security_headers(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    present = ctx.facts.technical.security_headers
    if len(present) >= ctx.config.scoring.min_security_headers:
        return None
    missing = [h for h in ctx.config.extraction.security_headers if h not in present]
    return {"present": len(present), "missing": ", ".join(missing), "elements": missing}


@issue_spec(
    id="mixed-content",
    severity="medium",
    category="technical",
    fix_complexity="medium",
    business_impact="high",
    title="Mixed content on an HTTPS page",
    description="The HTTPS page loads sub-resources over plain HTTP.",
    impact="Browsers block or warn about insecure resources.",
    estimated_time="1-2 hours",
    affected_elements=("img", "script", "iframe", "link[rel=stylesheet]"),
    implementation_steps=(
        "Switch resource URLs to HTTPS or protocol-relative paths",
        "Add a Content-Security-Policy upgrade-insecure-requests directive",
    ),
    validation_criteria=("No mixed content warnings in the browser console",),
    reads=("technical",),
)
def check_mixed_content(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    return {} if ctx.facts.technical.has_mixed_content else None


@issue_spec(
    id="redirect-detected",
    severity="low",
    category="technical",
    fix_complexity="easy",
    business_impact="low",
    title="URL redirects",
    description="The requested URL answered with a redirect (status {status}).",
    impact="Each hop adds latency and dilutes link signals slightly.",
    estimated_time="15-30 minutes",
    affected_elements=("url",),
    implementation_steps=("Link directly to the final URL", "Collapse redirect chains into a single 301"),
    validation_criteria=("Internal links point at the final URL",),
    reads=("technical",),
)
def check_redirect(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    return {"status": ctx.facts.status_code} if ctx.facts.technical.is_redirect else None


RULESET = RuleSet(
    name="technical",
    order=10,
    rules=[
        check_noindex,
        check_ssl,
        check_viewport,
        check_robots_txt,
        check_canonical,
        check_security_headers,
        check_mixed_content,
        check_redirect,
    ],
)
