# src/analyzer/recommendations/templates.py
"""
Implementation-plan templates keyed by (category, issue id), plus the
category-generic fallbacks, business-impact texts and proactive heuristics.
"""
from typing import Any, Dict, Tuple

SPECIFIC_TEMPLATES: Dict[Tuple[str, str], Dict[str, Any]] = {
    ("technical", "no-ssl"): {
        "difficulty": "intermediate",
        "estimated_time": "2-4 hours",
        "required_skills": ("Server administration", "SSL/TLS configuration"),
        "steps": (
            {
                "step": 1,
                "title": "Obtain a certificate",
                "description": "Issue a TLS certificate for every hostname that serves the site.",
                "tools": ("Let's Encrypt", "Certbot", "Cloudflare"),
            },
            {
                "step": 2,
                "title": "Redirect HTTP to HTTPS",
                "description": "Answer every HTTP request with a permanent redirect to HTTPS.",
                "code_example": (
                    "server {\n"
                    "    listen 80;\n"
                    "    server_name example.com;\n"
                    "    return 301 https://$host$request_uri;\n"
                    "}"
                ),
                "tools": ("nginx", "Apache"),
            },
            {
                "step": 3,
                "title": "Enable HSTS",
                "description": "Send Strict-Transport-Security once HTTPS works everywhere.",
                "code_example": 'add_header Strict-Transport-Security "max-age=31536000; includeSubDomains" always;',
            },
        ),
        "validation": {
            "testing_steps": ("Load the page over HTTPS", "Request the HTTP URL and expect a 301"),
            "success_metrics": ("SSL Labs grade A or better", "No mixed content warnings"),
            "monitoring": ("Certificate expiry alerts",),
        },
        "resources": {
            "documentation": ("https://developers.google.com/search/docs/crawling-indexing/https",),
            "tools": ("https://www.ssllabs.com/ssltest/",),
        },
    },
    ("technical", "missing-robots-txt"): {
        "difficulty": "beginner",
        "estimated_time": "15-30 minutes",
        "required_skills": ("Basic file management",),
        "steps": (
            {
                "step": 1,
                "title": "Create robots.txt",
                "description": "Place a robots.txt file in the web root.",
                "code_example": "User-agent: *\nDisallow: /admin/\n\nSitemap: https://example.com/sitemap.xml",
            },
            {
                "step": 2,
                "title": "Test the rules",
                "description": "Check that important pages remain crawlable.",
                "tools": ("Search Console robots.txt report",),
            },
        ),
        "validation": {
            "testing_steps": ("Fetch /robots.txt and expect status 200",),
            "success_metrics": ("No important URL blocked",),
            "monitoring": ("Crawl stats in Search Console",),
        },
        "resources": {
            "documentation": ("https://developers.google.com/search/docs/crawling-indexing/robots/intro",),
        },
    },
    ("technical", "missing-viewport"): {
        "difficulty": "beginner",
        "estimated_time": "10-15 minutes",
        "required_skills": ("HTML",),
        "steps": (
            {
                "step": 1,
                "title": "Add the viewport tag",
                "description": "Declare the viewport in the document head.",
                "code_example": '<meta name="viewport" content="width=device-width, initial-scale=1">',
            },
        ),
        "validation": {
            "testing_steps": ("Open the page in device emulation",),
            "success_metrics": ("Mobile-friendly test passes",),
        },
    },
    ("technical", "missing-security-headers"): {
        "difficulty": "intermediate",
        "estimated_time": "1-2 hours",
        "required_skills": ("Server configuration", "Web security"),
        "steps": (
            {
                "step": 1,
                "title": "Add baseline headers",
                "description": "Send the standard hardening headers from the server or CDN.",
                "code_example": (
                    'add_header X-Content-Type-Options "nosniff" always;\n'
                    'add_header X-Frame-Options "SAMEORIGIN" always;\n'
                    'add_header Referrer-Policy "strict-origin-when-cross-origin" always;'
                ),
            },
            {
                "step": 2,
                "title": "Introduce a Content-Security-Policy",
                "description": "Start in report-only mode, then enforce.",
                "tools": ("CSP Evaluator",),
            },
        ),
        "validation": {
            "testing_steps": ("Inspect response headers",),
            "success_metrics": ("securityheaders.com grade B or better",),
        },
    },
    ("technical", "severe-performance"): {
        "difficulty": "expert",
        "estimated_time": "1-2 weeks",
        "required_skills": ("Frontend performance", "Server tuning", "Caching strategy"),
        "steps": (
            {
                "step": 1,
                "title": "Measure",
                "description": "Profile field and lab data to find the heaviest bottlenecks.",
                "tools": ("Lighthouse", "WebPageTest", "Chrome DevTools"),
            },
            {
                "step": 2,
                "title": "Fix the critical rendering path",
                "description": "Inline critical CSS, defer scripts and preload the LCP resource.",
            },
            {
                "step": 3,
                "title": "Optimise delivery",
                "description": "Compress assets, serve modern image formats and add a CDN.",
            },
        ),
        "validation": {
            "testing_steps": ("Re-run Lighthouse on mobile",),
            "success_metrics": ("Performance score above 50", "LCP under 2.5 s"),
            "monitoring": ("Core Web Vitals report",),
        },
    },
    ("content", "thin-content"): {
        "difficulty": "intermediate",
        "estimated_time": "4-8 hours",
        "required_skills": ("Content writing", "Keyword research"),
        "steps": (
            {
                "step": 1,
                "title": "Research the topic",
                "description": "Collect the questions and subtopics searchers expect.",
                "tools": ("Google Search Console", "AnswerThePublic"),
            },
            {
                "step": 2,
                "title": "Expand the copy",
                "description": "Write at least 300 words of original, structured content.",
            },
            {
                "step": 3,
                "title": "Add supporting media",
                "description": "Use images, tables or examples that make the topic concrete.",
            },
        ),
        "validation": {
            "testing_steps": ("Count words of the body text",),
            "success_metrics": ("Word count above 300", "Lower bounce rate"),
            "monitoring": ("Organic sessions per page",),
        },
    },
    ("content", "poor-readability"): {
        "difficulty": "beginner",
        "estimated_time": "1-2 hours",
        "required_skills": ("Copy editing",),
        "steps": (
            {
                "step": 1,
                "title": "Shorten sentences",
                "description": "Split sentences over 20 words.",
                "tools": ("Hemingway Editor",),
            },
            {
                "step": 2,
                "title": "Simplify vocabulary",
                "description": "Swap jargon for common words and explain necessary terms.",
            },
        ),
        "validation": {
            "testing_steps": ("Re-run the readability analysis",),
            "success_metrics": ("Reading ease of 60 or higher",),
        },
    },
    ("onpage", "missing-title"): {
        "difficulty": "beginner",
        "estimated_time": "15-30 minutes",
        "required_skills": ("HTML", "Copywriting"),
        "steps": (
            {
                "step": 1,
                "title": "Write the title",
                "description": "Lead with the primary keyword and stay within 30-60 characters.",
                "code_example": "<title>Primary Keyword - Benefit | Brand</title>",
            },
        ),
        "validation": {
            "testing_steps": ("View the page source",),
            "success_metrics": ("Title shows in search results", "Higher click-through rate"),
        },
    },
    ("onpage", "missing-meta-description"): {
        "difficulty": "beginner",
        "estimated_time": "15-30 minutes",
        "required_skills": ("Copywriting",),
        "steps": (
            {
                "step": 1,
                "title": "Write the description",
                "description": "Summarise the page in 120-160 characters with a call to action.",
                "code_example": '<meta name="description" content="...">',
            },
        ),
        "validation": {
            "success_metrics": ("Snippet matches the description", "Higher click-through rate"),
        },
    },
    ("onpage", "images-missing-alt"): {
        "difficulty": "beginner",
        "estimated_time": "15-30 minutes",
        "required_skills": ("HTML", "Accessibility basics"),
        "steps": (
            {
                "step": 1,
                "title": "Describe each image",
                "description": "Write alt text that says what the image shows and why it matters.",
                "code_example": '<img src="chart.png" alt="Monthly traffic growth in 2024">',
            },
        ),
        "validation": {
            "testing_steps": ("Audit images with a screen reader or axe",),
            "success_metrics": ("No content image without alt text",),
        },
    },
    ("structured-data", "missing-structured-data"): {
        "difficulty": "intermediate",
        "estimated_time": "1-2 hours",
        "required_skills": ("JSON-LD", "schema.org"),
        "steps": (
            {
                "step": 1,
                "title": "Pick the schema type",
                "description": "Match the page to Article, Product, FAQPage, BreadcrumbList or another type.",
            },
            {
                "step": 2,
                "title": "Add JSON-LD",
                "description": "Embed the markup in the head.",
                "code_example": (
                    '<script type="application/ld+json">\n'
                    '{"@context": "https://schema.org", "@type": "Article", "headline": "..."}\n'
                    "</script>"
                ),
                "tools": ("Rich Results Test", "Schema Markup Validator"),
            },
        ),
        "validation": {
            "testing_steps": ("Run the Rich Results Test",),
            "success_metrics": ("Markup detected without errors",),
            "monitoring": ("Enhancement reports in Search Console",),
        },
    },
    ("ux", "poor-mobile-experience"): {
        "difficulty": "advanced",
        "estimated_time": "1-2 weeks",
        "required_skills": ("Responsive design", "Frontend performance"),
        "steps": (
            {
                "step": 1,
                "title": "Make the layout responsive",
                "description": "Add the viewport tag and mobile breakpoints.",
            },
            {
                "step": 2,
                "title": "Trim mobile payload",
                "description": "Serve smaller images and defer non-essential scripts on mobile.",
                "tools": ("Lighthouse mobile audit",),
            },
        ),
        "validation": {
            "testing_steps": ("Test on real low-end devices",),
            "success_metrics": ("Mobile performance score of 50 or higher",),
        },
    },
}

GENERIC_TEMPLATES: Dict[str, Dict[str, Any]] = {
    "technical": {
        "difficulty": "intermediate",
        "estimated_time": "1-3 hours",
        "required_skills": ("Web development", "Technical SEO"),
        "resources": {"tools": ("Google Search Console", "Lighthouse")},
    },
    "content": {
        "difficulty": "intermediate",
        "estimated_time": "2-4 hours",
        "required_skills": ("Content writing", "SEO copywriting"),
        "resources": {"tools": ("Google Search Console",)},
    },
    "onpage": {
        "difficulty": "beginner",
        "estimated_time": "30-60 minutes",
        "required_skills": ("HTML", "On-page SEO"),
        "resources": {"tools": ("Browser developer tools",)},
    },
    "generic": {
        "difficulty": "intermediate",
        "estimated_time": "1-2 hours",
        "required_skills": ("SEO fundamentals",),
        "resources": {"documentation": ("https://developers.google.com/search/docs",)},
    },
}

BUSINESS_IMPACT: Dict[Tuple[str, str], str] = {
    ("high", "technical"): "Significant ranking and crawlability gains",
    ("high", "content"): "Major improvement in relevance and organic traffic",
    ("high", "onpage"): "Noticeable click-through and ranking improvement",
    ("high", "ux"): "Better engagement and conversion rates",
    ("high", "structured-data"): "Eligibility for rich results with higher visibility",
    ("medium", "technical"): "Moderate crawl and indexing improvement",
    ("medium", "content"): "Moderate engagement improvement",
    ("medium", "onpage"): "Moderate click-through improvement",
    ("medium", "ux"): "Moderate usability improvement",
    ("medium", "structured-data"): "Cleaner entity understanding by search engines",
    ("low", "technical"): "Minor technical hygiene improvement",
    ("low", "content"): "Minor content polish",
    ("low", "onpage"): "Minor presentation improvement in search and social",
    ("low", "ux"): "Minor polish of the user experience",
    ("low", "structured-data"): "Minor markup hygiene improvement",
}

TRAFFIC_IMPACT = {"high": "+10-25% organic traffic", "medium": "+3-10% organic traffic", "low": "under +3% organic traffic"}
CONVERSION_IMPACT = {"high": "noticeable", "medium": "moderate", "low": "minimal"}

PROACTIVE_TEMPLATES: Dict[str, Dict[str, Any]] = {
    "proactive-content-enhancement": {
        "category": "content",
        "title": "Content enhancement opportunity",
        "description": "The page already has solid depth; add FAQs, examples or media to win more long-tail queries.",
        "fix_complexity": "medium",
        "priority": "medium",
        "business_impact": "medium",
        "implementation": {
            "difficulty": "intermediate",
            "estimated_time": "3-5 hours",
            "required_skills": ("Content strategy", "Keyword research"),
            "steps": (
                {"step": 1, "title": "Find content gaps", "description": "Compare with top-ranking pages for the focus keyword."},
                {"step": 2, "title": "Extend the page", "description": "Add an FAQ section, examples or a comparison table."},
            ),
        },
    },
    "proactive-rich-results": {
        "category": "structured-data",
        "title": "Expand structured data for rich results",
        "description": "The page has structured data, but none of it qualifies for rich results.",
        "fix_complexity": "medium",
        "priority": "low",
        "business_impact": "medium",
        "implementation": {
            "difficulty": "intermediate",
            "estimated_time": "1-2 hours",
            "required_skills": ("JSON-LD", "schema.org"),
            "steps": (
                {"step": 1, "title": "Add an eligible type", "description": "Describe the page as Article, Product, FAQPage or BreadcrumbList where it fits."},
            ),
        },
    },
    "proactive-internal-linking": {
        "category": "onpage",
        "title": "Strengthen internal linking",
        "description": "The page links to few other pages of the site; link related content to spread authority.",
        "fix_complexity": "easy",
        "priority": "low",
        "business_impact": "low",
        "implementation": {
            "difficulty": "beginner",
            "estimated_time": "30-60 minutes",
            "required_skills": ("Information architecture",),
            "steps": (
                {"step": 1, "title": "Link related pages", "description": "Add contextual links to three or more relevant pages."},
            ),
        },
    },
}
