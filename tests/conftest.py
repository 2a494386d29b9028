# tests/conftest.py
from datetime import datetime, timezone
from typing import Dict, Optional

import pytest

from analyzer.controllers.analysis_controller import AnalysisController
from analyzer.model import AnalysisRequest, PerformanceMetrics, ResponseMeta, SiteProbeResult

# Everyday words outside the stopword lists, so generated text has a low keyword density.
VOCABULARY = (
    "garden water plant seed soil light grow green leaf root sun rain tree path stone wall "
    "gate door room lamp desk book page note card city town road park lake hill farm bird "
    "fish dog cat cow goat sheep horse apple pear plum bean corn rice bread milk cake tea "
    "salt sugar fire wind snow ice cloud star moon boat ship coat shoe hat"
).split()

REFERENCE_TIME = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

SECURE_HEADERS = {
    "Content-Type": "text/html; charset=utf-8",
    "Strict-Transport-Security": "max-age=63072000",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Content-Security-Policy": "default-src 'self'",
}

ARTICLE_JSON_LD = """
<script type="application/ld+json">
{"@context": "https://schema.org", "@type": "Article", "headline": "Growing a small kitchen garden",
 "author": {"@type": "Person", "name": "Sam"}}
</script>
"""


def body_text(words: int, sentence_length: int = 8, sentences_per_paragraph: int = 5) -> str:
    """Paragraphs of short plain sentences with exactly `words` words."""
    tokens = [VOCABULARY[i % len(VOCABULARY)] for i in range(words)]
    sentences = [
        " ".join(tokens[i:i + sentence_length]).capitalize() + "."
        for i in range(0, len(tokens), sentence_length)
    ]
    return "\n".join(
        "<p>" + " ".join(sentences[i:i + sentences_per_paragraph]) + "</p>"
        for i in range(0, len(sentences), sentences_per_paragraph)
    )


def page_html(
        title: Optional[str] = "Growing a small kitchen garden at home today",
        description: Optional[str] = None,
        words: int = 1200,
        h1: Optional[str] = "Growing a small kitchen garden",
        head_extra: str = "",
        body_extra: str = "",
        lang: Optional[str] = "en",
) -> str:
    head = []
    if title is not None:
        head.append(f"<title>{title}</title>")
    if description is not None:
        head.append(f'<meta name="description" content="{description}">')
    head.append(head_extra)
    lang_attr = f' lang="{lang}"' if lang else ""
    h1_html = f"<h1>{h1}</h1>" if h1 else ""
    return (
        f"<!DOCTYPE html><html{lang_attr}><head>{''.join(head)}</head>"
        f"<body>{h1_html}{body_text(words)}{body_extra}</body></html>"
    )


def complete_page_html(url: str = "https://example.com/garden") -> str:
    """A well-optimised article page: every on-page and technical signal present."""
    head_extra = (
        '<meta name="viewport" content="width=device-width, initial-scale=1">'
        f'<link rel="canonical" href="{url}">'
        '<meta name="robots" content="index, follow">'
        '<link rel="icon" href="/favicon.ico">'
        '<meta property="og:title" content="Growing a small kitchen garden">'
        '<meta property="og:image" content="https://example.com/garden.jpg">'
        + ARTICLE_JSON_LD
    )
    body_extra = (
        '<h2>Choosing plants</h2><h2>Watering</h2>'
        '<a href="/soil">Soil</a><a href="/seeds">Seeds</a><a href="/tools">Tools</a>'
        '<a href="https://other.org/guide">Guide</a>'
        '<img src="/garden.jpg" alt="A kitchen garden">'
    )
    return page_html(
        title="Growing a small kitchen garden at home today",
        description=(
            "Learn how to plan, plant and care for a small kitchen garden at home with simple "
            "steps for soil, seeds, watering and harvest in every season."
        ),
        head_extra=head_extra,
        body_extra=body_extra,
    )


GOOD_METRICS = PerformanceMetrics(
    lcp=1500, inp=120, cls=0.04, fcp=900, ttfb=200,
    performance_score=0.93, accessibility_score=0.96,
)


@pytest.fixture
def make_request():
    """Factory for AnalysisRequest objects with a fixed reference time."""
    def _make(
            url: str = "https://example.com/garden",
            html: Optional[str] = None,
            headers: Optional[Dict[str, str]] = None,
            status: int = 200,
            metrics: Optional[PerformanceMetrics] = None,
            rendered: bool = False,
            robots: Optional[str] = None,
            reference_time: Optional[datetime] = REFERENCE_TIME,
    ) -> AnalysisRequest:
        return AnalysisRequest(
            url=url,
            html=complete_page_html(url) if html is None else html,
            response=ResponseMeta(status_code=status, headers=headers if headers is not None else SECURE_HEADERS),
            metrics=metrics,
            rendered=rendered,
            site_probe=SiteProbeResult(robots_txt_status=robots) if robots else None,
            reference_time=reference_time,
        )
    return _make


@pytest.fixture
def controller():
    with AnalysisController() as ctrl:
        yield ctrl
