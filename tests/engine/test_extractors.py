# tests/engine/test_extractors.py
from datetime import datetime, timezone

import pytest

from analyzer.config import DEFAULT_CONFIG
from analyzer.dom.core import ExtractorDefinition
from analyzer.dom.document import HTMLDocument
from analyzer.dom.extractors.content import extract_content, keyword_frequencies, parse_date
from analyzer.dom.extractors.onpage import extract_onpage
from analyzer.dom.extractors.structured_data import extract_structured_data
from analyzer.dom.extractors.technical import extract_technical, merge_site_probe
from analyzer.dom.registry import ExtractorRegistry
from analyzer.model import ContentFacts, ResponseMeta, TechnicalFacts

CONFIG = DEFAULT_CONFIG.extraction
URL = "https://example.com/page"


def run(extract, html, url=URL, response=None):
    return extract(HTMLDocument(html, url), response or ResponseMeta(), url, CONFIG)


# --- Technical ---

def test_technical_head_signals_and_headers():
    html = (
        '<html><head><meta name="viewport" content="width=device-width">'
        '<link rel="canonical" href="https://example.com/page">'
        '<meta name="ROBOTS" content="index,follow">'
        '<link rel="alternate" hreflang="nl" href="/nl"><link rel="alternate" hreflang="nl" href="/nl2">'
        '</head><body></body></html>'
    )
    response = ResponseMeta(headers={
        "Strict-Transport-Security": "max-age=1",
        "X-Frame-Options": "DENY",
        "Server": "nginx",
    })
    facts = run(extract_technical, html, response=response)

    assert facts.has_https
    assert facts.has_viewport
    assert facts.canonical == "https://example.com/page"
    assert facts.robots_meta == "index,follow"
    assert facts.hreflangs == ("nl",)
    assert facts.security_headers == ("strict-transport-security", "x-frame-options")
    assert facts.robots_txt_status == "not_checked"
    assert facts.uses_http2 is None


def test_technical_missing_elements_are_facts_not_errors():
    facts = run(extract_technical, "<html><body>plain</body></html>", url="http://example.com/")
    assert facts.is_known
    assert not facts.has_https
    assert facts.canonical is None
    assert not facts.has_viewport
    assert facts.security_headers == ()


def test_mixed_content_only_on_https_pages():
    html = '<img src="http://cdn.example.com/a.png"><img src="https://cdn.example.com/b.png">'
    assert run(extract_technical, html).has_mixed_content
    assert not run(extract_technical, html, url="http://example.com/").has_mixed_content


def test_redirect_detected_from_status_or_chain():
    assert run(extract_technical, "<p>x</p>", response=ResponseMeta(status_code=301)).is_redirect
    chained = ResponseMeta(redirect_chain=("http://example.com/page",))
    assert run(extract_technical, "<p>x</p>", response=chained).is_redirect
    assert not run(extract_technical, "<p>x</p>").is_redirect


def test_merge_site_probe_returns_copy():
    facts = TechnicalFacts(sitemap_url="https://example.com/sitemap.xml")
    merged = merge_site_probe(facts, "missing", None)
    assert merged.robots_txt_status == "missing"
    assert merged.sitemap_url == "https://example.com/sitemap.xml"
    assert facts.robots_txt_status == "not_checked"


# --- On-page ---

def test_onpage_meta_and_headings():
    html = (
        '<html lang="nl"><head><title>A title</title>'
        '<meta name="Description" content=" A description ">'
        '<link rel="shortcut icon" href="/favicon.ico"></head>'
        "<body><h1>One</h1><h3>Three</h3><h2>Two</h2><h2>Two again</h2></body></html>"
    )
    facts = run(extract_onpage, html)
    assert facts.title == "A title"
    assert facts.meta_description == "A description"
    assert facts.headings["h1"] == ("One",)
    assert facts.headings["h2"] == ("Two", "Two again")
    assert facts.headings["h6"] == ()
    assert facts.heading_outline == (1, 3, 2, 2)
    assert facts.h1_count == 1
    assert facts.html_lang == "nl"
    assert facts.favicon == "/favicon.ico"


def test_onpage_images_missing_alt():
    html = '<img src="a.png" alt="A"><img src="b.png" alt=""><img src="c.png"><img src="d.png" alt="  ">'
    facts = run(extract_onpage, html)
    assert facts.image_count == 4
    assert facts.images_missing_alt == 3


def test_onpage_links_classified_by_host():
    html = (
        '<a href="/a">a</a>'
        '<a href="https://example.com/b">b</a>'
        '<a href="https://www.example.com/c">c</a>'
        '<a href="https://blog.example.com/d">d</a>'
        '<a href="https://other.org/">other</a>'
        '<a href="mailto:me@example.com">mail</a>'
        '<a href="#top">top</a>'
        '<a href="javascript:void(0)">js</a>'
    )
    facts = run(extract_onpage, html)
    assert facts.internal_links == 4
    assert facts.external_links == 1


@pytest.mark.parametrize("canonical, matches", [
    ("https://example.com/page", True),
    ("https://example.com/page/", True),
    ("/page#section", True),
    ("https://example.com/other", False),
])
def test_onpage_canonical_consistency(canonical, matches):
    facts = run(extract_onpage, f'<link rel="canonical" href="{canonical}">')
    assert facts.canonical_matches is matches


def test_onpage_robots_directives():
    facts = run(extract_onpage, '<meta name="robots" content="NONE">')
    assert facts.noindex and facts.nofollow
    facts = run(extract_onpage, '<meta name="robots" content="noindex, follow">')
    assert facts.noindex and not facts.nofollow


def test_onpage_social_tags():
    html = '<meta property="og:title" content="T"><meta name="twitter:card" content="summary">'
    facts = run(extract_onpage, html)
    assert facts.open_graph.is_present
    assert facts.open_graph.image is None
    assert facts.twitter_card == "summary"


# --- Content ---

def test_content_counts_and_thin_flag():
    html = "<body><h1>Basil</h1><p>Fresh basil grows fast. Basil needs sun!</p><script>var x = 1;</script></body>"
    facts = run(extract_content, html)
    assert facts.word_count == 8
    assert facts.sentence_count == 2
    assert facts.paragraph_count == 1
    assert facts.is_thin_content
    assert facts.top_keywords["basil"] == 3
    assert facts.first_paragraph == "Fresh basil grows fast. Basil needs sun!"
    assert facts.readability.flesch_reading_ease > 0


def test_keyword_ties_keep_first_occurrence_order():
    result = keyword_frequencies("alpha beta gamma beta alpha the and 2024", top_n=3)
    assert list(result.items()) == [("alpha", 2), ("beta", 2), ("gamma", 1)]


def test_keyword_stopwords_can_be_overridden():
    result = keyword_frequencies("alpha beta beta", {"beta"}, top_n=5)
    assert result == {"alpha": 1}


def test_content_dates_from_markup_and_headers():
    html = (
        '<head><meta property="article:published_time" content="2024-01-15T10:00:00Z">'
        '<meta property="article:modified_time" content="2024-03-01"></head>'
        "<body><p>Text</p></body>"
    )
    response = ResponseMeta(headers={"Last-Modified": "Wed, 01 May 2024 08:00:00 GMT"})
    facts = run(extract_content, html, response=response)
    assert facts.published_at == datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
    assert facts.modified_at == datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert facts.last_modified == datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)


def test_parse_date_written_formats():
    assert parse_date("March 5, 2024") == datetime(2024, 3, 5, tzinfo=timezone.utc)
    assert parse_date("5 Mar 2024") == datetime(2024, 3, 5, tzinfo=timezone.utc)
    assert parse_date("sometime last year") is None
    assert parse_date(None) is None


def test_content_duplicate_h1_and_media():
    html = (
        "<body><h1>Same</h1><h1>Same</h1><img src='a.png'>"
        '<video src="v.mp4"></video><iframe src="https://www.youtube.com/embed/x"></iframe></body>'
    )
    facts = run(extract_content, html)
    assert facts.duplicate_h1
    assert facts.image_count == 1
    assert facts.video_count == 2


def test_content_cross_page_checks_stay_unset():
    facts = run(extract_content, "<p>Some words here.</p>")
    assert facts.duplicate_title is None
    assert facts.duplicate_description is None
    assert facts.spelling_errors is None


# --- Structured data ---

def test_structured_graph_and_eligibility():
    html = """<script type="application/ld+json">
    {"@context": "https://schema.org", "@graph": [
        {"@type": "Organization", "name": "Example"},
        {"@type": "BreadcrumbList", "itemListElement": []}
    ]}</script>"""
    facts = run(extract_structured_data, html)
    assert facts.json_ld_count == 1
    assert facts.schema_types == ("BreadcrumbList", "Organization")
    assert facts.has_breadcrumb
    assert facts.rich_results_eligible
    assert not facts.duplicate_schemas


def test_structured_nested_entities_do_not_count():
    html = '<script type="application/ld+json">{"@type": "Article", "author": {"@type": "Person"}}</script>'
    facts = run(extract_structured_data, html)
    assert facts.schema_types == ("Article",)
    assert facts.has_article


def test_structured_invalid_block_is_recorded():
    html = (
        '<script type="application/ld+json">{"@type": "Product",</script>'
        '<script type="application/ld+json">{"@type": "FAQPage"}</script>'
    )
    facts = run(extract_structured_data, html)
    assert facts.json_ld_count == 2
    assert len(facts.errors) == 1
    assert facts.errors[0].startswith("Invalid JSON-LD:")
    assert facts.schema_types == ("FAQPage",)
    assert facts.has_faq


def test_structured_deeply_nested_block_is_recorded():
    deep = "[" * 100000 + "]" * 100000
    html = (
        f'<script type="application/ld+json">{deep}</script>'
        '<script type="application/ld+json">{"@type": "Article", "headline": "Basil"}</script>'
    )
    facts = run(extract_structured_data, html)
    assert facts.is_known
    assert facts.json_ld_count == 2
    assert len(facts.errors) == 1
    assert facts.errors[0].startswith("Invalid JSON-LD:")
    assert facts.schema_types == ("Article",)
    assert facts.rich_results_eligible


def test_structured_duplicate_types_and_microdata():
    block = '<script type="application/ld+json">{"@type": "Product"}</script>'
    html = block + block + '<div itemscope itemtype="https://schema.org/Recipe"></div>'
    facts = run(extract_structured_data, html)
    assert facts.duplicate_schemas
    assert facts.schema_types == ("Product",)
    assert facts.schema_type_occurrences == ("Product", "Product")
    assert facts.microdata_types == ("https://schema.org/Recipe",)


def test_structured_absent():
    facts = run(extract_structured_data, "<p>nothing</p>")
    assert facts.json_ld_count == 0
    assert facts.schema_types == ()
    assert not facts.rich_results_eligible


# --- Registry & definitions ---

def test_registry_discovers_all_namespaces_in_order():
    definitions = ExtractorRegistry.get_all()
    assert [d.namespace for d in definitions] == ["technical", "onpage", "content", "structured"]
    assert "canonical" in ExtractorRegistry.get("technical").fields
    assert "word_count" in ExtractorRegistry.get("content").fields


def test_definition_rejects_wrong_result_type():
    defn = ExtractorDefinition(
        namespace="content",
        model=ContentFacts,
        extract=lambda document, response, url, config: TechnicalFacts(),
    )
    with pytest.raises(TypeError):
        defn.run(HTMLDocument("<p>x</p>"), ResponseMeta(), URL, CONFIG)
