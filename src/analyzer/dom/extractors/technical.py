from typing import List, Optional

from ...config import ExtractionConfig
from ...model import ResponseMeta, TechnicalFacts
from ...utils.url_utils import UrlUtils
from ..core import ExtractorDefinition, extractor_spec
from ..document import HTMLDocument

MIXED_CONTENT_SELECTOR = ", ".join((
    'img[src^="http://"]',
    'script[src^="http://"]',
    'iframe[src^="http://"]',
    'link[rel~="stylesheet"][href^="http://"]',
    'source[src^="http://"]',
))


@extractor_spec(fields=["canonical", "robots_meta", "has_viewport", "amp_url", "sitemap_url"])
def parse_head_signals(document: HTMLDocument) -> dict:
    """Technical <head> directives; every one of them is optional."""
    return {
        "canonical": document.attr('link[rel~="canonical"]', "href"),
        "robots_meta": document.attr('meta[name="robots" i]', "content"),
        "has_viewport": document.exists('meta[name="viewport" i]'),
        "amp_url": document.attr('link[rel~="amphtml"]', "href"),
        "sitemap_url": document.attr('link[rel~="sitemap"]', "href"),
    }


@extractor_spec(fields=["hreflangs"])
def parse_hreflangs(document: HTMLDocument) -> List[str]:
    seen: List[str] = []
    for lang in document.attrs('link[rel~="alternate"][hreflang]', "hreflang"):
        if lang not in seen:
            seen.append(lang)
    return seen


@extractor_spec(fields=["security_headers"])
def parse_security_headers(response: ResponseMeta, config: ExtractionConfig) -> List[str]:
    return sorted(h for h in config.security_headers if response.header(h))


@extractor_spec(fields=["has_https", "is_redirect", "has_mixed_content"])
def parse_transport(document: HTMLDocument, response: ResponseMeta, url: str) -> dict:
    effective_url = response.final_url or url
    has_https = UrlUtils.is_https(effective_url)
    return {
        "has_https": has_https,
        "is_redirect": 300 <= response.status_code < 400 or bool(response.redirect_chain),
        "has_mixed_content": has_https and document.exists(MIXED_CONTENT_SELECTOR),
    }


def extract_technical(
        document: HTMLDocument,
        response: ResponseMeta,
        url: str,
        config: ExtractionConfig,
) -> TechnicalFacts:
    """
    Technical facts derivable from the document and response headers.

    robots.txt status stays 'not_checked' here; the site probe collaborator
    supplies it when the AnalysisController assembles PageFacts.
    """
    return TechnicalFacts(
        **parse_head_signals(document),
        **parse_transport(document, response, url),
        security_headers=tuple(parse_security_headers(response, config)),
        hreflangs=tuple(parse_hreflangs(document)),
    )


def merge_site_probe(facts: TechnicalFacts, robots_txt_status: str, sitemap_url: Optional[str]) -> TechnicalFacts:
    """Returns a copy of the facts carrying the site probe outcome."""
    return facts.model_copy(update={
        "robots_txt_status": robots_txt_status,
        "sitemap_url": sitemap_url or facts.sitemap_url,
    })


DEFINITION = ExtractorDefinition(
    namespace="technical",
    model=TechnicalFacts,
    extract=extract_technical,
    helpers=[parse_head_signals, parse_hreflangs, parse_security_headers, parse_transport],
)
