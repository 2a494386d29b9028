from typing import Dict, Optional, Tuple

from ...config import ExtractionConfig
from ...model import OnPageFacts, OpenGraph, ResponseMeta
from ...utils.url_utils import UrlUtils
from ..core import ExtractorDefinition, extractor_spec
from ..document import HTMLDocument

HEADING_LEVELS = range(1, 7)


@extractor_spec(fields=["title", "meta_description"])
def parse_meta(document: HTMLDocument) -> Dict[str, Optional[str]]:
    return {
        "title": document.text("title") or None,
        "meta_description": document.attr('meta[name="description" i]', "content"),
    }


@extractor_spec(fields=["headings", "heading_outline"])
def parse_headings(document: HTMLDocument) -> Tuple[Dict[str, Tuple[str, ...]], Tuple[int, ...]]:
    """Heading texts per level plus the level sequence in document order."""
    headings = {f"h{lvl}": tuple(document.texts(f"h{lvl}")) for lvl in HEADING_LEVELS}
    outline = tuple(int(el.name[1]) for el in document.select("h1, h2, h3, h4, h5, h6"))
    return headings, outline


@extractor_spec(fields=["image_count", "images_missing_alt"])
def parse_images(document: HTMLDocument) -> Tuple[int, int]:
    images = document.select("img")
    missing = sum(1 for img in images if not (img.get("alt") or "").strip())
    return len(images), missing


@extractor_spec(fields=["open_graph", "twitter_card"])
def parse_social(document: HTMLDocument) -> Tuple[OpenGraph, Optional[str]]:
    og = OpenGraph(
        title=document.attr('meta[property="og:title"]', "content"),
        description=document.attr('meta[property="og:description"]', "content"),
        image=document.attr('meta[property="og:image"]', "content"),
    )
    return og, document.attr('meta[name="twitter:card"]', "content")


@extractor_spec(fields=["internal_links", "external_links"])
def parse_links(document: HTMLDocument, url: str) -> Tuple[int, int]:
    internal = external = 0
    for href in document.attrs("a[href]", "href"):
        if not UrlUtils.is_navigable(href):
            continue
        if UrlUtils.is_external(url, href):
            external += 1
        else:
            internal += 1
    return internal, external


@extractor_spec(fields=["canonical_matches"])
def parse_canonical_consistency(document: HTMLDocument, url: str) -> bool:
    """True when there is no canonical, or it points back at the page itself."""
    canonical = document.attr('link[rel~="canonical"]', "href")
    if not canonical:
        return True
    return UrlUtils.normalize_url(url, canonical) == UrlUtils.normalize_url(url, url)


@extractor_spec(fields=["noindex", "nofollow"])
def parse_robots_directives(document: HTMLDocument) -> Tuple[bool, bool]:
    content = (document.attr('meta[name="robots" i]', "content") or "").lower()
    directives = {d.strip() for d in content.split(",")}
    noindex = "noindex" in directives or "none" in directives
    nofollow = "nofollow" in directives or "none" in directives
    return noindex, nofollow


def extract_onpage(
        document: HTMLDocument,
        response: ResponseMeta,
        url: str,
        config: ExtractionConfig,
) -> OnPageFacts:
    headings, outline = parse_headings(document)
    image_count, missing_alt = parse_images(document)
    og, twitter = parse_social(document)
    internal, external = parse_links(document, response.final_url or url)
    noindex, nofollow = parse_robots_directives(document)

    return OnPageFacts(
        **parse_meta(document),
        headings=headings,
        heading_outline=outline,
        image_count=image_count,
        images_missing_alt=missing_alt,
        open_graph=og,
        twitter_card=twitter,
        canonical_matches=parse_canonical_consistency(document, response.final_url or url),
        internal_links=internal,
        external_links=external,
        noindex=noindex,
        nofollow=nofollow,
        favicon=document.attr('link[rel~="icon"]', "href"),
        html_lang=document.attr("html", "lang"),
    )


DEFINITION = ExtractorDefinition(
    namespace="onpage",
    model=OnPageFacts,
    extract=extract_onpage,
    helpers=[
        parse_meta, parse_headings, parse_images, parse_social,
        parse_links, parse_canonical_consistency, parse_robots_directives,
    ],
)
