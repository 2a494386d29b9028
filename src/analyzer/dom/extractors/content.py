import logging
import re
from collections import Counter
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ...config import ExtractionConfig
from ...model import ContentFacts, ResponseMeta
from ...services import readability_service
from ...utils.stopwords import combine_stopwords
from ..core import ExtractorDefinition, extractor_spec
from ..document import HTMLDocument

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r"[a-zà-öø-ÿ0-9]+")
_HAS_LETTER = re.compile(r"[a-zà-öø-ÿ]")

PUBLISHED_SOURCES = (
    ('meta[property="article:published_time"]', "content"),
    ('[itemprop="datePublished"]', "content"),
    ('[itemprop="datePublished"]', "datetime"),
    ("time[datetime]", "datetime"),
    (".published", None),
    (".date", None),
)
MODIFIED_SOURCES = (
    ('meta[property="article:modified_time"]', "content"),
    ('[itemprop="dateModified"]', "content"),
    ('[itemprop="dateModified"]', "datetime"),
    (".modified", None),
    (".updated", None),
)
TEXT_DATE_FORMATS = ("%B %d, %Y", "%b %d, %Y", "%d %B %Y", "%d %b %Y", "%Y-%m-%d")
PARAGRAPH_SNIPPET = 500


def keyword_tokens(text: str, stopwords: Set[str], min_length: int) -> List[str]:
    """Lower-cased word tokens with stopwords, short tokens and pure numbers removed."""
    return [
        t for t in _TOKEN.findall((text or "").lower())
        if len(t) >= min_length and t not in stopwords and _HAS_LETTER.search(t)
    ]


@combine_stopwords
def keyword_frequencies(text: str, stopwords: Set[str], top_n: int = 5, min_length: int = 3) -> Dict[str, int]:
    """
    Most frequent content words of the text.

    Args:
        text: The visible page text.
        stopwords: Words to ignore (injected by decorator).
        top_n: Number of keywords to return.
        min_length: Shortest token considered a keyword.

    Returns:
        Dict[str, int]: keyword -> count, most frequent first; ties keep
        first-occurrence order.
    """
    tokens = keyword_tokens(text, stopwords, min_length)
    return dict(Counter(tokens).most_common(top_n))


@combine_stopwords
def lexical_diversity(text: str, stopwords: Set[str], min_length: int = 3) -> Tuple[int, float]:
    tokens = keyword_tokens(text, stopwords, min_length)
    if not tokens:
        return 0, 0.0
    return len(tokens), round(len(set(tokens)) / len(tokens), 4)


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parses ISO-8601 and a few common written formats; naive values are taken as UTC."""
    if not value:
        return None
    value = value.strip()
    parsed: Optional[datetime] = None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        for fmt in TEXT_DATE_FORMATS:
            try:
                parsed = datetime.strptime(value, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        logger.debug("Unrecognised date value: %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_http_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _first_date(document: HTMLDocument, sources: Iterable[Tuple[str, Optional[str]]]) -> Optional[datetime]:
    for css, attr in sources:
        raw = document.attr(css, attr) if attr else document.text(css)
        parsed = parse_date(raw)
        if parsed is not None:
            return parsed
    return None


@extractor_spec(fields=["published_at", "modified_at", "last_modified"])
def parse_dates(document: HTMLDocument, response: ResponseMeta) -> Dict[str, Optional[datetime]]:
    return {
        "published_at": _first_date(document, PUBLISHED_SOURCES),
        "modified_at": _first_date(document, MODIFIED_SOURCES),
        "last_modified": parse_http_date(response.header("last-modified")),
    }


@extractor_spec(fields=[
    "word_count", "sentence_count", "syllable_count", "complex_word_count",
    "character_count", "reading_ease", "readability",
])
def parse_text_metrics(text: str) -> dict:
    stats = readability_service.text_stats(text)
    return {
        "word_count": stats.words,
        "sentence_count": stats.sentences,
        "syllable_count": stats.syllables,
        "complex_word_count": stats.complex_words,
        "character_count": stats.characters,
        "reading_ease": readability_service.simple_reading_ease(text),
        "readability": readability_service.calculate_scores(stats),
    }


@extractor_spec(fields=["paragraph_count", "first_paragraph", "last_paragraph"])
def parse_paragraphs(document: HTMLDocument) -> dict:
    paragraphs = document.paragraph_texts()
    return {
        "paragraph_count": document.count("p"),
        "first_paragraph": paragraphs[0][:PARAGRAPH_SNIPPET] if paragraphs else "",
        "last_paragraph": paragraphs[-1][:PARAGRAPH_SNIPPET] if paragraphs else "",
    }


@extractor_spec(fields=["duplicate_h1"])
def parse_duplicate_h1(document: HTMLDocument) -> bool:
    h1s = document.texts("h1")
    return len(h1s) != len(set(h1s))


def extract_content(
        document: HTMLDocument,
        response: ResponseMeta,
        url: str,
        config: ExtractionConfig,
) -> ContentFacts:
    text = document.visible_text("body")
    metrics = parse_text_metrics(text)
    token_count, diversity = lexical_diversity(text, min_length=config.min_keyword_length)

    return ContentFacts(
        **metrics,
        **parse_paragraphs(document),
        **parse_dates(document, response),
        top_keywords=keyword_frequencies(
            text, top_n=config.top_keywords, min_length=config.min_keyword_length
        ),
        keyword_token_count=token_count,
        unique_word_ratio=diversity,
        is_thin_content=metrics["word_count"] < config.thin_content_words,
        duplicate_h1=parse_duplicate_h1(document),
        image_count=document.count("img"),
        video_count=document.count('video, iframe[src*="youtube"], iframe[src*="vimeo"]'),
    )


DEFINITION = ExtractorDefinition(
    namespace="content",
    model=ContentFacts,
    extract=extract_content,
    helpers=[parse_text_metrics, parse_paragraphs, parse_dates, parse_duplicate_h1],
)
