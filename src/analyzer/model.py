from datetime import datetime
from typing import Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

RobotsTxtStatus = Literal["present", "missing", "not_checked"]
FactStatus = Literal["ok", "unknown"]


# --- Inputs ---

class ResponseMeta(BaseModel):
    """HTTP response metadata as delivered by the fetch layer."""
    model_config = ConfigDict(frozen=True)

    status_code: int = 200
    headers: Dict[str, str] = Field(default_factory=dict)
    final_url: Optional[str] = None
    redirect_chain: Tuple[str, ...] = ()

    @field_validator("headers", mode="before")
    @classmethod
    def normalize_headers(cls, v):
        """Header names are case-insensitive; store them lower-cased."""
        if not v:
            return {}
        return {str(k).lower(): str(val) for k, val in dict(v).items()}

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())


class PerformanceMetrics(BaseModel):
    """
    Runtime metrics supplied by a browser-automation collaborator.
    Timings are in milliseconds, CLS is unitless, scores are 0..1.
    """
    model_config = ConfigDict(frozen=True)

    lcp: Optional[float] = None
    fid: Optional[float] = None
    inp: Optional[float] = None
    cls: Optional[float] = None
    fcp: Optional[float] = None
    ttfb: Optional[float] = None
    performance_score: Optional[float] = None
    accessibility_score: Optional[float] = None
    device: Literal["mobile", "desktop"] = "mobile"


class SiteProbeResult(BaseModel):
    """Site-level facts (robots.txt, sitemap) checked outside the pipeline."""
    model_config = ConfigDict(frozen=True)

    robots_txt_status: RobotsTxtStatus = "not_checked"
    sitemap_url: Optional[str] = None


class AnalysisRequest(BaseModel):
    """Everything a single analysis run consumes."""
    model_config = ConfigDict(frozen=True)

    url: str
    html: str = ""
    response: ResponseMeta = Field(default_factory=ResponseMeta)
    metrics: Optional[PerformanceMetrics] = None
    rendered: bool = False
    site_probe: Optional[SiteProbeResult] = None
    reference_time: Optional[datetime] = None


# --- Extracted facts ---

class ModuleFacts(BaseModel):
    """Base for the fact namespaces; each namespace is written by one extractor."""
    model_config = ConfigDict(frozen=True)

    status: FactStatus = "ok"
    error: Optional[str] = None

    @classmethod
    def unknown(cls, error: Optional[str] = None):
        """All-default facts flagged as unknown, used when an extractor fails."""
        return cls(status="unknown", error=error)

    @property
    def is_known(self) -> bool:
        return self.status == "ok"


class TechnicalFacts(ModuleFacts):
    has_https: bool = False
    canonical: Optional[str] = None
    robots_meta: Optional[str] = None
    security_headers: Tuple[str, ...] = ()
    robots_txt_status: RobotsTxtStatus = "not_checked"
    sitemap_url: Optional[str] = None
    hreflangs: Tuple[str, ...] = ()
    uses_http2: Optional[bool] = None  # not observable from response metadata
    has_viewport: bool = False
    amp_url: Optional[str] = None
    is_redirect: bool = False
    has_mixed_content: bool = False


class OpenGraph(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None

    @property
    def is_present(self) -> bool:
        return any((self.title, self.description, self.image))


class OnPageFacts(ModuleFacts):
    title: Optional[str] = None
    meta_description: Optional[str] = None
    headings: Dict[str, Tuple[str, ...]] = Field(
        default_factory=lambda: {f"h{lvl}": () for lvl in range(1, 7)}
    )
    heading_outline: Tuple[int, ...] = ()
    image_count: int = 0
    images_missing_alt: int = 0
    open_graph: OpenGraph = Field(default_factory=OpenGraph)
    twitter_card: Optional[str] = None
    canonical_matches: bool = True
    internal_links: int = 0
    external_links: int = 0
    noindex: bool = False
    nofollow: bool = False
    favicon: Optional[str] = None
    html_lang: Optional[str] = None

    @property
    def h1_count(self) -> int:
        return len(self.headings.get("h1", ()))


class ReadabilityScores(BaseModel):
    model_config = ConfigDict(frozen=True)

    flesch_kincaid: float = 0.0
    flesch_reading_ease: float = 0.0
    smog: float = 0.0
    ari: float = 0.0
    coleman_liau: float = 0.0
    gunning_fog: float = 0.0


class ContentFacts(ModuleFacts):
    word_count: int = 0
    paragraph_count: int = 0
    sentence_count: int = 0
    syllable_count: int = 0
    complex_word_count: int = 0
    character_count: int = 0
    top_keywords: Dict[str, int] = Field(default_factory=dict)
    keyword_token_count: int = 0
    unique_word_ratio: float = 0.0
    reading_ease: float = 0.0
    readability: ReadabilityScores = Field(default_factory=ReadabilityScores)
    is_thin_content: bool = False
    duplicate_h1: bool = False
    # Cross-page checks; a single page cannot answer these.
    duplicate_title: Optional[bool] = None
    duplicate_description: Optional[bool] = None
    spelling_errors: Optional[int] = None
    first_paragraph: str = ""
    last_paragraph: str = ""
    image_count: int = 0
    video_count: int = 0
    published_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    last_modified: Optional[datetime] = None


class StructuredDataFacts(ModuleFacts):
    json_ld_count: int = 0
    schema_types: Tuple[str, ...] = ()
    schema_type_occurrences: Tuple[str, ...] = ()
    errors: Tuple[str, ...] = ()
    has_breadcrumb: bool = False
    has_article: bool = False
    has_product: bool = False
    has_faq: bool = False
    microdata_types: Tuple[str, ...] = ()
    duplicate_schemas: bool = False
    rich_results_eligible: bool = False


class PageFacts(BaseModel):
    """
    Immutable snapshot of everything extracted for one page.

    Assembled once by the AnalysisController after the extraction join and
    passed read-only to every later phase.
    """
    model_config = ConfigDict(frozen=True)

    url: str
    status_code: int = 200
    rendered: bool = False
    reference_time: Optional[datetime] = None
    technical: TechnicalFacts = Field(default_factory=TechnicalFacts)
    onpage: OnPageFacts = Field(default_factory=OnPageFacts)
    content: ContentFacts = Field(default_factory=ContentFacts)
    structured: StructuredDataFacts = Field(default_factory=StructuredDataFacts)
    performance: Optional[PerformanceMetrics] = None

    def namespace(self, name: str) -> Optional[ModuleFacts]:
        return getattr(self, name, None) if name in FACT_NAMESPACES else None

    def is_known(self, name: str) -> bool:
        """True when the namespace was extracted successfully (or metrics exist)."""
        if name == "performance":
            return self.performance is not None
        facts = self.namespace(name)
        return facts is not None and facts.is_known

    @property
    def degraded_modules(self) -> Tuple[str, ...]:
        return tuple(n for n in FACT_NAMESPACES if not getattr(self, n).is_known)

    @classmethod
    def unknown(cls, url: str, error: Optional[str] = None) -> "PageFacts":
        return cls(
            url=url,
            technical=TechnicalFacts.unknown(error),
            onpage=OnPageFacts.unknown(error),
            content=ContentFacts.unknown(error),
            structured=StructuredDataFacts.unknown(error),
        )


FACT_NAMESPACES = ("technical", "onpage", "content", "structured")
