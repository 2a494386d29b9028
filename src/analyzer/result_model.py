from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .model import FactStatus, PageFacts

Severity = Literal["critical", "high", "medium", "low"]
FixComplexity = Literal["easy", "medium", "hard"]
BusinessImpact = Literal["low", "medium", "high"]
Priority = Literal["immediate", "high", "medium", "low"]
Timeline = Literal["immediate", "short-term", "medium-term", "long-term"]
Difficulty = Literal["beginner", "intermediate", "advanced", "expert"]

SEVERITIES: Tuple[str, ...] = ("critical", "high", "medium", "low")


class AnalysisStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    COMPLETED_WITH_FALLBACK = "completed_with_fallback"
    FAILED = "failed"


# --- Scores ---

class SubScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int
    weight: float


class CategoryScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    status: FactStatus = "ok"
    breakdown: Dict[str, SubScore] = Field(default_factory=dict)
    penalties: Tuple[str, ...] = ()

    @classmethod
    def zero(cls) -> "CategoryScore":
        return cls(score=0)


class CategoryScores(BaseModel):
    model_config = ConfigDict(frozen=True)

    technical: CategoryScore
    content: CategoryScore
    onpage: CategoryScore
    structured: CategoryScore
    ux: Optional[CategoryScore] = None

    def items(self) -> List[Tuple[str, CategoryScore]]:
        pairs = [
            ("technical", self.technical),
            ("content", self.content),
            ("onpage", self.onpage),
            ("structured", self.structured),
        ]
        if self.ux is not None:
            pairs.append(("ux", self.ux))
        return pairs

    @classmethod
    def zero(cls) -> "CategoryScores":
        z = CategoryScore.zero()
        return cls(technical=z, content=z, onpage=z, structured=z)


# --- Content sub-analysis ---

class ContentStructure(BaseModel):
    model_config = ConfigDict(frozen=True)

    well_organized: bool = False
    logical_flow: bool = False
    heading_counts: Dict[str, int] = Field(default_factory=dict)


class ContentDepth(BaseModel):
    model_config = ConfigDict(frozen=True)

    word_count: int = 0
    reading_time_minutes: int = 0
    paragraph_count: int = 0
    average_sentence_length: float = 0.0
    topic_coverage: Tuple[str, ...] = ()
    structure: ContentStructure = Field(default_factory=ContentStructure)
    score: int = 0
    recommendations: Tuple[str, ...] = ()


class ContentQuality(BaseModel):
    model_config = ConfigDict(frozen=True)

    duplicate_content: bool = False
    uniqueness: float = 0.0
    grammar_errors: Optional[int] = None
    spelling_errors: Optional[int] = None
    score: int = 0
    issues: Tuple[str, ...] = ()


class ReadabilityAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    flesch_kincaid: float = 0.0
    flesch_reading_ease: float = 0.0
    smog: float = 0.0
    ari: float = 0.0
    coleman_liau: float = 0.0
    gunning_fog: float = 0.0
    overall: float = 0.0
    grade_level: str = ""
    difficulty: str = ""
    score: int = 0
    suggestions: Tuple[str, ...] = ()


class KeywordDistribution(BaseModel):
    model_config = ConfigDict(frozen=True)

    in_title: bool = False
    in_h1: bool = False
    in_meta_description: bool = False
    in_first_paragraph: bool = False
    in_last_paragraph: bool = False


class KeywordAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary_keyword: Optional[str] = None
    density: Dict[str, float] = Field(default_factory=dict)
    distribution: KeywordDistribution = Field(default_factory=KeywordDistribution)
    stuffing_risk: bool = False
    score: int = 0
    recommendations: Tuple[str, ...] = ()


class FreshnessAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    published_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    age_days: Optional[int] = None
    days_since_update: Optional[int] = None
    needs_update: bool = False
    update_frequency: str = "unknown"
    score: int = 0
    recommendations: Tuple[str, ...] = ()


class ContentInsights(BaseModel):
    model_config = ConfigDict(frozen=True)

    depth: ContentDepth = Field(default_factory=ContentDepth)
    quality: ContentQuality = Field(default_factory=ContentQuality)
    readability: ReadabilityAnalysis = Field(default_factory=ReadabilityAnalysis)
    keywords: KeywordAnalysis = Field(default_factory=KeywordAnalysis)
    freshness: FreshnessAnalysis = Field(default_factory=FreshnessAnalysis)


# --- Issues ---

class Issue(BaseModel):
    """A single detected problem. Classification is fixed at detection time."""
    model_config = ConfigDict(frozen=True)

    id: str
    type: Literal["critical", "high", "medium", "low", "cross-category"]
    severity: Severity
    category: str
    fix_complexity: FixComplexity
    business_impact: BusinessImpact
    title: str
    description: str
    impact: str = ""
    estimated_time: str = ""
    affected_elements: Tuple[str, ...] = ()
    implementation_steps: Tuple[str, ...] = ()
    validation_criteria: Tuple[str, ...] = ()
    affected_categories: Tuple[str, ...] = ()


class ImpactMatrix(BaseModel):
    model_config = ConfigDict(frozen=True)

    high_impact_easy_fix: Tuple[str, ...] = ()
    high_impact_hard_fix: Tuple[str, ...] = ()
    low_impact_easy_fix: Tuple[str, ...] = ()
    low_impact_hard_fix: Tuple[str, ...] = ()


class IssuePrioritization(BaseModel):
    model_config = ConfigDict(frozen=True)

    immediate: Tuple[str, ...] = ()
    short_term: Tuple[str, ...] = ()
    long_term: Tuple[str, ...] = ()
    quick_wins: Tuple[str, ...] = ()
    impact_matrix: ImpactMatrix = Field(default_factory=ImpactMatrix)


class IssueSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    cross_category: int = 0
    quick_wins: int = 0
    average_fix_time: str = "n/a"


class IssueReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    issues: Tuple[Issue, ...] = ()
    by_severity: Dict[str, Tuple[str, ...]] = Field(
        default_factory=lambda: {s: () for s in SEVERITIES}
    )
    cross_category: Tuple[str, ...] = ()
    prioritization: IssuePrioritization = Field(default_factory=IssuePrioritization)
    summary: IssueSummary = Field(default_factory=IssueSummary)

    def get(self, issue_id: str) -> Optional[Issue]:
        return next((i for i in self.issues if i.id == issue_id), None)

    def count(self, severity: str) -> int:
        return len(self.by_severity.get(severity, ()))


# --- Recommendations ---

class ImplementationStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: int
    title: str
    description: str
    code_example: Optional[str] = None
    tools: Tuple[str, ...] = ()


class ValidationPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    testing_steps: Tuple[str, ...] = ()
    success_metrics: Tuple[str, ...] = ()
    monitoring: Tuple[str, ...] = ()


class ResourceLinks(BaseModel):
    model_config = ConfigDict(frozen=True)

    documentation: Tuple[str, ...] = ()
    tools: Tuple[str, ...] = ()


class ImplementationPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    difficulty: Difficulty = "intermediate"
    estimated_time: str = ""
    required_skills: Tuple[str, ...] = ()
    steps: Tuple[ImplementationStep, ...] = ()
    validation: ValidationPlan = Field(default_factory=ValidationPlan)
    resources: ResourceLinks = Field(default_factory=ResourceLinks)


class BusinessImpactEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    estimate: str = ""
    traffic_impact: str = ""
    conversion_impact: str = ""


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    issue_id: Optional[str] = None
    category: str
    title: str
    description: str
    fix_complexity: FixComplexity
    priority: Priority
    timeline: Timeline
    strategic_value: int = Field(ge=1, le=10)
    quick_win: bool = False
    implementation: ImplementationPlan = Field(default_factory=ImplementationPlan)
    business_impact: BusinessImpactEstimate = Field(default_factory=BusinessImpactEstimate)


class PriorityMatrix(BaseModel):
    model_config = ConfigDict(frozen=True)

    immediate: Tuple[str, ...] = ()
    short_term: Tuple[str, ...] = ()
    medium_term: Tuple[str, ...] = ()
    long_term: Tuple[str, ...] = ()


class RecommendationStrategy(BaseModel):
    model_config = ConfigDict(frozen=True)

    quick_wins: Tuple[str, ...] = ()
    strategic_initiatives: Tuple[str, ...] = ()
    long_term_goals: Tuple[str, ...] = ()
    priority_matrix: PriorityMatrix = Field(default_factory=PriorityMatrix)


class RecommendationSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int = 0
    quick_wins: int = 0
    strategic_initiatives: int = 0
    estimated_implementation_time: str = "n/a"
    priority_distribution: Dict[str, int] = Field(default_factory=dict)
    category_distribution: Dict[str, int] = Field(default_factory=dict)
    average_strategic_value: float = 0.0


class RecommendationReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    recommendations: Tuple[Recommendation, ...] = ()
    strategy: RecommendationStrategy = Field(default_factory=RecommendationStrategy)
    summary: RecommendationSummary = Field(default_factory=RecommendationSummary)

    def get(self, rec_id: str) -> Optional[Recommendation]:
        return next((r for r in self.recommendations if r.id == rec_id), None)


# --- Aggregate root ---

class AnalysisMetadata(BaseModel):
    """Wall-clock dependent run information; excluded from determinism checks."""
    model_config = ConfigDict(frozen=True)

    analyzed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    processing_time_ms: float = 0.0
    phase_durations_ms: Dict[str, float] = Field(default_factory=dict)
    analysis_version: str = ""
    config_version: str = ""


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    status: AnalysisStatus
    facts: PageFacts
    scores: CategoryScores
    base_score: float = 0.0
    risk_adjustment: int = 0
    overall_score: int = Field(default=0, ge=0, le=100)
    content_insights: ContentInsights = Field(default_factory=ContentInsights)
    issues: IssueReport = Field(default_factory=IssueReport)
    recommendations: RecommendationReport = Field(default_factory=RecommendationReport)
    confidence: int = Field(default=0, ge=0, le=100)
    degraded_modules: Tuple[str, ...] = ()
    error: Optional[str] = None
    metadata: AnalysisMetadata = Field(default_factory=AnalysisMetadata)

    def to_json(self, indent: Optional[int] = None) -> str:
        return self.model_dump_json(indent=indent)

    @classmethod
    def from_json(cls, payload: str) -> "AnalysisResult":
        return cls.model_validate_json(payload)

    def deterministic_dump(self) -> str:
        """JSON without the wall-clock metadata, for reproducibility checks."""
        return self.model_dump_json(exclude={"metadata"})

    def progress_summary(self) -> Dict[str, Any]:
        """The small payload a progress notifier needs."""
        return {
            "url": self.url,
            "status": self.status.value,
            "overall_score": self.overall_score,
            "category_scores": {name: cs.score for name, cs in self.scores.items()},
            "issues": self.issues.summary.model_dump(),
            "quick_wins": len(self.recommendations.strategy.quick_wins),
            "confidence": self.confidence,
        }
