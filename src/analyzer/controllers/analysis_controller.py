# src/analyzer/controllers/analysis_controller.py
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Dict, List, Optional

from analyzer.collaborators.base import MetricsProvider, SiteProbe
from analyzer.config import DEFAULT_CONFIG, AnalyzerConfig
from analyzer.dom.core import ExtractorDefinition
from analyzer.dom.document import HTMLDocument
from analyzer.dom.extractors.content import parse_http_date
from analyzer.dom.extractors.technical import merge_site_probe
from analyzer.dom.registry import ExtractorRegistry
from analyzer.model import (
    FACT_NAMESPACES,
    AnalysisRequest,
    ContentFacts,
    ModuleFacts,
    OnPageFacts,
    PageFacts,
    PerformanceMetrics,
    SiteProbeResult,
    StructuredDataFacts,
    TechnicalFacts,
)
from analyzer.result_model import (
    SEVERITIES,
    AnalysisMetadata,
    AnalysisResult,
    AnalysisStatus,
    CategoryScores,
    IssueReport,
)
from analyzer.rules.core import RuleSet
from analyzer.services.content_analysis_service import ContentAnalysisService
from analyzer.services.issue_detection_service import IssueDetectionService
from analyzer.services.recommendation_service import RecommendationService
from analyzer.services.scoring_service import ScoringService
from analyzer.utils.run_timers import PhaseTimers, RunTimers

logger = logging.getLogger(__name__)

NAMESPACE_MODELS = {
    "technical": TechnicalFacts,
    "onpage": OnPageFacts,
    "content": ContentFacts,
    "structured": StructuredDataFacts,
}


class AnalysisController:
    """
    Orchestrates one page analysis end to end.

    Extraction modules run concurrently on a thread pool together with the
    site probe and metrics collaborators. Their outputs are joined into an
    immutable PageFacts, after which scoring, content analysis, issue
    detection and recommendations run in sequence. Any unexpected failure
    or an exceeded deadline yields a fallback result instead of an exception.
    """

    def __init__(
            self,
            config: AnalyzerConfig = DEFAULT_CONFIG,
            *,
            extractors: Optional[List[ExtractorDefinition]] = None,
            rulesets: Optional[List[RuleSet]] = None,
            site_probe: Optional[SiteProbe] = None,
            metrics_provider: Optional[MetricsProvider] = None,
            collaborator_timeout: float = 10.0,
            deadline: Optional[float] = None,
            max_workers: Optional[int] = None,
    ) -> None:
        self.config = config
        self.extractors = extractors if extractors is not None else ExtractorRegistry.get_all()
        self.site_probe = site_probe
        self.metrics_provider = metrics_provider
        self.collaborator_timeout = collaborator_timeout
        self.deadline = deadline

        self.scoring = ScoringService(config.scoring)
        self.content_analysis = ContentAnalysisService(config.content)
        self.issue_detection = IssueDetectionService(config, rulesets)
        self.recommendations = RecommendationService(config)

        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or max(len(self.extractors), 1),
            thread_name_prefix="extract",
        )

    # -------- Lifecycle --------

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "AnalysisController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------- Entry points --------

    def analyze_sync(self, request: AnalysisRequest, deadline: Optional[float] = None) -> AnalysisResult:
        return asyncio.run(self.analyze(request, deadline))

    async def analyze(self, request: AnalysisRequest, deadline: Optional[float] = None) -> AnalysisResult:
        """
        Runs the full pipeline for one request.

        Returns a COMPLETED result, a COMPLETED_WITH_FALLBACK result when the
        run failed or timed out, or a FAILED result for an empty document.
        """
        deadline = deadline if deadline is not None else self.deadline
        total = RunTimers()
        total.start()
        timers = PhaseTimers()
        logger.info("Analyzing %s", request.url)

        if not request.html or not request.html.strip():
            logger.warning("Empty HTML for %s; nothing to analyze.", request.url)
            return self._fallback(request, "Empty HTML document", AnalysisStatus.FAILED, timers, total)

        try:
            if deadline is not None:
                result = await asyncio.wait_for(self._run(request, timers), timeout=deadline)
            else:
                result = await self._run(request, timers)
        except asyncio.TimeoutError:
            message = f"Analysis exceeded deadline of {deadline}s"
            logger.error("%s for %s", message, request.url)
            return self._fallback(request, message, AnalysisStatus.COMPLETED_WITH_FALLBACK, timers, total)
        except Exception as e:
            logger.error("Analysis failed for %s: %s", request.url, e, exc_info=True)
            return self._fallback(
                request, f"{type(e).__name__}: {e}", AnalysisStatus.COMPLETED_WITH_FALLBACK, timers, total
            )

        total.stop()
        logger.debug("Phase timings for %s: %s", request.url, timers.as_ms())
        logger.info(
            "Finished %s: overall=%d confidence=%d issues=%d (%.1f ms)",
            request.url, result.overall_score, result.confidence,
            result.issues.summary.total, total.duration_ms,
        )
        return result.model_copy(update={"metadata": self._metadata(timers, total)})

    # -------- Pipeline --------

    async def _run(self, request: AnalysisRequest, timers: PhaseTimers) -> AnalysisResult:
        with timers.measure("extraction"):
            facts = await self._extract(request)

        with timers.measure("scoring"):
            scores = self.scoring.score(facts)
            base_score = self.scoring.weighted_score(scores)

        with timers.measure("content_analysis"):
            insights = self.content_analysis.analyze(facts, facts.reference_time)

        with timers.measure("issue_detection"):
            issues = self.issue_detection.analyze(facts, scores, insights)

        with timers.measure("recommendations"):
            recommendations = self.recommendations.generate(facts, issues)

        with timers.measure("aggregation"):
            counts = {severity: issues.count(severity) for severity in SEVERITIES}
            overall, adjustment = self.scoring.overall(base_score, counts)
            degraded = facts.degraded_modules
            if degraded:
                logger.warning("Degraded modules for %s: %s", request.url, ", ".join(degraded))

            result = AnalysisResult(
                url=request.url,
                status=AnalysisStatus.COMPLETED,
                facts=facts,
                scores=scores,
                base_score=base_score,
                risk_adjustment=adjustment,
                overall_score=overall,
                content_insights=insights,
                issues=issues,
                recommendations=recommendations,
                confidence=self.confidence(facts, issues, errored=bool(degraded)),
                degraded_modules=degraded,
            )
        return result

    async def _extract(self, request: AnalysisRequest) -> PageFacts:
        """Extraction fan-out and join; the only concurrent section of a run."""
        loop = asyncio.get_running_loop()
        document = await loop.run_in_executor(self._executor, HTMLDocument, request.html, request.url)

        module_jobs = [
            loop.run_in_executor(self._executor, self._run_extractor, defn, document, request)
            for defn in self.extractors
        ]
        *modules, metrics, probe = await asyncio.gather(
            *module_jobs,
            self._collect_metrics(request),
            self._probe_site(request),
        )

        by_namespace: Dict[str, ModuleFacts] = {
            defn.namespace: facts for defn, facts in zip(self.extractors, modules)
        }
        for ns, model in NAMESPACE_MODELS.items():
            by_namespace.setdefault(ns, model.unknown("No extractor registered"))

        technical = by_namespace["technical"]
        if technical.is_known:
            technical = merge_site_probe(technical, probe.robots_txt_status, probe.sitemap_url)

        return PageFacts(
            url=request.url,
            status_code=request.response.status_code,
            rendered=request.rendered,
            reference_time=self._reference_time(request),
            technical=technical,
            onpage=by_namespace["onpage"],
            content=by_namespace["content"],
            structured=by_namespace["structured"],
            performance=metrics,
        )

    def _run_extractor(self, defn: ExtractorDefinition, document: HTMLDocument, request: AnalysisRequest) -> ModuleFacts:
        """Runs one extraction module; a failure marks only that namespace unknown."""
        try:
            return defn.run(document, request.response, request.url, self.config.extraction)
        except Exception as e:
            logger.warning("Extractor '%s' failed for %s: %s", defn.namespace, request.url, e, exc_info=True)
            return defn.model.unknown(f"{type(e).__name__}: {e}")

    async def _collect_metrics(self, request: AnalysisRequest) -> Optional[PerformanceMetrics]:
        if request.metrics is not None:
            return request.metrics
        if self.metrics_provider is None:
            return None
        try:
            return await asyncio.wait_for(self.metrics_provider.collect(request.url), self.collaborator_timeout)
        except asyncio.TimeoutError:
            logger.warning("Metrics collection timed out after %ss for %s", self.collaborator_timeout, request.url)
        except Exception as e:
            logger.warning("Metrics collection failed for %s: %s", request.url, e)
        return None

    async def _probe_site(self, request: AnalysisRequest) -> SiteProbeResult:
        if request.site_probe is not None:
            return request.site_probe
        if self.site_probe is None:
            return SiteProbeResult()
        try:
            return await asyncio.wait_for(self.site_probe.probe(request.url), self.collaborator_timeout)
        except asyncio.TimeoutError:
            logger.warning("Site probe timed out after %ss for %s", self.collaborator_timeout, request.url)
        except Exception as e:
            logger.warning("Site probe failed for %s: %s", request.url, e)
        return SiteProbeResult()

    @staticmethod
    def _reference_time(request: AnalysisRequest) -> datetime:
        """Request value, then the response Date header, then the current time."""
        moment = request.reference_time or parse_http_date(request.response.header("date"))
        if moment is None:
            return datetime.now(timezone.utc)
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment

    # -------- Aggregation --------

    def confidence(self, facts: PageFacts, issues: IssueReport, errored: bool = False) -> int:
        """
        Trust in the result, 0..100. Missing metrics, a non-rendered document,
        an errored module and an unusually short issue list each lower it.
        The floor only applies to runs without errors.
        """
        rules = self.config.confidence
        value = rules.start
        if facts.performance is None:
            value -= rules.no_metrics
        if not facts.rendered:
            value -= rules.not_rendered
        if errored:
            value -= rules.phase_error
        if issues.summary.total < rules.few_issues_threshold:
            value -= rules.few_issues

        low = 0 if errored else rules.floor
        return max(low, min(100, value))

    def _metadata(self, timers: PhaseTimers, total: RunTimers, suffix: str = "") -> AnalysisMetadata:
        return AnalysisMetadata(
            processing_time_ms=total.duration_ms,
            phase_durations_ms=timers.as_ms(),
            analysis_version=f"{self.config.analysis_version}{suffix}",
            config_version=self.config.version,
        )

    def _fallback(
            self,
            request: AnalysisRequest,
            message: str,
            status: AnalysisStatus,
            timers: PhaseTimers,
            total: RunTimers,
    ) -> AnalysisResult:
        total.stop()
        return AnalysisResult(
            url=request.url,
            status=status,
            facts=PageFacts.unknown(request.url, message),
            scores=CategoryScores.zero(),
            confidence=0,
            degraded_modules=FACT_NAMESPACES,
            error=message,
            metadata=self._metadata(timers, total, suffix="-fallback"),
        )
