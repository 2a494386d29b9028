# src/analyzer/collaborators/static.py
import logging
from typing import Dict, Optional

from analyzer.collaborators.base import MetricsProvider, SiteProbe
from analyzer.model import PerformanceMetrics, SiteProbeResult
from analyzer.utils.url_utils import UrlUtils

logger = logging.getLogger(__name__)


class StaticSiteProbe(SiteProbe):
    """
    Serves site facts that were determined elsewhere (a crawl, a CLI flag),
    keyed by host. Unknown hosts report 'not_checked'.
    """

    def __init__(self, results: Optional[Dict[str, SiteProbeResult]] = None, default: Optional[SiteProbeResult] = None):
        self._results = {UrlUtils.host(k) or k: v for k, v in (results or {}).items()}
        self._default = default or SiteProbeResult()

    async def probe(self, url: str) -> SiteProbeResult:
        return self._results.get(UrlUtils.host(url), self._default)


class StaticMetricsProvider(MetricsProvider):
    """Serves previously captured metrics per URL, or one set for every URL."""

    def __init__(self, metrics: Optional[Dict[str, PerformanceMetrics]] = None, default: Optional[PerformanceMetrics] = None):
        self._metrics = dict(metrics or {})
        self._default = default

    async def collect(self, url: str) -> Optional[PerformanceMetrics]:
        found = self._metrics.get(url, self._default)
        if found is None:
            logger.debug("No captured metrics for %s", url)
        return found
