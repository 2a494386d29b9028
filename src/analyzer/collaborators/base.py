# src/analyzer/collaborators/base.py
from abc import ABC, abstractmethod
from typing import Optional

from analyzer.model import PerformanceMetrics, SiteProbeResult


class SiteProbe(ABC):
    """Interface for collaborators that know whether robots.txt / a sitemap exist."""

    @abstractmethod
    async def probe(self, url: str) -> SiteProbeResult:
        raise NotImplementedError


class MetricsProvider(ABC):
    """Interface for collaborators that measure runtime performance of a page."""

    @abstractmethod
    async def collect(self, url: str) -> Optional[PerformanceMetrics]:
        """Returns None when no measurement is available."""
        raise NotImplementedError
