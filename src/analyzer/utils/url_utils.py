# src/analyzer/utils/url_utils.py
import logging
from typing import Optional
from urllib.parse import urljoin, urlparse, urlunparse

logger = logging.getLogger(__name__)

NON_NAVIGABLE_SCHEMES = ("mailto:", "tel:", "javascript:", "data:")


class UrlUtils:
    """A collection of static methods for URL parsing and comparison."""

    @staticmethod
    def normalize_url(base_url: str, url: str) -> str:
        """
        Creates a clean, absolute URL without fragment and with a trailing
        slash only for the root path.
        """
        parsed = urlparse(urljoin(base_url, url.strip()))
        path = parsed.path or "/"
        if len(path) > 1:
            path = path.rstrip("/")
        return urlunparse(parsed._replace(path=path, fragment="", netloc=parsed.netloc.lower()))

    @staticmethod
    def host(url: str) -> str:
        """Lower-cased hostname with a leading 'www.' removed."""
        try:
            return (urlparse(url).hostname or "").lower().removeprefix("www.")
        except ValueError:
            logger.debug("Could not parse host of %s", url)
            return ""

    @staticmethod
    def is_external(base_url: str, target_url: str) -> bool:
        """
        A link is external when its host differs from the page host and is not
        a subdomain of it. Relative links are internal.
        """
        source = UrlUtils.host(base_url)
        target = UrlUtils.host(urljoin(base_url, target_url))
        return bool(target) and target != source and not target.endswith(f".{source}")

    @staticmethod
    def is_navigable(href: Optional[str]) -> bool:
        if not href:
            return False
        href = href.strip().lower()
        return bool(href) and not href.startswith("#") and not href.startswith(NON_NAVIGABLE_SCHEMES)

    @staticmethod
    def is_https(url: str) -> bool:
        return (url or "").strip().lower().startswith("https://")
