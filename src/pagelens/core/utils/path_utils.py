# src/pagelens/core/utils/path_utils.py
import logging
import re
from pathlib import Path
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving package paths and naming output files.
    """

    @staticmethod
    def get_package_root() -> Path:
        """Directory of the installed `pagelens` package (holds the settings files)."""
        return Path(__file__).resolve().parent.parent.parent

    @staticmethod
    def get_default_settings_file() -> Path:
        """The shipped defaults; never written."""
        return PathUtils.get_package_root() / "settings.default.json"

    @staticmethod
    def get_settings_file() -> Path:
        """Saved changes from 'pagelens config set'; absent until the first save."""
        return PathUtils.get_package_root() / "settings.json"

    @staticmethod
    def result_filename(url: str, index: int) -> str:
        """
        A filesystem-safe name for one analysis result, e.g.
        '003-example.com-blog-post.json'.
        """
        parsed = urlparse(url)
        stem = f"{parsed.netloc}{parsed.path}".strip("/") or "page"
        slug = re.sub(r"[^A-Za-z0-9.]+", "-", stem).strip("-")[:80]
        return f"{index:03d}-{slug}.json"

    @staticmethod
    def ensure_dir(path: Path) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        return path
