# src/analyzer/dom/document.py
import logging
import re
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment, Doctype

logger = logging.getLogger(__name__)

NON_VISIBLE_TAGS = frozenset({"script", "style", "noscript", "template", "head", "title"})
_WS = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    return _WS.sub(" ", text or "").strip()


class HTMLDocument:
    """
    Read-only query handle over a parsed HTML page.

    Offers CSS-selector based element, attribute and text lookups. None of the
    methods mutate the underlying soup, so a single instance can be shared by
    extractors running on different threads.
    """

    def __init__(self, html: str, url: str = ""):
        # Basic cleanup of potentially dirty HTML (e.g., BOM)
        clean_html = (html or "").replace("\ufeff", "").strip()
        self.url = url
        self.soup = BeautifulSoup(clean_html, "html.parser")
        self.is_empty = not clean_html

    # -------- Element queries --------

    def select(self, css: str) -> List[Tag]:
        return self.soup.select(css)

    def select_one(self, css: str) -> Optional[Tag]:
        return self.soup.select_one(css)

    def exists(self, css: str) -> bool:
        return self.select_one(css) is not None

    def count(self, css: str) -> int:
        return len(self.select(css))

    # -------- Attribute & text queries --------

    def attr(self, css: str, name: str) -> Optional[str]:
        """Returns the stripped attribute of the first match, or None when absent or empty."""
        el = self.select_one(css)
        if el is None:
            return None
        value = el.get(name)
        if isinstance(value, list):
            value = " ".join(value)
        value = (value or "").strip()
        return value or None

    def attrs(self, css: str, name: str) -> List[str]:
        out = []
        for el in self.select(css):
            value = el.get(name)
            if isinstance(value, list):
                value = " ".join(value)
            if value and value.strip():
                out.append(value.strip())
        return out

    def text(self, css: str) -> Optional[str]:
        el = self.select_one(css)
        if el is None:
            return None
        return collapse_whitespace(el.get_text(" "))

    def texts(self, css: str) -> List[str]:
        return [collapse_whitespace(el.get_text(" ")) for el in self.select(css)]

    # -------- Content helpers --------

    def visible_text(self, root_css: str = "body", exclude: Iterable[str] = NON_VISIBLE_TAGS) -> str:
        """
        Collects the human-visible text below `root_css`, skipping strings that
        live inside excluded tags. Falls back to the whole document when the
        root element is absent (fragments without <body>).
        """
        root = self.select_one(root_css) or self.soup
        excluded = frozenset(exclude)
        parts = []
        for string in root.find_all(string=True):
            if isinstance(string, (Comment, Doctype)):
                continue
            if any(parent.name in excluded for parent in string.parents if isinstance(parent, Tag)):
                continue
            parts.append(str(string))
        return collapse_whitespace(" ".join(parts))

    def paragraph_texts(self) -> List[str]:
        return [t for t in self.texts("p") if t]

    def scripts_by_type(self, mime_type: str) -> List[str]:
        """Raw text of every <script type=...> block, including empty ones."""
        out = []
        for script in self.soup.find_all("script", attrs={"type": mime_type}):
            raw = script.string if isinstance(script.string, NavigableString) else script.get_text()
            out.append(raw or "")
        return out

    def __repr__(self) -> str:
        return f"<HTMLDocument url={self.url!r} empty={self.is_empty}>"
