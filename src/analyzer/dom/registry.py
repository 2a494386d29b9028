# src/analyzer/dom/registry.py
import importlib
import logging
import pkgutil
from typing import Dict, List, Optional

from .core import ExtractorDefinition

logger = logging.getLogger(__name__)

# Namespaces in PageFacts field order; discovery follows this, not file names.
EXTRACTOR_ORDER = ("technical", "onpage", "content", "structured")


class ExtractorRegistry:
    """
    Central registry for extraction modules.

    Dynamically discovers ExtractorDefinition objects from the
    'analyzer.dom.extractors' package.
    """

    _definitions: Dict[str, ExtractorDefinition] = {}
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Registers every module in `analyzer.dom.extractors` exposing a
        `DEFINITION` attribute (instance of `ExtractorDefinition`).
        """
        if cls._loaded:
            return

        import analyzer.dom.extractors as extractors_pkg

        for _, name, _ in pkgutil.iter_modules(extractors_pkg.__path__):
            full_name = f"analyzer.dom.extractors.{name}"
            module = importlib.import_module(full_name)
            defn = getattr(module, "DEFINITION", None)
            if isinstance(defn, ExtractorDefinition):
                cls._definitions[defn.namespace] = defn
                logger.debug("Extractor loaded: %s (%d fields)", defn.namespace, len(defn.fields))

        missing = [ns for ns in EXTRACTOR_ORDER if ns not in cls._definitions]
        if missing:
            raise RuntimeError(f"Extractor modules missing for: {', '.join(missing)}")
        cls._loaded = True

    @classmethod
    def get(cls, namespace: str) -> Optional[ExtractorDefinition]:
        cls.discover()
        return cls._definitions.get(namespace)

    @classmethod
    def get_all(cls) -> List[ExtractorDefinition]:
        """Returns the definitions in PageFacts namespace order."""
        cls.discover()
        return [cls._definitions[ns] for ns in EXTRACTOR_ORDER]
