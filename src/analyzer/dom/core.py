from typing import Callable, List, Optional, Set, Type

from ..config import ExtractionConfig
from ..model import ModuleFacts, ResponseMeta
from .document import HTMLDocument


def extractor_spec(fields: List[str]):
    """
    Decorator to declare which fact fields an extraction helper produces.
    Facilitates field auto-discovery by the ExtractorRegistry.
    """
    def decorator(func):
        func.produces = fields
        return func
    return decorator


# Signature of a module-level extraction entry point.
ExtractFn = Callable[[HTMLDocument, ResponseMeta, str, ExtractionConfig], ModuleFacts]


class ExtractorDefinition:
    """
    Configuration object binding a fact namespace to its model and extract function.
    """

    def __init__(
            self,
            namespace: str,
            model: Type[ModuleFacts],
            extract: ExtractFn,
            helpers: Optional[List[Callable]] = None,
    ):
        self.namespace = namespace
        self.model = model
        self.extract = extract
        self.helpers = helpers or []

        # --- Auto-Discovery of produced fields ---
        fields: Set[str] = set()
        for helper in self.helpers:
            if hasattr(helper, "produces"):
                fields.update(helper.produces)
        self.fields = sorted(fields)

    def run(
            self,
            document: HTMLDocument,
            response: ResponseMeta,
            url: str,
            config: ExtractionConfig,
    ) -> ModuleFacts:
        facts = self.extract(document, response, url, config)
        if not isinstance(facts, self.model):
            raise TypeError(
                f"Extractor '{self.namespace}' returned {type(facts).__name__}, "
                f"expected {self.model.__name__}"
            )
        return facts

    def __repr__(self) -> str:
        return f"<ExtractorDefinition {self.namespace} fields={len(self.fields)}>"
