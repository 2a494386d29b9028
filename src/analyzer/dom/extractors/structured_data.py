import json
import logging
from typing import Any, List

from ...config import ExtractionConfig
from ...model import ResponseMeta, StructuredDataFacts
from ..core import ExtractorDefinition, extractor_spec
from ..document import HTMLDocument

logger = logging.getLogger(__name__)


def collect_types(node: Any) -> List[str]:
    """
    @type values of a JSON-LD payload in document order. Top-level entities
    and @graph members count; nested property values (author, publisher) do not.
    """
    types: List[str] = []
    if isinstance(node, list):
        for item in node:
            types.extend(collect_types(item))
    elif isinstance(node, dict):
        value = node.get("@type")
        if isinstance(value, str):
            types.append(value)
        elif isinstance(value, list):
            types.extend(v for v in value if isinstance(v, str))
        if isinstance(node.get("@graph"), list):
            types.extend(collect_types(node["@graph"]))
    return types


@extractor_spec(fields=["json_ld_count", "schema_type_occurrences", "errors"])
def parse_json_ld(document: HTMLDocument) -> dict:
    """Parses every JSON-LD block on its own; a broken block is recorded, never raised."""
    occurrences: List[str] = []
    errors: List[str] = []
    count = 0
    for raw in document.scripts_by_type("application/ld+json"):
        if not raw.strip():
            continue
        count += 1
        try:
            occurrences.extend(collect_types(json.loads(raw)))
        except (ValueError, RecursionError) as e:
            errors.append(f"Invalid JSON-LD: {e}")
            logger.debug("Skipping malformed JSON-LD block on %s: %s", document.url, e)
    return {
        "json_ld_count": count,
        "schema_type_occurrences": tuple(occurrences),
        "errors": tuple(errors),
    }


@extractor_spec(fields=["microdata_types"])
def parse_microdata(document: HTMLDocument) -> List[str]:
    return sorted(set(document.attrs("[itemscope][itemtype]", "itemtype")))


def extract_structured_data(
        document: HTMLDocument,
        response: ResponseMeta,
        url: str,
        config: ExtractionConfig,
) -> StructuredDataFacts:
    json_ld = parse_json_ld(document)
    occurrences = json_ld["schema_type_occurrences"]
    types = set(occurrences)

    return StructuredDataFacts(
        **json_ld,
        schema_types=tuple(sorted(types)),
        has_breadcrumb="BreadcrumbList" in types,
        has_article="Article" in types,
        has_product="Product" in types,
        has_faq="FAQPage" in types,
        microdata_types=tuple(parse_microdata(document)),
        duplicate_schemas=len(occurrences) != len(types),
        rich_results_eligible=any(t in types for t in config.rich_result_types),
    )


DEFINITION = ExtractorDefinition(
    namespace="structured",
    model=StructuredDataFacts,
    extract=extract_structured_data,
    helpers=[parse_json_ld, parse_microdata],
)
