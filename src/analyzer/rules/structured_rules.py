from typing import Any, Dict, Optional

from .core import RuleContext, RuleSet, issue_spec


@issue_spec(
    id="structured-data-errors",
    severity="medium",
    category="structured-data",
    fix_complexity="easy",
    business_impact="medium",
    title="Invalid structured data",
    description="{count} JSON-LD block(s) could not be parsed.",
    impact="Broken markup is ignored, so rich results are lost.",
    estimated_time="30-60 minutes",
    affected_elements=('script[type="application/ld+json"]',),
    implementation_steps=(
        "Validate each JSON-LD block with the Rich Results Test",
        "Fix syntax errors such as trailing commas and unescaped quotes",
    ),
    validation_criteria=("All JSON-LD blocks parse", "Rich Results Test shows no errors"),
    reads=("structured",),
)
def check_json_ld_errors(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    errors = ctx.facts.structured.errors
    return {"count": len(errors), "elements": errors} if errors else None


@issue_spec(
    id="missing-structured-data",
    severity="low",
    category="structured-data",
    fix_complexity="medium",
    business_impact="low",
    title="No structured data",
    description="The page carries no JSON-LD or microdata markup.",
    impact="The page is not eligible for rich results.",
    estimated_time="1-2 hours",
    affected_elements=("head",),
    implementation_steps=(
        "Choose the schema.org type that fits the page (Article, Product, FAQPage...)",
        "Add it as a JSON-LD block",
    ),
    validation_criteria=("Rich Results Test detects the markup",),
    reads=("structured",),
)
def check_structured_presence(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    s = ctx.facts.structured
    return {} if s.json_ld_count == 0 and not s.microdata_types else None


@issue_spec(
    id="duplicate-schema-types",
    severity="low",
    category="structured-data",
    fix_complexity="easy",
    business_impact="low",
    title="Duplicate schema types",
    description="Schema types declared more than once: {types}.",
    impact="Conflicting entities confuse rich-result parsing.",
    estimated_time="15-30 minutes",
    affected_elements=('script[type="application/ld+json"]',),
    implementation_steps=("Merge duplicate entities into a single declaration",),
    validation_criteria=("Each schema type declared once",),
    reads=("structured",),
)
def check_duplicate_schemas(ctx: RuleContext) -> Optional[Dict[str, Any]]:
    s = ctx.facts.structured
    if not s.duplicate_schemas:
        return None
    occurrences = list(s.schema_type_occurrences)
    duplicated = sorted({t for t in occurrences if occurrences.count(t) > 1})
    return {"types": ", ".join(duplicated)}


RULESET = RuleSet(
    name="structured-data",
    order=40,
    rules=[check_json_ld_errors, check_structured_presence, check_duplicate_schemas],
)
