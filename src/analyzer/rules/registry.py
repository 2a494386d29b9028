# src/analyzer/rules/registry.py
import importlib
import logging
import pkgutil
from typing import List, Set

from .core import RuleSet

logger = logging.getLogger(__name__)


class RuleRegistry:
    """
    Discovers RuleSet objects from the modules of the 'analyzer.rules' package
    and keeps them in evaluation order.
    """

    _rulesets: List[RuleSet] = []
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        if cls._loaded:
            return

        import analyzer.rules as rules_pkg

        found: List[RuleSet] = []
        for _, name, _ in pkgutil.iter_modules(rules_pkg.__path__):
            module = importlib.import_module(f"analyzer.rules.{name}")
            ruleset = getattr(module, "RULESET", None)
            if isinstance(ruleset, RuleSet):
                found.append(ruleset)
                logger.debug("Ruleset loaded: %s (%d rules)", ruleset.name, len(ruleset.rules))

        found.sort(key=lambda rs: rs.order)
        cls._check_unique_ids(found)
        cls._rulesets = found
        cls._loaded = True

    @staticmethod
    def _check_unique_ids(rulesets: List[RuleSet]) -> None:
        seen: Set[str] = set()
        for ruleset in rulesets:
            for rule_id in ruleset.ids:
                if rule_id in seen:
                    raise ValueError(f"Duplicate issue id '{rule_id}' in ruleset '{ruleset.name}'")
                seen.add(rule_id)

    @classmethod
    def get_all(cls) -> List[RuleSet]:
        cls.discover()
        return list(cls._rulesets)

    @classmethod
    def get_all_ids(cls) -> List[str]:
        return sorted(rule_id for rs in cls.get_all() for rule_id in rs.ids)
