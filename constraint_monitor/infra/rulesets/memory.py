# constraint_monitor/infra/rulesets/memory.py
"""
Memory RuleSet Loader

In-memory loaders for testing, programmatic rule creation and built-in defaults
"""

from __future__ import annotations

from typing import Iterable, Optional

from constraint_monitor.core.rules.defaults import default_ruleset
from constraint_monitor.core.rules.loader import RuleSetLoader
from constraint_monitor.core.rules.models import ConstraintRule, RuleSet


class MemoryLoader(RuleSetLoader):
    """
    Load a rule set from memory

    Useful for:
    - Testing
    - Programmatic rule creation
    - Simulating a reload by calling set_rules() between loads
    """

    def __init__(self, ruleset: Optional[RuleSet] = None):
        self._ruleset = ruleset

    def load(self) -> Optional[RuleSet]:
        return self._ruleset

    def set_rules(self, rules: Iterable[ConstraintRule], source: str = "memory") -> None:
        self._ruleset = RuleSet(rules=tuple(rules), source=source)

    def clear(self) -> None:
        self._ruleset = None


class DefaultsLoader(RuleSetLoader):
    """Built-in rules; always yields a rule set (last entry of a CompositeLoader)"""

    def load(self) -> Optional[RuleSet]:
        return default_ruleset()


__all__ = ["MemoryLoader", "DefaultsLoader"]
