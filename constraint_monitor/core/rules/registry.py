# constraint_monitor/core/rules/registry.py
"""
Rule Registry

Holds the active RuleSet and swaps it atomically on reload.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from .loader import RuleSetLoader
from .models import ConstraintRule, RuleSet

logger = logging.getLogger(__name__)


class RuleRegistry:
    """
    Central rule registry

    The active rule set is never mutated in place. Evaluations take a
    snapshot() at start and keep using it even if reload() runs meanwhile.
    """

    def __init__(
        self,
        ruleset: Optional[RuleSet] = None,
        loader: Optional[RuleSetLoader] = None,
    ):
        """
        Initialize rule registry

        Args:
            ruleset: Initial rule set (loaded from ``loader`` if omitted)
            loader: RuleSetLoader used by reload()
        """
        self.loader = loader
        self._lock = threading.Lock()
        if ruleset is None and loader is not None:
            ruleset = loader.load()
        self._ruleset: RuleSet = ruleset or RuleSet()

    @classmethod
    def from_rules(cls, rules: List[ConstraintRule], source: str = "memory") -> "RuleRegistry":
        return cls(RuleSet(rules=tuple(rules), source=source))

    def snapshot(self) -> RuleSet:
        """Current rule set (immutable)"""
        with self._lock:
            return self._ruleset

    def replace(self, ruleset: RuleSet) -> RuleSet:
        """Atomically replace the active rule set; returns the previous one"""
        with self._lock:
            previous, self._ruleset = self._ruleset, ruleset
        logger.info(f"Rule set replaced: {len(previous)} -> {len(ruleset)} rules (source={ruleset.source})")
        return previous

    def reload(self) -> RuleSet:
        """
        Re-read rules from the loader and swap them in.

        If the loader yields nothing, the current rule set is kept.
        """
        if not self.loader:
            return self.snapshot()
        ruleset = self.loader.load()
        if ruleset is None:
            logger.warning(f"Reload from {self.loader.describe()} returned no rules; keeping current set")
            return self.snapshot()
        self.replace(ruleset)
        return ruleset

    def get_rule(self, rule_id: str) -> Optional[ConstraintRule]:
        return self.snapshot().get_rule(rule_id)

    def get_enabled_rules(self) -> List[ConstraintRule]:
        return self.snapshot().get_enabled_rules()

    def count(self) -> int:
        return len(self.snapshot())

    def count_enabled(self) -> int:
        return len(self.get_enabled_rules())


__all__ = ["RuleRegistry"]
