# constraint_monitor/core/rules/models.py
"""
Constraint Rule Models

Immutable rule definitions shared by the loader, registry and evaluation engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class RuleSeverity(str, Enum):
    """Rule severity levels, ordered by decreasing blocking priority"""
    CRITICAL = "critical"  # Blocks by default
    ERROR = "error"        # Blocks by default
    WARNING = "warning"    # Reported, never blocks
    INFO = "info"          # Reported, never blocks

    @property
    def rank(self) -> int:
        """Lower rank = higher priority"""
        return _SEVERITY_RANK[self]

    @property
    def can_block(self) -> bool:
        return self in (RuleSeverity.CRITICAL, RuleSeverity.ERROR)


_SEVERITY_RANK = {
    RuleSeverity.CRITICAL: 0,
    RuleSeverity.ERROR: 1,
    RuleSeverity.WARNING: 2,
    RuleSeverity.INFO: 3,
}


class AppliesTo(str, Enum):
    """Which part of an action a rule pattern is matched against"""
    CONTENT = "content"
    FILE_PATH = "file_path"


@dataclass(frozen=True)
class RuleException:
    """Glob on the action's file path that suppresses a rule"""
    path: str
    reason: str = ""


@dataclass(frozen=True)
class ConstraintRule:
    """
    A named pattern-based policy check

    Rules are loaded once per process (or per reload) and never mutated;
    a reload replaces the whole RuleSet.
    """
    # Core identification
    id: str
    pattern: str
    severity: RuleSeverity = RuleSeverity.WARNING
    message: str = ""
    group: str = "general"

    # Matching
    applies_to: AppliesTo = AppliesTo.CONTENT
    flags: str = ""  # explicit regex flag letters: i, m, s
    enabled: bool = True

    # Suppression
    exceptions: Tuple[RuleException, ...] = ()
    whitelist: Tuple[str, ...] = ()

    # Remediation
    suggestion: Optional[str] = None

    # Second-tier confirmation
    semantic_validation: bool = False

    def __post_init__(self):
        if not self.message:
            object.__setattr__(self, "message", f"Constraint violation: {self.id}")

    @property
    def suppression_globs(self) -> Tuple[str, ...]:
        """Exception paths followed by whitelist globs, in declaration order"""
        return tuple(e.path for e in self.exceptions) + self.whitelist

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict in configuration-file shape"""
        data: Dict[str, Any] = {
            "id": self.id,
            "group": self.group,
            "pattern": self.pattern,
            "message": self.message,
            "severity": self.severity.value,
            "applies_to": self.applies_to.value,
            "enabled": self.enabled,
            "semantic_validation": self.semantic_validation,
        }
        if self.flags:
            data["flags"] = self.flags
        if self.suggestion:
            data["suggestion"] = self.suggestion
        if self.exceptions:
            data["exceptions"] = [{"path": e.path, "reason": e.reason} for e in self.exceptions]
        if self.whitelist:
            data["whitelist"] = list(self.whitelist)
        return data


@dataclass(frozen=True)
class ConstraintGroup:
    """Display metadata for a group of rules (used by dashboards, not the engine)"""
    id: str
    name: str = ""
    description: str = ""


@dataclass(frozen=True)
class RuleSet:
    """
    Ordered, immutable collection of rules

    Represents one loaded configuration (YAML file or built-in defaults).
    """
    rules: Tuple[ConstraintRule, ...] = ()
    groups: Tuple[ConstraintGroup, ...] = ()
    source: str = "builtin"
    metadata: Dict[str, Any] = field(default_factory=dict)

    def get_rule(self, rule_id: str) -> Optional[ConstraintRule]:
        """Get rule by ID"""
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        return None

    def get_enabled_rules(self) -> List[ConstraintRule]:
        """Get all enabled rules"""
        return [r for r in self.rules if r.enabled]

    def get_rules_by_group(self, group: str) -> List[ConstraintRule]:
        return [r for r in self.rules if r.group == group]

    def __len__(self) -> int:
        return len(self.rules)


__all__ = [
    "RuleSeverity",
    "AppliesTo",
    "RuleException",
    "ConstraintRule",
    "ConstraintGroup",
    "RuleSet",
]
