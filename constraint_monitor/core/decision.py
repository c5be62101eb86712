# constraint_monitor/core/decision.py
"""
Decision: the outcome of evaluating one action.

A blocked action is an ordinary return value. Only the hook adapter turns a
Decision into a host-specific signal (exit code 2 and a stderr message).

Outcomes:
- ALLOW: no violations
- ALLOW_WITH_WARNINGS: violations found, none at a blocking severity
- BLOCK: at least one violation at a blocking severity
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .engine.types import EvaluationResult, RiskLevel, Violation
from .rules.models import RuleSeverity


DEFAULT_BLOCKING_LEVELS = (RuleSeverity.CRITICAL, RuleSeverity.ERROR)


class DecisionOutcome(str, Enum):
    ALLOW = "allow"
    ALLOW_WITH_WARNINGS = "allow_with_warnings"
    BLOCK = "block"


class Decision(BaseModel):
    """
    Allow / allow-with-warnings / block, with the diagnostics behind it.

    ``violations`` holds every violation; ``blocking_violations`` the subset
    whose severity is a configured blocking level.
    """
    model_config = ConfigDict(frozen=True)

    outcome: DecisionOutcome = Field(description="allow | allow_with_warnings | block")
    violations: List[Violation] = Field(default_factory=list)
    blocking_violations: List[Violation] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    compliance: float = Field(default=10.0, ge=0.0, le=10.0)
    risk: RiskLevel = Field(default=RiskLevel.LOW)

    @property
    def is_blocking(self) -> bool:
        return self.outcome == DecisionOutcome.BLOCK

    @property
    def is_warning(self) -> bool:
        return self.outcome == DecisionOutcome.ALLOW_WITH_WARNINGS

    @property
    def is_allow(self) -> bool:
        return self.outcome == DecisionOutcome.ALLOW

    @classmethod
    def allow(cls, compliance: float = 10.0, risk: RiskLevel = RiskLevel.LOW) -> "Decision":
        return cls(outcome=DecisionOutcome.ALLOW, compliance=compliance, risk=risk)

    @classmethod
    def allow_with_warnings(
        cls,
        violations: Sequence[Violation],
        suggestions: Optional[Sequence[str]] = None,
        compliance: float = 10.0,
        risk: RiskLevel = RiskLevel.LOW,
    ) -> "Decision":
        return cls(
            outcome=DecisionOutcome.ALLOW_WITH_WARNINGS,
            violations=list(violations),
            suggestions=list(suggestions or []),
            compliance=compliance,
            risk=risk,
        )

    @classmethod
    def block(
        cls,
        violations: Sequence[Violation],
        blocking_violations: Sequence[Violation],
        suggestions: Optional[Sequence[str]] = None,
        compliance: float = 10.0,
        risk: RiskLevel = RiskLevel.LOW,
    ) -> "Decision":
        return cls(
            outcome=DecisionOutcome.BLOCK,
            violations=list(violations),
            blocking_violations=list(blocking_violations),
            suggestions=list(suggestions or []),
            compliance=compliance,
            risk=risk,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "violations": [v.to_dict() for v in self.violations],
            "blocking_violations": [v.constraint_id for v in self.blocking_violations],
            "suggestions": list(self.suggestions),
            "compliance": self.compliance,
            "risk": self.risk.value,
        }


def normalize_blocking_levels(levels: Optional[Iterable[Any]]) -> frozenset:
    """
    Severities that may block.

    Warning and info can never block; unknown names are ignored.
    """
    if levels is None:
        return frozenset(DEFAULT_BLOCKING_LEVELS)
    result = set()
    for level in levels:
        try:
            severity = RuleSeverity(str(getattr(level, "value", level)).lower())
        except ValueError:
            continue
        if severity.can_block:
            result.add(severity)
    return frozenset(result)


def decide(result: EvaluationResult, blocking_levels: Optional[Iterable[Any]] = None) -> Decision:
    """Map an evaluation result onto a Decision"""
    levels = normalize_blocking_levels(blocking_levels)
    if not result.violations:
        return Decision.allow(compliance=result.compliance, risk=result.risk)

    blocking = [v for v in result.violations if v.severity in levels]
    if blocking:
        return Decision.block(
            result.violations,
            blocking,
            suggestions=result.suggestions,
            compliance=result.compliance,
            risk=result.risk,
        )
    return Decision.allow_with_warnings(
        result.violations,
        suggestions=result.suggestions,
        compliance=result.compliance,
        risk=result.risk,
    )


__all__ = [
    "DEFAULT_BLOCKING_LEVELS",
    "DecisionOutcome",
    "Decision",
    "normalize_blocking_levels",
    "decide",
]
