# constraint_monitor/core/engine/__init__.py
"""
Evaluation engine

Concurrent multi-rule matching, scoring and decisions.
"""

from .types import (
    ActionKind,
    RiskLevel,
    ActionDescriptor,
    Violation,
    EvaluationResult,
)
from .scoring import assess_risk, compliance_score
from .engine import ConstraintEngine

__all__ = [
    "ActionKind",
    "RiskLevel",
    "ActionDescriptor",
    "Violation",
    "EvaluationResult",
    "assess_risk",
    "compliance_score",
    "ConstraintEngine",
]
