# constraint_monitor/core/__init__.py
"""
Core: rules, evaluation engine, semantic validation and decisions.
"""

# engine before decision: decision imports engine.types
from .engine import (
    ActionDescriptor,
    ActionKind,
    ConstraintEngine,
    EvaluationResult,
    RiskLevel,
    Violation,
)
from .decision import Decision, DecisionOutcome, decide
from .errors import ConstraintMonitorError
from .semantic import SemanticResult, SemanticValidator

__all__ = [
    "ActionDescriptor",
    "ActionKind",
    "ConstraintEngine",
    "EvaluationResult",
    "RiskLevel",
    "Violation",
    "Decision",
    "DecisionOutcome",
    "decide",
    "ConstraintMonitorError",
    "SemanticResult",
    "SemanticValidator",
]
