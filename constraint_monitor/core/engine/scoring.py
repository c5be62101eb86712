# constraint_monitor/core/engine/scoring.py
"""
Compliance score and risk level
"""

from __future__ import annotations

import math
from typing import Sequence

from ..rules.models import RuleSeverity
from .types import RiskLevel, Violation


def round_half_up(value: float, digits: int = 1) -> float:
    """round() is banker's rounding; scores round .x5 upwards"""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def compliance_score(total_rules: int, violated_rules: int) -> float:
    """10 x share of enabled rules not violated, one decimal; 10 when there are no rules"""
    if total_rules <= 0:
        return 10.0
    violated = min(max(violated_rules, 0), total_rules)
    return round_half_up(10.0 * (total_rules - violated) / total_rules)


def assess_risk(violations: Sequence[Violation]) -> RiskLevel:
    if any(v.severity == RuleSeverity.CRITICAL for v in violations):
        return RiskLevel.CRITICAL
    if sum(1 for v in violations if v.severity == RuleSeverity.ERROR) > 2:
        return RiskLevel.HIGH
    if len(violations) > 5:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


__all__ = [
    "round_half_up",
    "compliance_score",
    "assess_risk",
]
