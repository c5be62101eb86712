# tests/engine/test_scoring.py
"""
Compliance score, risk level and the decision mapping
"""

import pytest

from constraint_monitor.core.decision import DecisionOutcome, decide, normalize_blocking_levels
from constraint_monitor.core.engine import EvaluationResult, RiskLevel, Violation
from constraint_monitor.core.engine.scoring import assess_risk, compliance_score, round_half_up
from constraint_monitor.core.rules import RuleSeverity


def _violation(severity, constraint_id="r"):
    return Violation(
        constraint_id=constraint_id,
        message="m",
        severity=RuleSeverity(severity),
        match_count=1,
        pattern="p",
    )


class TestComplianceScore:
    @pytest.mark.parametrize("total,violated,expected", [
        (3, 1, 6.7),
        (8, 7, 1.3),
        (8, 0, 10.0),
        (8, 8, 0.0),
        (0, 0, 10.0),
    ])
    def test_score(self, total, violated, expected):
        assert compliance_score(total, violated) == expected

    @pytest.mark.parametrize("total", [1, 3, 7, 9, 12])
    def test_never_increases_as_violations_grow(self, total):
        scores = [compliance_score(total, violated) for violated in range(total + 1)]
        assert scores[0] == 10.0
        assert scores[-1] == 0.0
        assert all(later <= earlier for earlier, later in zip(scores, scores[1:]))

    def test_rounds_half_up(self):
        assert round_half_up(0.25) == 0.3
        assert round_half_up(8.75) == 8.8


class TestRisk:
    def test_any_critical(self):
        assert assess_risk([_violation("info"), _violation("critical")]) == RiskLevel.CRITICAL

    def test_more_than_two_errors(self):
        assert assess_risk([_violation("error")] * 2) == RiskLevel.LOW
        assert assess_risk([_violation("error")] * 3) == RiskLevel.HIGH

    def test_more_than_five_violations(self):
        assert assess_risk([_violation("warning")] * 5) == RiskLevel.LOW
        assert assess_risk([_violation("warning")] * 6) == RiskLevel.MEDIUM

    def test_none(self):
        assert assess_risk([]) == RiskLevel.LOW


class TestDecide:
    def test_no_violations_allows(self):
        decision = decide(EvaluationResult())
        assert decision.outcome == DecisionOutcome.ALLOW
        assert decision.is_allow

    def test_warnings_only(self):
        result = EvaluationResult(violations=[_violation("warning"), _violation("info", "i")])
        decision = decide(result)
        assert decision.is_warning
        assert decision.blocking_violations == []
        assert len(decision.violations) == 2

    def test_error_blocks_by_default(self):
        error = _violation("error", "e")
        decision = decide(EvaluationResult(violations=[_violation("warning"), error]))
        assert decision.is_blocking
        assert {v.constraint_id for v in decision.blocking_violations} == {"e"}

    def test_custom_blocking_levels(self):
        result = EvaluationResult(violations=[_violation("error")])
        assert decide(result, ["critical"]).outcome == DecisionOutcome.ALLOW_WITH_WARNINGS
        assert decide(result, []).outcome == DecisionOutcome.ALLOW_WITH_WARNINGS

    def test_warning_can_never_block(self):
        assert normalize_blocking_levels(["warning", "INFO", "Critical", "bogus"]) == frozenset(
            {RuleSeverity.CRITICAL}
        )
        result = EvaluationResult(violations=[_violation("warning")])
        assert decide(result, ["warning"]).outcome == DecisionOutcome.ALLOW_WITH_WARNINGS

    def test_to_dict(self):
        result = EvaluationResult(violations=[_violation("critical", "c")], compliance=5.0, risk=RiskLevel.CRITICAL)
        data = decide(result).to_dict()
        assert data["outcome"] == "block"
        assert data["blocking_violations"] == ["c"]
        assert data["risk"] == "critical"
