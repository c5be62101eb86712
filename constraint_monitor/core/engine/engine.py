# constraint_monitor/core/engine/engine.py
"""
Constraint evaluation engine

Runs every enabled rule of a rule-set snapshot against one action, one
asyncio task per rule, and aggregates the outcome.

Per rule:
1. Exception / whitelist glob matches the action's file path -> skipped
2. Rule explicitly overridden for this action -> skipped
3. Pattern matched against the file path or the text content (per applies_to)
4. Match on a semantic rule -> SemanticValidator confirms or rejects it

Only semantic tasks ever suspend. When the deadline passes they are cancelled
and their regex matches are trusted.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, Iterable, List, Optional, Union

from ..decision import Decision, decide
from ..rules import globs
from ..rules.models import AppliesTo, ConstraintRule, RuleSet
from ..rules.patterns import RegexMatch, compile_pattern, find_all
from ..rules.registry import RuleRegistry
from ..semantic.types import SemanticResult, ValidationContext
from ..semantic.validator import SemanticValidator
from .scoring import assess_risk, compliance_score
from .types import ActionDescriptor, EvaluationResult, Violation, collect_suggestions

logger = logging.getLogger(__name__)


class ConstraintEngine:
    """
    Usage:
        engine = ConstraintEngine(RuleRegistry(default_ruleset()), validator=SemanticValidator())
        result = await engine.evaluate(ActionDescriptor.prompt("..."))
        decision = engine.decide(result)
    """

    def __init__(
        self,
        rules: Union[RuleRegistry, RuleSet, None] = None,
        validator: Optional[SemanticValidator] = None,
        *,
        blocking_levels: Optional[Iterable[Any]] = None,
        deadline_s: Optional[float] = None,
    ):
        """
        Args:
            rules: Registry (reloadable) or a fixed RuleSet
            validator: Shared semantic validator; None means regex-only
            blocking_levels: Default severities that block in decide()
            deadline_s: Default overall deadline for evaluate()
        """
        if isinstance(rules, RuleRegistry):
            self.registry = rules
        else:
            self.registry = RuleRegistry(rules)
        self.validator = validator
        self.blocking_levels = blocking_levels
        self.deadline_s = deadline_s

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    async def evaluate(self, action: ActionDescriptor, deadline_s: Optional[float] = None) -> EvaluationResult:
        started = time.perf_counter()
        rules = self.registry.snapshot().get_enabled_rules()
        timeout = deadline_s if deadline_s is not None else self.deadline_s

        tasks: Dict[asyncio.Task, ConstraintRule] = {
            asyncio.ensure_future(self._evaluate_rule(rule, action)): rule for rule in rules
        }
        try:
            if tasks:
                _, pending = await asyncio.wait(tasks, timeout=timeout)
                if pending:
                    logger.warning(
                        f"Evaluation deadline of {timeout * 1000:.0f}ms reached; "
                        f"cancelling {len(pending)} pending rule(s)"
                    )
                    for task in pending:
                        task.cancel()
                    await asyncio.gather(*pending, return_exceptions=True)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        violations: List[Violation] = []
        skipped: List[str] = []
        for task, rule in tasks.items():
            if task.cancelled():
                violation = self._trust_cancelled(rule, action, skipped)
            elif task.exception() is not None:
                exc = task.exception()
                logger.warning(f"Rule {rule.id} skipped: {exc}")
                skipped.append(rule.id)
                continue
            else:
                violation = task.result()
            if violation is not None:
                violations.append(violation)

        total = len(rules)
        violated = len({v.constraint_id for v in violations})
        result = EvaluationResult(
            violations=violations,
            suggestions=collect_suggestions(violations),
            compliance=compliance_score(total, violated),
            risk=assess_risk(violations),
            total_rules=total,
            violated_rules=violated,
            skipped_rules=skipped,
            duration_ms=(time.perf_counter() - started) * 1000,
        )
        logger.debug(
            f"Evaluated {total} rules in {result.duration_ms:.1f}ms: "
            f"{violated} violated, {len(skipped)} skipped"
        )
        return result

    def decide(self, result: EvaluationResult, blocking_levels: Optional[Iterable[Any]] = None) -> Decision:
        levels = blocking_levels if blocking_levels is not None else self.blocking_levels
        return decide(result, levels)

    # ------------------------------------------------------------------
    # Per-rule steps
    # ------------------------------------------------------------------

    def _match(self, rule: ConstraintRule, action: ActionDescriptor) -> Optional[RegexMatch]:
        """Suppression, override and regex steps; None when the rule is inert"""
        if action.file_path and rule.suppression_globs:
            glob = globs.first_match(action.file_path, rule.suppression_globs)
            if glob is not None:
                logger.debug(f"Rule {rule.id} suppressed for {action.file_path} by {glob}")
                return None

        if rule.id in action.overrides:
            logger.info(f"Rule {rule.id} overridden for this action")
            return None

        target = action.file_path if rule.applies_to == AppliesTo.FILE_PATH else action.text_content
        if not target:
            return None

        match = find_all(compile_pattern(rule.pattern, rule.flags), target)
        return match or None

    async def _evaluate_rule(self, rule: ConstraintRule, action: ActionDescriptor) -> Optional[Violation]:
        match = self._match(rule, action)
        if match is None:
            return None

        if not rule.semantic_validation or self.validator is None:
            return self._violation(rule, action, match)

        verdict = await self.validator.validate(
            rule.id,
            match,
            ValidationContext(
                content=action.text_content or "",
                file_path=action.file_path,
                rule_message=rule.message,
            ),
        )
        if not verdict.is_violation:
            logger.info(
                f"Rule {rule.id} match rejected by semantic check "
                f"(confidence {verdict.confidence:.2f}): {verdict.reasoning}"
            )
            return None
        return self._violation(rule, action, match, verdict)

    def _trust_cancelled(
        self,
        rule: ConstraintRule,
        action: ActionDescriptor,
        skipped: List[str],
    ) -> Optional[Violation]:
        """A rule cut off by the deadline: its regex match stands"""
        try:
            match = self._match(rule, action)
        except Exception as e:
            logger.warning(f"Rule {rule.id} skipped: {e}")
            skipped.append(rule.id)
            return None
        if match is None:
            return None
        return self._violation(rule, action, match, SemanticResult.trust_pattern())

    @staticmethod
    def _violation(
        rule: ConstraintRule,
        action: ActionDescriptor,
        match: RegexMatch,
        verdict: Optional[SemanticResult] = None,
    ) -> Violation:
        return Violation(
            constraint_id=rule.id,
            message=rule.message,
            severity=rule.severity,
            match_count=match.count,
            pattern=rule.pattern,
            file_path=action.file_path,
            suggestion=rule.suggestion,
            semantic_confidence=verdict.confidence if verdict else None,
            semantic_reasoning=verdict.reasoning if verdict else None,
        )


__all__ = ["ConstraintEngine"]
