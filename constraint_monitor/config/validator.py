# constraint_monitor/config/validator.py
"""
Configuration Validator

Validates configuration for illegal/misleading combinations.
Returns structured issues with level (warn/error), path, message, hint.
"""

from collections import Counter
from dataclasses import dataclass
from typing import List, Literal, Optional

from constraint_monitor.core.errors import ConstraintMonitorError
from constraint_monitor.core.rules import RuleSet, RuleSeverity, compile_pattern
from constraint_monitor.core.semantic.providers import PROVIDER_CLASSES
from constraint_monitor.core.semantic.routing import parse_provider_route
from constraint_monitor.core.semantic.types import ModelRoute

from .modules import EnforcementConfig, SemanticConfig


@dataclass(frozen=True)
class ConfigIssue:
    """
    Configuration validation issue

    Structured output for CLI/logging.
    """
    level: Literal["warn", "error"]
    path: str  # e.g., "enforcement.blocking_levels"
    message: str
    hint: str = ""

    def __str__(self) -> str:
        level_tag = "WARN" if self.level == "warn" else "ERROR"
        hint_str = f"\n   Hint: {self.hint}" if self.hint else ""
        return f"{level_tag} [{self.path}] {self.message}{hint_str}"


def validate_config(
    enforcement: EnforcementConfig,
    semantic: SemanticConfig,
    ruleset: Optional[RuleSet] = None,
) -> List[ConfigIssue]:
    """
    Validate configuration for illegal/misleading combinations.

    Returns:
        List of issues (warn/error level)
    """
    issues = []

    # Enforcement: non-blocking severities listed as blocking
    for level in enforcement.blocking_levels:
        try:
            severity = RuleSeverity(level)
        except ValueError:
            issues.append(ConfigIssue(
                level="error",
                path="enforcement.blocking_levels",
                message=f"Unknown severity '{level}'",
                hint="Use critical and/or error",
            ))
            continue
        if not severity.can_block:
            issues.append(ConfigIssue(
                level="warn",
                path="enforcement.blocking_levels",
                message=f"'{level}' can never block; it is ignored",
                hint="Only critical and error violations block actions",
            ))

    if enforcement.enabled and not any(
        level in ("critical", "error") for level in enforcement.blocking_levels
    ):
        issues.append(ConfigIssue(
            level="warn",
            path="enforcement.blocking_levels",
            message="No blocking severities configured: every action will be allowed",
        ))

    if not enforcement.fail_open:
        issues.append(ConfigIssue(
            level="warn",
            path="enforcement.fail_open",
            message="fail_open=false: malformed hook input or a monitor fault blocks the action",
            hint="Keep fail_open=true unless a monitor outage must stop the agent",
        ))

    if enforcement.deadline_ms is not None and semantic.enabled and enforcement.deadline_ms < semantic.timeout_ms:
        issues.append(ConfigIssue(
            level="warn",
            path="enforcement.deadline_ms",
            message=(
                f"deadline_ms={enforcement.deadline_ms} is shorter than "
                f"semantic.timeout_ms={semantic.timeout_ms}"
            ),
            hint="Semantic checks will be cut off by the deadline and trust the pattern",
        ))

    # Semantic: routing to providers that do not exist
    for key, spec in (semantic.model_routing or {}).items():
        try:
            route = ModelRoute.parse(spec)
        except (ValueError, KeyError) as e:
            issues.append(ConfigIssue(
                level="error",
                path=f"semantic.model_routing.{key}",
                message=str(e),
            ))
            continue
        if route.provider not in PROVIDER_CLASSES:
            issues.append(ConfigIssue(
                level="error",
                path=f"semantic.model_routing.{key}",
                message=f"Unknown provider '{route.provider}'",
                hint=f"Known providers: {', '.join(sorted(PROVIDER_CLASSES))}",
            ))

    if semantic.fallback_provider:
        try:
            parse_provider_route(semantic.fallback_provider)
        except ValueError as e:
            issues.append(ConfigIssue(
                level="error",
                path="semantic.fallback_provider",
                message=str(e),
                hint=f"Known providers: {', '.join(sorted(PROVIDER_CLASSES))}",
            ))

    if semantic.timeout_ms <= 0:
        issues.append(ConfigIssue(
            level="error",
            path="semantic.timeout_ms",
            message="timeout_ms must be positive",
        ))

    if ruleset is None:
        return issues

    # Rules
    counts = Counter(rule.id for rule in ruleset.rules)
    for rule_id, count in counts.items():
        if count > 1:
            issues.append(ConfigIssue(
                level="error",
                path=f"constraints.{rule_id}",
                message=f"Duplicate constraint id (defined {count} times)",
            ))

    for rule in ruleset.rules:
        try:
            compile_pattern(rule.pattern, rule.flags)
        except ConstraintMonitorError as e:
            issues.append(ConfigIssue(
                level="error",
                path=f"constraints.{rule.id}.pattern",
                message=e.message,
            ))

        if rule.semantic_validation and rule.enabled and not semantic.enabled:
            issues.append(ConfigIssue(
                level="warn",
                path=f"constraints.{rule.id}.semantic_validation",
                message="semantic_validation=true has no effect when semantic.enabled=false",
                hint="Set semantic.enabled=true to confirm matches with a model",
            ))

    return issues


__all__ = [
    "ConfigIssue",
    "validate_config",
]
