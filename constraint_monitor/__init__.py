# constraint_monitor/__init__.py
"""
constraint-monitor - Real-time policy enforcement for coding-agent actions

Intercepts prompts and tool calls proposed by a coding agent, evaluates them
against pattern rules (optionally confirmed by a model), and allows, warns or
blocks before the action runs.

Hook usage (agent settings):
    constraint-monitor hook pre-tool     # PreToolUse
    constraint-monitor hook prompt       # UserPromptSubmit

Library usage:
    >>> import asyncio
    >>> from constraint_monitor import ActionDescriptor, load_config
    >>> config = load_config()
    >>> engine = config.build_engine()
    >>> result = asyncio.run(engine.evaluate(ActionDescriptor.prompt("var x = 1")))
    >>> engine.decide(result).outcome
    <DecisionOutcome.ALLOW_WITH_WARNINGS: 'allow_with_warnings'>
"""

__version__ = "0.1.0"

from .core import (
    ActionDescriptor,
    ActionKind,
    ConstraintEngine,
    ConstraintMonitorError,
    Decision,
    DecisionOutcome,
    EvaluationResult,
    SemanticResult,
    SemanticValidator,
    Violation,
)
from .core.rules import ConstraintRule, RuleRegistry, RuleSet, RuleSeverity, default_ruleset
from .config import MonitorConfig, load_config, load_rules
from .hooks import HookAdapter, HookOutcome

__all__ = [
    "__version__",
    "ActionDescriptor",
    "ActionKind",
    "ConstraintEngine",
    "ConstraintMonitorError",
    "Decision",
    "DecisionOutcome",
    "EvaluationResult",
    "SemanticResult",
    "SemanticValidator",
    "Violation",
    "ConstraintRule",
    "RuleRegistry",
    "RuleSet",
    "RuleSeverity",
    "default_ruleset",
    "MonitorConfig",
    "load_config",
    "load_rules",
    "HookAdapter",
    "HookOutcome",
]
