# constraint_monitor/core/rules/defaults.py
"""
Built-in default rules

Used when no configuration file provides a ``constraints`` list.
"""

from __future__ import annotations

from .models import (
    AppliesTo,
    ConstraintGroup,
    ConstraintRule,
    RuleException,
    RuleSet,
    RuleSeverity,
)


DEFAULT_GROUPS = (
    ConstraintGroup("code_quality", "Code Quality", "Logging, declarations and error handling"),
    ConstraintGroup("security", "Security", "Secrets and dynamic code execution"),
    ConstraintGroup("architecture", "Architecture", "Parallel versions and naming drift"),
)


DEFAULT_RULES = (
    ConstraintRule(
        id="no-console-log",
        group="code_quality",
        pattern=r"console\.log",
        message="Use Logger.log() instead of console.log for better log management",
        severity=RuleSeverity.WARNING,
        suggestion="Replace with: Logger.log('info', 'category', message)",
    ),
    ConstraintRule(
        id="no-var-declarations",
        group="code_quality",
        pattern=r"\bvar\s+",
        message="Use 'let' or 'const' instead of 'var'",
        severity=RuleSeverity.WARNING,
        suggestion="Use 'let' for mutable variables, 'const' for immutable",
    ),
    ConstraintRule(
        id="proper-error-handling",
        group="code_quality",
        pattern=r"catch\s*\([^)]*\)\s*\{\s*\}",
        message="Empty catch blocks should be avoided",
        severity=RuleSeverity.ERROR,
        suggestion="Add proper error handling or at minimum log the error",
    ),
    ConstraintRule(
        id="proper-function-naming",
        group="code_quality",
        pattern=r"function\s+[a-z]",
        message="Function names should start with a verb (camelCase)",
        severity=RuleSeverity.INFO,
        suggestion="Use descriptive verb-based names: getUserData(), processResults()",
    ),
    ConstraintRule(
        id="no-hardcoded-secrets",
        group="security",
        pattern=r"(?i)(api[_-]?key|password|secret|token)\s*[=:]\s*['\"][^'\"]{8,}['\"]",
        message="Potential hardcoded secret detected",
        severity=RuleSeverity.CRITICAL,
        suggestion="Use environment variables or secure key management",
        exceptions=(
            RuleException("**/*.example", "Example files document the expected keys"),
            RuleException("**/.env.example", "Template environment file"),
        ),
        semantic_validation=True,
    ),
    ConstraintRule(
        id="no-eval-usage",
        group="security",
        pattern=r"\beval\s*\(",
        message="eval() usage detected - security risk",
        severity=RuleSeverity.CRITICAL,
        suggestion="Avoid eval() - use safer alternatives for dynamic code execution",
        semantic_validation=True,
    ),
    ConstraintRule(
        id="no-parallel-files",
        group="architecture",
        pattern=r"(?i)[-_.](v\d+|improved|enhanced|new|copy|backup|old)\.[a-z0-9]+$",
        message="Parallel file versions are not allowed - edit the original file",
        severity=RuleSeverity.CRITICAL,
        applies_to=AppliesTo.FILE_PATH,
        suggestion="Modify the existing file instead of creating a versioned copy",
    ),
    ConstraintRule(
        id="no-evolutionary-names",
        group="architecture",
        pattern=r"(?:class|function|def|const|let|var)\s+\w*(?:V\d+|Enhanced|Improved|Temp|Better|Fixed)\b",
        message="Evolutionary names (V2, Enhanced, Improved, ...) describe history, not purpose",
        severity=RuleSeverity.ERROR,
        suggestion="Rename to describe what the code does and replace the original",
        whitelist=("**/migrations/**",),
        semantic_validation=True,
    ),
    ConstraintRule(
        id="debug-not-speculate",
        group="architecture",
        pattern=r"(?i)\b(might be|probably|seems like|could be|maybe)\b.{0,40}\b(issue|bug|problem|cause|error)\b",
        message="Debug with evidence instead of speculating about causes",
        severity=RuleSeverity.ERROR,
        suggestion="Reproduce the failure, read the logs, and state what you verified",
        semantic_validation=True,
    ),
)


def default_ruleset() -> RuleSet:
    return RuleSet(rules=DEFAULT_RULES, groups=DEFAULT_GROUPS, source="builtin")


__all__ = [
    "DEFAULT_GROUPS",
    "DEFAULT_RULES",
    "default_ruleset",
]
