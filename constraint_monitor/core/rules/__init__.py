# constraint_monitor/core/rules/__init__.py
"""
Constraint Rule System

Rule models, loading, pattern compilation and path/glob matching
"""

from .models import (
    RuleSeverity,
    AppliesTo,
    RuleException,
    ConstraintRule,
    ConstraintGroup,
    RuleSet,
)

from .loader import (
    RuleSetLoader,
    CompositeLoader,
)

from .registry import (
    RuleRegistry,
)

from .patterns import (
    RegexMatch,
    compile_pattern,
    extract_inline_flags,
    find_all,
)

from .defaults import (
    DEFAULT_RULES,
    default_ruleset,
)

from . import globs

__all__ = [
    "RuleSeverity",
    "AppliesTo",
    "RuleException",
    "ConstraintRule",
    "ConstraintGroup",
    "RuleSet",
    "RuleSetLoader",
    "CompositeLoader",
    "RuleRegistry",
    "RegexMatch",
    "compile_pattern",
    "extract_inline_flags",
    "find_all",
    "DEFAULT_RULES",
    "default_ruleset",
    "globs",
]
