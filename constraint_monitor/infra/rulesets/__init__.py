# constraint_monitor/infra/rulesets/__init__.py
"""
Rule Set Loaders

Infrastructure layer implementations for loading rule sets
"""

from .filesystem import FileSystemLoader, parse_rule, parse_ruleset
from .memory import DefaultsLoader, MemoryLoader

__all__ = [
    "FileSystemLoader",
    "MemoryLoader",
    "DefaultsLoader",
    "parse_rule",
    "parse_ruleset",
]
