# constraint_monitor/core/rules/loader.py
"""
Rule Loader Interface

Defines the interface for loading rule sets from various sources
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from .models import RuleSet


class RuleSetLoader(ABC):
    """
    Abstract interface for loading rule sets

    Implementations:
    - FileSystemLoader: Load from a YAML configuration file
    - MemoryLoader: Load from memory (for testing)
    - DefaultsLoader: Built-in rules used when no file is found
    """

    @abstractmethod
    def load(self) -> Optional[RuleSet]:
        """
        Load the rule set

        Returns:
            RuleSet if the source has one, None otherwise
        """
        pass

    def describe(self) -> str:
        """Human-readable source description (for logs)"""
        return type(self).__name__


class CompositeLoader(RuleSetLoader):
    """
    Composite loader that tries multiple loaders in order

    Example:
        loader = CompositeLoader([
            FileSystemLoader("./.constraint-monitor.yaml"),
            FileSystemLoader("~/coding/.constraint-monitor.yaml"),
            DefaultsLoader(),
        ])
    """

    def __init__(self, loaders: List[RuleSetLoader]):
        self.loaders = loaders

    def load(self) -> Optional[RuleSet]:
        """Load rule set from first loader that has one"""
        for loader in self.loaders:
            ruleset = loader.load()
            if ruleset is not None:
                return ruleset
        return None

    def describe(self) -> str:
        return " -> ".join(loader.describe() for loader in self.loaders)


__all__ = [
    "RuleSetLoader",
    "CompositeLoader",
]
