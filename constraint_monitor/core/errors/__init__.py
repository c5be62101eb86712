# constraint_monitor/core/errors/__init__.py
"""
Core error types for constraint-monitor.

This package defines the components responsible for:
- Representing errors
- Categorizing errors (input / rule / provider)

No side effects on import.
"""

from . import codes
from .exceptions import ConstraintMonitorError

__all__ = [
    "codes",
    "ConstraintMonitorError",
]
