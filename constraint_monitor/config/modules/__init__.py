# constraint_monitor/config/modules/__init__.py
"""
Module Configuration

YAML is input parameters, code has defaults (YAML can be deleted).
"""

from .base import ModuleConfig
from .enforcement import EnforcementConfig
from .semantic import SemanticConfig

__all__ = [
    "ModuleConfig",
    "EnforcementConfig",
    "SemanticConfig",
]
