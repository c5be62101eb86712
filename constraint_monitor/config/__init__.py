# constraint_monitor/config/__init__.py
"""
constraint-monitor Configuration

Design principles:
1. Code has defaults; YAML is input parameters (YAML can be deleted)
2. YAML sections merge over defaults (partial overrides)
3. A YAML ``constraints`` list replaces the built-in rules entirely
"""

from .modules import (
    ModuleConfig,
    EnforcementConfig,
    SemanticConfig,
)

from .loader import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    MonitorConfig,
    find_config_file,
    load_config,
    load_rules,
)

from .validator import validate_config, ConfigIssue

__all__ = [
    "ModuleConfig",
    "EnforcementConfig",
    "SemanticConfig",
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "MonitorConfig",
    "find_config_file",
    "load_config",
    "load_rules",
    "validate_config",
    "ConfigIssue",
]
