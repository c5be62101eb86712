# constraint_monitor/config/modules/enforcement.py
"""
Enforcement Configuration

How decisions are turned into hook outcomes.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .base import ModuleConfig


@dataclass(frozen=True)
class EnforcementConfig(ModuleConfig):
    """
    enabled: If False, every action is allowed without evaluation
    blocking_levels: Severities that block (only critical/error are honoured)
    fail_open: Allow the action when the monitor itself fails
    deadline_ms: Overall evaluation deadline per action (None = no deadline)
    """

    enabled: bool = True
    blocking_levels: Tuple[str, ...] = ("critical", "error")
    fail_open: bool = True
    deadline_ms: Optional[float] = 2000.0

    @property
    def deadline_s(self) -> Optional[float]:
        return self.deadline_ms / 1000.0 if self.deadline_ms else None

    @classmethod
    def default(cls) -> "EnforcementConfig":
        return cls()
