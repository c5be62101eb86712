# constraint_monitor/config/modules/base.py
"""
Base Module Configuration
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


@dataclass(frozen=True)
class ModuleConfig:
    """
    Base configuration for all configuration sections.

    enabled: whether the section's component is wired in at startup
    """

    enabled: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        result = {}
        for key, value in self.__dict__.items():
            if key.startswith("_"):
                continue
            if isinstance(value, ModuleConfig):
                result[key] = value.to_dict()
            elif isinstance(value, Enum):
                result[key] = value.value
            elif isinstance(value, (tuple, list)):
                result[key] = [v.value if isinstance(v, Enum) else v for v in value]
            elif isinstance(value, (dict, str, int, float, bool, type(None))):
                result[key] = value
            else:
                result[key] = str(value)
        return result
