# constraint_monitor/core/engine/types.py
"""
Evaluation engine types
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from ..rules.models import RuleSeverity


class ActionKind(str, Enum):
    PROMPT = "prompt"
    TOOL_CALL = "tool_call"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ActionDescriptor:
    """
    One proposed agent action, normalised from a hook payload

    Content rules match ``text_content``; file-path rules match ``file_path``.
    Either may be absent, in which case rules targeting it are inert.
    """
    kind: ActionKind
    text_content: Optional[str] = None
    file_path: Optional[str] = None
    tool_name: Optional[str] = None
    event_name: Optional[str] = None
    session_id: Optional[str] = None
    overrides: FrozenSet[str] = frozenset()

    @classmethod
    def prompt(cls, text: str, **kwargs: Any) -> "ActionDescriptor":
        return cls(kind=ActionKind.PROMPT, text_content=text, **kwargs)

    @classmethod
    def tool_call(
        cls,
        tool_name: Optional[str] = None,
        text_content: Optional[str] = None,
        file_path: Optional[str] = None,
        **kwargs: Any,
    ) -> "ActionDescriptor":
        return cls(
            kind=ActionKind.TOOL_CALL,
            tool_name=tool_name,
            text_content=text_content,
            file_path=file_path,
            **kwargs,
        )


@dataclass(frozen=True)
class Violation:
    """A rule that matched and was not suppressed or semantically rejected"""
    constraint_id: str
    message: str
    severity: RuleSeverity
    match_count: int
    pattern: str
    file_path: Optional[str] = None
    detected_at: str = field(default_factory=utc_now_iso)
    suggestion: Optional[str] = None
    semantic_confidence: Optional[float] = None
    semantic_reasoning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "constraint_id": self.constraint_id,
            "message": self.message,
            "severity": self.severity.value,
            "matches": self.match_count,
            "pattern": self.pattern,
            "file_path": self.file_path,
            "detected_at": self.detected_at,
        }
        if self.suggestion:
            data["suggestion"] = self.suggestion
        if self.semantic_confidence is not None:
            data["semantic_confidence"] = self.semantic_confidence
            data["semantic_reasoning"] = self.semantic_reasoning
        return data


def collect_suggestions(violations: Iterable[Violation]) -> List[str]:
    """Distinct suggestions in violation order"""
    seen: List[str] = []
    for v in violations:
        if v.suggestion and v.suggestion not in seen:
            seen.append(v.suggestion)
    return seen


@dataclass
class EvaluationResult:
    violations: List[Violation] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    compliance: float = 10.0
    risk: RiskLevel = RiskLevel.LOW
    total_rules: int = 0
    violated_rules: int = 0
    skipped_rules: List[str] = field(default_factory=list)
    duration_ms: float = 0.0

    def get_violation(self, constraint_id: str) -> Optional[Violation]:
        for v in self.violations:
            if v.constraint_id == constraint_id:
                return v
        return None

    def by_constraint(self) -> Dict[str, Violation]:
        return {v.constraint_id: v for v in self.violations}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "violations": [v.to_dict() for v in self.violations],
            "suggestions": list(self.suggestions),
            "compliance": self.compliance,
            "risk": self.risk.value,
            "total_rules": self.total_rules,
            "violated_rules": self.violated_rules,
            "skipped_rules": list(self.skipped_rules),
            "duration_ms": round(self.duration_ms, 2),
        }


__all__ = [
    "ActionKind",
    "RiskLevel",
    "ActionDescriptor",
    "Violation",
    "EvaluationResult",
    "collect_suggestions",
    "utc_now_iso",
]
