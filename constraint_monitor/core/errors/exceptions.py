# constraint_monitor/core/errors/exceptions.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from . import codes


def _safe_str(x: Any) -> str:
    try:
        return str(x)
    except Exception:
        return "<unstringifiable>"


def _normalize_error_code(code: Any) -> str:
    """
    Keep error_code stable and finite.
    Unknown codes are downgraded so reports keep a closed taxonomy.
    """
    c = _safe_str(code or codes.UNKNOWN).strip() or codes.UNKNOWN
    if c in codes.KNOWN_CODES:
        return c
    return codes.UNKNOWN


@dataclass
class ConstraintMonitorError(Exception):
    """
    The one exception type raised by constraint-monitor internals.

    Genuine faults only: a blocked action is a Decision value, never an error.
    """
    message: str
    error_code: str = codes.UNKNOWN
    phase: str = "unknown"              # config / load / evaluate / semantic / hook
    details: Dict[str, Any] = field(default_factory=dict)
    cause: Optional[BaseException] = None

    def __post_init__(self) -> None:
        self.error_code = _normalize_error_code(self.error_code)
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    @property
    def is_input_error(self) -> bool:
        return self.error_code in codes.INPUT_CODES

    @property
    def is_rule_error(self) -> bool:
        return self.error_code in codes.RULE_CODES

    @property
    def counts_as_provider_failure(self) -> bool:
        return self.error_code in codes.PROVIDER_CODES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "phase": self.phase,
            "details": self.details,
        }

    # -------- factories --------

    @classmethod
    def config(
        cls,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> "ConstraintMonitorError":
        return cls(
            message=message,
            error_code=codes.CONFIG_INVALID,
            phase="config",
            details=details or {},
            cause=cause,
        )

    @classmethod
    def rule(
        cls,
        message: str,
        *,
        error_code: str = codes.RULE_INVALID,
        rule_id: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> "ConstraintMonitorError":
        details: Dict[str, Any] = {}
        if rule_id:
            details["rule_id"] = rule_id
        return cls(
            message=message,
            error_code=error_code,
            phase="load",
            details=details,
            cause=cause,
        )

    @classmethod
    def payload(
        cls,
        message: str,
        *,
        error_code: str = codes.PAYLOAD_INVALID,
        cause: Optional[BaseException] = None,
    ) -> "ConstraintMonitorError":
        return cls(
            message=message,
            error_code=error_code,
            phase="hook",
            cause=cause,
        )

    @classmethod
    def provider(
        cls,
        message: str,
        *,
        provider: str,
        error_code: str = codes.PROVIDER_ERROR,
        model: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> "ConstraintMonitorError":
        details: Dict[str, Any] = {"provider": provider}
        if model:
            details["model"] = model
        return cls(
            message=message,
            error_code=error_code,
            phase="semantic",
            details=details,
            cause=cause,
        )
