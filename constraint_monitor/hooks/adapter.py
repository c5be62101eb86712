# constraint_monitor/hooks/adapter.py
"""
Hook adapter

Maps one hook invocation onto one engine evaluation and back onto the
host's termination protocol:

- Block               -> exit 2, block message on stderr
- Allow with warnings -> exit 0, diagnostics on stderr
- Allow               -> exit 0, no output

Malformed payloads and monitor faults allow the action (fail open) unless
enforcement.fail_open is false.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from constraint_monitor.config.modules import EnforcementConfig
from constraint_monitor.core.decision import Decision
from constraint_monitor.core.engine import ActionKind, ConstraintEngine
from constraint_monitor.core.errors import ConstraintMonitorError

from .payload import parse_payload
from .render import render_block_message, render_warnings

logger = logging.getLogger(__name__)

EXIT_ALLOW = 0
EXIT_BLOCK = 2


@dataclass(frozen=True)
class HookOutcome:
    exit_code: int
    stderr_message: Optional[str] = None
    decision: Optional[Decision] = None

    @property
    def blocked(self) -> bool:
        return self.exit_code == EXIT_BLOCK


class HookAdapter:
    """
    Usage:
        adapter = HookAdapter(engine, config.enforcement)
        outcome = adapter.handle_sync(sys.stdin.read())
        sys.exit(outcome.exit_code)
    """

    def __init__(self, engine: ConstraintEngine, enforcement: Optional[EnforcementConfig] = None):
        self.engine = engine
        self.enforcement = enforcement or EnforcementConfig.default()

    async def handle(
        self,
        raw: Union[str, bytes, Mapping[str, Any]],
        kind_hint: Optional[ActionKind] = None,
    ) -> HookOutcome:
        if not self.enforcement.enabled:
            logger.debug("Enforcement disabled; allowing action")
            return HookOutcome(EXIT_ALLOW)

        try:
            action = parse_payload(raw, kind_hint)
        except ConstraintMonitorError as e:
            logger.warning(f"Unusable hook payload: {e}")
            return self._fault(f"Constraint monitor could not read the hook input: {e.message}")

        try:
            result = await self.engine.evaluate(action, deadline_s=self.enforcement.deadline_s)
            decision = self.engine.decide(result, self.enforcement.blocking_levels)
        except Exception as e:
            logger.error(f"Constraint evaluation failed: {e}", exc_info=True)
            return self._fault(f"Constraint monitor error: {type(e).__name__}: {e}")

        if action.overrides:
            logger.info(f"Constraint override active for: {', '.join(sorted(action.overrides))}")
        return self.outcome_for(decision)

    def handle_sync(
        self,
        raw: Union[str, bytes, Mapping[str, Any]],
        kind_hint: Optional[ActionKind] = None,
    ) -> HookOutcome:
        return asyncio.run(self.handle(raw, kind_hint))

    @staticmethod
    def outcome_for(decision: Decision) -> HookOutcome:
        if decision.is_blocking:
            return HookOutcome(EXIT_BLOCK, render_block_message(decision), decision)
        if decision.is_warning:
            return HookOutcome(EXIT_ALLOW, render_warnings(decision), decision)
        return HookOutcome(EXIT_ALLOW, None, decision)

    def _fault(self, message: str) -> HookOutcome:
        if self.enforcement.fail_open:
            return HookOutcome(EXIT_ALLOW, f"{message} (allowing action)")
        return HookOutcome(EXIT_BLOCK, f"{message} (blocking action: fail_open is disabled)")


__all__ = [
    "EXIT_ALLOW",
    "EXIT_BLOCK",
    "HookOutcome",
    "HookAdapter",
]
