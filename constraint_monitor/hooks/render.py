# constraint_monitor/hooks/render.py
"""
Human-readable hook messages

The block message is fed back to the agent on stderr, so it names every
blocking violation together with what to do instead.
"""

from __future__ import annotations

from typing import List

from constraint_monitor.core.decision import Decision

BLOCK_HEADER = "CONSTRAINT VIOLATION DETECTED - EXECUTION BLOCKED"


def render_block_message(decision: Decision) -> str:
    lines: List[str] = [
        BLOCK_HEADER,
        "",
        "The following constraint violations must be corrected before proceeding:",
        "",
    ]
    for index, violation in enumerate(decision.blocking_violations, start=1):
        lines.append(f"{index}. {violation.severity.value.upper()}: {violation.message}")
        if violation.suggestion:
            lines.append(f"   Suggestion: {violation.suggestion}")
        lines.append(f"   Pattern: {violation.pattern}")
        lines.append("")
    lines.append("Please modify your request to comply with these constraints and try again.")
    return "\n".join(lines)


def render_warnings(decision: Decision) -> str:
    lines = [f"Constraint warnings (compliance {decision.compliance:.1f}/10, not blocking):"]
    for violation in decision.violations:
        lines.append(f"- {violation.severity.value.upper()} [{violation.constraint_id}]: {violation.message}")
        if violation.suggestion:
            lines.append(f"  Suggestion: {violation.suggestion}")
    return "\n".join(lines)


__all__ = [
    "BLOCK_HEADER",
    "render_block_message",
    "render_warnings",
]
