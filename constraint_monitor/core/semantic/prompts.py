# constraint_monitor/core/semantic/prompts.py
"""
Prompt construction and response parsing for semantic validation
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from ..errors import ConstraintMonitorError, codes
from ..rules.patterns import RegexMatch
from .types import SemanticResult, ValidationContext

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_WINDOW = 200

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

_PROMPT_TEMPLATE = """You are validating a potential constraint violation.

CONSTRAINT: {constraint}
PATTERN MATCHED: "{matched}"
FILE: {file_path}

CONTEXT:
...{before}
>>> {matched} <<<
{after}...

QUESTION: Is this a TRUE violation of the constraint, or a FALSE POSITIVE?

Consider:
- The intent and purpose of the matched code
- Whether this is test code, examples, or legitimate use
- The broader context of what the code is trying to achieve
- If this creates the actual problem the constraint is trying to prevent

Respond with JSON only:
{{
  "isViolation": true|false,
  "confidence": 0.0-1.0,
  "reasoning": "brief explanation of your determination"
}}"""


def build_prompt(
    constraint_id: str,
    regex_match: RegexMatch,
    context: ValidationContext,
    window: int = DEFAULT_CONTEXT_WINDOW,
) -> str:
    """Prompt with the rule message, the first match and ``window`` chars either side"""
    content = context.content or ""
    matched = regex_match.first
    start, end = regex_match.first_span
    if content[start:end] != matched:
        # Span does not refer to this content (e.g. a file-path match)
        start = content.find(matched) if matched else -1
        end = start + len(matched) if start >= 0 else -1

    if start >= 0:
        before = content[max(0, start - window):start]
        after = content[end:end + window]
    else:
        before = content[:window]
        after = ""

    return _PROMPT_TEMPLATE.format(
        constraint=context.rule_message or constraint_id,
        matched=matched,
        file_path=context.file_path or "unknown",
        before=before,
        after=after,
    )


def _coerce_confidence(value: Any) -> float:
    try:
        confidence = float(value) if value else 0.5
    except (TypeError, ValueError):
        confidence = 0.5
    return max(0.0, min(1.0, confidence))


_BOOL_STRINGS = {"true": True, "false": False}


def _coerce_verdict(value: Any) -> Optional[bool]:
    """JSON booleans, 0/1 and "true"/"false" strings; None for anything else"""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        return _BOOL_STRINGS.get(value.strip().lower())
    return None


def parse_response(text: str) -> SemanticResult:
    """
    Parse a provider reply into a SemanticResult.

    The first ``{`` through the last ``}`` is read as JSON; surrounding prose
    (markdown fences, preambles) is ignored.

    Raises:
        ConstraintMonitorError: RESPONSE_INVALID when no usable JSON object is found
    """
    found = _JSON_OBJECT.search(text or "")
    if not found:
        raise ConstraintMonitorError(
            message="No JSON object in provider response",
            error_code=codes.RESPONSE_INVALID,
            phase="semantic",
            details={"response": (text or "")[:200]},
        )
    try:
        parsed = json.loads(found.group(0))
    except json.JSONDecodeError as e:
        raise ConstraintMonitorError(
            message=f"Malformed JSON in provider response: {e}",
            error_code=codes.RESPONSE_INVALID,
            phase="semantic",
            details={"response": (text or "")[:200]},
            cause=e,
        ) from e
    if not isinstance(parsed, dict):
        raise ConstraintMonitorError(
            message="Provider response JSON is not an object",
            error_code=codes.RESPONSE_INVALID,
            phase="semantic",
        )

    raw_verdict = parsed.get("isViolation", parsed.get("is_violation"))
    is_violation = _coerce_verdict(raw_verdict)
    if is_violation is None:
        raise ConstraintMonitorError(
            message=f"Provider response has no usable isViolation: {raw_verdict!r}",
            error_code=codes.RESPONSE_INVALID,
            phase="semantic",
            details={"response": (text or "")[:200]},
        )
    return SemanticResult(
        is_violation=is_violation,
        confidence=_coerce_confidence(parsed.get("confidence")),
        reasoning=str(parsed.get("reasoning") or "No reasoning provided"),
        semantic_override=not is_violation,
        raw_response=text,
    )


__all__ = [
    "DEFAULT_CONTEXT_WINDOW",
    "build_prompt",
    "parse_response",
]
