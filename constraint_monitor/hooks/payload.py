# constraint_monitor/hooks/payload.py
"""
Hook payload parsing

Turns the JSON a coding agent sends to its hooks into an ActionDescriptor.
Every field is looked up through an ordered tuple of accepted key names;
the first key present wins.
"""

from __future__ import annotations

import json
import re
from typing import Any, Callable, FrozenSet, List, Mapping, Optional, Sequence, Union

from constraint_monitor.core.engine.types import ActionDescriptor, ActionKind
from constraint_monitor.core.errors import ConstraintMonitorError, codes


TOOL_NAME_KEYS = ("tool_name", "name", "toolName")
PARAMS_KEYS = ("tool_input", "parameters", "arguments", "input")
FILE_PATH_KEYS = ("file_path", "path", "filePath", "notebook_path")
TEXT_KEYS = ("content", "new_string", "command", "text", "new_source")
PROMPT_KEYS = ("prompt", "text", "content", "message")
SESSION_KEYS = ("session_id", "sessionId")
KIND_KEYS = ("kind", "type")
EVENT_KEYS = ("hook_event_name", "hookEventName")

EVENT_KINDS = {
    "UserPromptSubmit": ActionKind.PROMPT,
    "PreToolUse": ActionKind.TOOL_CALL,
}

KIND_ALIASES = {
    "prompt": ActionKind.PROMPT,
    "tool_call": ActionKind.TOOL_CALL,
    "tool": ActionKind.TOOL_CALL,
}

OVERRIDE_PARAM = "_constraint_override"
OVERRIDE_DIRECTIVE = re.compile(r"OVERRIDE_CONSTRAINT:\s*([A-Za-z0-9_-]+)")


def first_present(
    data: Mapping[str, Any],
    keys: Sequence[str],
    convert: Optional[Callable[[Any], Any]] = None,
) -> Any:
    """
    Value of the first key in ``keys`` that is present (and not null) in ``data``

    With ``convert``, a key only counts when ``convert(value)`` is not None;
    the converted value is returned.
    """
    for key in keys:
        value = data.get(key)
        if value is not None and convert is not None:
            value = convert(value)
        if value is not None:
            return value
    return None


def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    # Notebook sources may arrive as a list of lines
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return "".join(value)
    return None


def _as_mapping(value: Any) -> Optional[Mapping[str, Any]]:
    return value if isinstance(value, Mapping) else None


def _as_path(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def parse_override_directives(text: Optional[str]) -> FrozenSet[str]:
    """Constraint ids named in ``OVERRIDE_CONSTRAINT: <id>`` lines"""
    if not text:
        return frozenset()
    return frozenset(OVERRIDE_DIRECTIVE.findall(text))


def parse_override_param(value: Any) -> FrozenSet[str]:
    """``_constraint_override`` as a string (comma separated) or a list of ids"""
    if isinstance(value, str):
        return frozenset(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, (list, tuple)):
        return frozenset(str(v).strip() for v in value if str(v).strip())
    return frozenset()


def _decode(raw: Union[str, bytes, Mapping[str, Any]]) -> Mapping[str, Any]:
    if isinstance(raw, Mapping):
        return raw
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if not isinstance(raw, str) or not raw.strip():
        raise ConstraintMonitorError.payload("Empty hook payload", error_code=codes.PAYLOAD_INCOMPLETE)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConstraintMonitorError.payload(f"Hook payload is not JSON: {e}", cause=e) from e
    if not isinstance(data, dict):
        raise ConstraintMonitorError.payload(f"Hook payload must be a JSON object, got {type(data).__name__}")
    return data


def _resolve_kind(data: Mapping[str, Any], kind_hint: Optional[ActionKind]) -> ActionKind:
    explicit = first_present(data, KIND_KEYS)
    if isinstance(explicit, str) and explicit.lower() in KIND_ALIASES:
        return KIND_ALIASES[explicit.lower()]

    event = first_present(data, EVENT_KEYS)
    if event in EVENT_KINDS:
        return EVENT_KINDS[event]

    if kind_hint is not None:
        return kind_hint

    if first_present(data, TOOL_NAME_KEYS) is not None or first_present(data, PARAMS_KEYS) is not None:
        return ActionKind.TOOL_CALL
    if first_present(data, PROMPT_KEYS) is not None:
        return ActionKind.PROMPT
    raise ConstraintMonitorError.payload(
        "Cannot tell whether the payload is a prompt or a tool call",
        error_code=codes.PAYLOAD_INCOMPLETE,
    )


def _tool_text(params: Mapping[str, Any]) -> Optional[str]:
    """Primary text plus the extra text carried by edit-style tools"""
    parts: List[str] = []
    primary = first_present(params, TEXT_KEYS, _as_text)
    if primary:
        parts.append(primary)

    old = _as_text(params.get("old_string"))
    if old:
        parts.append(old)

    edits = params.get("edits")
    if isinstance(edits, list):
        for edit in edits:
            if isinstance(edit, Mapping):
                new = _as_text(edit.get("new_string"))
                if new:
                    parts.append(new)

    return "\n".join(parts) if parts else None


def parse_payload(
    raw: Union[str, bytes, Mapping[str, Any]],
    kind_hint: Optional[ActionKind] = None,
) -> ActionDescriptor:
    """
    Parse a hook payload.

    Args:
        raw: JSON text or an already decoded mapping
        kind_hint: Kind to assume when the payload carries no explicit kind or event name

    Raises:
        ConstraintMonitorError: PAYLOAD_INVALID / PAYLOAD_INCOMPLETE
    """
    data = _decode(raw)
    kind = _resolve_kind(data, kind_hint)
    event_name = first_present(data, EVENT_KEYS)
    session = first_present(data, SESSION_KEYS)
    session_id = str(session) if session is not None else None

    if kind == ActionKind.PROMPT:
        text = first_present(data, PROMPT_KEYS, _as_text)
        if text is None:
            raise ConstraintMonitorError.payload(
                "Prompt payload without prompt text",
                error_code=codes.PAYLOAD_INCOMPLETE,
            )
        return ActionDescriptor.prompt(
            text,
            event_name=event_name,
            session_id=session_id,
            overrides=parse_override_directives(text),
        )

    params = first_present(data, PARAMS_KEYS, _as_mapping) or {}
    file_path = first_present(params, FILE_PATH_KEYS, _as_path)
    tool_name = first_present(data, TOOL_NAME_KEYS)
    return ActionDescriptor.tool_call(
        tool_name=str(tool_name) if tool_name is not None else None,
        text_content=_tool_text(params),
        file_path=file_path,
        event_name=event_name,
        session_id=session_id,
        overrides=parse_override_param(params.get(OVERRIDE_PARAM)),
    )


__all__ = [
    "TOOL_NAME_KEYS",
    "PARAMS_KEYS",
    "FILE_PATH_KEYS",
    "TEXT_KEYS",
    "PROMPT_KEYS",
    "SESSION_KEYS",
    "first_present",
    "parse_override_directives",
    "parse_override_param",
    "parse_payload",
]
