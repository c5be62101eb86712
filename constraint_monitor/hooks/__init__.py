# constraint_monitor/hooks/__init__.py
"""
Agent hook protocol: payload parsing, decision rendering, exit codes.
"""

from .adapter import EXIT_ALLOW, EXIT_BLOCK, HookAdapter, HookOutcome
from .payload import parse_payload
from .render import render_block_message, render_warnings

__all__ = [
    "EXIT_ALLOW",
    "EXIT_BLOCK",
    "HookAdapter",
    "HookOutcome",
    "parse_payload",
    "render_block_message",
    "render_warnings",
]
