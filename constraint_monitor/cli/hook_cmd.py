# constraint_monitor/cli/hook_cmd.py
"""
constraint-monitor hook pre-tool | prompt

Reads one hook payload from stdin and exits with the decision's code.
"""

import logging
import sys

from constraint_monitor.config import load_config
from constraint_monitor.core.engine import ActionKind
from constraint_monitor.hooks import EXIT_ALLOW, HookAdapter

logger = logging.getLogger(__name__)

HOOK_KINDS = {
    "pre-tool": ActionKind.TOOL_CALL,
    "prompt": ActionKind.PROMPT,
}


def run_hook(args) -> int:
    """Never raises: any failure here allows the action"""
    try:
        raw = sys.stdin.read()
        if not raw.strip():
            logger.debug("No hook input; allowing action")
            return EXIT_ALLOW

        config = load_config(args.config)
        adapter = HookAdapter(config.build_engine(), config.enforcement)
        outcome = adapter.handle_sync(raw, HOOK_KINDS.get(args.hook_kind))
    except Exception as e:
        logger.error(f"Hook failed: {e}", exc_info=True)
        print(f"Constraint monitor hook error: {e} (allowing action)", file=sys.stderr)
        return EXIT_ALLOW

    if outcome.stderr_message:
        print(outcome.stderr_message, file=sys.stderr)
    return outcome.exit_code
