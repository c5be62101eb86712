# constraint_monitor/cli/check_cmd.py
"""
constraint-monitor check

Evaluate ad-hoc content or a file against the loaded rules.
"""

import asyncio
import json
import sys
from pathlib import Path

from constraint_monitor.config import load_config
from constraint_monitor.core.engine import ActionDescriptor


def _build_action(args) -> ActionDescriptor:
    content = args.content
    file_path = args.file_path
    if args.file:
        content = Path(args.file).read_text(encoding="utf-8", errors="replace")
        file_path = file_path or args.file
    if args.prompt:
        return ActionDescriptor.prompt(content or "")
    return ActionDescriptor.tool_call(
        tool_name=args.tool,
        text_content=content,
        file_path=file_path,
    )


def run_check(args) -> int:
    """
    Exit code 2 when the decision blocks, 0 otherwise.
    """
    if args.content is None and not args.file and not args.file_path:
        print("check: provide --content, --file or --file-path", file=sys.stderr)
        return 1

    try:
        action = _build_action(args)
    except OSError as e:
        print(f"check: cannot read {args.file}: {e}", file=sys.stderr)
        return 1

    config = load_config(args.config)
    engine = config.build_engine()
    result = asyncio.run(engine.evaluate(action, deadline_s=config.enforcement.deadline_s))
    decision = engine.decide(result)

    if args.json:
        print(json.dumps({"result": result.to_dict(), "decision": decision.to_dict()}, indent=2))
    else:
        _print_report(result, decision)
    return 2 if decision.is_blocking else 0


def _print_report(result, decision) -> None:
    print(f"Decision:   {decision.outcome.value}")
    print(f"Compliance: {result.compliance:.1f}/10")
    print(f"Risk:       {result.risk.value}")
    print(f"Rules:      {result.total_rules} evaluated, {result.violated_rules} violated")
    if result.skipped_rules:
        print(f"Skipped:    {', '.join(result.skipped_rules)}")
    if not result.violations:
        return
    print()
    blocking = {v.constraint_id for v in decision.blocking_violations}
    for v in result.violations:
        marker = "BLOCK" if v.constraint_id in blocking else "warn "
        print(f"  [{marker}] {v.severity.value:<8} {v.constraint_id}: {v.message} ({v.match_count} match(es))")
        if v.semantic_reasoning:
            print(f"          semantic: {v.semantic_reasoning} (confidence {v.semantic_confidence:.2f})")
        if v.suggestion:
            print(f"          suggestion: {v.suggestion}")
