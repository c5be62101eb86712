# constraint_monitor/cli/config_cmd.py
"""
constraint-monitor config show | validate
"""

import json

from constraint_monitor.config import load_config


def show_config(args) -> int:
    config = load_config(args.config)
    print(json.dumps(config.to_dict(), indent=2))
    return 0


def validate_config_cmd(args) -> int:
    """Exit code 1 when any error-level issue is found"""
    config = load_config(args.config)
    ruleset = config.rules_loader().load()
    issues = config.validate(ruleset)

    source = config.source_path or "built-in defaults"
    if not issues:
        print(f"OK: {source} ({len(ruleset)} rules)")
        return 0

    for issue in issues:
        print(issue)
    errors = sum(1 for issue in issues if issue.level == "error")
    print(f"\n{len(issues)} issue(s), {errors} error(s) in {source}")
    return 1 if errors else 0
