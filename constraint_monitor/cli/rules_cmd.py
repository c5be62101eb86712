# constraint_monitor/cli/rules_cmd.py
"""
constraint-monitor rules list
"""

import json

from constraint_monitor.config import load_rules


def list_rules(args) -> int:
    ruleset = load_rules(args.config)

    if args.json:
        print(json.dumps({
            "source": ruleset.source,
            "constraints": [rule.to_dict() for rule in ruleset.rules],
        }, indent=2))
        return 0

    print(f"Source: {ruleset.source}")
    print(f"{len(ruleset)} rules ({len(ruleset.get_enabled_rules())} enabled)")
    print()
    for rule in ruleset.rules:
        flags = []
        if not rule.enabled:
            flags.append("disabled")
        if rule.semantic_validation:
            flags.append("semantic")
        if rule.applies_to.value != "content":
            flags.append(rule.applies_to.value)
        suffix = f" [{', '.join(flags)}]" if flags else ""
        print(f"  {rule.severity.value:<8} {rule.id}{suffix}")
        print(f"           {rule.message}")
    return 0
