# constraint_monitor/cli/main.py
import argparse
import logging
import os
import sys
from pathlib import Path

from constraint_monitor.cli.check_cmd import run_check
from constraint_monitor.cli.config_cmd import show_config, validate_config_cmd
from constraint_monitor.cli.hook_cmd import HOOK_KINDS, run_hook
from constraint_monitor.cli.rules_cmd import list_rules

LOG_LEVEL_ENV_VAR = "CONSTRAINT_MONITOR_LOG_LEVEL"


def configure_logging(level_name=None):
    """Logs go to stderr only; stdout is reserved for command output"""
    level_name = (level_name or os.environ.get(LOG_LEVEL_ENV_VAR) or "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_parser():
    parser = argparse.ArgumentParser(
        "constraint-monitor",
        description="Real-time constraint enforcement for coding-agent actions"
    )
    parser.add_argument("--config", type=Path, help="Path to .constraint-monitor.yaml")
    parser.add_argument("--log-level", help="Log level (default: $CONSTRAINT_MONITOR_LOG_LEVEL or WARNING)")
    sub = parser.add_subparsers(dest="command")

    # hook - agent hook entry points (payload on stdin)
    hook_p = sub.add_parser("hook", help="Run as an agent hook (reads JSON payload from stdin)")
    hook_p.add_argument("hook_kind", choices=sorted(HOOK_KINDS), help="Hook type")

    # check - ad-hoc evaluation
    check_p = sub.add_parser("check", help="Evaluate content or a file against the rules")
    check_p.add_argument("--content", help="Text to check")
    check_p.add_argument("--file", help="Read the text to check from this file")
    check_p.add_argument("--file-path", help="File path the action targets (for path rules and exceptions)")
    check_p.add_argument("--tool", default="Write", help="Tool name to report (default: Write)")
    check_p.add_argument("--prompt", action="store_true", help="Treat the content as a prompt")
    check_p.add_argument("--json", action="store_true", help="JSON output")

    # rules - inspect loaded rules
    rules_p = sub.add_parser("rules", help="Inspect loaded rules")
    rules_sub = rules_p.add_subparsers(dest="rules_command")
    rules_list_p = rules_sub.add_parser("list", help="List rules")
    rules_list_p.add_argument("--json", action="store_true", help="JSON output")

    # config - inspect configuration
    config_p = sub.add_parser("config", help="Inspect configuration")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Show effective configuration")
    config_sub.add_parser("validate", help="Check configuration and rules for problems")

    return parser, rules_p, config_p


def main(argv=None) -> int:
    parser, rules_p, config_p = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    # If no command provided, show help
    if not args.command:
        parser.print_help()
        return 0

    if args.command == "hook":
        return run_hook(args)
    elif args.command == "check":
        return run_check(args)
    elif args.command == "rules":
        if args.rules_command == "list":
            return list_rules(args)
        rules_p.print_help()
        return 0
    elif args.command == "config":
        if args.config_command == "show":
            return show_config(args)
        elif args.config_command == "validate":
            return validate_config_cmd(args)
        config_p.print_help()
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
