# constraint_monitor/infra/rulesets/filesystem.py
"""
FileSystem RuleSet Loader

Loads rule sets from a YAML configuration file on disk
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from constraint_monitor.core.errors import ConstraintMonitorError, codes
from constraint_monitor.core.rules.loader import RuleSetLoader
from constraint_monitor.core.rules.models import (
    AppliesTo,
    ConstraintGroup,
    ConstraintRule,
    RuleException,
    RuleSet,
    RuleSeverity,
)
from constraint_monitor.core.rules.patterns import compile_pattern

logger = logging.getLogger(__name__)


def _first(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Value of the first key present in ``data``"""
    for key in keys:
        if key in data:
            return data[key]
    return default


class FileSystemLoader(RuleSetLoader):
    """
    Load a rule set from a YAML file

    File format:
        constraint_groups:
          - id: security
            name: Security
            description: Secrets and dynamic code execution
        constraints:
          - id: no-hardcoded-secrets
            group: security
            pattern: "(?i)(api[_-]?key|password)\\s*[=:]\\s*['\\"][^'\\"]{8,}['\\"]"
            message: Potential hardcoded secret detected
            severity: critical
            applies_to: content
            semantic_validation: true
            suggestion: Use environment variables
            exceptions:
              - path: "**/*.test.js"
                reason: Test fixtures
            whitelist:
              - "**/fixtures/**"

    Returns None when the file is missing or has no ``constraints`` list, so a
    CompositeLoader can fall through to the next source.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def describe(self) -> str:
        return f"FileSystemLoader({self.path})"

    def load(self) -> Optional[RuleSet]:
        if not self.path.is_file():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to read rule file {self.path}: {e}")
            return None

        if not isinstance(data, dict) or not isinstance(data.get("constraints"), list):
            logger.debug(f"No constraints list in {self.path}")
            return None

        return parse_ruleset(data, source=str(self.path))


def parse_ruleset(data: Dict[str, Any], source: str = "memory") -> RuleSet:
    """Parse a rule set from configuration-file data, skipping invalid rules"""
    rules: List[ConstraintRule] = []
    seen = set()
    for index, rule_data in enumerate(data.get("constraints") or []):
        try:
            rule = parse_rule(rule_data)
        except ConstraintMonitorError as e:
            logger.warning(f"Skipping constraint #{index} in {source}: {e}")
            continue
        if rule.id in seen:
            logger.warning(f"Duplicate constraint id '{rule.id}' in {source}; keeping the first definition")
            continue
        seen.add(rule.id)
        rules.append(rule)

    groups = []
    for group_data in data.get("constraint_groups") or []:
        if isinstance(group_data, dict) and group_data.get("id"):
            groups.append(ConstraintGroup(
                id=str(group_data["id"]),
                name=str(group_data.get("name", "")),
                description=str(group_data.get("description", "")),
            ))

    return RuleSet(
        rules=tuple(rules),
        groups=tuple(groups),
        source=source,
        metadata=dict(data.get("metadata") or {}),
    )


def parse_rule(data: Any) -> ConstraintRule:
    """
    Parse one rule from configuration-file data

    Raises:
        ConstraintMonitorError: RULE_INVALID / PATTERN_INVALID
    """
    if not isinstance(data, dict):
        raise ConstraintMonitorError.rule(f"Constraint must be a mapping, got {type(data).__name__}")

    rule_id = data.get("id")
    if not rule_id:
        raise ConstraintMonitorError.rule("Constraint without id")
    rule_id = str(rule_id)

    pattern = data.get("pattern")
    if not pattern or not isinstance(pattern, str):
        raise ConstraintMonitorError.rule("Constraint without pattern", rule_id=rule_id)

    # Invalid patterns are rejected at load time; the engine also guards at match time
    flags = str(data.get("flags") or "")
    try:
        compile_pattern(pattern, flags)
    except ConstraintMonitorError as e:
        raise ConstraintMonitorError.rule(str(e.message), error_code=codes.PATTERN_INVALID, rule_id=rule_id) from e

    severity_str = str(data.get("severity", RuleSeverity.WARNING.value)).lower()
    try:
        severity = RuleSeverity(severity_str)
    except ValueError:
        logger.warning(f"Constraint '{rule_id}': unknown severity '{severity_str}', using warning")
        severity = RuleSeverity.WARNING

    applies_str = str(_first(data, "applies_to", "appliesTo", default=AppliesTo.CONTENT.value)).lower()
    applies_str = applies_str.replace("-", "_")
    if applies_str == "filepath":
        applies_str = AppliesTo.FILE_PATH.value
    try:
        applies_to = AppliesTo(applies_str)
    except ValueError:
        raise ConstraintMonitorError.rule(f"Unknown applies_to '{applies_str}'", rule_id=rule_id)

    return ConstraintRule(
        id=rule_id,
        group=str(data.get("group", "general")),
        pattern=pattern,
        message=str(data.get("message") or ""),
        severity=severity,
        applies_to=applies_to,
        flags=flags,
        enabled=data.get("enabled", True) is not False,
        suggestion=data.get("suggestion"),
        exceptions=_parse_exceptions(data.get("exceptions"), rule_id),
        whitelist=_parse_whitelist(data.get("whitelist"), rule_id),
        semantic_validation=bool(_first(data, "semantic_validation", "semanticValidation", default=False)),
    )


def _parse_exceptions(raw: Any, rule_id: str) -> Tuple[RuleException, ...]:
    if not raw:
        return ()
    if not isinstance(raw, list):
        raise ConstraintMonitorError.rule("exceptions must be a list", rule_id=rule_id)

    exceptions = []
    for entry in raw:
        if isinstance(entry, str):
            exceptions.append(RuleException(path=entry))
        elif isinstance(entry, dict) and _first(entry, "path", "pattern"):
            exceptions.append(RuleException(
                path=str(_first(entry, "path", "pattern")),
                reason=str(entry.get("reason", "")),
            ))
        else:
            raise ConstraintMonitorError.rule(
                f"Invalid exception entry {entry!r}",
                error_code=codes.GLOB_INVALID,
                rule_id=rule_id,
            )
    return tuple(exceptions)


def _parse_whitelist(raw: Any, rule_id: str) -> Tuple[str, ...]:
    if not raw:
        return ()
    if not isinstance(raw, list) or not all(isinstance(g, str) for g in raw):
        raise ConstraintMonitorError.rule(
            "whitelist must be a list of glob strings",
            error_code=codes.GLOB_INVALID,
            rule_id=rule_id,
        )
    return tuple(raw)


__all__ = [
    "FileSystemLoader",
    "parse_ruleset",
    "parse_rule",
]
