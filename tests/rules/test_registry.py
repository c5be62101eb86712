# tests/rules/test_registry.py
"""
Rule registry: snapshots and atomic reload
"""

from constraint_monitor.core.rules import ConstraintRule, RuleRegistry, RuleSet, default_ruleset
from constraint_monitor.infra.rulesets import DefaultsLoader, MemoryLoader


def _rule(rule_id, pattern="x"):
    return ConstraintRule(id=rule_id, pattern=pattern)


class TestReload:
    def test_reload_swaps_whole_rule_set(self):
        loader = MemoryLoader(RuleSet(rules=(_rule("a"),)))
        registry = RuleRegistry(loader=loader)
        before = registry.snapshot()

        loader.set_rules([_rule("b"), _rule("c")])
        registry.reload()

        assert [r.id for r in before.rules] == ["a"]
        assert [r.id for r in registry.snapshot().rules] == ["b", "c"]

    def test_reload_keeps_current_set_when_loader_has_nothing(self):
        loader = MemoryLoader(RuleSet(rules=(_rule("a"),)))
        registry = RuleRegistry(loader=loader)

        loader.clear()
        registry.reload()

        assert registry.get_rule("a") is not None

    def test_replace_returns_previous(self):
        registry = RuleRegistry.from_rules([_rule("a")])
        previous = registry.replace(RuleSet(rules=(_rule("b"),)))
        assert previous.get_rule("a") is not None
        assert registry.get_rule("a") is None


class TestCounts:
    def test_disabled_rules_are_not_enabled(self):
        registry = RuleRegistry.from_rules([
            _rule("a"),
            ConstraintRule(id="b", pattern="y", enabled=False),
        ])
        assert registry.count() == 2
        assert registry.count_enabled() == 1


class TestDefaults:
    def test_defaults_loader_yields_builtin_rules(self):
        ruleset = DefaultsLoader().load()
        assert ruleset.source == "builtin"
        assert ruleset.get_rule("no-hardcoded-secrets").semantic_validation
        assert len(ruleset) == len(default_ruleset())

    def test_rule_message_defaults_to_id(self):
        assert _rule("no-foo").message == "Constraint violation: no-foo"
