# tests/config/test_config.py
"""
Configuration loading: YAML over code defaults, file discovery, rule sources
and validation
"""

import pytest

from constraint_monitor.config import (
    EnforcementConfig,
    MonitorConfig,
    SemanticConfig,
    load_config,
    load_rules,
    validate_config,
)
from constraint_monitor.core.rules import ConstraintRule, RuleSet, RuleSeverity
from constraint_monitor.core.semantic import SemanticValidator


RULES_YAML = """
constraints:
  - id: no-todo
    pattern: "TODO"
    severity: error
    message: Resolve TODOs before committing
  - id: broken
    pattern: "(unclosed"
  - id: no-todo
    pattern: "FIXME"
"""


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    def test_no_file_means_code_defaults(self, isolated_cwd):
        config = load_config()

        assert config.source_path is None
        assert config.enforcement == EnforcementConfig()
        assert config.semantic == SemanticConfig()
        assert config.enforcement.blocking_levels == ("critical", "error")
        assert config.enforcement.deadline_s == 2.0
        assert config.semantic.timeout_ms == 300

    def test_missing_explicit_path_falls_back(self, isolated_cwd):
        config = load_config(isolated_cwd / "nope.yaml")
        assert config.source_path is None

    def test_non_mapping_file_falls_back(self, isolated_cwd):
        path = _write(isolated_cwd / "c.yaml", "- just\n- a list\n")
        assert load_config(path).source_path is None

    def test_invalid_yaml_falls_back(self, isolated_cwd):
        path = _write(isolated_cwd / "c.yaml", "enforcement: [unclosed\n")
        assert load_config(path).enforcement == EnforcementConfig()


class TestMerge:
    def test_partial_sections_merge_over_defaults(self, isolated_cwd):
        path = _write(isolated_cwd / "c.yaml", """
enforcement:
  blocking_levels: [CRITICAL]
  deadline_ms: 500
semantic:
  timeout_ms: 250
  model_routing:
    no-eval-usage: groq/llama-3.3-70b-versatile
""")
        config = load_config(path)

        assert config.source_path == path
        assert config.enforcement.blocking_levels == ("critical",)
        assert config.enforcement.deadline_ms == 500
        assert config.enforcement.fail_open is True
        assert config.semantic.timeout_ms == 250
        assert config.semantic.cache_ttl_s == 3600
        assert config.semantic.model_routing == {"no-eval-usage": "groq/llama-3.3-70b-versatile"}

    def test_single_blocking_level_string(self, isolated_cwd):
        path = _write(isolated_cwd / "c.yaml", "enforcement:\n  blocking_levels: error\n")
        assert load_config(path).enforcement.blocking_levels == ("error",)

    def test_unknown_keys_are_ignored(self, isolated_cwd):
        path = _write(isolated_cwd / "c.yaml", "semantic:\n  timeout_ms: 100\n  colour: blue\n")
        assert load_config(path).semantic.timeout_ms == 100

    def test_api_keys_are_masked(self, isolated_cwd):
        path = _write(isolated_cwd / "c.yaml", "semantic:\n  api_keys:\n    groq: gsk_secret\n")
        data = load_config(path).to_dict()
        assert data["semantic"]["api_keys"] == {"groq": "***"}


class TestDiscovery:
    def test_working_directory_file(self, isolated_cwd):
        _write(isolated_cwd / ".constraint-monitor.yaml", "enforcement:\n  fail_open: false\n")
        assert load_config().enforcement.fail_open is False

    def test_env_var_wins_over_working_directory(self, isolated_cwd, monkeypatch):
        _write(isolated_cwd / ".constraint-monitor.yaml", "enforcement:\n  deadline_ms: 100\n")
        env_file = _write(isolated_cwd / "env.yaml", "enforcement:\n  deadline_ms: 900\n")
        monkeypatch.setenv("CONSTRAINT_MONITOR_CONFIG", str(env_file))

        assert load_config().enforcement.deadline_ms == 900

    def test_coding_repo_is_last_resort(self, isolated_cwd, monkeypatch, tmp_path_factory):
        repo = tmp_path_factory.mktemp("repo")
        _write(repo / ".constraint-monitor.yaml", "semantic:\n  enabled: false\n")
        monkeypatch.setenv("CODING_REPO", str(repo))

        assert load_config().semantic.enabled is False


class TestRules:
    def test_builtin_rules_without_file(self, isolated_cwd):
        ruleset = load_rules()
        assert ruleset.source == "builtin"
        assert ruleset.get_rule("no-hardcoded-secrets") is not None

    def test_constraints_list_replaces_builtins(self, isolated_cwd):
        path = _write(isolated_cwd / "c.yaml", RULES_YAML)

        ruleset = load_rules(path)

        assert [r.id for r in ruleset.rules] == ["no-todo"]
        assert ruleset.get_rule("no-todo").severity == RuleSeverity.ERROR
        assert ruleset.get_rule("no-hardcoded-secrets") is None

    def test_file_without_constraints_keeps_builtins(self, isolated_cwd):
        path = _write(isolated_cwd / "c.yaml", "enforcement:\n  fail_open: true\n")
        assert load_rules(path).source == "builtin"


class TestValidateConfig:
    def test_defaults_are_clean(self):
        assert MonitorConfig().validate() == []

    def test_enforcement_issues(self):
        issues = validate_config(
            EnforcementConfig(blocking_levels=("warning", "fatal"), fail_open=False, deadline_ms=100),
            SemanticConfig(),
        )
        messages = {(i.level, i.path) for i in issues}

        assert ("error", "enforcement.blocking_levels") in messages
        assert ("warn", "enforcement.blocking_levels") in messages
        assert ("warn", "enforcement.fail_open") in messages
        assert ("warn", "enforcement.deadline_ms") in messages

    def test_semantic_issues(self):
        issues = validate_config(
            EnforcementConfig(),
            SemanticConfig(
                model_routing={"a": "nowhere/model", "b": "no-slash"},
                fallback_provider="bogus",
                timeout_ms=0,
            ),
        )
        paths = {i.path for i in issues if i.level == "error"}

        assert paths == {
            "semantic.model_routing.a",
            "semantic.model_routing.b",
            "semantic.fallback_provider",
            "semantic.timeout_ms",
        }

    def test_rule_issues(self):
        ruleset = RuleSet(rules=(
            ConstraintRule(id="dup", pattern="a"),
            ConstraintRule(id="dup", pattern="b"),
            ConstraintRule(id="bad", pattern="(oops"),
            ConstraintRule(id="sem", pattern="x", semantic_validation=True),
        ))

        issues = validate_config(EnforcementConfig(), SemanticConfig(enabled=False), ruleset)
        found = {(i.level, i.path) for i in issues}

        assert ("error", "constraints.dup") in found
        assert ("error", "constraints.bad.pattern") in found
        assert ("warn", "constraints.sem.semantic_validation") in found

    def test_issue_str(self):
        issue = validate_config(EnforcementConfig(fail_open=False), SemanticConfig())[0]
        assert str(issue).startswith("WARN [enforcement.fail_open]")
        assert "Hint:" in str(issue)


class TestBuild:
    def test_semantic_disabled_means_no_validator(self):
        config = MonitorConfig(semantic=SemanticConfig(enabled=False))
        assert config.build_validator() is None
        assert config.build_engine().validator is None

    def test_validator_uses_configured_limits(self, make_provider, clock):
        config = MonitorConfig(semantic=SemanticConfig(timeout_ms=150, cache_max_size=5, breaker_threshold=2))

        validator = config.build_validator({"groq": make_provider()}, clock=clock)

        assert isinstance(validator, SemanticValidator)
        assert validator.cache.max_size == 5
        assert validator.breaker.threshold == 2

    def test_bad_routing_keeps_validator(self, make_provider, clock):
        config = MonitorConfig(semantic=SemanticConfig(
            model_routing={"no-eval-usage": "anthropic"},
            fallback_provider="bogus",
        ))

        validator = config.build_validator({"groq": make_provider()}, clock=clock)

        assert str(validator.router.resolve("no-eval-usage")) == "anthropic/claude-3-haiku-20240307"
        assert validator.fallback_route is None

    def test_unusable_semantic_values_fall_back_to_regex_only(self, isolated_cwd, make_provider):
        config = MonitorConfig(semantic=SemanticConfig(cache_max_size="lots", model_routing=["not", "a", "mapping"]))

        assert config.build_validator({"groq": make_provider()}) is None
        assert config.build_engine(validator=None).validator is None

    def test_no_credentials_means_no_providers(self, no_provider_keys):
        validator = MonitorConfig().build_validator()
        assert validator.get_stats()["configured_providers"] == []

    def test_engine_carries_enforcement(self, isolated_cwd):
        config = MonitorConfig(enforcement=EnforcementConfig(blocking_levels=("critical",), deadline_ms=300))
        engine = config.build_engine()

        assert engine.blocking_levels == ("critical",)
        assert engine.deadline_s == pytest.approx(0.3)
        assert engine.registry.count() > 0
