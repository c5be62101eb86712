# tests/hooks/test_adapter.py
"""
HookAdapter: decisions mapped onto exit codes and stderr messages
"""

import json

import pytest

from constraint_monitor.config.modules import EnforcementConfig
from constraint_monitor.core.decision import DecisionOutcome
from constraint_monitor.core.engine import ActionKind, ConstraintEngine
from constraint_monitor.core.rules import RuleSet, default_ruleset
from constraint_monitor.hooks import EXIT_ALLOW, EXIT_BLOCK, HookAdapter
from constraint_monitor.hooks.render import BLOCK_HEADER

pytestmark = pytest.mark.anyio


def _tool_payload(content, file_path="src/app.js", tool="Write"):
    return json.dumps({
        "hook_event_name": "PreToolUse",
        "tool_name": tool,
        "tool_input": {"file_path": file_path, "content": content},
    })


@pytest.fixture
def adapter():
    return HookAdapter(ConstraintEngine(default_ruleset()))


class ExplodingEngine(ConstraintEngine):
    async def evaluate(self, action, deadline_s=None):
        raise RuntimeError("registry exploded")


class RecordingEngine(ConstraintEngine):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.deadlines = []

    async def evaluate(self, action, deadline_s=None):
        self.deadlines.append(deadline_s)
        return await super().evaluate(action, deadline_s)


class TestDecisions:
    async def test_critical_violation_blocks(self, adapter):
        outcome = await adapter.handle(_tool_payload('const api_key = "sk-1234567890abcdef";'))

        assert outcome.exit_code == EXIT_BLOCK
        assert outcome.blocked
        assert outcome.decision.outcome == DecisionOutcome.BLOCK
        message = outcome.stderr_message
        assert message.startswith(BLOCK_HEADER)
        assert "1. CRITICAL: Potential hardcoded secret detected" in message
        assert "Suggestion: Use environment variables" in message
        assert "Pattern: " in message

    async def test_parallel_file_path_blocks(self, adapter):
        outcome = await adapter.handle(_tool_payload("export const x = 1;", file_path="src/utils-v2.js"))
        assert outcome.exit_code == EXIT_BLOCK
        assert "Parallel file versions" in outcome.stderr_message

    async def test_warnings_allow_with_diagnostics(self, adapter):
        outcome = await adapter.handle(_tool_payload("console.log('debug')"))

        assert outcome.exit_code == EXIT_ALLOW
        assert outcome.decision.outcome == DecisionOutcome.ALLOW_WITH_WARNINGS
        assert "WARNING [no-console-log]" in outcome.stderr_message
        assert "not blocking" in outcome.stderr_message

    async def test_clean_action_is_silent(self, adapter):
        outcome = await adapter.handle(_tool_payload("export const answer = 42;"))

        assert outcome.exit_code == EXIT_ALLOW
        assert outcome.stderr_message is None
        assert outcome.decision.outcome == DecisionOutcome.ALLOW

    async def test_prompt_with_kind_hint(self, adapter):
        outcome = await adapter.handle(json.dumps({"text": "eval(userInput)"}), ActionKind.PROMPT)
        assert outcome.exit_code == EXIT_BLOCK

    async def test_override_lets_action_through(self, adapter):
        payload = json.dumps({
            "tool_name": "Write",
            "tool_input": {
                "file_path": "src/app.js",
                "content": 'const api_key = "sk-1234567890abcdef";',
                "_constraint_override": "no-hardcoded-secrets",
            },
        })
        outcome = await adapter.handle(payload)
        assert outcome.exit_code == EXIT_ALLOW


class TestEnforcementConfig:
    async def test_custom_blocking_levels(self):
        content = "try { run() } catch (e) {}"
        default = HookAdapter(ConstraintEngine(default_ruleset()))
        critical_only = HookAdapter(
            ConstraintEngine(default_ruleset()),
            EnforcementConfig(blocking_levels=("critical",)),
        )

        assert (await default.handle(_tool_payload(content))).exit_code == EXIT_BLOCK
        assert (await critical_only.handle(_tool_payload(content))).exit_code == EXIT_ALLOW

    async def test_disabled_enforcement_allows_everything(self):
        adapter = HookAdapter(ConstraintEngine(default_ruleset()), EnforcementConfig(enabled=False))
        outcome = await adapter.handle(_tool_payload("eval(x)"))
        assert outcome.exit_code == EXIT_ALLOW
        assert outcome.decision is None

    async def test_deadline_is_passed_to_engine(self):
        engine = RecordingEngine(RuleSet())
        adapter = HookAdapter(engine, EnforcementConfig(deadline_ms=750))

        await adapter.handle(_tool_payload("x"))

        assert engine.deadlines == [0.75]


class TestFaults:
    @pytest.mark.parametrize("raw", ["", "{broken", "[]", '{"foo": 1}'])
    async def test_unusable_payload_fails_open(self, adapter, raw):
        outcome = await adapter.handle(raw)
        assert outcome.exit_code == EXIT_ALLOW
        assert "allowing action" in outcome.stderr_message

    async def test_unusable_payload_blocks_when_fail_closed(self):
        adapter = HookAdapter(ConstraintEngine(default_ruleset()), EnforcementConfig(fail_open=False))
        outcome = await adapter.handle("{broken")
        assert outcome.exit_code == EXIT_BLOCK
        assert "fail_open is disabled" in outcome.stderr_message

    async def test_engine_fault_fails_open(self):
        adapter = HookAdapter(ExplodingEngine(RuleSet()))
        outcome = await adapter.handle(_tool_payload("x"))
        assert outcome.exit_code == EXIT_ALLOW
        assert "registry exploded" in outcome.stderr_message


class TestSync:
    def test_handle_sync(self):
        adapter = HookAdapter(ConstraintEngine(default_ruleset()))
        outcome = adapter.handle_sync(_tool_payload("eval(payload)"))
        assert outcome.exit_code == EXIT_BLOCK
