"""Tests for hook transpilation."""

from plugin_bridge.hooks import HOOKS_FILE_NAME, convert_hooks, transpile_hooks
from plugin_bridge.types import HookDeclaration, HookEvent, HookKind


def test_one_handler_per_event():
    declarations = [HookDeclaration(event=e, command=f"echo {e.name.lower()}", timeout=5) for e in HookEvent]

    script = transpile_hooks(declarations)

    for event in HookEvent:
        assert script.count(f'"{event.value}": async (input) =>') == 1
        assert f"echo {event.name.lower()}" in script
    assert script.count("// timeout: 5s") == len(HookEvent)


def test_handlers_follow_event_order():
    declarations = [
        HookDeclaration(event=HookEvent.MESSAGE_UPDATED, command="echo last"),
        HookDeclaration(event=HookEvent.TOOL_PRE_EXECUTE, command="echo first"),
    ]

    script = transpile_hooks(declarations)

    assert script.index('"tool.execute.before"') < script.index('"message.updated"')


def test_declarations_keep_source_order():
    declarations = [
        HookDeclaration(event=HookEvent.SESSION_IDLE, command="echo one"),
        HookDeclaration(event=HookEvent.SESSION_IDLE, command="echo two"),
        HookDeclaration(event=HookEvent.SESSION_IDLE, command="echo three"),
    ]

    script = transpile_hooks(declarations)

    assert script.index("echo one") < script.index("echo two") < script.index("echo three")
    assert script.count('"session.idle"') == 1


def test_tool_matcher_becomes_condition():
    script = transpile_hooks(
        [HookDeclaration(event=HookEvent.TOOL_PRE_EXECUTE, command="echo before", matcher="Write|Edit")]
    )

    assert "// Matcher: Write|Edit" in script
    assert 'if (input.tool === "write" || input.tool === "edit") { await $`echo before` }' in script


def test_wildcard_or_regex_matcher_has_no_condition():
    script = transpile_hooks(
        [
            HookDeclaration(event=HookEvent.TOOL_POST_EXECUTE, command="echo any", matcher="*"),
            HookDeclaration(event=HookEvent.TOOL_POST_EXECUTE, command="echo mcp", matcher="mcp__.*"),
        ]
    )

    assert "input.tool" not in script
    assert "await $`echo any`" in script
    assert "await $`echo mcp`" in script


def test_session_events_ignore_tool_matcher():
    script = transpile_hooks([HookDeclaration(event=HookEvent.SESSION_CREATED, command="echo start", matcher="startup")])

    assert "input.tool" not in script
    assert "// Matcher: startup" in script


def test_timeout_comment_only_when_declared():
    script = transpile_hooks(
        [
            HookDeclaration(event=HookEvent.SESSION_CREATED, command="echo a"),
            HookDeclaration(event=HookEvent.SESSION_CREATED, command="echo b", timeout=30),
        ]
    )

    assert script.count("// timeout:") == 1
    assert script.index("// timeout: 30s") < script.index("echo b")


def test_zero_timeout_is_annotated():
    script = transpile_hooks([HookDeclaration(event=HookEvent.SESSION_IDLE, command="echo a", timeout=0)])

    assert "// timeout: 0s" in script


def test_multiline_matcher_and_agent_stay_in_comments():
    """Newlines in annotated values must not leak into the generated code."""
    script = transpile_hooks(
        [
            HookDeclaration(event=HookEvent.SESSION_CREATED, command="echo a", matcher="a\nrm -rf"),
            HookDeclaration(
                event=HookEvent.TOOL_PRE_EXECUTE,
                matcher="Write",
                kind=HookKind.AGENT,
                agent="sentinel\nprocess.exit(1)",
            ),
        ]
    )

    assert "// Matcher: a rm -rf" in script
    assert "// Agent hook for Write: sentinel process.exit(1)" in script
    for line in script.splitlines():
        assert not line.strip().startswith(("rm -rf", "process.exit"))


def test_prompt_and_agent_hooks_are_annotated():
    script = transpile_hooks(
        [
            HookDeclaration(
                event=HookEvent.TOOL_PRE_EXECUTE,
                matcher="Write|Edit",
                kind=HookKind.PROMPT,
                prompt="Check the diff\nbefore writing.",
            ),
            HookDeclaration(
                event=HookEvent.TOOL_PRE_EXECUTE,
                matcher="Write|Edit",
                kind=HookKind.AGENT,
                agent="security-sentinel",
            ),
        ]
    )

    assert "// Prompt hook for Write|Edit: Check the diff before writing." in script
    assert "// Agent hook for Write|Edit: security-sentinel" in script
    assert "await $" not in script


def test_command_is_escaped_for_template_literal():
    script = transpile_hooks(
        [HookDeclaration(event=HookEvent.SESSION_CREATED, command="echo `date` ${CLAUDE_PLUGIN_ROOT}")]
    )

    assert "await $`echo \\`date\\` \\${CLAUDE_PLUGIN_ROOT}`" in script


def test_script_exports_plugin():
    script = transpile_hooks([HookDeclaration(event=HookEvent.SESSION_IDLE, command="echo idle")])

    assert script.startswith('import type { Plugin } from "@opencode-ai/plugin"')
    assert "export const ConvertedHooks: Plugin = async ({ $ }) => {" in script
    assert script.endswith("export default ConvertedHooks\n")


def test_convert_hooks_none_without_declarations():
    assert convert_hooks(None) is None
    assert convert_hooks([]) is None


def test_convert_hooks_names_file():
    hook_file = convert_hooks([HookDeclaration(event=HookEvent.SESSION_IDLE, command="echo idle")])

    assert hook_file.name == HOOKS_FILE_NAME == "converted-hooks.ts"
    assert "echo idle" in hook_file.content
