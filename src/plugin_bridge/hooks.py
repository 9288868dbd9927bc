"""
Hook Transpiler
Turns Claude Code hook declarations into an OpenCode plugin module.

Output: converted-hooks.ts, one handler per lifecycle event that has hooks.

Reference: https://opencode.ai/docs/plugins/
"""

from typing import Dict, List, Optional, Sequence

from .types import GeneratedFile, HookDeclaration, HookEvent, HookKind

HOOKS_FILE_NAME = "converted-hooks.ts"

_HEADER = 'import type { Plugin } from "@opencode-ai/plugin"\n\n'
_OPEN = "export const ConvertedHooks: Plugin = async ({ $ }) => {\n  return {\n"
_CLOSE = "  }\n}\n\nexport default ConvertedHooks\n"

_INDENT = "      "


def _escape_template(command: str) -> str:
    """Escape a shell command for a JS template literal."""
    return command.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def _one_line(text: str) -> str:
    return " ".join(text.split())


def _tool_names(matcher: Optional[str]) -> List[str]:
    if not matcher:
        return []
    tools = [t.strip().lower() for t in matcher.split("|") if t.strip()]
    if "*" in tools or any(not t.isidentifier() for t in tools):
        # wildcard or regex matcher, cannot be expressed as a tool check
        return []
    return tools


def _render_declaration(declaration: HookDeclaration) -> List[str]:
    matcher = _one_line(declaration.matcher or "*")
    lines = []
    if declaration.matcher:
        lines.append(f"// Matcher: {matcher}")
    if declaration.timeout is not None:
        lines.append(f"// timeout: {declaration.timeout}s")

    if declaration.kind is HookKind.PROMPT:
        lines.append(f"// Prompt hook for {matcher}: {_one_line(declaration.prompt or '')}")
        return lines
    if declaration.kind is HookKind.AGENT:
        lines.append(f"// Agent hook for {matcher}: {_one_line(declaration.agent or '')}")
        return lines

    statement = f"await $`{_escape_template(declaration.command or '')}`"
    tools = _tool_names(declaration.matcher) if declaration.event.is_tool_event else []
    if tools:
        condition = " || ".join(f'input.tool === "{tool}"' for tool in tools)
        statement = f"if ({condition}) {{ {statement} }}"
    lines.append(statement)
    return lines


def _render_handler(event: HookEvent, declarations: Sequence[HookDeclaration]) -> str:
    body: List[str] = []
    for declaration in declarations:
        body.extend(_render_declaration(declaration))
    rendered = "\n".join(f"{_INDENT}{line}" for line in body)
    return f'    "{event.value}": async (input) => {{\n{rendered}\n    }}'


def transpile_hooks(declarations: Sequence[HookDeclaration]) -> str:
    """Generate the plugin source for the given hook declarations."""
    by_event: Dict[HookEvent, List[HookDeclaration]] = {}
    for declaration in declarations:
        by_event.setdefault(declaration.event, []).append(declaration)

    handlers = [_render_handler(event, by_event[event]) for event in HookEvent if event in by_event]
    body = ",\n".join(handlers)
    if body:
        body += ",\n"
    return f"{_HEADER}{_OPEN}{body}{_CLOSE}"


def convert_hooks(declarations: Optional[Sequence[HookDeclaration]]) -> Optional[GeneratedFile]:
    """Wrap transpiled hooks as a plugin file, or None when there is nothing to emit."""
    if not declarations:
        return None
    return GeneratedFile(name=HOOKS_FILE_NAME, content=transpile_hooks(declarations))
