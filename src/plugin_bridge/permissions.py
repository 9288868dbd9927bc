"""
Permission Resolver
Builds the OpenCode `permission` block from Claude command tool declarations.

Modes:
- none:          no permission block
- broad:         every known capability allowed
- from-commands: union of what the plugin's commands declare or visibly use

Reference: https://opencode.ai/docs/permissions/
"""

import re
from enum import Enum
from typing import Dict, Iterable, Iterator, Optional, Tuple, Union

from .types import ClaudeCommand, PermissionMode
from .utils import logger

ALLOW = "allow"
DENY = "deny"
WILDCARD = "*"

PermissionValue = Union[str, Dict[str, str]]


class Capability(str, Enum):
    READ = "read"
    WRITE = "write"
    EDIT = "edit"
    BASH = "bash"
    GREP = "grep"
    GLOB = "glob"
    LIST = "list"
    WEBFETCH = "webfetch"
    SKILL = "skill"
    PATCH = "patch"
    TASK = "task"
    QUESTION = "question"
    TODOWRITE = "todowrite"
    TODOREAD = "todoread"


# Capabilities whose decision can be scoped by a pattern
PATTERN_CAPABILITIES = (Capability.BASH, Capability.READ)

# Claude Code tool name (lowercased) -> OpenCode capability
TOOL_CAPABILITY_MAP = {
    "read": Capability.READ,
    "write": Capability.WRITE,
    "edit": Capability.EDIT,
    "notebookedit": Capability.EDIT,
    "multiedit": Capability.PATCH,
    "patch": Capability.PATCH,
    "bash": Capability.BASH,
    "grep": Capability.GREP,
    "glob": Capability.GLOB,
    "ls": Capability.LIST,
    "list": Capability.LIST,
    "webfetch": Capability.WEBFETCH,
    "websearch": Capability.WEBFETCH,
    "skill": Capability.SKILL,
    "task": Capability.TASK,
    "agent": Capability.TASK,
    "askuserquestion": Capability.QUESTION,
    "question": Capability.QUESTION,
    "todowrite": Capability.TODOWRITE,
    "todoread": Capability.TODOREAD,
}

_RE_TOOL_SPEC = re.compile(r"^\s*([A-Za-z_][\w-]*)\s*(?:\((.*)\))?\s*$", re.DOTALL)
# !`git status` -- inline shell execution in a command body
_RE_BASH_EXEC = re.compile(r"!`([^`\n]+)`")
# @src/app.py -- file reference in a command body
_RE_FILE_REF = re.compile(r"(?<![\w@])@([\w.~/-]*[\w~-])")
# code samples are not references (@pytest.fixture, `@obj.attr`)
_RE_CODE_FENCE = re.compile(r"^[ \t]*(```|~~~).*?^[ \t]*\1[ \t]*$", re.DOTALL | re.MULTILINE)
_RE_CODE_SPAN = re.compile(r"`[^`\n]*`")
# trailing ":*" in "git add:*"
_RE_PREFIX_MARKER = re.compile(r":\*\s*$")

Decision = Tuple[Capability, str, str]  # (capability, pattern, allow|deny)


def parse_tool_spec(spec: str) -> Tuple[Optional[Capability], Optional[str]]:
    """Parse "Bash(git:*)" into (Capability.BASH, "git:*"). Unknown tools give (None, None)."""
    match = _RE_TOOL_SPEC.match(spec)
    if not match:
        return None, None
    capability = TOOL_CAPABILITY_MAP.get(match.group(1).lower())
    if capability is None:
        return None, None
    pattern = match.group(2)
    if pattern is not None:
        pattern = pattern.strip() or None
    return capability, pattern


def normalize_pattern(capability: Capability, pattern: str) -> str:
    if capability is Capability.BASH:
        # Claude's "git:*" prefix syntax -> OpenCode glob "git *"
        return " ".join(_RE_PREFIX_MARKER.sub(" *", pattern).split())
    return pattern


def _spec_decisions(specs: Optional[Iterable[str]], decision: str) -> Iterator[Decision]:
    for spec in specs or ():
        capability, pattern = parse_tool_spec(spec)
        if capability is None:
            logger.debug("No OpenCode capability for tool %r", spec)
            continue
        if pattern is None or capability not in PATTERN_CAPABILITIES:
            yield capability, WILDCARD, decision
        else:
            normalized = normalize_pattern(capability, pattern)
            yield capability, normalized if normalized not in ("", "**") else WILDCARD, decision


def _is_file_ref(ref: str) -> bool:
    # ".env", "./x", "docs/plan.md"; dotted names like "pytest.fixture" are not paths
    if ref.startswith("."):
        return True
    return "/" in ref and "." in ref.rsplit("/", 1)[-1]


def _inferred_decisions(body: str) -> Iterator[Decision]:
    for match in _RE_BASH_EXEC.finditer(body):
        words = match.group(1).split()
        if words:
            yield Capability.BASH, f"{words[0]} *", ALLOW
    prose = _RE_CODE_SPAN.sub("", _RE_CODE_FENCE.sub("", body))
    for match in _RE_FILE_REF.finditer(prose):
        if _is_file_ref(match.group(1)):
            yield Capability.READ, match.group(1), ALLOW


def command_decisions(command: ClaudeCommand) -> Iterator[Decision]:
    """Every permission decision a single command contributes."""
    yield from _spec_decisions(command.allowed_tools, ALLOW)
    yield from _spec_decisions(command.denied_tools, DENY)
    yield from _inferred_decisions(command.body)


def _merge(current: Optional[str], new: str) -> str:
    # allow wins, so the fold does not depend on command order
    return ALLOW if ALLOW in (current, new) else DENY


def _finalize(capability: Capability, decisions: Dict[str, str]) -> PermissionValue:
    if capability not in PATTERN_CAPABILITIES:
        return ALLOW if ALLOW in decisions.values() else DENY

    specific = {p: d for p, d in decisions.items() if p != WILDCARD}
    if not specific:
        return decisions[WILDCARD]

    result: Dict[str, str] = {}
    if WILDCARD in decisions:
        result[WILDCARD] = decisions[WILDCARD]
    elif capability is Capability.READ and ALLOW in specific.values():
        # deny by default, allow by exception
        result[WILDCARD] = DENY
    for pattern in sorted(specific):
        result[pattern] = specific[pattern]
    return result


def permissions_from_commands(commands: Iterable[ClaudeCommand]) -> Dict[str, PermissionValue]:
    accumulated: Dict[Capability, Dict[str, str]] = {}
    for command in commands:
        for capability, pattern, decision in command_decisions(command):
            per_capability = accumulated.setdefault(capability, {})
            per_capability[pattern] = _merge(per_capability.get(pattern), decision)

    return {
        capability.value: _finalize(capability, accumulated[capability])
        for capability in Capability
        if capability in accumulated
    }


def broad_permissions() -> Dict[str, PermissionValue]:
    return {capability.value: ALLOW for capability in Capability}


def resolve_permissions(
    commands: Iterable[ClaudeCommand], mode: PermissionMode
) -> Optional[Dict[str, PermissionValue]]:
    """Compute the OpenCode permission map for the given mode (None for "none")."""
    mode = PermissionMode(mode)
    if mode is PermissionMode.NONE:
        return None
    if mode is PermissionMode.BROAD:
        return broad_permissions()
    return permissions_from_commands(commands)
