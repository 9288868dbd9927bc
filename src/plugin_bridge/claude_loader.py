"""
Claude Code Plugin Loader
Reads a plugin directory into a ClaudePlugin model.

Input structure:
- .claude-plugin/plugin.json (manifest; may inline "hooks" / "mcpServers")
- agents/**/*.md
- commands/**/*.md (commands/workflows/review.md -> "workflows:review")
- skills/<skill-name>/SKILL.md
- hooks/hooks.json
- .mcp.json

Reference: https://docs.claude.com/en/docs/claude-code/plugins-reference
"""

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .types import (
    ClaudeAgent,
    ClaudeCommand,
    ClaudePlugin,
    ClaudeSkill,
    HookDeclaration,
    HookEvent,
    HookKind,
    LocalMcpServer,
    McpServerSpec,
    PluginManifest,
    RemoteMcpServer,
)
from .utils import logger, parse_frontmatter, safe_read_text

MANIFEST_PATH = Path(".claude-plugin") / "plugin.json"
HOOKS_PATH = Path("hooks") / "hooks.json"
MCP_PATH = Path(".mcp.json")
PLUGIN_ROOT_VAR = "${CLAUDE_PLUGIN_ROOT}"

# Claude hook event -> OpenCode lifecycle event(s)
CLAUDE_HOOK_EVENTS = {
    "PreToolUse": (HookEvent.TOOL_PRE_EXECUTE,),
    "PostToolUse": (HookEvent.TOOL_POST_EXECUTE,),
    "PostToolUseFailure": (HookEvent.TOOL_POST_EXECUTE,),
    "SessionStart": (HookEvent.SESSION_CREATED,),
    "Setup": (HookEvent.SESSION_CREATED,),
    "SessionEnd": (HookEvent.SESSION_DELETED,),
    "Stop": (HookEvent.SESSION_IDLE,),
    "SubagentStop": (HookEvent.SESSION_IDLE,),
    "PreCompact": (HookEvent.SESSION_COMPACTING,),
    "PermissionRequest": (HookEvent.PERMISSION_REQUESTED, HookEvent.PERMISSION_REPLIED),
    "UserPromptSubmit": (HookEvent.MESSAGE_CREATED,),
    "Notification": (HookEvent.MESSAGE_UPDATED,),
}


class PluginLoadError(ValueError):
    """Raised when a directory is not a loadable Claude Code plugin."""


# =============================================================================
# FIELD HELPERS
# =============================================================================


def _split_top_level(value: str) -> List[str]:
    """Split "Read, Bash(git add:*, git commit:*)" on commas outside parentheses."""
    parts, depth, current = [], 0, []
    for ch in value:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        if ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]


def parse_tool_list(value: Any) -> Optional[List[str]]:
    """Frontmatter tool lists come as a comma string or a YAML list."""
    if value is None:
        return None
    if isinstance(value, str):
        return _split_top_level(value)
    if isinstance(value, list):
        tools: List[str] = []
        for item in value:
            tools.extend(_split_top_level(str(item)))
        return tools
    return None


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def _as_float(value: Any) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _as_str(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def _as_timeout(value: Any, event_name: str) -> Optional[int]:
    """Hook timeouts are whole seconds; anything unparseable is dropped."""
    if value is None or isinstance(value, bool):
        return None
    seconds = _as_float(value)
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        logger.warning("Invalid hook timeout %r in %s, ignoring", value, event_name)
        return None
    return int(seconds)


def _read_markdown(path: Path) -> Optional[Tuple[Dict[str, Any], str]]:
    content = safe_read_text(path)
    if content is None:
        return None
    return parse_frontmatter(content)


def _read_json(path: Path) -> Optional[Dict[str, Any]]:
    content = safe_read_text(path)
    if content is None:
        return None
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON in %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Expected a JSON object in %s", path)
        return None
    return data


# =============================================================================
# COMPONENT LOADERS
# =============================================================================


def load_agents(root: Path) -> List[ClaudeAgent]:
    agents = []
    if not (root / "agents").is_dir():
        return agents
    for path in sorted((root / "agents").rglob("*.md")):
        parsed = _read_markdown(path)
        if parsed is None:
            continue
        data, body = parsed
        agents.append(
            ClaudeAgent(
                name=str(data.get("name") or path.stem),
                description=str(data.get("description") or ""),
                body=body,
                source_path=str(path),
                model=_as_str(data.get("model")),
                tools=parse_tool_list(data.get("tools")),
                temperature=_as_float(data.get("temperature")),
            )
        )
    return agents


def load_commands(root: Path) -> List[ClaudeCommand]:
    commands_dir = root / "commands"
    commands = []
    if not commands_dir.is_dir():
        return commands
    for path in sorted(commands_dir.rglob("*.md")):
        parsed = _read_markdown(path)
        if parsed is None:
            continue
        data, body = parsed
        default_name = ":".join(path.relative_to(commands_dir).with_suffix("").parts)
        commands.append(
            ClaudeCommand(
                name=str(data.get("name") or default_name),
                description=str(data.get("description") or ""),
                body=body,
                source_path=str(path),
                model=_as_str(data.get("model")),
                disable_model_invocation=_as_bool(data.get("disable-model-invocation", False)),
                allowed_tools=parse_tool_list(data.get("allowed-tools")),
                denied_tools=parse_tool_list(data.get("disallowed-tools")),
                argument_hint=_as_str(data.get("argument-hint")),
            )
        )
    return commands


def load_skills(root: Path) -> List[ClaudeSkill]:
    skills = []
    if not (root / "skills").is_dir():
        return skills
    for path in sorted((root / "skills").glob("*/SKILL.md")):
        parsed = _read_markdown(path)
        if parsed is None:
            continue
        data, body = parsed
        skills.append(
            ClaudeSkill(
                name=str(data.get("name") or path.parent.name),
                description=str(data.get("description") or ""),
                body=body,
                source_path=str(path),
            )
        )
    return skills


def parse_hooks(config: Dict[str, Any], root: Path) -> List[HookDeclaration]:
    """Flatten Claude's {"hooks": {Event: [{matcher, hooks: [...]}]}} into declarations."""
    events = config.get("hooks", config)
    declarations: List[HookDeclaration] = []
    if not isinstance(events, dict):
        return declarations

    for event_name, matchers in events.items():
        targets = CLAUDE_HOOK_EVENTS.get(event_name)
        if targets is None:
            logger.warning("No OpenCode equivalent for hook event %s, skipping", event_name)
            continue
        if not isinstance(matchers, list):
            logger.warning("Hooks for %s must be a list, skipping", event_name)
            continue
        for matcher_entry in matchers:
            if not isinstance(matcher_entry, dict):
                logger.warning("Invalid matcher entry in %s, skipping: %r", event_name, matcher_entry)
                continue
            matcher = _as_str(matcher_entry.get("matcher")) or None
            hooks = matcher_entry.get("hooks") or []
            if not isinstance(hooks, list):
                logger.warning("Hooks for %s must be a list, skipping", event_name)
                continue
            for hook in hooks:
                if not isinstance(hook, dict):
                    logger.warning("Invalid hook in %s, skipping: %r", event_name, hook)
                    continue
                kind_name = hook.get("type", "command")
                try:
                    kind = HookKind(kind_name)
                except ValueError:
                    logger.warning("Unknown hook type %r in %s, skipping", kind_name, event_name)
                    continue
                command = _as_str(hook.get("command"))
                if command:
                    command = command.replace(PLUGIN_ROOT_VAR, str(root))
                timeout = _as_timeout(hook.get("timeout"), event_name)
                for event in targets:
                    declarations.append(
                        HookDeclaration(
                            event=event,
                            command=command,
                            matcher=matcher,
                            timeout=timeout,
                            kind=kind,
                            prompt=_as_str(hook.get("prompt")),
                            agent=_as_str(hook.get("agent")),
                        )
                    )
    return declarations


def parse_mcp_servers(servers: Dict[str, Any], root: Path) -> Dict[str, McpServerSpec]:
    result: Dict[str, McpServerSpec] = {}
    for name, server in servers.items():
        if not isinstance(server, dict):
            continue
        enabled = not _as_bool(server.get("disabled", False))
        if server.get("command"):
            cmd = server["command"]
            command = list(cmd) if isinstance(cmd, list) else [str(cmd)]
            command += [str(arg) for arg in server.get("args", [])]
            result[name] = LocalMcpServer(
                command=[part.replace(PLUGIN_ROOT_VAR, str(root)) for part in command],
                environment=server.get("env"),
                enabled=enabled,
            )
        elif server.get("url"):
            result[name] = RemoteMcpServer(
                url=server["url"],
                headers=server.get("headers"),
                enabled=enabled,
            )
        else:
            logger.warning("MCP server %s has neither command nor url, skipping", name)
    return result


# =============================================================================
# ENTRY POINT
# =============================================================================


def load_claude_plugin(root_dir) -> ClaudePlugin:
    """
    Load a Claude Code plugin from disk.

    Raises:
        PluginLoadError: root does not exist or is not a directory
    """
    root = Path(root_dir).resolve()
    if not root.is_dir():
        raise PluginLoadError(f"Plugin directory not found: {root}")

    manifest_path = root / MANIFEST_PATH
    manifest_data = (_read_json(manifest_path) if manifest_path.exists() else None) or {}
    manifest = PluginManifest(
        name=str(manifest_data.get("name") or root.name),
        version=_as_str(manifest_data.get("version")),
    )

    hooks_config = manifest_data.get("hooks")
    if not isinstance(hooks_config, dict):
        hooks_config = _read_json(root / HOOKS_PATH) if (root / HOOKS_PATH).exists() else None
    hooks = parse_hooks(hooks_config, root) if hooks_config else None

    mcp_config = manifest_data.get("mcpServers")
    if not isinstance(mcp_config, dict):
        mcp_file = _read_json(root / MCP_PATH) if (root / MCP_PATH).exists() else None
        mcp_config = (mcp_file or {}).get("mcpServers")
    mcp_servers = parse_mcp_servers(mcp_config, root) if mcp_config else None

    plugin = ClaudePlugin(
        root=str(root),
        manifest=manifest,
        agents=load_agents(root),
        commands=load_commands(root),
        skills=load_skills(root),
        hooks=hooks or None,
        mcp_servers=mcp_servers or None,
    )
    logger.debug(
        "Loaded plugin %s: %d agents, %d commands, %d skills",
        manifest.name,
        len(plugin.agents),
        len(plugin.commands),
        len(plugin.skills),
    )
    return plugin
