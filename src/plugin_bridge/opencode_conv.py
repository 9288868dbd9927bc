"""
OpenCode Converter
Converts a loaded Claude Code plugin into an OpenCode bundle.

Output structure (in memory, written by opencode_writer):
- config: opencode.json contents (command, permission, mcp)
- agents: agents/*.md (frontmatter: name, description, mode, model, temperature)
- plugins: plugins/converted-hooks.ts (generated from Claude hooks)
- skills: skills/<skill-name>/SKILL.md

Reference: https://opencode.ai/docs/config/
           https://opencode.ai/docs/agents/
           https://opencode.ai/docs/commands/
"""

from typing import Any, Dict, List, Mapping, Optional

from .hooks import convert_hooks
from .models import infer_temperature, resolve_model
from .paths import rewrite_claude_paths
from .permissions import resolve_permissions
from .types import (
    AgentMode,
    ClaudeAgent,
    ClaudeCommand,
    ClaudePlugin,
    ClaudeSkill,
    ConversionOptions,
    GeneratedFile,
    LocalMcpServer,
    McpServerSpec,
    OpenCodeBundle,
)
from .utils import format_frontmatter, logger

OPENCODE_SCHEMA = "https://opencode.ai/config.json"


# =============================================================================
# OPENCODE FORMAT HELPERS
# =============================================================================

def generate_agent_frontmatter(agent: ClaudeAgent, options: ConversionOptions) -> Dict[str, Any]:
    """Frontmatter for an OpenCode agent. Key order is fixed."""
    frontmatter: Dict[str, Any] = {
        "name": agent.name,
        "description": agent.description,
        "mode": AgentMode(options.agent_mode).value,
    }

    model = resolve_model(agent.model)
    if model:
        frontmatter["model"] = model

    temperature = agent.temperature
    if temperature is None and options.infer_temperature:
        temperature = infer_temperature(model)
    if temperature is not None:
        frontmatter["temperature"] = temperature

    return frontmatter


def generate_command_config(command: ClaudeCommand) -> Dict[str, Any]:
    """Entry for opencode.json `command` map."""
    entry: Dict[str, Any] = {
        "description": command.description,
        "template": rewrite_claude_paths(command.body),
    }

    model = resolve_model(command.model)
    if model:
        entry["model"] = model

    return entry


def normalize_mcp_server(server: McpServerSpec) -> Dict[str, Any]:
    if isinstance(server, LocalMcpServer):
        return {
            "type": "local",
            "command": list(server.command),
            "environment": server.environment,
            "enabled": server.enabled,
        }
    return {
        "type": "remote",
        "url": server.url,
        "headers": server.headers,
        "enabled": server.enabled,
    }


# =============================================================================
# CONVERSION FUNCTIONS
# =============================================================================

def convert_agent(agent: ClaudeAgent, options: ConversionOptions) -> GeneratedFile:
    frontmatter = generate_agent_frontmatter(agent, options)
    content = format_frontmatter(frontmatter, rewrite_claude_paths(agent.body))
    return GeneratedFile(name=agent.name, content=content, source_path=agent.source_path)


def convert_commands(commands: List[ClaudeCommand]) -> Dict[str, Dict[str, Any]]:
    result: Dict[str, Dict[str, Any]] = {}
    for command in commands:
        if command.disable_model_invocation:
            logger.debug("Skipping command %s (disable-model-invocation)", command.name)
            continue
        result[command.name] = generate_command_config(command)
    return result


def convert_skill(skill: ClaudeSkill) -> GeneratedFile:
    frontmatter = {"name": skill.name, "description": skill.description}
    content = format_frontmatter(frontmatter, rewrite_claude_paths(skill.body))
    return GeneratedFile(name=skill.name, content=content, source_path=skill.source_path)


def convert_mcp(servers: Mapping[str, McpServerSpec]) -> Dict[str, Dict[str, Any]]:
    return {name: normalize_mcp_server(server) for name, server in servers.items()}


def convert_claude_to_opencode(
    plugin: ClaudePlugin, options: Optional[ConversionOptions] = None
) -> OpenCodeBundle:
    """
    Main conversion function for OpenCode format.

    Args:
        plugin: Fully loaded Claude Code plugin (not modified)
        options: Conversion options, defaults when omitted

    Returns:
        OpenCodeBundle with config, agent files, plugin files and skill files
    """
    options = options or ConversionOptions()

    config: Dict[str, Any] = {"$schema": OPENCODE_SCHEMA}

    commands = convert_commands(plugin.commands)
    if commands:
        config["command"] = commands

    permission = resolve_permissions(plugin.commands, options.permissions)
    if permission is not None:
        config["permission"] = permission

    if plugin.mcp_servers:
        config["mcp"] = convert_mcp(plugin.mcp_servers)

    hooks_file = convert_hooks(plugin.hooks)

    bundle = OpenCodeBundle(
        config=config,
        agents=[convert_agent(agent, options) for agent in plugin.agents],
        plugins=[hooks_file] if hooks_file else [],
        skills=[convert_skill(skill) for skill in plugin.skills],
    )

    logger.debug(
        "Converted %s: %d agents, %d commands, %d skills, %d plugins",
        plugin.manifest.name,
        len(bundle.agents),
        len(commands),
        len(bundle.skills),
        len(bundle.plugins),
    )
    return bundle
