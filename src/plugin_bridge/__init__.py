"""
Plugin Bridge - converts Claude Code plugins to OpenCode.

Converts a Claude Code plugin (agents, commands, skills, hooks, MCP servers)
into an OpenCode bundle:
- opencode.json (commands, permissions, MCP servers)
- agents/*.md
- plugins/converted-hooks.ts
- skills/<name>/SKILL.md
"""

__version__ = "1.0.0"

from plugin_bridge.opencode_conv import convert_claude_to_opencode
from plugin_bridge.types import ConversionOptions, OpenCodeBundle

__all__ = [
    "convert_claude_to_opencode",
    "ConversionOptions",
    "OpenCodeBundle",
    "cli",
    "claude_loader",
    "opencode_writer",
    "utils",
]
