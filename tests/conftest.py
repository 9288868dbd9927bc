"""Shared fixtures for tests."""

import pytest
from pathlib import Path

from plugin_bridge.claude_loader import load_claude_plugin
from plugin_bridge.types import (
    AgentMode,
    ClaudeAgent,
    ClaudeCommand,
    ClaudePlugin,
    ConversionOptions,
    PermissionMode,
    PluginManifest,
)

FIXTURE_ROOT = Path(__file__).parent / "fixtures" / "sample-plugin"


@pytest.fixture
def fixture_root():
    return FIXTURE_ROOT


@pytest.fixture
def sample_plugin():
    """The sample plugin under tests/fixtures, loaded from disk."""
    return load_claude_plugin(FIXTURE_ROOT)


@pytest.fixture
def make_plugin():
    """Build an in-memory plugin without touching disk."""

    def _make(agents=None, commands=None, skills=None, hooks=None, mcp_servers=None):
        return ClaudePlugin(
            root="/tmp/plugin",
            manifest=PluginManifest(name="fixture", version="1.0.0"),
            agents=agents or [],
            commands=commands or [],
            skills=skills or [],
            hooks=hooks,
            mcp_servers=mcp_servers,
        )

    return _make


@pytest.fixture
def make_agent():
    def _make(name="test-agent", body="Test agent.", **kwargs):
        kwargs.setdefault("description", f"{name} description")
        return ClaudeAgent(name=name, body=body, source_path=f"/tmp/plugin/agents/{name}.md", **kwargs)

    return _make


@pytest.fixture
def make_command():
    def _make(name="review", body="Review the code.", **kwargs):
        kwargs.setdefault("description", f"{name} command")
        return ClaudeCommand(name=name, body=body, source_path=f"/tmp/plugin/commands/{name}.md", **kwargs)

    return _make


@pytest.fixture
def make_options():
    def _make(agent_mode="subagent", infer_temperature=False, permissions="none"):
        return ConversionOptions(
            agent_mode=AgentMode(agent_mode),
            infer_temperature=infer_temperature,
            permissions=PermissionMode(permissions),
        )

    return _make
