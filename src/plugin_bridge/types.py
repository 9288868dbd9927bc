"""Shared types and data structures for Plugin Bridge."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class AgentMode(str, Enum):
    PRIMARY = "primary"
    SUBAGENT = "subagent"


class PermissionMode(str, Enum):
    NONE = "none"
    BROAD = "broad"
    FROM_COMMANDS = "from-commands"


class HookEvent(Enum):
    """
    Lifecycle events a hook can be attached to.
    Values are the OpenCode hook identifiers, declaration order is emit order.
    """
    TOOL_PRE_EXECUTE = "tool.execute.before"
    TOOL_POST_EXECUTE = "tool.execute.after"
    SESSION_CREATED = "session.created"
    SESSION_DELETED = "session.deleted"
    SESSION_IDLE = "session.idle"
    SESSION_COMPACTING = "experimental.session.compacting"
    PERMISSION_REQUESTED = "permission.requested"
    PERMISSION_REPLIED = "permission.replied"
    MESSAGE_CREATED = "message.created"
    MESSAGE_UPDATED = "message.updated"

    @property
    def is_tool_event(self) -> bool:
        return self in (
            HookEvent.TOOL_PRE_EXECUTE,
            HookEvent.TOOL_POST_EXECUTE,
            HookEvent.PERMISSION_REQUESTED,
            HookEvent.PERMISSION_REPLIED,
        )


class HookKind(str, Enum):
    COMMAND = "command"
    PROMPT = "prompt"
    AGENT = "agent"


# =============================================================================
# SOURCE (CLAUDE CODE) MODEL
# =============================================================================


@dataclass(frozen=True)
class PluginManifest:
    name: str
    version: Optional[str] = None


@dataclass(frozen=True)
class ClaudeAgent:
    name: str
    description: str
    body: str
    source_path: str
    model: Optional[str] = None
    tools: Optional[List[str]] = None
    temperature: Optional[float] = None


@dataclass(frozen=True)
class ClaudeCommand:
    name: str  # may be hierarchical, e.g. "workflows:review"
    description: str
    body: str
    source_path: str
    model: Optional[str] = None
    disable_model_invocation: bool = False
    allowed_tools: Optional[List[str]] = None
    denied_tools: Optional[List[str]] = None
    argument_hint: Optional[str] = None


@dataclass(frozen=True)
class ClaudeSkill:
    name: str
    description: str
    body: str
    source_path: str


@dataclass(frozen=True)
class HookDeclaration:
    """One hook entry. Several declarations may share an event; order matters."""
    event: HookEvent
    command: Optional[str] = None
    matcher: Optional[str] = None
    timeout: Optional[int] = None  # seconds
    kind: HookKind = HookKind.COMMAND
    prompt: Optional[str] = None
    agent: Optional[str] = None


@dataclass(frozen=True)
class LocalMcpServer:
    command: List[str]
    environment: Optional[Dict[str, str]] = None
    enabled: bool = True


@dataclass(frozen=True)
class RemoteMcpServer:
    url: str
    headers: Optional[Dict[str, str]] = None
    enabled: bool = True


McpServerSpec = Union[LocalMcpServer, RemoteMcpServer]


@dataclass(frozen=True)
class ClaudePlugin:
    root: str
    manifest: PluginManifest
    agents: List[ClaudeAgent] = field(default_factory=list)
    commands: List[ClaudeCommand] = field(default_factory=list)
    skills: List[ClaudeSkill] = field(default_factory=list)
    hooks: Optional[List[HookDeclaration]] = None
    mcp_servers: Optional[Dict[str, McpServerSpec]] = None


# =============================================================================
# CONVERSION OPTIONS / TARGET (OPENCODE) MODEL
# =============================================================================


@dataclass(frozen=True)
class ConversionOptions:
    agent_mode: AgentMode = AgentMode.SUBAGENT
    infer_temperature: bool = True
    permissions: PermissionMode = PermissionMode.BROAD


@dataclass
class GeneratedFile:
    name: str
    content: str
    source_path: Optional[str] = None


@dataclass
class OpenCodeBundle:
    config: Dict[str, Any]
    agents: List[GeneratedFile] = field(default_factory=list)
    plugins: List[GeneratedFile] = field(default_factory=list)
    skills: List[GeneratedFile] = field(default_factory=list)
