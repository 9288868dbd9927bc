"""
User defaults for conversion options.

Stored in: ~/.config/plugin-bridge/config.json
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from .types import AgentMode, ConversionOptions, PermissionMode
from .utils import logger

CONFIG_DIR = Path.home() / ".config" / "plugin-bridge"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_CONFIG = {
    "agent_mode": AgentMode.SUBAGENT.value,
    "infer_temperature": True,
    "permissions": PermissionMode.BROAD.value,
}


def load_config(config_file: Optional[Path] = None) -> Dict[str, Any]:
    """Load user defaults, falling back to DEFAULT_CONFIG for missing or invalid files."""
    config_file = config_file or CONFIG_FILE
    config = dict(DEFAULT_CONFIG)
    if not config_file.exists():
        return config
    try:
        data = json.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Ignoring config %s: %s", config_file, e)
        return config
    if isinstance(data, dict):
        config.update({k: v for k, v in data.items() if k in DEFAULT_CONFIG})
    return config


def build_options(config: Dict[str, Any], **overrides: Any) -> ConversionOptions:
    """
    Build ConversionOptions from a config dict; non-None overrides win.
    Invalid values fall back to the built-in defaults.
    """
    merged = dict(config)
    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        agent_mode = AgentMode(merged["agent_mode"])
    except ValueError:
        logger.warning("Invalid agent_mode %r, using default", merged["agent_mode"])
        agent_mode = AgentMode(DEFAULT_CONFIG["agent_mode"])

    try:
        permissions = PermissionMode(merged["permissions"])
    except ValueError:
        logger.warning("Invalid permissions %r, using default", merged["permissions"])
        permissions = PermissionMode(DEFAULT_CONFIG["permissions"])

    return ConversionOptions(
        agent_mode=agent_mode,
        infer_temperature=bool(merged["infer_temperature"]),
        permissions=permissions,
    )
