"""
OpenCode Bundle Writer
Writes an OpenCodeBundle to disk.

Output structure:
- <output>/opencode.json
- <output>/agents/*.md
- <output>/plugins/*
- <output>/skills/<skill-name>/SKILL.md (+ the skill's other files)
"""

import json
from pathlib import Path
from typing import Any, Dict

from .types import GeneratedFile, OpenCodeBundle
from .utils import ensure_dir, logger, safe_copy, validate_path_within_project

CONFIG_FILE_NAME = "opencode.json"


def _drop_none(value: Any) -> Any:
    """JSON has no "undefined": omit keys whose value is None."""
    if isinstance(value, dict):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_none(v) for v in value]
    return value


def _write_text(dest: Path, content: str, output_root: Path) -> bool:
    if not validate_path_within_project(dest, output_root):
        logger.warning("Refusing to write outside %s: %s", output_root, dest)
        return False
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(content, encoding="utf-8")
        return True
    except OSError as e:
        logger.warning("Error writing %s: %s", dest, e)
        return False


def write_config(config: Dict[str, Any], output_root: Path) -> bool:
    content = json.dumps(_drop_none(config), indent=2, ensure_ascii=False) + "\n"
    return _write_text(output_root / CONFIG_FILE_NAME, content, output_root)


def write_agent(agent: GeneratedFile, output_root: Path) -> bool:
    # "review:security" -> agents/review/security.md
    relative = Path(*agent.name.split(":")).with_suffix(".md")
    return _write_text(output_root / "agents" / relative, agent.content, output_root)


def write_plugin(plugin: GeneratedFile, output_root: Path) -> bool:
    return _write_text(output_root / "plugins" / plugin.name, plugin.content, output_root)


def write_skill(skill: GeneratedFile, output_root: Path) -> bool:
    dest_skill_dir = output_root / "skills" / skill.name
    if not validate_path_within_project(dest_skill_dir, output_root):
        logger.warning("Refusing to write outside %s: %s", output_root, dest_skill_dir)
        return False

    # Copy supporting files (scripts, references) before writing SKILL.md
    source_dir = Path(skill.source_path).parent if skill.source_path else None
    if source_dir is not None and source_dir.is_dir():
        for item in source_dir.iterdir():
            if item.name == "SKILL.md":
                continue
            if not safe_copy(item, dest_skill_dir / item.name):
                return False

    return _write_text(dest_skill_dir / "SKILL.md", skill.content, output_root)


def write_opencode_bundle(bundle: OpenCodeBundle, output_root: Path) -> Dict[str, Any]:
    """
    Write every part of the bundle under output_root.

    Returns:
        Dict with counts per kind and a list of errors
    """
    output_root = Path(output_root)
    stats: Dict[str, Any] = {"agents": 0, "plugins": 0, "skills": 0, "errors": []}

    if not ensure_dir(output_root):
        stats["errors"].append(f"output:{output_root}")
        return stats

    if not write_config(bundle.config, output_root):
        stats["errors"].append(f"config:{CONFIG_FILE_NAME}")

    for agent in bundle.agents:
        if write_agent(agent, output_root):
            stats["agents"] += 1
        else:
            stats["errors"].append(f"agent:{agent.name}")

    for plugin in bundle.plugins:
        if write_plugin(plugin, output_root):
            stats["plugins"] += 1
        else:
            stats["errors"].append(f"plugin:{plugin.name}")

    for skill in bundle.skills:
        if write_skill(skill, output_root):
            stats["skills"] += 1
        else:
            stats["errors"].append(f"skill:{skill.name}")

    return stats
