import logging
import re
import shutil
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

# Configure module logger
logger = logging.getLogger("plugin_bridge")


# ANSI colors
class Colors:
    HEADER = "\033[95m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    BOLD = "\033[1m"
    ENDC = "\033[0m"


def print_success(text: str) -> None:
    """Print success message."""
    print(f"  ✓ {text}")


def print_error(text: str) -> None:
    """Print error message."""
    print(f"  ✗ {text}")


def print_info(text: str) -> None:
    """Print info message."""
    print(f"  ℹ {text}")


# =============================================================================
# FILE UTILITIES
# =============================================================================


def validate_path_within_project(path: Path, project_root: Path = None) -> bool:
    """
    Validate that a path stays within the project root.
    Prevents path traversal attacks (e.g., ../../etc/passwd).
    """
    project_root = project_root or Path.cwd()
    try:
        resolved = path.resolve()
        project_resolved = project_root.resolve()
        return resolved == project_resolved or project_resolved in resolved.parents
    except (OSError, ValueError):
        return False


def safe_read_text(path: Path, encoding: str = "utf-8") -> Optional[str]:
    """
    Safely read text file with encoding fallback.
    Returns None if file cannot be read.
    """
    for enc in [encoding, "utf-8-sig", "latin-1"]:
        try:
            return path.read_text(encoding=enc)
        except UnicodeDecodeError:
            continue
        except OSError as e:
            logger.warning("Error reading %s: %s", path, e)
            return None
    logger.warning("Could not decode %s with any known encoding", path)
    return None


def safe_copy(src: Path, dest: Path, overwrite: bool = True) -> bool:
    """Safely copy file or directory."""
    try:
        if dest.exists() and not overwrite:
            return False

        dest.parent.mkdir(parents=True, exist_ok=True)

        if src.is_dir():
            shutil.copytree(src, dest, dirs_exist_ok=True)
        else:
            shutil.copy2(src, dest)

        return True
    except OSError as e:
        logger.warning("Error copying %s to %s: %s", src, dest, e)
        return False


def ensure_dir(path: Path) -> bool:
    """Ensure directory exists."""
    try:
        path.mkdir(parents=True, exist_ok=True)
        return True
    except OSError as e:
        logger.warning("Error creating directory %s: %s", path, e)
        return False


# =============================================================================
# FRONTMATTER
# =============================================================================

_RE_FRONTMATTER = re.compile(
    r"\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)(?:\r?\n)?",
    re.DOTALL | re.MULTILINE,
)


def parse_frontmatter(content: str) -> Tuple[Dict[str, Any], str]:
    """
    Split markdown content into (frontmatter, body).

    Content without a leading ``---`` block, with an unterminated block or with
    YAML that is not a mapping yields ``({}, content)``.
    """
    match = _RE_FRONTMATTER.match(content)
    if not match:
        return {}, content

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        logger.warning("Ignoring malformed frontmatter: %s", e)
        return {}, content

    if data is None:
        data = {}
    if not isinstance(data, dict):
        logger.warning("Ignoring frontmatter that is not a mapping (%s)", type(data).__name__)
        return {}, content

    return data, content[match.end():]


def format_frontmatter(data: Mapping[str, Any], body: str) -> str:
    """Render frontmatter + body. Keys keep insertion order."""
    fm_str = yaml.safe_dump(dict(data), default_flow_style=False, allow_unicode=True, sort_keys=False)
    return f"---\n{fm_str}---\n\n{body}"
