"""Rewrite Claude Code config directory references for OpenCode."""

import re

# ~/.claude/ is the user-level config dir; OpenCode keeps it under XDG
_RE_HOME_CLAUDE_DIR = re.compile(r"~/\.claude/")
# .claude/ only when it starts a path segment (not "foo.claude/")
_RE_CLAUDE_DIR = re.compile(r"(?<![\w.~-])\.claude/")

HOME_TARGET_DIR = "~/.config/opencode/"
TARGET_DIR = ".opencode/"


def rewrite_claude_paths(text: str) -> str:
    """Rewrite .claude/ directory prefixes to .opencode/, leaving everything else verbatim."""
    text = _RE_HOME_CLAUDE_DIR.sub(HOME_TARGET_DIR, text)
    return _RE_CLAUDE_DIR.sub(TARGET_DIR, text)
