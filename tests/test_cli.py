"""Tests for the plugin-bridge command line and user config."""

import json

import pytest

from plugin_bridge import cli, config
from plugin_bridge.types import AgentMode, ConversionOptions, PermissionMode
from plugin_bridge.utils import parse_frontmatter


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's real ~/.config out of the tests."""
    config_file = tmp_path / "config" / "config.json"
    monkeypatch.setattr(config, "CONFIG_FILE", config_file)
    return config_file


class _FakePrompt:
    def __init__(self, answer):
        self.answer = answer

    def ask(self):
        return self.answer


def test_load_config_defaults(isolated_config):
    assert config.load_config() == config.DEFAULT_CONFIG


def test_load_config_merges_known_keys(isolated_config):
    isolated_config.parent.mkdir(parents=True)
    isolated_config.write_text(json.dumps({"agent_mode": "primary", "unknown": 1}), encoding="utf-8")

    loaded = config.load_config()

    assert loaded["agent_mode"] == "primary"
    assert "unknown" not in loaded


def test_load_config_invalid_json_falls_back(isolated_config):
    isolated_config.parent.mkdir(parents=True)
    isolated_config.write_text("{broken", encoding="utf-8")

    assert config.load_config() == config.DEFAULT_CONFIG


def test_build_options_overrides_win():
    options = config.build_options(config.DEFAULT_CONFIG, agent_mode="primary", permissions=None)

    assert options == ConversionOptions(
        agent_mode=AgentMode.PRIMARY,
        infer_temperature=True,
        permissions=PermissionMode.BROAD,
    )


def test_build_options_invalid_values_use_defaults():
    options = config.build_options({**config.DEFAULT_CONFIG, "agent_mode": "boss", "permissions": "all"})

    assert options.agent_mode is AgentMode.SUBAGENT
    assert options.permissions is PermissionMode.BROAD


def test_convert_command(fixture_root, tmp_path):
    output = tmp_path / "out"

    code = cli.main([
        "convert", str(fixture_root), "-o", str(output),
        "--agent-mode", "primary", "--permissions", "from-commands", "--no-infer-temperature", "--force",
    ])

    assert code == 0
    data, _ = parse_frontmatter((output / "agents" / "security-sentinel.md").read_text(encoding="utf-8"))
    assert data["mode"] == "primary"
    assert "temperature" not in data
    opencode_json = json.loads((output / "opencode.json").read_text(encoding="utf-8"))
    assert opencode_json["permission"]["read"]["*"] == "deny"


def test_convert_uses_config_defaults(fixture_root, tmp_path, isolated_config):
    isolated_config.parent.mkdir(parents=True)
    isolated_config.write_text(json.dumps({"permissions": "none"}), encoding="utf-8")
    output = tmp_path / "out"

    assert cli.main(["convert", str(fixture_root), "-o", str(output), "--force"]) == 0

    opencode_json = json.loads((output / "opencode.json").read_text(encoding="utf-8"))
    assert "permission" not in opencode_json


def test_convert_declined_overwrite(fixture_root, tmp_path, monkeypatch):
    output = tmp_path / "out"
    output.mkdir()
    (output / "existing.txt").write_text("keep", encoding="utf-8")
    monkeypatch.setattr(cli.questionary, "confirm", lambda *a, **kw: _FakePrompt(False))

    assert cli.main(["convert", str(fixture_root), "-o", str(output)]) == 0

    assert not (output / "opencode.json").exists()


def test_convert_missing_source(tmp_path, capsys):
    assert cli.main(["convert", str(tmp_path / "missing"), "-o", str(tmp_path / "out")]) == 1
    assert "Plugin directory not found" in capsys.readouterr().out


def test_inspect_command(fixture_root, capsys):
    assert cli.main(["inspect", str(fixture_root)]) == 0

    out = capsys.readouterr().out
    assert "compound-engineering 1.0.0" in out
    assert "agents:   2" in out
    assert "commands: 4" in out
    assert "context7" in out


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 0
    assert "usage: plugin-bridge" in capsys.readouterr().out
