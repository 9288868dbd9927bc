import argparse
import logging
import sys
from pathlib import Path

import questionary
from questionary import Style

from .claude_loader import PluginLoadError, load_claude_plugin
from .config import load_config, build_options
from .opencode_conv import convert_claude_to_opencode
from .opencode_writer import write_opencode_bundle
from .types import AgentMode, PermissionMode
from .utils import Colors, print_error, print_info, print_success

# Questionary style (no background highlight on selected items)
CUSTOM_STYLE = Style([
    ('qmark', 'fg:#00d4ff bold'),
    ('question', 'bold'),
    ('answer', 'fg:#00d4ff bold'),
    ('pointer', 'fg:#00d4ff bold'),
    ('highlighted', 'fg:#00d4ff bold bg:default'),
    ('selected', 'fg:#00d4ff bold bg:default'),
])


def _load_plugin(source: str):
    try:
        return load_claude_plugin(source)
    except PluginLoadError as e:
        print(f"{Colors.RED}❌ {e}{Colors.ENDC}")
        return None


def _confirm_overwrite(output_root: Path, force: bool) -> bool:
    if force or not output_root.exists() or not any(output_root.iterdir()):
        return True
    return bool(questionary.confirm(
        f"Found existing '{output_root}'. Overwrite converted files?",
        default=True,
        style=CUSTOM_STYLE,
    ).ask())


def run_convert(args) -> int:
    plugin = _load_plugin(args.source)
    if plugin is None:
        return 1

    options = build_options(
        load_config(),
        agent_mode=args.agent_mode,
        permissions=args.permissions,
        infer_temperature=False if args.no_infer_temperature else None,
    )

    output_root = Path(args.output).resolve()
    if not _confirm_overwrite(output_root, args.force):
        print(f"{Colors.YELLOW}⏭️  Skipping OpenCode conversion.{Colors.ENDC}")
        return 0

    print(f"{Colors.HEADER}🏗️  Converting {plugin.manifest.name} to OpenCode format...{Colors.ENDC}")
    bundle = convert_claude_to_opencode(plugin, options)
    stats = write_opencode_bundle(bundle, output_root)

    print_success(f"{stats['agents']} agents")
    print_success(f"{len(bundle.config.get('command', {}))} commands")
    print_success(f"{stats['skills']} skills")
    if stats["plugins"]:
        print_success(f"{stats['plugins']} hook plugin(s)")
    if "mcp" in bundle.config:
        print_success(f"{len(bundle.config['mcp'])} MCP servers")

    if stats["errors"]:
        for error in stats["errors"]:
            print_error(error)
        print(f"{Colors.RED}❌ Conversion finished with {len(stats['errors'])} error(s).{Colors.ENDC}")
        return 1

    print(f"{Colors.GREEN}✅ OpenCode bundle written to {output_root}{Colors.ENDC}")
    return 0


def run_inspect(args) -> int:
    plugin = _load_plugin(args.source)
    if plugin is None:
        return 1

    version = f" {plugin.manifest.version}" if plugin.manifest.version else ""
    print(f"{Colors.BLUE}📦 {plugin.manifest.name}{version}{Colors.ENDC} ({plugin.root})")
    print_info(f"agents:   {len(plugin.agents)}")
    print_info(f"commands: {len(plugin.commands)}")
    print_info(f"skills:   {len(plugin.skills)}")
    print_info(f"hooks:    {len(plugin.hooks or [])}")
    print_info(f"mcp:      {', '.join(plugin.mcp_servers or {}) or '-'}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="plugin-bridge",
        description="Convert Claude Code plugins to OpenCode.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Convert Subcommand
    convert_parser = subparsers.add_parser("convert", help="Convert a plugin to OpenCode format")
    convert_parser.add_argument("source", help="Path to the Claude Code plugin directory")
    convert_parser.add_argument("--output", "-o", default=".opencode", help="Output directory (default: .opencode)")
    convert_parser.add_argument(
        "--agent-mode",
        choices=[m.value for m in AgentMode],
        default=None,
        help="Mode for converted agents",
    )
    convert_parser.add_argument(
        "--permissions",
        choices=[m.value for m in PermissionMode],
        default=None,
        help="How to build the permission block",
    )
    convert_parser.add_argument(
        "--no-infer-temperature",
        action="store_true",
        help="Do not add a temperature to agents on precise models",
    )
    convert_parser.add_argument("--force", "-f", action="store_true", help="Force overwrite without prompt")

    # Inspect Subcommand
    inspect_parser = subparsers.add_parser("inspect", help="Summarize a plugin without converting")
    inspect_parser.add_argument("source", help="Path to the Claude Code plugin directory")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "convert":
        return run_convert(args)
    if args.command == "inspect":
        return run_inspect(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
