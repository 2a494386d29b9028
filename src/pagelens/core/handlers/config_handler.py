# src/pagelens/core/handlers/config_handler.py
import argparse
import json
import logging

from pagelens.core.managers.config_manager import config_manager

logger = logging.getLogger(__name__)

ACTIONS = ("list", "get", "set", "reset")

USAGE = """
Usage:
  pagelens config list                Show the current configuration as JSON.
  pagelens config get <key>           Show one value (e.g., analysis.deadline_seconds).
  pagelens config set <key> <value>   Change a value and save it to settings.json (e.g., debug.level INFO).
  pagelens config reset               Discard saved changes and restore the shipped defaults.
"""


def register(subparsers) -> None:
    parser = subparsers.add_parser("config", help="Inspect or change runtime settings.")
    parser.add_argument("action", nargs="?", choices=ACTIONS)
    parser.add_argument("key", nargs="?")
    parser.add_argument("value", nargs="*")


def handle_config(args: argparse.Namespace) -> int:
    """Handles the 'config' command for viewing and modifying settings."""
    command = args.action
    if not command:
        print(USAGE)
        return 1

    if command == "list":
        print(json.dumps(config_manager.get_all(), indent=2))
        return 0

    if command == "get":
        if not args.key:
            print("Usage: pagelens config get <key>")
            return 1
        value = config_manager.get_nested(args.key)
        if value is None:
            print(f"❌ Unknown config key '{args.key}'.")
            return 1
        print(json.dumps(value, indent=2) if isinstance(value, (dict, list)) else value)
        return 0

    if command == "set":
        if not args.key or not args.value:
            print("Usage: pagelens config set <key> <value>")
            return 1
        value = " ".join(args.value)
        if value.startswith('"') and value.endswith('"'):
            value = value[1:-1]

        if not config_manager.set_nested(args.key, value):
            print(f"❌ Error: Failed to set config value for key '{args.key}'.")
            return 1
        if not config_manager.save():
            config_manager.load()
            print("❌ Error: Could not save settings.json; nothing was changed.")
            return 1
        new_value = config_manager.get_nested(args.key)
        print(f"✅ Config saved: {args.key} = {new_value} (type: {type(new_value).__name__})")
        return 0

    if not config_manager.reset():
        print("❌ Error: Could not remove the saved settings.")
        return 1
    print("✅ Configuration has been reset to the shipped defaults.")
    return 0
