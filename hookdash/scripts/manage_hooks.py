#!/usr/bin/env python3
"""Install or uninstall hookdash hooks in an agent settings.json.

Usage:
  hookdash-hooks install --config hooks.json --settings ~/.claude/settings.json
  hookdash-hooks uninstall --config hooks.json --settings ~/.claude/settings.json
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from hookdash.errors import SettingsFileError
from hookdash.settings_merge import load_settings, merge_hooks, remove_hooks_by_config, save_settings


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("command", choices=["install", "uninstall"])
    parser.add_argument("--config", required=True, help="Hooks config JSON to install or remove")
    parser.add_argument("--settings", required=True, help="Target settings.json")
    args = parser.parse_args(argv)

    config_path = Path(args.config).expanduser().resolve()
    settings_path = Path(args.settings).expanduser().resolve()

    try:
        hooks_config = load_settings(config_path)
        settings = load_settings(settings_path)
    except SettingsFileError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if args.command == "install":
        updated = merge_hooks(settings, hooks_config)
        unchanged_msg = "settings.json: hooks already registered, no changes needed."
        changed_msg = "settings.json: hooks merged successfully."
    else:
        updated = remove_hooks_by_config(settings, hooks_config)
        unchanged_msg = "settings.json: no matching hooks found, no changes needed."
        changed_msg = "settings.json: hooks removed successfully."

    if updated == settings:
        print(unchanged_msg)
    else:
        save_settings(settings_path, updated)
        print(changed_msg)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
