"""Install and remove hookdash hook registrations in an agent settings.json.

A hooks config has the same shape as the ``hooks`` section of settings.json::

    {"hooks": {"<EventName>": [{"matcher": "...", "hooks": [{"type": "command", "command": "..."}]}]}}

Merging is keyed on the command string, so re-running an install is a no-op.
"""
from __future__ import annotations

import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from hookdash.errors import SettingsFileError


def load_settings(path: Path) -> dict[str, Any]:
    path = Path(path)
    if not path.exists():
        return {}
    content = path.read_text(encoding="utf-8").strip()
    if not content:
        return {}
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as exc:
        raise SettingsFileError(str(path), str(exc)) from exc
    if not isinstance(parsed, dict):
        raise SettingsFileError(str(path), "top-level value is not an object")
    return parsed


def save_settings(path: Path, settings: dict[str, Any]) -> None:
    """Write settings atomically via a temp file in the same directory."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=".settings-merge-", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(json.dumps(settings, indent=2) + "\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _is_command_hook(hook: Any, command: str | None = None) -> bool:
    if not isinstance(hook, dict) or hook.get("type") != "command":
        return False
    return command is None or hook.get("command") == command


def _first_command(groups: list[Any]) -> str | None:
    first = groups[0] if groups else None
    hooks = first.get("hooks") if isinstance(first, dict) else None
    if not isinstance(hooks, list) or not hooks or not isinstance(hooks[0], dict):
        return None
    return hooks[0].get("command") or None


def _has_command(groups: list[Any], command: str) -> bool:
    for group in groups:
        hooks = group.get("hooks") if isinstance(group, dict) else None
        if isinstance(hooks, list) and any(_is_command_hook(hook, command) for hook in hooks):
            return True
    return False


def merge_hooks(settings: dict[str, Any], hooks_config: dict[str, Any]) -> dict[str, Any]:
    """Return settings with every event's config groups registered once."""
    result = dict(settings)
    config_hooks = (hooks_config or {}).get("hooks")
    if not config_hooks:
        return result

    merged_hooks = dict(result.get("hooks") or {})
    result["hooks"] = merged_hooks

    for event_name, config_groups in config_hooks.items():
        if not isinstance(config_groups, list) or not config_groups:
            continue
        target_command = _first_command(config_groups)
        if not target_command:
            continue

        existing = merged_hooks.get(event_name)
        if not existing:
            merged_hooks[event_name] = copy.deepcopy(config_groups)
            continue
        if not isinstance(existing, list):
            continue
        if not _has_command(existing, target_command):
            merged_hooks[event_name] = [*existing, *copy.deepcopy(config_groups)]

    return result


def remove_hooks_by_config(settings: dict[str, Any], hooks_config: dict[str, Any]) -> dict[str, Any]:
    """Return settings without any command hook named in ``hooks_config``.

    Matcher groups left with no hooks are dropped, then events left with no
    groups, then the ``hooks`` key itself if it ends up empty.
    """
    result = dict(settings)
    config_hooks = (hooks_config or {}).get("hooks")
    if not config_hooks or not result.get("hooks"):
        return result

    commands: set[str] = set()
    for groups in config_hooks.values():
        if not isinstance(groups, list):
            continue
        for group in groups:
            hooks = group.get("hooks") if isinstance(group, dict) else None
            if not isinstance(hooks, list):
                continue
            commands.update(
                hook["command"] for hook in hooks if _is_command_hook(hook) and hook.get("command")
            )

    cleaned_hooks: dict[str, Any] = {}
    for event_name, groups in result["hooks"].items():
        if not isinstance(groups, list):
            cleaned_hooks[event_name] = groups
            continue
        kept_groups = []
        for group in groups:
            hooks = group.get("hooks") if isinstance(group, dict) else None
            if not isinstance(hooks, list):
                kept_groups.append(group)
                continue
            kept = [hook for hook in hooks if not (_is_command_hook(hook) and hook.get("command") in commands)]
            if kept:
                kept_groups.append({**group, "hooks": kept})
        if kept_groups:
            cleaned_hooks[event_name] = kept_groups

    if cleaned_hooks:
        result["hooks"] = cleaned_hooks
    else:
        result.pop("hooks", None)
    return result
