import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

from hookdash.errors import SettingsFileError
from hookdash.scripts import manage_hooks
from hookdash.settings_merge import load_settings, merge_hooks, remove_hooks_by_config, save_settings


LOGGER_CMD = "hookdash-log-event"

HOOKS_CONFIG = {
    "hooks": {
        "SessionStart": [{"hooks": [{"type": "command", "command": LOGGER_CMD}]}],
        "PreToolUse": [{"matcher": "*", "hooks": [{"type": "command", "command": LOGGER_CMD}]}],
    }
}


class MergeHooksTests(unittest.TestCase):
    def test_merge_into_empty_settings(self) -> None:
        merged = merge_hooks({}, HOOKS_CONFIG)

        self.assertEqual(merged["hooks"], HOOKS_CONFIG["hooks"])
        self.assertIsNot(merged["hooks"]["SessionStart"], HOOKS_CONFIG["hooks"]["SessionStart"])

    def test_merge_is_idempotent(self) -> None:
        once = merge_hooks({"theme": "dark"}, HOOKS_CONFIG)
        twice = merge_hooks(once, HOOKS_CONFIG)

        self.assertEqual(once, twice)
        self.assertEqual(twice["theme"], "dark")
        self.assertEqual(len(twice["hooks"]["PreToolUse"]), 1)

    def test_merge_appends_next_to_foreign_hooks(self) -> None:
        settings = {"hooks": {"PreToolUse": [{"matcher": "Bash", "hooks": [{"type": "command", "command": "guard.sh"}]}]}}

        merged = merge_hooks(settings, HOOKS_CONFIG)

        commands = [group["hooks"][0]["command"] for group in merged["hooks"]["PreToolUse"]]
        self.assertEqual(commands, ["guard.sh", LOGGER_CMD])
        self.assertEqual(len(settings["hooks"]["PreToolUse"]), 1)

    def test_merge_without_hooks_section(self) -> None:
        self.assertEqual(merge_hooks({"a": 1}, {}), {"a": 1})

    def test_remove_prunes_empty_containers(self) -> None:
        installed = merge_hooks({"model": "opus"}, HOOKS_CONFIG)

        removed = remove_hooks_by_config(installed, HOOKS_CONFIG)

        self.assertEqual(removed, {"model": "opus"})

    def test_remove_keeps_foreign_hooks(self) -> None:
        settings = {
            "hooks": {
                "PreToolUse": [
                    {
                        "matcher": "*",
                        "hooks": [
                            {"type": "command", "command": LOGGER_CMD},
                            {"type": "command", "command": "guard.sh"},
                        ],
                    }
                ],
                "SessionStart": [{"hooks": [{"type": "command", "command": LOGGER_CMD}]}],
            }
        }

        removed = remove_hooks_by_config(settings, HOOKS_CONFIG)

        self.assertEqual(
            removed["hooks"],
            {"PreToolUse": [{"matcher": "*", "hooks": [{"type": "command", "command": "guard.sh"}]}]},
        )

    def test_remove_when_nothing_installed(self) -> None:
        self.assertEqual(remove_hooks_by_config({"x": 1}, HOOKS_CONFIG), {"x": 1})


class SettingsFileTests(unittest.TestCase):
    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.root = Path(tmpdir.name)
        self.settings_path = self.root / "claude" / "settings.json"
        self.config_path = self.root / "hooks.json"
        self.config_path.write_text(json.dumps(HOOKS_CONFIG), encoding="utf-8")

    def test_load_missing_or_blank_settings(self) -> None:
        self.assertEqual(load_settings(self.settings_path), {})
        self.settings_path.parent.mkdir(parents=True)
        self.settings_path.write_text("  \n", encoding="utf-8")
        self.assertEqual(load_settings(self.settings_path), {})

    def test_load_invalid_settings(self) -> None:
        self.settings_path.parent.mkdir(parents=True)
        self.settings_path.write_text("{oops", encoding="utf-8")
        with self.assertRaises(SettingsFileError) as ctx:
            load_settings(self.settings_path)
        self.assertTrue(str(ctx.exception).startswith(f"Invalid JSON in {self.settings_path}"))

        self.settings_path.write_text("[]", encoding="utf-8")
        with self.assertRaises(SettingsFileError):
            load_settings(self.settings_path)

    def test_save_round_trips_and_leaves_no_temp_files(self) -> None:
        save_settings(self.settings_path, {"hooks": {}, "n": 1})

        self.assertEqual(load_settings(self.settings_path), {"hooks": {}, "n": 1})
        self.assertEqual([p.name for p in self.settings_path.parent.iterdir()], ["settings.json"])

    def _run(self, *argv: str) -> tuple[int, str]:
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = manage_hooks.main(list(argv))
        return code, out.getvalue()

    def test_cli_install_and_uninstall(self) -> None:
        args = ("--config", str(self.config_path), "--settings", str(self.settings_path))

        code, out = self._run("install", *args)
        self.assertEqual(code, 0)
        self.assertIn("hooks merged successfully", out)
        self.assertEqual(load_settings(self.settings_path)["hooks"], HOOKS_CONFIG["hooks"])

        code, out = self._run("install", *args)
        self.assertEqual(code, 0)
        self.assertIn("already registered", out)

        code, out = self._run("uninstall", *args)
        self.assertEqual(code, 0)
        self.assertIn("hooks removed successfully", out)
        self.assertEqual(load_settings(self.settings_path), {})

        code, out = self._run("uninstall", *args)
        self.assertIn("no matching hooks found", out)

    def test_cli_reports_invalid_settings(self) -> None:
        self.settings_path.parent.mkdir(parents=True)
        self.settings_path.write_text("{bad", encoding="utf-8")
        err = io.StringIO()

        with contextlib.redirect_stderr(err):
            code, _ = self._run("install", "--config", str(self.config_path), "--settings", str(self.settings_path))

        self.assertEqual(code, 1)
        self.assertIn("Invalid JSON in", err.getvalue())
        self.assertEqual(self.settings_path.read_text(encoding="utf-8"), "{bad")


if __name__ == "__main__":
    unittest.main()
