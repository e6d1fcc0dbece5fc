import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from hookdash.parsers.events import read_log_file
from hookdash.scripts import log_event, rotate_logs


class LogEventScriptTests(unittest.TestCase):
    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.log_dir = Path(tmpdir.name)

    def _run(self, stdin: str) -> int:
        argv = ["hookdash-log-event", "--log-dir", str(self.log_dir)]
        with patch("sys.argv", argv), patch("sys.stdin", io.StringIO(stdin)):
            return log_event.main()

    def test_payload_is_appended(self) -> None:
        code = self._run(json.dumps({"hook_event_name": "UserPromptSubmit", "session_id": "s1", "prompt": "/deploy"}))

        self.assertEqual(code, 0)
        events = read_log_file(self.log_dir, "hook-events.jsonl")
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].prompt, "/deploy")

    def test_bad_payload_still_exits_zero(self) -> None:
        with self.assertLogs("hookdash.ingest", level="WARNING"):
            code = self._run("{truncated")

        self.assertEqual(code, 0)
        self.assertFalse((self.log_dir / "hook-events.jsonl").exists())


class RotateLogsScriptTests(unittest.TestCase):
    def test_rotates_into_dated_archive(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_dir = Path(tmp)
            (log_dir / "hook-events.jsonl").write_text(
                json.dumps({"ts": "2026-02-15T10:00:00.000Z", "event": "Stop"}) + "\n",
                encoding="utf-8",
            )
            out = io.StringIO()
            argv = ["hookdash-rotate-logs", "--log-dir", tmp, "--today", "2026-02-16"]
            with patch("sys.argv", argv), contextlib.redirect_stdout(out):
                code = rotate_logs.main()

            self.assertEqual(code, 0)
            self.assertIn("hook-events.2026-02-15.jsonl", out.getvalue())
            self.assertTrue((log_dir / "hook-events.2026-02-15.jsonl").exists())

            out = io.StringIO()
            with patch("sys.argv", argv), contextlib.redirect_stdout(out):
                rotate_logs.main()
            self.assertIn("No rotation needed.", out.getvalue())


if __name__ == "__main__":
    unittest.main()
