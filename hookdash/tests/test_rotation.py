import json
import tempfile
import unittest
from pathlib import Path

from hookdash.rotation import rotate_log


def _line(ts: str, event: str = "Stop") -> str:
    return json.dumps({"ts": ts, "event": event, "session_id": "s1"}) + "\n"


class RotateLogTests(unittest.TestCase):
    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.log_dir = Path(tmpdir.name)
        self.current = self.log_dir / "hook-events.jsonl"

    def test_missing_or_empty_log_is_left_alone(self) -> None:
        self.assertIsNone(rotate_log(self.log_dir, today="2026-02-16"))
        self.current.write_text("", encoding="utf-8")
        self.assertIsNone(rotate_log(self.log_dir, today="2026-02-16"))
        self.assertTrue(self.current.exists())

    def test_todays_log_is_not_rotated(self) -> None:
        self.current.write_text(_line("2026-02-16T00:00:01.000Z"), encoding="utf-8")

        self.assertIsNone(rotate_log(self.log_dir, today="2026-02-16"))
        self.assertEqual(sorted(p.name for p in self.log_dir.iterdir()), ["hook-events.jsonl"])

    def test_previous_day_is_renamed(self) -> None:
        content = _line("2026-02-15T08:00:00.000Z") + _line("2026-02-16T01:00:00.000Z")
        self.current.write_text(content, encoding="utf-8")

        archive = rotate_log(self.log_dir, today="2026-02-16")

        self.assertEqual(archive, self.log_dir / "hook-events.2026-02-15.jsonl")
        self.assertEqual(archive.read_text(encoding="utf-8"), content)
        self.assertFalse(self.current.exists())

    def test_existing_archive_is_appended(self) -> None:
        earlier = _line("2026-02-15T01:00:00.000Z")
        later = _line("2026-02-15T09:00:00.000Z")
        archive_path = self.log_dir / "hook-events.2026-02-15.jsonl"
        archive_path.write_text(earlier, encoding="utf-8")
        self.current.write_text(later, encoding="utf-8")

        archive = rotate_log(self.log_dir, today="2026-02-16")

        self.assertEqual(archive, archive_path)
        self.assertEqual(archive_path.read_text(encoding="utf-8"), earlier + later)
        self.assertEqual(self.current.read_text(encoding="utf-8"), "")

    def test_unparseable_first_line_is_not_rotated(self) -> None:
        self.current.write_text("garbage\n" + _line("2026-02-15T01:00:00.000Z"), encoding="utf-8")

        self.assertIsNone(rotate_log(self.log_dir, today="2026-02-16"))
        self.assertTrue(self.current.exists())


if __name__ == "__main__":
    unittest.main()
