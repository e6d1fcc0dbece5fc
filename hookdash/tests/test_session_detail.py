import unittest

from hookdash.models import LogEvent
from hookdash.session_detail import build_session_detail, get_session_events, truncate_detail


def _event(event, session_id, ts, cwd=None, **data):
    payload = {"event": event, "session_id": session_id, "ts": ts}
    if cwd is not None:
        payload["cwd"] = cwd
    if data:
        payload["data"] = data
    return LogEvent.model_validate(payload)


EVENTS = [
    _event("SessionStart", "session-aaa-111", "2024-01-01T00:00:00Z", cwd="/project-a"),
    _event("PreToolUse", "session-aaa-111", "2024-01-01T00:01:00Z", tool_name="Read", tool_use_id="t1", tool_input_summary="file.ts"),
    _event("PostToolUse", "session-aaa-111", "2024-01-01T00:01:01Z", tool_name="Read", tool_use_id="t1"),
    _event("PreToolUse", "session-bbb-222", "2024-01-01T00:01:30Z", tool_name="Bash", tool_use_id="t3", tool_input_summary="npm test"),
    _event("UserPromptSubmit", "session-aaa-111", "2024-01-01T00:00:30Z", prompt="/review-pr 12"),
    _event("PreToolUse", "session-aaa-111", "2024-01-01T00:03:00Z", tool_name="Skill", tool_use_id="sk1", tool_input_summary="commit"),
    _event("SessionEnd", "session-aaa-111", "2024-01-01T00:04:00Z"),
]


class SessionDetailTests(unittest.TestCase):
    def test_prefix_match_selects_session_events(self) -> None:
        matched = get_session_events(EVENTS, "session-aaa")

        self.assertEqual(len(matched), 6)
        self.assertTrue(all(ev.session_id == "session-aaa-111" for ev in matched))
        self.assertEqual(len(get_session_events(EVENTS, "")), len(EVENTS))

    def test_detail_for_matching_session(self) -> None:
        detail = build_session_detail(EVENTS, "session-aaa")

        self.assertEqual(detail.sessionId, "session-aaa")
        self.assertEqual(detail.eventCount, 6)
        self.assertEqual(detail.firstTs, "2024-01-01T00:00:00Z")
        self.assertEqual(detail.lastTs, "2024-01-01T00:04:00Z")
        self.assertEqual(detail.cwd, "/project-a")
        self.assertEqual([(u.name, u.count) for u in detail.tools], [("Read", 2), ("Skill", 1)])
        self.assertEqual([(u.name, u.count) for u in detail.skills], [("review-pr", 1), ("commit", 1)])

    def test_events_ordered_by_timestamp_with_details(self) -> None:
        detail = build_session_detail(EVENTS, "session-aaa-111")

        self.assertEqual(
            [item.event for item in detail.events],
            ["SessionStart", "UserPromptSubmit", "PreToolUse", "PostToolUse", "PreToolUse", "SessionEnd"],
        )
        prompt_item = detail.events[1]
        self.assertIsNone(prompt_item.tool)
        self.assertEqual(prompt_item.detail, "/review-pr 12")
        read_item = detail.events[2]
        self.assertEqual((read_item.tool, read_item.detail), ("Read", "file.ts"))
        self.assertIsNone(detail.events[3].detail)

    def test_unknown_session_yields_empty_detail(self) -> None:
        detail = build_session_detail(EVENTS, "session-zzz")

        self.assertEqual(detail.sessionId, "session-zzz")
        self.assertEqual(detail.eventCount, 0)
        self.assertIsNone(detail.firstTs)
        self.assertIsNone(detail.lastTs)
        self.assertEqual(detail.cwd, "")
        self.assertEqual(detail.tools, [])
        self.assertEqual(detail.skills, [])
        self.assertEqual(detail.events, [])

    def test_truncate_detail_keeps_total(self) -> None:
        detail = build_session_detail(EVENTS, "session-aaa")

        truncated = truncate_detail(detail, 2)
        self.assertEqual(len(truncated["events"]), 2)
        self.assertEqual(truncated["totalEventsInSession"], 6)
        self.assertTrue(truncated["truncated"])
        self.assertEqual(truncated["eventCount"], 6)

        full = truncate_detail(detail, 100)
        self.assertEqual(len(full["events"]), 6)
        self.assertFalse(full["truncated"])


if __name__ == "__main__":
    unittest.main()
