"""Tests for the notified-channel state file."""

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from yt_ban_watch.state import NotificationState, load_state, save_state


class TestLoadState(unittest.TestCase):
    def test_missing_file_is_empty(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            state = load_state(Path(tmpdir) / "state.json")
            self.assertEqual(state.notified_channel_ids, {})

    def test_invalid_json_is_empty(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "state.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertLogs("yt_ban_watch.state", level="WARNING"):
                state = load_state(path)
            self.assertEqual(state.notified_channel_ids, {})

    def test_wrong_shape_is_empty(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "state.json"
            for doc in ("[1, 2, 3]", '{"notifiedChannelIds": ["111"]}', "{}"):
                path.write_text(doc, encoding="utf-8")
                self.assertEqual(load_state(path).notified_channel_ids, {})

    def test_reads_existing_ids(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "state.json"
            path.write_text(
                json.dumps({"notifiedChannelIds": {"111": "2024-03-05T00:00:00.000Z"}}),
                encoding="utf-8",
            )
            state = load_state(path)
            self.assertTrue(state.has_notified("111"))
            self.assertFalse(state.has_notified("222"))


class TestSaveState(unittest.TestCase):
    def test_save_then_load(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "state.json"
            state = NotificationState()
            state.record("222", "2024-03-05T09:00:00.000Z")
            save_state(state, path)

            on_disk = json.loads(path.read_text(encoding="utf-8"))
            self.assertEqual(on_disk, {"notifiedChannelIds": {"222": "2024-03-05T09:00:00.000Z"}})
            self.assertEqual(load_state(path), state)

    def test_overwrite_leaves_no_temp_files(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "state.json"
            state = NotificationState()
            state.record("1", "a")
            save_state(state, path)
            state.record("2", "b")
            save_state(state, path)

            self.assertEqual([p.name for p in Path(tmpdir).iterdir()], ["state.json"])
            self.assertEqual(set(load_state(path).notified_channel_ids), {"1", "2"})

    def test_failed_replace_keeps_previous_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "state.json"
            state = NotificationState()
            state.record("1", "a")
            save_state(state, path)
            before = path.read_text(encoding="utf-8")

            state.record("2", "b")
            with mock.patch("yt_ban_watch.state.os.replace", side_effect=OSError("disk full")):
                with self.assertRaises(OSError):
                    save_state(state, path)

            self.assertEqual([p.name for p in Path(tmpdir).iterdir()], ["state.json"])
            self.assertEqual(path.read_text(encoding="utf-8"), before)

    def test_failed_write_removes_temp_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "state.json"
            with mock.patch("yt_ban_watch.state.json.dump", side_effect=TypeError("not serializable")):
                with self.assertRaises(TypeError):
                    save_state(NotificationState({"1": "a"}), path)

            self.assertEqual(list(Path(tmpdir).iterdir()), [])

    def test_record_stringifies_ids(self):
        state = NotificationState()
        state.record(333, "t1")
        self.assertTrue(state.has_notified("333"))
        self.assertEqual(state.to_dict(), {"notifiedChannelIds": {"333": "t1"}})


if __name__ == "__main__":
    unittest.main()
