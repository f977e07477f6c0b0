import json
import logging
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))

from kbscreen_core.logging_setup import JsonFormatter, get_logger, log_dir


class LoggingSetupTests(unittest.TestCase):
    def test_json_formatter_includes_known_extras(self):
        record = logging.LogRecord("kbscreen.stream", logging.INFO, __file__, 1, "send_ok", None, None)
        record.event = "send_ok"
        record.packets_sent = 3
        record.unrelated = "dropped"

        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["level"], "INFO")
        self.assertEqual(payload["logger"], "kbscreen.stream")
        self.assertEqual(payload["msg"], "send_ok")
        self.assertEqual(payload["event"], "send_ok")
        self.assertEqual(payload["packets_sent"], 3)
        self.assertNotIn("unrelated", payload)

    def test_child_loggers_share_root(self):
        self.assertEqual(get_logger().name, "kbscreen")
        self.assertEqual(get_logger("stream").name, "kbscreen.stream")

    def test_log_dir_created_under_root(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = log_dir(Path(tmp))
            self.assertTrue(path.is_dir())
            self.assertEqual(path.name, "logs")


if __name__ == "__main__":
    unittest.main()
