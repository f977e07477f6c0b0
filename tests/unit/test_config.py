import json
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))

from kbscreen_core.config import AppConfig, load_config, min_report_length, save_config


class ConfigTests(unittest.TestCase):
    def test_load_default_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg = load_config(Path(tmp) / "missing.json")
            self.assertIsInstance(cfg, AppConfig)
            self.assertEqual(cfg.device.vendor_id, 0x4B42)
            self.assertEqual(cfg.device.product_id, 0x6072)
            self.assertEqual(cfg.device.usage_page, 0xFF60)
            self.assertEqual(cfg.device.report_length, 32)
            self.assertIsNone(cfg.render.font_path)

    def test_save_and_reload(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "config.json"
            cfg = load_config(path)
            cfg.stream.poll_ms = 750
            cfg.render.font_path = "/fonts/nanotype.ttf"
            cfg.render.show_metrics = False
            save_config(cfg, path)
            reloaded = load_config(path)
            self.assertEqual(reloaded.stream.poll_ms, 750)
            self.assertEqual(reloaded.render.font_path, "/fonts/nanotype.ttf")
            self.assertFalse(reloaded.render.show_metrics)

    def test_corrupt_file_falls_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())

    def test_unknown_keys_ignored_and_values_normalized(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            raw = {
                "display": {"width": 130, "height": 64, "colour": "amber"},
                "device": {"report_length": 1},
                "stream": {"poll_ms": 5},
            }
            path.write_text(json.dumps(raw), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.display.width, 128)
            self.assertFalse(hasattr(cfg.display, "colour"))
            self.assertEqual(cfg.device.report_length, 6)
            self.assertEqual(cfg.stream.poll_ms, 200)

    def test_report_length_floor_fits_frame_in_packet_index(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(json.dumps({"device": {"report_length": 3}}), encoding="utf-8")
            cfg = load_config(path)
            payload = cfg.device.report_length - 2
            self.assertEqual(cfg.device.report_length, 6)
            self.assertLessEqual(-(-1024 // payload), 256)

    def test_min_report_length(self):
        self.assertEqual(min_report_length(128, 64), 6)
        self.assertEqual(min_report_length(128, 32), 4)
        self.assertEqual(min_report_length(8, 8), 3)

    def test_oversized_display_is_clamped_to_packet_limit(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            raw = {"display": {"width": 4000, "height": 1000}, "device": {"report_length": 32}}
            path.write_text(json.dumps(raw), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.display.width, 1024)
            self.assertEqual(cfg.display.height, 126)
            self.assertEqual(cfg.device.report_length, 65)


if __name__ == "__main__":
    unittest.main()
