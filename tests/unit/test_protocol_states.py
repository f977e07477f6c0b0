import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "display_protocol"))

from kbscreen_display import errors
from kbscreen_display.models import ProtocolState


class ProtocolStateTests(unittest.TestCase):
    def test_states_present(self):
        self.assertEqual(ProtocolState.CONNECTING.value, "Connecting")
        self.assertEqual(ProtocolState.STREAMING.value, "Streaming")
        self.assertEqual(ProtocolState.FAILED.value, "Failed")

    def test_error_taxonomy_shares_base(self):
        for cls in (
            errors.DiscoveryError,
            errors.TransportOpenError,
            errors.TransportWriteError,
            errors.FontAssetError,
        ):
            self.assertTrue(issubclass(cls, errors.KbScreenError))
        self.assertTrue(issubclass(errors.KbScreenError, RuntimeError))


if __name__ == "__main__":
    unittest.main()
