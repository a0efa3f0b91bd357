import os
import shutil
import tempfile
import unittest

from sockwatch import config
from sockwatch.config import CONFIG, ConfigError, init_config, load_config_file


class TestConfig(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.path = os.path.join(self.tmpdir, "config.yaml")
        self.addCleanup(shutil.rmtree, self.tmpdir)
        self.addCleanup(CONFIG.update, dict(config.DEFAULT_CONFIG))

    def write(self, text):
        with open(self.path, "w") as f:
            f.write(text)

    def test_missing_file_gives_defaults(self):
        cfg = init_config(self.path)
        self.assertEqual(cfg["refresh_interval"], 2.0)
        self.assertEqual(cfg["poll_timeout_ms"], 250)
        self.assertEqual(cfg["kind"], "inet")
        self.assertFalse(os.path.exists(self.path))

    def test_file_values_and_overrides(self):
        self.write("refresh_interval: 5\nkind: tcp\nunknown_key: 1\n")
        cfg = init_config(self.path, {"kind": "udp", "poll_timeout_ms": None})
        self.assertEqual(cfg["refresh_interval"], 5.0)
        self.assertEqual(cfg["kind"], "udp")
        self.assertEqual(cfg["poll_timeout_ms"], 250)
        self.assertNotIn("unknown_key", cfg)

    def test_empty_file(self):
        self.write("")
        self.assertEqual(load_config_file(self.path), {})

    def test_poll_timeout_clamped_below_interval(self):
        cfg = init_config(self.path, {"refresh_interval": 0.5, "poll_timeout_ms": 800})
        self.assertEqual(cfg["poll_timeout_ms"], 250)

    def test_invalid_values(self):
        for overrides in ({"refresh_interval": 0}, {"poll_timeout_ms": -1},
                          {"kind": "unix"}, {"refresh_interval": "soon"},
                          {"refresh_interval": float("nan")}, {"refresh_interval": float("inf")},
                          {"poll_timeout_ms": float("inf")}):
            with self.assertRaises(ConfigError):
                init_config(self.path, overrides)

    def test_non_finite_interval_in_file(self):
        self.write("refresh_interval: .inf\n")
        with self.assertRaises(ConfigError):
            init_config(self.path)

    def test_bad_yaml(self):
        self.write("refresh_interval: [1, 2\n")
        with self.assertRaises(ConfigError):
            init_config(self.path)

    def test_non_mapping(self):
        self.write("- 1\n- 2\n")
        with self.assertRaises(ConfigError):
            load_config_file(self.path)


if __name__ == "__main__":
    unittest.main()
