import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from pyportal.config import load_config


class TestConfig(unittest.TestCase):
    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.tmp_path = Path(self.test_dir)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_missing_file(self):
        self.assertEqual(load_config(self.tmp_path / "nope.py"), {})

    def test_explicit_file(self):
        config_file = self.tmp_path / "site.py"
        config_file.write_text(
            "from pathlib import Path\n"
            "TEMPLATES_DIR = Path('views')\n"
            "LAYOUT = '_layout.html'\n"
            "ROOT_PATH = '/shop'\n"
            "PORT = 8080\n"
            "DEBUG = True\n"
            "UNRELATED = 1\n"
            "lowercase = 2\n"
        )
        config = load_config(config_file)
        self.assertEqual(
            config,
            {
                "templates_dir": "views",
                "layout": "_layout.html",
                "root_path": "/shop",
                "port": 8080,
                "debug": True,
            },
        )

    def test_default_location(self):
        (self.tmp_path / "pyportal.config.py").write_text("STATIC_DIR = 'assets'\nSTATIC_PATH = '/a'\n")
        with patch("pathlib.Path.cwd", return_value=self.tmp_path):
            config = load_config()
        self.assertEqual(config, {"static_dir": "assets", "static_path": "/a"})

    def test_broken_file_warns(self):
        config_file = self.tmp_path / "broken.py"
        config_file.write_text("raise RuntimeError('bad config')\n")
        with patch("builtins.print") as mock_print:
            self.assertEqual(load_config(config_file), {})
        message = mock_print.call_args[0][0]
        self.assertIn("Warning: Failed to load config", message)
        self.assertIn("bad config", message)


if __name__ == "__main__":
    unittest.main()
