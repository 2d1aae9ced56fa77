# tests/test_config.py
import os
import tempfile
import unittest

from pythra_forms.config import Config, get_config


class TestConfig(unittest.TestCase):

    def write_config(self, text):
        handle, path = tempfile.mkstemp(suffix=".yaml")
        with os.fdopen(handle, "w") as fh:
            fh.write(text)
        self.addCleanup(os.remove, path)
        Config().reload(config_file=path)
        return path

    def tearDown(self):
        Config().reload(config_file="forms.yaml")

    def test_singleton(self):
        self.assertIs(Config(), Config())
        self.assertIs(get_config(), Config())

    def test_loads_yaml_file(self):
        path = self.write_config("datepicker:\n  format: DD/MM/YYYY\n  disablePast: true\n")
        config = Config()
        self.assertEqual(config.source, "file")
        self.assertFalse(config.is_embedded)
        self.assertEqual(str(config.resolved_config_path), os.path.realpath(path))
        self.assertEqual(config.get_nested("datepicker.format"), "DD/MM/YYYY")
        self.assertIs(config.get_nested("datepicker.disablePast"), True)
        self.assertEqual(config.get_nested("datepicker.missing", "x"), "x")
        self.assertEqual(config.get_nested("datepicker.format.deeper", "x"), "x")
        self.assertEqual(config.section("datepicker"), {"format": "DD/MM/YYYY", "disablePast": True})

    def test_missing_section_is_empty(self):
        self.write_config("popup:\n  displayPopup: click\n")
        self.assertEqual(Config().section("datepicker"), {})
        self.assertIsNone(Config().get("datepicker"))

    def test_malformed_section_is_ignored(self):
        self.write_config("datepicker: just a string\n")
        with self.assertLogs("pythra_forms.config", level="WARNING"):
            self.assertEqual(Config().section("datepicker"), {})

    def test_non_mapping_file(self):
        self.write_config("- a\n- b\n")
        self.assertEqual(Config().as_dict(), {"__root__": ["a", "b"]})

    def test_empty_file(self):
        self.write_config("")
        self.assertEqual(Config().as_dict(), {})
        self.assertEqual(Config().source, "file")

    def test_missing_file(self):
        Config().reload(config_file="/nonexistent/forms.yaml")
        self.assertIsNone(Config().source)
        self.assertEqual(Config().as_dict(), {})

    def test_invalid_yaml_is_logged(self):
        self.write_config("datepicker: [unclosed\n")
        self.assertIsNone(Config().source)


if __name__ == '__main__':
    unittest.main()
