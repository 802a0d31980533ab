import os
import tempfile
import unittest

from Your_bags_tracker.configuration_manager import (
    ConfigurationError,
    ConfigurationFileNotFoundError,
    ConfigurationLoadError,
    ConfigurationManager,
    CredentialsError,
    CredentialsLoadError,
    DEFAULT_API_BASE_URL,
)


class TestConfigurationManager(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.config_file = os.path.join(self.tmp_dir.name, "config.yml")
        self.creds_file = os.path.join(self.tmp_dir.name, "creds.yml")

    def tearDown(self):
        self.tmp_dir.cleanup()

    def write(self, path, text):
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)

    def test_missing_config_file(self):
        with self.assertRaises(ConfigurationFileNotFoundError):
            ConfigurationManager(self.config_file, self.creds_file)

    def test_invalid_yaml(self):
        self.write(self.config_file, "api_options: [unclosed")
        with self.assertRaises(ConfigurationLoadError):
            ConfigurationManager(self.config_file)

    def test_defaults_when_sections_missing(self):
        self.write(self.config_file, "data_options: {}\n")
        manager = ConfigurationManager(self.config_file, self.creds_file)

        api_options = manager.get_api_options()
        self.assertEqual(api_options["API_BASE_URL"], DEFAULT_API_BASE_URL)
        self.assertIsNone(api_options["REQUEST_TIMEOUT"])
        self.assertTrue(api_options["INCLUDE_24HR_CHANGE"])
        self.assertEqual(manager.get_search_options()["MIN_QUERY_LENGTH"], 2)
        self.assertEqual(manager.get_storage_key(), "yourBags")
        self.assertEqual(
            manager.get_storage_filename(),
            f"{self.tmp_dir.name}/local_storage.json",
        )
        self.assertIsNone(manager.get_api_key())

    def test_values_from_file(self):
        self.write(
            self.config_file,
            "api_options:\n"
            "  API_BASE_URL: http://localhost:9000\n"
            "  REQUEST_TIMEOUT: 7\n"
            "data_options:\n"
            "  STORAGE_FILE_NAME: bags.json\n"
            "  STORAGE_KEY: myBags\n"
            "search_options:\n"
            "  MIN_QUERY_LENGTH: 3\n",
        )
        self.write(self.creds_file, "coingecko:\n  COINGECKO_API_KEY: ' abc '\n")
        manager = ConfigurationManager(self.config_file, self.creds_file)

        self.assertEqual(manager.get_api_options()["REQUEST_TIMEOUT"], 7.0)
        self.assertEqual(manager.get_search_options()["MIN_QUERY_LENGTH"], 3)
        self.assertTrue(manager.get_storage_filename().endswith("/bags.json"))
        self.assertEqual(manager.get_storage_key(), "myBags")
        self.assertEqual(manager.get_api_key(), "abc")

    def test_invalid_timeout(self):
        self.write(self.config_file, "api_options:\n  REQUEST_TIMEOUT: soon\n")
        manager = ConfigurationManager(self.config_file)
        with self.assertRaises(ConfigurationError):
            manager.get_api_options()

    def test_bad_credentials(self):
        self.write(self.config_file, "data_options: {}\n")
        self.write(self.creds_file, "- just\n- a list\n")
        with self.assertRaises(CredentialsLoadError):
            ConfigurationManager(self.config_file, self.creds_file)

        self.write(self.creds_file, "coingecko:\n  COINGECKO_API_KEY: 123\n")
        manager = ConfigurationManager(self.config_file, self.creds_file)
        with self.assertRaises(CredentialsError):
            manager.get_api_key()


if __name__ == "__main__":
    unittest.main()
