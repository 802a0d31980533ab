import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

import responses
from loguru import logger

from Your_bags_tracker import bags_tracker

BASE_URL = "https://api.coingecko.test/api/v3"


class TestBagsTrackerCli(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.config_file = os.path.join(self.tmp_dir.name, "config.yml")
        self.storage_file = os.path.join(self.tmp_dir.name, "local_storage.json")
        with open(self.config_file, "w", encoding="utf-8") as f:
            f.write(
                "api_options:\n"
                f"  API_BASE_URL: {BASE_URL}\n"
                "  INCLUDE_24HR_CHANGE: false\n"
                "data_options:\n"
                "  STORAGE_FILE_NAME: local_storage.json\n"
                "  STORAGE_KEY: yourBags\n"
            )
        patcher = patch.object(bags_tracker, "setup_logging")
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        self.tmp_dir.cleanup()

    def run_cli(self, *argv):
        output = io.StringIO()
        with redirect_stdout(output):
            code = bags_tracker.main(["--config", self.config_file, *argv])
        return code, output.getvalue()

    def stored(self):
        with open(self.storage_file, encoding="utf-8") as f:
            return json.load(f)["yourBags"]

    @responses.activate
    def test_add_quantity_move_and_show(self):
        responses.add(
            responses.GET,
            f"{BASE_URL}/search",
            json={
                "coins": [
                    {"id": "bitcoin", "name": "Bitcoin", "symbol": "BTC"},
                    {"id": "ethereum", "name": "Ethereum", "symbol": "ETH"},
                ]
            },
        )
        responses.add(
            responses.GET,
            f"{BASE_URL}/simple/price",
            json={"bitcoin": {"usd": 50000}, "ethereum": {"usd": 2500}},
        )

        self.assertEqual(self.run_cli("add", "btc")[0], 0)
        self.assertEqual(self.run_cli("add", "ethereum")[0], 0)
        self.assertEqual(self.run_cli("qty", "bitcoin", "2")[0], 0)
        self.assertEqual(self.run_cli("move", "1", "0")[0], 0)

        self.assertEqual(
            self.stored(),
            [
                {"id": "ethereum", "name": "Ethereum", "symbol": "ETH", "quantity": 1.0},
                {"id": "bitcoin", "name": "Bitcoin", "symbol": "BTC", "quantity": 2.0},
            ],
        )

        code, output = self.run_cli("show")
        self.assertEqual(code, 0)
        self.assertIn("Total: $102,500.00", output)

    @responses.activate
    def test_invalid_quantity_is_rejected(self):
        with open(self.storage_file, "w", encoding="utf-8") as f:
            json.dump({"yourBags": [{"id": "bitcoin", "name": "Bitcoin", "symbol": "btc", "quantity": 1}]}, f)

        code, output = self.run_cli("qty", "bitcoin", "abc")

        self.assertEqual(code, 1)
        self.assertIn("Invalid quantity", output)
        self.assertEqual(self.stored()[0]["quantity"], 1.0)

    @responses.activate
    def test_show_empty_portfolio_makes_no_request(self):
        code, output = self.run_cli("show")

        self.assertEqual(code, 0)
        self.assertEqual(len(responses.calls), 0)
        self.assertIn("Total: $0.00", output)

    @responses.activate
    def test_short_search_makes_no_request(self):
        code, output = self.run_cli("search", "b")
        self.assertEqual(code, 0)
        self.assertEqual(len(responses.calls), 0)
        self.assertIn("No matches", output)

    def test_missing_config(self):
        output = io.StringIO()
        with redirect_stdout(output):
            code = bags_tracker.main(["--config", os.path.join(self.tmp_dir.name, "nope.yml"), "show"])
        self.assertEqual(code, 1)
        self.assertIn("Configuration Error", output.getvalue())


class TestSetupLogging(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        logger.remove()
        self.tmp_dir.cleanup()

    def test_console_output_goes_to_stdout(self):
        log_dir = os.path.join(self.tmp_dir.name, "logs")
        output = io.StringIO()
        errors = io.StringIO()
        with redirect_stdout(output), redirect_stderr(errors):
            bags_tracker.setup_logging(level="INFO", log_dir=log_dir)
            logger.info("prices refreshed")

        self.assertIn("prices refreshed", output.getvalue())
        self.assertEqual(errors.getvalue(), "")
        self.assertTrue(os.path.exists(os.path.join(log_dir, "bags_tracker_debug.log")))


if __name__ == "__main__":
    unittest.main()
