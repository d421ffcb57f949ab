# tests/test_cli_runner.py

"""Tests for the headless CLI commands."""

import json
import unittest
from unittest.mock import MagicMock, patch

from soldfeed.cli.runner import run_scrape, show_snapshot
from soldfeed.config.settings import Settings
from soldfeed.models.errors import IngestionError, IngestionErrorKind
from soldfeed.models.listing import Listing
from soldfeed.models.snapshot import IngestionResult, Snapshot
from soldfeed.services.ingestion_orchestrator import build_snapshot_store


def _settings() -> Settings:
    settings = Settings()
    settings.CRON_SECRET = "cli-secret"
    settings.STORE_BACKEND = "local"
    return settings


class TestRunScrape(unittest.TestCase):
    """run_scrape exit codes."""

    @patch("soldfeed.cli.runner.build_orchestrator")
    def test_success_passes_configured_secret(
        self, mock_build: MagicMock
    ) -> None:
        orchestrator = MagicMock()
        orchestrator.run.return_value = IngestionResult(
            listings_scraped=4,
            last_updated="2026-10-19T00:00:00.000Z",
            snapshot_location="/tmp/x.json",
            strategy_id="finding_api",
        )
        mock_build.return_value = orchestrator

        with patch("builtins.print") as mock_print:
            code = run_scrape(_settings())

        self.assertEqual(code, 0)
        orchestrator.run.assert_called_once_with(auth_token="cli-secret")
        printed = json.loads(mock_print.call_args.args[0])
        self.assertEqual(printed["listingsScraped"], 4)

    @patch("soldfeed.cli.runner.build_orchestrator")
    def test_ingestion_error_exit_code(self, mock_build: MagicMock) -> None:
        orchestrator = MagicMock()
        orchestrator.run.side_effect = IngestionError(
            IngestionErrorKind.UPSTREAM_FAILURE, "HTTP 503"
        )
        mock_build.return_value = orchestrator

        self.assertEqual(run_scrape(_settings()), 1)


class TestShowSnapshot(unittest.TestCase):
    """show_snapshot output formats."""

    def test_json_before_first_run(self) -> None:
        with patch("builtins.print") as mock_print:
            code = show_snapshot("json", _settings())

        self.assertEqual(code, 0)
        payload = json.loads(mock_print.call_args.args[0])
        self.assertEqual(payload["listings"], [])
        self.assertIsNone(payload["lastUpdated"])

    def test_table_with_snapshot(self) -> None:
        settings = _settings()
        build_snapshot_store(settings).put(
            Snapshot.build(
                [
                    Listing(
                        title="Goddamnit LP",
                        price="64.99",
                        currency="USD",
                        shipping_cost="0",
                        shipping_currency="USD",
                        seller="punkvinylco",
                    )
                ]
            )
        )

        with patch("soldfeed.cli.runner.Console") as mock_console:
            code = show_snapshot("table", settings)

        self.assertEqual(code, 0)
        mock_console.return_value.print.assert_called_once()


if __name__ == "__main__":
    unittest.main()
