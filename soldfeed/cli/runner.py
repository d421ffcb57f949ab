# soldfeed/cli/runner.py

"""Headless CLI: run one ingestion, show the snapshot, or serve the API."""

import json
import logging

from rich.console import Console
from rich.table import Table

from soldfeed.config.settings import Settings
from soldfeed.models.errors import IngestionError, StoreError, Unauthorized
from soldfeed.models.listing import Listing
from soldfeed.services.ingestion_orchestrator import (
    build_orchestrator,
    build_snapshot_store,
)
from soldfeed.services.read_service import ListingsReadService

logger = logging.getLogger("soldfeed.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _print_table(listings: list[Listing], last_updated: str | None) -> None:
    """Render a Rich table of listings to stdout."""
    table = Table(
        title=f"Sold listings (updated {last_updated or 'never'})",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Sold", style="dim")
    table.add_column("Title", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Shipping", justify="right")
    table.add_column("Seller", style="magenta")
    table.add_column("URL", overflow="fold", style="dim")

    for idx, item in enumerate(listings, 1):
        table.add_row(
            str(idx),
            item.sold_date or "—",
            item.title[:60],
            f"{item.currency} {item.price}",
            f"{item.shipping_currency} {item.shipping_cost}",
            item.seller,
            item.listing_url,
        )

    Console().print(table)


def run_scrape(settings: Settings | None = None) -> int:
    """Run one ingestion with the configured credential.

    Returns a process exit code (0 success, 1 failure).
    """
    settings = settings or Settings()
    orchestrator = build_orchestrator(settings)
    try:
        result = orchestrator.run(auth_token=settings.CRON_SECRET)
    except Unauthorized:
        _err.print("[red]CRON_SECRET is not configured[/red]")
        return 1
    except IngestionError as exc:
        logger.error("CLI ingestion failed: %s", exc.message)
        _err.print(f"[red]Ingestion failed ({exc.kind}): {exc.message}[/red]")
        return 1

    _err.print(
        f"[green]Stored {result.listings_scraped} listings "
        f"via {result.strategy_id}[/green] "
        f"[dim]({result.dropped} dropped) → {result.snapshot_location}[/dim]"
    )
    print(json.dumps(result.to_dict(), indent=2))
    return 0


def show_snapshot(
    output_format: str = "table", settings: Settings | None = None
) -> int:
    """Print the latest stored snapshot as a table or JSON."""
    settings = settings or Settings()
    service = ListingsReadService(build_snapshot_store(settings))
    try:
        payload = service.read()
    except StoreError as exc:
        logger.error("CLI snapshot read failed: %s", exc.message)
        _err.print(f"[red]Failed to read snapshot: {exc.message}[/red]")
        return 1

    if output_format == "json":
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    if payload.get("message"):
        _err.print(f"[yellow]{payload['message']}[/yellow]")
        return 0
    listings = [Listing.from_dict(item) for item in payload["listings"]]
    _print_table(listings, payload.get("lastUpdated"))
    return 0
