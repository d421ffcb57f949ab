# main.py

"""Entry point for soldfeed (API server or headless CLI)."""

import argparse
import logging
import os
import sys

from soldfeed.config.logging_config import setup_logging
from soldfeed.config.settings import Settings

logger = logging.getLogger("soldfeed.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_ids = ", ".join(s["id"] for s in Settings.AVAILABLE_STRATEGIES)

    parser = argparse.ArgumentParser(
        prog="soldfeed",
        description="Sold-listing snapshot service for a fixed eBay query.",
        epilog=f"Available strategies: {valid_ids}",
    )
    parser.add_argument(
        "--scrape",
        action="store_true",
        default=False,
        help="Run one ingestion and replace the stored snapshot.",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Print the latest stored snapshot.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Output format for --show (default: table).",
    )
    parser.add_argument(
        "--host",
        default=os.getenv("SOLDFEED_HOST", "0.0.0.0"),
        help="Bind address when serving the API.",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("SOLDFEED_PORT", "8000")),
        help="Port when serving the API.",
    )
    return parser


def _run_server(args: argparse.Namespace) -> None:
    """Serve the FastAPI app with uvicorn."""
    import uvicorn

    from soldfeed.web.app import get_app

    try:
        uvicorn.run(get_app(), host=args.host, port=args.port, log_level="info")
    except Exception:
        logger.critical("Fatal error while serving API", exc_info=True)
        raise
    finally:
        logger.info("soldfeed API shutting down")


def main() -> None:
    """Route to the API server (no flags) or a headless command."""
    log_file = setup_logging()
    logger.info("soldfeed starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.scrape:
        from soldfeed.cli.runner import run_scrape

        sys.exit(run_scrape())
    elif args.show:
        from soldfeed.cli.runner import show_snapshot

        sys.exit(show_snapshot(args.output_format))
    else:
        _run_server(args)


if __name__ == "__main__":
    main()
