# soldfeed/config/settings.py

"""Central configuration for the soldfeed pipeline."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the soldfeed pipeline.

    Constants live on the class; secrets and deployment switches are
    read from the environment once, after ``.env`` has been loaded.
    An instance is handed to the orchestrator and the builders so
    nothing deeper in the pipeline touches ``os.environ``.
    """

    # --- Query ---
    SEARCH_KEYWORDS: str = os.getenv(
        "SOLDFEED_KEYWORDS", "alkaline trio"
    )
    SNAPSHOT_KEY: str = "ebay-listings/alkaline-trio-sold"

    # --- Scraping ---
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    FINDING_API_URL: str = (
        "https://svcs.ebay.com/services/search/FindingService/v1"
    )
    FINDING_API_MAX_PAGE_SIZE: int = 100  # Upstream cap per page
    FINDING_API_PAGE_SIZE: int = 100
    SOLD_PAGE_URL: str = "https://www.ebay.com/sch/i.html"
    SOLD_PAGE_SIZE: int = 240
    LISTING_BASE_URL: str = "https://www.ebay.com"

    # --- Normalisation ---
    DEFAULT_CURRENCY: str = "USD"
    UNKNOWN_SELLER: str = "Unknown"
    PLACEHOLDER_TITLES: list[str] = ["Shop on eBay"]

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    )
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "sec-fetch-dest": "document",
        "sec-fetch-mode": "navigate",
        "sec-fetch-site": "none",
        "sec-fetch-user": "?1",
        "Upgrade-Insecure-Requests": "1",
    }

    # --- Credentials ---
    EBAY_APP_ID: str = os.getenv("EBAY_APP_ID", "")
    CRON_SECRET: str = os.getenv("CRON_SECRET", "")
    CLOUDINARY_CLOUD_NAME: str = os.getenv("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_API_KEY: str = os.getenv("CLOUDINARY_API_KEY", "")
    CLOUDINARY_API_SECRET: str = os.getenv("CLOUDINARY_API_SECRET", "")

    # --- Storage ---
    STORE_BACKEND: str = os.getenv("SOLDFEED_STORE", "local")
    GALLERY_PREFIX: str = "screenshots"
    GALLERY_MAX_RESULTS: int = 500
    GALLERY_DEFAULT_PAGE_SIZE: int = 10

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    SELECTORS_PATH: Path = BASE_DIR / "soldfeed" / "config" / "selectors.json"
    DATA_DIR: Path = BASE_DIR / "data"
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Strategies (active one picked at deploy time) ---
    ACTIVE_STRATEGY: str = os.getenv("SOLDFEED_STRATEGY", "finding_api")
    FALLBACK_STRATEGY: str = os.getenv("SOLDFEED_FALLBACK_STRATEGY", "")
    AVAILABLE_STRATEGIES: list[dict[str, str]] = [
        {
            "id": "finding_api",
            "label": "eBay Finding API",
            "strategy": (
                "soldfeed.scrapers.finding_api_strategy"
                ".FindingApiStrategy"
            ),
        },
        {
            "id": "sold_page",
            "label": "eBay sold results page",
            "strategy": (
                "soldfeed.scrapers.sold_page_strategy"
                ".SoldPageStrategy"
            ),
        },
    ]
