# soldfeed/scrapers/base_strategy.py

"""Abstract base class for listing acquisition strategies."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from curl_cffi import requests as curl_requests

from soldfeed.config.settings import Settings
from soldfeed.models.errors import AcquisitionError, AcquisitionErrorKind
from soldfeed.models.listing import RawListing


class BaseStrategy(ABC):
    """Abstract base class for listing acquisition strategies.

    A strategy makes exactly one outbound request per ``acquire`` call
    and maps what comes back into :class:`RawListing` bundles. It never
    retries; retry and fallback decisions belong to the orchestrator.
    """

    strategy_id: str = ""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self.logger = logging.getLogger(
            f"soldfeed.{self.strategy_id}"
        )
        self.selectors: dict[str, str] = self._load_selectors()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _load_selectors(self) -> dict[str, str]:
        """Load CSS selectors for this strategy from selectors.json."""
        with open(self.settings.SELECTORS_PATH) as f:
            all_selectors: dict[str, Any] = json.load(f)
        result: dict[str, str] = all_selectors.get(
            self.strategy_id, {}
        )
        return result

    def _fetch_get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> curl_requests.Response:
        """Single GET bounded by the request timeout.

        Raises:
            AcquisitionError: ``TRANSPORT`` on a network failure or a
                non-200 status.
        """
        try:
            resp = self.session.get(
                url,
                params=params,
                headers=headers,
                timeout=self._request_timeout,
            )
        except Exception as exc:
            self.logger.warning(
                "[%s] Request error: %s",
                self.strategy_id,
                exc,
                exc_info=True,
            )
            raise AcquisitionError(
                AcquisitionErrorKind.TRANSPORT,
                f"request to {url} failed: {exc}",
            ) from exc

        if resp.status_code != 200:
            self.logger.warning(
                "[%s] HTTP %d from %s",
                self.strategy_id,
                resp.status_code,
                url,
            )
            raise AcquisitionError(
                AcquisitionErrorKind.TRANSPORT,
                f"upstream returned HTTP {resp.status_code}",
            )
        return resp

    @abstractmethod
    def acquire(self, query: str) -> list[RawListing]:
        """Fetch raw listings for *query*.

        Raises:
            AcquisitionError: When the upstream cannot be reached or
                rejects the request.
        """
        ...
