# soldfeed/services/ingestion_orchestrator.py

"""Orchestrates one ingestion run: auth, acquire, normalise, persist."""

import hmac
import importlib
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from soldfeed.config.settings import Settings
from soldfeed.filters.listing_normalizer import ListingNormalizer
from soldfeed.models.errors import (
    AcquisitionError,
    IngestionError,
    IngestionErrorKind,
    StoreError,
    Unauthorized,
)
from soldfeed.models.listing import RawListing
from soldfeed.models.snapshot import IngestionResult, Snapshot
from soldfeed.scrapers.base_strategy import BaseStrategy
from soldfeed.storage.object_store import build_object_store
from soldfeed.storage.snapshot_store import SnapshotStore

logger = logging.getLogger("soldfeed.orchestrator")


def _load_strategy_class(dotted_path: str) -> type[Any]:
    """Dynamically import a strategy class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


def build_strategy(strategy_id: str, settings: Settings) -> BaseStrategy:
    """Instantiate the registered strategy with id *strategy_id*."""
    registry = {s["id"]: s for s in settings.AVAILABLE_STRATEGIES}
    if strategy_id not in registry:
        valid = ", ".join(sorted(registry))
        raise ValueError(
            f"Unknown strategy {strategy_id!r} (available: {valid})"
        )
    strategy_cls = _load_strategy_class(registry[strategy_id]["strategy"])
    strategy: BaseStrategy = strategy_cls(settings)
    return strategy


class IngestionOrchestrator:
    """Runs the acquisition pipeline and replaces the stored snapshot.

    Stateless between runs. Two overlapping runs race on the final
    ``put`` and the last writer wins.
    """

    def __init__(
        self,
        settings: Settings,
        strategy: BaseStrategy,
        store: SnapshotStore,
        fallback: BaseStrategy | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.settings = settings
        self.strategy = strategy
        self.fallback = fallback
        self.store = store
        self.normalizer = ListingNormalizer(settings)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ── Private helpers ──────────────────────────────────

    def _authorize(self, auth_token: str | None) -> None:
        """Compare the trigger credential with the shared secret."""
        secret = self.settings.CRON_SECRET
        if not secret:
            logger.error("CRON_SECRET is not configured; refusing trigger")
            raise Unauthorized()
        if not auth_token or not hmac.compare_digest(
            auth_token.encode("utf-8"), secret.encode("utf-8")
        ):
            logger.warning("Rejected ingestion trigger: bad credential")
            raise Unauthorized()

    def _acquire(self, query: str) -> tuple[list[RawListing], str]:
        """Run the active strategy, then the declared fallback once.

        Returns the raw items and the id of the strategy that
        produced them; results are never mixed across strategies.
        """
        try:
            return self.strategy.acquire(query), self.strategy.strategy_id
        except AcquisitionError as exc:
            if self.fallback is None:
                logger.error(
                    "Strategy %s failed (%s): %s",
                    self.strategy.strategy_id,
                    exc.kind,
                    exc.message,
                )
                raise IngestionError(
                    IngestionErrorKind.UPSTREAM_FAILURE,
                    f"{self.strategy.strategy_id}: {exc.message}",
                ) from exc
            logger.warning(
                "Strategy %s failed (%s), falling back to %s",
                self.strategy.strategy_id,
                exc.message,
                self.fallback.strategy_id,
            )

        try:
            return self.fallback.acquire(query), self.fallback.strategy_id
        except AcquisitionError as exc:
            logger.error(
                "Fallback strategy %s failed (%s): %s",
                self.fallback.strategy_id,
                exc.kind,
                exc.message,
            )
            raise IngestionError(
                IngestionErrorKind.UPSTREAM_FAILURE,
                f"{self.fallback.strategy_id}: {exc.message}",
            ) from exc

    # ── Entry point ──────────────────────────────────────

    def run(
        self,
        query: str | None = None,
        auth_token: str | None = None,
    ) -> IngestionResult:
        """Run one ingestion and replace the stored snapshot.

        Raises:
            Unauthorized: When *auth_token* does not match the secret.
            IngestionError: ``UPSTREAM_FAILURE`` when acquisition fails,
                ``PERSISTENCE_FAILURE`` when the store write fails. In
                both cases the previous snapshot is left in place.
        """
        self._authorize(auth_token)
        query = query or self.settings.SEARCH_KEYWORDS
        logger.info("Starting ingestion for '%s'", query)

        raw, strategy_id = self._acquire(query)
        listings, dropped = self.normalizer.normalize(raw)
        snapshot = Snapshot.build(listings, self._clock())

        try:
            location = self.store.put(snapshot)
        except StoreError as exc:
            logger.error("Snapshot write failed: %s", exc, exc_info=True)
            raise IngestionError(
                IngestionErrorKind.PERSISTENCE_FAILURE, exc.message
            ) from exc

        logger.info(
            "Ingested %d listings via %s (%d dropped)",
            snapshot.total_listings,
            strategy_id,
            dropped,
        )
        return IngestionResult(
            listings_scraped=snapshot.total_listings,
            last_updated=snapshot.last_updated,
            snapshot_location=location,
            strategy_id=strategy_id,
            dropped=dropped,
        )


def build_snapshot_store(settings: Settings) -> SnapshotStore:
    """Snapshot store over the configured backend."""
    return SnapshotStore(build_object_store(settings), settings.SNAPSHOT_KEY)


def build_orchestrator(settings: Settings | None = None) -> IngestionOrchestrator:
    """Wire an orchestrator from configuration."""
    settings = settings or Settings()
    strategy = build_strategy(settings.ACTIVE_STRATEGY, settings)
    fallback = None
    if (
        settings.FALLBACK_STRATEGY
        and settings.FALLBACK_STRATEGY != settings.ACTIVE_STRATEGY
    ):
        fallback = build_strategy(settings.FALLBACK_STRATEGY, settings)
    return IngestionOrchestrator(
        settings=settings,
        strategy=strategy,
        store=build_snapshot_store(settings),
        fallback=fallback,
    )
