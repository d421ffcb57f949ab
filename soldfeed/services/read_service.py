# soldfeed/services/read_service.py

"""Serves the latest snapshot verbatim."""

import logging
from typing import Any

from soldfeed.models.snapshot import ExplicitEmpty
from soldfeed.storage.snapshot_store import SnapshotStore

logger = logging.getLogger("soldfeed.read")

NO_DATA_MESSAGE = "No listings data available yet. Run the scraper first."


class ListingsReadService:
    """Read path over the snapshot store."""

    def __init__(self, store: SnapshotStore) -> None:
        self.store = store

    def read(self) -> dict[str, Any]:
        """Return the listings payload; StoreError propagates."""
        snapshot = self.store.get()
        if isinstance(snapshot, ExplicitEmpty):
            return {
                "success": True,
                "lastUpdated": None,
                "totalListings": 0,
                "listings": [],
                "message": NO_DATA_MESSAGE,
            }
        logger.debug(
            "Serving snapshot from %s (%d listings)",
            snapshot.last_updated,
            snapshot.total_listings,
        )
        return {"success": True, **snapshot.to_dict()}
