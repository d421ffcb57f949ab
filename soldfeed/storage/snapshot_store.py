# soldfeed/storage/snapshot_store.py

"""Persist and load the single latest snapshot."""

import json
import logging

from soldfeed.models.errors import ObjectNotFound, StoreError
from soldfeed.models.snapshot import EXPLICIT_EMPTY, ExplicitEmpty, Snapshot
from soldfeed.storage.object_store import ObjectStore

logger = logging.getLogger("soldfeed.storage")


class SnapshotStore:
    """Reads and replaces the snapshot stored under one key.

    The whole snapshot is serialised to one JSON document and written
    in a single ``put``; there are no appends or merges.
    """

    def __init__(self, object_store: ObjectStore, key: str) -> None:
        self.object_store = object_store
        self.key = key

    def put(self, snapshot: Snapshot) -> str:
        """Replace the stored snapshot; returns its location.

        Raises:
            StoreError: When the backend write fails.
        """
        body = json.dumps(
            snapshot.to_dict(), ensure_ascii=False
        ).encode("utf-8")
        location = self.object_store.put(self.key, body)
        logger.info(
            "Snapshot %s replaced with %d listings (%s)",
            self.key,
            snapshot.total_listings,
            snapshot.last_updated,
        )
        return location

    def get(self) -> Snapshot | ExplicitEmpty:
        """Load the stored snapshot, or EXPLICIT_EMPTY if none exists.

        Raises:
            StoreError: On backend failure or an unreadable document.
        """
        try:
            body = self.object_store.get(self.key)
        except ObjectNotFound:
            logger.info("No snapshot stored under %s yet", self.key)
            return EXPLICIT_EMPTY

        try:
            return Snapshot.from_dict(json.loads(body))
        except (ValueError, KeyError, TypeError) as exc:
            raise StoreError(
                f"snapshot {self.key} is not readable: {exc}"
            ) from exc
