# soldfeed/models/errors.py

"""Error taxonomy shared by strategies, storage and the orchestrator.

Every error carries a machine-readable ``kind`` next to its
human-readable message so the HTTP layer can report both.
"""

from enum import Enum


class SoldfeedError(Exception):
    """Base class for every error raised by the pipeline."""

    kind: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        """Serialise to the ``{kind, message}`` pair used in responses."""
        return {"kind": self.kind, "message": self.message}


class Unauthorized(SoldfeedError):
    """The trigger credential is missing or does not match."""

    kind = "unauthorized"

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class AcquisitionErrorKind(str, Enum):
    """Why a strategy could not produce raw items."""

    TRANSPORT = "transport_error"
    UPSTREAM_REJECTED = "upstream_rejected"


class AcquisitionError(SoldfeedError):
    """A strategy failed to fetch or accept the upstream payload."""

    def __init__(
        self, kind: AcquisitionErrorKind, message: str
    ) -> None:
        super().__init__(message)
        self.kind = kind.value
        self.error_kind = kind


class StoreError(SoldfeedError):
    """The backing object store failed or held an unreadable snapshot."""

    kind = "store_error"


class ObjectNotFound(StoreError):
    """The requested key does not exist in the backing object store."""

    kind = "not_found"


class IngestionErrorKind(str, Enum):
    """Which stage of an ingestion run failed."""

    UPSTREAM_FAILURE = "upstream_failure"
    PERSISTENCE_FAILURE = "persistence_failure"


class IngestionError(SoldfeedError):
    """An ingestion run failed; the previous snapshot is untouched."""

    def __init__(
        self, kind: IngestionErrorKind, message: str
    ) -> None:
        super().__init__(message)
        self.kind = kind.value
        self.error_kind = kind
