# soldfeed/services/gallery_service.py

"""Paginated feed of screenshots held in the media library."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

import cloudinary
import cloudinary.api

from soldfeed.config.settings import Settings

logger = logging.getLogger("soldfeed.gallery")


class MediaLibrary(ABC):
    """Lists image resources under a folder prefix."""

    @abstractmethod
    def list_images(self, prefix: str, max_results: int) -> list[dict[str, Any]]:
        """Return resource dicts with secure_url, created_at, public_id."""
        ...


class CloudinaryMediaLibrary(MediaLibrary):
    """Image listing backed by the Cloudinary Admin API."""

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or Settings()
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True,
        )

    def list_images(self, prefix: str, max_results: int) -> list[dict[str, Any]]:
        result: dict[str, Any] = cloudinary.api.resources(
            resource_type="image",
            type="upload",
            prefix=prefix,
            max_results=max_results,
            direction=-1,
        )
        resources: list[dict[str, Any]] = result.get("resources") or []
        return resources


def _parse_positive(raw: Any, default: int) -> int:
    """Parse a positive int query value, falling back to *default*."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _created_at(resource: dict[str, Any]) -> float:
    """Sort key: creation time as epoch seconds, 0 when unparsable."""
    raw = str(resource.get("created_at") or "")
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).timestamp()
    except ValueError:
        return 0.0


class GalleryService:
    """Sorts the media library newest first and slices one page."""

    def __init__(
        self,
        library: MediaLibrary,
        settings: Settings | None = None,
    ) -> None:
        self.library = library
        self.settings = settings or Settings()

    def page(self, page: Any = None, page_size: Any = None) -> dict[str, Any]:
        """Return one page of images plus the total count."""
        page_num = _parse_positive(page, 1)
        size = _parse_positive(
            page_size, self.settings.GALLERY_DEFAULT_PAGE_SIZE
        )

        resources = self.library.list_images(
            self.settings.GALLERY_PREFIX,
            self.settings.GALLERY_MAX_RESULTS,
        )
        ordered = sorted(resources, key=_created_at, reverse=True)

        start = (page_num - 1) * size
        images = [
            {
                "url": r.get("secure_url"),
                "timestamp": r.get("created_at"),
                "publicId": r.get("public_id"),
            }
            for r in ordered[start:start + size]
        ]
        logger.debug(
            "Gallery page %d (size %d): %d of %d images",
            page_num,
            size,
            len(images),
            len(ordered),
        )
        return {
            "images": images,
            "total": len(ordered),
            "page": page_num,
            "pageSize": size,
        }
