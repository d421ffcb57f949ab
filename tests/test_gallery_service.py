# tests/test_gallery_service.py

"""Tests for GalleryService sorting and pagination."""

import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from soldfeed.config.settings import Settings
from soldfeed.services.gallery_service import (
    CloudinaryMediaLibrary,
    GalleryService,
    MediaLibrary,
)


class _StaticLibrary(MediaLibrary):
    def __init__(self, resources: list[dict[str, Any]]) -> None:
        self.resources = resources
        self.calls: list[tuple[str, int]] = []

    def list_images(self, prefix: str, max_results: int) -> list[dict[str, Any]]:
        self.calls.append((prefix, max_results))
        return list(self.resources)


def _resource(public_id: str, created_at: str) -> dict[str, Any]:
    return {
        "secure_url": f"https://img/{public_id}.png",
        "created_at": created_at,
        "public_id": public_id,
    }


class TestGalleryService(unittest.TestCase):
    """GalleryService unit tests."""

    def setUp(self) -> None:
        self.library = _StaticLibrary(
            [
                _resource("old", "2026-01-01T00:00:00Z"),
                _resource("newest", "2026-10-01T00:00:00Z"),
                _resource("broken", "not a date"),
                _resource("middle", "2026-05-01T00:00:00Z"),
            ]
        )
        self.service = GalleryService(self.library, Settings())

    def test_newest_first_default_page(self) -> None:
        body = self.service.page()

        self.assertEqual(body["page"], 1)
        self.assertEqual(body["pageSize"], 10)
        self.assertEqual(body["total"], 4)
        self.assertEqual(
            [img["publicId"] for img in body["images"]],
            ["newest", "middle", "old", "broken"],
        )
        self.assertEqual(self.library.calls, [("screenshots", 500)])

    def test_image_shape(self) -> None:
        first = self.service.page(1, 1)["images"][0]
        self.assertEqual(
            first,
            {
                "url": "https://img/newest.png",
                "timestamp": "2026-10-01T00:00:00Z",
                "publicId": "newest",
            },
        )

    def test_page_past_end_is_empty(self) -> None:
        body = self.service.page(5, 2)
        self.assertEqual(body["images"], [])
        self.assertEqual(body["total"], 4)

    def test_invalid_values_fall_back(self) -> None:
        for page, size in (("abc", "x"), ("0", "-3"), (None, None)):
            with self.subTest(page=page, size=size):
                body = self.service.page(page, size)
                self.assertEqual(body["page"], 1)
                self.assertEqual(body["pageSize"], 10)


@patch("soldfeed.services.gallery_service.cloudinary")
class TestCloudinaryMediaLibrary(unittest.TestCase):
    """Cloudinary listing call with the SDK mocked out."""

    def test_lists_images_newest_first(self, mock_cld: MagicMock) -> None:
        mock_cld.api.resources.return_value = {
            "resources": [_resource("a", "2026-01-01T00:00:00Z")]
        }
        library = CloudinaryMediaLibrary(Settings())

        result = library.list_images("screenshots", 500)

        self.assertEqual(len(result), 1)
        kwargs = mock_cld.api.resources.call_args.kwargs
        self.assertEqual(kwargs["prefix"], "screenshots")
        self.assertEqual(kwargs["resource_type"], "image")
        self.assertEqual(kwargs["direction"], -1)

    def test_missing_resources_key(self, mock_cld: MagicMock) -> None:
        mock_cld.api.resources.return_value = {}
        self.assertEqual(
            CloudinaryMediaLibrary(Settings()).list_images("p", 1), []
        )


if __name__ == "__main__":
    unittest.main()
