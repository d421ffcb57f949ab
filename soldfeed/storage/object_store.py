# soldfeed/storage/object_store.py

"""Key/value object stores backing the snapshot.

Both backends replace an object in a single step, so a reader sees
either the previous object or the new one, never a partial write.
"""

import base64
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import cloudinary
import cloudinary.api
import cloudinary.exceptions
import cloudinary.uploader
from curl_cffi import requests as curl_requests

from soldfeed.config.settings import Settings
from soldfeed.models.errors import ObjectNotFound, StoreError

logger = logging.getLogger("soldfeed.storage")


class ObjectStore(ABC):
    """Minimal put/get contract over a blob store."""

    @abstractmethod
    def put(self, key: str, data: bytes) -> str:
        """Store *data* under *key*, replacing any prior object.

        Returns a location (URL or path) for the stored object.
        """
        ...

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Return the bytes under *key*.

        Raises:
            ObjectNotFound: When nothing was ever stored under *key*.
            StoreError: On any other backend failure.
        """
        ...


class LocalObjectStore(ObjectStore):
    """Stores each object as a file under a root directory."""

    def __init__(self, root: Path | None = None) -> None:
        self.root: Path = root or Settings.DATA_DIR
        self.root.mkdir(parents=True, exist_ok=True)
        logger.debug("LocalObjectStore initialised, root=%s", self.root)

    def _path_for(self, key: str) -> Path:
        """Map a slash-separated key to a JSON file under the root."""
        parts = [p for p in key.split("/") if p not in ("", ".", "..")]
        if not parts:
            raise StoreError(f"invalid object key: {key!r}")
        return self.root.joinpath(*parts).with_suffix(".json")

    def put(self, key: str, data: bytes) -> str:
        """Write to a temp file beside the target, then swap it in."""
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StoreError(f"failed to write {path}: {exc}") from exc

        logger.info("Stored %d bytes at %s", len(data), path)
        return str(path)

    def get(self, key: str) -> bytes:
        """Read the file for *key*."""
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise ObjectNotFound(f"no object at {path}") from exc
        except OSError as exc:
            raise StoreError(f"failed to read {path}: {exc}") from exc


class CloudinaryObjectStore(ObjectStore):
    """Stores objects as Cloudinary ``raw`` resources."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        cloudinary.config(
            cloud_name=self.settings.CLOUDINARY_CLOUD_NAME,
            api_key=self.settings.CLOUDINARY_API_KEY,
            api_secret=self.settings.CLOUDINARY_API_SECRET,
            secure=True,
        )
        self.session = curl_requests.Session()

    def put(self, key: str, data: bytes) -> str:
        """Upload *data* as a data URI, overwriting the prior resource."""
        encoded = base64.b64encode(data).decode("ascii")
        try:
            result: dict[str, Any] = cloudinary.uploader.upload(
                f"data:application/json;base64,{encoded}",
                resource_type="raw",
                public_id=key,
                overwrite=True,
                invalidate=True,
            )
        except Exception as exc:
            raise StoreError(
                f"Cloudinary upload of {key} failed: {exc}"
            ) from exc

        url = str(result.get("secure_url", ""))
        logger.info("Uploaded %s to Cloudinary: %s", key, url)
        return url

    def get(self, key: str) -> bytes:
        """Resolve the resource URL, then download its bytes."""
        try:
            resource: dict[str, Any] = cloudinary.api.resource(
                key, resource_type="raw"
            )
        except cloudinary.exceptions.NotFound as exc:
            raise ObjectNotFound(f"no Cloudinary resource {key}") from exc
        except Exception as exc:
            raise StoreError(
                f"Cloudinary lookup of {key} failed: {exc}"
            ) from exc

        url = str(resource.get("secure_url", ""))
        try:
            resp = self.session.get(
                url, timeout=self.settings.REQUEST_TIMEOUT
            )
        except Exception as exc:
            raise StoreError(f"download of {url} failed: {exc}") from exc
        if resp.status_code != 200:
            raise StoreError(
                f"Failed to fetch listings data from Cloudinary "
                f"(HTTP {resp.status_code})"
            )
        return bytes(resp.content)


def build_object_store(settings: Settings | None = None) -> ObjectStore:
    """Pick the backend named by ``Settings.STORE_BACKEND``."""
    settings = settings or Settings()
    backend = settings.STORE_BACKEND.lower()
    if backend == "cloudinary":
        return CloudinaryObjectStore(settings)
    if backend == "local":
        return LocalObjectStore(settings.DATA_DIR)
    raise ValueError(f"Unknown store backend: {settings.STORE_BACKEND!r}")
