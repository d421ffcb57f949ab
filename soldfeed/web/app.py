# soldfeed/web/app.py

"""HTTP surface: scrape trigger, listings read and screenshot gallery."""

import logging
from functools import lru_cache

from fastapi import FastAPI, Header, Query
from fastapi.responses import JSONResponse

from soldfeed.config.settings import Settings
from soldfeed.models.errors import IngestionError, StoreError, Unauthorized
from soldfeed.services.gallery_service import (
    CloudinaryMediaLibrary,
    GalleryService,
)
from soldfeed.services.ingestion_orchestrator import (
    IngestionOrchestrator,
    build_orchestrator,
    build_snapshot_store,
)
from soldfeed.services.read_service import ListingsReadService

logger = logging.getLogger("soldfeed.web")


def create_app(
    orchestrator: IngestionOrchestrator,
    read_service: ListingsReadService,
    gallery: GalleryService | None = None,
) -> FastAPI:
    """Build the API around already-wired services."""
    app = FastAPI(title="soldfeed", version="0.1.0")

    @app.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/scrape-ebay")
    def scrape_ebay(
        x_cron_secret: str | None = Header(default=None),
        secret: str | None = Query(default=None),
    ) -> JSONResponse:
        token = x_cron_secret or secret
        try:
            result = orchestrator.run(auth_token=token)
        except Unauthorized:
            return JSONResponse(
                status_code=401, content={"error": "Unauthorized"}
            )
        except IngestionError as exc:
            logger.error("eBay scrape error: %s", exc.message)
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Failed to scrape eBay listings",
                    **exc.to_dict(),
                },
            )
        return JSONResponse(status_code=200, content=result.to_dict())

    @app.get("/api/listings")
    def listings() -> JSONResponse:
        try:
            payload = read_service.read()
        except StoreError as exc:
            logger.error("Listings API error: %s", exc.message)
            return JSONResponse(
                status_code=500,
                content={"error": "Failed to fetch listings", **exc.to_dict()},
            )
        return JSONResponse(status_code=200, content=payload)

    @app.get("/api/gallery")
    def gallery_page(
        page: str | None = Query(default=None),
        page_size: str | None = Query(default=None, alias="pageSize"),
    ) -> JSONResponse:
        if gallery is None:
            return JSONResponse(
                status_code=500, content={"error": "Failed to fetch images"}
            )
        try:
            payload = gallery.page(page, page_size)
        except Exception:
            logger.error("Gallery API error", exc_info=True)
            return JSONResponse(
                status_code=500, content={"error": "Failed to fetch images"}
            )
        return JSONResponse(status_code=200, content=payload)

    return app


@lru_cache()
def get_app() -> FastAPI:
    """Build the production app from environment configuration."""
    settings = Settings()
    store = build_snapshot_store(settings)
    gallery = None
    if settings.CLOUDINARY_CLOUD_NAME:
        gallery = GalleryService(CloudinaryMediaLibrary(settings), settings)
    return create_app(
        orchestrator=build_orchestrator(settings),
        read_service=ListingsReadService(store),
        gallery=gallery,
    )
