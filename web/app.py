"""FastAPI application: JSON data API for the client-rendered catalog pages."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from web.shared import limiter
from web.routers.catalog import router as catalog_router
from web.routers.pages import router as pages_router
from web.routers.watch import router as watch_router

logger = logging.getLogger(__name__)


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse({"error": "Too many requests"}, status_code=429)


async def healthz(request: Request):
    """Liveness plus catalog state; does not trigger a load."""
    store = getattr(request.app.state, "catalog_store", None)
    if store is None or store.failed:
        return JSONResponse({"status": "degraded", "videos": 0})
    return JSONResponse({"status": "ok", "videos": len(store.videos)})


def create_app() -> FastAPI:
    """Build the app with routers and the rate limiter. State is wired by the caller."""
    application = FastAPI(title="Ambambo Kili")
    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    application.add_api_route("/healthz", healthz, methods=["GET"])
    application.include_router(pages_router)
    application.include_router(catalog_router)
    application.include_router(watch_router)
    return application


app = create_app()
