from fastapi import FastAPI

from .config import router as config_router
from .items import router as items_router
from .nonce import router as nonce_router
from .realtime import router as realtime_router
from .verify import router as verify_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(items_router)
    app.include_router(nonce_router)
    app.include_router(verify_router)
    app.include_router(config_router)
    app.include_router(realtime_router)
