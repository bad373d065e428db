import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inbox.config import get_settings
from inbox.infrastructure.channels import build_delivery_channels
from inbox.infrastructure.database import engine, initialize_database
from inbox.infrastructure.notifications import inbox_connection_manager
from inbox.interfaces.api.errors import catch_unhandled_errors, register_exception_handlers
from inbox.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and transports on startup and release them on shutdown."""

    initialize_database()
    app.state.channels = build_delivery_channels(get_settings())
    try:
        yield
    finally:
        await inbox_connection_manager.close_all()
        await app.state.channels.aclose()
        engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the inbox FastAPI application."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Inbox", lifespan=lifespan)
    register_exception_handlers(app)

    # Added before CORS so unexpected 500s still carry CORS headers.
    app.middleware("http")(catch_unhandled_errors)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        max_age=3600,
    )

    register_routes(app)
    return app


app = create_app()
