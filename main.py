"""
Nidus sandbox FastAPI application
Serves the ordering REST contract from in-memory data for local development and tests
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
from typing import Optional

from api.routes import auth, coffee_shops, health, menu_items, orders, uploads, users
from api.store import SandboxStore

# Import configuration
from app.config import settings

# Import middleware
from api.middleware import (
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    nidus_exception_handler,
    general_exception_handler,
)
from app.exceptions import NidusError

# Setup logging with configured level and format
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()), format=settings.log_format
)
_logger = logging.getLogger("nidus.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown; the store is created with the app"""
    store: SandboxStore = app.state.store
    _logger.info(
        "Starting %s sandbox in %s mode with %d coffee shops and %d users",
        settings.app_name,
        settings.environment.value,
        len(store.coffee_shops),
        len(store.users),
    )
    try:
        yield
    finally:
        _logger.info("Shutting down %s sandbox", settings.app_name)


def create_app(store: Optional[SandboxStore] = None) -> FastAPI:
    """Build the sandbox app around a store; a seeded one is created when omitted"""
    app = FastAPI(
        title=settings.api_title,
        version=settings.app_version,
        lifespan=lifespan,
        debug=settings.debug,
        openapi_url=(
            f"{settings.api_prefix}/openapi.json" if not settings.is_production() else None
        ),
        docs_url=f"{settings.api_prefix}/docs" if not settings.is_production() else None,
        redoc_url=None,
    )
    app.state.store = store if store is not None else SandboxStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(NidusError, nidus_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    for module in (health, auth, users, coffee_shops, menu_items, orders, uploads):
        app.include_router(module.router, prefix=settings.api_prefix)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.sandbox_host,
        port=settings.sandbox_port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
