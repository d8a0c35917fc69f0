import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware
from fastapi_injector import InjectorMiddleware, attach_injector
from injector import Injector

from embedder.api.routes._routes import register_routers
from embedder.core.config.logging import init_logging
from embedder.core.config.settings import EmbedderSettings, get_settings
from embedder.core.exceptions.exception_handler import init_error_handlers
from embedder.db.session import DatabaseSessionManager
from embedder.db.store import VectorStore
from embedder.dependencies.injector import create_injector


logger = logging.getLogger(__name__)

GZIP_MINIMUM_SIZE = 1000


def create_app(
    settings: Optional[EmbedderSettings] = None,
    app_injector: Optional[Injector] = None,
) -> FastAPI:
    """
    Application-factory entry-point.
    Only orchestration happens here; the work lives in helpers.
    """
    settings = settings or get_settings()
    app_injector = app_injector or create_injector(settings)

    init_logging(settings)

    app = FastAPI(title="embedder", lifespan=_build_lifespan(app_injector, settings))

    # embedding payloads are large float arrays
    app.add_middleware(GZipMiddleware, minimum_size=GZIP_MINIMUM_SIZE)
    app.add_middleware(InjectorMiddleware, injector=app_injector)
    attach_injector(app, app_injector)

    init_error_handlers(app, debug=settings.DEBUG)

    register_routers(app)

    return app


# --------------------------------------------------------------------------- #
# Lifespan handler                                                            #
# --------------------------------------------------------------------------- #
def _build_lifespan(app_injector: Injector, settings: EmbedderSettings):
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        """
        Startup / shutdown scaffold.
        Runs **before** the first request and **after** the last response.
        """
        logger.debug("Running lifespan startup tasks …")

        if settings.CREATE_SCHEMA_ON_STARTUP:
            await app_injector.get(VectorStore).create_schema()

        try:
            yield
        finally:
            await app_injector.get(httpx.AsyncClient).aclose()
            await app_injector.get(DatabaseSessionManager).close()
            logger.debug("Lifespan shutdown complete.")

    return _lifespan
