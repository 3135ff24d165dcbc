from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from auth import dependencies as auth_dependencies
from catalog import service as catalog_service
from core import db
from core import settings as settings_module
from tables import router as tables_router

logger = logging.getLogger(__name__)


async def _log_startup(app_settings: settings_module.Settings) -> None:
    logger.info("Server configuration:")
    logger.info("  mode = %s", app_settings.mode)
    logger.info("  address = %s", app_settings.address)
    logger.info("  database = %s", app_settings.database_path)
    logger.info("  auth_enabled = %s", app_settings.auth_enabled)
    logger.info("SQLite configuration:")
    for name, value in (await db.pragma_report()).items():
        logger.info("  %s = %s", name, value)


def create_app(app_settings: settings_module.Settings | None = None) -> FastAPI:
    """
    Build the API for one database.

    Without explicit settings they are read from the environment, which lets
    uvicorn serve the app with `--factory main:create_app`.
    """
    if app_settings is None:
        app_settings = settings_module.validate_settings(settings_module.load_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # The catalog is complete before the first request and never changes afterwards.
        await db.init_pool(app_settings.database_path, size=app_settings.pool_size)
        try:
            app.state.catalog = await catalog_service.build_catalog()
            await _log_startup(app_settings)
            yield
        finally:
            await db.close_pool()

    app = FastAPI(
        title="sqlite-rest",
        lifespan=lifespan,
        debug=app_settings.debug,
        # Built-in doc routes would shadow tables of the same name outside debug mode.
        docs_url="/docs" if app_settings.debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if app_settings.debug else None,
        dependencies=[Depends(auth_dependencies.require_basic_auth)],
    )
    app.state.settings = app_settings
    app.include_router(tables_router.router, tags=["tables"])
    return app
