"""EazyLiens API — FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eazyliens.config import get_settings
from eazyliens.infrastructure.database.bootstrap import (
    create_schema,
    ensure_database_exists,
    load_color_rules,
    seed_color_rules,
    seed_superadmin,
)
from eazyliens.infrastructure.database.session import async_session_factory, engine
from eazyliens.infrastructure.dependencies import get_change_notifier, install_color_rules
from eazyliens.infrastructure.logging.log_config import setup_logging
from eazyliens.presentation.api.v1.router import router as v1_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Prepare the database on startup; close open change streams on shutdown."""
    settings = get_settings()
    setup_logging(settings)

    await ensure_database_exists(settings.database_url)
    await create_schema(engine)
    await seed_superadmin(async_session_factory, settings.bootstrap_superadmin)
    await seed_color_rules(async_session_factory)
    install_color_rules(await load_color_rules(async_session_factory))
    logger.info("%s %s ready (%s)", settings.app_title, settings.app_version, settings.app_env)

    yield

    notifier = get_change_notifier()
    logger.info("Closing %d change stream(s)", notifier.client_count)
    await notifier.shutdown()
    await engine.dispose()


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(v1_router, prefix="/api")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("eazyliens.main:app", host="0.0.0.0", port=8030, reload=True)
