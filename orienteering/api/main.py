import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orienteering.adapters.sqlite.migrator import SQLiteMigrator
from orienteering.api.deps import get_rules, get_settings
from orienteering.app_shell.config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()
    rules = get_rules()

    # Bring the schema up to date on startup (fail-fast)
    try:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        SQLiteMigrator(settings.db_path(rules), settings.migrations_dir(rules)).run_migrations()
        logger.info("Database ready at %s", settings.db_path(rules))
    except Exception:
        logger.critical("Database migration failed", exc_info=True)
        sys.exit(1)

    yield


def create_app() -> FastAPI:
    rules = get_rules()
    configure_logging(rules)
    logger.info("Rules loaded from %s", get_settings().rules_path)

    app = FastAPI(
        title=rules.api.title,
        version=rules.api.version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # --- Routers ---
    from orienteering.api.routes import start_lists

    app.include_router(start_lists.router, prefix="/api", tags=["Start Lists"])

    app.add_middleware(
        CORSMiddleware,
        allow_origins=rules.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "service": "api"}

    return app


app = create_app()
