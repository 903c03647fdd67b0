from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import Depends, FastAPI

from healthdata.db import filters as _filters  # noqa: F401  (register SQLAlchemy filters)
from healthdata.db.init_db import init_db
from healthdata.logging_config import configure_app_logging
from healthdata.routers import (
    categories,
    entries,
    events,
    health,
    indicators,
    organizations,
    profiles,
    sources,
    variables,
)
from healthdata.security.config import load_security_config
from healthdata.security.dependencies import audit_denials
from healthdata.settings import get_settings

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = get_settings()
        configure_app_logging(settings.log_level)
        logger.info("App startup beginning")

        app.state.security_config = load_security_config(settings.resolved_security_config_path())
        logger.info(
            "Loaded security config: %s (auth provider=%s)",
            settings.resolved_security_config_path(),
            app.state.security_config.auth.provider,
        )
        init_db(seed=settings.seed_demo_data)
        logger.info("Database initialized (tables ensured, seed=%s)", settings.seed_demo_data)

        yield

    # Each router resolves the principal itself; /health stays public.
    app = FastAPI(title="Health data reporting API", lifespan=lifespan)

    app.include_router(health.router)

    # Refusals on these routers land in the events log.
    audited = [Depends(audit_denials)]
    for module in (categories, entries, events, indicators, organizations, profiles, sources, variables):
        app.include_router(module.router, dependencies=audited)

    return app


app = create_app()
