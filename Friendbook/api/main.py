"""
REST surface over ``SocialService``.

The service (and therefore the whole in-memory store) is created once per
app in ``create_app`` and lives on ``app.state.service`` until the process
exits. Nothing is persisted.

Run with: `uvicorn Friendbook.api.main:app --reload`
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from ..core.config import Settings, get_settings
from ..core.logging import configure_logging
from ..core.seed import seed_demo_data
from ..core.service import SocialService
from . import register_routers

logger = logging.getLogger(__name__)


def create_app(service: Optional[SocialService] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or (service.settings if service else get_settings())
    configure_logging(settings.LOG_LEVEL)

    if service is None:
        service = SocialService(settings=settings)
        if settings.SEED_DEMO_DATA:
            seed_demo_data(service)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Social network API: profiles, friends, posts, reactions, comments and ranked feeds.",
        version=settings.VERSION,
    )
    app.state.service = service
    register_routers(app)

    @app.get("/health", tags=["Health"])
    def health() -> dict:
        return {"status": "ok", "service": settings.APP_NAME, "version": settings.VERSION}

    logger.info("%s ready with %s users", settings.APP_NAME, len(service.identity))
    return app


app = create_app()
