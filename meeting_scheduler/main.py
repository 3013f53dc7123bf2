from __future__ import annotations

import logging

from fastapi import FastAPI

from meeting_scheduler.api.router import api_router
from meeting_scheduler.core.config import get_settings
from meeting_scheduler.services.normalizer import TOOL_VERSION
from meeting_scheduler.services.scheduling import get_graph_client, get_http_client


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Construct the FastAPI application and configure routes."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Teams Meeting Scheduler", version=TOOL_VERSION)
    app.include_router(api_router)

    @app.on_event("startup")
    def on_startup() -> None:
        logger.info("Meeting scheduler ready (environment=%s)", settings.app_env)

    @app.on_event("shutdown")
    def on_shutdown() -> None:
        if get_http_client.cache_info().currsize:
            get_http_client().close()
            get_http_client.cache_clear()
        get_graph_client.cache_clear()

    return app


app = create_app()
