from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI

from app.api import router
from logging_config import configure_logging
from services.ingest import build_default_ingest_service
from settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    service = build_default_ingest_service()
    service.start()
    try:
        yield
    finally:
        service.shutdown()
        build_default_ingest_service.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Ambient Weather MQTT Bridge",
        description="Republishes weather-station reports as Home Assistant MQTT sensors.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    logger.info(
        "Listening on %s:%s (broker %s:%s)",
        settings.http_host,
        settings.http_port,
        settings.broker_host,
        settings.broker_port,
    )
    uvicorn.run(app, host=settings.http_host, port=settings.http_port, log_config=None)
