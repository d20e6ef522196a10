"""Application lifespan: startup and shutdown.

Sets app.state.ws_manager, app.state.cache and app.state.http_client,
starts the Redis change broadcast task and the change publisher, and
configures OpenTelemetry.
Everything Redis-related is skipped when REDIS_ENABLED is false.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from taskboard.api.websocket import ConnectionManager
from taskboard.core.config import get_settings
from taskboard.infrastructure.cache.redis_cache import CacheService
from taskboard.infrastructure.messaging.redis_pubsub import (
    ChangePublisher,
    run_change_broadcast,
    set_change_publisher,
)
from taskboard.infrastructure.persistence.database import dispose_engine, get_engine
from taskboard.shared.telemetry.telemetry import TelemetryConfig

logger = logging.getLogger(__name__)


def _setup_telemetry(app: FastAPI) -> TelemetryConfig | None:
    settings = get_settings()
    if not settings.telemetry_enabled:
        return None
    telemetry = TelemetryConfig.from_settings(settings)
    started = telemetry.start(
        exporter=settings.telemetry_exporter,
        otlp_endpoint=settings.telemetry_otlp_endpoint,
        sample_rate=settings.telemetry_sample_rate,
    )
    if not started:
        return None
    telemetry.instrument(app, engine=get_engine(), redis=settings.redis_enabled)
    return telemetry


@asynccontextmanager
async def create_lifespan(app: FastAPI):
    """Lifespan context: connect Redis, start broadcast, then clean up on shutdown."""
    settings = get_settings()
    app.state.ws_manager = ConnectionManager()
    app.state.cache = None
    # Shared client for the provisioning collaborator.
    app.state.http_client = httpx.AsyncClient(
        timeout=settings.provisioning_timeout_seconds
    )
    broadcast_task: asyncio.Task | None = None
    publisher: ChangePublisher | None = None

    if settings.redis_enabled:
        cache = CacheService()
        await cache.connect()
        app.state.cache = cache if cache.is_available() else None

        publisher = ChangePublisher()
        await publisher.connect()
        set_change_publisher(publisher)

        broadcast_task = asyncio.create_task(run_change_broadcast(app))
    else:
        logger.info("Redis disabled: no permission cache or change notifications")

    telemetry = _setup_telemetry(app)

    yield

    if broadcast_task is not None:
        broadcast_task.cancel()
        try:
            await broadcast_task
        except asyncio.CancelledError:
            pass
    if publisher is not None:
        await publisher.disconnect()
        set_change_publisher(None)
    if app.state.cache is not None:
        await app.state.cache.disconnect()
    if telemetry is not None:
        telemetry.shutdown()
    await app.state.http_client.aclose()
    await dispose_engine()
    logger.info("Shutdown complete")
