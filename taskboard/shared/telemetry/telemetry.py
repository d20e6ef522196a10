"""OpenTelemetry tracing for the task board.

Exporters: console, otlp, or none. Instrumentation covers FastAPI,
SQLAlchemy, Redis and the logging module (trace ids in log records).
Failures here are logged and never stop the app from serving.
"""

import logging
from collections.abc import Callable

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from taskboard.core.config import Settings

logger = logging.getLogger(__name__)

# Liveness probes would otherwise dominate the trace volume.
_EXCLUDED_URLS = "/api/v1/health"


def _build_exporter(kind: str, otlp_endpoint: str | None) -> SpanExporter | None:
    if kind == "none":
        return None
    if kind == "otlp" and otlp_endpoint:
        return OTLPSpanExporter(
            endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
        )
    if kind != "console":
        logger.warning("Span exporter '%s' not usable, using console", kind)
    return ConsoleSpanExporter()


class TelemetryConfig:
    """Owns the tracer provider for one app instance."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelemetryConfig":
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
        )

    def start(
        self,
        exporter: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> bool:
        """Register a global tracer provider. Returns False if that failed."""
        try:
            provider = TracerProvider(
                resource=Resource(
                    attributes={
                        SERVICE_NAME: self.service_name,
                        SERVICE_VERSION: self.service_version,
                        "deployment.environment": self.environment,
                    }
                ),
                sampler=TraceIdRatioBased(sample_rate),
            )
            span_exporter = _build_exporter(exporter, otlp_endpoint)
            if span_exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(span_exporter))
            trace.set_tracer_provider(provider)
        except Exception:
            logger.exception("Tracing setup failed; continuing without traces")
            return False
        self.tracer_provider = provider
        logger.info(
            "Tracing started for %s %s (exporter=%s, sample_rate=%s)",
            self.service_name,
            self.service_version,
            exporter,
            sample_rate,
        )
        return True

    def instrument(
        self,
        app: FastAPI,
        engine: AsyncEngine | None = None,
        redis: bool = False,
    ) -> list[str]:
        """Instrument the app and, when given, the engine and redis client.

        Returns the names of the instrumentations that were applied.
        """
        if self.tracer_provider is None:
            return []
        provider = self.tracer_provider
        steps: list[tuple[str, Callable[[], None]]] = [
            (
                "fastapi",
                lambda: FastAPIInstrumentor.instrument_app(
                    app, tracer_provider=provider, excluded_urls=_EXCLUDED_URLS
                ),
            ),
            (
                "logging",
                lambda: LoggingInstrumentor().instrument(
                    tracer_provider=provider, set_logging_format=False
                ),
            ),
        ]
        if engine is not None:
            steps.append(
                (
                    "sqlalchemy",
                    lambda: SQLAlchemyInstrumentor().instrument(
                        engine=engine.sync_engine, tracer_provider=provider
                    ),
                )
            )
        if redis:
            steps.append(
                ("redis", lambda: RedisInstrumentor().instrument(tracer_provider=provider))
            )

        applied = []
        for name, apply in steps:
            try:
                apply()
            except Exception:
                logger.exception("Could not instrument %s", name)
            else:
                applied.append(name)
        logger.info("Instrumented: %s", ", ".join(applied) or "nothing")
        return applied

    def shutdown(self) -> None:
        """Flush pending spans."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
        except Exception:
            logger.exception("Tracer provider shutdown failed")
        self.tracer_provider = None
