"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from taskboard.shared.telemetry.logging import (
    RequestIdFilter,
    request_id_var,
    setup_logging,
)
from taskboard.shared.telemetry.telemetry import TelemetryConfig
from taskboard.shared.telemetry.tracing import add_span_attributes, traced

__all__ = [
    "setup_logging",
    "RequestIdFilter",
    "request_id_var",
    "TelemetryConfig",
    "traced",
    "add_span_attributes",
]
