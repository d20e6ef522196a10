"""Shared cross-cutting helpers (datetime, generators, telemetry)."""
