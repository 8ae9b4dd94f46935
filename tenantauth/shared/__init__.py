"""Shared utilities: request context, telemetry (logging) and helpers."""
