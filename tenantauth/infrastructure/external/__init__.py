"""Adapters for external services (identity providers)."""
