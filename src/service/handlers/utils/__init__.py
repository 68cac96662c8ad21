"""Observability, observer and response helpers for the handlers."""
