"""Typed configuration models for the handlers."""
