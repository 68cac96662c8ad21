"""
AWS Lambda Handlers Module.

Shared building blocks for the gateway function entry points. Each function
directory binds ``index.handler`` with ``payload_handler.make_handler``.

The handlers use AWS Lambda Powertools for:
- Structured logging with correlation IDs
- Distributed tracing with X-Ray
- Custom metrics collection
"""

__version__ = "1.0.0"

# Re-export handler utilities for convenience
from service.handlers.utils.observability import logger, tracer, metrics

__all__ = [
    "logger",
    "tracer",
    "metrics",
]
