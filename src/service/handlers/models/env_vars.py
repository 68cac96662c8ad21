"""
Environment variable models for type-safe configuration.

Handlers read their process-wide settings once at cold start through
``aws_lambda_env_modeler``; invalid values fail the import of the handler.
"""

from typing import Annotated, Literal

from aws_lambda_env_modeler import get_environment_variables
from pydantic import BaseModel, Field

ObserverName = Literal['logger', 'stdout']


class HandlerEnvVars(BaseModel):
    """Environment variables for the gateway function handlers."""

    # Service name for observability
    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        description='Service name for AWS Powertools'
    )] = 'gateway-functions'

    # Metrics namespace
    POWERTOOLS_METRICS_NAMESPACE: Annotated[str, Field(
        description='Namespace for CloudWatch metrics'
    )] = 'GatewayFunctions'

    # Log level for AWS Powertools Logger
    LOG_LEVEL: Annotated[str, Field(
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'

    # Enable/disable X-Ray tracing
    POWERTOOLS_TRACE_DISABLED: Annotated[str, Field(
        description='Disable X-Ray tracing (true/false)',
        pattern=r'^(true|false)$'
    )] = 'false'

    # Where decoded payloads are emitted
    PAYLOAD_OBSERVER: Annotated[ObserverName, Field(
        description='Sink for decoded payloads: structured log record or plain stdout line'
    )] = 'logger'

    @property
    def tracing_enabled(self) -> bool:
        """Check if X-Ray tracing is enabled."""
        return self.POWERTOOLS_TRACE_DISABLED.lower() == 'false'


def get_handler_env_vars() -> HandlerEnvVars:
    """
    Get typed environment variables for the handlers.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=HandlerEnvVars)
