"""
Payload observers.

An observer receives every decoded payload exactly once per invocation. The
observer is picked at cold start from ``PAYLOAD_OBSERVER`` and can be
replaced by passing one to ``make_handler``.
"""

import json
from typing import Any, Optional, Protocol

from aws_lambda_powertools.logging import Logger

from service.handlers.models.env_vars import HandlerEnvVars, get_handler_env_vars
from service.handlers.utils.observability import logger


class PayloadObserver(Protocol):
    def observe(self, value: Any) -> None:
        ...


class LoggerObserver:
    """Emits the payload as a structured Powertools log record."""

    def __init__(self, log: Optional[Logger] = None):
        self._logger = log or logger

    def observe(self, value: Any) -> None:
        self._logger.info('Decoded request payload', extra={'payload': value})


class StdoutObserver:
    """Prints the payload as a single JSON line, like ``console.log``."""

    def observe(self, value: Any) -> None:
        print(json.dumps(value), flush=True)


def resolve_observer(env_vars: Optional[HandlerEnvVars] = None) -> PayloadObserver:
    """
    Build the observer selected by process configuration.

    Args:
        env_vars: already loaded settings; read from the environment when omitted

    Returns:
        Observer instance for ``PAYLOAD_OBSERVER``
    """
    settings = env_vars or get_handler_env_vars()
    if settings.PAYLOAD_OBSERVER == 'stdout':
        return StdoutObserver()
    return LoggerObserver()
