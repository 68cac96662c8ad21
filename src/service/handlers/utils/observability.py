"""
Centralized observability utilities for the gateway function handlers.

This module provides the configured AWS Lambda Powertools instances for
logging, tracing, and metrics shared by every handler in the process.
"""

import os

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import Metrics
from aws_lambda_powertools.tracing import Tracer

# Used when POWERTOOLS_METRICS_NAMESPACE is not set
METRICS_NAMESPACE = 'GatewayFunctions'

# JSON output format, service name can be set by environment variable "POWERTOOLS_SERVICE_NAME"
logger: Logger = Logger()

# Service name can be set by environment variable "POWERTOOLS_SERVICE_NAME"
# Disabled by setting POWERTOOLS_TRACE_DISABLED to "True"
tracer: Tracer = Tracer()

metrics: Metrics = Metrics(namespace=os.environ.get('POWERTOOLS_METRICS_NAMESPACE', METRICS_NAMESPACE))
