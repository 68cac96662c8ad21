"""
Pytest configuration and shared fixtures for the gateway functions.

This module provides common test fixtures and configuration used across
unit, integration, benchmark, and end-to-end tests.
"""

import base64
import json
import os
from typing import Any, Callable, Dict, Optional
from unittest.mock import Mock

import pytest

# Handlers read their configuration at import time, before any fixture runs
os.environ.update({
    "AWS_DEFAULT_REGION": "us-east-1",
    "AWS_REGION": "us-east-1",
    "POWERTOOLS_SERVICE_NAME": "test-gateway-functions",
    "POWERTOOLS_METRICS_NAMESPACE": "TestGatewayFunctions",
    "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
    "LOG_LEVEL": "DEBUG",
    "PAYLOAD_OBSERVER": "logger",
})


def encode_body(value: Any) -> str:
    """Serialize a value to JSON and base64 encode it, like a gateway client does."""
    return base64.b64encode(json.dumps(value).encode("utf-8")).decode("ascii")


@pytest.fixture(name="encode_body")
def encode_body_fixture() -> Callable[[Any], str]:
    return encode_body


@pytest.fixture
def make_event() -> Callable[..., Dict[str, Any]]:
    """Factory for API Gateway HTTP API (payload 2.0) events."""

    def _make_event(body: Optional[Any] = None, name: str = "function1", **overrides) -> Dict[str, Any]:
        event = {
            "version": "2.0",
            "routeKey": f"POST /{name}",
            "rawPath": f"/{name}",
            "rawQueryString": "",
            "headers": {
                "content-type": "text/plain",
                "user-agent": "pytest/test-agent",
            },
            "requestContext": {
                "accountId": "123456789012",
                "apiId": "testapi123",
                "requestId": "test-request-id-123",
                "stage": "$default",
                "http": {
                    "method": "POST",
                    "path": f"/{name}",
                    "protocol": "HTTP/1.1",
                    "sourceIp": "127.0.0.1",
                    "userAgent": "pytest/test-agent",
                },
            },
            "body": body,
            "isBase64Encoded": False,
        }
        event.update(overrides)
        return event

    return _make_event


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "function1"
    context.function_version = "$LATEST"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:function1"
    context.memory_limit_in_mb = 128
    context.aws_request_id = "test-lambda-context-id"
    context.log_group_name = "/aws/lambda/function1"
    context.log_stream_name = "2024/01/01/[$LATEST]test123"
    context.get_remaining_time_in_millis.return_value = 20000
    return context


@pytest.fixture
def source_tree(tmp_path):
    """
    A small source root laid out like ``src``: two handlers and a shared package.

    - alpha/index.py imports the shared package
    - beta/index.py also imports a module sitting next to it
    - unused/ is never imported
    """
    src = tmp_path / "src"
    files = {
        "shared/__init__.py": "from shared.text import shout\n",
        "shared/text.py": (
            "import json\n"
            "\n"
            "\n"
            "def shout(value):\n"
            "    return json.dumps(value).upper()\n"
        ),
        "alpha/index.py": (
            "from shared import shout\n"
            "\n"
            "\n"
            "def handler(event, context):\n"
            "    return {'statusCode': 200, 'body': shout(event.get('body'))}\n"
        ),
        "beta/index.py": (
            "import shared.text\n"
            "from helpers import twice\n"
            "\n"
            "\n"
            "def handler(event, context):\n"
            "    return {'statusCode': 200, 'body': twice(shared.text.shout('b'))}\n"
        ),
        "beta/helpers.py": (
            "def twice(value):\n"
            "    return value * 2\n"
        ),
        "unused/other.py": "VALUE = 1\n",
    }
    for relative, content in files.items():
        path = src / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return src


# Integration test fixtures
@pytest.fixture
def integration_client():
    """HTTP client for a deployed API; skips when no API is configured."""
    import httpx

    base_url = os.environ.get("API_BASE_URL")
    if not base_url:
        pytest.skip("API_BASE_URL is not set")

    with httpx.Client(base_url=base_url, timeout=30.0) as client:
        yield client


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
    config.addinivalue_line("markers", "benchmark: Performance benchmark tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Add markers based on test location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "e2e" in str(item.fspath):
            item.add_marker(pytest.mark.e2e)
        elif "benchmark" in str(item.fspath):
            item.add_marker(pytest.mark.benchmark)
