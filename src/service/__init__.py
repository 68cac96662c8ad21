"""
Gateway Functions Service Module.

This package contains the code shared by the gateway functions:

- handlers: Lambda handler factory, observers and observability setup
- logic: base64 and JSON decoding of request bodies
- models: payload and response models
"""

__version__ = "1.0.0"
__description__ = "Base64 JSON payload handlers behind API Gateway"
