"""
Service Models Package

This package contains the Pydantic models for decoded payloads and for the
response bodies returned by the handlers.
"""

from .output import ErrorOutput, MessageOutput
from .payload import DecodedPayload, FaultKind, PayloadFault, PayloadResult

__all__ = [
    # Payload models
    "DecodedPayload",
    "FaultKind",
    "PayloadFault",
    "PayloadResult",

    # Output models
    "MessageOutput",
    "ErrorOutput",
]
