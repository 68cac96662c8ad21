"""
API Gateway proxy result helpers.

Results carry only ``statusCode`` and a JSON ``body``; the gateway applies
its default content type.
"""

from typing import Any, Dict

from pydantic import BaseModel

from service.models.output import ErrorOutput, MessageOutput
from service.models.payload import PayloadFault


def create_api_response(status_code: int, body: BaseModel) -> Dict[str, Any]:
    """Create an API Gateway proxy result with a compact JSON body."""
    return {
        "statusCode": status_code,
        "body": body.model_dump_json(),
    }


def message_response(message: str) -> Dict[str, Any]:
    return create_api_response(200, MessageOutput(message=message))


def fault_response(fault: PayloadFault) -> Dict[str, Any]:
    return create_api_response(400, ErrorOutput(error=fault.kind, detail=fault.detail))
