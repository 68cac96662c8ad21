"""
Payload models for the decode-and-parse step of a request.

Decoding never raises: it returns either a ``DecodedPayload`` or a
``PayloadFault`` describing why the body could not be used.
"""

from enum import Enum
from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Field


class FaultKind(str, Enum):
    """Reasons a request body could not be turned into a payload."""

    MISSING_BODY = 'MISSING_BODY'
    EMPTY_BODY = 'EMPTY_BODY'
    INVALID_BASE64 = 'INVALID_BASE64'
    INVALID_JSON = 'INVALID_JSON'


class DecodedPayload(BaseModel):
    """A request body that decoded and parsed successfully."""

    model_config = ConfigDict(frozen=True)

    value: Annotated[Any, Field(
        description='Parsed JSON value: object, array or scalar',
        examples=[{'a': 1}, [1, 2, 3], 'text', None]
    )]


class PayloadFault(BaseModel):
    """A request body that could not be decoded or parsed."""

    model_config = ConfigDict(frozen=True)

    kind: Annotated[FaultKind, Field(
        description='Which stage rejected the body',
        examples=['INVALID_BASE64']
    )]

    detail: Annotated[str, Field(
        description='Human readable reason',
        examples=['Incorrect padding']
    )]


PayloadResult = Union[DecodedPayload, PayloadFault]
