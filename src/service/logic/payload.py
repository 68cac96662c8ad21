"""
Decode-and-parse logic for inbound request bodies.

The body of every inbound event is base64 text wrapping a JSON document.
Decoding follows the lenient rules of browser ``atob``: ASCII whitespace is
ignored and trailing ``=`` padding is optional.
"""

import base64
import binascii
import json
import re
from typing import Any, Mapping

from service.handlers.utils.observability import tracer
from service.models.payload import DecodedPayload, FaultKind, PayloadFault, PayloadResult

_ASCII_WHITESPACE = re.compile(r'[\t\n\f\r ]+')
_TRAILING_PADDING = re.compile(r'={1,2}$')
_BASE64_ALPHABET = re.compile(r'[A-Za-z0-9+/]*')


def decode_base64_text(body: str) -> bytes:
    """
    Decode base64 text the way the gateway clients encode it.

    Raises:
        ValueError: if the text is not valid base64
    """
    text = _ASCII_WHITESPACE.sub('', body)
    if len(text) % 4 == 0:
        text = _TRAILING_PADDING.sub('', text)

    if len(text) % 4 == 1:
        raise ValueError('Invalid base64 length')
    if not _BASE64_ALPHABET.fullmatch(text):
        raise ValueError('Body contains characters outside the base64 alphabet')

    return base64.b64decode(text + '=' * (-len(text) % 4), validate=True)


def parse_json_bytes(raw: bytes) -> Any:
    """
    Parse UTF-8 encoded JSON.

    Raises:
        ValueError: if the bytes are not UTF-8 or not a JSON document
    """
    return json.loads(raw.decode('utf-8'))


@tracer.capture_method(capture_response=False)
def decode_event_body(event: Mapping[str, Any]) -> PayloadResult:
    """
    Turn the ``body`` of an API Gateway event into a payload.

    Args:
        event: API Gateway proxy event; only ``body`` is read

    Returns:
        DecodedPayload on success, PayloadFault naming the failed stage otherwise
    """
    body = event.get('body')

    if body is None:
        return PayloadFault(kind=FaultKind.MISSING_BODY, detail='Event has no body')
    if not isinstance(body, str):
        return PayloadFault(
            kind=FaultKind.INVALID_BASE64,
            detail=f'Body must be a string, got {type(body).__name__}',
        )
    if body == '':
        return PayloadFault(kind=FaultKind.EMPTY_BODY, detail='Event body is empty')

    try:
        raw = decode_base64_text(body)
    except (binascii.Error, ValueError) as exc:
        return PayloadFault(kind=FaultKind.INVALID_BASE64, detail=str(exc))

    try:
        value = parse_json_bytes(raw)
    except ValueError as exc:
        # UnicodeDecodeError and JSONDecodeError are both ValueError
        return PayloadFault(kind=FaultKind.INVALID_JSON, detail=str(exc))

    return DecodedPayload(value=value)
