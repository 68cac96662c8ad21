"""
Business Logic Layer Module.

Request handling logic that does not depend on the Lambda runtime: decoding
base64 bodies and parsing them into JSON payloads.
"""

from service.logic.payload import decode_base64_text, decode_event_body, parse_json_bytes

__all__ = [
    "decode_base64_text",
    "decode_event_body",
    "parse_json_bytes",
]
