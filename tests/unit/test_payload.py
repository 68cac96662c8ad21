"""
Unit tests for decoding and parsing request bodies.
"""

import base64

import pytest

from service.logic.payload import decode_base64_text, decode_event_body, parse_json_bytes
from service.models.payload import DecodedPayload, FaultKind, PayloadFault


class TestDecodeBase64Text:
    """Test cases for decode_base64_text."""

    def test_padded_input(self):
        assert decode_base64_text("eyJhIjoxfQ==") == b'{"a":1}'

    def test_missing_padding_is_tolerated(self):
        assert decode_base64_text("eyJhIjoxfQ") == b'{"a":1}'

    def test_whitespace_is_ignored(self):
        assert decode_base64_text("eyJh\nIjox fQ==\r\n") == b'{"a":1}'

    def test_empty_input_decodes_to_nothing(self):
        assert decode_base64_text("") == b""

    @pytest.mark.parametrize("text", [
        "abcde",          # 4n+1 characters
        "eyJhIjoxfQ=",    # padding on a length that is not a multiple of 4
        "eyJh*joxfQ==",   # outside the alphabet
        "eyJhIjoxfQ-_",   # url-safe alphabet is not accepted
        "ëyJhIjoxfQ==",   # non-ascii
    ])
    def test_invalid_input_raises(self, text):
        with pytest.raises(ValueError):
            decode_base64_text(text)


class TestParseJsonBytes:
    """Test cases for parse_json_bytes."""

    def test_parses_object(self):
        assert parse_json_bytes(b'{"a": [1, 2]}') == {"a": [1, 2]}

    def test_rejects_non_utf8(self):
        with pytest.raises(ValueError):
            parse_json_bytes(b"\xff\xfe\x00")

    def test_rejects_non_json(self):
        with pytest.raises(ValueError):
            parse_json_bytes(b"not json")


class TestDecodeEventBody:
    """Test cases for decode_event_body."""

    @pytest.mark.parametrize("value", [
        {"a": 1},
        {"nested": {"list": [1, "two", None, True]}},
        [1, 2, 3],
        "just a string",
        42,
        3.5,
        False,
        None,
    ])
    def test_valid_body_decodes_to_payload(self, value, encode_body):
        result = decode_event_body({"body": encode_body(value)})

        assert isinstance(result, DecodedPayload)
        assert result.value == value

    def test_absent_body(self):
        result = decode_event_body({"headers": {}})

        assert isinstance(result, PayloadFault)
        assert result.kind == FaultKind.MISSING_BODY

    def test_null_body(self):
        result = decode_event_body({"body": None})

        assert isinstance(result, PayloadFault)
        assert result.kind == FaultKind.MISSING_BODY

    def test_empty_body(self):
        result = decode_event_body({"body": ""})

        assert isinstance(result, PayloadFault)
        assert result.kind == FaultKind.EMPTY_BODY

    def test_non_string_body(self):
        result = decode_event_body({"body": {"a": 1}})

        assert isinstance(result, PayloadFault)
        assert result.kind == FaultKind.INVALID_BASE64
        assert "dict" in result.detail

    def test_plain_json_body_is_not_base64(self):
        result = decode_event_body({"body": '{"a": 1}'})

        assert isinstance(result, PayloadFault)
        assert result.kind == FaultKind.INVALID_BASE64

    def test_base64_of_non_json(self):
        body = base64.b64encode(b"hello world").decode("ascii")

        result = decode_event_body({"body": body})

        assert isinstance(result, PayloadFault)
        assert result.kind == FaultKind.INVALID_JSON

    def test_base64_of_non_utf8(self):
        body = base64.b64encode(b"\xff\xfe\xfd").decode("ascii")

        result = decode_event_body({"body": body})

        assert isinstance(result, PayloadFault)
        assert result.kind == FaultKind.INVALID_JSON

    def test_whitespace_only_body_is_not_json(self):
        result = decode_event_body({"body": "  \n"})

        assert isinstance(result, PayloadFault)
        assert result.kind == FaultKind.INVALID_JSON

    def test_transport_metadata_is_ignored(self, make_event, encode_body):
        event = make_event(body=encode_body({"a": 1}), headers={"x-anything": "1"}, rawQueryString="q=1")

        result = decode_event_body(event)

        assert result == DecodedPayload(value={"a": 1})
