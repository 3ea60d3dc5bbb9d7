"""Tests for subscription event decoding."""

import base64
import gzip

import pytest

from lambda_log_shipper.errors import EventDecodeError
from lambda_log_shipper.events import decode_event, decode_payload, encode_payload
from lambda_log_shipper.models import RawLine

PAYLOAD = {
    "messageType": "DATA_MESSAGE",
    "owner": "123456789012",
    "logGroup": "/aws/lambda/fn",
    "logStream": "2020/01/01/[$LATEST]abc",
    "subscriptionFilters": ["ship-logs"],
    "logEvents": [
        {"id": "1", "timestamp": 1577836800000, "message": "START RequestId: r1 Version: $LATEST\n"},
        {"id": "2", "timestamp": 1577836800001, "message": "2020-01-01T00:00:00.001Z\tr1\thello\n"},
    ],
}


class TestDecodeEvent:
    def test_data_message(self):
        batch = decode_event(encode_payload(PAYLOAD))
        assert batch.group_id == "/aws/lambda/fn"
        assert batch.stream_id == "2020/01/01/[$LATEST]abc"
        assert batch.lines == [
            RawLine("1577836800000", "START RequestId: r1 Version: $LATEST\n"),
            RawLine("1577836800001", "2020-01-01T00:00:00.001Z\tr1\thello\n"),
        ]

    def test_control_message_is_empty(self):
        event = encode_payload({
            "messageType": "CONTROL_MESSAGE",
            "logGroup": "",
            "logStream": "",
            "logEvents": [{"id": "", "timestamp": 1, "message": "CWL CONTROL MESSAGE: Checking health of destination"}],
        })
        assert decode_event(event).lines == []

    def test_missing_awslogs(self):
        with pytest.raises(EventDecodeError):
            decode_event({"Records": []})

    def test_not_base64(self):
        with pytest.raises(EventDecodeError):
            decode_event({"awslogs": {"data": "!!! not base64 !!!"}})

    def test_not_gzip(self):
        data = base64.b64encode(b"plain bytes").decode("ascii")
        with pytest.raises(EventDecodeError):
            decode_event({"awslogs": {"data": data}})

    def test_not_json(self):
        data = base64.b64encode(gzip.compress(b"{not json")).decode("ascii")
        with pytest.raises(EventDecodeError):
            decode_payload({"awslogs": {"data": data}})

    def test_schema_violation(self):
        bad = dict(PAYLOAD)
        del bad["logStream"]
        with pytest.raises(EventDecodeError) as exc_info:
            decode_event(encode_payload(bad))
        assert "logStream" in str(exc_info.value)

    def test_event_without_message(self):
        bad = dict(PAYLOAD, logEvents=[{"id": "1", "timestamp": 1}])
        with pytest.raises(EventDecodeError):
            decode_event(encode_payload(bad))
