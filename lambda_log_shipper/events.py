"""CloudWatch Logs subscription event decoding.

The Lambda receives ``{"awslogs": {"data": "<base64 gzip json>"}}`` where the
decoded document looks like:

    {
      "messageType": "DATA_MESSAGE",
      "logGroup": "/aws/lambda/service-env-funcName",
      "logStream": "2016/08/17/[76]afe5c000d5344c33b5d88be7a4c55816",
      "logEvents": [{"id": "...", "timestamp": 1471453200000, "message": "..."}]
    }
"""

import base64
import binascii
import gzip
import json
import zlib
from dataclasses import dataclass, field

import jsonschema

from lambda_log_shipper.errors import EventDecodeError
from lambda_log_shipper.models import RawLine

CONTROL_MESSAGE = "CONTROL_MESSAGE"

SUBSCRIPTION_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["messageType", "logGroup", "logStream", "logEvents"],
    "properties": {
        "messageType": {"type": "string"},
        "logGroup": {"type": "string"},
        "logStream": {"type": "string"},
        "logEvents": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["timestamp", "message"],
                "properties": {
                    "id": {"type": "string"},
                    "timestamp": {"type": ["integer", "string"]},
                    "message": {"type": "string"},
                },
            },
        },
    },
}

_validator = jsonschema.Draft202012Validator(SUBSCRIPTION_SCHEMA)


@dataclass
class LogBatch:
    group_id: str = ""
    stream_id: str = ""
    lines: list[RawLine] = field(default_factory=list)


def encode_payload(payload: dict) -> dict:
    """Build a subscription event from a decoded payload dict."""
    data = base64.b64encode(gzip.compress(json.dumps(payload).encode("utf-8")))
    return {"awslogs": {"data": data.decode("ascii")}}


def decode_payload(event: dict) -> dict:
    """Return the decoded JSON payload of a subscription event."""
    try:
        data = event["awslogs"]["data"]
    except (KeyError, TypeError):
        raise EventDecodeError("event has no awslogs.data") from None

    try:
        raw = gzip.decompress(base64.b64decode(data, validate=True))
        return json.loads(raw)
    except (binascii.Error, OSError, EOFError, zlib.error, ValueError) as e:
        raise EventDecodeError(f"cannot decode awslogs.data: {e}") from e


def decode_event(event: dict) -> LogBatch:
    """Decode and validate a subscription event into a LogBatch.

    Control messages (sent when a subscription is created) yield an empty batch.
    """
    payload = decode_payload(event)

    if isinstance(payload, dict) and payload.get("messageType") == CONTROL_MESSAGE:
        return LogBatch(payload.get("logGroup", ""), payload.get("logStream", ""))

    errors = list(_validator.iter_errors(payload))
    if errors:
        raise EventDecodeError("; ".join(e.message for e in errors))

    lines = [RawLine(str(e["timestamp"]), e["message"]) for e in payload["logEvents"]]
    return LogBatch(payload["logGroup"], payload["logStream"], lines)
