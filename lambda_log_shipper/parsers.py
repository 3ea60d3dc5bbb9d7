"""Log record and custom metric builders.

Both builders take one RawLine and return None when the line belongs to
another category. Structurally broken lines raise LineParseError.
"""

import json
import math
from datetime import datetime, timezone
from typing import Any

from lambda_log_shipper.classifier import LineKind, classify_line, split_event
from lambda_log_shipper.errors import LineParseError
from lambda_log_shipper.models import Context, Dimension, LogRecord, MetricObservation, RawLine
from lambda_log_shipper.timestamps import parse_event_timestamp, parse_iso_timestamp

RESERVED_DIMENSIONS = ("Function", "Version")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def capitalize_unit(unit: str) -> str:
    """'milliseconds' → 'Milliseconds'.

    Only the first letter changes, so units like 'bits/second' do not become
    the CloudWatch spelling 'Bits/Second'.
    """
    return unit[:1].upper() + unit[1:]


def base_dimensions(function_name: str, version: str) -> list[Dimension]:
    return [Dimension("Function", function_name), Dimension("Version", version)]


def make_metric(
    value: float,
    unit: str,
    name: str,
    dimensions: list[Dimension],
    namespace: str,
    timestamp: datetime,
) -> MetricObservation:
    return MetricObservation(
        value=value,
        unit=capitalize_unit(unit),
        name=name,
        dimensions=tuple(dimensions),
        namespace=namespace,
        timestamp=timestamp,
    )


def _try_parse_object(text: str) -> dict[str, Any] | None:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(data, dict):
        return None
    return data


def _parse_dimensions(dimension_list: str) -> list[Dimension]:
    """Parse 'k1=v1, k2=v2' into Dimensions, dropping reserved and malformed pairs."""
    seen: set[str] = set(RESERVED_DIMENSIONS)
    dimensions = []
    for pair in dimension_list.split(","):
        kv = pair.strip().split("=")
        if len(kv) != 2:
            continue
        name, value = kv
        if name in seen:
            continue
        seen.add(name)
        dimensions.append(Dimension(name, value))
    return dimensions


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def build_log_record(
    context: Context,
    function_name: str,
    version: str,
    line: RawLine,
    now: datetime | None = None,
) -> LogRecord | None:
    """Turn an application log line into a LogRecord.

    A JSON object payload has its 'level' and 'message' lifted to the top
    level and the request id added to the remaining fields. Anything else is
    kept as a raw debug message with empty fields.
    """
    if classify_line(line.text) is not LineKind.APPLICATION_LOG:
        return None

    parts = split_event(line.text)
    if len(parts) < 3:
        raise LineParseError("expected timestamp, request id and message", line.text)
    timestamp, request_id, event = parts

    try:
        ts = parse_iso_timestamp(timestamp)
    except ValueError:
        # e.g. "[INFO]\t<ts>\t<requestId>\t<msg>" from the Python runtime
        ts = parse_event_timestamp(line.timestamp) or now or datetime.now(timezone.utc)

    record = LogRecord(
        group=context.group_id,
        stream=context.stream_id,
        function_name=function_name,
        version=version,
        timestamp=ts,
    )

    fields = _try_parse_object(event)
    if fields is not None:
        level = fields.pop("level", None) or "debug"
        record.level = str(level).lower()
        record.message = fields.pop("message", None)
        fields["requestId"] = request_id
        record.fields = fields
    else:
        record.level = "debug"
        record.message = event
        record.fields = {}

    return record


def build_custom_metric(
    function_name: str, version: str, line: RawLine, now: datetime
) -> MetricObservation | None:
    """Turn a MONITORING line into a MetricObservation.

    Format:
        MONITORING|value|unit|name|namespace|dim1=value1, dim2=value2, ...
    The dimension list is optional.
    """
    if classify_line(line.text) is not LineKind.CUSTOM_METRIC:
        return None

    event = split_event(line.text)[2]
    metric_data = event.split("|")
    if len(metric_data) < 5:
        raise LineParseError(
            f"expected at least 5 '|' fields, got {len(metric_data)}", line.text
        )

    try:
        value = float(metric_data[1])
    except ValueError:
        raise LineParseError(f"invalid metric value {metric_data[1]!r}", line.text) from None
    if not math.isfinite(value):
        raise LineParseError(f"non-finite metric value {metric_data[1]!r}", line.text)

    dimensions = base_dimensions(function_name, version)
    if len(metric_data) > 5:
        dimensions.extend(_parse_dimensions(metric_data[5].strip()))

    return make_metric(
        value,
        metric_data[2].strip(),
        metric_data[3].strip(),
        dimensions,
        metric_data[4].strip(),
        now,
    )
