"""Usage metrics derived from the platform REPORT line.

A typical report message looks like this:
    "REPORT RequestId: 3897a7c2-8ac6-11e7-8e57-bb793172ae75\tDuration: 2.89 ms\t"
    "Billed Duration: 100 ms \tMemory Size: 1024 MB\tMax Memory Used: 20 MB\t\n"
"""

import re
from datetime import datetime

from lambda_log_shipper.classifier import is_usage_report
from lambda_log_shipper.errors import LineParseError
from lambda_log_shipper.models import MetricObservation, RawLine
from lambda_log_shipper.parsers import base_dimensions, make_metric
from lambda_log_shipper.timestamps import parse_event_timestamp

PRICE_PER_GB_SECOND = 0.00001667
USAGE_NAMESPACE = "AWS/Lambda"

_BILLED_DURATION_RE = re.compile(r"Billed Duration: ([\d.]+) ms", re.IGNORECASE)
_MEMORY_SIZE_RE = re.compile(r"Memory Size: ([\d.]+) MB", re.IGNORECASE)
_MAX_MEMORY_USED_RE = re.compile(r"Max Memory Used: ([\d.]+) MB", re.IGNORECASE)


def cost_for_invocation(memory_size_mb: float, billed_duration_ms: float) -> float:
    """Dollar cost of one invocation, rounded to 9 decimal places."""
    raw = PRICE_PER_GB_SECOND * (memory_size_mb / 1024) * (billed_duration_ms / 1000)
    return round(raw, 9)


def _float_with(regex: re.Pattern, part: str, line: str) -> float:
    m = regex.search(part)
    if not m:
        raise LineParseError(f"no match for {regex.pattern!r}", line)
    try:
        return float(m.group(1))
    except ValueError:
        raise LineParseError(f"invalid number {m.group(1)!r}", line) from None


def build_usage_metrics(
    function_name: str, version: str, line: RawLine, now: datetime
) -> list[MetricObservation]:
    """Four observations per REPORT line; an empty list for any other line.

    The observations carry the line's own event timestamp, falling back to
    *now* when it cannot be read.
    """
    if not is_usage_report(line.text):
        return []

    parts = line.text.split("\t", 4)
    if len(parts) < 5:
        raise LineParseError(f"expected 5 tab-separated parts, got {len(parts)}", line.text)

    billed_duration = _float_with(_BILLED_DURATION_RE, parts[2], line.text)
    memory_size = _float_with(_MEMORY_SIZE_RE, parts[3], line.text)
    memory_used = _float_with(_MAX_MEMORY_USED_RE, parts[4], line.text)
    cost = cost_for_invocation(memory_size, billed_duration)

    dimensions = base_dimensions(function_name, version)
    timestamp = parse_event_timestamp(line.timestamp) or now

    # CostInDollars keeps the Megabytes unit label
    return [
        make_metric(billed_duration, "milliseconds", "BilledDuration", dimensions, USAGE_NAMESPACE, timestamp),
        make_metric(memory_size, "megabytes", "MemorySize", dimensions, USAGE_NAMESPACE, timestamp),
        make_metric(memory_used, "megabytes", "MemoryUsed", dimensions, USAGE_NAMESPACE, timestamp),
        make_metric(cost, "megabytes", "CostInDollars", dimensions, USAGE_NAMESPACE, timestamp),
    ]
