"""Line classification: ordered prefix predicates, first match wins.

A Lambda function log message looks like this:
    "2017-04-26T10:41:09.023Z\tdb95c6da-2a6c-11e7-9550-c91b65931beb\tloading index.html...\n"
but the platform also emits START, END and REPORT lines:
    "START RequestId: 67c005bb-641f-11e6-b35d-6b6c651a2f01 Version: 31\n"
    "END RequestId: 5e665f81-641f-11e6-ab0f-b1affae60d28\n"
    "REPORT RequestId: 5e665f81-...\tDuration: 1095.52 ms\tBilled Duration: 1100 ms \t..."
"""

from enum import Enum

LIFECYCLE_PREFIXES = ("START RequestId", "END RequestId", "REPORT RequestId")
USAGE_REPORT_PREFIX = "REPORT RequestId:"
METRIC_MARKER = "MONITORING|"


class LineKind(Enum):
    LIFECYCLE = "lifecycle"
    CUSTOM_METRIC = "custom_metric"
    APPLICATION_LOG = "application_log"


def split_event(text: str) -> list[str]:
    """Split into [timestamp, requestId, event]; extra tabs stay in event."""
    return text.split("\t", 2)


def classify_line(text: str) -> LineKind:
    if text.startswith(LIFECYCLE_PREFIXES):
        return LineKind.LIFECYCLE

    parts = split_event(text)
    if len(parts) == 3 and parts[2].startswith(METRIC_MARKER):
        return LineKind.CUSTOM_METRIC

    return LineKind.APPLICATION_LOG


def is_usage_report(text: str) -> bool:
    """Usage reports are detected independently of classify_line()."""
    return text.startswith(USAGE_REPORT_PREFIX)
