"""Typed outputs of the parsing engine and their wire representations."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

LOG_RECORD_TYPE = "cloudwatch"


@dataclass(frozen=True)
class RawLine:
    timestamp: str
    text: str


@dataclass(frozen=True)
class Context:
    group_id: str
    stream_id: str


@dataclass
class LogRecord:
    group: str
    stream: str
    function_name: str
    version: str
    timestamp: datetime
    level: str = "debug"
    message: str | None = None
    fields: dict[str, Any] = field(default_factory=dict)
    type: str = LOG_RECORD_TYPE


@dataclass(frozen=True)
class Dimension:
    name: str
    value: str


@dataclass(frozen=True)
class MetricObservation:
    value: float
    unit: str
    name: str
    dimensions: tuple[Dimension, ...]
    namespace: str
    timestamp: datetime


@dataclass
class BatchResult:
    logs: list[LogRecord] = field(default_factory=list)
    custom_metrics: list[MetricObservation] = field(default_factory=list)
    usage_metrics: list[MetricObservation] = field(default_factory=list)
    failures: list = field(default_factory=list)


def format_timestamp(ts: datetime) -> str:
    """Render a datetime as ISO-8601 UTC with millisecond precision and a 'Z' suffix."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def record_to_dict(record: LogRecord) -> dict[str, Any]:
    """Convert a LogRecord to the document shipped to the log collector."""
    doc: dict[str, Any] = {
        "logGroup": record.group,
        "logStream": record.stream,
        "functionName": record.function_name,
        "lambdaVersion": record.version,
        "@timestamp": format_timestamp(record.timestamp),
        "type": record.type,
        "level": record.level,
    }
    # an absent message is left out rather than sent as null
    if record.message is not None:
        doc["message"] = record.message
    doc["fields"] = record.fields
    return doc


def metric_to_datum(metric: MetricObservation) -> dict[str, Any]:
    """Convert a MetricObservation to a CloudWatch MetricDatum (namespace excluded)."""
    return {
        "MetricName": metric.name,
        "Dimensions": [{"Name": d.name, "Value": d.value} for d in metric.dimensions],
        "Timestamp": metric.timestamp,
        "Value": metric.value,
        "Unit": metric.unit,
    }
