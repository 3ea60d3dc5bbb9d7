"""Batch processor: three independent passes over one group/stream batch."""

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, TypeVar

from lambda_log_shipper.errors import LineParseError
from lambda_log_shipper.identity import function_name, lambda_version
from lambda_log_shipper.models import BatchResult, Context, RawLine
from lambda_log_shipper.parsers import build_custom_metric, build_log_record
from lambda_log_shipper.usage import build_usage_metrics

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _run_pass(
    context: Context,
    lines: list[RawLine],
    build: Callable[[RawLine], T],
    failures: list[LineParseError],
) -> list[T]:
    """Apply *build* to every line, isolating per-line parse failures."""
    results = []
    for line in lines:
        try:
            results.append(build(line))
        except LineParseError as e:
            err = e.with_context(context.group_id, context.stream_id)
            logger.warning("Skipping line: %s", err)
            failures.append(err)
    return results


def process_batch(
    group_id: str,
    stream_id: str,
    lines: Iterable[RawLine],
    now: datetime | None = None,
) -> BatchResult:
    """Parse one batch of log lines into logs, custom metrics and usage metrics.

    *now* is the observation time stamped on custom metrics, and the fallback
    for lines whose own timestamps cannot be read. It defaults to the current
    UTC time and is the only non-deterministic input.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    context = Context(group_id, stream_id)
    lines = list(lines)
    name = function_name(group_id)
    version = lambda_version(stream_id)
    failures: list[LineParseError] = []

    logs = _run_pass(
        context, lines, lambda line: build_log_record(context, name, version, line, now), failures
    )
    custom_metrics = _run_pass(
        context, lines, lambda line: build_custom_metric(name, version, line, now), failures
    )
    usage_metrics = _run_pass(
        context, lines, lambda line: build_usage_metrics(name, version, line, now), failures
    )

    result = BatchResult(
        logs=[log for log in logs if log is not None],
        custom_metrics=[m for m in custom_metrics if m is not None],
        usage_metrics=[m for metrics in usage_metrics for m in metrics],
        failures=failures,
    )
    logger.info(
        "Processed %d lines from %s: %d logs, %d custom metrics, %d usage metrics, %d skipped",
        len(lines),
        group_id,
        len(result.logs),
        len(result.custom_metrics),
        len(result.usage_metrics),
        len(result.failures),
    )
    return result
