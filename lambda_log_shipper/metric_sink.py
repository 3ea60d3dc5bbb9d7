"""CloudWatch metric sink: publishes observations grouped by namespace."""

import json
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from lambda_log_shipper.models import MetricObservation, metric_to_datum

logger = logging.getLogger(__name__)

# PutMetricData batch size
DEFAULT_CHUNK_SIZE = 20


def group_by_namespace(metrics: list[MetricObservation]) -> dict[str, list[MetricObservation]]:
    """Group observations by namespace, preserving first-seen namespace order."""
    groups: dict[str, list[MetricObservation]] = {}
    for metric in metrics:
        groups.setdefault(metric.namespace, []).append(metric)
    return groups


class CloudWatchMetricSink:
    """Publishes MetricObservations with ``put_metric_data``.

    A failing namespace group is logged together with its data and skipped;
    the remaining groups are still published.
    """

    def __init__(self, client=None, chunk_size: int = DEFAULT_CHUNK_SIZE, region: str | None = None):
        self._client = client if client is not None else boto3.client("cloudwatch", region_name=region)
        self._chunk_size = chunk_size

    def publish(self, metrics: list[MetricObservation]) -> int:
        """Publish all metrics; returns how many were accepted."""
        published = 0
        for namespace, group in group_by_namespace(metrics).items():
            datum = [metric_to_datum(m) for m in group]
            sent = 0
            try:
                while sent < len(datum):
                    chunk = datum[sent:sent + self._chunk_size]
                    self._client.put_metric_data(Namespace=namespace, MetricData=chunk)
                    sent += len(chunk)
            except (BotoCoreError, ClientError) as e:
                logger.error(
                    "Failed to publish %d of %d metrics to %s: %s",
                    len(datum) - sent, len(datum), namespace, e,
                )
                logger.error(json.dumps(datum[sent:], default=str))
                published += sent
                continue
            published += sent
            logger.info("Published %d metrics to %s", len(datum), namespace)
        return published
