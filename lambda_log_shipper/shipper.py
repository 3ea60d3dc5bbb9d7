"""Shipper: runs the batch processor and hands each stream to its sink."""

import logging
from dataclasses import dataclass

from lambda_log_shipper.config import Config
from lambda_log_shipper.events import LogBatch
from lambda_log_shipper.log_sink import TCPLogSink
from lambda_log_shipper.metric_sink import CloudWatchMetricSink
from lambda_log_shipper.processor import process_batch

logger = logging.getLogger(__name__)


@dataclass
class ShipResult:
    logs_sent: int = 0
    metrics_published: int = 0
    lines_skipped: int = 0


class LogShipper:
    """Processes LogBatches and forwards logs and metrics to their sinks."""

    def __init__(self, config: Config, log_sink=None, metric_sink=None):
        self._config = config
        if log_sink is None:
            log_sink = TCPLogSink(
                config.logstash_host,
                config.logstash_port,
                token=config.token,
                timeout=config.connect_timeout,
            )
        if metric_sink is None:
            metric_sink = CloudWatchMetricSink(
                chunk_size=config.metric_chunk_size, region=config.aws_region
            )
        self._log_sink = log_sink
        self._metric_sink = metric_sink

    def ship(self, batch: LogBatch) -> ShipResult:
        if not batch.lines:
            logger.info("Nothing to ship for %s", batch.group_id or "<control message>")
            return ShipResult()

        result = process_batch(batch.group_id, batch.stream_id, batch.lines)

        shipped = ShipResult(lines_skipped=len(result.failures))
        if result.logs:
            shipped.logs_sent = self._log_sink.send(result.logs)

        metrics = list(result.custom_metrics)
        if self._config.publish_usage_metrics:
            metrics.extend(result.usage_metrics)
        if metrics:
            shipped.metrics_published = self._metric_sink.publish(metrics)

        logger.info(
            "Shipped %s: logs=%d, metrics=%d, skipped=%d",
            batch.group_id,
            shipped.logs_sent,
            shipped.metrics_published,
            shipped.lines_skipped,
        )
        return shipped
