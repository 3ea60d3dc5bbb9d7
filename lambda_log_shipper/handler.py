"""AWS Lambda entry point for CloudWatch Logs subscription events."""

import logging
from dataclasses import asdict

from lambda_log_shipper.config import load_config
from lambda_log_shipper.events import decode_event
from lambda_log_shipper.shipper import LogShipper

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)

_shipper: LogShipper | None = None


def _get_shipper() -> LogShipper:
    """Build the shipper once per container and reuse it across invocations."""
    global _shipper
    if _shipper is None:
        config = load_config()
        logging.basicConfig(level=config.log_level, format=LOG_FORMAT)
        logging.getLogger().setLevel(config.log_level)
        _shipper = LogShipper(config)
    return _shipper


def handler(event, context):
    shipper = _get_shipper()
    batch = decode_event(event)
    logger.info(
        "Received %d log events from %s %s", len(batch.lines), batch.group_id, batch.stream_id
    )
    return asdict(shipper.ship(batch))
