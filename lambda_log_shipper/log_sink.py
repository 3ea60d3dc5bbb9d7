"""TCP log sink: ships LogRecords as newline-delimited JSON."""

import json
import logging
import socket

from lambda_log_shipper.models import LogRecord, record_to_dict

logger = logging.getLogger(__name__)


def format_ndjson(doc: dict) -> bytes:
    """Serialize a dict to compact JSON + newline, encoded as UTF-8."""
    return (json.dumps(doc, separators=(",", ":"), default=str, allow_nan=False) + "\n").encode("utf-8")


class TCPLogSink:
    """Opens one TCP connection per batch and writes one JSON line per record."""

    def __init__(self, host: str, port: int, token: str = "", timeout: float = 5.0):
        self._host = host
        self._port = port
        self._token = token
        self._timeout = timeout

    def _encode(self, records: list[LogRecord]) -> list[bytes]:
        lines = []
        for record in records:
            doc = record_to_dict(record)
            doc["token"] = self._token
            try:
                lines.append(format_ndjson(doc))
            except (TypeError, ValueError) as e:
                logger.error("Failed to serialize log record: %s", e)
        return lines

    def send(self, records: list[LogRecord]) -> int:
        """Send records and return the number written; 0 on connection failure."""
        if not records:
            return 0

        lines = self._encode(records)
        if not lines:
            return 0

        try:
            with socket.create_connection((self._host, self._port), timeout=self._timeout) as sock:
                sock.sendall(b"".join(lines))
        except OSError as e:
            logger.error(
                "Failed to ship %d logs to %s:%d: %s", len(lines), self._host, self._port, e
            )
            return 0

        logger.info("Shipped %d logs to %s:%d", len(lines), self._host, self._port)
        return len(lines)
