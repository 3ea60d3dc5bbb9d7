#!/usr/bin/env python3
"""Local runner: parses a file of Lambda log lines and prints the results."""

import argparse
import json
import logging
import sys

from lambda_log_shipper.config import load_config
from lambda_log_shipper.events import LogBatch
from lambda_log_shipper.metric_sink import group_by_namespace
from lambda_log_shipper.models import RawLine, metric_to_datum, record_to_dict
from lambda_log_shipper.processor import process_batch


def read_lines(path: str) -> list[RawLine]:
    """One raw log message per line; blank lines are skipped."""
    lines = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            text = line.rstrip("\n")
            if text.strip():
                lines.append(RawLine("", text))
    return lines


def read_payload(path: str) -> LogBatch:
    """Read a decoded subscription payload (logGroup, logStream, logEvents)."""
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    lines = [RawLine(str(e.get("timestamp", "")), e["message"]) for e in payload.get("logEvents", [])]
    return LogBatch(payload.get("logGroup", ""), payload.get("logStream", ""), lines)


def summarize(result) -> dict:
    return {
        "logs": [record_to_dict(r) for r in result.logs],
        "custom_metrics": {
            ns: [metric_to_datum(m) for m in group]
            for ns, group in group_by_namespace(result.custom_metrics).items()
        },
        "usage_metrics": {
            ns: [metric_to_datum(m) for m in group]
            for ns, group in group_by_namespace(result.usage_metrics).items()
        },
        "skipped": [{"reason": e.reason, "line": e.line} for e in result.failures],
    }


def main(argv=None):
    parser = argparse.ArgumentParser(description="Parse Lambda log lines without shipping them")
    parser.add_argument("--file", "-f", required=True, help="Path to a log file to parse")
    parser.add_argument("--payload", action="store_true",
                        help="Treat --file as a decoded subscription payload (JSON)")
    parser.add_argument("--group", default="/aws/lambda/local", help="Log group name")
    parser.add_argument("--stream", default="local/[$LATEST]local", help="Log stream name")
    args = parser.parse_args(argv)

    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.payload:
        batch = read_payload(args.file)
    else:
        batch = LogBatch(args.group, args.stream, read_lines(args.file))

    result = process_batch(batch.group_id, batch.stream_id, batch.lines)
    json.dump(summarize(result), sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()
