"""Function name and version extraction from log group / log stream names.

    logGroup:  "/aws/lambda/service-env-funcName"
    logStream: "2016/08/17/[76]afe5c000d5344c33b5d88be7a4c55816"
"""


def function_name(group_id: str) -> str:
    """Last '/'-delimited segment of the log group, or the whole string."""
    return group_id.rsplit("/", 1)[-1]


def lambda_version(stream_id: str) -> str:
    """Text strictly between the first '[' and the first ']'.

    Malformed stream names degrade to a best-effort substring instead of
    raising: a missing bracket counts as position 0 and reversed bounds are
    swapped.
    """
    start = stream_id.find("[") + 1
    end = max(stream_id.find("]"), 0)
    if end < start:
        start, end = end, start
    return stream_id[start:end]
