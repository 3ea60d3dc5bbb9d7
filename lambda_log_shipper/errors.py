"""Exception hierarchy for the shipper."""


class ShipperError(Exception):
    """Base class for all shipper errors."""


class ConfigError(ShipperError):
    """A configuration value could not be parsed."""


class EventDecodeError(ShipperError):
    """A subscription event payload could not be decoded or failed validation."""


class LineParseError(ShipperError):
    """One log line is structurally invalid for the builder that read it.

    Carries the raw line and the batch context so the caller can log and
    discard it without losing the rest of the batch.
    """

    def __init__(self, reason: str, line: str, group_id: str = "", stream_id: str = ""):
        super().__init__(reason)
        self.reason = reason
        self.line = line
        self.group_id = group_id
        self.stream_id = stream_id

    def with_context(self, group_id: str, stream_id: str) -> "LineParseError":
        return LineParseError(self.reason, self.line, group_id, stream_id)

    def __str__(self) -> str:
        return f"{self.reason} [{self.group_id} {self.stream_id}]: {self.line[:200]!r}"
