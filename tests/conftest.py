import pytest


class FakeLogSink:
    """Collects every batch handed to send()."""

    def __init__(self):
        self.batches = []

    def send(self, records):
        self.batches.append(list(records))
        return len(records)


class FakeMetricSink:
    """Collects every batch handed to publish()."""

    def __init__(self):
        self.batches = []

    def publish(self, metrics):
        self.batches.append(list(metrics))
        return len(metrics)


@pytest.fixture
def log_sink():
    return FakeLogSink()


@pytest.fixture
def metric_sink():
    return FakeMetricSink()
