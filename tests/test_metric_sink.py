"""Tests for the CloudWatch metric sink."""

from datetime import datetime, timezone

from botocore.exceptions import ClientError

from lambda_log_shipper.metric_sink import CloudWatchMetricSink, group_by_namespace
from lambda_log_shipper.models import Dimension, MetricObservation

TS = datetime(2020, 1, 1, tzinfo=timezone.utc)


class FakeCloudWatch:
    """Records put_metric_data calls; fails for namespaces listed in *failing*."""

    def __init__(self, failing=(), fail_after=None):
        self.calls = []
        self._failing = set(failing)
        self._fail_after = fail_after

    def put_metric_data(self, Namespace, MetricData):
        if Namespace in self._failing or len(self.calls) == self._fail_after:
            raise ClientError(
                {"Error": {"Code": "InvalidParameterValue", "Message": "reserved namespace"}},
                "PutMetricData",
            )
        self.calls.append((Namespace, MetricData))


def _metric(name="Hits", namespace="MyApp", value=1.0):
    return MetricObservation(
        value=value,
        unit="Count",
        name=name,
        dimensions=(Dimension("Function", "fn"), Dimension("Version", "1")),
        namespace=namespace,
        timestamp=TS,
    )


class TestGroupByNamespace:
    def test_first_seen_order(self):
        groups = group_by_namespace([_metric(namespace="B"), _metric(namespace="A"), _metric(namespace="B")])
        assert list(groups) == ["B", "A"]
        assert len(groups["B"]) == 2


class TestCloudWatchMetricSink:
    def test_publishes_datum(self):
        client = FakeCloudWatch()
        sink = CloudWatchMetricSink(client)
        assert sink.publish([_metric(value=42.0)]) == 1

        namespace, data = client.calls[0]
        assert namespace == "MyApp"
        assert data == [{
            "MetricName": "Hits",
            "Dimensions": [{"Name": "Function", "Value": "fn"}, {"Name": "Version", "Value": "1"}],
            "Timestamp": TS,
            "Value": 42.0,
            "Unit": "Count",
        }]

    def test_one_call_per_namespace(self):
        client = FakeCloudWatch()
        sink = CloudWatchMetricSink(client)
        sink.publish([_metric(namespace="A"), _metric(namespace="B"), _metric(namespace="A")])
        assert [(ns, len(data)) for ns, data in client.calls] == [("A", 2), ("B", 1)]

    def test_chunking(self):
        client = FakeCloudWatch()
        sink = CloudWatchMetricSink(client, chunk_size=20)
        assert sink.publish([_metric(value=i) for i in range(45)]) == 45
        assert [len(data) for _, data in client.calls] == [20, 20, 5]

    def test_failing_namespace_does_not_stop_others(self, caplog):
        client = FakeCloudWatch(failing={"AWS/Lambda"})
        sink = CloudWatchMetricSink(client)
        published = sink.publish([_metric(namespace="AWS/Lambda"), _metric(namespace="MyApp")])
        assert published == 1
        assert [ns for ns, _ in client.calls] == ["MyApp"]
        assert "Failed to publish 1 of 1 metrics to AWS/Lambda" in caplog.text

    def test_empty(self):
        client = FakeCloudWatch()
        assert CloudWatchMetricSink(client).publish([]) == 0
        assert client.calls == []

    def test_failure_on_later_chunk_logs_only_unsent(self, caplog):
        client = FakeCloudWatch(fail_after=1)
        sink = CloudWatchMetricSink(client, chunk_size=2)
        published = sink.publish([_metric(name=f"M{i}") for i in range(5)])

        assert published == 2
        assert "Failed to publish 3 of 5 metrics to MyApp" in caplog.text
        assert '"MetricName": "M0"' not in caplog.text
        assert '"MetricName": "M2"' in caplog.text
