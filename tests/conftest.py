import pytest

from poller.errors import DispatchError, MetadataFetchError, MetricSampleError
from poller.models import InstanceMetadata


class FakeMetadataFetcher:
    def __init__(self, by_instance=None, failing=()):
        self.by_instance = by_instance or {}
        self.failing = set(failing)
        self.calls = []

    def get_metadata(self, project_id, instance_id):
        self.calls.append((project_id, instance_id))
        if instance_id in self.failing:
            raise MetadataFetchError(f"{instance_id} not found")
        node_count, config_path = self.by_instance.get(
            instance_id, (2, "projects/p1/instanceConfigs/regional-us-east1")
        )
        return InstanceMetadata.from_instance(node_count, config_path, instance_id)


class FakeSampler:
    def __init__(self, values=None, failing=()):
        self.values = values or {}
        self.failing = set(failing)
        self.calls = []

    def query_max(self, project_id, metric, window_seconds):
        self.calls.append((project_id, metric.name, window_seconds))
        if metric.name in self.failing:
            raise MetricSampleError(metric.name, "deadline exceeded")
        return self.values.get(metric.name, 0.0)


class FakeDispatcher:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.sent = []

    def send(self, config, payload):
        if config.instance_id in self.failing:
            raise DispatchError(f"topic {config.scaler_pubsub_topic} unreachable")
        self.sent.append(payload)
        return str(len(self.sent))


@pytest.fixture
def metadata_fetcher():
    return FakeMetadataFetcher()


@pytest.fixture
def sampler():
    return FakeSampler({"high_priority_cpu": 0.70, "rolling_24_hr": 0.5, "storage": 0.1})


@pytest.fixture
def dispatcher():
    return FakeDispatcher()
