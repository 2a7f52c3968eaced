import pytest

from poller.metric_catalog import build_metrics
from poller.models import EvaluatedMetric, InstanceMetadata


@pytest.mark.parametrize("config_path,regional", [
    ("projects/p1/instanceConfigs/regional-us-east1", True),
    ("projects/p1/instanceConfigs/nam3", False),
    ("projects/p1/instanceConfigs/eur6", False),
])
def test_regional_comes_from_last_path_segment(config_path, regional):
    metadata = InstanceMetadata.from_instance(3, config_path)
    assert metadata.regional is regional
    assert metadata.current_nodes == 3


def test_threshold_for_topology():
    for metric in build_metrics("p1", "i1"):
        assert metric.threshold_for(True) == metric.regional_threshold
        assert metric.threshold_for(False) == metric.multi_regional_threshold


def test_merged_never_renames_and_ignores_unknown_keys():
    storage = build_metrics("p1", "i1")[2]
    merged = storage.merged({"name": "storage", "period": 120, "colour": "blue"})
    assert merged.name == "storage"
    assert merged.period == 120
    assert not hasattr(merged, "colour")


def test_to_payload_replaces_metrics(metadata_fetcher):
    from poller.config_merger import resolve

    (config,) = resolve([{"projectId": "p1", "instanceId": "i1", "scalerPubSubTopic": "t1"}])
    metadata = metadata_fetcher.get_metadata("p1", "i1")
    payload = config.to_payload(metadata, [EvaluatedMetric("storage", 75, 10.0)])
    assert payload["metrics"] == [{"name": "storage", "threshold": 75, "value": 10.0}]
    assert payload["currentNodes"] == 2
    assert payload["regional"] is True
    assert payload["scalerPubSubTopic"] == "t1"
    assert payload["maxNodes"] == 3
