from poller.models import MetricDefinition

# Recommended alerting thresholds for Spanner:
# https://cloud.google.com/spanner/docs/monitoring-cloud#create-alert
BUILTIN_METRICS = [
    {
        "name": "high_priority_cpu",
        "metric_type": "spanner.googleapis.com/instance/cpu/utilization_by_priority",
        "extra_filter": 'metric.label.priority="high"',
        "regional_threshold": 65,
        "multi_regional_threshold": 45,
    },
    {
        "name": "rolling_24_hr",
        "metric_type": "spanner.googleapis.com/instance/cpu/smoothed_utilization",
        "regional_threshold": 90,
        "multi_regional_threshold": 90,
    },
    {
        "name": "storage",
        "metric_type": "spanner.googleapis.com/instance/storage/utilization",
        "regional_threshold": 75,
        "multi_regional_threshold": 75,
    },
]


def _filter(project_id, instance_id, metric_type, extra_filter=None):
    parts = [
        f'resource.labels.instance_id="{instance_id}"',
        'resource.type="spanner_instance"',
        f'project="{project_id}"',
        f'metric.type="{metric_type}"',
    ]
    if extra_filter:
        parts.append(extra_filter)
    return " AND ".join(parts)


def build_metrics(project_id, instance_id):
    return [
        MetricDefinition(
            name=m["name"],
            filter=_filter(project_id, instance_id, m["metric_type"], m.get("extra_filter")),
            reducer="REDUCE_SUM",
            aligner="ALIGN_MAX",
            period=60,
            regional_threshold=m["regional_threshold"],
            multi_regional_threshold=m["multi_regional_threshold"],
        )
        for m in BUILTIN_METRICS
    ]
