import os

# Scaling parameters applied when an instance declaration leaves them out
SPANNER_DEFAULTS = {
    "minNodes": 1,
    "maxNodes": 3,
    "stepSize": 2,
    "overloadStepSize": 5,
    "scaleOutCoolingMinutes": 5,
    "scaleInCoolingMinutes": 30,
    "scalingMethod": "STEPWISE",
}

# Instance fields the poller cannot work without
REQUIRED_FIELDS = ("projectId", "instanceId", "scalerPubSubTopic")

# Metric look-back: max value over METRIC_WINDOW alignment periods
METRIC_WINDOW = 5

# Every external call (metadata, metric query, publish) is bounded by this
CALL_TIMEOUT_SECONDS = float(os.environ.get("POLLER_CALL_TIMEOUT_SECONDS", "30"))

# Instances polled in parallel per batch (1 = sequential)
MAX_WORKERS = int(os.environ.get("POLLER_MAX_WORKERS", "4"))

LOG_LEVEL = os.environ.get("POLLER_LOG_LEVEL", "DEBUG").upper()

# Cloud Logging log that receives a copy of every dispatched payload
EVENT_LOG_NAME = os.environ.get("POLLER_EVENT_LOG_NAME")

TEST_PAYLOAD = os.environ.get(
    "POLLER_TEST_PAYLOAD",
    '[{"projectId": "spanner-scaler", "instanceId": "autoscale-test", '
    '"scalerPubSubTopic": "projects/spanner-scaler/topics/test-scaling", '
    '"minNodes": 1, "maxNodes": 3, "stateProjectId": "spanner-scaler"}]',
)

PORT = int(os.environ.get("PORT", 8080))
