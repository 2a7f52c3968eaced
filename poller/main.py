import base64
import binascii

from flask import Flask, request

from poller import config
from poller.errors import BatchParseError
from poller.log import log

app = Flask(__name__)

_poll_cycle = None


def build_poll_cycle():
    from google.cloud import logging_v2

    from poller.dispatcher import PubSubDispatcher
    from poller.metric_sampler import MonitoringMetricSampler
    from poller.poll_cycle import PollCycle
    from poller.spanner_metadata import SpannerMetadataFetcher

    event_logger = None
    if config.EVENT_LOG_NAME:
        event_logger = logging_v2.Client().logger(config.EVENT_LOG_NAME)

    return PollCycle(
        SpannerMetadataFetcher(),
        MonitoringMetricSampler(),
        PubSubDispatcher(event_logger=event_logger),
        max_workers=config.MAX_WORKERS,
    )


def get_poll_cycle():
    global _poll_cycle
    if _poll_cycle is None:
        _poll_cycle = build_poll_cycle()
    return _poll_cycle


def decode_data(data):
    try:
        return base64.b64decode(data, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, TypeError) as e:
        raise BatchParseError(f"Message data is not base64 encoded UTF-8: {e}") from e


def check_spanner_scale_metrics_pubsub(event, context=None):
    """Background-function trigger: Cloud Scheduler -> Pub/Sub -> poller."""
    try:
        get_poll_cycle().run(decode_data(event.get("data")))
    except Exception as e:
        log("An error occurred in the Autoscaler poller function", "ERROR", e)


@app.route("/", methods=["POST"])
def index():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return ("", 400)

    pubsub_message = body.get("message")
    if not isinstance(pubsub_message, dict) or "data" not in pubsub_message:
        return ("", 400)

    try:
        get_poll_cycle().run(decode_data(pubsub_message["data"]))
    except BatchParseError as e:
        log("An error occurred in the Autoscaler poller function", "ERROR", e)
        return (str(e), 400)

    return ("", 204)


@app.route("/http", methods=["GET", "POST"])
def check_spanner_scale_metrics_http():
    try:
        outcomes = get_poll_cycle().run(config.TEST_PAYLOAD)
    except Exception as e:
        log("An error occurred in the Autoscaler poller function", "ERROR", e)
        return (str(e), 500)

    errors = [f"{o.project_id}/{o.instance_id}: {o.error}" for o in outcomes if not o.ok]
    if errors:
        return ("\n".join(errors), 500)
    return ("", 200)


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=config.PORT)
