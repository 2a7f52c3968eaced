import concurrent.futures
import json

from google.api_core import exceptions
from google.cloud import pubsub_v1

from poller.config import CALL_TIMEOUT_SECONDS
from poller.errors import DispatchError
from poller.log import log


class PubSubDispatcher:
    def __init__(self, publisher=None, timeout=CALL_TIMEOUT_SECONDS, event_logger=None):
        self.publisher = publisher or pubsub_v1.PublisherClient()
        self.timeout = timeout
        # optional google.cloud.logging Logger mirroring every payload
        self.event_logger = event_logger

    def topic_path(self, project_id, topic):
        if topic.startswith("projects/"):
            return topic
        return self.publisher.topic_path(project_id, topic)

    def send(self, config, payload):
        topic = self.topic_path(config.project_id, config.scaler_pubsub_topic)
        data = json.dumps(payload).encode("utf-8")
        try:
            message_id = self.publisher.publish(topic, data).result(timeout=self.timeout)
        except concurrent.futures.TimeoutError as e:
            raise DispatchError(f"Timed out publishing to {topic}") from e
        except exceptions.GoogleAPIError as e:
            raise DispatchError(f"An error occurred when publishing the message to {topic}: {e}") from e

        log(f"----- Published message to topic: {topic}", "INFO", payload)
        if self.event_logger:
            try:
                self.event_logger.log_struct(payload, severity="INFO")
            except exceptions.GoogleAPIError as e:
                # the message is already out; a missing log copy does not fail the instance
                log(f"Could not write event log entry for {topic}", "WARNING", e)
        return message_id
