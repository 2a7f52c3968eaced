from google.api_core import exceptions
from google.cloud import spanner_admin_instance_v1

from poller.config import CALL_TIMEOUT_SECONDS
from poller.errors import MetadataFetchError
from poller.log import log
from poller.models import InstanceMetadata


class SpannerMetadataFetcher:
    def __init__(self, client=None, timeout=CALL_TIMEOUT_SECONDS):
        self.client = client or spanner_admin_instance_v1.InstanceAdminClient()
        self.timeout = timeout

    def get_metadata(self, project_id, instance_id):
        log(f"----- {project_id}/{instance_id}: Getting Metadata -----", "INFO")
        name = f"projects/{project_id}/instances/{instance_id}"
        try:
            instance = self.client.get_instance(name=name, timeout=self.timeout)
        except exceptions.NotFound as e:
            raise MetadataFetchError(f"Spanner instance {name} does not exist") from e
        except exceptions.GoogleAPIError as e:
            raise MetadataFetchError(f"Could not read metadata of {name}: {e}") from e

        metadata = InstanceMetadata.from_instance(
            instance.node_count, instance.config, instance.display_name
        )
        log(f"DisplayName: {metadata.display_name}")
        log(f"NodeCount:   {metadata.current_nodes}")
        log(f"Config:      {metadata.config_name}")
        return metadata
