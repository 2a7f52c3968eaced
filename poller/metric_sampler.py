import time

from google.api_core import exceptions
from google.cloud import monitoring_v3

from poller.config import CALL_TIMEOUT_SECONDS
from poller.errors import MetricSampleError


class MonitoringMetricSampler:
    def __init__(self, client=None, timeout=CALL_TIMEOUT_SECONDS, clock=time.time):
        self.client = client or monitoring_v3.MetricServiceClient()
        self.timeout = timeout
        self.clock = clock

    def query_max(self, project_id, metric, window_seconds):
        """Highest raw point value (a fraction) of ``metric`` over the window, 0.0 if none."""
        try:
            aggregation = monitoring_v3.Aggregation(
                {
                    "alignment_period": {"seconds": int(metric.period)},
                    "cross_series_reducer": monitoring_v3.Aggregation.Reducer[metric.reducer],
                    "per_series_aligner": monitoring_v3.Aggregation.Aligner[metric.aligner],
                }
            )
        except KeyError as e:
            raise MetricSampleError(metric.name, f"unknown aggregation {e}") from e

        now = self.clock()
        interval = monitoring_v3.TimeInterval(
            {
                "end_time": {"seconds": int(now)},
                "start_time": {"seconds": int(now - window_seconds)},
            }
        )

        try:
            results = self.client.list_time_series(
                request={
                    "name": f"projects/{project_id}",
                    "filter": metric.filter,
                    "interval": interval,
                    "aggregation": aggregation,
                    "view": monitoring_v3.ListTimeSeriesRequest.TimeSeriesView.FULL,
                },
                timeout=self.timeout,
            )
            max_value = 0.0
            for result in results:
                for point in result.points:
                    value = float(point.value.double_value)
                    if value > max_value:
                        max_value = value
            return max_value
        except exceptions.GoogleAPIError as e:
            raise MetricSampleError(metric.name, f"metric query failed: {e}") from e
