from poller.config import METRIC_WINDOW
from poller.errors import MetricSampleError
from poller.log import log
from poller.models import EvaluatedMetric


class ThresholdEvaluator:
    def __init__(self, sampler, window=METRIC_WINDOW):
        self.sampler = sampler
        self.window = window

    def evaluate_metric(self, config, metadata, metric):
        log(f"Get max {metric.name} from {config.label} over {self.window} periods of {metric.period}s.")
        raw = self.sampler.query_max(config.project_id, metric, metric.period * self.window)
        value = raw * 100
        threshold = metric.threshold_for(metadata.regional)

        above_or_under = "ABOVE" if value > threshold else "UNDER"
        log(f"\t {metric.name} = {value}, {above_or_under} the {threshold} threshold.")
        return EvaluatedMetric(name=metric.name, threshold=threshold, value=value)

    def evaluate(self, config, metadata, errors=None):
        """Evaluate every metric of ``config`` in order.

        A metric whose sample query fails is left out of the result and its
        MetricSampleError is appended to ``errors`` when a list is given.
        """
        log(f"----- {config.label}: Getting Metrics -----", "INFO")
        evaluated = []
        for metric in config.metrics:
            try:
                evaluated.append(self.evaluate_metric(config, metadata, metric))
            except MetricSampleError as e:
                log(f"{config.label}: skipping metric {metric.name}", "ERROR", e)
                if errors is not None:
                    errors.append(e)
        return evaluated
