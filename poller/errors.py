class PollerError(Exception):
    pass


class BatchParseError(PollerError):
    """The trigger payload is not a JSON array of instance objects."""


class InstanceConfigError(PollerError):
    """An instance declaration is missing required identity fields."""


class MetadataFetchError(PollerError):
    pass


class MetricSampleError(PollerError):
    def __init__(self, metric_name, message):
        super().__init__(f"{metric_name}: {message}")
        self.metric_name = metric_name


class DispatchError(PollerError):
    pass
