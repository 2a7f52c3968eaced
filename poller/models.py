import enum
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

from poller.config import REQUIRED_FIELDS

# wire name -> InstanceConfig attribute
INSTANCE_FIELDS = {
    "projectId": "project_id",
    "instanceId": "instance_id",
    "scalerPubSubTopic": "scaler_pubsub_topic",
    "minNodes": "min_nodes",
    "maxNodes": "max_nodes",
    "stepSize": "step_size",
    "overloadStepSize": "overload_step_size",
    "scaleOutCoolingMinutes": "scale_out_cooling_minutes",
    "scaleInCoolingMinutes": "scale_in_cooling_minutes",
    "scalingMethod": "scaling_method",
}


OVERRIDABLE_FIELDS = {
    "filter": str,
    "reducer": str,
    "aligner": str,
    "period": int,
    "regional_threshold": float,
    "multi_regional_threshold": float,
}


def _check_field(name, value):
    kind = OVERRIDABLE_FIELDS[name]
    if kind is str:
        if not isinstance(value, str) or not value:
            raise ValueError(f"{name} must be a non-empty string, got {value!r}")
        return value

    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None

    if kind is int:
        if not number.is_integer() or number <= 0:
            raise ValueError(f"{name} must be a positive whole number of seconds, got {value!r}")
        return int(number)
    if number != number:
        raise ValueError(f"{name} must not be NaN")
    return value if isinstance(value, (int, float)) else number


class PollState(str, enum.Enum):
    PENDING = "PENDING"
    METADATA_FETCHED = "METADATA_FETCHED"
    METRICS_EVALUATED = "METRICS_EVALUATED"
    DISPATCHED = "DISPATCHED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class MetricDefinition:
    name: str
    filter: str
    reducer: str
    aligner: str
    period: int
    regional_threshold: float
    multi_regional_threshold: float

    def merged(self, override):
        """Return a copy with the override's known fields applied; ``name`` is kept.

        Raises ValueError when an override value has the wrong type.
        """
        changes = {
            k: _check_field(k, v) for k, v in override.items() if k in OVERRIDABLE_FIELDS
        }
        return replace(self, **changes)

    def threshold_for(self, regional):
        return self.regional_threshold if regional else self.multi_regional_threshold

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class InstanceMetadata:
    current_nodes: int
    regional: bool
    config_name: str = ""
    display_name: str = ""

    @classmethod
    def from_instance(cls, node_count, config_path, display_name=""):
        config_name = (config_path or "").split("/")[-1]
        return cls(
            current_nodes=node_count,
            regional=config_name.startswith("regional"),
            config_name=config_name,
            display_name=display_name,
        )


@dataclass(frozen=True)
class EvaluatedMetric:
    name: str
    threshold: float
    value: float

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class InstanceConfig:
    project_id: Optional[str]
    instance_id: Optional[str]
    scaler_pubsub_topic: Optional[str]
    min_nodes: int
    max_nodes: int
    step_size: int
    overload_step_size: int
    scale_out_cooling_minutes: int
    scale_in_cooling_minutes: int
    scaling_method: str
    metrics: Tuple[MetricDefinition, ...] = ()
    # input fields the poller does not interpret, forwarded as-is
    extra: Dict[str, Any] = field(default_factory=dict)
    # set when the declaration is unusable; the poll stage fails this instance
    config_error: Optional[str] = None

    @property
    def label(self):
        return f"{self.project_id}/{self.instance_id}"

    def missing_fields(self):
        return [
            name for name in REQUIRED_FIELDS
            if getattr(self, INSTANCE_FIELDS[name]) in (None, "")
        ]

    def to_dict(self):
        data = dict(self.extra)
        for wire_name, attr in INSTANCE_FIELDS.items():
            data[wire_name] = getattr(self, attr)
        data["metrics"] = [m.to_dict() for m in self.metrics]
        return data

    def to_payload(self, metadata, evaluated):
        data = self.to_dict()
        data["currentNodes"] = metadata.current_nodes
        data["regional"] = metadata.regional
        data["metrics"] = [m.to_dict() for m in evaluated]
        return data


@dataclass
class InstanceOutcome:
    project_id: Optional[str]
    instance_id: Optional[str]
    state: PollState = PollState.PENDING
    error: Optional[str] = None
    skipped_metrics: int = 0

    @property
    def ok(self):
        return self.state == PollState.DISPATCHED
