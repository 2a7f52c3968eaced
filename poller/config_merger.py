import json

from poller.config import SPANNER_DEFAULTS
from poller.errors import BatchParseError
from poller.log import log
from poller.metric_catalog import build_metrics
from poller.models import INSTANCE_FIELDS, InstanceConfig


def parse_payload(text):
    try:
        entries = json.loads(text)
    except (TypeError, ValueError) as e:
        raise BatchParseError(f"Payload is not valid JSON: {e}") from e

    if not isinstance(entries, list):
        raise BatchParseError(f"Payload must be a JSON array, got {type(entries).__name__}")
    for idx, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise BatchParseError(f"Instance entry {idx} is not a JSON object")
    return entries


def check_overrides(overrides):
    """Return a description of what is wrong with a ``metrics`` value, or None."""
    if overrides is None:
        return None
    if not isinstance(overrides, list):
        return f"metrics must be a list of objects, got {type(overrides).__name__}"
    for idx, override in enumerate(overrides):
        if not isinstance(override, dict):
            return f"metrics[{idx}] must be an object, got {type(override).__name__}"
        if not isinstance(override.get("name"), str):
            return f"metrics[{idx}] needs a string name, got {override.get('name')!r}"
    return None


def apply_overrides(metrics, overrides, label=""):
    by_name = {m.name: idx for idx, m in enumerate(metrics)}
    result = list(metrics)
    for override in overrides or []:
        name = override["name"]
        idx = by_name.get(name)
        if idx is None:
            log(f"{label}: metric override {name!r} matches no metric, ignoring it", "WARNING", override)
            continue
        try:
            result[idx] = result[idx].merged(override)
        except ValueError as e:
            log(f"{label}: metric override {name!r} is invalid, ignoring it: {e}", "WARNING", override)
    return result


def resolve_instance(entry):
    raw = dict(entry)
    overrides = raw.pop("metrics", None)

    merged = {**SPANNER_DEFAULTS, **raw}
    known = {attr: merged.get(wire_name) for wire_name, attr in INSTANCE_FIELDS.items()}
    extra = {k: v for k, v in merged.items() if k not in INSTANCE_FIELDS}

    project_id, instance_id = known["project_id"], known["instance_id"]
    config_error = check_overrides(overrides)
    metrics = []
    if project_id and instance_id:
        metrics = build_metrics(project_id, instance_id)
        if config_error is None:
            metrics = apply_overrides(metrics, overrides, f"{project_id}/{instance_id}")

    return InstanceConfig(metrics=tuple(metrics), extra=extra, config_error=config_error, **known)


def resolve(entries):
    """Resolve raw instance declarations into one InstanceConfig each, in order.

    Precedence is defaults < instance fields < per-metric overrides.
    Identity and override-shape problems are not raised here; the poll stage
    reports them for the affected instance only.
    """
    return [resolve_instance(entry) for entry in entries]
