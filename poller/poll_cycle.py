from concurrent.futures import ThreadPoolExecutor

from poller.config import MAX_WORKERS
from poller.config_merger import parse_payload, resolve
from poller.errors import InstanceConfigError, PollerError
from poller.log import log
from poller.models import InstanceOutcome, PollState
from poller.threshold_evaluator import ThresholdEvaluator


class PollCycle:
    def __init__(self, metadata_fetcher, sampler, dispatcher, max_workers=MAX_WORKERS):
        self.metadata_fetcher = metadata_fetcher
        self.evaluator = ThresholdEvaluator(sampler)
        self.dispatcher = dispatcher
        self.max_workers = max(1, max_workers)

    def poll_instance(self, config):
        outcome = InstanceOutcome(config.project_id, config.instance_id)
        try:
            missing = config.missing_fields()
            if missing:
                raise InstanceConfigError(f"missing required field(s): {', '.join(missing)}")
            if config.config_error:
                raise InstanceConfigError(config.config_error)

            metadata = self.metadata_fetcher.get_metadata(config.project_id, config.instance_id)
            outcome.state = PollState.METADATA_FETCHED

            sample_errors = []
            evaluated = self.evaluator.evaluate(config, metadata, errors=sample_errors)
            outcome.skipped_metrics = len(sample_errors)
            outcome.state = PollState.METRICS_EVALUATED

            self.dispatcher.send(config, config.to_payload(metadata, evaluated))
            outcome.state = PollState.DISPATCHED
        except PollerError as e:
            log(f"{config.label}: poll failed in state {outcome.state.value}", "ERROR", e)
            outcome.state, outcome.error = PollState.FAILED, str(e)
        except Exception as e:
            log(f"{config.label}: unexpected error in state {outcome.state.value}", "ERROR", e)
            outcome.state, outcome.error = PollState.FAILED, f"{type(e).__name__}: {e}"
        return outcome

    def run(self, payload):
        configs = resolve(parse_payload(payload))
        log("Autoscaler poller started.", "DEBUG", [c.to_dict() for c in configs])

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            outcomes = list(pool.map(self.poll_instance, configs))

        failed = [o for o in outcomes if not o.ok]
        log(
            f"Poll finished: {len(outcomes) - len(failed)} dispatched, {len(failed)} failed.",
            "WARNING" if failed else "INFO",
            [{"instance": f"{o.project_id}/{o.instance_id}", "error": o.error} for o in failed] or None,
        )
        return outcomes
