import json
import traceback

from poller import config

SEVERITIES = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _rank(severity):
    try:
        return SEVERITIES.index(severity.upper())
    except ValueError:
        return 0


def log(message, severity="DEBUG", payload=None):
    """Write one structured log line to stdout.

    Cloud Run and Cloud Functions pick up ``severity`` and ``message`` from
    JSON lines, so no logging client is needed on this path.
    """
    if _rank(severity) < _rank(config.LOG_LEVEL):
        return

    if isinstance(payload, BaseException):
        trace = "".join(traceback.format_exception(type(payload), payload, payload.__traceback__))
        message = f"{message}\n{trace}" if message else trace
        payload = str(payload)

    entry = {
        "message": message,
        "severity": severity,
        "payload": payload,
    }
    print(json.dumps(entry, default=str), flush=True)
