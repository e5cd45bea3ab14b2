"""Telemetry Sinks - TelemetrySink implementations shipped with the pipeline.

Invariants:
    - track_event never raises and never blocks on IO beyond a log handler
    - Parameters are copied before emission: later caller mutation cannot alter a sent event

Design Decisions:
    - LoggingTelemetry writes events as structured log records, so any log shipper
      doubles as an analytics transport; provider fan-out lives outside this package
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class LoggingTelemetry:
    """Emit each event as an INFO record named by the event, with parameters as extras."""

    def __init__(self, level: int = logging.INFO, logger_name: str | None = None):
        self._level = level
        self._logger = logging.getLogger(logger_name) if logger_name else logger

    def track_event(self, name: str, parameters: dict[str, Any]) -> None:
        try:
            self._logger.log(
                self._level,
                f"telemetry: {name}",
                extra={"event": name, "parameters": dict(parameters)},
            )
        except Exception as e:
            logger.warning(f"Failed to emit telemetry event '{name}': {e}")
