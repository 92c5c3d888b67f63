"""Evaluation report selection for the sequence labeler."""

from __future__ import annotations

import enum
import logging
from typing import Any, Optional

from .errors import CollaboratorError, ConfigurationError

logger = logging.getLogger(__name__)


class ReportMode(enum.Enum):
    ACCURACY = "accuracy"
    BRIEF = "brief"
    DETAILED = "detailed"
    ERROR = "error"


DEFAULT_REPORT_MODE = ReportMode.DETAILED

# Evaluator method implementing each report
REPORT_PROCEDURES = {
    ReportMode.ACCURACY: "evaluate_accuracy",
    ReportMode.BRIEF: "evaluate",
    ReportMode.DETAILED: "detail_evaluate",
    ReportMode.ERROR: "eval_error",
}

_REPORT_BY_NAME = {
    ReportMode.BRIEF.value: ReportMode.BRIEF,
    ReportMode.DETAILED.value: ReportMode.DETAILED,
    ReportMode.ERROR.value: ReportMode.ERROR,
}


def select_report_mode(metric: Optional[str], eval_report: Optional[str]) -> ReportMode:
    """
    Pick the evaluation procedure.

    ``metric == "accuracy"`` always wins. Otherwise ``eval_report`` names the
    report, and an absent report means detailed.

    Raises:
        ConfigurationError: for an ``eval_report`` outside brief/detailed/error.
    """
    if metric is not None and metric.lower() == ReportMode.ACCURACY.value:
        return ReportMode.ACCURACY
    if eval_report is None:
        return DEFAULT_REPORT_MODE
    mode = _REPORT_BY_NAME.get(eval_report.strip().lower())
    if mode is None:
        raise ConfigurationError(
            f"Unknown evaluation report '{eval_report}' (choose from {', '.join(_REPORT_BY_NAME)})"
        )
    return mode


def call_procedure(evaluator: Any, name: str) -> Any:
    procedure = getattr(evaluator, name, None)
    if not callable(procedure):
        raise CollaboratorError(f"{type(evaluator).__name__} does not provide the '{name}' procedure")
    logger.debug("Running %s.%s", type(evaluator).__name__, name)
    return procedure()


def run_report(evaluator: Any, mode: ReportMode) -> Any:
    """Invoke the single evaluator procedure for ``mode`` and return its result."""
    return call_procedure(evaluator, REPORT_PROCEDURES[mode])
