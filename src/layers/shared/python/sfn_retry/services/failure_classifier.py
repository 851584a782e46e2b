"""Decide whether a failed execution failed at a given state.

An execution can be FAILED without any state failing (e.g. an
orchestration-level error), so the status alone is not enough: the
history is scanned for a ``StateFailed`` event naming the target state.
"""

from enum import Enum

import structlog

from sfn_retry.models.execution import HistoryEvent
from sfn_retry.repositories.base import ExecutionPort
from sfn_retry.utils.exceptions import MalformedResponseError, TransportError

logger = structlog.get_logger()


class Classification(str, Enum):
    """Outcome of classifying one execution."""

    MATCHED = "matched"
    NOT_MATCHED = "not_matched"
    HISTORY_UNAVAILABLE = "history_unavailable"


def find_state_failure(events: list[HistoryEvent], target_state: str) -> HistoryEvent | None:
    """Return the first ``StateFailed`` event for ``target_state``.

    State names are compared exactly and case-sensitively.
    """
    for event in events:
        if event.is_state_failure and event.state_name == target_state:
            return event
    return None


def classify(port: ExecutionPort, execution_arn: str, target_state: str) -> Classification:
    """Classify an execution against the target state.

    History-fetch failures are logged and reported as
    ``HISTORY_UNAVAILABLE``; they never propagate.
    """
    try:
        events = port.get_execution_history(execution_arn)
    except (TransportError, MalformedResponseError) as e:
        logger.warning(
            "Failed to get execution history",
            execution_arn=execution_arn,
            error_code=e.error_code,
            error=e.message,
        )
        return Classification.HISTORY_UNAVAILABLE

    match = find_state_failure(events, target_state)
    if match is None:
        return Classification.NOT_MATCHED

    logger.debug(
        "State failure found",
        execution_arn=execution_arn,
        state=target_state,
        event_id=match.id,
    )
    return Classification.MATCHED


def failed_at_state(port: ExecutionPort, execution_arn: str, target_state: str) -> bool:
    """Check whether an execution failed at ``target_state``.

    False both when it failed elsewhere and when its history could not
    be read; use ``classify`` to tell those apart.
    """
    return classify(port, execution_arn, target_state) is Classification.MATCHED
