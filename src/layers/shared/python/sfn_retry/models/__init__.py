"""Pydantic models for Step Functions executions and retry runs."""

from sfn_retry.models.base import BaseModel
from sfn_retry.models.execution import (
    Execution,
    ExecutionStatus,
    ExecutionSummary,
    HistoryEvent,
    STATE_FAILED_EVENT,
)
from sfn_retry.models.scope import (
    DEFAULT_DELAY_SECONDS,
    DEFAULT_TARGET_STATE,
    DIAGNOSTIC_MAX_RESULTS,
    LIST_MAX_RESULTS,
    RetryRequest,
    WorkflowScope,
)

__all__ = [
    "BaseModel",
    "DEFAULT_DELAY_SECONDS",
    "DEFAULT_TARGET_STATE",
    "DIAGNOSTIC_MAX_RESULTS",
    "Execution",
    "ExecutionStatus",
    "ExecutionSummary",
    "HistoryEvent",
    "LIST_MAX_RESULTS",
    "RetryRequest",
    "STATE_FAILED_EVENT",
    "WorkflowScope",
]
