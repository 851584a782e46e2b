"""Step Functions execution models."""

from enum import Enum
from typing import Any, Self

from pydantic import Field

from sfn_retry.models.base import BaseModel


class ExecutionStatus(str, Enum):
    """Execution status as reported by Step Functions."""

    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"
    ABORTED = "ABORTED"
    PENDING_REDRIVE = "PENDING_REDRIVE"


class ExecutionSummary(BaseModel):
    """One entry of a ``list_executions`` page.

    ``stop_date`` is only present once the execution is terminal.
    """

    execution_arn: str = Field(..., min_length=1, description="Execution ARN")
    name: str = Field(..., min_length=1, description="Execution name")
    status: ExecutionStatus = Field(..., description="Execution status")
    state_machine_arn: str | None = Field(None, description="Owning state machine ARN")
    start_date: str | None = Field(None, description="ISO-8601 start timestamp")
    stop_date: str | None = Field(None, description="ISO-8601 stop timestamp")


class Execution(ExecutionSummary):
    """Full ``describe_execution`` result, including the start input."""

    input: str | None = Field(None, description="Raw JSON input the execution was started with")
    output: str | None = Field(None, description="Raw JSON output, when succeeded")
    error: str | None = Field(None, description="Error name, when failed")
    cause: str | None = Field(None, description="Error cause, when failed")


STATE_FAILED_EVENT = "StateFailed"


# Detail blocks that carry the name of the state an event belongs to.
# The failure block uses "state", the enter/exit blocks use "name".
_STATE_DETAIL_KEYS: tuple[tuple[str, str], ...] = (
    ("stateFailedEventDetails", "state"),
    ("stateEnteredEventDetails", "name"),
    ("stateExitedEventDetails", "name"),
)


class HistoryEvent(BaseModel):
    """One entry of an execution's history."""

    id: int = Field(..., description="Event sequence number")
    type: str = Field(..., description="Event type tag")
    state_name: str | None = Field(None, description="State the event pertains to")
    timestamp: str | None = Field(None, description="ISO-8601 event timestamp")

    @classmethod
    def from_aws(cls, item: dict[str, Any]) -> Self:
        """Deserialize a history event, lifting the state name out of its detail block."""
        data = cls._deserialize_value(item)
        for detail_key, name_key in _STATE_DETAIL_KEYS:
            details = data.get(detail_key)
            if isinstance(details, dict) and details.get(name_key):
                data["stateName"] = details[name_key]
                break
        return cls.model_validate(data)

    @property
    def is_state_failure(self) -> bool:
        """Check whether this event records a step-level failure."""
        return self.type == STATE_FAILED_EVENT
