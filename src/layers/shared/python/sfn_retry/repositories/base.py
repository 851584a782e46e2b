"""Port for the Step Functions operations the retry pipeline needs."""

from typing import Protocol

from sfn_retry.models.execution import Execution, ExecutionSummary, HistoryEvent
from sfn_retry.models.scope import LIST_MAX_RESULTS, WorkflowScope


class ExecutionPort(Protocol):
    """List, describe, history and start operations against one service.

    ``ExecutionRepository`` implements this over boto3; tests substitute an
    in-memory double. Every method raises ``TransportError`` when the call
    fails and ``MalformedResponseError`` when the reply cannot be parsed.
    """

    def list_failed_executions(
        self,
        scope: WorkflowScope,
        max_results: int = LIST_MAX_RESULTS,
    ) -> list[ExecutionSummary]:
        """List FAILED executions of the scope's state machine (one page)."""
        ...

    def describe_execution(self, execution_arn: str) -> Execution:
        """Get full execution details, including input."""
        ...

    def get_execution_history(self, execution_arn: str) -> list[HistoryEvent]:
        """Get every history event of an execution."""
        ...

    def start_execution(self, scope: WorkflowScope, name: str, execution_input: str) -> str:
        """Start an execution and return its ARN.

        Raises ``ConflictError`` when the name already exists in scope.
        """
        ...
