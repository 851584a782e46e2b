"""Restart dispatcher.

Starts the retry execution for a failed run, carrying the original input
forward untouched.

Usage:
    dispatcher = RestartDispatcher(port)

    result = dispatcher.dispatch(scope, "ca9961be-r", original.input)
    if result.success:
        print(result.execution_arn)
"""

from dataclasses import dataclass

import structlog

from sfn_retry.models.scope import WorkflowScope
from sfn_retry.repositories.base import ExecutionPort
from sfn_retry.utils.exceptions import ConflictError, RetryToolError

logger = structlog.get_logger()

EMPTY_INPUT = "{}"


@dataclass
class DispatchResult:
    """Result of one restart attempt."""

    success: bool
    name: str
    execution_arn: str | None = None
    error: RetryToolError | None = None

    @property
    def is_conflict(self) -> bool:
        """Whether the attempt failed on a duplicate name."""
        return isinstance(self.error, ConflictError)


class RestartDispatcher:
    """Starts retry executions through an ``ExecutionPort``."""

    def __init__(self, port: ExecutionPort):
        """Initialize the dispatcher.

        Args:
            port: Execution port used for ``start_execution``.
        """
        self.port = port
        self.logger = logger.bind(service="restart_dispatcher")

    def start_retry(
        self,
        scope: WorkflowScope,
        new_name: str,
        execution_input: str | None,
    ) -> str:
        """Start a retry execution.

        Args:
            scope: Workflow scope to start in.
            new_name: Derived execution name.
            execution_input: Original input text. ``None`` or empty
                becomes ``{}``.

        Returns:
            The new execution's ARN.

        Raises:
            ConflictError: If ``new_name`` already exists in scope.
            TransportError: For any other rejection.
        """
        payload = execution_input if execution_input else EMPTY_INPUT
        return self.port.start_execution(scope, new_name, payload)

    def dispatch(
        self,
        scope: WorkflowScope,
        new_name: str,
        execution_input: str | None,
    ) -> DispatchResult:
        """Start a retry execution, returning the outcome as a value.

        Never raises for service-side failures.
        """
        try:
            execution_arn = self.start_retry(scope, new_name, execution_input)
        except RetryToolError as e:
            self.logger.warning(
                "Failed to start execution",
                name=new_name,
                error_code=e.error_code,
                error=e.message,
            )
            return DispatchResult(success=False, name=new_name, error=e)

        return DispatchResult(success=True, name=new_name, execution_arn=execution_arn)
