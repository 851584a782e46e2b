"""Step Functions execution repository."""

from typing import Any

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError as PydanticValidationError

from sfn_retry.models.execution import (
    Execution,
    ExecutionStatus,
    ExecutionSummary,
    HistoryEvent,
)
from sfn_retry.models.scope import LIST_MAX_RESULTS, WorkflowScope
from sfn_retry.utils.exceptions import ConflictError, MalformedResponseError, TransportError

logger = structlog.get_logger()


class ExecutionRepository:
    """Read and start Step Functions executions through boto3.

    Translates botocore failures into ``TransportError`` /
    ``ConflictError`` and unparseable replies into
    ``MalformedResponseError``. An empty listing is a normal result.
    """

    def __init__(
        self,
        session: boto3.Session | None = None,
        region: str | None = None,
        client: Any = None,
    ):
        """Initialize repository.

        Args:
            session: boto3 session to create the client from. Defaults to
                the default session.
            region: Region for the client.
            client: Pre-built Step Functions client (tests).
        """
        self._session = session
        self._region = region
        self._sfn = client

    @property
    def sfn(self):
        """Get Step Functions client (lazy initialization)."""
        if self._sfn is None:
            factory = self._session.client if self._session else boto3.client
            self._sfn = factory("stepfunctions", region_name=self._region)
        return self._sfn

    def _call(self, operation: str, **kwargs) -> dict:
        """Invoke a client method, translating botocore errors."""
        try:
            response = getattr(self.sfn, operation)(**kwargs)
        except ClientError as e:
            error = e.response.get("Error", {})
            logger.error(
                "Step Functions call failed",
                operation=operation,
                error_code=error.get("Code"),
                error=str(e),
            )
            raise TransportError(
                operation,
                aws_error_code=error.get("Code"),
                raw_error=str(e),
            ) from e
        except BotoCoreError as e:
            logger.error("Step Functions call failed", operation=operation, error=str(e))
            raise TransportError(operation, raw_error=str(e)) from e

        if not isinstance(response, dict):
            raise MalformedResponseError(operation, response)
        return response

    def _parse_executions(self, operation: str, response: dict) -> list[ExecutionSummary]:
        """Parse the ``executions`` array of a listing response."""
        items = response.get("executions")
        if not isinstance(items, list):
            raise MalformedResponseError(
                operation, response, "Listing response has no 'executions' array"
            )
        try:
            return [ExecutionSummary.from_aws(item) for item in items]
        except (PydanticValidationError, TypeError, AttributeError) as e:
            raise MalformedResponseError(operation, response, f"Unparseable execution entry: {e}") from e

    def list_executions(
        self,
        scope: WorkflowScope,
        status: ExecutionStatus | None = None,
        max_results: int = LIST_MAX_RESULTS,
        all_pages: bool = False,
    ) -> list[ExecutionSummary]:
        """List executions of the scope's state machine.

        Args:
            scope: Workflow scope.
            status: Optional status filter.
            max_results: Page size.
            all_pages: Follow ``nextToken`` until the listing is exhausted.

        Returns:
            Execution summaries in service order (newest first).
        """
        kwargs: dict[str, Any] = {
            "stateMachineArn": scope.state_machine_arn,
            "maxResults": max_results,
        }
        if status:
            kwargs["statusFilter"] = ExecutionStatus(status).value

        logger.debug(
            "Listing executions",
            state_machine_arn=scope.state_machine_arn,
            status=kwargs.get("statusFilter"),
            max_results=max_results,
        )

        executions: list[ExecutionSummary] = []
        while True:
            response = self._call("list_executions", **kwargs)
            executions.extend(self._parse_executions("list_executions", response))

            next_token = response.get("nextToken")
            if not all_pages or not next_token:
                break
            kwargs["nextToken"] = next_token

        logger.debug("Executions listed", count=len(executions))
        return executions

    def list_failed_executions(
        self,
        scope: WorkflowScope,
        max_results: int = LIST_MAX_RESULTS,
    ) -> list[ExecutionSummary]:
        """List one page of FAILED executions, unfiltered by date."""
        return self.list_executions(scope, status=ExecutionStatus.FAILED, max_results=max_results)

    def describe_execution(self, execution_arn: str) -> Execution:
        """Get full execution details.

        Raises:
            TransportError: If the lookup fails (e.g. unknown ARN).
        """
        response = self._call("describe_execution", executionArn=execution_arn)
        try:
            return Execution.from_aws(response)
        except PydanticValidationError as e:
            raise MalformedResponseError("describe_execution", response) from e

    def get_execution_history(self, execution_arn: str) -> list[HistoryEvent]:
        """Get the complete, paginated history of an execution."""
        kwargs: dict[str, Any] = {"executionArn": execution_arn}
        events: list[HistoryEvent] = []

        while True:
            response = self._call("get_execution_history", **kwargs)
            items = response.get("events")
            if not isinstance(items, list):
                raise MalformedResponseError(
                    "get_execution_history", response, "History response has no 'events' array"
                )
            try:
                events.extend(HistoryEvent.from_aws(item) for item in items)
            except (PydanticValidationError, TypeError, AttributeError) as e:
                raise MalformedResponseError("get_execution_history", response) from e

            next_token = response.get("nextToken")
            if not next_token:
                break
            kwargs["nextToken"] = next_token

        return events

    def start_execution(self, scope: WorkflowScope, name: str, execution_input: str) -> str:
        """Start a new execution.

        Args:
            scope: Workflow scope.
            name: Execution name, unique within the state machine.
            execution_input: JSON input text, passed through unchanged.

        Returns:
            The new execution's ARN.

        Raises:
            ConflictError: If an execution with this name already exists.
            TransportError: For any other rejection.
        """
        try:
            response = self._call(
                "start_execution",
                stateMachineArn=scope.state_machine_arn,
                name=name,
                input=execution_input,
            )
        except TransportError as e:
            if e.aws_error_code == "ExecutionAlreadyExists":
                raise ConflictError(
                    f"Execution '{name}' already exists",
                    execution_name=name,
                ) from e
            raise

        execution_arn = response.get("executionArn")
        if not execution_arn:
            raise MalformedResponseError("start_execution", response)

        logger.info("Execution started", execution_arn=execution_arn, name=name)
        return execution_arn

    def list_state_machines(self) -> list[dict[str, str]]:
        """List all state machines visible in the region."""
        machines: list[dict[str, str]] = []
        kwargs: dict[str, Any] = {}

        while True:
            response = self._call("list_state_machines", **kwargs)
            items = response.get("stateMachines")
            if not isinstance(items, list):
                raise MalformedResponseError("list_state_machines", response)
            machines.extend(
                {"name": item.get("name", ""), "state_machine_arn": item.get("stateMachineArn", "")}
                for item in items
            )

            next_token = response.get("nextToken")
            if not next_token:
                break
            kwargs["nextToken"] = next_token

        return machines
