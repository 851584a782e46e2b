"""Retry orchestrator for failed Step Functions executions.

Single sequential pass over one date's failures:

    LISTING -> per candidate (CLASSIFYING -> DERIVING -> DISPATCHING -> COOLING_DOWN)
            -> SUMMARIZED

A listing failure aborts the run. Anything that goes wrong for a single
candidate is recorded in the summary and the loop moves on; nothing is
retried within a run.

Usage:
    request = RetryRequest.build(
        date="2025-11-13",
        region="us-east-1",
        account_id="123456789012",
        state_machine="MyStateMachine",
    )
    orchestrator = RetryOrchestrator(ExecutionRepository(session=session))
    summary = orchestrator.run(request)
    sys.exit(summary.exit_code)
"""

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Callable

import structlog

from sfn_retry.models.execution import ExecutionSummary
from sfn_retry.models.scope import RetryRequest
from sfn_retry.repositories.base import ExecutionPort
from sfn_retry.services.failure_classifier import Classification, classify
from sfn_retry.services.restart_dispatcher import RestartDispatcher
from sfn_retry.services.retry_naming import derive_retry_name, stop_date_matches
from sfn_retry.utils.exceptions import MalformedResponseError, TransportError
from sfn_retry.utils.output import NullReporter, Reporter
from sfn_retry.utils.rate_limiter import FixedDelayRateLimiter

logger = structlog.get_logger()

DatePolicy = Callable[[str | None, str], bool]


@dataclass
class RetryFailure:
    """A candidate that matched but could not be restarted."""

    execution_arn: str
    name: str
    stage: str  # "describe" or "dispatch"
    error_code: str
    message: str


@dataclass
class RestartedExecution:
    """A successful restart."""

    original_arn: str
    original_name: str
    name: str
    execution_arn: str


@dataclass
class RetrySummary:
    """Counts and details of one run."""

    date: str
    target_state: str
    total: int = 0
    restarted: int = 0
    failed_to_restart: int = 0
    skipped: int = 0
    history_unavailable: int = 0
    cooldowns: int = 0
    restarted_executions: list[RestartedExecution] = field(default_factory=list)
    failures: list[RetryFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """A run succeeds if it restarted something or had nothing to do."""
        return self.restarted > 0 or self.total == 0

    @property
    def exit_code(self) -> int:
        """Process exit status for the run."""
        return 0 if self.succeeded else 1

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict for handler responses."""
        data = asdict(self)
        data["succeeded"] = self.succeeded
        return data


class RetryOrchestrator:
    """Finds one day's failures at a target state and restarts them."""

    def __init__(
        self,
        port: ExecutionPort,
        dispatcher: RestartDispatcher | None = None,
        reporter: Reporter | None = None,
        sleep: Callable[[float], None] = time.sleep,
        date_policy: DatePolicy = stop_date_matches,
    ):
        """Initialize the orchestrator.

        Args:
            port: Execution port for list/describe/history/start.
            dispatcher: Restart dispatcher. Defaults to one over ``port``.
            reporter: Operator-facing output sink. Defaults to silent.
            sleep: Sleep function used for the cool-down.
            date_policy: Predicate deciding whether a stop date falls on
                the requested date.
        """
        self.port = port
        self.dispatcher = dispatcher or RestartDispatcher(port)
        self.reporter = reporter or NullReporter()
        self._sleep = sleep
        self._date_policy = date_policy
        self.logger = logger.bind(service="retry_orchestrator")

    def find_candidates(self, request: RetryRequest) -> list[ExecutionSummary]:
        """List failed executions and keep those stopped on the requested date.

        Raises:
            TransportError: If the listing call fails.
            MalformedResponseError: If the listing cannot be parsed.
        """
        self.reporter.info(f"Fetching failed executions for {request.date}")
        self.reporter.verbose(f"State Machine ARN: {request.scope.state_machine_arn}")
        self.reporter.verbose(f"Querying for failed executions (max {request.max_results} results)...")

        failed = self.port.list_failed_executions(request.scope, max_results=request.max_results)
        self.reporter.verbose(f"Total executions in AWS response: {len(failed)}")

        candidates = [e for e in failed if self._date_policy(e.stop_date, request.date)]

        self.logger.info(
            "Failed executions listed",
            state_machine_arn=request.scope.state_machine_arn,
            date=request.date,
            listed=len(failed),
            candidates=len(candidates),
        )
        return candidates

    def run(self, request: RetryRequest) -> RetrySummary:
        """Run one retry pass.

        Args:
            request: Validated run parameters.

        Returns:
            RetrySummary with counts and per-item details.

        Raises:
            TransportError: If listing fails; nothing else is called.
            MalformedResponseError: If the listing cannot be parsed.
        """
        summary = RetrySummary(date=request.date, target_state=request.target_state)
        limiter = FixedDelayRateLimiter(request.delay_seconds, sleep=self._sleep)

        try:
            candidates = self.find_candidates(request)
        except (TransportError, MalformedResponseError) as e:
            self.logger.error(
                "Listing failed executions failed",
                error_code=e.error_code,
                error=e.message,
            )
            self.reporter.error(e.message)
            raise

        summary.total = len(candidates)
        if not candidates:
            self.reporter.info(f"No failed executions found for date: {request.date}")

        for index, candidate in enumerate(candidates, start=1):
            restarted = self._process(index, candidate, request, summary)

            if restarted and index < len(candidates):
                self.reporter.info(
                    f"  -> Waiting {request.delay_seconds:g} seconds before next execution..."
                )
                limiter.cool_down()

        summary.cooldowns = limiter.cooldowns
        self._report_summary(summary)
        return summary

    def _process(
        self,
        index: int,
        candidate: ExecutionSummary,
        request: RetryRequest,
        summary: RetrySummary,
    ) -> bool:
        """Classify, derive and dispatch one candidate.

        Returns:
            True if a retry execution was started.
        """
        log = self.logger.bind(execution_arn=candidate.execution_arn, name=candidate.name)
        self.reporter.info(f"Checking execution ({index}): {candidate.name}")

        classification = classify(self.port, candidate.execution_arn, request.target_state)
        if classification is not Classification.MATCHED:
            summary.skipped += 1
            if classification is Classification.HISTORY_UNAVAILABLE:
                summary.history_unavailable += 1
                self.reporter.warning(f"  -> Could not read history for {candidate.name}, skipping")
            else:
                self.reporter.info(f"  -> Did not fail at {request.target_state} state, skipping")
            log.info("Execution skipped", classification=classification.value)
            return False

        self.reporter.info(f"  -> Failed at {request.target_state} state")

        try:
            details = self.port.describe_execution(candidate.execution_arn)
        except (TransportError, MalformedResponseError) as e:
            summary.failed_to_restart += 1
            summary.failures.append(
                RetryFailure(
                    execution_arn=candidate.execution_arn,
                    name=candidate.name,
                    stage="describe",
                    error_code=e.error_code,
                    message=e.message,
                )
            )
            self.reporter.error(f"Failed to describe execution: {candidate.execution_arn}")
            log.warning("Describe failed", error_code=e.error_code, error=e.message)
            return False

        new_name = derive_retry_name(candidate.name)
        self.reporter.info(f"  -> Will restart as: {new_name}")
        self.reporter.info(f"Starting new execution: {new_name}")

        result = self.dispatcher.dispatch(request.scope, new_name, details.input)
        if not result.success:
            summary.failed_to_restart += 1
            summary.failures.append(
                RetryFailure(
                    execution_arn=candidate.execution_arn,
                    name=candidate.name,
                    stage="dispatch",
                    error_code=result.error.error_code,
                    message=result.error.message,
                )
            )
            if result.is_conflict:
                self.reporter.error(f"Failed to start execution: {new_name} already exists")
            else:
                self.reporter.error(f"Failed to start execution: {new_name} ({result.error.message})")
            log.warning("Restart failed", new_name=new_name, conflict=result.is_conflict)
            return False

        summary.restarted += 1
        summary.restarted_executions.append(
            RestartedExecution(
                original_arn=candidate.execution_arn,
                original_name=candidate.name,
                name=new_name,
                execution_arn=result.execution_arn,
            )
        )
        self.reporter.success(f"New execution started: {result.execution_arn}")
        log.info("Execution restarted", new_name=new_name, new_execution_arn=result.execution_arn)
        return True

    def _report_summary(self, summary: RetrySummary) -> None:
        """Emit the end-of-run summary."""
        self.logger.info(
            "Retry run complete",
            date=summary.date,
            total=summary.total,
            restarted=summary.restarted,
            failed_to_restart=summary.failed_to_restart,
            skipped=summary.skipped,
        )

        self.reporter.info("")
        self.reporter.info("====== Summary ======")
        self.reporter.info(f"Total failed executions found: {summary.total}")
        self.reporter.info(f"Executions restarted: {summary.restarted}")
        if summary.failed_to_restart > 0:
            self.reporter.warning(f"Failed to restart: {summary.failed_to_restart}")
        self.reporter.info("")

        if summary.restarted > 0:
            self.reporter.success(
                f"Retry process completed with {summary.restarted} execution(s) restarted"
            )
        elif summary.total == 0:
            self.reporter.info("Nothing to retry")
        else:
            self.reporter.warning("No executions were restarted")
