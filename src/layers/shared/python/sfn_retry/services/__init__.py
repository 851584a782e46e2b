"""Service classes for the retry pipeline."""

from sfn_retry.services.diagnostics import CheckResult, CheckStatus, DiagnosticReport, DiagnosticsService
from sfn_retry.services.execution_search import SearchMatch, console_url, search_executions
from sfn_retry.services.failure_classifier import (
    Classification,
    classify,
    failed_at_state,
    find_state_failure,
)
from sfn_retry.services.restart_dispatcher import DispatchResult, RestartDispatcher
from sfn_retry.services.retry_naming import derive_retry_name, stop_date_matches
from sfn_retry.services.retry_orchestrator import (
    RestartedExecution,
    RetryFailure,
    RetryOrchestrator,
    RetrySummary,
)

__all__ = [
    "CheckResult",
    "CheckStatus",
    "Classification",
    "DiagnosticReport",
    "DiagnosticsService",
    "DispatchResult",
    "RestartDispatcher",
    "RestartedExecution",
    "RetryFailure",
    "RetryOrchestrator",
    "RetrySummary",
    "SearchMatch",
    "classify",
    "console_url",
    "derive_retry_name",
    "failed_at_state",
    "find_state_failure",
    "search_executions",
    "stop_date_matches",
]
