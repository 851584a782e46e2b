"""Search a state machine's executions for one object ID.

Lists every execution started on a date, describes each one and keeps
those whose input mentions the object ID. Describe failures are skipped
silently, the search is best effort.
"""

from dataclasses import dataclass
from urllib.parse import quote

import structlog

from sfn_retry.models.execution import Execution
from sfn_retry.models.scope import WorkflowScope
from sfn_retry.repositories.execution import ExecutionRepository
from sfn_retry.utils.exceptions import MalformedResponseError, TransportError

logger = structlog.get_logger()

DEFAULT_SEARCH_STATE_MACHINE = "RelatedSectionContent-production"

CONSOLE_URL_TEMPLATE = (
    "https://{region}.console.aws.amazon.com/states/home"
    "?region={region}#/v2/executions/details/{encoded_arn}"
)


@dataclass
class SearchMatch:
    """An execution whose input contains the object ID."""

    execution: Execution
    console_url: str


def console_url(region: str, execution_arn: str) -> str:
    """Build the Step Functions console URL of an execution."""
    return CONSOLE_URL_TEMPLATE.format(region=region, encoded_arn=quote(execution_arn, safe=""))


def search_executions(
    repository: ExecutionRepository,
    scope: WorkflowScope,
    date: str,
    object_id: str,
) -> list[SearchMatch]:
    """Find executions started on ``date`` whose input contains ``object_id``.

    Args:
        repository: Execution repository.
        scope: Workflow scope.
        date: Start date prefix, YYYY-MM-DD.
        object_id: Text to look for in the execution input.

    Returns:
        Matches in listing order.

    Raises:
        TransportError: If listing fails.
    """
    summaries = repository.list_executions(scope, all_pages=True)
    started = [s for s in summaries if s.start_date and s.start_date.startswith(date)]

    logger.info(
        "Searching executions",
        state_machine_arn=scope.state_machine_arn,
        date=date,
        object_id=object_id,
        candidates=len(started),
    )

    matches: list[SearchMatch] = []
    for summary in started:
        try:
            execution = repository.describe_execution(summary.execution_arn)
        except (TransportError, MalformedResponseError) as e:
            logger.debug("Describe failed, skipping", execution_arn=summary.execution_arn, error=e.message)
            continue

        if execution.input and object_id in execution.input:
            matches.append(
                SearchMatch(
                    execution=execution,
                    console_url=console_url(scope.region, execution.execution_arn),
                )
            )

    logger.info("Search complete", matches=len(matches))
    return matches
