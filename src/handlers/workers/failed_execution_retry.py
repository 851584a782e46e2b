"""Failed execution retry Lambda.

Scheduled by EventBridge (daily). Restarts yesterday's executions of the
configured state machine that failed at the target state. A ``date`` key
in the event overrides the default, for manual re-runs.

Environment:
    AWS_REGION, AWS_ACCOUNT_ID, STATE_MACHINE, TARGET_STATE, RETRY_DELAY_SECONDS
"""

from typing import Any

import structlog

from sfn_retry.config import env_defaults, yesterday_utc
from sfn_retry.models.scope import RetryRequest
from sfn_retry.repositories.execution import ExecutionRepository
from sfn_retry.services.retry_orchestrator import RetryOrchestrator
from sfn_retry.utils.exceptions import MalformedResponseError, TransportError, ValidationError

logger = structlog.get_logger()


def handler(event: dict[str, Any], context: Any) -> dict:
    """Run one retry pass.

    Args:
        event: EventBridge scheduled event, optionally with ``date``.
        context: Lambda context.

    Returns:
        Run summary, or an error description.
    """
    config = env_defaults()
    date = (event or {}).get("date") or config["date"] or yesterday_utc()

    logger.info("Failed execution retry started", date=date, state_machine=config["state_machine"])

    try:
        # The Lambda role provides credentials, so no profile is used.
        request = RetryRequest.build(
            date=date,
            region=config["region"] or "",
            account_id=config["account_id"] or "",
            state_machine=config["state_machine"] or "",
            target_state=config["target_state"],
            delay_seconds=config["delay_seconds"],
        )
    except ValidationError as e:
        logger.error("Invalid retry configuration", errors=e.errors)
        return {"status": "error", **e.to_dict()}

    orchestrator = RetryOrchestrator(ExecutionRepository(region=request.scope.region))

    try:
        summary = orchestrator.run(request)
    except (TransportError, MalformedResponseError) as e:
        logger.error("Failed to list failed executions", error_code=e.error_code, error=e.message)
        return {"status": "error", **e.to_dict()}

    return {
        "status": "success" if summary.succeeded else "nothing_restarted",
        "date": summary.date,
        "total": summary.total,
        "restarted": summary.restarted,
        "failed_to_restart": summary.failed_to_restart,
        "skipped": summary.skipped,
        "restarted_executions": [r.execution_arn for r in summary.restarted_executions],
    }
