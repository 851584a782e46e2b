"""Environment-based configuration.

Every run parameter can come from the environment so the tools work
unattended (cron, containers, Lambda):

    EXECUTION_DATE       YYYY-MM-DD to process
    AWS_REGION           AWS region
    AWS_ACCOUNT_ID       12-digit account ID
    AWS_PROFILE          AWS profile name
    STATE_MACHINE        State machine name
    TARGET_STATE         State whose failure qualifies for retry
    RETRY_DELAY_SECONDS  Pause after each successful restart
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Mapping

ENV_VARS: dict[str, str] = {
    "date": "EXECUTION_DATE",
    "region": "AWS_REGION",
    "account_id": "AWS_ACCOUNT_ID",
    "profile": "AWS_PROFILE",
    "state_machine": "STATE_MACHINE",
    "target_state": "TARGET_STATE",
    "delay_seconds": "RETRY_DELAY_SECONDS",
}


def env_defaults(environ: Mapping[str, str] | None = None) -> dict[str, str | None]:
    """Read run parameters from the environment.

    Empty values are treated as unset.
    """
    environ = os.environ if environ is None else environ
    return {key: (environ.get(var) or None) for key, var in ENV_VARS.items()}


def yesterday_utc(now: datetime | None = None) -> str:
    """Return yesterday's date (UTC) as YYYY-MM-DD."""
    now = now or datetime.now(timezone.utc)
    return (now - timedelta(days=1)).strftime("%Y-%m-%d")
