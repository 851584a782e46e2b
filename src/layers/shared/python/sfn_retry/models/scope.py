"""Workflow scope and retry run parameters."""

import re
from datetime import datetime

import structlog
from pydantic import Field, ValidationError as PydanticValidationError, field_validator

from sfn_retry.models.base import BaseModel
from sfn_retry.utils.exceptions import ValidationError

logger = structlog.get_logger()

DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
ACCOUNT_ID_PATTERN = re.compile(r"^[0-9]{12}$")
REGION_PATTERN = re.compile(r"^[a-z]{2}-[a-z]+-[0-9]$")

STATE_MACHINE_ARN_TEMPLATE = "arn:aws:states:{region}:{account_id}:stateMachine:{state_machine}"

DEFAULT_TARGET_STATE = "PatchDrupalSection"
DEFAULT_DELAY_SECONDS = 5.0
LIST_MAX_RESULTS = 100
DIAGNOSTIC_MAX_RESULTS = 10


class WorkflowScope(BaseModel):
    """The (region, account, state machine) triple a run targets.

    The ARN is built by templating only; whether the state machine exists
    is found out by the first call that uses it.
    """

    region: str = Field(..., description="AWS region")
    account_id: str = Field(..., description="12-digit AWS account ID")
    state_machine: str = Field(..., min_length=1, description="State machine name")

    @field_validator("region")
    @classmethod
    def validate_region(cls, v: str) -> str:
        """Require a region; an unusual shape is only warned about."""
        v = v.strip()
        if not v:
            raise ValueError("Region must not be empty")
        if not REGION_PATTERN.match(v):
            logger.warning("Region format looks unusual, continuing anyway", region=v)
        return v

    @field_validator("account_id")
    @classmethod
    def validate_account_id(cls, v: str) -> str:
        """Require exactly 12 digits."""
        v = v.strip()
        if not ACCOUNT_ID_PATTERN.match(v):
            raise ValueError("Invalid AWS account ID format. Must be 12 digits")
        return v

    @classmethod
    def build(cls, region: str, account_id: str, state_machine: str) -> "WorkflowScope":
        """Validate raw parameters into a scope.

        Raises:
            ValidationError: If any parameter is malformed.
        """
        try:
            return cls(region=region, account_id=account_id, state_machine=state_machine)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

    @property
    def state_machine_arn(self) -> str:
        """Resolve the state machine ARN."""
        return STATE_MACHINE_ARN_TEMPLATE.format(
            region=self.region,
            account_id=self.account_id,
            state_machine=self.state_machine,
        )


class RetryRequest(BaseModel):
    """Parameters of one retry run."""

    date: str = Field(..., description="Stop date to match, YYYY-MM-DD")
    scope: WorkflowScope
    profile: str | None = Field(None, description="AWS profile name; None uses the default chain")
    target_state: str = Field(default=DEFAULT_TARGET_STATE, min_length=1)
    delay_seconds: float = Field(default=DEFAULT_DELAY_SECONDS, ge=0)
    max_results: int = Field(default=LIST_MAX_RESULTS, ge=1, le=1000)

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        """Require YYYY-MM-DD naming a real calendar day."""
        v = v.strip()
        if not DATE_PATTERN.match(v):
            raise ValueError("Invalid date format. Expected YYYY-MM-DD")
        try:
            datetime.strptime(v, "%Y-%m-%d")
        except ValueError:
            raise ValueError("Date is not a valid calendar day") from None
        return v

    @classmethod
    def build(
        cls,
        date: str,
        region: str,
        account_id: str,
        state_machine: str,
        **kwargs,
    ) -> "RetryRequest":
        """Validate raw parameters into a request.

        Raises:
            ValidationError: If any parameter is malformed.
        """
        options = {k: v for k, v in kwargs.items() if v is not None}
        try:
            return cls(
                date=date,
                scope={
                    "region": region,
                    "account_id": account_id,
                    "state_machine": state_machine,
                },
                **options,
            )
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e
