"""Base Pydantic models with Step Functions response deserialization."""

from datetime import datetime
from typing import Any, Self

from pydantic import BaseModel as PydanticBaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseModel(PydanticBaseModel):
    """Base model for values read from the Step Functions API.

    Field names are snake_case in Python and camelCase on the wire
    (``executionArn`` <-> ``execution_arn``). Unknown response keys are
    ignored so new service fields never break parsing.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )

    @classmethod
    def from_aws(cls, item: dict[str, Any]) -> Self:
        """Deserialize a boto3 response item to a model instance.

        boto3 returns timestamps as ``datetime`` objects; they are rendered
        back to ISO-8601 text so date matching stays a text comparison.
        """
        return cls.model_validate(cls._deserialize_value(item))

    @classmethod
    def _deserialize_value(cls, value: Any) -> Any:
        """Recursively convert datetimes to ISO strings."""
        if isinstance(value, dict):
            return {k: cls._deserialize_value(v) for k, v in value.items()}
        if isinstance(value, list):
            return [cls._deserialize_value(item) for item in value]
        if isinstance(value, datetime):
            return value.isoformat()
        return value
