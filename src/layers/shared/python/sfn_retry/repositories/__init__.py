"""Repository classes for Step Functions data access."""

from sfn_retry.repositories.base import ExecutionPort
from sfn_retry.repositories.execution import ExecutionRepository

__all__ = [
    "ExecutionPort",
    "ExecutionRepository",
]
