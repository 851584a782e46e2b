"""Custom exception classes for sfn-retry."""


class RetryToolError(Exception):
    """Base exception for all sfn-retry errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict | None = None,
    ):
        """Initialize RetryToolError.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert exception to dictionary for handler responses."""
        result = {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(RetryToolError):
    """Raised when run parameters are malformed.

    Always raised before any call to Step Functions is made.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: list[dict] | None = None,
    ):
        """Initialize ValidationError.

        Args:
            message: Error message.
            errors: List of validation errors with field, message and value.
        """
        self.errors = errors or []
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details={"errors": self.errors},
        )

    @classmethod
    def from_pydantic(cls, exc: Exception) -> "ValidationError":
        """Create ValidationError from Pydantic ValidationError."""
        errors = []
        if hasattr(exc, "errors"):
            for error in exc.errors():
                errors.append(
                    {
                        "field": ".".join(str(loc) for loc in error.get("loc", [])),
                        "message": error.get("msg", "Invalid value"),
                        "value": error.get("input"),
                    }
                )
        summary = "; ".join(
            f"{e['field']}: {e['message']} (got: {e['value']!r})" for e in errors
        )
        return cls(message=summary or "Validation failed", errors=errors)


class AuthenticationError(RetryToolError):
    """Raised when AWS credentials cannot be resolved or are rejected."""

    def __init__(self, message: str = "Failed to authenticate with AWS", profile: str | None = None):
        """Initialize AuthenticationError."""
        super().__init__(
            message=message,
            error_code="UNAUTHORIZED",
            details={"profile": profile} if profile else None,
        )


class TransportError(RetryToolError):
    """Raised when a Step Functions call itself fails.

    Covers network errors, credential rejection, service-side validation
    (bad ARN, bad input), throttling and unknown executions. The raw
    service diagnostic is preserved for the operator.
    """

    def __init__(
        self,
        operation: str,
        message: str | None = None,
        aws_error_code: str | None = None,
        raw_error: str | None = None,
    ):
        """Initialize TransportError.

        Args:
            operation: Service operation that failed (e.g. "list_executions").
            message: Optional custom message.
            aws_error_code: Error code returned by AWS, when there is one.
            raw_error: Raw error text from botocore.
        """
        self.operation = operation
        self.aws_error_code = aws_error_code
        self.raw_error = raw_error
        super().__init__(
            message=message or f"Step Functions call '{operation}' failed: {raw_error}",
            error_code="TRANSPORT_ERROR",
            details={
                "operation": operation,
                "aws_error_code": aws_error_code,
                "raw_error": raw_error,
            },
        )


class MalformedResponseError(RetryToolError):
    """Raised when a Step Functions response lacks the expected structure."""

    EXCERPT_LENGTH = 500

    def __init__(
        self,
        operation: str,
        payload: object,
        message: str | None = None,
    ):
        """Initialize MalformedResponseError.

        Args:
            operation: Service operation whose response was malformed.
            payload: The raw response; only an excerpt is kept.
            message: Optional custom message.
        """
        self.operation = operation
        self.excerpt = repr(payload)[: self.EXCERPT_LENGTH]
        super().__init__(
            message=message or f"Unexpected response from '{operation}'",
            error_code="MALFORMED_RESPONSE",
            details={"operation": operation, "excerpt": self.excerpt},
        )


class ConflictError(RetryToolError):
    """Raised when an execution with the requested name already exists."""

    def __init__(
        self,
        message: str = "Execution already exists",
        execution_name: str | None = None,
    ):
        """Initialize ConflictError."""
        self.execution_name = execution_name
        super().__init__(
            message=message,
            error_code="CONFLICT",
            details={"execution_name": execution_name} if execution_name else None,
        )
