"""Exceptions for cfn-stack."""

# ---------------------------------------------------------------------------
# Base Exception
# ---------------------------------------------------------------------------


class CfnStackError(Exception):
    """
    Base exception for all cfn-stack errors.

    All exceptions raised by this library inherit from this class,
    allowing callers to catch all library-specific errors with a single
    except clause. Errors returned by CloudFormation itself are not wrapped
    and surface as ``botocore.exceptions.ClientError``.
    """

    pass


# ---------------------------------------------------------------------------
# Validation Exceptions
# ---------------------------------------------------------------------------


class ValidationError(CfnStackError):
    """
    Raised when user input fails validation.

    Attributes:
        field: Name of the field that failed validation
        value: The offending value
        reason: Human-readable explanation
    """

    def __init__(self, field: str, value: str, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


# ---------------------------------------------------------------------------
# Stack Exceptions
# ---------------------------------------------------------------------------


class StackError(CfnStackError):
    """
    Base exception for stack lifecycle errors.

    Attributes:
        stack_name: The stack the operation targeted
    """

    def __init__(self, stack_name: str, message: str) -> None:
        self.stack_name = stack_name
        super().__init__(message)


class StackNotFoundError(StackError):
    """Raised when a lookup does not resolve to exactly one stack."""

    def __init__(self, stack_name: str, matches: int = 0) -> None:
        self.matches = matches
        super().__init__(
            stack_name,
            f'No StackId for stack "{stack_name}" found ({matches} matching stacks)',
        )


class StackStatusError(StackError):
    """
    Raised when a stack operation ends in an unexpected terminal status.

    Typical cause is a rollback: an update was requested but the stack
    settled in ``UPDATE_ROLLBACK_COMPLETE`` instead of ``UPDATE_COMPLETE``.

    Attributes:
        status: The terminal status actually reached
        expected: The status the operation was waiting for
    """

    def __init__(self, stack_name: str, status: str, expected: str) -> None:
        self.status = status
        self.expected = expected
        super().__init__(
            stack_name,
            f'Unexpected Stack Status {status} for stack "{stack_name}" (expected {expected})',
        )


class StackWaitTimeoutError(StackError):
    """
    Raised when a stack does not reach a terminal status in time.

    Attributes:
        timeout: Seconds the caller allowed
        last_status: Last stack status observed, or None if none was seen
    """

    def __init__(self, stack_name: str, timeout: float, last_status: str | None) -> None:
        self.timeout = timeout
        self.last_status = last_status
        super().__init__(
            stack_name,
            f'Timed out after {timeout:g}s waiting for stack "{stack_name}" '
            f"(last status: {last_status or 'unknown'})",
        )
