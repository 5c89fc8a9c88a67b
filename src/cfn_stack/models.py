"""Core models for cfn-stack."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .exceptions import ValidationError

STACK_RESOURCE_TYPE = "AWS::CloudFormation::Stack"
"""Resource type of the aggregate stack resource; its events carry the operation status."""

CAPABILITIES = ("CAPABILITY_IAM", "CAPABILITY_NAMED_IAM")

# Terminal statuses are matched as suffixes, so UPDATE_ROLLBACK_COMPLETE and
# UPDATE_ROLLBACK_FAILED are terminal as well.
TERMINAL_STATUSES = (
    "CREATE_COMPLETE",
    "UPDATE_COMPLETE",
    "DELETE_COMPLETE",
    "ROLLBACK_COMPLETE",
    "ROLLBACK_FAILED",
    "CREATE_FAILED",
    "DELETE_FAILED",
)

DEFAULT_POLL_INTERVAL = 1.5


def is_terminal(status: str | None) -> bool:
    """Return True if ``status`` ends a stack operation."""
    return status is not None and status.endswith(TERMINAL_STATUSES)


@dataclass(frozen=True)
class StackEvent:
    """
    A single CloudFormation stack event.

    Attributes:
        timestamp: When the event happened (timezone-aware)
        event_id: Unique event identifier
        resource_type: CloudFormation resource type (e.g., AWS::IAM::Role)
        logical_resource_id: Logical id of the resource in the template
        resource_status: Status the resource moved to
        status_reason: Optional free-text explanation
    """

    timestamp: datetime
    event_id: str
    resource_type: str
    logical_resource_id: str
    resource_status: str
    status_reason: str | None = None

    @property
    def is_stack_event(self) -> bool:
        """True if this event is for a resource of the stack type."""
        return self.resource_type == STACK_RESOURCE_TYPE

    def is_status_of(self, stack_name: str) -> bool:
        """
        True if this event reports the status of the stack ``stack_name`` itself.

        A nested stack is a child resource of the same type, so the logical id
        must also be the stack's own name.
        """
        return self.is_stack_event and self.logical_resource_id == stack_name

    @classmethod
    def from_api(cls, record: Mapping[str, Any]) -> "StackEvent":
        """Build from a ``describe_stack_events`` record."""
        return cls(
            timestamp=record["Timestamp"],
            event_id=record["EventId"],
            resource_type=record.get("ResourceType", ""),
            logical_resource_id=record.get("LogicalResourceId", ""),
            resource_status=record.get("ResourceStatus", ""),
            status_reason=record.get("ResourceStatusReason") or None,
        )


@dataclass
class StackOptions:
    """
    Connection and wait settings for a managed stack.

    Attributes:
        name: CloudFormation stack name
        region: AWS region (default: use boto3 defaults)
        profile: Named AWS profile (ignored when environment credentials are set)
        endpoint_url: Optional endpoint URL (for LocalStack)
        poll_interval: Seconds between event polls
        timeout: Maximum seconds to wait for a terminal status (None: wait forever)
    """

    name: str
    region: str | None = None
    profile: str | None = None
    endpoint_url: str | None = None
    poll_interval: float = DEFAULT_POLL_INTERVAL
    timeout: float | None = None

    def __post_init__(self) -> None:
        validate_wait_settings(self.poll_interval, self.timeout)


def validate_wait_settings(poll_interval: float, timeout: float | None) -> None:
    """Raise ValueError for a negative poll interval or a non-positive timeout."""
    if poll_interval < 0:
        raise ValueError("poll_interval must not be negative")
    if timeout is not None and timeout <= 0:
        raise ValueError("timeout must be positive")


def format_parameters(params: Mapping[str, Any]) -> list[dict[str, Any]]:
    """
    Convert a parameter mapping to CloudFormation format.

    A value of ``None`` keeps the previously stored value instead of clearing
    it. Every key yields exactly one entry.

    Args:
        params: Dict of parameter name to value (or None)

    Returns:
        List of CloudFormation parameter dicts
    """
    result = []
    for key, value in params.items():
        if value is None:
            result.append({"ParameterKey": key, "UsePreviousValue": True})
        else:
            result.append({"ParameterKey": key, "ParameterValue": str(value)})
    return result


def parse_parameters(items: Iterable[str]) -> dict[str, str | None]:
    """
    Parse ``KEY=VALUE`` command line items.

    A bare ``KEY`` maps to None, which keeps the previous value on update.

    Raises:
        ValidationError: If an item has an empty key
    """
    params: dict[str, str | None] = {}
    for item in items:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not key:
            raise ValidationError("parameter", item, "Expected KEY=VALUE or KEY")
        params[key] = value if sep else None
    return params
