"""Stack name validation and resolution.

CloudFormation stack names must satisfy:
- Alphanumeric characters and hyphens only
- Must start with a letter
- Maximum 128 characters
"""

import os
import re

from .exceptions import ValidationError

STACK_ENV_VAR = "CFN_STACK_NAME"
"""Environment variable consulted when no stack name is given explicitly."""

MAX_STACK_NAME_LENGTH = 128

NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9-]*$")


def validate_stack_name(name: str) -> None:
    """
    Validate a CloudFormation stack name.

    Args:
        name: The user-provided stack name

    Raises:
        ValidationError: If the name is not acceptable to CloudFormation
    """
    if not name:
        raise ValidationError("stack name", name, "Name cannot be empty")

    # Common mistakes get a more helpful message than the pattern check
    if "_" in name:
        raise ValidationError(
            "stack name",
            name,
            "Contains underscore. Use hyphens instead (e.g., 'my-stack' not 'my_stack')",
        )
    if " " in name:
        raise ValidationError(
            "stack name",
            name,
            "Contains spaces. Use hyphens instead (e.g., 'my-stack' not 'my stack')",
        )

    if not NAME_PATTERN.match(name):
        raise ValidationError(
            "stack name",
            name,
            "Must start with a letter and contain only alphanumeric characters and hyphens.",
        )

    if len(name) > MAX_STACK_NAME_LENGTH:
        raise ValidationError(
            "stack name",
            name,
            f"Too long. Name exceeds {MAX_STACK_NAME_LENGTH} character limit.",
        )


def resolve_stack_name(stack: str | None) -> str:
    """Resolve stack name from explicit arg or env var.

    Resolution order: ``stack`` arg → ``CFN_STACK_NAME`` env var.

    Args:
        stack: Explicit stack name, or ``None`` to use the environment.

    Returns:
        Validated stack name.

    Raises:
        ValidationError: If no name is available or it is invalid
    """
    name = stack or os.environ.get(STACK_ENV_VAR) or ""
    validate_stack_name(name)
    return name
