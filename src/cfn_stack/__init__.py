"""
cfn-stack: create, update and delete a CloudFormation stack while streaming its events.

Example:
    from cfn_stack import Stack

    async with Stack("my-stack", region="eu-west-1") as stack:
        await stack.create_or_update(template, {"Env": "prod", "Secret": None})
        outputs = await stack.get_outputs()
        await stack.delete()

A parameter value of ``None`` keeps the value stored with the stack.
"""

from importlib.metadata import PackageNotFoundError, version

from .classify import ErrorClassifier, ErrorKind, does_not_exist, is_up_to_date
from .convergence import Convergence, ConvergenceState
from .exceptions import (
    CfnStackError,
    StackError,
    StackNotFoundError,
    StackStatusError,
    StackWaitTimeoutError,
    ValidationError,
)
from .models import StackEvent, StackOptions, format_parameters, parse_parameters
from .progress import Banner, ConsoleSink, EventLine, ProgressSink, Separator
from .stack import Stack

try:
    __version__ = version("cfn-stack")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

__all__ = [
    # Version
    "__version__",
    # Main classes
    "Stack",
    "StackOptions",
    "StackEvent",
    "Convergence",
    "ConvergenceState",
    # Progress
    "ProgressSink",
    "ConsoleSink",
    "Banner",
    "EventLine",
    "Separator",
    # Error classification
    "ErrorClassifier",
    "ErrorKind",
    "does_not_exist",
    "is_up_to_date",
    # Helpers
    "format_parameters",
    "parse_parameters",
    # Exceptions
    "CfnStackError",
    "ValidationError",
    "StackError",
    "StackNotFoundError",
    "StackStatusError",
    "StackWaitTimeoutError",
]
