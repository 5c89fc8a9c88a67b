"""Classification of CloudFormation error responses.

CloudFormation has no structured "stack not found" or "nothing to update"
error; both arrive as a ``ValidationError`` whose message has to be inspected.
All of that string matching lives here.
"""

from dataclasses import dataclass
from enum import Enum

from botocore.exceptions import ClientError


class ErrorKind(Enum):
    """What a failed stack submission means for the caller."""

    NOT_FOUND = "not_found"
    NO_CHANGES = "no_changes"
    OTHER = "other"


@dataclass(frozen=True)
class ErrorClassifier:
    """
    Maps gateway errors to an ``ErrorKind``.

    The markers are part of the CloudFormation API contract rather than this
    library's; override them if the service wording changes.

    Attributes:
        code: Error code shared by both recoverable conditions
        not_found_marker: Message substring for a missing stack
        no_changes_marker: Message substring for an up-to-date stack
    """

    code: str = "ValidationError"
    not_found_marker: str = "does not exist"
    no_changes_marker: str = "No updates are to be performed"

    def classify(self, err: BaseException) -> ErrorKind:
        if not isinstance(err, ClientError):
            return ErrorKind.OTHER
        error = err.response.get("Error", {})
        if error.get("Code") != self.code:
            return ErrorKind.OTHER
        message = error.get("Message", "")
        if self.not_found_marker in message:
            return ErrorKind.NOT_FOUND
        if self.no_changes_marker in message:
            return ErrorKind.NO_CHANGES
        return ErrorKind.OTHER

    def does_not_exist(self, err: BaseException) -> bool:
        return self.classify(err) is ErrorKind.NOT_FOUND

    def is_up_to_date(self, err: BaseException) -> bool:
        return self.classify(err) is ErrorKind.NO_CHANGES


DEFAULT_CLASSIFIER = ErrorClassifier()


def does_not_exist(err: BaseException) -> bool:
    """True if ``err`` says the stack does not exist."""
    return DEFAULT_CLASSIFIER.does_not_exist(err)


def is_up_to_date(err: BaseException) -> bool:
    """True if ``err`` says there is nothing to update."""
    return DEFAULT_CLASSIFIER.is_up_to_date(err)
