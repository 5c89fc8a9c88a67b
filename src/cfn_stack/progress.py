"""Progress reporting for stack operations.

Stack operations emit structured records to a ``ProgressSink``. The default
``ConsoleSink`` renders them in the line format deployment tooling expects::

    12:00:01 Updating stack "my-stack"
    ========
    12:00:03 UPDATE_IN_PROGRESS AWS::IAM::Role "SomeRole"
    12:00:09 UPDATE_COMPLETE AWS::CloudFormation::Stack "my-stack"
    ========
"""

import textwrap
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol, TextIO

import click

from .models import StackEvent

SEPARATOR = "=" * 8
REASON_WIDTH = 90
REASON_INDENT = " " * 9


@dataclass(frozen=True)
class Banner:
    """Announces the action about to be waited on."""

    timestamp: datetime
    action: str
    stack_name: str


@dataclass(frozen=True)
class EventLine:
    """A stack event shown for the first time."""

    event: StackEvent


@dataclass(frozen=True)
class Separator:
    """Closes a wait loop."""


ProgressRecord = Banner | EventLine | Separator


class ProgressSink(Protocol):
    """Receives progress records from a stack operation."""

    def emit(self, record: ProgressRecord) -> None: ...


def format_time(value: datetime) -> str:
    """Format as UTC ``HH:MM:SS``."""
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.strftime("%H:%M:%S")


def format_reason(reason: str | None) -> str:
    """Wrap a status reason into an indented block, or '' if there is none."""
    if not reason:
        return ""
    return textwrap.fill(
        reason,
        width=REASON_WIDTH + len(REASON_INDENT),
        initial_indent=REASON_INDENT,
        subsequent_indent=REASON_INDENT,
    )


def format_banner(banner: Banner) -> str:
    return f'\n{format_time(banner.timestamp)} {banner.action} "{banner.stack_name}"\n{SEPARATOR}'


def format_event(event: StackEvent) -> str:
    line = (
        f"{format_time(event.timestamp)} {event.resource_status} "
        f'{event.resource_type} "{event.logical_resource_id}"'
    )
    reason = format_reason(event.status_reason)
    if reason:
        line = f"{line}\n{reason}"
    return line


def format_record(record: ProgressRecord) -> str:
    """Render any progress record as console text."""
    if isinstance(record, Banner):
        return format_banner(record)
    if isinstance(record, EventLine):
        return format_event(record.event)
    return SEPARATOR


class ConsoleSink:
    """Writes progress records to the console with ``click.echo``."""

    def __init__(self, file: TextIO | None = None) -> None:
        self.file = file

    def emit(self, record: ProgressRecord) -> None:
        click.echo(format_record(record), file=self.file)
