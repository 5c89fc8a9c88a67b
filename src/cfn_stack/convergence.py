"""Event tracking state machine for the stack wait loop.

``Convergence`` holds everything one wait loop needs to remember between
polls: the start of the observation window, the ids of events already shown,
and the latest status reported for the stack itself. It does no I/O, so the
loop in ``Stack.wait_for`` only has to feed it event pages.
"""

from collections.abc import Iterable
from datetime import datetime
from enum import Enum

from .models import StackEvent, is_terminal


class ConvergenceState(Enum):
    """Where a wait loop stands."""

    POLLING = "polling"
    CONVERGED = "converged"
    FAILED = "failed"


class Convergence:
    """
    Tracks stack events for a single wait loop.

    Args:
        expected: Terminal status that counts as success
        since: Events older than this are ignored
        stack_name: Name of the stack whose own events carry the status
    """

    def __init__(self, expected: str, since: datetime, stack_name: str) -> None:
        self.expected = expected
        self.since = since
        self.stack_name = stack_name
        self.status: str | None = None
        self._shown: set[str] = set()

    @property
    def state(self) -> ConvergenceState:
        if not is_terminal(self.status):
            return ConvergenceState.POLLING
        if self.status == self.expected:
            return ConvergenceState.CONVERGED
        return ConvergenceState.FAILED

    @property
    def done(self) -> bool:
        return self.state is not ConvergenceState.POLLING

    def observe(self, events: Iterable[StackEvent]) -> list[StackEvent]:
        """
        Take one page of events (newest first) and return the new ones.

        Returned events are oldest first, each appears at most once over the
        lifetime of this object, and none predates ``since``. Events for the
        stack resource itself update ``status``; child resources, nested
        stacks included, never do.
        """
        fresh = [e for e in events if e.timestamp >= self.since and e.event_id not in self._shown]
        fresh.reverse()
        for event in fresh:
            self._shown.add(event.event_id)
            if event.is_status_of(self.stack_name):
                self.status = event.resource_status
        return fresh
