"""CloudFormation stack lifecycle: create, update, wait, read outputs, delete."""

import asyncio
import logging
import time
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import aioboto3
from botocore.exceptions import ClientError

from .classify import DEFAULT_CLASSIFIER, ErrorClassifier, ErrorKind
from .convergence import Convergence, ConvergenceState
from .exceptions import StackNotFoundError, StackStatusError, StackWaitTimeoutError
from .models import (
    CAPABILITIES,
    DEFAULT_POLL_INTERVAL,
    StackEvent,
    StackOptions,
    format_parameters,
    validate_wait_settings,
)
from .naming import validate_stack_name
from .progress import Banner, ConsoleSink, EventLine, ProgressSink, Separator
from .session import create_session

logger = logging.getLogger(__name__)


class Stack:
    """
    Manages the lifecycle of one named CloudFormation stack.

    Every long-running operation submits a change and then blocks in
    ``wait_for`` until the stack reaches a terminal status, reporting each
    stack event to the progress sink exactly once, oldest first.

    One operation at a time: a ``Stack`` must not be used concurrently.
    """

    def __init__(
        self,
        name: str,
        region: str | None = None,
        profile: str | None = None,
        endpoint_url: str | None = None,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float | None = None,
        sink: ProgressSink | None = None,
        classifier: ErrorClassifier | None = None,
    ) -> None:
        """
        Initialize stack controller.

        Args:
            name: CloudFormation stack name
            region: AWS region (default: use boto3 defaults)
            profile: Named AWS profile
            endpoint_url: Optional endpoint URL (for LocalStack)
            poll_interval: Seconds between event polls
            timeout: Default maximum wait in seconds (None: wait forever)
            sink: Receives progress records (default: console)
            classifier: Maps gateway errors to recoverable conditions

        Raises:
            ValidationError: If the stack name is invalid
            ValueError: If poll_interval is negative or timeout is not positive
        """
        validate_stack_name(name)
        validate_wait_settings(poll_interval, timeout)
        self._stack_name = name
        self.region = region
        self.profile = profile
        self.endpoint_url = endpoint_url
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.sink: ProgressSink = sink if sink is not None else ConsoleSink()
        self.classifier = classifier or DEFAULT_CLASSIFIER
        self._session: aioboto3.Session | None = None
        self._client: Any = None

    @classmethod
    def from_options(cls, options: StackOptions, **kwargs: Any) -> "Stack":
        """Build a controller from ``StackOptions``."""
        return cls(
            options.name,
            options.region,
            options.profile,
            options.endpoint_url,
            poll_interval=options.poll_interval,
            timeout=options.timeout,
            **kwargs,
        )

    @property
    def stack_name(self) -> str:
        return self._stack_name

    async def _get_client(self) -> Any:
        """Get or create CloudFormation client."""
        if self._client is not None:
            return self._client

        if self._session is None:
            self._session = create_session(self.profile)

        kwargs: dict[str, Any] = {}
        if self.region:
            kwargs["region_name"] = self.region
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url

        session = self._session
        self._client = await session.client("cloudformation", **kwargs).__aenter__()
        return self._client

    def _announce(self, timestamp: datetime, action: str) -> None:
        self.sink.emit(Banner(timestamp, action, self.stack_name))

    async def create_or_update(
        self,
        template: str,
        params: Mapping[str, Any],
        timeout: float | None = None,
    ) -> str | None:
        """
        Create the stack, or update it if it already exists.

        Args:
            template: Template body
            params: Parameter values; ``None`` keeps the previous value
            timeout: Maximum wait in seconds (default: the controller's)

        Returns:
            The terminal status reached, or None if there was nothing to update

        Raises:
            StackStatusError: If the stack ends in another terminal status
                (e.g., a rollback)
            StackWaitTimeoutError: If the wait exceeds ``timeout``
            ClientError: Any other CloudFormation error, unchanged
        """
        client = await self._get_client()
        request: dict[str, Any] = {
            "StackName": self.stack_name,
            "Capabilities": list(CAPABILITIES),
            "TemplateBody": template,
            "Parameters": format_parameters(params),
        }
        now = datetime.now(UTC)

        try:
            await client.update_stack(**request)
        except ClientError as e:
            kind = self.classifier.classify(e)
            if kind is ErrorKind.NOT_FOUND:
                logger.info("Stack %s does not exist, creating it", self.stack_name)
                await client.create_stack(OnFailure="DELETE", **request)
                self._announce(now, "Creating new stack")
                return await self.wait_for("CREATE_COMPLETE", now, timeout)
            if kind is ErrorKind.NO_CHANGES:
                logger.info("Stack %s is up to date", self.stack_name)
                self._announce(now, "No updates needed for stack")
                return None
            raise

        logger.info("Update submitted for stack %s", self.stack_name)
        self._announce(now, "Updating stack")
        return await self.wait_for("UPDATE_COMPLETE", now, timeout)

    async def wait_for(
        self,
        expected: str,
        since: datetime,
        timeout: float | None = None,
    ) -> str:
        """
        Block until the stack reaches a terminal status.

        Events at or after ``since`` are emitted to the sink in chronological
        order, each exactly once. Only events for the stack resource itself
        decide when the wait ends.

        Args:
            expected: Terminal status that counts as success
            since: Start of the observation window (timezone-aware)
            timeout: Maximum wait in seconds (default: the controller's)

        Returns:
            The terminal status, equal to ``expected``

        Raises:
            StackNotFoundError: If the stack id cannot be resolved
            StackStatusError: If a different terminal status is reached
            StackWaitTimeoutError: If ``timeout`` elapses first
        """
        if timeout is None:
            timeout = self.timeout
        client = await self._get_client()
        # Resolved per wait: a delete and recreate assigns a new id
        stack_id = await self._get_stack_id()
        convergence = Convergence(expected, since, self.stack_name)
        started = time.monotonic()

        while not convergence.done:
            if timeout is not None and time.monotonic() - started >= timeout:
                self.sink.emit(Separator())
                raise StackWaitTimeoutError(self.stack_name, timeout, convergence.status)

            await asyncio.sleep(self.poll_interval)
            response = await client.describe_stack_events(StackName=stack_id)
            events = [StackEvent.from_api(e) for e in response.get("StackEvents", [])]
            fresh = convergence.observe(events)
            logger.debug(
                "Polled %s: %d events, %d new, status %s",
                self.stack_name,
                len(events),
                len(fresh),
                convergence.status,
            )
            for event in fresh:
                self.sink.emit(EventLine(event))

        self.sink.emit(Separator())

        status = convergence.status or ""
        if convergence.state is ConvergenceState.FAILED:
            logger.info("Stack %s ended in %s, expected %s", self.stack_name, status, expected)
            raise StackStatusError(self.stack_name, status, expected)

        logger.info("Stack %s reached %s", self.stack_name, status)
        return status

    async def _describe(self) -> list[dict[str, Any]]:
        """Describe the stack; a missing stack matches nothing."""
        client = await self._get_client()
        try:
            response = await client.describe_stacks(StackName=self.stack_name)
        except ClientError as e:
            if self.classifier.does_not_exist(e):
                return []
            raise
        return list(response.get("Stacks", []))

    async def exists(self) -> bool:
        """Check whether exactly one stack matches the name."""
        return len(await self._describe()) == 1

    async def _get_stack_id(self) -> str:
        """Resolve the stack's current StackId."""
        stacks = await self._describe()
        if len(stacks) != 1:
            raise StackNotFoundError(self.stack_name, len(stacks))
        return str(stacks[0]["StackId"])

    async def get_outputs(self, strict: bool = False) -> dict[str, str]:
        """
        Read the stack's outputs.

        Outputs lacking a key or a value are skipped. When the lookup does not
        match exactly one stack an empty dict is returned, unless ``strict``
        is set.

        Args:
            strict: Raise instead of returning {} for an ambiguous lookup

        Returns:
            Dict of output key to output value

        Raises:
            StackNotFoundError: If ``strict`` and not exactly one stack matched
        """
        stacks = await self._describe()
        if len(stacks) != 1:
            if strict:
                raise StackNotFoundError(self.stack_name, len(stacks))
            return {}

        outputs: dict[str, str] = {}
        for output in stacks[0].get("Outputs") or []:
            key = output.get("OutputKey")
            value = output.get("OutputValue")
            if key and value:
                outputs[key] = value
        return outputs

    async def delete(self, timeout: float | None = None) -> str:
        """
        Delete the stack and wait for ``DELETE_COMPLETE``.

        Errors from ``delete_stack`` propagate unchanged.

        Args:
            timeout: Maximum wait in seconds (default: the controller's)

        Returns:
            The terminal status reached

        Raises:
            StackNotFoundError: If the stack is already gone when the wait starts
        """
        client = await self._get_client()
        now = datetime.now(UTC)
        await client.delete_stack(StackName=self.stack_name)
        logger.info("Delete submitted for stack %s", self.stack_name)
        self._announce(now, "Deleting stack")
        return await self.wait_for("DELETE_COMPLETE", now, timeout)

    async def close(self) -> None:
        """Close the underlying session and client."""
        if self._client is not None:
            try:
                await self._client.__aexit__(None, None, None)
            finally:
                self._client = None
        self._session = None

    async def __aenter__(self) -> "Stack":
        """Enter async context manager."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit async context manager."""
        await self.close()
