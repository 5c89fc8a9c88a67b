"""Command-line interface for cfn-stack."""

import asyncio
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from .exceptions import ValidationError
from .models import DEFAULT_POLL_INTERVAL, StackOptions, parse_parameters
from .naming import STACK_ENV_VAR, resolve_stack_name
from .stack import Stack


def _configure_logging(verbose: int) -> None:
    if verbose <= 0:
        return
    logging.basicConfig(
        level=logging.DEBUG if verbose > 1 else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _stack_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the options shared by every stack command."""
    options = [
        click.option(
            "--stack-name",
            envvar=STACK_ENV_VAR,
            help=f"CloudFormation stack name (env: {STACK_ENV_VAR})",
        ),
        click.option(
            "--region",
            envvar="AWS_REGION",
            help="AWS region (default: use boto3 defaults)",
        ),
        click.option(
            "--profile",
            envvar="AWS_PROFILE",
            help="AWS profile (ignored when environment credentials are set)",
        ),
        click.option(
            "--endpoint-url",
            envvar="AWS_ENDPOINT_URL",
            help=(
                "AWS endpoint URL "
                "(e.g., http://localhost:4566 for LocalStack, or other AWS-compatible services)"
            ),
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _timeout_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--timeout",
        type=click.FloatRange(min=0, min_open=True),
        default=None,
        help="Maximum seconds to wait for the stack (default: wait indefinitely)",
    )(func)


def _options(
    stack_name: str | None,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    timeout: float | None = None,
) -> StackOptions:
    try:
        name = resolve_stack_name(stack_name)
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="--stack-name") from e
    return StackOptions(
        name=name,
        region=region,
        profile=profile,
        endpoint_url=endpoint_url,
        poll_interval=DEFAULT_POLL_INTERVAL,
        timeout=timeout,
    )


@click.group()
@click.version_option(package_name="cfn-stack")
@click.option("-v", "--verbose", count=True, help="Log to stderr (-vv for debug output)")
def cli(verbose: int) -> None:
    """Manage a CloudFormation stack and stream its events."""
    _configure_logging(verbose)


@cli.command()
@_stack_options
@click.option(
    "--template",
    "-t",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="CloudFormation template file",
)
@click.option(
    "--param",
    "-p",
    "params",
    multiple=True,
    help="Stack parameter as KEY=VALUE, or KEY alone to keep its previous value",
)
@_timeout_option
def deploy(
    stack_name: str | None,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    template: Path,
    params: tuple[str, ...],
    timeout: float | None,
) -> None:
    """Create the stack, or update it if it exists, and wait until it settles."""
    options = _options(stack_name, region, profile, endpoint_url, timeout)
    try:
        parameters = parse_parameters(params)
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="--param") from e
    template_body = template.read_text()

    async def _deploy() -> None:
        async with Stack.from_options(options) as stack:
            try:
                await stack.create_or_update(template_body, parameters)
                outputs = await stack.get_outputs()
            except Exception as e:
                click.echo(f"✗ Deployment failed: {e}", err=True)
                sys.exit(1)

            for key, value in sorted(outputs.items()):
                click.echo(f"{key}: {value}")

    asyncio.run(_deploy())


@cli.command()
@_stack_options
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Fail unless exactly one stack matches the name",
)
def outputs(
    stack_name: str | None,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    output_format: str,
    strict: bool,
) -> None:
    """Print the stack's output values."""
    options = _options(stack_name, region, profile, endpoint_url)

    async def _outputs() -> None:
        async with Stack.from_options(options) as stack:
            try:
                values = await stack.get_outputs(strict=strict)
            except Exception as e:
                click.echo(f"✗ Failed to read outputs: {e}", err=True)
                sys.exit(1)

            if output_format == "json":
                click.echo(json.dumps(values, indent=2, sort_keys=True))
            else:
                for key, value in sorted(values.items()):
                    click.echo(f"{key}: {value}")

    asyncio.run(_outputs())


@cli.command()
@_stack_options
@_timeout_option
@click.option(
    "--yes",
    "-y",
    is_flag=True,
    help="Skip confirmation prompt",
)
def delete(
    stack_name: str | None,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    timeout: float | None,
    yes: bool,
) -> None:
    """Delete the stack and wait until it is gone."""
    options = _options(stack_name, region, profile, endpoint_url, timeout)

    if not yes:
        click.confirm(
            f"Are you sure you want to delete stack '{options.name}'?",
            abort=True,
        )

    async def _delete() -> None:
        async with Stack.from_options(options) as stack:
            try:
                await stack.delete()
            except Exception as e:
                click.echo(f"✗ Deletion failed: {e}", err=True)
                sys.exit(1)

            click.echo(f"✓ Stack '{options.name}' deleted successfully")

    asyncio.run(_delete())


if __name__ == "__main__":
    cli()
