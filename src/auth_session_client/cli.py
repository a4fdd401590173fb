"""Command-line front end for the auth client."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click
import structlog

from . import authapi, config

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _credentials(username: str, password: str, yubikey: str | None) -> dict[str, str]:
    creds = {"username": username, "password": password}
    if yubikey:
        creds["yubikey"] = yubikey
    return creds


def _run(
    settings: config.ClientConfig,
    operation: Callable[[authapi.AuthClient, authapi.Context], Awaitable[T]],
) -> T:
    """Build a client from settings and run one operation against it."""

    async def main() -> T:
        if settings.deadline is not None:
            ctx = authapi.Context.with_timeout(settings.deadline)
        else:
            ctx = authapi.Context.background()
        async with authapi.AuthClient(settings.endpoint, timeout=settings.timeout) as client:
            logger.info("Created auth client", endpoint=str(client.endpoint))
            return await operation(client, ctx)

    try:
        return asyncio.run(main())
    except authapi.AuthClientError as exc:
        msg = f"{type(exc).__name__}: {exc}"
        raise click.ClickException(msg) from exc


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help=f"JSON config file (default: ${config.CONFIG_ENV_VAR}).",
)
@click.option("--endpoint", help="URL for an auth server.")
@click.option("--timeout", type=float, help="HTTP timeout in seconds.")
@click.option("--deadline", type=float, help="Overall deadline in seconds.")
@click.option("--log-level", help="Logging level.")
@click.pass_context
def cli(ctx, config_path, endpoint, timeout, deadline, log_level):
    """Create and inspect sessions on an auth server."""
    try:
        settings = config.resolve_config(
            config_path,
            endpoint=endpoint,
            timeout=timeout,
            deadline=deadline,
            log_level=log_level,
        )
    except (OSError, ValueError) as exc:
        msg = f"Invalid configuration: {exc}"
        raise click.ClickException(msg) from exc
    config.configure_logging(settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command("read-session")
@click.option("--token", required=True, help="Session token to read.")
@click.pass_context
def read_session(ctx, token):
    """Print the data of an existing session as JSON."""
    session = _run(
        ctx.obj["settings"],
        lambda client, c: client.read_session(token, ctx=c),
    )
    click.echo(session.model_dump_json())


@cli.command("create-session")
@click.option("--username", required=True)
@click.option("--password", required=True)
@click.option("--yubikey", help="Yubikey OTP, if the account needs one.")
@click.pass_context
def create_session(ctx, username, password, yubikey):
    """Create a session and print its data as JSON."""
    creds = _credentials(username, password, yubikey)
    session = _run(
        ctx.obj["settings"],
        lambda client, c: client.create_session(creds, ctx=c),
    )
    click.echo(session.model_dump_json())


@cli.command("create-session-token")
@click.option("--username", required=True)
@click.option("--password", required=True)
@click.option("--yubikey", help="Yubikey OTP, if the account needs one.")
@click.pass_context
def create_session_token(ctx, username, password, yubikey):
    """Create a session and print only its token."""
    creds = _credentials(username, password, yubikey)
    token = _run(
        ctx.obj["settings"],
        lambda client, c: client.create_session_token(creds, ctx=c),
    )
    click.echo(token)


@cli.command("impersonate")
@click.option("--token", required=True, help="Token of the acting session.")
@click.option("--username", required=True, help="User to impersonate.")
@click.pass_context
def impersonate(ctx, token, username):
    """Create a session for another user and print its token."""
    new_token = _run(
        ctx.obj["settings"],
        lambda client, c: client.create_impersonated_session_token(token, username, ctx=c),
    )
    click.echo(new_token)


def main() -> None:
    cli()
