"""Flask CLI commands for inspecting credentials and signatures."""

from __future__ import annotations

import json
import logging

import click
from flask.cli import with_appcontext

from wechat_kit.core.extensions import get_wechat
from wechat_kit.core.logger import mask_secret
from wechat_kit.services._shared.errors import WeChatError
from wechat_kit.services.credentials.dto import CredentialKind
from wechat_kit.services.signing import sign


def _configure_logging(verbose: bool) -> None:
    """Raise logging verbosity for the package when requested."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.getLogger("wechat_kit").setLevel(level)


def _credential(kind: CredentialKind) -> str:
    try:
        return get_wechat().manager.get_usable(kind)
    except WeChatError as exc:
        raise click.ClickException(f"Could not obtain {kind.value}: {exc.message}") from exc


def _parse_pairs(pairs: tuple[str, ...]) -> dict[str, str]:
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"Expected KEY=VALUE, got {pair!r}", param_hint="PARAMS")
        params[key] = value
    return params


@click.group("wechat")
@click.option("--verbose", is_flag=True, help="Enable verbose logging.")
def wechat_cli(verbose: bool) -> None:
    """WeChat credential and signing helpers."""
    _configure_logging(verbose)


@wechat_cli.command("token")
@click.option("--reveal", is_flag=True, help="Print the token unmasked.")
@with_appcontext
def token_command(reveal: bool) -> None:
    """Print a valid application access token."""
    token = _credential(CredentialKind.ACCESS_TOKEN)
    click.echo(token if reveal else mask_secret(token))


@wechat_cli.command("ticket")
@click.option("--reveal", is_flag=True, help="Print the ticket unmasked.")
@with_appcontext
def ticket_command(reveal: bool) -> None:
    """Print a valid JS-API ticket."""
    ticket = _credential(CredentialKind.JSAPI_TICKET)
    click.echo(ticket if reveal else mask_secret(ticket))


@wechat_cli.command("jssdk-config")
@click.argument("url")
@with_appcontext
def jssdk_config_command(url: str) -> None:
    """Print a signed ``wx.config`` payload for URL."""
    try:
        config = get_wechat().jssdk.get_config(url)
    except WeChatError as exc:
        raise click.ClickException(f"Could not sign JS config: {exc.message}") from exc
    click.echo(json.dumps(config.to_dict(), indent=2))


@wechat_cli.command("sign")
@click.argument("params", nargs=-1, required=True)
@click.option("--key", "secret_key", required=True, help="Secret key appended before hashing.")
def sign_command(params: tuple[str, ...], secret_key: str) -> None:
    """Sign KEY=VALUE pairs with the sorted-key MD5 algorithm."""
    try:
        click.echo(sign(_parse_pairs(params), secret_key))
    except WeChatError as exc:
        raise click.ClickException(exc.message) from exc
