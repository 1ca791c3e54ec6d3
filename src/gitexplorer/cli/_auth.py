"""Authentication commands: login, logout."""

from __future__ import annotations

import click

from ..auth import authorize_url, parse_redirect_fragment
from ._helpers import main, _status, _token_store


@main.command()
@click.option("--app-id", envvar="GITEXPLORER_APP_ID", help="OAuth application id.")
@click.option("--redirect-url", envvar="GITEXPLORER_REDIRECT_URL", help="OAuth redirect target.")
@click.option("--fragment", default=None,
              help="Redirect URL or '#access_token=...' fragment to store.")
@click.option("--access-token", default=None, help="Store this token directly (no expiry).")
@click.pass_context
def login(ctx, app_id, redirect_url, fragment, access_token):
    """Log in to GitLab.

    Without --fragment or --access-token, print the URL to open in a
    browser.  After authorizing, pass the redirect URL back with
    --fragment to store the token.
    """
    store = _token_store(ctx)
    if fragment:
        try:
            token, expires_at = parse_redirect_fragment(fragment)
        except ValueError as exc:
            raise click.ClickException(str(exc))
        store.save(token, expires_at)
        _status(ctx, f"Saved token to {store.path}")
        click.echo("Logged in.")
        return
    if access_token:
        store.save(access_token)
        _status(ctx, f"Saved token to {store.path}")
        click.echo("Logged in.")
        return
    if not app_id or not redirect_url:
        raise click.ClickException("--app-id and --redirect-url are required to log in.")
    click.echo(authorize_url(app_id, redirect_url, ctx.obj.get("base_url")))


@main.command()
@click.pass_context
def logout(ctx):
    """Forget the stored GitLab token."""
    if _token_store(ctx).clear():
        click.echo("Logged out.")
    else:
        click.echo("Not logged in.")
