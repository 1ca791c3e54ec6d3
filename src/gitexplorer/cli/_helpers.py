"""Shared helpers, option decorators, and the main CLI group."""

from __future__ import annotations

import logging

import click

from ..auth import TokenStore
from ..config import DEFAULT_BASE_URL, DEFAULT_BRANCH, ExplorerConfig
from ..exceptions import ExplorerError
from ..explorer import Explorer
from ..paths import is_root_path, normalize_path
from ..remote import GitLabRemote, LocalRemote


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _strip_colon(raw: str) -> str:
    """Strip an optional leading ':' from a repo-side path."""
    return raw[1:] if raw.startswith(":") else raw


def _normalize_repo_path(path: str) -> str:
    """Normalize a root-relative path; the root itself becomes ``""``."""
    path = _strip_colon(path)
    if is_root_path(path):
        return ""
    try:
        return normalize_path(path)
    except ValueError as exc:
        raise click.ClickException(f"Invalid repo path: {exc}")


def _status(ctx, msg):
    """Emit a status message to stderr when verbose mode (-v) is on."""
    if ctx.obj.get("verbose"):
        click.echo(msg, err=True)


def _store_obj(key):
    """Build a click callback that stores an option value in ``ctx.obj``."""
    def callback(ctx, param, value):
        ctx.ensure_object(dict)
        if value is not None:
            ctx.obj[key] = value
        return value
    return callback


def _repo_option(f):
    """Shared --repo/-r option decorator for all commands."""
    return click.option(
        "--repo", "-r", envvar="GITEXPLORER_REPO",
        help="Bare repository path or GitLab project (or set GITEXPLORER_REPO).",
        expose_value=False, callback=_store_obj("repo_path"), is_eager=True,
    )(f)


def _root_option(f):
    """Shared --root option: the subtree the explorer works in."""
    return click.option(
        "--root", envvar="GITEXPLORER_ROOT",
        help="Subtree of the repository to explore (or set GITEXPLORER_ROOT).",
        expose_value=False, callback=_store_obj("root_path"), is_eager=True,
    )(f)


def _branch_option(f):
    return click.option(
        "--branch", "-b", envvar="GITEXPLORER_BRANCH", default=DEFAULT_BRANCH,
        show_default=True, help="Branch to list and commit to.",
    )(f)


def _require_repo(ctx) -> str:
    """Get the repo path from context, raising a clear error if missing."""
    repo = ctx.obj.get("repo_path")
    if not repo:
        raise click.ClickException(
            "No repository specified. Use --repo or set GITEXPLORER_REPO."
        )
    return repo


def _token_store(ctx) -> TokenStore:
    return TokenStore(ctx.obj.get("token_file"))


def _make_remote(ctx, branch: str):
    """Build the remote selected by --backend."""
    if ctx.obj.get("backend", "local") == "local":
        return LocalRemote(branch=branch)
    token = ctx.obj.get("token") or _token_store(ctx).load()
    if not token:
        raise click.ClickException("Not logged in. Run 'gitexplorer login' first.")
    return GitLabRemote(token, ctx.obj.get("base_url", DEFAULT_BASE_URL), branch=branch)


def _open_explorer(ctx, branch: str) -> Explorer:
    """Create an explorer for --repo/--root and fetch the subtree."""
    config = ExplorerConfig(
        repository_path=_require_repo(ctx),
        root_path=ctx.obj.get("root_path", ""),
        branch=branch,
        base_url=ctx.obj.get("base_url", DEFAULT_BASE_URL),
    )
    explorer = Explorer(config, _make_remote(ctx, branch))
    try:
        explorer.fetch()
    except ExplorerError as exc:
        raise click.ClickException(str(exc))
    _status(ctx, f"Fetched {len(explorer.store)} entries from {config.repository_path}")
    return explorer


# ---------------------------------------------------------------------------
# Main group
# ---------------------------------------------------------------------------

@click.group()
@_repo_option
@_root_option
@click.option("--backend", type=click.Choice(["local", "gitlab"]), default="local",
              envvar="GITEXPLORER_BACKEND", show_default=True,
              help="Where the repository lives.")
@click.option("--url", "base_url", envvar="GITEXPLORER_URL", default=DEFAULT_BASE_URL,
              show_default=True, help="GitLab server URL (gitlab backend).")
@click.option("--token", envvar="GITEXPLORER_TOKEN", default=None,
              help="GitLab access token; overrides the stored login.")
@click.option("--token-file", type=click.Path(dir_okay=False), envvar="GITEXPLORER_TOKEN_FILE",
              default=None, help="Where 'login' stores the token.")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output on stderr.")
@click.pass_context
def main(ctx, backend, base_url, token, token_file, verbose):
    """gitexplorer: stage edits to a repository subtree and commit them at once.

    \b
    Quick start:
      gitexplorer init -r data.git
      gitexplorer -r data.git stage --upload : notes.txt
      gitexplorer -r data.git ls

    \b
    Repo paths are relative to --root and may be prefixed with ':'
    (a bare ':' is the root itself).
    Set GITEXPLORER_REPO and GITEXPLORER_ROOT to avoid repeating them.
    """
    ctx.ensure_object(dict)
    ctx.obj["backend"] = backend
    ctx.obj["base_url"] = base_url
    ctx.obj["token"] = token
    ctx.obj["token_file"] = token_file
    ctx.obj["verbose"] = verbose
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
