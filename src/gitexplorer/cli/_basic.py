"""Basic commands: init, ls, stage."""

from __future__ import annotations

import json
import os

import click

from ..exceptions import ExplorerError
from ..explorer import Explorer
from ..node import FilePayload
from ..paths import join_path
from ..remote import LocalRemote
from ..tree import format_tree
from ._helpers import (
    main,
    _branch_option,
    _normalize_repo_path,
    _open_explorer,
    _repo_option,
    _require_repo,
    _root_option,
    _status,
)


def _ensure_folder(explorer: Explorer, folder: str) -> None:
    """Stage every missing folder along *folder* (``""`` is the root)."""
    if not folder:
        return
    parent = ""
    for name in folder.split("/"):
        path = join_path(parent, name)
        node = explorer.store.get(path)
        if node is None:
            explorer.create_folder(parent, name)
        elif not node.is_folder:
            raise click.ClickException(f"Not a folder: {path}")
        parent = path


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

@main.command()
@_repo_option
@_branch_option
@click.pass_context
def init(ctx, branch):
    """Create a new bare git repository (local backend)."""
    repo_path = _require_repo(ctx)
    if os.path.exists(repo_path):
        raise click.ClickException(f"Repository already exists: {repo_path}")
    LocalRemote.init(repo_path, branch=branch)
    _status(ctx, f"Initialized {repo_path}")


# ---------------------------------------------------------------------------
# ls
# ---------------------------------------------------------------------------

@main.command()
@_repo_option
@_root_option
@_branch_option
@click.option("--json", "as_json", is_flag=True, help="Print entries as JSON.")
@click.pass_context
def ls(ctx, branch, as_json):
    """Show the tree under --root."""
    explorer = _open_explorer(ctx, branch)
    if as_json:
        entries = [
            {"path": node.path, "type": str(node.kind), "id": node.id, "depth": depth}
            for depth, node in explorer.tree.walk()
        ]
        click.echo(json.dumps(entries, indent=2))
        return
    text = format_tree(explorer.tree)
    if text:
        click.echo(text)


# ---------------------------------------------------------------------------
# stage
# ---------------------------------------------------------------------------

@main.command()
@_repo_option
@_root_option
@_branch_option
@click.option("--mkdir", "mkdirs", multiple=True, metavar="PATH",
              help="Stage a new folder (repeatable).")
@click.option("--upload", "uploads", nargs=2, multiple=True, metavar="FOLDER FILE",
              help="Stage a local FILE for upload into FOLDER (repeatable; ':' is the root).")
@click.option("--rm", "removes", multiple=True, metavar="PATH",
              help="Stage a deletion (repeatable).")
@click.option("--undelete", "undeletes", multiple=True, metavar="PATH",
              help="Drop a deletion staged by --rm (repeatable).")
@click.option("-n", "--dry-run", is_flag=True, help="Show the plan without committing.")
@click.option("-y", "--yes", is_flag=True, help="Commit without asking for confirmation.")
@click.pass_context
def stage(ctx, branch, mkdirs, uploads, removes, undeletes, dry_run, yes):
    """Stage edits against the tree and commit them as one commit.

    Edits apply in order: folders, uploads, deletions, undeletions.
    Missing upload folders are created automatically.
    """
    explorer = _open_explorer(ctx, branch)

    try:
        for raw in mkdirs:
            path = _normalize_repo_path(raw)
            if not path:
                raise click.ClickException("Cannot create the root folder")
            parent, _, name = path.rpartition("/")
            _ensure_folder(explorer, parent)
            explorer.create_folder(parent, name)

        for raw_folder, local in uploads:
            folder = _normalize_repo_path(raw_folder)
            try:
                payload = FilePayload.from_path(local)
            except OSError as exc:
                raise click.ClickException(f"Cannot upload {local}: {exc}")
            _ensure_folder(explorer, folder)
            explorer.create_files(folder, [payload])

        for raw in removes:
            path = _normalize_repo_path(raw)
            if path not in explorer.store:
                raise click.ClickException(f"File not found: {path}")
            explorer.delete(path)

        for raw in undeletes:
            explorer.undelete(_normalize_repo_path(raw))
    except ExplorerError as exc:
        raise click.ClickException(str(exc))

    _status(ctx, format_tree(explorer.tree))
    if not explorer.has_pending_changes:
        click.echo("Nothing to commit.")
        return

    plan = explorer.prepare_commit()
    if not plan:
        click.echo("Nothing to commit (only empty folders staged).")
        return
    click.echo(plan.message)
    if dry_run:
        explorer.cancel_plan()
        return
    if not yes and not click.confirm("Commit these changes?", default=False):
        explorer.cancel_plan()
        click.echo("Cancelled.")
        return

    try:
        result = explorer.submit_plan()
    except ExplorerError as exc:
        raise click.ClickException(f"Commit failed: {exc}")
    click.echo(f"Committed {result.short_id} on {branch}")
