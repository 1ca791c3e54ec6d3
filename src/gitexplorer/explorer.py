"""Explorer: staging operations over a remote repository subtree.

Usage (Python API)::

    from gitexplorer import Explorer, ExplorerConfig, FilePayload, LocalRemote

    config = ExplorerConfig(app_id="app", redirect_url="http://localhost/",
                            repository_path="data.git", root_path="docs")
    explorer = Explorer.open(config, LocalRemote())

    explorer.create_folder("", "guides")
    explorer.create_files("guides", [FilePayload("intro.md", b"# Intro\\n")])
    explorer.delete("old.md")

    plan = explorer.prepare_commit()
    print(plan.message)
    explorer.submit_plan()

Every staging operation mutates the flat store and rebuilds the tree, so
``explorer.tree`` and ``explorer.has_pending_changes`` are always current.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .config import ExplorerConfig
from .exceptions import EmptyPlanError
from .node import FilePayload, Node, NodeKind
from .paths import join_path
from .plan import CommitPlan, build_plan
from .remote._types import CommitResult, Remote
from .store import FlatStore
from .throttle import Throttle
from .tree import TreeView, build_tree

logger = logging.getLogger(__name__)

HOVER_WAIT = 0.01


class Explorer:
    """Stages edits against a remote subtree and submits them as one commit."""

    def __init__(self, config: ExplorerConfig, remote: Remote | None = None, *,
                 hover_wait: float = HOVER_WAIT, clock=None):
        self.config = config
        self.remote = remote
        self.store = FlatStore()
        self.tree = TreeView()
        self.pending_plan: CommitPlan | None = None
        throttle_kwargs = {"clock": clock} if clock is not None else {}
        self._hover = Throttle(self.set_hover_placeholder, hover_wait, **throttle_kwargs)

    def __repr__(self) -> str:
        return (f"Explorer({self.config.repository_path!r}, root={self.config.root_path!r}, "
                f"pending={self.has_pending_changes})")

    @classmethod
    def open(cls, config: ExplorerConfig, remote: Remote | None = None, **kwargs) -> Explorer:
        """Create an explorer and run one ingest cycle when it can.

        The fetch only happens when all four host values are configured
        and a remote (i.e. an authorized client) is available.
        """
        explorer = cls(config, remote, **kwargs)
        if config.is_complete and remote is not None:
            explorer.fetch()
        return explorer

    @property
    def has_pending_changes(self) -> bool:
        return self.tree.has_pending_changes

    @property
    def root_path(self) -> str:
        return self.config.root_path

    def _rebuild(self) -> None:
        self.tree = build_tree(self.store)

    # -- remote state ----------------------------------------------------

    def authorize(self, remote: Remote) -> None:
        """Attach an authorized remote and fetch the subtree."""
        self.remote = remote
        self.fetch()

    def fetch(self) -> None:
        """Replace the store with the remote listing of the root subtree.

        A no-op when no repository path is configured or no remote is
        attached yet.  Remote failures propagate and leave the store as it
        was.
        """
        if not self.config.repository_path:
            logger.debug("No repository path configured; skipping fetch")
            return
        if self.remote is None:
            logger.debug("No authorized remote yet; skipping fetch")
            return
        logger.info("Fetching %s:%s", self.config.repository_path, self.root_path or "/")
        entries = self.remote.list_tree(
            self.config.repository_path, recursive=True, path=self.root_path,
        )
        self.ingest(entries)

    def ingest(self, entries: Iterable) -> None:
        self.store.ingest(entries, self.root_path)
        self._rebuild()

    # -- staging operations ----------------------------------------------

    def create_folder(self, parent_path: str, name: str) -> Node:
        path = join_path(parent_path, name)
        node = Node(
            id=f"upload-folder-{name}",
            kind=NodeKind.FOLDER,
            name=name,
            path=path,
            parent_path=parent_path,
            is_new=True,
        )
        self.store.put(node)
        logger.debug("Staged folder %s", path)
        self._rebuild()
        return node

    def create_files(self, parent_path: str, files: Iterable[FilePayload]) -> list[Node]:
        created = []
        for payload in files:
            path = join_path(parent_path, payload.name)
            node = Node(
                id=f"upload-{payload.name}",
                kind=NodeKind.FILE,
                name=payload.name,
                path=path,
                parent_path=parent_path,
                is_new=True,
                payload=payload,
            )
            self.store.put(node)
            created.append(node)
            logger.debug("Staged file %s", path)
        self._rebuild()
        return created

    def delete(self, path: str) -> None:
        """Stage a deletion; a node that never existed remotely is dropped.

        Dropping a new folder also drops everything staged inside it, and
        a hover placeholder shown in that subtree.
        """
        node = self.store.get(path)
        if node is None:
            logger.debug("delete: %s is not in the store", path)
            return
        if node.is_new:
            removed = self.store.remove_subtree(path)
            target = self.store.hover_target
            if target is not None and (target == path or target.startswith(f"{path}/")):
                self.store.hover_target = None
            logger.debug("Unstaged new %s (%d node(s))", path, len(removed))
        else:
            node.is_deleted = True
            logger.debug("Staged delete %s", path)
        self._rebuild()

    def undelete(self, path: str) -> None:
        node = self.store.get(path)
        if node is None:
            logger.debug("undelete: %s is not in the store", path)
            return
        node.is_deleted = False
        logger.debug("Unstaged delete %s", path)
        self._rebuild()

    def reset(self) -> None:
        """Discard every staged edit and return to the last fetched state."""
        self.store.reset()
        logger.debug("Reset to baseline (%d entries)", len(self.store))
        self._rebuild()

    # -- drag and drop ---------------------------------------------------

    def set_hover_placeholder(self, parent_path: str, carries_files: bool = True) -> None:
        """Show the drop placeholder under *parent_path*.

        Drags that carry no files, repeated hovers over the current
        target, and targets that are not in the store are no-ops.
        """
        if not carries_files:
            return
        if self.store.hover_target == parent_path:
            return
        if parent_path and parent_path not in self.store:
            logger.debug("hover: %s is not in the store", parent_path)
            return
        self.store.hover_target = parent_path
        self._rebuild()

    def clear_hover_placeholder(self) -> None:
        if self.store.hover_target is None:
            return
        self.store.hover_target = None
        self._rebuild()

    def hover(self, parent_path: str, carries_files: bool = True) -> None:
        """Throttled :meth:`set_hover_placeholder` for raw drag-over events."""
        self._hover(parent_path, carries_files)

    def tick(self) -> bool:
        """Fire a due trailing-edge hover update; True if one ran."""
        return self._hover.poll()

    def end_drag(self) -> None:
        """Cancel queued hover updates and remove the placeholder."""
        self._hover.cancel()
        self.clear_hover_placeholder()

    def drop(self, parent_path: str, files: Iterable[FilePayload]) -> list[Node]:
        self._hover.cancel()
        self.store.hover_target = None
        return self.create_files(parent_path, files)

    # -- committing ------------------------------------------------------

    def build_plan(self) -> CommitPlan:
        return build_plan(self.store, self.root_path)

    def prepare_commit(self) -> CommitPlan:
        """Build the commit plan and hold it pending confirmation."""
        self.pending_plan = self.build_plan()
        return self.pending_plan

    def cancel_plan(self) -> None:
        """Discard the pending plan; staged edits are kept."""
        self.pending_plan = None

    def submit_plan(self, plan: CommitPlan | None = None) -> CommitResult:
        """Submit *plan* (default: the pending plan) as one commit.

        On success the pending plan is cleared and the subtree re-fetched,
        which discards all staged state.  On failure the exception
        propagates and both the plan and the store are left untouched.
        """
        if plan is None:
            plan = self.pending_plan
        if not plan:
            raise EmptyPlanError("Nothing to commit")
        if self.remote is None:
            raise RuntimeError("No remote to submit to")
        logger.info("Committing %d action(s) to %s@%s", len(plan.actions),
                    self.config.repository_path, self.config.branch)
        result = self.remote.create_commit(
            self.config.repository_path, self.config.branch, plan.message, plan.actions,
        )
        logger.info("Created commit %s", result.short_id)
        self.pending_plan = None
        self.fetch()
        return result
