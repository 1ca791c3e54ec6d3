"""Flat-map store: the authoritative path -> node mapping.

Every staging operation mutates this mapping; the hierarchical tree is a
projection rebuilt from it (see :mod:`gitexplorer.tree`).  A value copy of
the post-ingest state is kept as the baseline for :meth:`FlatStore.reset`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from .node import Node, NodeKind
from .paths import is_root_path, parent_of, strip_root

logger = logging.getLogger(__name__)


def _snapshot(nodes: dict[str, Node]) -> dict[str, Node]:
    return {path: node.clone() for path, node in nodes.items()}


class FlatStore:
    """Path-keyed nodes plus the retained baseline and the hover target."""

    def __init__(self):
        self.nodes: dict[str, Node] = {}
        self.baseline: dict[str, Node] = {}
        # Folder currently showing the drop placeholder ("" is the root).
        self.hover_target: str | None = None

    def __repr__(self) -> str:
        return f"FlatStore(nodes={len(self.nodes)}, pending={len(self.pending_nodes())})"

    def __contains__(self, path: str) -> bool:
        return path in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self.nodes)

    def values(self) -> Iterable[Node]:
        return self.nodes.values()

    def get(self, path: str) -> Node | None:
        return self.nodes.get(path)

    def put(self, node: Node) -> None:
        """Insert or overwrite the node at ``node.path``."""
        self.nodes[node.path] = node

    def remove(self, path: str) -> Node | None:
        return self.nodes.pop(path, None)

    def remove_subtree(self, path: str) -> list[Node]:
        """Remove *path* and every node beneath it; return what was removed."""
        prefix = f"{path}/"
        doomed = [p for p in self.nodes if p == path or p.startswith(prefix)]
        return [self.nodes.pop(p) for p in doomed]

    def pending_nodes(self) -> list[Node]:
        return [n for n in self.nodes.values() if n.is_pending]

    def ingest(self, entries: Iterable, root_path: str) -> None:
        """Replace the store with a remote listing and capture the baseline.

        Each entry is re-keyed by its path with the ``root_path/`` prefix
        removed.  The entry for the root itself, and any entry with an
        empty path, is skipped.
        """
        self.nodes = {}
        self.hover_target = None
        for entry in entries:
            if root_path and entry.path.strip("/") == root_path:
                logger.debug("Skipping listing entry for the root itself: %r", entry.path)
                continue
            path = strip_root(entry.path, root_path)
            if is_root_path(path):
                logger.warning("Skipping listing entry with an empty path: %r", entry.path)
                continue
            self.nodes[path] = Node(
                id=entry.id,
                kind=NodeKind.from_git_type(entry.type),
                name=entry.name,
                path=path,
                parent_path=parent_of(path),
                mode=entry.mode,
            )
        self.baseline = _snapshot(self.nodes)
        logger.debug("Ingested %d entries under %r", len(self.nodes), root_path)

    def reset(self) -> None:
        """Restore a fresh copy of the baseline, discarding staged edits."""
        self.nodes = _snapshot(self.baseline)
        self.hover_target = None
