"""Tree builder: project the flat store into a hierarchical tree.

The flat store is authoritative; ``Node.children`` lists are rebuilt from
scratch on every pass so deleted nodes never leave dangling references.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .exceptions import IntegrityError
from .node import Node, NodeKind
from .paths import join_path

PLACEHOLDER_ID = "temporary-placeholder"


def placeholder_label(parent_path: str) -> str:
    """Display name of the drop placeholder shown under *parent_path*."""
    return f"Upload file(s) to '/{parent_path}'" if parent_path else "Upload file(s) to root"


def make_placeholder(parent_path: str) -> Node:
    """Build the transient, display-only drop placeholder node."""
    return Node(
        id=PLACEHOLDER_ID,
        kind=NodeKind.FILE,
        name=placeholder_label(parent_path),
        path=join_path(parent_path, PLACEHOLDER_ID),
        parent_path=parent_path,
        is_new=True,
        is_placeholder=True,
    )


def display_order(nodes: Iterable[Node]) -> list[Node]:
    """Folders before files, otherwise in their existing (stable) order."""
    return sorted(nodes, key=lambda n: not n.is_folder)


@dataclass
class TreeView:
    """Result of a tree build.

    Attributes:
        roots: Root-level nodes in store order.
        has_pending_changes: ``True`` if any node is new or deleted
            (the drop placeholder never counts).
    """
    roots: list[Node] = field(default_factory=list)
    has_pending_changes: bool = False

    def walk(self) -> Iterator[tuple[int, Node]]:
        """Yield ``(depth, node)`` depth-first in display order."""
        stack = [(0, n) for n in reversed(display_order(self.roots))]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            for child in reversed(display_order(node.children)):
                stack.append((depth + 1, child))

    def find(self, path: str) -> Node | None:
        for _depth, node in self.walk():
            if node.path == path:
                return node
        return None

    def paths(self) -> list[str]:
        return [node.path for _depth, node in self.walk()]


def build_tree(store) -> TreeView:
    """Rebuild every ``children`` list and return the root-level nodes.

    Raises:
        IntegrityError: a node's ``parent_path`` (or the hover target)
            does not resolve to a node in the store.
    """
    nodes = store.nodes
    view = TreeView()
    for node in nodes.values():
        node.children = []

    for node in nodes.values():
        if node.parent_path:
            parent = nodes.get(node.parent_path)
            if parent is None:
                raise IntegrityError(
                    f"Parent {node.parent_path!r} of {node.path!r} is not in the store"
                )
            parent.children.append(node)
        else:
            view.roots.append(node)
        if node.is_pending:
            view.has_pending_changes = True

    target = store.hover_target
    if target is not None:
        placeholder = make_placeholder(target)
        if not target:
            view.roots.append(placeholder)
        elif target in nodes:
            nodes[target].children.append(placeholder)
        else:
            raise IntegrityError(f"Hover target {target!r} is not in the store")

    return view


def format_tree(view: TreeView, indent: str = "  ") -> str:
    """Render *view* as indented text.

    Folders end with ``/``; new entries are marked ``+``, deleted ones
    ``-`` and the drop placeholder ``>``.
    """
    lines = []
    for depth, node in view.walk():
        if node.is_placeholder:
            mark = ">"
        elif node.is_deleted:
            mark = "-"
        elif node.is_new:
            mark = "+"
        else:
            mark = " "
        name = f"{node.name}/" if node.is_folder else node.name
        lines.append(f"{mark} {indent * depth}{name}")
    return "\n".join(lines)
