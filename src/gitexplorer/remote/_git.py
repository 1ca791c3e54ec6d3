"""Low-level dulwich tree helpers for the local backend.

Provides recursive tree rebuild and path-based read helpers using
dulwich's tree objects.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterator, NamedTuple

from dulwich.objects import Blob as _DBlob
from dulwich.objects import Tree as _DTree
from dulwich.repo import Repo as _DRepo

GIT_FILEMODE_TREE = 0o040000
GIT_FILEMODE_BLOB = 0o100644
GIT_OBJECT_TREE = 2  # dulwich Tree.type_num


class TreeBuilder:
    """Wraps dulwich Tree construction."""

    def __init__(self, repo: _DRepo, base_tree: _DTree | None = None):
        self._drepo = repo
        self._entries: dict[bytes, tuple[int, bytes]] = {}
        if base_tree is not None:
            for entry in base_tree.iteritems():
                self._entries[entry.path] = (entry.mode, entry.sha)

    def insert(self, name: str, oid: bytes, mode: int):
        self._entries[name.encode()] = (mode, oid)

    def remove(self, name: str):
        self._entries.pop(name.encode(), None)

    def write(self) -> bytes:
        tree = _DTree()
        for name_bytes, (mode, sha) in sorted(self._entries.items()):
            tree.add(name_bytes, mode, sha)
        self._drepo.object_store.add_object(tree)
        return tree.id


class TreeEntry(NamedTuple):
    """An entry yielded by :func:`walk_entries`.

    Attributes:
        path: Full path from the tree the walk started at.
        name: Entry basename.
        oid: Hex object id (bytes).
        mode: Git filemode integer.
    """

    path: str
    name: str
    oid: bytes
    mode: int

    @property
    def is_tree(self) -> bool:
        return self.mode == GIT_FILEMODE_TREE


def create_blob(repo: _DRepo, data: bytes) -> bytes:
    blob = _DBlob.from_string(data)
    repo.object_store.add_object(blob)
    return blob.id


def rebuild_tree(
    repo: _DRepo,
    base_tree_oid: bytes | None,
    writes: dict[str, bytes],
    removes: set[str],
) -> bytes:
    """Rebuild a tree with writes and removes applied.

    Only the ancestor chain from changed leaves to root is rebuilt.
    Sibling subtrees are shared by hash reference, and directories left
    empty are pruned.

    Args:
        repo: The dulwich repository.
        base_tree_oid: OID of the existing tree (or None for empty).
        writes: Mapping of normalized path to blob data.
        removes: Set of normalized file paths to remove.

    Returns:
        OID of the new root tree.
    """
    # Group changes by first path segment
    sub_writes: dict[str, dict[str, bytes]] = defaultdict(dict)
    leaf_writes: dict[str, bytes] = {}
    sub_removes: dict[str, set[str]] = defaultdict(set)
    leaf_removes: set[str] = set()

    for path, data in writes.items():
        parts = path.split("/", 1)
        if len(parts) == 1:
            leaf_writes[parts[0]] = data
        else:
            sub_writes[parts[0]][parts[1]] = data

    for path in removes:
        parts = path.split("/", 1)
        if len(parts) == 1:
            leaf_removes.add(parts[0])
        else:
            sub_removes[parts[0]].add(parts[1])

    tree = repo[base_tree_oid] if base_tree_oid is not None else None
    tb = TreeBuilder(repo, tree)

    existing_subtrees: dict[str, bytes] = {}
    if tree is not None:
        for entry in tree.iteritems():
            if entry.mode == GIT_FILEMODE_TREE:
                existing_subtrees[entry.path.decode()] = entry.sha

    for name in leaf_removes:
        tb.remove(name)

    for name, data in leaf_writes.items():
        tb.insert(name, create_blob(repo, data), GIT_FILEMODE_BLOB)

    for subdir in set(sub_writes) | set(sub_removes):
        new_subtree_oid = rebuild_tree(
            repo,
            existing_subtrees.get(subdir),
            sub_writes.get(subdir, {}),
            sub_removes.get(subdir, set()),
        )
        if len(repo[new_subtree_oid]) == 0:
            tb.remove(subdir)
        else:
            tb.insert(subdir, new_subtree_oid, GIT_FILEMODE_TREE)

    return tb.write()


def entry_at_path(repo: _DRepo, tree_oid: bytes, path: str) -> tuple[bytes, int] | None:
    """Return (oid, filemode) of the entry at *path*, or None if missing."""
    segments = path.split("/")
    tree = repo[tree_oid]
    for i, seg in enumerate(segments):
        if tree.type_num != GIT_OBJECT_TREE:
            return None
        try:
            mode, sha = tree[seg.encode()]
        except KeyError:
            return None
        if i < len(segments) - 1:
            tree = repo[sha]
        else:
            return (sha, mode)
    return None


def walk_entries(
    repo: _DRepo,
    tree_oid: bytes,
    prefix: str = "",
    *,
    recursive: bool = True,
) -> Iterator[TreeEntry]:
    """Yield every entry below *tree_oid*, parents before their children."""
    tree = repo[tree_oid]
    for entry in tree.iteritems():
        name = entry.path.decode()
        path = f"{prefix}/{name}" if prefix else name
        item = TreeEntry(path, name, entry.sha, entry.mode)
        yield item
        if recursive and item.is_tree:
            yield from walk_entries(repo, entry.sha, path)
