"""Tree node model: one file or folder and its staged status."""

from __future__ import annotations

import base64
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class NodeKind(str, Enum):
    """Kind of tree entry.

    Members: ``FILE``, ``FOLDER``.
    """
    FILE = "file"
    FOLDER = "folder"

    def __str__(self) -> str:          # noqa: D105
        return self.value

    @classmethod
    def from_git_type(cls, git_type: str) -> NodeKind:
        """Convert a remote listing type (``"blob"`` or ``"tree"``)."""
        try:
            return _GIT_TYPE_TO_KIND[git_type]
        except KeyError:
            raise ValueError(f"Unknown entry type: {git_type!r}")


_GIT_TYPE_TO_KIND = {
    "blob": NodeKind.FILE,
    "tree": NodeKind.FOLDER,
}


@dataclass(frozen=True)
class FilePayload:
    """Raw contents of a file staged for upload.

    Either *data* holds the bytes directly or *source* names a local file
    that is read when the commit plan is built.

    Attributes:
        name: Leaf file name used for the new node.
        data: In-memory contents, or ``None`` when read from *source*.
        source: Local file path, or ``None`` for in-memory data.
    """
    name: str
    data: bytes | None = None
    source: str | None = None

    def __post_init__(self):
        if self.data is None and self.source is None:
            raise ValueError(f"FilePayload {self.name!r} needs data or a source path")
        if "/" in self.name or not self.name:
            raise ValueError(f"Invalid file name: {self.name!r}")

    @classmethod
    def from_path(cls, path: str | os.PathLike[str], name: str | None = None) -> FilePayload:
        """Build a payload backed by a local file (read lazily)."""
        p = Path(path)
        if p.is_dir():
            raise IsADirectoryError(str(p))
        if not p.exists():
            raise FileNotFoundError(str(p))
        return cls(name or p.name, source=str(p))

    def read(self) -> bytes:
        if self.data is not None:
            return self.data
        return Path(self.source).read_bytes()

    def to_base64(self) -> str:
        """Return the contents base64-encoded as ASCII text."""
        return base64.b64encode(self.read()).decode("ascii")


@dataclass(eq=True)
class Node:
    """A file or folder keyed by its root-relative path.

    ``children`` is derived: the tree builder rebuilds it on every pass and
    it takes no part in equality.
    """
    id: str
    kind: NodeKind
    name: str
    path: str
    parent_path: str = ""
    mode: str = ""
    is_new: bool = False
    is_deleted: bool = False
    payload: FilePayload | None = None
    is_placeholder: bool = False
    children: list[Node] = field(default_factory=list, compare=False, repr=False)

    @property
    def is_folder(self) -> bool:
        return self.kind is NodeKind.FOLDER

    @property
    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE

    @property
    def is_pending(self) -> bool:
        """True when this node is a staged edit (placeholders never are)."""
        return (self.is_new or self.is_deleted) and not self.is_placeholder

    def clone(self) -> Node:
        """Return an independent copy without children.

        Payloads are immutable and shared.
        """
        return Node(
            id=self.id,
            kind=self.kind,
            name=self.name,
            path=self.path,
            parent_path=self.parent_path,
            mode=self.mode,
            is_new=self.is_new,
            is_deleted=self.is_deleted,
            payload=self.payload,
            is_placeholder=self.is_placeholder,
        )
