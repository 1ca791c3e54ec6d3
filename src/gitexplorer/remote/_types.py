"""Data structures shared by remote backends."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..plan import CommitAction


@dataclass(frozen=True)
class RemoteEntry:
    """One entry of a recursive repository listing.

    Attributes:
        id: Object id issued by the remote (blob or tree SHA).
        mode: Git filemode as an octal string (e.g. ``"100644"``).
        name: Leaf name.
        path: Full repository path (root prefix included).
        type: ``"blob"`` or ``"tree"``.
    """
    id: str
    mode: str
    name: str
    path: str
    type: str

    @classmethod
    def from_dict(cls, data: dict) -> RemoteEntry:
        """Build an entry from a GitLab ``repository/tree`` JSON object."""
        return cls(
            id=data["id"],
            mode=data.get("mode", ""),
            name=data["name"],
            path=data["path"],
            type=data["type"],
        )


@dataclass(frozen=True)
class CommitResult:
    """What the remote reports back for a created commit."""
    id: str
    short_id: str
    message: str
    web_url: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> CommitResult:
        return cls(
            id=data["id"],
            short_id=data.get("short_id", data["id"][:8]),
            message=data.get("message", ""),
            web_url=data.get("web_url"),
        )


class Remote(Protocol):
    """The remote repository collaborator consumed by the explorer."""

    def list_tree(
        self, repository_path: str, *, recursive: bool = True, path: str = ""
    ) -> list[RemoteEntry]:
        ...

    def create_commit(
        self,
        repository_path: str,
        branch: str,
        message: str,
        actions: Sequence[CommitAction],
    ) -> CommitResult:
        ...
