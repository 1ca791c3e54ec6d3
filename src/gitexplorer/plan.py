"""Commit plan builder: turn staged edits into repository actions."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum

from .paths import full_path


class CommitActionKind(str, Enum):
    """Kind of commit action: ``CREATE``, ``DELETE``, ``MOVE`` or ``UPDATE``."""
    CREATE = "create"
    DELETE = "delete"
    MOVE = "move"
    UPDATE = "update"

    def __str__(self) -> str:          # noqa: D105
        return self.value


@dataclass(frozen=True)
class CommitAction:
    """A single action of an atomic multi-action commit.

    Attributes:
        action: :class:`CommitActionKind` value.
        file_path: Full repository path (root prefix included).
        previous_path: Source path for ``move`` actions.
        content: File contents (base64 text when *encoding* is ``"base64"``).
        encoding: ``"base64"`` or ``"text"``; ``None`` when there is no content.
        last_commit_id: Optional optimistic-locking commit id.
    """
    action: CommitActionKind
    file_path: str
    previous_path: str | None = None
    content: str | None = None
    encoding: str | None = None
    last_commit_id: str | None = None

    def to_dict(self) -> dict:
        """Return the REST payload shape, omitting unset fields."""
        data = {k: v for k, v in asdict(self).items() if v is not None}
        data["action"] = str(self.action)
        return data


@dataclass
class CommitPlan:
    """Ordered actions plus the sorted, human-readable summary message."""
    actions: list[CommitAction] = field(default_factory=list)
    message: str = ""

    def __bool__(self) -> bool:
        return bool(self.actions)

    def __len__(self) -> int:
        return len(self.actions)


def build_plan(store, root_path: str) -> CommitPlan:
    """Scan *store* and emit one action per committable staged edit.

    Deleted nodes become ``delete`` actions; new nodes carrying a payload
    become base64 ``create`` actions.  New folders and the drop placeholder
    emit nothing, since folders are implicit in file paths.  Message lines
    are sorted so the summary does not depend on staging order.
    """
    actions: list[CommitAction] = []
    lines: list[str] = []
    for node in store.values():
        if node.is_placeholder:
            continue
        path = full_path(root_path, node.path)
        if node.is_deleted:
            actions.append(CommitAction(CommitActionKind.DELETE, path))
            lines.append(f"Delete: {path}")
        elif node.is_new and node.payload is not None:
            actions.append(CommitAction(
                CommitActionKind.CREATE,
                path,
                content=node.payload.to_base64(),
                encoding="base64",
            ))
            lines.append(f"Create: {path}")
    return CommitPlan(actions, "\n".join(sorted(lines)))
