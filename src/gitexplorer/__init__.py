from .config import ExplorerConfig
from .explorer import Explorer
from .exceptions import EmptyPlanError, ExplorerError, IntegrityError, NotAuthorizedError, RemoteError
from .node import FilePayload, Node, NodeKind
from .plan import CommitAction, CommitActionKind, CommitPlan, build_plan
from .remote import CommitResult, GitLabRemote, LocalRemote, Remote, RemoteEntry
from .store import FlatStore
from .throttle import Throttle
from .tree import TreeView, build_tree, format_tree

__all__ = [
    "Explorer", "ExplorerConfig", "FlatStore", "Throttle",
    "Node", "NodeKind", "FilePayload",
    "TreeView", "build_tree", "format_tree",
    "CommitAction", "CommitActionKind", "CommitPlan", "build_plan",
    "Remote", "RemoteEntry", "CommitResult", "LocalRemote", "GitLabRemote",
    "ExplorerError", "IntegrityError", "RemoteError", "NotAuthorizedError", "EmptyPlanError",
]
