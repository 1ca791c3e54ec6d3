"""Remote repository backends consumed by the explorer."""

from ._types import CommitResult, Remote, RemoteEntry
from .gitlab import GitLabRemote
from .local import LocalRemote

__all__ = ["CommitResult", "Remote", "RemoteEntry", "GitLabRemote", "LocalRemote"]
