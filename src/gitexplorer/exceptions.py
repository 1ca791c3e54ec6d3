"""Exceptions for gitexplorer."""


class ExplorerError(Exception):
    """Base class for gitexplorer errors."""


class IntegrityError(ExplorerError):
    """Raised when the flat store no longer describes a valid tree.

    A node whose ``parent_path`` (or a hover target) does not resolve to a
    node in the store means ingestion or a staging operation has a bug.
    It is never recovered from locally.
    """


class RemoteError(ExplorerError):
    """Raised when the remote repository rejects or fails a request.

    ``status`` carries the HTTP status code when one is available.
    """

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class NotAuthorizedError(RemoteError):
    """Raised when the remote refuses the bearer token (missing or expired)."""


class EmptyPlanError(ExplorerError, ValueError):
    """Raised when submitting a commit plan with no actions."""
