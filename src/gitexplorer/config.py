"""Explorer configuration: the four host values plus commit defaults."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_BRANCH = "master"
DEFAULT_BASE_URL = "https://gitlab.com"

ENV_APP_ID = "GITEXPLORER_APP_ID"
ENV_REDIRECT_URL = "GITEXPLORER_REDIRECT_URL"
ENV_REPO = "GITEXPLORER_REPO"
ENV_ROOT = "GITEXPLORER_ROOT"
ENV_BRANCH = "GITEXPLORER_BRANCH"
ENV_URL = "GITEXPLORER_URL"


@dataclass(frozen=True)
class ExplorerConfig:
    """Values an embedding host passes to the explorer.

    Attributes:
        app_id: OAuth application id.
        redirect_url: OAuth redirect target.
        repository_path: Project path on the remote (or a bare repo on disk).
        root_path: Subtree of the repository the explorer works in.
        branch: Branch commits are submitted to.
        base_url: Remote server URL (GitLab backend only).
    """
    app_id: str | None = None
    redirect_url: str | None = None
    repository_path: str | None = None
    root_path: str = ""
    branch: str = DEFAULT_BRANCH
    base_url: str = DEFAULT_BASE_URL

    def __post_init__(self):
        # Root is always stored without surrounding slashes
        object.__setattr__(self, "root_path", (self.root_path or "").strip("/"))

    @property
    def is_complete(self) -> bool:
        """True when all four host values are set."""
        return bool(self.app_id and self.redirect_url
                    and self.repository_path and self.root_path)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ExplorerConfig:
        """Read the configuration from ``GITEXPLORER_*`` variables."""
        env = os.environ if environ is None else environ
        return cls(
            app_id=env.get(ENV_APP_ID) or None,
            redirect_url=env.get(ENV_REDIRECT_URL) or None,
            repository_path=env.get(ENV_REPO) or None,
            root_path=env.get(ENV_ROOT, ""),
            branch=env.get(ENV_BRANCH) or DEFAULT_BRANCH,
            base_url=env.get(ENV_URL) or DEFAULT_BASE_URL,
        )
