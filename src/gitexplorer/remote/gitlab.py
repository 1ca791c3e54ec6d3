"""GitLab backend: REST API v4 over requests with an OAuth bearer token."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from urllib.parse import quote

import requests

from ..exceptions import NotAuthorizedError, RemoteError
from ..plan import CommitAction
from ._types import CommitResult, RemoteEntry

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
PER_PAGE = 100


class GitLabRemote:
    """List trees and create commits through the GitLab REST API."""

    def __init__(self, token: str, base_url: str = "https://gitlab.com", *,
                 branch: str | None = None,
                 session: requests.Session | None = None, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.branch = branch
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {token}"})

    def __repr__(self) -> str:
        return f"GitLabRemote({self.base_url!r}, branch={self.branch!r})"

    def _project_url(self, repository_path: str, suffix: str) -> str:
        project = quote(repository_path, safe="")
        return f"{self.base_url}/api/v4/projects/{project}/{suffix}"

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            response = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise RemoteError(f"{method} {url} failed: {exc}")
        if response.status_code == 401:
            raise NotAuthorizedError("GitLab rejected the access token", 401)
        if response.status_code >= 400:
            logger.error("GitLab %s %s -> %s: %s", method, url, response.status_code, response.text)
            raise RemoteError(
                f"GitLab returned {response.status_code}: {_error_message(response)}",
                response.status_code,
            )
        return response

    def list_tree(
        self, repository_path: str, *, recursive: bool = True, path: str = ""
    ) -> list[RemoteEntry]:
        """Return every entry under *path*, following pagination.

        Lists *branch* when one was given, else the project's default branch.
        """
        url = self._project_url(repository_path, "repository/tree")
        params = {"recursive": "true" if recursive else "false", "per_page": PER_PAGE}
        if path:
            params["path"] = path
        if self.branch:
            params["ref"] = self.branch
        entries: list[RemoteEntry] = []
        page = "1"
        while page:
            params["page"] = page
            response = self._request("GET", url, params=params)
            entries.extend(RemoteEntry.from_dict(item) for item in response.json())
            page = response.headers.get("X-Next-Page", "")
        logger.info("Listed %d entries from %s:%s", len(entries), repository_path, path or "/")
        return entries

    def create_commit(
        self,
        repository_path: str,
        branch: str,
        message: str,
        actions: Sequence[CommitAction],
    ) -> CommitResult:
        url = self._project_url(repository_path, "repository/commits")
        payload = {
            "branch": branch,
            "commit_message": message,
            "actions": [a.to_dict() for a in actions],
        }
        response = self._request("POST", url, json=payload)
        return CommitResult.from_dict(response.json())


def _error_message(response: requests.Response) -> str:
    """Pull GitLab's ``message``/``error`` field out of an error response."""
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason or ""
    if isinstance(data, dict):
        return str(data.get("message") or data.get("error") or data)
    return str(data)
