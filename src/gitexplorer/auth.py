"""OAuth token handling for the GitLab backend.

The explorer never talks to the OAuth endpoints itself: it is handed a
bearer token.  These helpers cover the implicit-grant round trip a host
performs (build the authorize URL, read the token back from the redirect
fragment) and persist the token with its expiry between sessions.
"""

from __future__ import annotations

import json
import os
import time
from pathlib import Path
from urllib.parse import parse_qs, urlencode

import click

from .config import DEFAULT_BASE_URL

APP_NAME = "gitexplorer"
TOKEN_FILE = "token.json"


def authorize_url(app_id: str, redirect_url: str, base_url: str = DEFAULT_BASE_URL) -> str:
    """Return the implicit-grant authorization URL (``scope=api``)."""
    query = urlencode({
        "client_id": app_id,
        "redirect_uri": redirect_url,
        "scope": "api",
        "response_type": "token",
    })
    return f"{base_url.rstrip('/')}/oauth/authorize?{query}"


def parse_redirect_fragment(fragment: str, now: float | None = None) -> tuple[str, float | None]:
    """Extract ``(token, expires_at)`` from an OAuth redirect fragment.

    Accepts a bare fragment (``access_token=...&expires_in=...``), one with
    a leading ``#``, or a full redirect URL.  *expires_at* is an absolute
    epoch timestamp, or ``None`` when the server gave no lifetime.

    Raises:
        ValueError: no ``access_token`` in the fragment, or a non-numeric
            ``expires_in``.
    """
    if "#" in fragment:
        fragment = fragment.split("#", 1)[1]
    params = parse_qs(fragment)
    token = params.get("access_token", [""])[0]
    if not token:
        raise ValueError("No access_token in redirect fragment")
    expires_in = params.get("expires_in", [""])[0]
    if not expires_in:
        return token, None
    try:
        lifetime = float(expires_in)
    except ValueError:
        raise ValueError(f"Invalid expires_in: {expires_in!r}")
    if now is None:
        now = time.time()
    return token, now + lifetime


def default_token_path() -> Path:
    return Path(click.get_app_dir(APP_NAME)) / TOKEN_FILE


class TokenStore:
    """A bearer token and its expiry, persisted as JSON."""

    def __init__(self, path: str | os.PathLike[str] | None = None):
        self.path = Path(path) if path is not None else default_token_path()

    def __repr__(self) -> str:
        return f"TokenStore({str(self.path)!r})"

    def _read(self) -> dict:
        try:
            data = json.loads(self.path.read_text())
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            raise ValueError(f"Unreadable token file {self.path}: {exc}")
        return data if isinstance(data, dict) else {}

    def load(self, now: float | None = None) -> str | None:
        """Return the stored token, or ``None`` if missing or expired."""
        data = self._read()
        token = data.get("auth_token")
        if not token:
            return None
        expires = data.get("expires")
        if expires is not None:
            if now is None:
                now = time.time()
            if float(expires) <= now:
                return None
        return token

    def save(self, token: str, expires_at: float | None = None) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {"auth_token": token}
        if expires_at is not None:
            data["expires"] = expires_at
        self.path.write_text(json.dumps(data))
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            pass

    def clear(self) -> bool:
        """Forget the stored token; True if one was removed."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        return True
