"""Repository path helpers.

Paths inside the explorer are always relative to the configured root,
use forward slashes and carry no leading or trailing slash.  The root
prefix is stripped on ingestion and re-attached when building commit
actions.
"""

from __future__ import annotations

import os


def is_root_path(path: str | os.PathLike[str]) -> bool:
    """Return True if path represents the root (empty or only slashes)."""
    p = os.fspath(path)
    if os.name == "nt":
        p = p.replace("\\", "/")
    return p.strip("/") == ""


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Normalize a path: strip leading/trailing slashes, reject bad segments."""
    path = os.fspath(path)
    if os.name == "nt":
        path = path.replace("\\", "/")
    path = path.strip("/")
    if not path:
        raise ValueError("Path must not be empty")
    out: list[str] = []
    for seg in path.split("/"):
        if not seg:
            raise ValueError(f"Empty segment in path: {path!r}")
        if seg == "..":
            raise ValueError(f"Invalid path segment: {seg!r}")
        if seg == ".":
            continue
        out.append(seg)
    if not out:
        raise ValueError("Path must not be empty")
    return "/".join(out)


def join_path(parent: str, name: str) -> str:
    """Join a folder path and a leaf name; an empty parent means the root."""
    return f"{parent}/{name}" if parent else name


def parent_of(path: str) -> str:
    """Return the containing folder of *path*, or ``""`` for root entries."""
    return "/".join(path.split("/")[:-1])


def strip_root(path: str, root: str) -> str:
    """Remove a leading ``root/`` prefix from *path* when it is present."""
    if root and path.startswith(f"{root}/"):
        return path[len(root) + 1:]
    return path


def full_path(root: str, path: str) -> str:
    """Re-attach the root prefix to a root-relative path."""
    return f"{root}/{path}" if root else path
