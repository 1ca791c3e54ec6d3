"""Local backend: a bare git repository on disk, read and written with dulwich.

``repository_path`` is the filesystem path of the bare repository.  Commit
actions are validated against the branch head and applied as a single
commit; an invalid action aborts the whole commit before any ref moves.
"""

from __future__ import annotations

import base64
import binascii
import logging
import time
from collections.abc import Sequence
from pathlib import Path

from dulwich.errors import NotGitRepository
from dulwich.objects import Commit as _DCommit
from dulwich.repo import Repo as _DRepo

from ..exceptions import RemoteError
from ..paths import is_root_path, normalize_path
from ..plan import CommitAction, CommitActionKind
from ._git import GIT_FILEMODE_TREE, TreeBuilder, entry_at_path, rebuild_tree, walk_entries
from ._types import CommitResult, RemoteEntry

logger = logging.getLogger(__name__)


def _decode_content(action: CommitAction) -> bytes:
    content = action.content or ""
    if action.encoding == "base64":
        try:
            return base64.b64decode(content, validate=True)
        except binascii.Error as exc:
            raise RemoteError(f"Invalid base64 content for {action.file_path}: {exc}", 400)
    return content.encode()


class LocalRemote:
    """Serve listings and commits from bare repositories on disk."""

    def __init__(self, *, branch: str | None = None,
                 author: str = "gitexplorer", email: str = "gitexplorer@localhost"):
        self.branch = branch
        self._identity = f"{author} <{email}>".encode()

    def __repr__(self) -> str:
        return f"LocalRemote(branch={self.branch!r})"

    @classmethod
    def init(cls, path: str | Path, branch: str = "master", **kwargs) -> LocalRemote:
        """Create a bare repository whose *branch* holds one empty commit."""
        path = Path(path)
        if path.exists():
            raise FileExistsError(f"Repository already exists: {path}")
        remote = cls(branch=branch, **kwargs)
        repo = _DRepo.init_bare(str(path), mkdir=True)
        try:
            tree_oid = TreeBuilder(repo).write()
            ref = f"refs/heads/{branch}".encode()
            remote._write_commit(repo, ref, f"Initialize {branch}", tree_oid, [])
            repo.refs.set_symbolic_ref(b"HEAD", ref)
        finally:
            repo.close()
        return remote

    def _open(self, repository_path: str) -> _DRepo:
        try:
            return _DRepo(repository_path)
        except NotGitRepository:
            raise RemoteError(f"Repository not found: {repository_path}", 404)

    def _head(self, repo: _DRepo, branch: str | None) -> bytes:
        ref = f"refs/heads/{branch}".encode() if branch else b"HEAD"
        try:
            return repo.refs[ref]
        except KeyError:
            raise RemoteError(f"Branch not found: {branch or 'HEAD'}", 404)

    def list_tree(
        self, repository_path: str, *, recursive: bool = True, path: str = ""
    ) -> list[RemoteEntry]:
        """List entries under *path* at the branch head.

        Paths in the result are full repository paths.  A missing *path*
        yields an empty list.
        """
        repo = self._open(repository_path)
        try:
            tree_oid = repo[self._head(repo, self.branch)].tree
            prefix = ""
            if not is_root_path(path):
                prefix = normalize_path(path)
                found = entry_at_path(repo, tree_oid, prefix)
                if found is None or found[1] != GIT_FILEMODE_TREE:
                    return []
                tree_oid = found[0]
            return [
                RemoteEntry(
                    id=e.oid.decode(),
                    mode=f"{e.mode:06o}",
                    name=e.name,
                    path=e.path,
                    type="tree" if e.is_tree else "blob",
                )
                for e in walk_entries(repo, tree_oid, prefix, recursive=recursive)
            ]
        finally:
            repo.close()

    def create_commit(
        self,
        repository_path: str,
        branch: str,
        message: str,
        actions: Sequence[CommitAction],
    ) -> CommitResult:
        if not actions:
            raise RemoteError("No actions to commit", 400)
        repo = self._open(repository_path)
        try:
            ref = f"refs/heads/{branch}".encode()
            head = self._head(repo, branch)
            base_tree = repo[head].tree
            writes, removes = self._resolve_actions(repo, base_tree, actions)
            tree_oid = rebuild_tree(repo, base_tree, writes, removes)
            sha = self._write_commit(repo, None, message, tree_oid, [head])
            if not repo.refs.set_if_equals(ref, head, sha):
                raise RemoteError(f"Branch {branch} moved during commit", 409)
            logger.info("Committed %s on %s (%d actions)", sha.decode()[:8], branch, len(actions))
            return CommitResult(id=sha.decode(), short_id=sha.decode()[:8], message=message)
        finally:
            repo.close()

    def _resolve_actions(self, repo, base_tree, actions):
        """Validate *actions* against *base_tree*; return (writes, removes)."""
        writes: dict[str, bytes] = {}
        removes: set[str] = set()
        removed_dirs: set[str] = set()

        def exists(p):
            if p in writes:
                return True
            if p in removes:
                return False
            return entry_at_path(repo, base_tree, p) is not None

        for action in actions:
            kind = CommitActionKind(action.action)
            try:
                path = normalize_path(action.file_path)
            except ValueError as exc:
                raise RemoteError(str(exc), 400)
            if kind is CommitActionKind.CREATE:
                if exists(path):
                    raise RemoteError(f"A file with this name already exists: {path}", 400)
                writes[path] = _decode_content(action)
                removes.discard(path)
            elif kind is CommitActionKind.UPDATE:
                if not exists(path):
                    raise RemoteError(f"A file with this name doesn't exist: {path}", 400)
                writes[path] = _decode_content(action)
            elif kind is CommitActionKind.DELETE:
                if any(path.startswith(f"{d}/") for d in removed_dirs):
                    continue
                if not exists(path):
                    raise RemoteError(f"A file with this name doesn't exist: {path}", 400)
                if self._remove(repo, base_tree, path, writes, removes):
                    removed_dirs.add(path)
            elif kind is CommitActionKind.MOVE:
                try:
                    source = normalize_path(action.previous_path or "")
                except ValueError as exc:
                    raise RemoteError(f"Invalid previous path: {exc}", 400)
                if not exists(source):
                    raise RemoteError(f"A file with this name doesn't exist: {source}", 400)
                if exists(path):
                    raise RemoteError(f"A file with this name already exists: {path}", 400)
                if action.content is not None:
                    data = _decode_content(action)
                elif source in writes:
                    data = writes[source]
                else:
                    data = repo[entry_at_path(repo, base_tree, source)[0]].data
                self._remove(repo, base_tree, source, writes, removes)
                writes[path] = data
        return writes, removes

    def _remove(self, repo, base_tree, path, writes, removes) -> bool:
        """Remove *path*; a folder removes every file beneath it.

        Returns True if *path* was a folder.
        """
        found = entry_at_path(repo, base_tree, path)
        if found is not None and found[1] == GIT_FILEMODE_TREE:
            for entry in walk_entries(repo, found[0], path):
                if not entry.is_tree:
                    removes.add(entry.path)
            for pending in [p for p in writes if p.startswith(f"{path}/")]:
                del writes[pending]
            return True
        removes.add(path)
        writes.pop(path, None)
        return False

    def _write_commit(self, repo, ref, message, tree_oid, parents) -> bytes:
        c = _DCommit()
        c.tree = tree_oid
        c.parents = parents
        c.author = c.committer = self._identity
        now = int(time.time())
        c.author_time = c.commit_time = now
        c.author_timezone = c.commit_timezone = 0
        msg = message.encode()
        if not msg.endswith(b"\n"):
            msg += b"\n"
        c.message = msg
        c.encoding = b"UTF-8"
        repo.object_store.add_object(c)
        if ref is not None:
            repo.refs[ref] = c.id
        return c.id
