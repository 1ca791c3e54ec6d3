"""Shared fixtures for gitexplorer tests."""

import base64

import pytest
from click.testing import CliRunner

from gitexplorer import CommitAction, CommitActionKind, ExplorerConfig
from gitexplorer.cli import main
from gitexplorer.remote import CommitResult, LocalRemote, RemoteEntry


class FakeRemote:
    """In-memory remote that records calls and can be told to fail."""

    def __init__(self, entries=()):
        self.entries = list(entries)
        self.list_calls = []
        self.commits = []
        self.list_error = None
        self.commit_error = None

    def list_tree(self, repository_path, *, recursive=True, path=""):
        self.list_calls.append((repository_path, recursive, path))
        if self.list_error is not None:
            raise self.list_error
        return list(self.entries)

    def create_commit(self, repository_path, branch, message, actions):
        if self.commit_error is not None:
            raise self.commit_error
        self.commits.append((repository_path, branch, message, list(actions)))
        return CommitResult(id="c0ffee" * 6 + "1234", short_id="c0ffee12", message=message)


class Clock:
    """Manually advanced clock for throttle tests."""

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def blob(path, sha="b" * 40):
    return RemoteEntry(id=sha, mode="100644", name=path.rsplit("/", 1)[-1], path=path, type="blob")


def tree(path, sha="t" * 40):
    return RemoteEntry(id=sha, mode="040000", name=path.rsplit("/", 1)[-1], path=path, type="tree")


@pytest.fixture
def listing():
    """Remote listing of the ``docs`` subtree.

    Tree:
        readme.md, guides/intro.md, guides/setup.md
    """
    return [
        blob("docs/readme.md", "1" * 40),
        tree("docs/guides", "2" * 40),
        blob("docs/guides/intro.md", "3" * 40),
        blob("docs/guides/setup.md", "4" * 40),
    ]


@pytest.fixture
def config():
    return ExplorerConfig(
        app_id="app-123",
        redirect_url="https://example.com/explorer",
        repository_path="group/project",
        root_path="docs",
    )


@pytest.fixture
def remote(listing):
    return FakeRemote(listing)


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def explorer(config, remote, clock):
    from gitexplorer import Explorer
    return Explorer.open(config, remote, hover_wait=1.0, clock=clock)


# ---------------------------------------------------------------------------
# Git-backed fixtures
# ---------------------------------------------------------------------------

def create(path, data):
    return CommitAction(
        CommitActionKind.CREATE, path,
        content=base64.b64encode(data).decode(), encoding="base64",
    )


@pytest.fixture
def bare_repo(tmp_path):
    """Create a bare repository with an empty 'master' branch."""
    p = str(tmp_path / "test.git")
    LocalRemote.init(p)
    return p


@pytest.fixture
def repo_with_files(bare_repo):
    """Bare repo with top.txt, docs/readme.md and docs/guides/intro.md on 'master'."""
    LocalRemote().create_commit(bare_repo, "master", "seed", [
        create("top.txt", b"top"),
        create("docs/readme.md", b"# Readme\n"),
        create("docs/guides/intro.md", b"intro"),
    ])
    return bare_repo


# ---------------------------------------------------------------------------
# CLI fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def repo_path(tmp_path):
    """Return a path to a not-yet-created repo."""
    return str(tmp_path / "cli.git")


@pytest.fixture
def initialized_repo(runner, repo_path):
    """Create a repo with a 'master' branch through the CLI and return its path."""
    result = runner.invoke(main, ["init", "--repo", repo_path])
    assert result.exit_code == 0, result.output
    return repo_path
