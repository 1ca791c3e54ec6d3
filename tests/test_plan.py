"""Tests for the commit plan builder."""

import base64

import pytest
from conftest import blob, tree

from gitexplorer import (
    CommitAction,
    CommitActionKind,
    CommitPlan,
    FilePayload,
    FlatStore,
    Node,
    NodeKind,
    build_plan,
)


@pytest.fixture
def store(listing):
    s = FlatStore()
    s.ingest(listing, "docs")
    return s


def new_file(path, data=b"data"):
    parent, _, name = path.rpartition("/")
    return Node(f"upload-{name}", NodeKind.FILE, name, path, parent_path=parent,
                is_new=True, payload=FilePayload(name, data))


class TestBuildPlan:
    def test_clean_store_is_empty(self, store):
        plan = build_plan(store, "docs")
        assert plan.actions == []
        assert plan.message == ""
        assert not plan

    def test_delete(self, store):
        store.get("guides/intro.md").is_deleted = True
        plan = build_plan(store, "docs")
        assert plan.actions == [CommitAction(CommitActionKind.DELETE, "docs/guides/intro.md")]
        assert plan.message == "Delete: docs/guides/intro.md"

    def test_create_is_base64(self, store):
        store.put(new_file("guides/new.md", b"\x00binary\xff"))
        plan = build_plan(store, "docs")
        (action,) = plan.actions
        assert action.action is CommitActionKind.CREATE
        assert action.file_path == "docs/guides/new.md"
        assert action.encoding == "base64"
        assert base64.b64decode(action.content) == b"\x00binary\xff"
        assert plan.message == "Create: docs/guides/new.md"

    def test_new_folder_emits_nothing(self, store):
        store.put(Node("upload-folder-x", NodeKind.FOLDER, "x", "x", is_new=True))
        plan = build_plan(store, "docs")
        assert plan.actions == []
        assert plan.message == ""

    def test_placeholder_skipped(self, store):
        store.put(Node("p", NodeKind.FILE, "drop", "drop", is_new=True, is_placeholder=True,
                       payload=FilePayload("drop", b"x")))
        assert not build_plan(store, "docs")

    def test_message_sorted_not_insertion_order(self):
        store = FlatStore()
        store.ingest([blob("root/z.txt")], "root")
        store.get("z.txt").is_deleted = True
        store.put(new_file("a.txt"))
        plan = build_plan(store, "root")
        assert plan.message == "Create: root/a.txt\nDelete: root/z.txt"
        # actions keep store order
        assert [a.action for a in plan.actions] == [CommitActionKind.DELETE, CommitActionKind.CREATE]

    def test_empty_root(self):
        store = FlatStore()
        store.ingest([blob("a.txt")], "")
        store.get("a.txt").is_deleted = True
        assert build_plan(store, "").message == "Delete: a.txt"

    def test_scenario(self):
        store = FlatStore()
        store.ingest([blob("a/b.txt"), tree("a")], "root")
        store.get("a/b.txt").is_deleted = True
        plan = build_plan(store, "root")
        assert [a.to_dict() for a in plan.actions] == [
            {"action": "delete", "file_path": "root/a/b.txt"},
        ]
        assert plan.message == "Delete: root/a/b.txt"


class TestCommitAction:
    def test_to_dict_omits_unset(self):
        action = CommitAction(CommitActionKind.CREATE, "a.txt", content="eA==", encoding="base64")
        assert action.to_dict() == {
            "action": "create",
            "file_path": "a.txt",
            "content": "eA==",
            "encoding": "base64",
        }

    def test_to_dict_move(self):
        action = CommitAction(CommitActionKind.MOVE, "b.txt", previous_path="a.txt")
        assert action.to_dict() == {"action": "move", "file_path": "b.txt", "previous_path": "a.txt"}


class TestCommitPlan:
    def test_len_and_bool(self):
        plan = CommitPlan([CommitAction(CommitActionKind.DELETE, "a")], "Delete: a")
        assert len(plan) == 1
        assert plan
