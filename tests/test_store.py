"""Tests for the flat-map store."""

from conftest import blob, tree

from gitexplorer import FlatStore, Node, NodeKind


class TestIngest:
    def test_rekeys_by_root_relative_path(self, listing):
        store = FlatStore()
        store.ingest(listing, "docs")
        assert list(store) == ["readme.md", "guides", "guides/intro.md", "guides/setup.md"]

    def test_parent_paths(self, listing):
        store = FlatStore()
        store.ingest(listing, "docs")
        assert store.get("readme.md").parent_path == ""
        assert store.get("guides/intro.md").parent_path == "guides"

    def test_fields(self, listing):
        store = FlatStore()
        store.ingest(listing, "docs")
        node = store.get("guides")
        assert node.kind is NodeKind.FOLDER
        assert node.id == "2" * 40
        assert node.mode == "040000"
        assert node.name == "guides"
        assert not node.is_new and not node.is_deleted

    def test_unprefixed_paths_are_kept(self):
        store = FlatStore()
        store.ingest([blob("a/b.txt"), tree("a")], "root")
        assert set(store) == {"a/b.txt", "a"}

    def test_replaces_previous_contents(self, listing):
        store = FlatStore()
        store.put(Node("x", NodeKind.FILE, "x", "x", is_new=True))
        store.hover_target = ""
        store.ingest(listing, "docs")
        assert "x" not in store
        assert store.hover_target is None

    def test_empty_listing(self):
        store = FlatStore()
        store.ingest([], "docs")
        assert len(store) == 0
        assert store.baseline == {}

    def test_skips_entry_for_root_itself(self):
        store = FlatStore()
        store.ingest([tree("/"), blob("a.txt")], "")
        assert list(store) == ["a.txt"]

    def test_skips_entry_named_after_root(self):
        store = FlatStore()
        store.ingest([tree("docs"), blob("docs/a.txt"), tree("docs/docs")], "docs")
        assert list(store) == ["a.txt", "docs"]
        assert store.get("docs").parent_path == ""


class TestRemoveSubtree:
    def test_removes_folder_and_descendants(self, listing):
        store = FlatStore()
        store.ingest(listing, "docs")
        removed = store.remove_subtree("guides")
        assert sorted(n.path for n in removed) == ["guides", "guides/intro.md", "guides/setup.md"]
        assert list(store) == ["readme.md"]

    def test_sibling_with_shared_prefix_is_kept(self):
        store = FlatStore()
        store.ingest([tree("a"), tree("ab"), blob("ab/x.txt")], "")
        store.remove_subtree("a")
        assert list(store) == ["ab", "ab/x.txt"]

    def test_unknown_path(self, listing):
        store = FlatStore()
        store.ingest(listing, "docs")
        assert store.remove_subtree("nope") == []
        assert len(store) == 4


class TestBaseline:
    def test_baseline_matches_ingest(self, listing):
        store = FlatStore()
        store.ingest(listing, "docs")
        assert store.baseline == store.nodes

    def test_mutating_store_leaves_baseline(self, listing):
        store = FlatStore()
        store.ingest(listing, "docs")
        store.get("readme.md").is_deleted = True
        store.remove("guides/intro.md")
        store.put(Node("n", NodeKind.FILE, "new.txt", "new.txt", is_new=True))
        assert store.baseline["readme.md"].is_deleted is False
        assert "guides/intro.md" in store.baseline
        assert "new.txt" not in store.baseline

    def test_reset_restores_copy(self, listing):
        store = FlatStore()
        store.ingest(listing, "docs")
        store.get("readme.md").is_deleted = True
        store.reset()
        assert store.nodes == store.baseline
        # reset hands out a fresh copy, not the baseline itself
        store.get("readme.md").is_deleted = True
        assert store.baseline["readme.md"].is_deleted is False

    def test_reset_clears_hover(self, listing):
        store = FlatStore()
        store.ingest(listing, "docs")
        store.hover_target = "guides"
        store.reset()
        assert store.hover_target is None


class TestPendingNodes:
    def test_lists_new_and_deleted(self, listing):
        store = FlatStore()
        store.ingest(listing, "docs")
        store.get("readme.md").is_deleted = True
        store.put(Node("n", NodeKind.FILE, "new.txt", "new.txt", is_new=True))
        assert [n.path for n in store.pending_nodes()] == ["readme.md", "new.txt"]

    def test_clean_store(self, listing):
        store = FlatStore()
        store.ingest(listing, "docs")
        assert store.pending_nodes() == []
