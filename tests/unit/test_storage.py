"""Unit tests for the selection store."""

import pytest

from spotless_applier.models import SelectionState
from spotless_applier.storage import LocalSelectionStore, SelectionStore


@pytest.mark.asyncio
class TestLocalSelectionStore:
    """Tests for local filesystem storage."""

    async def test_save_and_load(self, temp_dir):
        """Test remembering a selection."""
        store = LocalSelectionStore(temp_dir)
        state = SelectionState(project_path="/work/shop", selected_modules=["lib", "app"])

        await store.save(state)
        loaded = await store.load("/work/shop")

        assert loaded is not None
        assert loaded.selected_modules == ["lib", "app"]
        assert not loaded.apply_to_root

    async def test_load_missing(self, temp_dir):
        store = LocalSelectionStore(temp_dir)
        assert await store.load("/work/none") is None

    async def test_save_replaces(self, temp_dir):
        store = LocalSelectionStore(temp_dir)
        await store.save(SelectionState(project_path="/work/shop", selected_modules=["app"]))
        await store.save(SelectionState(project_path="/work/shop", apply_to_root=True))

        loaded = await store.load("/work/shop")
        assert loaded.selected_modules == []
        assert loaded.apply_to_root

    async def test_projects_are_separate(self, temp_dir):
        store = LocalSelectionStore(temp_dir)
        await store.save(SelectionState(project_path="/work/a", selected_modules=["x"]))
        await store.save(SelectionState(project_path="/work/b", selected_modules=["y"]))

        assert (await store.load("/work/a")).selected_modules == ["x"]
        assert (await store.load("/work/b")).selected_modules == ["y"]

    async def test_corrupt_document_is_ignored(self, temp_dir):
        """Test that an unreadable document counts as no selection."""
        store = LocalSelectionStore(temp_dir)
        path = temp_dir / "selections" / f"{SelectionStore.project_key('/work/shop')}.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json")

        assert await store.load("/work/shop") is None

    async def test_document_for_other_project_is_ignored(self, temp_dir):
        store = LocalSelectionStore(temp_dir)
        path = temp_dir / "selections" / f"{SelectionStore.project_key('/work/shop')}.json"
        path.parent.mkdir(parents=True)
        path.write_text(SelectionState(project_path="/work/other").model_dump_json())

        assert await store.load("/work/shop") is None

    async def test_clear(self, temp_dir):
        """Test forgetting a selection."""
        store = LocalSelectionStore(temp_dir)
        await store.save(SelectionState(project_path="/work/shop", selected_modules=["app"]))

        assert await store.clear("/work/shop")
        assert await store.load("/work/shop") is None

        # Clearing again reports nothing was there
        assert not await store.clear("/work/shop")


class TestProjectKey:
    def test_stable_and_distinct(self):
        assert SelectionStore.project_key("/a") == SelectionStore.project_key("/a")
        assert SelectionStore.project_key("/a") != SelectionStore.project_key("/b")
        assert len(SelectionStore.project_key("/a")) == 16
