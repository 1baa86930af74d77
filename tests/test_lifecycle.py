"""Tests for the template lifecycle controller."""
import asyncio
from unittest.mock import AsyncMock

import pytest

from editor.lifecycle import EditorState, TemplateEditor
from models.template import Template
from models.template_config import TemplateConfig
from utils.exceptions import (
    InvalidPathError,
    InvalidStateError,
    SaveInProgressError,
    TemplateNotFoundError,
    TemplateSaveError,
    TemplateUnavailableError,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _preset(config=None) -> Template:
    config = config or TemplateConfig(name="Modern Corporate")
    return Template(id="modern_corporate", name=config.name, type="preset", is_public=True, config=config)


def _custom(template_id="custom-1", config=None) -> Template:
    config = config or TemplateConfig(name="Mine")
    return Template(id=template_id, name=config.name, type="custom", tenant_id="tenant-1", config=config)


def _mock_store(template: Template) -> AsyncMock:
    store = AsyncMock()
    store.fetch_by_id.return_value = template
    return store


async def _loaded(store, template_id, **kwargs) -> TemplateEditor:
    editor = TemplateEditor(store, template_id, **kwargs)
    await editor.load()
    return editor


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

class TestLoad:
    async def test_load_starts_clean(self):
        editor = await _loaded(_mock_store(_preset()), "modern_corporate")
        assert editor.state == EditorState.CLEAN
        assert editor.live_config is editor.saved_config
        assert not editor.is_dirty
        assert not editor.can_save
        assert not editor.can_reset

    async def test_initial_state_is_loading(self):
        assert TemplateEditor(AsyncMock(), "x").state == EditorState.LOADING

    async def test_load_failure_is_unavailable(self):
        store = AsyncMock()
        store.fetch_by_id.side_effect = TemplateNotFoundError("Template not found: x")
        editor = TemplateEditor(store, "x")
        with pytest.raises(TemplateUnavailableError):
            await editor.load()
        assert editor.state == EditorState.UNAVAILABLE
        assert isinstance(editor.last_error, TemplateNotFoundError)
        assert editor.live_config is None

    async def test_unavailable_editor_cannot_preview_or_edit(self):
        store = AsyncMock()
        store.fetch_by_id.side_effect = RuntimeError("offline")
        editor = TemplateEditor(store, "x")
        with pytest.raises(TemplateUnavailableError):
            await editor.load()
        with pytest.raises(TemplateUnavailableError):
            editor.preview()
        with pytest.raises(InvalidStateError):
            editor.change("colors.primary", "#FF0000")


# ---------------------------------------------------------------------------
# Editing
# ---------------------------------------------------------------------------

class TestChange:
    async def test_change_marks_dirty(self):
        editor = await _loaded(_mock_store(_custom()), "custom-1")
        editor.change("colors.primary", "#FF0000")
        assert editor.state == EditorState.DIRTY
        assert editor.is_dirty and editor.can_save and editor.can_reset
        assert editor.live_config.colors.primary == "#FF0000"

    async def test_saved_snapshot_untouched(self):
        editor = await _loaded(_mock_store(_custom()), "custom-1")
        saved = editor.saved_config
        editor.change("colors.primary", "#FF0000")
        assert editor.saved_config is saved
        assert saved.colors.primary == "#3B82F6"

    async def test_no_op_change_stays_clean(self):
        editor = await _loaded(_mock_store(_custom()), "custom-1")
        editor.change("colors.primary", editor.live_config.colors.primary)
        assert editor.state == EditorState.CLEAN

    async def test_invalid_path_leaves_state(self):
        editor = await _loaded(_mock_store(_custom()), "custom-1")
        with pytest.raises(InvalidPathError):
            editor.change("colors.nope", "#FF0000")
        assert editor.state == EditorState.CLEAN

    async def test_reset_restores_snapshot(self):
        editor = await _loaded(_mock_store(_custom()), "custom-1")
        saved = editor.saved_config
        editor.change("colors.primary", "#FF0000")
        editor.change("layout.sectionGap", 12)
        assert editor.reset() is saved
        assert editor.live_config is saved
        assert editor.state == EditorState.CLEAN

    async def test_reset_requires_dirty(self):
        editor = await _loaded(_mock_store(_custom()), "custom-1")
        with pytest.raises(InvalidStateError):
            editor.reset()

    async def test_preview_follows_live_config(self):
        editor = await _loaded(_mock_store(_custom()), "custom-1")
        editor.change("footer.thankYou.text", "Cheers")
        assert "Cheers" in editor.preview()

    async def test_preview_scale(self):
        editor = await _loaded(_mock_store(_custom()), "custom-1", preview_scale=0.5)
        assert "transform: scale(0.5)" in editor.preview()
        assert "transform: scale" not in editor.preview(scale=1.0)


# ---------------------------------------------------------------------------
# Saving a preset
# ---------------------------------------------------------------------------

class TestSavePreset:
    async def test_preset_save_duplicates_and_never_updates(self):
        store = _mock_store(_preset())
        store.duplicate.return_value = _custom("new-1", TemplateConfig(name="Modern Corporate (Custom)"))
        editor = await _loaded(store, "modern_corporate")

        editor.change("colors.primary", "#FF0000")
        await editor.save()

        store.duplicate.assert_awaited_once()
        store.update.assert_not_awaited()
        template_id, request = store.duplicate.await_args.args
        assert template_id == "modern_corporate"
        assert request["name"] == "Modern Corporate (Custom)"
        assert request["modifications"]["colors"]["primary"] == "#FF0000"

    async def test_modifications_are_full_snapshot(self):
        store = _mock_store(_preset())
        store.duplicate.return_value = _custom("new-1")
        editor = await _loaded(store, "modern_corporate")
        editor.change("colors.primary", "#FF0000")
        expected = editor.live_config.to_document()
        await editor.save()
        assert store.duplicate.await_args.args[1]["modifications"] == expected

    async def test_editor_adopts_new_custom_template(self):
        created = _custom("new-1", TemplateConfig(name="Modern Corporate (Custom)"))
        store = _mock_store(_preset())
        store.duplicate.return_value = created
        editor = await _loaded(store, "modern_corporate")
        editor.change("colors.primary", "#FF0000")
        await editor.save()

        assert editor.template_id == "new-1"
        assert editor.template.type == "custom"
        assert editor.state == EditorState.CLEAN
        assert editor.saved_config == created.config

        # the next save goes through update on the new template
        store.update.return_value = created
        editor.change("layout.sectionGap", 12)
        await editor.save()
        store.update.assert_awaited_once()
        assert store.update.await_args.args[0] == "new-1"
        assert store.duplicate.await_count == 1

    async def test_custom_suffix_configurable(self):
        store = _mock_store(_preset())
        store.duplicate.return_value = _custom("new-1")
        editor = await _loaded(store, "modern_corporate", custom_suffix=" v2")
        editor.change("colors.primary", "#FF0000")
        await editor.save()
        assert store.duplicate.await_args.args[1]["name"] == "Modern Corporate v2"

    async def test_against_in_memory_store(self, store, presets):
        editor = await _loaded(store, "modern_corporate")
        editor.change("colors.primary", "#FF0000")
        saved = await editor.save()

        assert saved.type == "custom"
        assert saved.name == "Modern Corporate (Custom)"
        assert saved.config.colors.primary == "#FF0000"
        assert saved.config.table == presets["modern_corporate"].table
        preset = await store.fetch_by_id("modern_corporate")
        assert preset.config == presets["modern_corporate"]


# ---------------------------------------------------------------------------
# Saving a custom template
# ---------------------------------------------------------------------------

class TestSaveCustom:
    async def test_custom_save_updates_in_place(self):
        template = _custom()
        store = _mock_store(template)
        store.update.return_value = template
        editor = await _loaded(store, "custom-1")
        editor.change("layout.pageSize", "Letter")
        await editor.save()

        store.duplicate.assert_not_awaited()
        template_id, changes = store.update.await_args.args
        assert template_id == "custom-1"
        assert changes["config"]["layout"]["pageSize"] == "Letter"

    async def test_save_requires_dirty(self):
        editor = await _loaded(_mock_store(_custom()), "custom-1")
        with pytest.raises(InvalidStateError):
            await editor.save()

    async def test_failed_save_keeps_edits(self):
        store = _mock_store(_custom())
        store.update.side_effect = RuntimeError("503")
        editor = await _loaded(store, "custom-1")
        editor.change("colors.primary", "#FF0000")

        with pytest.raises(TemplateSaveError) as exc_info:
            await editor.save()

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert editor.state == EditorState.DIRTY
        assert editor.live_config.colors.primary == "#FF0000"
        assert isinstance(editor.last_error, RuntimeError)

    async def test_retry_after_failure(self):
        template = _custom()
        store = _mock_store(template)
        store.update.side_effect = [RuntimeError("503"), template]
        editor = await _loaded(store, "custom-1")
        editor.change("colors.primary", "#FF0000")
        with pytest.raises(TemplateSaveError):
            await editor.save()
        await editor.save()
        assert editor.state == EditorState.CLEAN
        first, second = store.update.await_args_list
        assert first.args == second.args

    async def test_concurrent_save_rejected(self):
        template = _custom()
        store = _mock_store(template)
        release = asyncio.Event()

        async def slow_update(template_id, changes):
            await release.wait()
            return template

        store.update.side_effect = slow_update
        editor = await _loaded(store, "custom-1")
        editor.change("colors.primary", "#FF0000")

        first = asyncio.create_task(editor.save())
        await asyncio.sleep(0)
        assert editor.state == EditorState.SAVING
        with pytest.raises(SaveInProgressError):
            await editor.save()
        with pytest.raises(InvalidStateError):
            editor.change("colors.primary", "#00FF00")

        release.set()
        await first
        assert store.update.await_count == 1
        assert editor.state == EditorState.CLEAN
