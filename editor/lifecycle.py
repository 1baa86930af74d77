"""Template lifecycle controller: load, live-edit, reset and save one template.

States::

    LOADING ──> CLEAN <──> DIRTY ──> SAVING ──> CLEAN
       │                     ^          │
       v                     └──────────┘  (save failed, edits kept)
    UNAVAILABLE

Saving a preset never touches the preset: the live config is sent to the
store's ``duplicate`` as a full snapshot and the editor switches over to the
custom template that comes back. Saving a custom template calls ``update``
with the full config, so a retried save is idempotent.
"""
import logging
from enum import Enum
from typing import Any

from markupsafe import Markup

from editor.path_mutator import set_at_path
from editor.store import TemplateStore
from models.invoice import InvoiceData
from models.template import Template
from models.template_config import TemplateConfig
from pipeline.compose import render
from utils.exceptions import (
    InvalidStateError,
    SaveInProgressError,
    TemplateSaveError,
    TemplateUnavailableError,
)
from utils.mock_invoice import generate_mock_invoice

logger = logging.getLogger(__name__)


class EditorState(str, Enum):
    LOADING = "loading"
    UNAVAILABLE = "unavailable"
    CLEAN = "clean"
    DIRTY = "dirty"
    SAVING = "saving"


class TemplateEditor:
    def __init__(
        self,
        store: TemplateStore,
        template_id: str,
        preview_invoice: InvoiceData | None = None,
        preview_scale: float = 1.0,
        custom_suffix: str = " (Custom)",
    ):
        self.store = store
        self.template_id = template_id
        self.preview_invoice = preview_invoice or generate_mock_invoice()
        self.preview_scale = preview_scale
        self.custom_suffix = custom_suffix

        self.state = EditorState.LOADING
        self.template: Template | None = None
        self.saved_config: TemplateConfig | None = None
        self.live_config: TemplateConfig | None = None
        self.last_error: Exception | None = None

    # -- state queries -----------------------------------------------------

    @property
    def is_dirty(self) -> bool:
        return self.state == EditorState.DIRTY

    @property
    def can_save(self) -> bool:
        return self.state == EditorState.DIRTY

    @property
    def can_reset(self) -> bool:
        return self.state == EditorState.DIRTY

    # -- transitions -------------------------------------------------------

    async def load(self) -> Template:
        """Fetch the template and start a clean editing session.

        Raises TemplateUnavailableError when the store cannot provide it.
        """
        self.state = EditorState.LOADING
        try:
            template = await self.store.fetch_by_id(self.template_id)
        except Exception as exc:
            self.state = EditorState.UNAVAILABLE
            self.last_error = exc
            logger.error("Failed to load template %s: %s", self.template_id, exc)
            raise TemplateUnavailableError(f"Template {self.template_id} is unavailable") from exc

        self._adopt(template)
        logger.info("Loaded %s template %s (%s)", template.type, template.id, template.config.name)
        return template

    def change(self, path: str, value: Any) -> TemplateConfig:
        """Apply one edit to the live config; the session becomes dirty if anything changed."""
        if self.state not in (EditorState.CLEAN, EditorState.DIRTY):
            raise InvalidStateError(f"Cannot edit while {self.state.value}")
        updated = set_at_path(self.live_config, path, value)
        if updated is not self.live_config:
            self.live_config = updated
            self.state = EditorState.DIRTY
            logger.debug("Edited %s = %r", path, value)
        return self.live_config

    def reset(self) -> TemplateConfig:
        """Discard unsaved edits and return to the last loaded or saved config."""
        if self.state != EditorState.DIRTY:
            raise InvalidStateError(f"Nothing to reset while {self.state.value}")
        self.live_config = self.saved_config
        self.last_error = None
        self.state = EditorState.CLEAN
        logger.info("Reset template %s to its saved config", self.template_id)
        return self.live_config

    async def save(self) -> Template:
        """Persist the live config: duplicate a preset, update a custom template.

        Raises SaveInProgressError if a save is already running,
        InvalidStateError if there is nothing to save and TemplateSaveError
        when the store rejects the save (the session stays dirty).
        """
        if self.state == EditorState.SAVING:
            raise SaveInProgressError(f"A save of template {self.template_id} is already in progress")
        if self.state != EditorState.DIRTY:
            raise InvalidStateError(f"Nothing to save while {self.state.value}")

        self.state = EditorState.SAVING
        snapshot = self.live_config
        template = self.template
        try:
            if template.is_preset:
                saved = await self.store.duplicate(template.id, {
                    "name": f"{template.config.name}{self.custom_suffix}",
                    "modifications": snapshot.to_document(),
                })
            else:
                saved = await self.store.update(template.id, {"config": snapshot.to_document()})
        except Exception as exc:
            self.state = EditorState.DIRTY
            self.last_error = exc
            logger.error("Failed to save template %s: %s", template.id, exc)
            raise TemplateSaveError(f"Saving template {template.id} failed: {exc}") from exc

        previous_id = template.id
        self._adopt(saved)
        if saved.id != previous_id:
            logger.info("Saved preset %s as new custom template %s", previous_id, saved.id)
        else:
            logger.info("Saved custom template %s", saved.id)
        return saved

    # -- preview -----------------------------------------------------------

    def preview(self, scale: float | None = None) -> Markup:
        """Render the live config against the preview invoice."""
        if self.live_config is None:
            raise TemplateUnavailableError("No template loaded")
        return render(self.preview_invoice, self.live_config, scale=self.preview_scale if scale is None else scale)

    # -- internals ---------------------------------------------------------

    def _adopt(self, template: Template) -> None:
        self.template = template
        self.template_id = template.id
        self.saved_config = template.config
        self.live_config = template.config
        self.last_error = None
        self.state = EditorState.CLEAN
