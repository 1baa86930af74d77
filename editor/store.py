"""Template store — the persistence boundary of the editor.

``TemplateStore`` is the contract the lifecycle controller talks to. The
production implementation lives behind a REST API outside this package;
``InMemoryTemplateStore`` implements the same rules in process for the CLI and
the tests:

  - presets are public, tenant-independent and read-only;
  - ``update`` merges the given config sections over the stored ones;
  - ``duplicate`` creates a custom template from the source config with the
    ``modifications`` sections laid over it.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Protocol

from models.template import Template
from models.template_config import TemplateConfig
from utils.exceptions import PresetModificationError, TemplateNotFoundError

logger = logging.getLogger(__name__)


class TemplateStore(Protocol):
    async def fetch_by_id(self, template_id: str) -> Template: ...

    async def update(self, template_id: str, changes: dict[str, Any]) -> Template: ...

    async def duplicate(self, template_id: str, request: dict[str, Any]) -> Template: ...

    async def fetch_presets(self) -> list[Template]: ...

    async def fetch_custom(self) -> list[Template]: ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _merge_config(base: TemplateConfig, sections: dict[str, Any] | None) -> TemplateConfig:
    """Lay top-level ``sections`` (camelCase document) over ``base`` and re-validate."""
    document = base.to_document()
    document.update(sections or {})
    return TemplateConfig.model_validate(document)


class InMemoryTemplateStore:
    """Process-local TemplateStore for one tenant."""

    def __init__(self, tenant_id: str, presets: dict[str, TemplateConfig] | None = None):
        self.tenant_id = tenant_id
        self._templates: dict[str, Template] = {}
        if presets:
            self.seed_presets(presets)

    # -- queries -----------------------------------------------------------

    async def fetch_by_id(self, template_id: str) -> Template:
        return self._visible(template_id).model_copy()

    async def fetch_presets(self) -> list[Template]:
        presets = [t for t in self._templates.values() if t.type == "preset" and t.is_public]
        return [t.model_copy() for t in sorted(presets, key=lambda t: t.name)]

    async def fetch_custom(self) -> list[Template]:
        custom = self._owned()
        custom.sort(key=lambda t: (t.is_default, t.updated_at), reverse=True)
        return [t.model_copy() for t in custom]

    async def fetch_all(self) -> list[Template]:
        """Public presets and the tenant's custom templates, defaults and most used first."""
        visible = [t for t in self._templates.values() if t.type == "preset" and t.is_public]
        visible += self._owned()
        visible.sort(key=lambda t: (t.is_default, t.usage_count, t.created_at), reverse=True)
        return [t.model_copy() for t in visible]

    # -- commands ----------------------------------------------------------

    def seed_presets(self, presets: dict[str, TemplateConfig]) -> list[Template]:
        """Replace every preset with ``presets``; preset ids are their keys."""
        for template_id in [t.id for t in self._templates.values() if t.type == "preset"]:
            del self._templates[template_id]
        seeded = []
        for key, config in presets.items():
            template = Template(id=key, name=config.name, type="preset", is_public=True, config=config)
            self._templates[key] = template
            seeded.append(template)
        logger.info("Seeded %d preset template(s)", len(seeded))
        return seeded

    async def create(self, name: str, config: TemplateConfig, is_default: bool = False) -> Template:
        template = Template(
            id=uuid.uuid4().hex,
            name=name,
            type="custom",
            tenant_id=self.tenant_id,
            is_default=is_default,
            config=config,
        )
        self._templates[template.id] = template
        if is_default:
            self._clear_other_defaults(template.id)
        logger.info("Created custom template %s (%s)", template.id, name)
        return template.model_copy()

    async def update(self, template_id: str, changes: dict[str, Any]) -> Template:
        template = self._custom(template_id, action="update")
        updates: dict[str, Any] = {"updated_at": _now()}
        if changes.get("name"):
            updates["name"] = changes["name"]
        if changes.get("config") is not None:
            updates["config"] = _merge_config(template.config, changes["config"])
        if changes.get("isDefault") is not None:
            updates["is_default"] = bool(changes["isDefault"])
        updated = template.model_copy(update=updates)
        self._templates[template_id] = updated
        if updated.is_default:
            self._clear_other_defaults(template_id)
        logger.info("Updated template %s", template_id)
        return updated.model_copy()

    async def duplicate(self, template_id: str, request: dict[str, Any]) -> Template:
        source = self._visible(template_id)
        name = request.get("name") or f"{source.name} (Copy)"
        config = _merge_config(source.config, request.get("modifications"))
        copy = Template(
            id=uuid.uuid4().hex,
            name=name,
            type="custom",
            tenant_id=self.tenant_id,
            is_default=False,
            is_public=False,
            config=config,
        )
        self._templates[copy.id] = copy
        logger.info("Duplicated template %s -> %s (%s)", template_id, copy.id, name)
        return copy.model_copy()

    async def delete(self, template_id: str) -> None:
        self._custom(template_id, action="delete")
        del self._templates[template_id]
        logger.info("Deleted template %s", template_id)

    async def set_default(self, template_id: str) -> Template:
        template = self._custom(template_id, action="set as default")
        updated = template.model_copy(update={"is_default": True, "updated_at": _now()})
        self._templates[template_id] = updated
        self._clear_other_defaults(template_id)
        return updated.model_copy()

    async def track_usage(self, template_id: str) -> None:
        template = self._templates.get(template_id)
        if template is None:
            logger.warning("Usage tracked for unknown template %s", template_id)
            return
        self._templates[template_id] = template.model_copy(
            update={"usage_count": template.usage_count + 1, "last_used_at": _now()}
        )

    # -- helpers -----------------------------------------------------------

    def _owned(self) -> list[Template]:
        return [t for t in self._templates.values() if t.type == "custom" and t.tenant_id == self.tenant_id]

    def _visible(self, template_id: str) -> Template:
        template = self._templates.get(template_id)
        if template is None:
            raise TemplateNotFoundError(f"Template not found: {template_id}")
        if template.type == "preset" and template.is_public:
            return template
        if template.type == "custom" and template.tenant_id == self.tenant_id:
            return template
        raise TemplateNotFoundError(f"Template not found: {template_id}")

    def _custom(self, template_id: str, action: str) -> Template:
        template = self._visible(template_id)
        if template.type == "preset":
            raise PresetModificationError(f"Cannot {action} preset template {template_id}")
        return template

    def _clear_other_defaults(self, template_id: str) -> None:
        for other in self._owned():
            if other.id != template_id and other.is_default:
                self._templates[other.id] = other.model_copy(update={"is_default": False})
