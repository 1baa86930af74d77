from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.template_config import TemplateConfig

TemplateType = Literal["preset", "custom"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Template(BaseModel):
    """A persisted template: a TemplateConfig plus store-owned metadata.

    ``type`` is fixed at creation. A preset is never updated in place; editing
    one produces a new custom template via the store's duplicate().
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    type: TemplateType = Field(frozen=True)
    tenant_id: str | None = None
    is_default: bool = False
    is_public: bool = False
    created_by: str | None = None
    usage_count: int = Field(default=0, ge=0)
    last_used_at: datetime | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    config: TemplateConfig = Field(default_factory=TemplateConfig)

    @property
    def is_preset(self) -> bool:
        return self.type == "preset"
