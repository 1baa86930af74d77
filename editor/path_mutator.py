"""Path-addressed, copy-on-write updates of a TemplateConfig.

A path is a dot-separated list of camelCase field names, e.g.
``"table.header.textTransform"``. ``set_at_path`` copies every model on the
way from the root to the addressed field and shares all other subtrees with
the input, so ``old.table is new.table`` tells a caller whether the table
section changed.

``CONFIG_PATHS`` enumerates every addressable path once, generated from the
schema. Editor controls bind to entries of this table rather than to ad-hoc
strings.
"""
from dataclasses import dataclass
from types import NoneType, UnionType
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic.fields import FieldInfo

from models.template_config import TemplateConfig
from utils.exceptions import InvalidPathError, InvalidValueError

_adapters: dict[tuple[type[BaseModel], str], TypeAdapter] = {}


@dataclass(frozen=True)
class ConfigPath:
    path: str
    annotation: Any
    record: type[BaseModel] | None  # set when the path addresses a sub-record
    optional: bool

    @property
    def is_leaf(self) -> bool:
        return self.record is None


def set_at_path(config: TemplateConfig, path: str, value: Any) -> TemplateConfig:
    """Return a copy of ``config`` with the field at ``path`` set to ``value``.

    Absent optional records on the way (e.g. ``header.borderBottom``) are
    created with their defaults first. ``config`` itself is never modified.
    Setting a field to the value it already holds returns ``config`` unchanged.

    Raises InvalidPathError for an empty or unknown path, InvalidValueError
    when ``value`` does not fit the field.
    """
    return _set(config, _split(path), value, path)


def get_at_path(config: TemplateConfig, path: str) -> Any:
    """Return the value at ``path``; None if an optional record on the way is absent."""
    # Segments resolve against the schema, so a bad path fails even below an
    # absent record.
    model_cls: type[BaseModel] | None = type(config)
    node: Any = config
    for segment in _split(path):
        if model_cls is None:
            raise InvalidPathError(f"'{path}': cannot descend into a leaf value at '{segment}'")
        name, field = _resolve_field(model_cls, segment, path)
        model_cls = _record_type(field.annotation)
        node = None if node is None else getattr(node, name)
    return node


def leaf_paths() -> list[str]:
    return [p.path for p in CONFIG_PATHS.values() if p.is_leaf]


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _split(path: str) -> list[str]:
    if not isinstance(path, str) or not path.strip():
        raise InvalidPathError("Config path must be a non-empty string")
    segments = path.split(".")
    if any(not s for s in segments):
        raise InvalidPathError(f"'{path}': empty path segment")
    return segments


def _set(node: BaseModel, segments: list[str], value: Any, path: str) -> BaseModel:
    model_cls = type(node)
    name, field = _resolve_field(model_cls, segments[0], path)
    current = getattr(node, name)

    if len(segments) == 1:
        new_value = _validate(model_cls, name, field, value, path)
        if new_value == current and type(new_value) is type(current):
            return node
        return node.model_copy(update={name: new_value})

    child_cls = _record_type(field.annotation)
    if child_cls is None:
        raise InvalidPathError(f"'{path}': '{segments[0]}' is a leaf, not a record")
    child = current if current is not None else child_cls()
    new_child = _set(child, segments[1:], value, path)
    if new_child is current:
        return node
    return node.model_copy(update={name: new_child})


def _resolve_field(model_cls: type[BaseModel], segment: str, path: str) -> tuple[str, FieldInfo]:
    fields = model_cls.model_fields
    if segment in fields:
        return segment, fields[segment]
    for name, field in fields.items():
        if field.alias == segment:
            return name, field
    raise InvalidPathError(f"'{path}': {model_cls.__name__} has no field '{segment}'")


def _validate(model_cls: type[BaseModel], name: str, field: FieldInfo, value: Any, path: str) -> Any:
    key = (model_cls, name)
    adapter = _adapters.get(key)
    if adapter is None:
        adapter = _adapters[key] = TypeAdapter(field.annotation)
    try:
        return adapter.validate_python(value)
    except ValidationError as exc:
        raise InvalidValueError(f"'{path}': invalid value {value!r}: {exc.errors()[0]['msg']}") from exc


def _record_type(annotation: Any) -> type[BaseModel] | None:
    """The BaseModel inside ``annotation`` (unwrapping ``X | None``), else None."""
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    if get_origin(annotation) in (Union, UnionType):
        members = [a for a in get_args(annotation) if a is not NoneType]
        if len(members) == 1:
            return _record_type(members[0])
    return None


def _is_optional(annotation: Any) -> bool:
    return get_origin(annotation) in (Union, UnionType) and NoneType in get_args(annotation)


def _enumerate(model_cls: type[BaseModel], prefix: str = "") -> dict[str, ConfigPath]:
    paths: dict[str, ConfigPath] = {}
    for name, field in model_cls.model_fields.items():
        path = f"{prefix}{field.alias or name}"
        record = _record_type(field.annotation)
        paths[path] = ConfigPath(
            path=path,
            annotation=field.annotation,
            record=record,
            optional=_is_optional(field.annotation),
        )
        if record is not None:
            paths.update(_enumerate(record, prefix=f"{path}."))
    return paths


CONFIG_PATHS: dict[str, ConfigPath] = _enumerate(TemplateConfig)
