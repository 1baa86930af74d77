class TemplateEngineError(Exception):
    """Base exception for the invoice template engine."""


class InvalidPathError(TemplateEngineError, ValueError):
    """A config path is empty or does not address a field of TemplateConfig."""


class InvalidValueError(TemplateEngineError, ValueError):
    """A value assigned through a config path failed schema validation."""


class TemplateNotFoundError(TemplateEngineError, LookupError):
    pass


class TemplateUnavailableError(TemplateEngineError):
    """The template could not be loaded; nothing is rendered from partial data."""


class PresetModificationError(TemplateEngineError):
    """Presets are read-only; edits must go through duplicate()."""


class TemplateSaveError(TemplateEngineError):
    pass


class InvalidStateError(TemplateEngineError):
    pass


class SaveInProgressError(InvalidStateError):
    pass
