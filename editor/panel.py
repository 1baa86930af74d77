"""Customization panel — form controls bound to config paths.

The panel knows nothing about invoices. Each control names a path from
``CONFIG_PATHS``; user input is coerced to the field's type and handed to a
single ``on_change(path, value)`` callback, which is expected to route it
through ``set_at_path`` (the lifecycle controller's ``change`` does exactly
that).
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Literal

from markupsafe import Markup

from editor.path_mutator import CONFIG_PATHS, get_at_path
from models.template_config import TemplateConfig
from pipeline.sections import environment
from utils.exceptions import InvalidPathError, InvalidValueError

logger = logging.getLogger(__name__)

ControlKind = Literal["select", "number", "range", "color", "checkbox", "text", "toggle-record"]

_TRUE_STRINGS = {"1", "true", "on", "yes"}
_FALSE_STRINGS = {"", "0", "false", "off", "no"}


@dataclass(frozen=True)
class Control:
    path: str
    label: str
    kind: ControlKind
    options: tuple[tuple[Any, str], ...] = ()  # (value, label) for selects
    min: int | None = None
    max: int | None = None
    step: int | None = None
    fallback: Any = None  # shown when the field is unset


@dataclass(frozen=True)
class BoundControl:
    control: Control
    value: Any

    @property
    def checked(self) -> bool:
        return bool(self.value)


@dataclass(frozen=True)
class PanelSection:
    id: str
    label: str
    controls: tuple[Control, ...] = field(default_factory=tuple)


def _select(path: str, label: str, *options: tuple[Any, str]) -> Control:
    return Control(path=path, label=label, kind="select", options=options)


PANEL_SECTIONS: tuple[PanelSection, ...] = (
    PanelSection("header", "Header", (
        _select(
            "header.layout", "Header Layout",
            ("logo-left", "Logo Left"), ("logo-center", "Logo Center"),
            ("logo-right", "Logo Right"), ("split", "Split"),
        ),
        Control("header.padding", "Padding (px)", "number", min=0),
        Control("header.backgroundColor", "Background Color", "color", fallback="#ffffff"),
        Control("header.borderBottom", "Show Bottom Border", "toggle-record"),
    )),
    PanelSection("typography", "Typography", (
        _select(
            "fonts.heading.family", "Heading Font",
            ("Inter", "Inter"), ("Georgia", "Georgia"), ("Montserrat", "Montserrat"),
            ("Roboto", "Roboto"), ("Open Sans", "Open Sans"), ("Playfair Display", "Playfair Display"),
        ),
        Control("fonts.heading.size", "Heading Size", "range", min=20, max=48),
        _select(
            "fonts.heading.weight", "Heading Weight",
            (400, "Regular (400)"), (500, "Medium (500)"), (600, "Semi-Bold (600)"),
            (700, "Bold (700)"), (800, "Extra-Bold (800)"),
        ),
        Control("fonts.heading.color", "Heading Color", "color"),
        _select(
            "fonts.body.family", "Body Font",
            ("Inter", "Inter"), ("Arial", "Arial"), ("Roboto", "Roboto"), ("Open Sans", "Open Sans"),
        ),
        Control("fonts.body.size", "Body Size", "range", min=10, max=18),
    )),
    PanelSection("colors", "Colors", (
        Control("colors.primary", "Primary", "color"),
        Control("colors.secondary", "Secondary", "color"),
        Control("colors.accent", "Accent", "color"),
        Control("colors.text", "Text", "color"),
        Control("colors.textMuted", "Text Muted", "color"),
        Control("colors.border", "Border", "color"),
        Control("colors.tableHeaderBg", "Table Header Background", "color"),
        Control("colors.tableHeaderText", "Table Header Text", "color"),
    )),
    PanelSection("table", "Table", (
        _select(
            "table.style", "Table Style",
            ("classic", "Classic"), ("modern", "Modern"), ("minimal", "Minimal"),
            ("striped", "Striped"), ("bordered", "Bordered"),
        ),
        _select(
            "table.borderStyle", "Border Style",
            ("all", "All Borders"), ("horizontal", "Horizontal Only"), ("none", "No Borders"),
        ),
        _select("table.header.textTransform", "Header Text", ("none", "Normal"), ("uppercase", "UPPERCASE")),
        Control("table.totals.highlightTotal", "Highlight Total", "checkbox"),
    )),
    PanelSection("footer", "Footer", (
        _select(
            "footer.layout", "Footer Layout",
            ("single-column", "Single Column"), ("two-column", "Two Columns"), ("centered", "Centered"),
        ),
        Control("footer.thankYou.text", "Thank You Message", "text"),
        Control("footer.paymentInfo.showBankDetails", "Show Bank Details", "checkbox"),
    )),
    PanelSection("layout", "Layout", (
        _select("layout.pageSize", "Page Size", ("A4", "A4"), ("Letter", "Letter")),
        Control("layout.pageMargin", "Page Margin", "range", min=20, max=80),
        Control("layout.sectionGap", "Section Spacing", "range", min=16, max=64),
    )),
)

_SECTIONS_BY_ID = {section.id: section for section in PANEL_SECTIONS}
_CONTROLS_BY_PATH = {control.path: control for section in PANEL_SECTIONS for control in section.controls}


class CustomizationPanel:
    """Tabbed control surface; the only state it keeps is the active tab."""

    def __init__(self, on_change: Callable[[str, Any], Any], active_section: str = "header"):
        self.on_change = on_change
        self.active_section = active_section
        self.select(active_section)

    @property
    def sections(self) -> tuple[PanelSection, ...]:
        return PANEL_SECTIONS

    def select(self, section_id: str) -> PanelSection:
        section = _SECTIONS_BY_ID.get(section_id)
        if section is None:
            raise ValueError(f"Unknown panel section '{section_id}' (expected one of {list(_SECTIONS_BY_ID)})")
        self.active_section = section_id
        return section

    def controls(self, config: TemplateConfig, section_id: str | None = None) -> list[BoundControl]:
        """Controls of a section (the active one by default) with their current values."""
        section = _SECTIONS_BY_ID[section_id or self.active_section]
        bound = []
        for control in section.controls:
            value = get_at_path(config, control.path)
            if value is None and control.kind != "toggle-record":
                value = control.fallback
            bound.append(BoundControl(control=control, value=value))
        return bound

    def change(self, path: str, raw: Any, config: TemplateConfig | None = None) -> Any:
        """Coerce raw form input for the control at ``path`` and emit it via ``on_change``.

        ``config`` supplies context some controls need (the border toggle takes
        its colour from the palette). Returns the coerced value.
        """
        control = _CONTROLS_BY_PATH.get(path)
        if control is None:
            raise InvalidPathError(f"No panel control is bound to '{path}'")
        value = self._coerce(control, raw, config or TemplateConfig())
        logger.debug("Panel change %s = %r", path, value)
        self.on_change(path, value)
        return value

    def render(self, config: TemplateConfig) -> Markup:
        """Tabs plus the form controls of the active section, one input per path."""
        template = environment().get_template("panel.html.j2")
        return Markup(template.render(
            sections=PANEL_SECTIONS,
            active_section=self.active_section,
            controls=self.controls(config),
        ))

    # -- coercion ----------------------------------------------------------

    @staticmethod
    def _coerce(control: Control, raw: Any, config: TemplateConfig) -> Any:
        if control.kind in ("number", "range"):
            try:
                return int(raw)
            except (TypeError, ValueError) as exc:
                raise InvalidValueError(f"'{control.path}': expected a whole number, got {raw!r}") from exc

        if control.kind in ("checkbox", "toggle-record"):
            enabled = _to_bool(raw, control.path)
            if control.kind == "checkbox":
                return enabled
            return {"width": 1, "color": config.colors.border, "style": "solid"} if enabled else None

        if control.kind == "select":
            for value, _ in control.options:
                if raw == value or str(raw) == str(value):
                    return value
            allowed = [value for value, _ in control.options]
            raise InvalidValueError(f"'{control.path}': {raw!r} is not one of {allowed}")

        text = "" if raw is None else str(raw)
        if not text.strip() and CONFIG_PATHS[control.path].optional:
            return None
        return text


def _to_bool(raw: Any, path: str) -> bool:
    if isinstance(raw, bool) or raw is None:
        return bool(raw)
    text = str(raw).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise InvalidValueError(f"'{path}': cannot read {raw!r} as on/off")
