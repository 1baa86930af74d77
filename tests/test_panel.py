"""Tests for the customization panel."""
from unittest.mock import MagicMock

import pytest

from editor.panel import PANEL_SECTIONS, CustomizationPanel
from editor.path_mutator import CONFIG_PATHS, set_at_path
from utils.exceptions import InvalidPathError, InvalidValueError


# ---------------------------------------------------------------------------
# Control table
# ---------------------------------------------------------------------------

class TestControlTable:
    def test_section_order(self):
        assert [s.id for s in PANEL_SECTIONS] == ["header", "typography", "colors", "table", "footer", "layout"]

    def test_every_control_binds_to_a_config_path(self):
        for section in PANEL_SECTIONS:
            for control in section.controls:
                assert control.path in CONFIG_PATHS

    def test_paths_unique(self):
        paths = [c.path for s in PANEL_SECTIONS for c in s.controls]
        assert len(paths) == len(set(paths))

    def test_header_layout_offers_every_variant(self):
        header = PANEL_SECTIONS[0]
        layout = next(c for c in header.controls if c.path == "header.layout")
        assert [value for value, _ in layout.options] == ["logo-left", "logo-center", "logo-right", "split"]


# ---------------------------------------------------------------------------
# Section selection
# ---------------------------------------------------------------------------

class TestSelect:
    def test_starts_on_header(self):
        assert CustomizationPanel(MagicMock()).active_section == "header"

    def test_select_switches_section(self, config):
        panel = CustomizationPanel(MagicMock())
        panel.select("colors")
        assert panel.active_section == "colors"
        assert [b.control.path for b in panel.controls(config)][0] == "colors.primary"

    def test_unknown_section_rejected(self):
        panel = CustomizationPanel(MagicMock())
        with pytest.raises(ValueError):
            panel.select("branding")
        assert panel.active_section == "header"


# ---------------------------------------------------------------------------
# Bound values
# ---------------------------------------------------------------------------

class TestControls:
    def test_values_read_from_config(self, config):
        panel = CustomizationPanel(MagicMock(), active_section="layout")
        values = {b.control.path: b.value for b in panel.controls(config)}
        assert values == {"layout.pageSize": "A4", "layout.pageMargin": 40, "layout.sectionGap": 32}

    def test_unset_color_uses_fallback(self, config):
        panel = CustomizationPanel(MagicMock())
        values = {b.control.path: b.value for b in panel.controls(config)}
        assert values["header.backgroundColor"] == "#ffffff"
        assert values["header.borderBottom"] is None

    def test_border_toggle_checked_when_present(self, config):
        panel = CustomizationPanel(MagicMock())
        c = set_at_path(config, "header.borderBottom", {"width": 1})
        bound = {b.control.path: b for b in panel.controls(c)}
        assert bound["header.borderBottom"].checked


# ---------------------------------------------------------------------------
# change()
# ---------------------------------------------------------------------------

class TestChange:
    def test_emits_path_and_coerced_number(self):
        on_change = MagicMock()
        CustomizationPanel(on_change).change("layout.sectionGap", "48")
        on_change.assert_called_once_with("layout.sectionGap", 48)

    def test_select_value_keeps_option_type(self):
        on_change = MagicMock()
        CustomizationPanel(on_change).change("fonts.heading.weight", "700")
        on_change.assert_called_once_with("fonts.heading.weight", 700)

    def test_select_rejects_unknown_option(self):
        on_change = MagicMock()
        with pytest.raises(InvalidValueError):
            CustomizationPanel(on_change).change("header.layout", "diagonal")
        on_change.assert_not_called()

    @pytest.mark.parametrize("raw, expected", [(True, True), ("on", True), ("false", False), (None, False)])
    def test_checkbox(self, raw, expected):
        on_change = MagicMock()
        CustomizationPanel(on_change).change("table.totals.highlightTotal", raw)
        on_change.assert_called_once_with("table.totals.highlightTotal", expected)

    def test_border_toggle_builds_record_from_palette(self, config):
        on_change = MagicMock()
        c = set_at_path(config, "colors.border", "#123456")
        CustomizationPanel(on_change).change("header.borderBottom", True, config=c)
        on_change.assert_called_once_with("header.borderBottom", {"width": 1, "color": "#123456", "style": "solid"})

    def test_border_toggle_off_clears_record(self):
        on_change = MagicMock()
        CustomizationPanel(on_change).change("header.borderBottom", False)
        on_change.assert_called_once_with("header.borderBottom", None)

    def test_cleared_optional_color_unsets_field(self, config):
        on_change = MagicMock()
        CustomizationPanel(on_change).change("header.backgroundColor", "")
        on_change.assert_called_once_with("header.backgroundColor", None)
        c = set_at_path(set_at_path(config, "header.backgroundColor", "#FF0000"), "header.backgroundColor", None)
        assert c.header.background_color is None

    def test_cleared_required_text_stays_empty_string(self):
        on_change = MagicMock()
        CustomizationPanel(on_change).change("footer.thankYou.text", "")
        on_change.assert_called_once_with("footer.thankYou.text", "")

    def test_bad_number_rejected(self):
        with pytest.raises(InvalidValueError):
            CustomizationPanel(MagicMock()).change("header.padding", "")

    def test_path_without_control_rejected(self):
        with pytest.raises(InvalidPathError):
            CustomizationPanel(MagicMock()).change("table.rows.padding", 4)

    def test_emitted_value_applies_through_mutator(self, config):
        updates = []
        panel = CustomizationPanel(lambda path, value: updates.append(set_at_path(config, path, value)))
        panel.change("header.borderBottom", "on", config=config)
        assert updates[0].header.border_bottom.color == config.colors.border


# ---------------------------------------------------------------------------
# render()
# ---------------------------------------------------------------------------

class TestRender:
    def test_tabs_and_active_controls(self, config):
        html = CustomizationPanel(MagicMock()).render(config)
        for section in PANEL_SECTIONS:
            assert f'data-section="{section.id}"' in html
        assert "panel-tab--active" in html
        assert 'name="header.layout"' in html
        assert 'name="colors.primary"' not in html

    def test_selected_option_marked(self, config):
        panel = CustomizationPanel(MagicMock(), active_section="table")
        html = panel.render(set_at_path(config, "table.borderStyle", "none"))
        assert '<option value="none" selected>No Borders</option>' in html

    def test_range_carries_bounds(self, config):
        html = CustomizationPanel(MagicMock(), active_section="layout").render(config)
        assert 'min="16"' in html
        assert 'max="64"' in html
