"""Section renderers — one pure function per invoice region.

Each renderer takes the invoice, its section config and the theme (colors,
fonts) and returns an HTML fragment as ``Markup``. Inline CSS is assembled
here with ``utils.styles.css``; the Jinja2 templates in
``templates/sections/`` only arrange markup.

Variant fields (header layout, label styles, border style, footer layout) are
dispatched through the ``*_VARIANTS`` tables below, which carry exactly one
entry per member of the corresponding Literal type.
"""
from functools import lru_cache
from pathlib import Path
from typing import Callable

import markdown as _markdown_lib
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

from models.invoice import InvoiceData
from models.template_config import (
    BorderConfig,
    ColorPalette,
    FontConfig,
    FooterConfig,
    FooterLayout,
    Fonts,
    HeaderConfig,
    HeaderLayout,
    MetaLabelStyle,
    NotesConfig,
    RecipientConfig,
    RecipientLabelStyle,
    RecipientLayout,
    TableBorderStyle,
    TableConfig,
)
from utils.styles import border, css, em, format_date, money, px, quantity

# Path (relative to the package root) where Jinja2 looks for templates
_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

Declarations = dict[str, object | None]


@lru_cache(maxsize=1)
def environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "html.j2"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["markdown"] = lambda text: Markup(
        _markdown_lib.markdown(str(escape(text)), extensions=["extra"])
    )
    env.filters["money"] = money
    env.filters["date"] = format_date
    env.filters["qty"] = quantity
    return env


def _render(template_name: str, **context) -> Markup:
    return Markup(environment().get_template(template_name).render(**context))


def font_stack(font: FontConfig) -> str:
    return f"{font.family}, sans-serif"


def _border_css(b: BorderConfig | None) -> str | None:
    return border(b.width, b.style, b.color) if b else None


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------

HEADER_LAYOUT_VARIANTS: dict[HeaderLayout, Declarations] = {
    "logo-left": {"display": "flex", "justify-content": "space-between", "align-items": "flex-start"},
    "logo-center": {"display": "flex", "flex-direction": "column", "align-items": "center", "gap": "24px"},
    "logo-right": {
        "display": "flex",
        "flex-direction": "row-reverse",
        "justify-content": "space-between",
        "align-items": "flex-start",
    },
    "split": {"display": "grid", "grid-template-columns": "1fr 1fr", "gap": "32px"},
}

META_LABEL_VARIANTS: dict[MetaLabelStyle, Callable[[ColorPalette], Declarations]] = {
    "bold": lambda colors: {"font-weight": 600, "color": colors.text},
    "muted": lambda colors: {"font-weight": 400, "color": colors.text_muted},
    "uppercase": lambda colors: {"font-weight": 400, "text-transform": "uppercase", "color": colors.text},
}


def render_header(invoice: InvoiceData, header: HeaderConfig, colors: ColorPalette, fonts: Fonts) -> Markup:
    """Logo, company details and invoice number/dates, arranged by ``header.layout``."""
    company = invoice.company
    header_style = css(
        *HEADER_LAYOUT_VARIANTS[header.layout].items(),
        ("background-color", header.background_color),
        ("padding", px(header.padding)),
        ("border-bottom", _border_css(header.border_bottom)),
    )
    # Computed once, shared by the number, date and due-date labels.
    label_style = css(
        ("font-family", font_stack(fonts.label)),
        ("font-size", px(fonts.label.size)),
        *META_LABEL_VARIANTS[header.invoice_meta.label_style](colors).items(),
        ("margin-bottom", "4px"),
    )
    return _render(
        "sections/header.html.j2",
        invoice=invoice,
        company=company,
        header=header,
        header_style=header_style,
        logo_style=css(
            ("max-width", px(header.logo.max_width)),
            ("max-height", px(header.logo.max_height)),
            ("object-fit", "contain"),
        ),
        company_style=css(
            ("text-align", header.company_info.alignment),
            ("font-size", px(header.company_info.font_size)),
            ("font-family", font_stack(fonts.body)),
        ),
        company_name_style=css(
            ("font-weight", fonts.heading.weight),
            ("font-size", px(fonts.heading.size)),
            ("font-family", font_stack(fonts.heading)),
            ("color", fonts.heading.color),
            ("letter-spacing", em(fonts.heading.letter_spacing)),
            ("margin-bottom", "8px"),
        ),
        muted_style=css(("color", colors.text_muted)),
        meta_style=css(
            ("text-align", header.invoice_meta.alignment),
            ("font-family", font_stack(fonts.label)),
        ),
        label_style=label_style,
    )


# ---------------------------------------------------------------------------
# Recipient
# ---------------------------------------------------------------------------

RECIPIENT_LAYOUT_VARIANTS: dict[RecipientLayout, Declarations] = {
    "single-column": {"display": "flex", "flex-direction": "column", "gap": "24px"},
    "two-column": {"display": "grid", "grid-template-columns": "1fr 1fr", "gap": "32px"},
}

RECIPIENT_LABEL_VARIANTS: dict[RecipientLabelStyle, Callable[[ColorPalette, FontConfig], Declarations]] = {
    "default": lambda colors, label: {},
    "bold": lambda colors, label: {"color": colors.text, "font-weight": 700},
    "uppercase": lambda colors, label: {
        "text-transform": "uppercase",
        "color": colors.text_muted,
        "letter-spacing": "0.05em",
    },
    "pill": lambda colors, label: {
        "background-color": colors.primary,
        "color": "#FFFFFF",
        "padding": "4px 12px",
        "border-radius": "20px",
        "display": "inline-block",
        "font-size": px(max(label.size - 1, 1)),
    },
}


def render_recipient(
    invoice: InvoiceData, recipient: RecipientConfig, colors: ColorPalette, fonts: Fonts
) -> Markup:
    """Bill To block, plus Ship To when enabled and the invoice has a ship-to party."""
    label: Declarations = {
        "font-family": font_stack(fonts.label),
        "font-size": px(fonts.label.size),
        "font-weight": 600,
        "margin-bottom": "8px",
    }
    label.update(RECIPIENT_LABEL_VARIANTS[recipient.label_style](colors, fonts.label))
    return _render(
        "sections/recipient.html.j2",
        bill_to=invoice.vendor,
        ship_to=invoice.ship_to if recipient.show_ship_to else None,
        container_style=css(
            *RECIPIENT_LAYOUT_VARIANTS[recipient.layout].items(),
            ("font-size", px(recipient.font_size)),
        ),
        label_style=css(*label.items()),
        text_style=css(("color", colors.text)),
        muted_style=css(("color", colors.text_muted)),
    )


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

# (outer table declarations, per-cell declarations)
TABLE_BORDER_VARIANTS: dict[TableBorderStyle, Callable[[str], tuple[Declarations, Declarations]]] = {
    "all": lambda line: ({"border": line}, {"border-bottom": line}),
    "horizontal": lambda line: ({"border-top": line, "border-bottom": line}, {"border-bottom": line}),
    "none": lambda line: ({}, {}),
}

_COLUMNS = (
    ("description", "Description"),
    ("quantity", "Qty"),
    ("rate", "Rate"),
    ("amount", "Amount"),
)


def render_table(invoice: InvoiceData, table: TableConfig, colors: ColorPalette, fonts: Fonts) -> Markup:
    """Line items with alternating row backgrounds, followed by the totals block."""
    line = border(table.border_width, "solid", table.border_color)
    outer, cell = TABLE_BORDER_VARIANTS[table.border_style](line)

    columns = [(getattr(table.columns, key), title) for key, title in _COLUMNS]
    header_cells = [
        (title, css(("text-align", col.alignment), ("width", col.width), ("padding", px(table.header.padding))))
        for col, title in columns
    ]
    cell_styles = [
        css(("text-align", col.alignment), ("padding", px(table.rows.padding)), *cell.items())
        for col, _ in columns
    ]

    rows = []
    for index, item in enumerate(invoice.items):
        background = table.rows.background_color
        if index % 2 == 1:
            background = table.rows.alternate_row_bg or table.rows.background_color
        row_style = css(
            ("background-color", background),
            ("color", table.rows.text_color),
            ("font-size", px(table.rows.font_size)),
        )
        rows.append((item, row_style))

    totals = table.totals
    totals_position: Declarations = (
        {"width": "100%"} if totals.position == "full-width" else {"margin-left": "auto", "max-width": "384px"}
    )
    return _render(
        "sections/table.html.j2",
        invoice=invoice,
        table=table,
        table_style=css(
            ("width", "100%"),
            ("border-collapse", "collapse"),
            ("font-family", font_stack(fonts.body)),
            *outer.items(),
        ),
        header_row_style=css(
            ("background-color", table.header.background_color),
            ("color", table.header.text_color),
            ("font-size", px(table.header.font_size)),
            ("font-weight", table.header.font_weight),
            ("text-transform", table.header.text_transform),
        ),
        header_cells=header_cells,
        cell_styles=cell_styles,
        rows=rows,
        totals_style=css(
            *totals_position.items(),
            ("margin-top", "24px"),
            ("background-color", totals.background_color),
            ("padding", "16px"),
        ),
        totals_label_style=css(("font-weight", totals.label_weight)),
        totals_value_style=css(("font-weight", totals.value_weight)),
        total_style=css(
            ("border-top", border(1, "solid", colors.border)),
            ("padding-top", "12px"),
            ("font-size", px(totals.total_font_size)),
            ("font-weight", 700 if totals.highlight_total else totals.value_weight),
            ("color", colors.primary if totals.highlight_total else colors.text),
        ),
    )


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------

def render_notes(invoice: InvoiceData, notes: NotesConfig, colors: ColorPalette, fonts: Fonts) -> Markup:
    """Invoice notes; empty when notes are disabled or the invoice has none."""
    if not notes.enabled or not (invoice.notes or "").strip():
        return Markup("")
    return _render(
        "sections/notes.html.j2",
        text=invoice.notes,
        notes_style=css(
            ("font-size", px(notes.font_size)),
            ("color", notes.color),
            ("background-color", notes.background_color),
            ("padding", px(notes.padding)),
            ("border-radius", "8px" if notes.background_color else None),
        ),
        title_style=css(("font-weight", 600), ("margin-bottom", "8px")),
    )


# ---------------------------------------------------------------------------
# Footer
# ---------------------------------------------------------------------------

FOOTER_LAYOUT_VARIANTS: dict[FooterLayout, Declarations] = {
    "single-column": {"display": "flex", "flex-direction": "column", "gap": "24px"},
    "two-column": {"display": "grid", "grid-template-columns": "1fr 1fr", "gap": "32px"},
    "centered": {
        "display": "flex",
        "flex-direction": "column",
        "align-items": "center",
        "text-align": "center",
        "gap": "24px",
    },
}


def render_footer(
    invoice: InvoiceData,
    footer: FooterConfig,
    colors: ColorPalette,
    fonts: Fonts,
    notes: NotesConfig,
) -> Markup:
    """In-footer notes, payment information and the thank-you line, in that order."""
    footer_notes = Markup("")
    if notes.position == "in-footer":
        footer_notes = render_notes(invoice, notes, colors, fonts)

    payment = footer.payment_info
    bank = invoice.company.bank_details if payment.show_bank_details else None
    thank_you = footer.thank_you
    return _render(
        "sections/footer.html.j2",
        footer=footer,
        footer_style=css(
            *FOOTER_LAYOUT_VARIANTS[footer.layout].items(),
            ("background-color", footer.background_color),
            ("border-top", _border_css(footer.border_top)),
            ("padding", px(footer.padding)),
        ),
        footer_notes=footer_notes,
        spans_columns=footer.layout == "two-column",
        payment_style=css(
            ("width", "100%" if footer.layout == "centered" else None),
            ("font-size", px(payment.font_size)),
            ("text-align", payment.alignment),
        ),
        payment_title_style=css(
            ("font-weight", 600),
            ("margin-bottom", "8px"),
            ("font-family", font_stack(fonts.label)),
        ),
        bank=bank,
        payment_terms=invoice.payment_terms,
        muted_style=css(("color", colors.text_muted), ("line-height", 1.6)),
        thank_you_style=css(
            ("font-size", px(thank_you.font_size)),
            ("font-weight", thank_you.font_weight),
            ("color", thank_you.color),
            ("text-align", "center" if footer.layout == "centered" else "right"),
            ("margin-top", "16px" if footer.layout == "single-column" else None),
        ),
    )
