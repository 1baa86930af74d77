"""Invoice composer — stacks the section renderers into one document.

Order is fixed: header, recipient, table, notes (before-footer), footer.
Sections that are disabled or render nothing are dropped entirely and take no
gap; the remaining ones are separated by ``layout.sectionGap``.

The optional ``scale`` only adds a CSS transform to the outer container. It
never feeds into widths, margins or any other layout value, so a scaled
preview wraps and breaks exactly like the full-size document.
"""
from markupsafe import Markup

from models.invoice import InvoiceData
from models.template_config import PageSize, TemplateConfig
from pipeline.sections import (
    environment,
    font_stack,
    render_footer,
    render_header,
    render_notes,
    render_recipient,
    render_table,
)
from utils.styles import css, px

# (width, min-height) of the printed page
PAGE_DIMENSIONS: dict[PageSize, tuple[str, str]] = {
    "A4": ("210mm", "297mm"),
    "Letter": ("8.5in", "11in"),
}


def render(invoice: InvoiceData, config: TemplateConfig, scale: float = 1.0) -> Markup:
    """Render the invoice container for ``config`` and ``invoice``.

    Raises ValueError if ``scale`` is not positive.
    """
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")

    colors, fonts = config.colors, config.fonts
    sections: list[tuple[str, Markup]] = []
    if config.header.enabled:
        sections.append(("header", render_header(invoice, config.header, colors, fonts)))
    if config.recipient.enabled:
        sections.append(("recipient", render_recipient(invoice, config.recipient, colors, fonts)))
    sections.append(("table", render_table(invoice, config.table, colors, fonts)))
    if config.notes.position == "before-footer":
        sections.append(("notes", render_notes(invoice, config.notes, colors, fonts)))
    if config.footer.enabled:
        sections.append(("footer", render_footer(invoice, config.footer, colors, fonts, config.notes)))
    sections = [(name, fragment) for name, fragment in sections if fragment]

    width, min_height = PAGE_DIMENSIONS[config.layout.page_size]
    container_style = css(
        ("font-family", font_stack(fonts.body)),
        ("font-size", px(fonts.body.size)),
        ("color", colors.text),
        ("background-color", colors.background),
        ("padding", px(config.layout.page_margin)),
        ("max-width", px(config.layout.content_max_width)),
        ("margin", "0 auto"),
        ("width", width),
        ("min-height", min_height),
        ("transform", f"scale({scale:g})" if scale != 1.0 else None),
        ("transform-origin", "top center" if scale != 1.0 else None),
    )
    template = environment().get_template("invoice.html.j2")
    return Markup(template.render(
        sections=sections,
        page_size=config.layout.page_size,
        container_style=container_style,
        gap_style=css(("margin-top", px(config.layout.section_gap))),
    ))


def render_page(invoice: InvoiceData, config: TemplateConfig, scale: float = 1.0) -> str:
    """Render a standalone HTML document, ready to hand to a PDF exporter."""
    template = environment().get_template("page.html.j2")
    return template.render(
        invoice=invoice,
        page_size=config.layout.page_size,
        body=render(invoice, config, scale=scale),
    )
