"""Template configuration model — typed representation of an invoice template.

Every visual aspect of a rendered invoice is parameterised here. All fields
carry defaults so a partial document (or none at all) still yields a complete
config. The models are frozen: a config is a value, and the only way to get a
changed one is ``editor.path_mutator.set_at_path``.

Field names are snake_case in Python and camelCase on the wire and in config
paths (``table.header.textTransform``).

Stored documents may carry fields this schema does not model (older or
newer template versions); they are dropped on load rather than rejected.
"""
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Alignment = Literal["left", "center", "right"]
HeaderLayout = Literal["logo-left", "logo-center", "logo-right", "split"]
MetaLabelStyle = Literal["bold", "muted", "uppercase"]
RecipientLayout = Literal["single-column", "two-column"]
RecipientLabelStyle = Literal["default", "bold", "uppercase", "pill"]
TableStyle = Literal["classic", "modern", "minimal", "striped", "bordered"]
TableBorderStyle = Literal["all", "horizontal", "none"]
TextTransform = Literal["none", "uppercase"]
TotalsPosition = Literal["right", "full-width"]
NotesPosition = Literal["before-footer", "in-footer"]
FooterLayout = Literal["single-column", "two-column", "centered"]
PageSize = Literal["A4", "Letter"]
LineStyle = Literal["solid", "dashed", "dotted"]


class ConfigModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class BorderConfig(ConfigModel):
    width: int = 1
    color: str = "#E5E7EB"
    style: LineStyle = "solid"


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------

class FontConfig(ConfigModel):
    family: str = "Inter"
    size: int = 14
    weight: int = 400
    color: str = "#374151"
    letter_spacing: float | None = None  # em
    line_height: float | None = None


class Fonts(ConfigModel):
    heading: FontConfig = Field(default_factory=lambda: FontConfig(size=28, weight=700, color="#111827"))
    body: FontConfig = Field(default_factory=FontConfig)
    label: FontConfig = Field(default_factory=lambda: FontConfig(size=12, weight=600, color="#6B7280"))


class ColorPalette(ConfigModel):
    primary: str = "#3B82F6"
    secondary: str = "#6366F1"
    accent: str = "#06B6D4"
    text: str = "#1F2937"
    text_muted: str = "#6B7280"
    border: str = "#E5E7EB"
    background: str = "#FFFFFF"
    table_bg: str = "#F9FAFB"
    table_header_bg: str = "#F3F4F6"
    table_header_text: str = "#374151"


class PageLayout(ConfigModel):
    page_size: PageSize = "A4"
    page_margin: int = 40
    section_gap: int = 32
    content_max_width: int = 750


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------

class LogoConfig(ConfigModel):
    enabled: bool = True
    position: Literal["top-left", "top-center", "top-right"] = "top-left"
    max_width: int = 150
    max_height: int = 60


class CompanyInfoConfig(ConfigModel):
    alignment: Alignment = "left"
    show_address: bool = True
    show_contact: bool = True
    font_size: int = 13


class InvoiceMetaConfig(ConfigModel):
    alignment: Literal["left", "right"] = "right"
    show_number: bool = True
    show_date: bool = True
    show_due_date: bool = True
    label_style: MetaLabelStyle = "bold"


class HeaderConfig(ConfigModel):
    enabled: bool = True
    layout: HeaderLayout = "logo-left"
    padding: int = 24
    background_color: str | None = None
    border_bottom: BorderConfig | None = None
    logo: LogoConfig = Field(default_factory=LogoConfig)
    company_info: CompanyInfoConfig = Field(default_factory=CompanyInfoConfig)
    invoice_meta: InvoiceMetaConfig = Field(default_factory=InvoiceMetaConfig)


# ---------------------------------------------------------------------------
# Recipient
# ---------------------------------------------------------------------------

class RecipientConfig(ConfigModel):
    enabled: bool = True
    layout: RecipientLayout = "two-column"
    label_style: RecipientLabelStyle = "default"
    font_size: int = 14
    show_ship_to: bool = False


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

class TableHeaderStyle(ConfigModel):
    background_color: str = "#F3F4F6"
    text_color: str = "#374151"
    font_size: int = 13
    font_weight: int = 600
    text_transform: TextTransform = "none"
    padding: int = 12


class TableRowStyle(ConfigModel):
    background_color: str = "#FFFFFF"
    alternate_row_bg: str | None = None
    text_color: str = "#1F2937"
    font_size: int = 14
    padding: int = 12
    hover_effect: bool = False


class ColumnConfig(ConfigModel):
    alignment: Alignment = "left"
    width: str = "auto"


class TableColumns(ConfigModel):
    description: ColumnConfig = Field(default_factory=lambda: ColumnConfig(alignment="left", width="50%"))
    quantity: ColumnConfig = Field(default_factory=lambda: ColumnConfig(alignment="center", width="15%"))
    rate: ColumnConfig = Field(default_factory=lambda: ColumnConfig(alignment="right", width="17.5%"))
    amount: ColumnConfig = Field(default_factory=lambda: ColumnConfig(alignment="right", width="17.5%"))


class TotalsStyle(ConfigModel):
    position: TotalsPosition = "right"
    background_color: str | None = None
    label_weight: int = 400
    value_weight: int = 600
    highlight_total: bool = True
    total_font_size: int = 18


class TableConfig(ConfigModel):
    style: TableStyle = "classic"
    border_style: TableBorderStyle = "horizontal"
    border_width: int = 1
    border_color: str = "#E5E7EB"
    header: TableHeaderStyle = Field(default_factory=TableHeaderStyle)
    rows: TableRowStyle = Field(default_factory=TableRowStyle)
    columns: TableColumns = Field(default_factory=TableColumns)
    totals: TotalsStyle = Field(default_factory=TotalsStyle)


# ---------------------------------------------------------------------------
# Notes & footer
# ---------------------------------------------------------------------------

class NotesConfig(ConfigModel):
    enabled: bool = True
    position: NotesPosition = "before-footer"
    font_size: int = 13
    color: str = "#6B7280"
    background_color: str | None = None
    padding: int = 16


class PaymentInfoConfig(ConfigModel):
    enabled: bool = True
    show_bank_details: bool = True
    font_size: int = 13
    alignment: Alignment = "left"


class ThankYouConfig(ConfigModel):
    enabled: bool = True
    text: str = "Thank you for your business!"
    font_size: int = 14
    font_weight: int = 600
    color: str = "#3B82F6"


class FooterConfig(ConfigModel):
    enabled: bool = True
    layout: FooterLayout = "two-column"
    background_color: str | None = None
    border_top: BorderConfig | None = None
    padding: int = 20
    payment_info: PaymentInfoConfig = Field(default_factory=PaymentInfoConfig)
    thank_you: ThankYouConfig = Field(default_factory=ThankYouConfig)


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------

class TemplateConfig(ConfigModel):
    """Complete template configuration.

    Provides defaults for every field so it is usable even when the stored
    document is partial or predates a newly added field.
    """
    name: str = "Untitled Template"
    description: str = ""
    version: int = 1
    header: HeaderConfig = Field(default_factory=HeaderConfig)
    fonts: Fonts = Field(default_factory=Fonts)
    colors: ColorPalette = Field(default_factory=ColorPalette)
    table: TableConfig = Field(default_factory=TableConfig)
    recipient: RecipientConfig = Field(default_factory=RecipientConfig)
    notes: NotesConfig = Field(default_factory=NotesConfig)
    footer: FooterConfig = Field(default_factory=FooterConfig)
    layout: PageLayout = Field(default_factory=PageLayout)

    def to_document(self) -> dict:
        """camelCase, JSON-ready dict — the shape the template store persists."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def load(cls, path: Path) -> "TemplateConfig":
        """Load from a YAML file. Missing fields use Pydantic defaults.

        Raises FileNotFoundError if path does not exist.
        """
        import yaml  # lazy — only needed at load time
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return cls.model_validate(data)

    @classmethod
    def load_or_default(cls, path: Path) -> "TemplateConfig":
        """Load from path if it exists, otherwise return the default config."""
        if path.exists():
            return cls.load(path)
        return cls()
