"""Invoice data consumed by the renderer.

Real invoices and the synthetic preview invoice (utils.mock_invoice) share
this exact shape, so the renderer never needs to know which one it got.
"""
from datetime import date
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class InvoiceModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Address(InvoiceModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = ""

    @property
    def locality(self) -> str:
        """'City, ST 12345' with empty parts left out."""
        city_state = ", ".join(p for p in (self.city, self.state) if p)
        return " ".join(p for p in (city_state, self.zip) if p)


class BankDetails(InvoiceModel):
    bank_name: str
    account_number: str
    routing_number: str = ""


class Company(InvoiceModel):
    name: str = ""
    logo: str | None = None  # URL or data URI
    address: Address | None = None
    email: str | None = None
    phone: str | None = None
    bank_details: BankDetails | None = None


class Party(InvoiceModel):
    name: str = ""
    address: Address | None = None
    email: str | None = None


class LineItem(InvoiceModel):
    description: str
    quantity: float = Field(ge=0)
    rate: float
    amount: float


class InvoiceData(InvoiceModel):
    invoice_number: str
    invoice_date: date
    due_date: date | None = None
    currency: str = "USD"
    company: Company = Field(default_factory=Company)
    vendor: Party = Field(default_factory=Party)
    ship_to: Party | None = None
    items: tuple[LineItem, ...] = ()
    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    notes: str | None = None
    payment_terms: str | None = None

    @classmethod
    def load(cls, path: Path) -> "InvoiceData":
        """Load an invoice record from a JSON file (camelCase keys)."""
        return cls.model_validate_json(path.read_text(encoding="utf-8"))
