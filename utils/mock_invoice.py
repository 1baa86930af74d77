"""Synthetic invoice used to preview templates while editing."""
from datetime import date, timedelta

from models.invoice import Address, BankDetails, Company, InvoiceData, LineItem, Party

_PAYMENT_DAYS = 30

_ITEMS = (
    ("Web Development Services", 40, 150.0),
    ("UI/UX Design", 20, 120.0),
    ("Project Management", 10, 100.0),
)
_TAX_RATE = 0.10


def generate_mock_invoice(today: date | None = None) -> InvoiceData:
    """Build a fully populated sample invoice dated ``today`` (defaults to the current date)."""
    invoice_date = today or date.today()
    items = tuple(
        LineItem(description=desc, quantity=qty, rate=rate, amount=qty * rate)
        for desc, qty, rate in _ITEMS
    )
    subtotal = sum(item.amount for item in items)
    tax = round(subtotal * _TAX_RATE, 2)

    return InvoiceData(
        invoice_number=f"INV-{invoice_date.year}-001",
        invoice_date=invoice_date,
        due_date=invoice_date + timedelta(days=_PAYMENT_DAYS),
        company=Company(
            name="Acme Corporation",
            logo="https://via.placeholder.com/150x60/4f46e5/ffffff?text=ACME",
            address=Address(
                street="123 Business Street",
                city="San Francisco",
                state="CA",
                zip="94102",
                country="USA",
            ),
            email="hello@acmecorp.com",
            phone="+1 (555) 123-4567",
            bank_details=BankDetails(
                bank_name="First National Bank",
                account_number="****1234",
                routing_number="123456789",
            ),
        ),
        vendor=Party(
            name="Tech Solutions Inc.",
            address=Address(
                street="456 Client Avenue",
                city="New York",
                state="NY",
                zip="10001",
                country="USA",
            ),
            email="billing@techsolutions.com",
        ),
        ship_to=Party(
            name="Tech Solutions Warehouse",
            address=Address(street="789 Dock Road", city="Newark", state="NJ", zip="07102", country="USA"),
        ),
        items=items,
        subtotal=subtotal,
        tax=tax,
        total=subtotal + tax,
        notes="Payment is due within 30 days. Please include invoice number with payment.",
        payment_terms=f"Net {_PAYMENT_DAYS}",
    )
