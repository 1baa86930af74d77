"""Helpers shared by the section renderers: inline CSS and value formatting."""
from datetime import date

_CURRENCY_SYMBOLS = {
    "USD": "$",
    "CAD": "$",
    "AUD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
}


def css(*declarations: tuple[str, object | None]) -> str:
    """Join ``(property, value)`` pairs into an inline style string.

    Pairs whose value is ``None`` or an empty string are dropped, so unset or
    cleared config fields never produce empty declarations. Order is preserved,
    which keeps output stable.
    """
    return "; ".join(f"{prop}: {value}" for prop, value in declarations if value is not None and value != "")


def px(value: float | int | None) -> str | None:
    if value is None:
        return None
    return f"{_number(value)}px"


def em(value: float | int | None) -> str | None:
    if value is None:
        return None
    return f"{_number(value)}em"


def border(width: float | int, style: str, color: str) -> str:
    return f"{_number(width)}px {style} {color}"


def money(amount: float, currency: str = "USD") -> str:
    symbol = _CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def quantity(value: float) -> str:
    return _number(value)


def format_date(d: date | None) -> str:
    """Format as MM/DD/YYYY; empty string when the date is absent."""
    if d is None:
        return ""
    return f"{d.month:02d}/{d.day:02d}/{d.year}"


def _number(value: float | int) -> str:
    # 14.0 -> "14", 17.5 -> "17.5"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
