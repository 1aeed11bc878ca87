# bar_bills/utils/formatting.py

from datetime import date
from decimal import Decimal, ROUND_HALF_UP

CENTS = Decimal("0.01")


def round_money(amount: Decimal) -> Decimal:
    """Round to currency precision (2 places, half up)."""
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_rupee(amount: Decimal) -> str:
    """
    Format an amount Indian-style with the rupee sign and 2 decimals.
    Example: Decimal("1234567.5") -> "₹12,34,567.50"
    """
    value = round_money(amount)
    sign = "-" if value < 0 else ""
    whole, frac = f"{abs(value):.2f}".split(".")

    # last three digits, then groups of two
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])

    return f"{sign}₹{whole}.{frac}"


def format_percent(value: Decimal) -> str:
    """Decimal("5") -> "5", Decimal("12.50") -> "12.5"."""
    text = f"{Decimal(value):f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_bill_date(d: date) -> str:
    return d.strftime("%d/%m/%Y")
