from decimal import Decimal, InvalidOperation
from typing import Sequence, Union

from domain.exceptions import InvalidTaxPercentError
from domain.models import BillLineEntry, BillTotals

HUNDRED = Decimal("100")


def validate_tax_percent(value: Union[Decimal, int, float, str]) -> Decimal:
    """
    Accept 0..100 (inclusive) and return it as a Decimal.
    Floats go through str() so 5.1 stays 5.1.
    """
    if isinstance(value, bool):
        raise InvalidTaxPercentError(f"Tax percent must be a number, got {value!r}")
    try:
        percent = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidTaxPercentError(f"Tax percent must be a number, got {value!r}")

    if not percent.is_finite() or percent < 0 or percent > HUNDRED:
        raise InvalidTaxPercentError(f"Tax percent must be between 0 and 100, got {value}")
    return percent


def calculate_bill_totals(entries: Sequence[BillLineEntry], tax_percent: Decimal) -> BillTotals:
    """
    subtotal    = sum(unit_price * chunk quantity)
    tax_amount  = subtotal * tax_percent / 100
    final_total = subtotal + tax_amount

    Nothing is rounded here.
    """
    subtotal = sum((entry.line_total for entry in entries), Decimal("0"))
    tax_amount = subtotal * tax_percent / HUNDRED
    return BillTotals(
        subtotal=subtotal,
        tax_percent=tax_percent,
        tax_amount=tax_amount,
        final_total=subtotal + tax_amount,
    )
