# bar_bills/services/bill_numbering.py

from typing import Tuple, Union

from domain.models import BillNumberSequence

BILL_NUMBER_WIDTH = 6


def format_bill_number(number: int) -> str:
    """
    1 -> "000001". Numbers wider than six digits are kept whole.
    """
    if number < 1:
        raise ValueError(f"Bill numbers start at 1, got {number}")
    return str(number).zfill(BILL_NUMBER_WIDTH)


def parse_bill_number(value: Union[str, int, None]) -> int:
    """
    Normalise a persisted bill number ("000042", 42, None) to an int.
    None or empty means no bill was issued yet.
    """
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return 0
    return int(text)


def start_sequence(last_persisted: Union[str, int, None]) -> BillNumberSequence:
    last = parse_bill_number(last_persisted)
    if last < 0:
        raise ValueError(f"Last bill number cannot be negative, got {last}")
    return BillNumberSequence(last_issued=last)


def issue_bill_number(sequence: BillNumberSequence) -> Tuple[str, BillNumberSequence]:
    """
    Issue the next bill number.
    Returns (formatted number, advanced sequence); the input is not modified.
    """
    next_number = sequence.last_issued + 1
    return format_bill_number(next_number), BillNumberSequence(last_issued=next_number)
