# bar_bills/services/bill_packing.py
"""
Packing of one day's sale line items into bills.

A packing strategy takes the ordered line items of a single date and returns
the entries of each bill, in bill creation order. Every strategy must keep
two limits:

  - no bill holds more than `entry_cap` entries
  - no entry holds more than `quantity_cap` units

Quantities are conserved: the chunks carved from an item always add up to
the item's original quantity.
"""

from typing import Callable, Iterator, List, Optional, Sequence

from domain.models import BillLineEntry, SaleLineItem
from settings import DEFAULT_ENTRY_CAP, DEFAULT_QUANTITY_CAP

PackingStrategy = Callable[[Sequence[SaleLineItem], int, int], List[List[BillLineEntry]]]


def _check_caps(entry_cap: int, quantity_cap: int) -> None:
    if entry_cap < 1:
        raise ValueError(f"entry_cap must be at least 1, got {entry_cap}")
    if quantity_cap < 1:
        raise ValueError(f"quantity_cap must be at least 1, got {quantity_cap}")


def qualifying_items(items: Sequence[SaleLineItem]) -> List[SaleLineItem]:
    """Drop items with zero or negative quantity."""
    return [item for item in items if item.quantity > 0]


def split_into_chunks(item: SaleLineItem, quantity_cap: int) -> Iterator[BillLineEntry]:
    """
    Carve an item into entries of min(quantity_cap, remaining) units.
    quantity 12, cap 5 -> 5, 5, 2
    """
    remaining = item.quantity
    while remaining > 0:
        qty = min(quantity_cap, remaining)
        yield BillLineEntry(item=item, quantity=qty)
        remaining -= qty


def _first_with_space(bills: List[List[BillLineEntry]], entry_cap: int, needed: int = 1) -> Optional[int]:
    for idx, entries in enumerate(bills):
        if entry_cap - len(entries) >= needed:
            return idx
    return None


def _place(bills: List[List[BillLineEntry]], idx: Optional[int], chunk: BillLineEntry) -> None:
    if idx is None:
        bills.append([chunk])
    else:
        bills[idx].append(chunk)


def first_fit_packing(
        items: Sequence[SaleLineItem],
        entry_cap: int = DEFAULT_ENTRY_CAP,
        quantity_cap: int = DEFAULT_QUANTITY_CAP,
) -> List[List[BillLineEntry]]:
    """
    Items are processed in the given (brand) order. Each chunk goes to the
    earliest-created bill that still has fewer than entry_cap entries;
    a new bill is opened only when every existing one is full.

    This is a simple first-fit, not quantity-balanced and not grouped by brand.
    """
    _check_caps(entry_cap, quantity_cap)

    bills: List[List[BillLineEntry]] = []
    for item in qualifying_items(items):
        for chunk in split_into_chunks(item, quantity_cap):
            _place(bills, _first_with_space(bills, entry_cap), chunk)
    return bills


def brand_grouped_packing(
        items: Sequence[SaleLineItem],
        entry_cap: int = DEFAULT_ENTRY_CAP,
        quantity_cap: int = DEFAULT_QUANTITY_CAP,
) -> List[List[BillLineEntry]]:
    """
    Keep all chunks of one brand on the same bill when they fit.

    The chunks of an item go to the earliest bill with room for all of
    them, or to a new bill. An item with more chunks than entry_cap cannot
    be kept together and falls back to first-fit chunk by chunk.
    """
    _check_caps(entry_cap, quantity_cap)

    bills: List[List[BillLineEntry]] = []
    for item in qualifying_items(items):
        chunks = list(split_into_chunks(item, quantity_cap))

        if len(chunks) > entry_cap:
            for chunk in chunks:
                _place(bills, _first_with_space(bills, entry_cap), chunk)
            continue

        idx = _first_with_space(bills, entry_cap, needed=len(chunks))
        if idx is None:
            bills.append([])
            idx = len(bills) - 1
        bills[idx].extend(chunks)
    return bills


PACKING_STRATEGIES = {
    "first_fit": first_fit_packing,
    "brand_grouped": brand_grouped_packing,
}
