# bar_bills/services/bill_generation_service.py
"""
One "generate" action: walk a date range, fetch each day's sales and
turn them into numbered, customer-assigned, taxed bills.

The run is a generator (`BillGenerationRun.steps()`) that yields a
GenerationProgress after every date, so a caller can drive it inline or
update a progress bar between steps. `generate_bills` drives it to the end.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Iterator, List, Optional, Protocol, Sequence, Union

from domain.models import (
    Bill,
    BillNumberSequence,
    Customer,
    GenerationProgress,
    GenerationResult,
    SaleLineItem,
)
from services.bill_numbering import issue_bill_number, start_sequence
from services.bill_packing import PackingStrategy, first_fit_packing, qualifying_items
from services.customer_assignment import RandomSource, assign_customer, default_random_source, require_customers
from services.tax_calculation import calculate_bill_totals, validate_tax_percent
from settings import DEFAULT_ENTRY_CAP, DEFAULT_QUANTITY_CAP
from utils.dates import date_range

logger = logging.getLogger(__name__)

MAX_LISTED_SKIPPED_DATES = 10


class SalesSource(Protocol):
    def get_sale_line_items(self, bar_id: str, sale_date: date) -> List[SaleLineItem]: ...

    def get_customers(self, bar_id: str) -> List[Customer]: ...

    def get_last_bill_number(self) -> int: ...


def build_bills_for_date(
        items: Sequence[SaleLineItem],
        bill_date: date,
        customers: Sequence[Customer],
        sequence: BillNumberSequence,
        tax_percent: Decimal,
        *,
        packing: PackingStrategy = first_fit_packing,
        entry_cap: int = DEFAULT_ENTRY_CAP,
        quantity_cap: int = DEFAULT_QUANTITY_CAP,
        random_source: RandomSource = default_random_source,
) -> tuple[List[Bill], BillNumberSequence]:
    """
    Pack one day's items and finish every bill.
    Returns the bills and the advanced number sequence.
    """
    bills: List[Bill] = []
    for entries in packing(items, entry_cap, quantity_cap):
        bill_number, sequence = issue_bill_number(sequence)
        totals = calculate_bill_totals(entries, tax_percent)
        bills.append(
            Bill(
                bill_number=bill_number,
                bill_date=bill_date,
                customer=assign_customer(customers, random_source),
                entries=entries,
                subtotal=totals.subtotal,
                tax_percent=totals.tax_percent,
                tax_amount=totals.tax_amount,
                final_total=totals.final_total,
            )
        )
    return bills, sequence


def day_value(items: Sequence[SaleLineItem]) -> Decimal:
    return sum((item.line_total for item in items), Decimal("0"))


class BillGenerationRun:
    """
    State of a single generation run. Owned by one caller; not shared.

    Validation (tax percent, date range) happens in __init__, before
    anything is fetched. Customers and the last bill number are read
    once, at the first step.
    """

    def __init__(
            self,
            store: SalesSource,
            bar_id: str,
            start_date: date,
            end_date: date,
            tax_percent: Union[Decimal, int, float, str],
            *,
            packing: PackingStrategy = first_fit_packing,
            entry_cap: int = DEFAULT_ENTRY_CAP,
            quantity_cap: int = DEFAULT_QUANTITY_CAP,
            random_source: RandomSource = default_random_source,
    ):
        self.store = store
        self.bar_id = bar_id
        self.tax_percent = validate_tax_percent(tax_percent)
        self.dates = date_range(start_date, end_date)
        self.packing = packing
        self.entry_cap = entry_cap
        self.quantity_cap = quantity_cap
        self.random_source = random_source

        self.bills: List[Bill] = []
        self.skipped_dates: List[date] = []
        self.sequence: Optional[BillNumberSequence] = None
        self._started = False
        self._finished = False

    def steps(self) -> Iterator[GenerationProgress]:
        if self._started:
            raise RuntimeError("Generation run can only be stepped through once")
        self._started = True

        customers = self.store.get_customers(self.bar_id)
        require_customers(customers)
        self.sequence = start_sequence(self.store.get_last_bill_number())
        logger.info(
            "Generating bills for bar %s, %s to %s (%d days), starting after bill %d",
            self.bar_id, self.dates[0], self.dates[-1], len(self.dates), self.sequence.last_issued,
        )

        total = len(self.dates)
        for i, current in enumerate(self.dates, start=1):
            items = qualifying_items(self.store.get_sale_line_items(self.bar_id, current))

            if not items:
                logger.info("No sales on %s, skipping", current)
                self.skipped_dates.append(current)
            elif day_value(items) <= 0:
                logger.info("Sales on %s total nothing, skipping", current)
                self.skipped_dates.append(current)
            else:
                day_bills, self.sequence = build_bills_for_date(
                    items,
                    current,
                    customers,
                    self.sequence,
                    self.tax_percent,
                    packing=self.packing,
                    entry_cap=self.entry_cap,
                    quantity_cap=self.quantity_cap,
                    random_source=self.random_source,
                )
                self.bills.extend(day_bills)
                logger.info("%s: %d line items -> %d bills", current, len(items), len(day_bills))

            yield GenerationProgress(completed=i, total=total, current_date=current)

        self._finished = True
        logger.info("Generated %d bills, skipped %d dates", len(self.bills), len(self.skipped_dates))

    def result(self) -> GenerationResult:
        if not self._finished:
            raise RuntimeError("Generation run has not finished yet")
        return GenerationResult(
            bills=list(self.bills),
            skipped_dates=list(self.skipped_dates),
            last_bill_number=self.sequence.last_issued,
        )


def generate_bills(
        store: SalesSource,
        bar_id: str,
        start_date: date,
        end_date: date,
        tax_percent: Union[Decimal, int, float, str],
        *,
        on_progress: Optional[Callable[[GenerationProgress], None]] = None,
        **options,
) -> GenerationResult:
    """
    Run a whole generation inline. Any FetchError or NoCustomersError
    propagates and no partial result is returned.
    """
    run = BillGenerationRun(store, bar_id, start_date, end_date, tax_percent, **options)
    for progress in run.steps():
        if on_progress is not None:
            on_progress(progress)
    return run.result()


def format_skipped_dates(skipped: Sequence[date], limit: int = MAX_LISTED_SKIPPED_DATES) -> str:
    """
    Single summary line for the skipped-date notification. At most `limit`
    dates are listed, the rest are counted.
    """
    if not skipped:
        return ""
    days = ", ".join(d.isoformat() for d in skipped[:limit])
    if len(skipped) > limit:
        days += f" and {len(skipped) - limit} more"
    return f"Skipped {len(skipped)} dates with no sales data: {days}"
