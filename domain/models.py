# bar_bills/domain/models.py

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Bar:
    id: str
    name: str
    license_number: str = ""


@dataclass(frozen=True)
class Customer:
    """
    A licensed customer of the bar. Read-only reference data,
    attached to bills but never owned by them.
    """
    id: int
    name: str
    license_number: str


@dataclass(frozen=True)
class SaleLineItem:
    """
    One brand sold on one day, as recorded in daily sales.
    """
    brand_name: str
    item_code: str
    size: str
    unit_price: Decimal  # MRP
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class BillLineEntry:
    """
    A chunk of a SaleLineItem placed on one bill.
    quantity never exceeds the per-bill quantity cap.
    """
    item: SaleLineItem
    quantity: int

    @property
    def brand_name(self) -> str:
        return self.item.brand_name

    @property
    def item_code(self) -> str:
        return self.item.item_code

    @property
    def size(self) -> str:
        return self.item.size

    @property
    def unit_price(self) -> Decimal:
        return self.item.unit_price

    @property
    def line_total(self) -> Decimal:
        return self.item.unit_price * self.quantity


@dataclass(frozen=True)
class BillTotals:
    subtotal: Decimal
    tax_percent: Decimal
    tax_amount: Decimal
    final_total: Decimal


@dataclass
class Bill:
    """
    A complete printable bill: number, customer, 1..N entries and totals.
    Monetary values are unrounded; rounding happens at display time.
    """
    bill_number: str  # zero-padded, e.g. "000123"
    bill_date: date
    customer: Customer
    entries: List[BillLineEntry]
    subtotal: Decimal
    tax_percent: Decimal
    tax_amount: Decimal
    final_total: Decimal


@dataclass
class Page:
    """Bills laid out on one printed sheet."""
    number: int  # 1-based
    bills: List[Bill]


@dataclass(frozen=True)
class BillNumberSequence:
    """
    Counter value threaded through one generation run.
    last_issued is the number of the most recent bill (0 if none yet).
    """
    last_issued: int


@dataclass
class GenerationProgress:
    completed: int
    total: int
    current_date: Optional[date] = None

    @property
    def fraction(self) -> float:
        if self.total <= 0:
            return 1.0
        return self.completed / self.total


@dataclass
class GenerationResult:
    bills: List[Bill]
    skipped_dates: List[date]
    last_bill_number: int


@dataclass
class ExportProgress:
    completed: int
    total: int
    file_name: str = ""

    @property
    def fraction(self) -> float:
        if self.total <= 0:
            return 1.0
        return self.completed / self.total


@dataclass
class ExportResult:
    archive_name: str
    archive_bytes: bytes
    succeeded: int
    failed: List[Tuple[str, str]] = field(default_factory=list)  # (bill_number, error)

    @property
    def summary(self) -> str:
        return f"{self.succeeded} succeeded, {len(self.failed)} failed"
