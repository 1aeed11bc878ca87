from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from domain.models import Bill, BillLineEntry, Customer, SaleLineItem


class FakeQuery:
    """
    Minimal stand-in for a PostgREST query chain. Filters and ordering are
    applied to the in-memory rows of one table.
    """

    def __init__(self, client, table_name):
        self.client = client
        self.table_name = table_name
        self.filters = []
        self.order_by = None
        self.limit_n = None
        self.inserted = None

    def select(self, columns):
        self.client.calls.append(("select", self.table_name, " ".join(columns.split())))
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def insert(self, rows):
        self.inserted = rows
        return self

    def execute(self):
        error = self.client.errors.get(self.table_name)
        if isinstance(error, Exception):
            raise error
        if error:
            return SimpleNamespace(data=None, error=error)

        if self.inserted is not None:
            self.client.inserted.setdefault(self.table_name, []).append(list(self.inserted))
            return SimpleNamespace(data=list(self.inserted), error=None)

        rows = [
            r for r in self.client.tables.get(self.table_name, [])
            if all(r.get(col, val) == val for col, val in self.filters)
        ]
        if self.order_by:
            col, desc = self.order_by
            rows = sorted(rows, key=lambda r: r.get(col), reverse=desc)
        if self.limit_n is not None:
            rows = rows[:self.limit_n]
        return SimpleNamespace(data=rows, error=None)


class FakeSupabaseClient:
    def __init__(self, tables=None, errors=None):
        self.tables = tables or {}
        self.errors = errors or {}
        self.calls = []
        self.inserted = {}
        self.schemas = []

    def schema(self, name):
        self.schemas.append(name)
        return self

    def table(self, name):
        return FakeQuery(self, name)


class FakeSalesSource:
    """In-memory store for generation runs; counts reads."""

    def __init__(self, sales_by_date=None, customers=None, last_bill_number=0, fail_on=None):
        self.sales_by_date = sales_by_date or {}
        self.customers = customers if customers is not None else []
        self.last_bill_number = last_bill_number
        self.fail_on = fail_on
        self.sales_calls = []
        self.last_number_calls = 0
        self.customer_calls = 0

    def get_sale_line_items(self, bar_id, sale_date):
        self.sales_calls.append(sale_date)
        if self.fail_on is not None and sale_date == self.fail_on:
            from domain.exceptions import FetchError
            raise FetchError(f"Failed to fetch sales for {sale_date}: connection reset")
        return list(self.sales_by_date.get(sale_date, []))

    def get_customers(self, bar_id):
        self.customer_calls += 1
        return list(self.customers)

    def get_last_bill_number(self):
        self.last_number_calls += 1
        return self.last_bill_number


def make_item(name="Royal Stag", qty=1, price="150", code=None, size="180ml"):
    return SaleLineItem(
        brand_name=name,
        item_code=code or name[:3].upper(),
        size=size,
        unit_price=Decimal(price),
        quantity=qty,
    )


def make_bill(number="000001", bill_date=date(2025, 3, 1), entries=None, customer=None):
    entries = entries if entries is not None else [BillLineEntry(make_item(qty=2), 2)]
    subtotal = sum((e.line_total for e in entries), Decimal("0"))
    tax = subtotal * Decimal("5") / Decimal("100")
    return Bill(
        bill_number=number,
        bill_date=bill_date,
        customer=customer or Customer(id=1, name="Ravi Traders", license_number="FL-001"),
        entries=entries,
        subtotal=subtotal,
        tax_percent=Decimal("5"),
        tax_amount=tax,
        final_total=subtotal + tax,
    )


@pytest.fixture
def customers():
    return [
        Customer(id=1, name="Ravi Traders", license_number="FL-001"),
        Customer(id=2, name="Sai Enterprises", license_number="FL-002"),
        Customer(id=3, name="Om Wines", license_number="FL-003"),
    ]


@pytest.fixture
def first_customer_source():
    """Random source that always picks index 0."""
    return lambda n: 0
