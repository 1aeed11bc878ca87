import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from supabase import create_client, Client

from domain.exceptions import FetchError, PersistError
from domain.models import Bar, Bill, Customer, SaleLineItem
from services.bill_numbering import parse_bill_number
from settings import Settings

logger = logging.getLogger(__name__)

BATCH_SIZE = 500

_clients: Dict[Tuple[str, str], Client] = {}


def get_client(url: str, key: str) -> Client:
    """
    Build the Supabase client once per process for a given URL / key.
    """
    if not url or not key:
        raise RuntimeError("Set SUPABASE_URL and SUPABASE_KEY in .env or environment variables")
    if (url, key) not in _clients:
        _clients[(url, key)] = create_client(url, key)
    return _clients[(url, key)]


def chunked(items: List[Dict], size: int) -> Iterable[List[Dict]]:
    for i in range(0, len(items), size):
        yield items[i:i + size]


def _raise_on_error(resp, what: str) -> None:
    if getattr(resp, "error", None):
        raise FetchError(f"{what} failed: {resp.error}")


class BillDataStore:
    """
    Read side of the bill generator, plus the caller-driven write of
    issued bills. Every query goes through `client.schema(schema)`.
    """

    def __init__(
            self,
            client: Optional[Client] = None,
            schema: str = "public",
            url: str = "",
            key: str = "",
    ):
        self._client = client
        self.schema = schema
        self._url = url
        self._key = key

    @classmethod
    def from_settings(cls, settings: Settings) -> "BillDataStore":
        return cls(schema=settings.schema, url=settings.supabase_url, key=settings.supabase_key)

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_client(self._url, self._key)
        return self._client

    def _table(self, name: str):
        return self.client.schema(self.schema).table(name)

    def get_bars(self) -> List[Bar]:
        try:
            resp = (
                self._table("bars")
                .select("id, bar_name, license_number")
                .order("bar_name")
                .execute()
            )
            _raise_on_error(resp, "Fetch bars")
        except FetchError:
            raise
        except Exception as e:
            raise FetchError(f"Failed to fetch bars: {e}") from e

        return [
            Bar(
                id=str(row["id"]),
                name=row.get("bar_name") or "",
                license_number=row.get("license_number") or "",
            )
            for row in (resp.data or [])
        ]

    def get_sale_line_items(self, bar_id: str, sale_date: date) -> List[SaleLineItem]:
        """
        Sale line items for one bar and one day, in brand order.

        Each daily_sales row joins its brand:
          { "brand_id": 7, "qty": 12,
            "brands": {"brand_name": ..., "item_code": ..., "sizes": ..., "mrp": ...} }
        """
        try:
            resp = (
                self._table("daily_sales")
                .select(
                    """
                    brand_id,
                    qty,
                    brands (
                        brand_name,
                        item_code,
                        sizes,
                        mrp
                    )
                    """
                )
                .eq("bar_id", bar_id)
                .eq("sale_date", sale_date.isoformat())
                .order("brand_id")
                .execute()
            )
            _raise_on_error(resp, f"Fetch sales for {sale_date}")
        except FetchError:
            raise
        except Exception as e:
            raise FetchError(f"Failed to fetch sales for {sale_date}: {e}") from e

        items: List[SaleLineItem] = []
        for row in resp.data or []:
            brand = row.get("brands")
            if not brand:
                # sale row pointing at a deleted brand
                logger.warning("Sale row for brand_id=%s on %s has no brand", row.get("brand_id"), sale_date)
                continue
            if brand.get("mrp") in (None, ""):
                logger.warning("Brand %s has no MRP, dropping its sales on %s", brand.get("brand_name"), sale_date)
                continue

            items.append(
                SaleLineItem(
                    brand_name=brand.get("brand_name") or "",
                    item_code=brand.get("item_code") or "",
                    size=brand.get("sizes") or "",
                    unit_price=Decimal(str(brand["mrp"])),
                    quantity=int(row.get("qty") or 0),
                )
            )
        return items

    def get_customers(self, bar_id: str) -> List[Customer]:
        try:
            resp = (
                self._table("customers")
                .select("id, customer_name, license_number")
                .eq("bar_id", bar_id)
                .order("customer_name")
                .execute()
            )
            _raise_on_error(resp, "Fetch customers")
        except FetchError:
            raise
        except Exception as e:
            raise FetchError(f"Failed to fetch customers: {e}") from e

        return [
            Customer(
                id=row["id"],
                name=row.get("customer_name") or "",
                license_number=row.get("license_number") or "",
            )
            for row in (resp.data or [])
        ]

    def get_last_bill_number(self) -> int:
        """Highest persisted bill number, 0 when no bill exists yet."""
        try:
            resp = (
                self._table("bills")
                .select("bill_number")
                .order("bill_number", desc=True)
                .limit(1)
                .execute()
            )
            _raise_on_error(resp, "Fetch last bill number")
        except FetchError:
            raise
        except Exception as e:
            raise FetchError(f"Failed to fetch last bill number: {e}") from e

        if not resp.data:
            return 0
        return parse_bill_number(resp.data[0].get("bill_number"))

    def save_bills(self, bar_id: str, bills: List[Bill], batch_size: int = BATCH_SIZE) -> int:
        """
        Persist issued bills so the next run continues after them.
        bills.bill_number is unique in the database, so a concurrent run
        that issued the same numbers is rejected here.
        Returns the number of rows written.
        """
        rows: List[Dict[str, Any]] = [
            {
                "bar_id": bar_id,
                "bill_number": parse_bill_number(bill.bill_number),
                "bill_date": bill.bill_date.isoformat(),
                "customer_id": bill.customer.id,
                "subtotal": str(bill.subtotal),
                "tax_percent": str(bill.tax_percent),
                "tax_amount": str(bill.tax_amount),
                "final_total": str(bill.final_total),
            }
            for bill in bills
        ]

        if not rows:
            return 0

        total = 0
        try:
            for batch in chunked(rows, batch_size):
                resp = self._table("bills").insert(batch).execute()
                if getattr(resp, "error", None):
                    raise PersistError(f"Insert bills failed: {resp.error}")
                total += len(batch)
                logger.info("Saved %d bills (running total: %d)", len(batch), total)
        except PersistError:
            raise
        except Exception as e:
            raise PersistError(f"Failed to save bills after {total} rows: {e}") from e

        return total
