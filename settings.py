# settings.py
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv

DEFAULT_ENTRY_CAP = 5  # distinct line entries per bill
DEFAULT_QUANTITY_CAP = 5  # bottles per line entry
DEFAULT_BILLS_PER_PAGE = 12  # 3 x 4 grid on a legal landscape sheet
DEFAULT_SERVICE_TAX_PERCENT = Decimal("5")


@dataclass(frozen=True)
class Settings:
    supabase_url: str
    supabase_key: str
    schema: str
    entry_cap: int = DEFAULT_ENTRY_CAP
    quantity_cap: int = DEFAULT_QUANTITY_CAP
    bills_per_page: int = DEFAULT_BILLS_PER_PAGE
    default_tax_percent: Decimal = DEFAULT_SERVICE_TAX_PERCENT
    log_level: str = "INFO"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return value


def _decimal_env(name: str, default: Decimal) -> Decimal:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return Decimal(raw.strip())
    except InvalidOperation:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def load_settings() -> Settings:
    """
    Read settings from the environment (and .env, if present).
    Supabase credentials may be empty here; the client raises when
    they are actually needed.
    """
    load_dotenv()
    return Settings(
        supabase_url=os.getenv("SUPABASE_URL", ""),
        supabase_key=os.getenv("SUPABASE_KEY", ""),
        schema=os.getenv("SCHEMA") or "public",
        entry_cap=_int_env("BILL_ENTRY_CAP", DEFAULT_ENTRY_CAP),
        quantity_cap=_int_env("BILL_QUANTITY_CAP", DEFAULT_QUANTITY_CAP),
        bills_per_page=_int_env("BILLS_PER_PAGE", DEFAULT_BILLS_PER_PAGE),
        default_tax_percent=_decimal_env("DEFAULT_SERVICE_TAX_PERCENT", DEFAULT_SERVICE_TAX_PERCENT),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
