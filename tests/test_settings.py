from decimal import Decimal

import pytest

import settings

ENV_VARS = [
    "SUPABASE_URL", "SUPABASE_KEY", "SCHEMA", "BILL_ENTRY_CAP",
    "BILL_QUANTITY_CAP", "BILLS_PER_PAGE", "DEFAULT_SERVICE_TAX_PERCENT", "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr(settings, "load_dotenv", lambda *a, **k: False)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = settings.load_settings()

    assert s.schema == "public"
    assert s.entry_cap == 5
    assert s.quantity_cap == 5
    assert s.bills_per_page == 12
    assert s.default_tax_percent == Decimal("5")
    assert s.log_level == "INFO"


def test_overrides_from_environment(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SCHEMA", "bar_db")
    monkeypatch.setenv("BILL_ENTRY_CAP", "8")
    monkeypatch.setenv("DEFAULT_SERVICE_TAX_PERCENT", "12.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    s = settings.load_settings()

    assert s.supabase_url == "https://example.supabase.co"
    assert s.schema == "bar_db"
    assert s.entry_cap == 8
    assert s.default_tax_percent == Decimal("12.5")
    assert s.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["five", "0", "-2"])
def test_bad_cap_names_the_variable(monkeypatch, raw):
    monkeypatch.setenv("BILL_QUANTITY_CAP", raw)

    with pytest.raises(ValueError, match="BILL_QUANTITY_CAP"):
        settings.load_settings()


def test_bad_tax_default(monkeypatch):
    monkeypatch.setenv("DEFAULT_SERVICE_TAX_PERCENT", "abc")

    with pytest.raises(ValueError, match="DEFAULT_SERVICE_TAX_PERCENT"):
        settings.load_settings()
