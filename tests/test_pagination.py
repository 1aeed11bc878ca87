import pytest

from conftest import make_bill
from services.pagination import paginate_bills


def _bills(n):
    return [make_bill(number=f"{i:06d}") for i in range(1, n + 1)]


def test_thirteen_bills_make_two_pages():
    pages = paginate_bills(_bills(13), 12)

    assert [p.number for p in pages] == [1, 2]
    assert [len(p.bills) for p in pages] == [12, 1]
    assert pages[1].bills[0].bill_number == "000013"


@pytest.mark.parametrize("count", [1, 11, 12, 24, 25, 100])
def test_pages_bounded_and_order_preserved(count):
    bills = _bills(count)

    pages = paginate_bills(bills)

    assert all(1 <= len(p.bills) <= 12 for p in pages)
    assert [b for p in pages for b in p.bills] == bills


def test_empty_list_has_no_pages():
    assert paginate_bills([]) == []


def test_invalid_capacity():
    with pytest.raises(ValueError):
        paginate_bills(_bills(3), 0)
