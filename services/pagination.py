from typing import List, Sequence

from domain.models import Bill, Page
from settings import DEFAULT_BILLS_PER_PAGE

GRID_COLUMNS = 3
GRID_ROWS = 4


def paginate_bills(bills: Sequence[Bill], page_capacity: int = DEFAULT_BILLS_PER_PAGE) -> List[Page]:
    """
    Split bills, in generation order, into consecutive pages of at most
    page_capacity bills. Only the last page may be partially filled.
    """
    if page_capacity < 1:
        raise ValueError(f"page_capacity must be at least 1, got {page_capacity}")

    return [
        Page(number=n, bills=list(bills[start:start + page_capacity]))
        for n, start in enumerate(range(0, len(bills), page_capacity), start=1)
    ]
