import random
from typing import Callable, Sequence

from domain.exceptions import NoCustomersError
from domain.models import Customer

# Given a list length n, return an index in [0, n).
RandomSource = Callable[[int], int]


def default_random_source(n: int) -> int:
    return random.randrange(n)


def seeded_random_source(seed: int) -> RandomSource:
    """Reproducible source, handy for re-printing the same run."""
    rng = random.Random(seed)
    return rng.randrange


def require_customers(customers: Sequence[Customer]) -> None:
    if not customers:
        raise NoCustomersError(
            "No customers found for this bar. Add customers before generating bills."
        )


def assign_customer(
        customers: Sequence[Customer],
        random_source: RandomSource = default_random_source,
) -> Customer:
    """
    Pick one customer uniformly at random. Repeats across bills are
    expected when there are fewer customers than bills.
    """
    require_customers(customers)

    idx = random_source(len(customers))
    if not 0 <= idx < len(customers):
        raise ValueError(f"Random source returned {idx} for {len(customers)} customers")
    return customers[idx]
