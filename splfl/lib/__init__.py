"""Self-contained numeric helpers used by the taxonomy and the engines."""

from splfl.lib.combinatorics import (
    KCombination,
    ceil_div,
    combinations,
    combinations_by_size,
    factorial,
    power,
    power2,
    product,
    sum_of_combinations,
    unsigned_to_ids,
)

__all__ = [
    "KCombination",
    "ceil_div",
    "combinations",
    "combinations_by_size",
    "factorial",
    "power",
    "power2",
    "product",
    "sum_of_combinations",
    "unsigned_to_ids",
]
