"""Set-difference expressions over systems.

A difference expression splits the systems into an intersection part and a
union part and evaluates to ``(∩ intersection part) \\ (∪ union part)`` over
the systems' defining feature sets. A difference ID encodes such a split as
an integer whose bit p decides system ``S<p+1>``: set means intersection,
clear means union.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable

from splfl.config import NOTATION
from splfl.model.systems import SystemCatalog
from splfl.model.taxonomy import system_name


def _system_number(name: str) -> int:
    digits = name[len(NOTATION.system) :] if name.startswith(NOTATION.system) else ""
    if not digits.isdigit():
        raise ValueError(f"{name!r} is not a system identifier.")
    return int(digits)


def _format_part(names: Iterable[str], operator: str) -> str:
    sep = NOTATION.set_separator
    # Ordered like a set of strings: S1, S10, S11, ..., S2
    body = f"{sep}{operator}{sep}".join(sorted(names))
    opening = NOTATION.opening_parenthesis
    closing = NOTATION.closing_parenthesis
    return f"{opening}{sep}{body}{sep}{closing}"


@dataclass(frozen=True)
class DifferenceExpression:
    """Split of system names into an intersection part and a union part.

    Attributes:
        intersections: Systems whose feature sets are intersected (left operand).
        unions: Systems whose feature sets are united (right operand).
    """

    intersections: FrozenSet[str]
    unions: FrozenSet[str]

    def __post_init__(self) -> None:
        overlap = self.intersections & self.unions
        if overlap:
            raise ValueError(
                "System(s) in both parts of a difference: "
                + ", ".join(sorted(overlap))
            )

    @classmethod
    def from_id(cls, difference_id: int, n_systems: int) -> "DifferenceExpression":
        """Decode a difference ID over ``n_systems`` systems."""
        if difference_id < 0 or difference_id >> n_systems:
            raise ValueError(
                f"Difference ID {difference_id} does not fit {n_systems} systems"
            )
        intersections = []
        unions = []
        for position in range(n_systems):
            name = system_name(position + 1)
            if difference_id >> position & 1:
                intersections.append(name)
            else:
                unions.append(name)
        return cls(frozenset(intersections), frozenset(unions))

    def to_id(self) -> int:
        """Encode this split back to its difference ID."""
        return membership_bits(self.intersections)

    def evaluate_intersections(self, catalog: SystemCatalog) -> FrozenSet[str]:
        """Intersect the feature sets of the intersection part.

        An empty intersection part yields the empty set.
        """
        names = sorted(self.intersections)
        if not names:
            return frozenset()
        result = catalog.features_of(names[0])
        for name in names[1:]:
            result = result & catalog.features_of(name)
            if not result:
                break
        return result

    def evaluate_unions(self, catalog: SystemCatalog) -> FrozenSet[str]:
        """Unite the feature sets of the union part."""
        result: FrozenSet[str] = frozenset()
        for name in self.unions:
            result = result | catalog.features_of(name)
        return result

    def evaluate(self, catalog: SystemCatalog) -> FrozenSet[str]:
        """Return ``(∩ intersections) \\ (∪ unions)`` over ``catalog``."""
        intersections = self.evaluate_intersections(catalog)
        if not intersections:
            return intersections
        return intersections - self.evaluate_unions(catalog)

    def to_text(self) -> str:
        """Render as ``( Si & Sj ) \\ ( Sk | Sl )``."""
        sep = NOTATION.set_separator
        return (
            f"{_format_part(self.intersections, NOTATION.set_intersection)}"
            f"{sep}{NOTATION.set_difference}{sep}"
            f"{_format_part(self.unions, NOTATION.set_union)}"
        )

    def __str__(self) -> str:
        return self.to_text()


def bitstring(value: int, width: int) -> str:
    """Return the low ``width`` bits of ``value``, most significant bit first.

    Bit p corresponds to system ``S<p+1>``, so the string reads from system
    S (left) down to system 1 (right).
    """
    if value < 0:
        raise ValueError("Bitstring values must be non-negative")
    return format(value & ((1 << width) - 1), f"0{width}b")


def membership_bits(members: Iterable[str]) -> int:
    """Return the bitstring value of a set of system names."""
    value = 0
    for name in members:
        value |= 1 << (_system_number(name) - 1)
    return value

