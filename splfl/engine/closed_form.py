"""Closed-form bitmask strategy.

Each feature is an S-bit membership value: bit p set means system ``S<p+1>``
contains the feature. Values are computed arithmetically from the
independent features' periodic patterns, so no system is materialized:

- independent f: blocks of 2**(f-1) clear bits then 2**(f-1) set bits,
  repeated across the S systems;
- or/and: bitwise OR/AND of the operands' independent values;
- not: complement of the independent value, masked to the low S bits;
- or-not/and-not: bitwise OR/AND of the operands' not values.

A feature's membership value is also its difference ID: reading the bits
off gives the intersection part (set) and the union part (clear).
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from splfl.engine.base import IsolationStrategy, register_strategy
from splfl.lib.combinatorics import ceil_div, power2
from splfl.logging import get_logger
from splfl.model.difference import DifferenceExpression
from splfl.model.taxonomy import FeatureTaxonomy
from splfl.results.isolation import Isolation
from splfl.types import FeatureId, FeatureKind, Strategy

logger = get_logger(__name__)


def system_mask(n_systems: int) -> int:
    """Return an integer with the low ``n_systems`` bits set."""
    return power2(n_systems) - 1


def independent_bits(f: FeatureId, n_systems: int) -> int:
    """Return the membership value of independent feature ``f``.

    Example:
        >>> format(independent_bits(2, 8), "08b")
        '11001100'
    """
    block = power2(f - 1)
    period = 2 * block
    if period > n_systems:
        raise ValueError(f"Feature f{f} needs at least {period} systems")
    # One period is `block` clear bits followed by `block` set bits
    unit = system_mask(block) << block
    repeat = system_mask(n_systems) // system_mask(period)
    return unit * repeat


def independent_indicator(f: FeatureId, s: int) -> bool:
    """Return True if the 1-based system ``s`` contains independent feature ``f``.

    Uses ``!(ceil(s / 2**(f-1)) % 2)`` and needs no bitstring.
    """
    return not ceil_div(s, power2(f - 1)) % 2


def independent_bitstring_by_indicator(f: FeatureId, n_systems: int) -> int:
    """Assemble :func:`independent_bits` one system at a time."""
    value = 0
    for s in range(1, n_systems + 1):
        if independent_indicator(f, s):
            value |= 1 << (s - 1)
    return value


def negate_bits(value: int, n_systems: int) -> int:
    """Complement ``value`` within the low ``n_systems`` bits."""
    return ~value & system_mask(n_systems)


def feature_bits(taxonomy: FeatureTaxonomy) -> Dict[str, int]:
    """Return the membership value of every feature, in generation order."""
    n_systems = taxonomy.S
    mask = system_mask(n_systems)
    ind = {i: independent_bits(i, n_systems) for i in taxonomy.independent_ids}
    neg = {i: negate_bits(v, n_systems) for i, v in ind.items()}

    values: Dict[str, int] = {}
    for feature in taxonomy.features:
        kind = feature.kind
        if kind == FeatureKind.INDEPENDENT:
            value = ind[feature.ids[0]]
        elif kind == FeatureKind.NOT:
            value = neg[feature.ids[0]]
        elif kind in (FeatureKind.OR, FeatureKind.OR_NOT):
            source = ind if kind == FeatureKind.OR else neg
            value = 0
            for i in feature.ids:
                value |= source[i]
        else:
            source = ind if kind == FeatureKind.AND else neg
            value = mask
            for i in feature.ids:
                value &= source[i]
        values[feature.name] = value
    return values


@register_strategy(Strategy.CLOSED_FORM)
class ClosedFormStrategy(IsolationStrategy):
    """Compute each feature's difference ID directly with bitwise formulas.

    Results are ordered by difference ID. O(T * S) time with bit-parallel
    integer operations and no system catalog.
    """

    def compute(self) -> Tuple[List[Isolation], Dict[str, Any]]:
        n_systems = self.taxonomy.S
        values = feature_bits(self.taxonomy)
        isolations = [
            Isolation(
                feature=name,
                difference=DifferenceExpression.from_id(value, n_systems),
                difference_id=value,
            )
            for name, value in sorted(values.items(), key=lambda kv: kv[1])
        ]
        logger.debug(f"Computed {len(values)} membership values over {n_systems} bits")
        return isolations, {"mask_bits": n_systems}
