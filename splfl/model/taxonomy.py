"""Feature taxonomy of a combinatorially generated product line.

Given F independent features and a model, the taxonomy lists every feature
name per category, the operand identifiers behind each composite feature,
and the aggregate counts:

- F: independent features
- O, A: or-/and-features, one per k-combination of identifiers, k = 2..F
- N: not-features, one per identifier
- ON, AN: or-not-/and-not-features over negated identifiers, k = 2..F
- DF = O + A + N + ON + AN, T = F + DF
- S = 2**F systems, D = 2**S difference IDs

It also derives the defining feature set of one system from the identifiers
present in it (:meth:`FeatureTaxonomy.system`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from splfl.config import LIMITS, NOTATION
from splfl.lib.combinatorics import (
    combinations_by_size,
    power2,
    sum_of_combinations,
    unsigned_to_ids,
)
from splfl.logging import get_logger
from splfl.model.catalog import ModelSpec, get_model
from splfl.types import FeatureId, FeatureKind, FeatureSet, ModelId

logger = get_logger(__name__)

# Counts wider than this are reported as powers of two
_MAX_DISPLAY_BITS = 1024


def independent_feature_name(i: FeatureId) -> str:
    """Return the name of independent feature ``i`` (e.g. ``f1``)."""
    return f"{NOTATION.feature}{i}"


def _joined_name(ids: Sequence[FeatureId], operator: str, negated: bool) -> str:
    prefix = NOTATION.feature_not if negated else ""
    glue = f"{NOTATION.feature_separator}{operator}{NOTATION.feature_separator}"
    return glue.join(f"{prefix}{NOTATION.feature}{i}" for i in ids)


def or_feature_name(ids: Sequence[FeatureId]) -> str:
    """Return the or-feature name for ``ids`` (e.g. ``f1 + f2``)."""
    return _joined_name(ids, NOTATION.feature_or, negated=False)


def and_feature_name(ids: Sequence[FeatureId]) -> str:
    """Return the and-feature name for ``ids`` (e.g. ``f1 * f2``)."""
    return _joined_name(ids, NOTATION.feature_and, negated=False)


def not_feature_name(i: FeatureId) -> str:
    """Return the not-feature name of identifier ``i`` (e.g. ``!f1``)."""
    return f"{NOTATION.feature_not}{NOTATION.feature}{i}"


def or_not_feature_name(ids: Sequence[FeatureId]) -> str:
    """Return the or-not-feature name for ``ids`` (e.g. ``!f1 + !f2``)."""
    return _joined_name(ids, NOTATION.feature_or, negated=True)


def and_not_feature_name(ids: Sequence[FeatureId]) -> str:
    """Return the and-not-feature name for ``ids`` (e.g. ``!f1 * !f2``)."""
    return _joined_name(ids, NOTATION.feature_and, negated=True)


def system_name(k: int) -> str:
    """Return the display name of the 1-based system ``k`` (e.g. ``S3``)."""
    return f"{NOTATION.system}{k}"


def difference_name(e: int) -> str:
    """Return the display name of difference ID ``e`` (e.g. ``E12``)."""
    return f"{NOTATION.difference_expression}{display_id(e)}"


def display_id(value: int) -> Any:
    """Return ``value`` unchanged, or as a hex string when it is very wide."""
    if value.bit_length() > _MAX_DISPLAY_BITS:
        return hex(value)
    return value


def display_count(value: int) -> Any:
    """Return ``value`` unchanged unless it is too wide to print as decimal.

    Wide values are powers of two (D = 2**S) and are rendered as ``2^<exp>``.
    """
    if value.bit_length() > _MAX_DISPLAY_BITS and value & (value - 1) == 0:
        return f"2^{value.bit_length() - 1}"
    return value


@dataclass(frozen=True)
class Feature:
    """One feature of the product line.

    Attributes:
        name: Canonical feature name, fixed at construction.
        kind: Feature category.
        ids: Operand identifiers. A single identifier for independent and
            not-features, a k-combination (k >= 2) otherwise.
    """

    name: str
    kind: FeatureKind
    ids: Tuple[FeatureId, ...]

    def holds_for(self, present: Iterable[FeatureId]) -> bool:
        """Return True if this feature belongs to a system with ``present`` ids."""
        present_set = present if isinstance(present, frozenset) else set(present)
        if self.kind in (FeatureKind.INDEPENDENT, FeatureKind.AND):
            return all(i in present_set for i in self.ids)
        if self.kind == FeatureKind.OR:
            return any(i in present_set for i in self.ids)
        if self.kind in (FeatureKind.NOT, FeatureKind.AND_NOT):
            return all(i not in present_set for i in self.ids)
        return any(i not in present_set for i in self.ids)


@dataclass(frozen=True)
class FeatureTaxonomy:
    """Every feature of a product line for F independent features and a model.

    Build instances with :func:`build_taxonomy`; all fields are derived from
    ``(n_features, model)`` and never change afterwards.

    Attributes:
        n_features: Number of independent features F.
        model: Catalog entry of the selected model.
        raw_dependent_features: Every k-combination (k = 2..F) of identifiers
            in generation order. Operands of or-, and-, or-not- and
            and-not-features.
        features: All features in generation order: independent, or, and,
            not, or-not, and-not.
    """

    n_features: int
    model: ModelSpec
    raw_dependent_features: Tuple[Tuple[FeatureId, ...], ...]
    features: Tuple[Feature, ...]
    _by_name: Dict[str, Feature] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        self._by_name.update({f.name: f for f in self.features})

    # ---- Aggregate counts -------------------------------------------------
    @property
    def F(self) -> int:
        return self.n_features

    @property
    def M(self) -> ModelId:
        return self.model.model_id

    @property
    def O(self) -> int:  # noqa: E743
        return sum_of_combinations(self.F, 2) if self.model.has_or else 0

    @property
    def A(self) -> int:
        return sum_of_combinations(self.F, 2) if self.model.has_and else 0

    @property
    def N(self) -> int:
        return self.F if self.model.has_not else 0

    @property
    def ON(self) -> int:
        return sum_of_combinations(self.F, 2) if self.model.has_or_not else 0

    @property
    def AN(self) -> int:
        return sum_of_combinations(self.F, 2) if self.model.has_and_not else 0

    @property
    def DF(self) -> int:
        """Number of inherently dependent features."""
        return self.O + self.A + self.N + self.ON + self.AN

    @property
    def T(self) -> int:
        """Total number of features."""
        return self.F + self.DF

    @property
    def S(self) -> int:
        """Number of systems."""
        return power2(self.F)

    @property
    def D(self) -> int:
        """Number of all possible set differences of systems."""
        return power2(self.S)

    def counts(self) -> Dict[str, Any]:
        """Return the header counts keyed by their short names."""
        return {
            "M": self.M,
            "T": self.T,
            "F": self.F,
            "DF": self.DF,
            "O": self.O,
            "A": self.A,
            "N": self.N,
            "ON": self.ON,
            "AN": self.AN,
            "S": self.S,
            "D": display_count(self.D),
        }

    # ---- Feature access ---------------------------------------------------
    @property
    def independent_ids(self) -> Tuple[FeatureId, ...]:
        return tuple(range(1, self.F + 1))

    def features_of(self, kind: FeatureKind) -> Tuple[Feature, ...]:
        """Return the features of one category in generation order."""
        return tuple(f for f in self.features if f.kind == kind)

    def names_of(self, kind: FeatureKind) -> Tuple[str, ...]:
        """Return the feature names of one category in generation order."""
        return tuple(f.name for f in self.features if f.kind == kind)

    @property
    def all_feature_names(self) -> Tuple[str, ...]:
        """All feature names, sorted."""
        return tuple(sorted(self._by_name))

    def feature(self, name: str) -> Feature:
        """Return the feature called ``name``.

        Raises:
            KeyError: If no such feature exists in this taxonomy.
        """
        return self._by_name[name]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self.features)

    # ---- System derivation ------------------------------------------------
    def system(self, present: Iterable[FeatureId]) -> FeatureSet:
        """Return the sorted feature names that define a system.

        Args:
            present: Identifiers of the independent features present in the
                system; every other identifier in 1..F is absent.

        Returns:
            Present independent features, or-features with an operand present,
            and-features with all operands present, not-features of absent
            identifiers, or-not-features with an operand absent and
            and-not-features with all operands absent, sorted by name.
        """
        present_set = frozenset(present)
        return tuple(
            sorted(f.name for f in self.features if f.holds_for(present_set))
        )

    def system_for_index(self, index: int) -> FeatureSet:
        """Return the defining features of system ``index`` (0..S-1).

        Bit i of ``index`` set means identifier i+1 is present.
        """
        if index < 0 or index >= self.S:
            raise ValueError(f"System index must be in [0, {self.S - 1}], got {index}")
        return self.system(unsigned_to_ids(index))

    def to_dict(self) -> Dict[str, Any]:
        """Return counts, model flags and feature names per category."""
        return {
            "counts": self.counts(),
            "model": self.model.to_dict(),
            "features": {
                kind.label: list(self.names_of(kind)) for kind in self.model.kinds
            },
        }


def build_taxonomy(n_features: int, model_id: ModelId) -> FeatureTaxonomy:
    """Build the feature taxonomy for F independent features and a model.

    Args:
        n_features: Number of independent features F (1..LIMITS.max_features).
        model_id: Model identifier (1..19).

    Returns:
        The immutable taxonomy.

    Raises:
        ValueError: If F or the model id is out of range.
    """
    LIMITS.check_features(n_features)
    model = get_model(model_id)

    ids = tuple(range(1, n_features + 1))
    raw_dependent = tuple(combinations_by_size(ids, 2, n_features))

    features: List[Feature] = [
        Feature(independent_feature_name(i), FeatureKind.INDEPENDENT, (i,))
        for i in ids
    ]
    if model.has_or:
        features.extend(
            Feature(or_feature_name(c), FeatureKind.OR, c) for c in raw_dependent
        )
    if model.has_and:
        features.extend(
            Feature(and_feature_name(c), FeatureKind.AND, c) for c in raw_dependent
        )
    if model.has_not:
        features.extend(
            Feature(not_feature_name(i), FeatureKind.NOT, (i,)) for i in ids
        )
    if model.has_or_not:
        features.extend(
            Feature(or_not_feature_name(c), FeatureKind.OR_NOT, c)
            for c in raw_dependent
        )
    if model.has_and_not:
        features.extend(
            Feature(and_not_feature_name(c), FeatureKind.AND_NOT, c)
            for c in raw_dependent
        )

    taxonomy = FeatureTaxonomy(
        n_features=n_features,
        model=model,
        raw_dependent_features=raw_dependent,
        features=tuple(features),
    )
    logger.debug(
        f"Built taxonomy for F={n_features} M={model.model_id} ({model.label}): "
        f"T={taxonomy.T} DF={taxonomy.DF} S={taxonomy.S}"
    )
    return taxonomy
