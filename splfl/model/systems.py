"""Enumeration of all systems of a product line.

A system is one subset of the independent features. System ``index`` in
0..S-1 is a bitmask over identifiers (bit i set means identifier i+1 is
present) and is displayed as ``S<index+1>``. The catalog materializes every
system's defining feature set once and keeps it read-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterator, List, Tuple

from splfl.config import NOTATION
from splfl.lib.combinatorics import unsigned_to_ids
from splfl.logging import get_logger
from splfl.model.taxonomy import FeatureTaxonomy, system_name
from splfl.types import FeatureId, FeatureSet

logger = get_logger(__name__)


@dataclass(frozen=True)
class System:
    """One system of the product line.

    Attributes:
        index: Bitmask over identifiers, 0..S-1.
        features: Sorted defining feature names.
    """

    index: int
    features: FeatureSet

    @property
    def number(self) -> int:
        """1-based display number."""
        return self.index + 1

    @property
    def name(self) -> str:
        return system_name(self.number)

    @property
    def present_ids(self) -> Tuple[FeatureId, ...]:
        return tuple(unsigned_to_ids(self.index))

    def has(self, feature: str) -> bool:
        return feature in self.features


class SystemCatalog:
    """Ordered, read-only collection of every system of a taxonomy.

    Use :func:`enumerate_systems` to build one.
    """

    def __init__(self, taxonomy: FeatureTaxonomy, systems: List[System]) -> None:
        self._taxonomy = taxonomy
        self._systems: Tuple[System, ...] = tuple(systems)
        self._feature_sets: Tuple[FrozenSet[str], ...] = tuple(
            frozenset(s.features) for s in self._systems
        )

    @property
    def taxonomy(self) -> FeatureTaxonomy:
        return self._taxonomy

    @property
    def systems(self) -> Tuple[System, ...]:
        return self._systems

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(s.name for s in self._systems)

    def __len__(self) -> int:
        return len(self._systems)

    def __iter__(self) -> Iterator[System]:
        return iter(self._systems)

    def __getitem__(self, index: int) -> System:
        return self._systems[index]

    def index_of(self, name: str) -> int:
        """Return the 0-based index of system ``name`` (``S<k>``).

        Raises:
            ValueError: If ``name`` is not a system name of this catalog.
        """
        prefix = NOTATION.system
        digits = name[len(prefix) :] if name.startswith(prefix) else ""
        if not digits.isdigit():
            raise ValueError(f"{name!r} is not a system identifier.")
        number = int(digits)
        if number < 1 or number > len(self._systems):
            raise ValueError(
                f"{name!r} is out of range; systems are "
                f"{system_name(1)}..{system_name(len(self._systems))}"
            )
        return number - 1

    def by_name(self, name: str) -> System:
        return self._systems[self.index_of(name)]

    def features_of(self, name: str) -> FrozenSet[str]:
        """Return the defining feature set of system ``name``."""
        return self._feature_sets[self.index_of(name)]

    def feature_sets(self) -> Tuple[FrozenSet[str], ...]:
        """Defining feature sets indexed by system index."""
        return self._feature_sets

    def membership(self, feature: str) -> FrozenSet[str]:
        """Return the names of the systems that contain ``feature``."""
        return frozenset(
            name
            for name, features in zip(self.names, self._feature_sets)
            if feature in features
        )

    def to_dict(self) -> Dict[str, List[str]]:
        return {s.name: list(s.features) for s in self._systems}


def enumerate_systems(taxonomy: FeatureTaxonomy) -> SystemCatalog:
    """Materialize every system of ``taxonomy`` in index order 0..S-1."""
    systems = [
        System(index=s, features=taxonomy.system_for_index(s))
        for s in range(taxonomy.S)
    ]
    logger.debug(f"Enumerated {len(systems)} systems for F={taxonomy.F}")
    return SystemCatalog(taxonomy, systems)
