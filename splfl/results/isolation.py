"""Isolation results produced by the feature location strategies.

An :class:`Isolation` pairs a feature with the difference expression that
isolates it. :class:`IsolationResult` is the ordered collection returned by a
strategy, with JSON-safe export and a pandas view for offline analysis.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Tuple

import pandas as pd

from splfl.model.difference import DifferenceExpression, bitstring
from splfl.model.taxonomy import FeatureTaxonomy, display_id
from splfl.types import Strategy


@dataclass(frozen=True)
class Isolation:
    """The difference expression that isolates one feature.

    Attributes:
        feature: Isolated feature name.
        difference: Isolating difference expression.
        difference_id: Difference ID when the strategy surfaces one.
    """

    feature: str
    difference: DifferenceExpression
    difference_id: Optional[int] = None

    @property
    def bits(self) -> int:
        """Membership bitstring value (equals the difference ID)."""
        if self.difference_id is not None:
            return self.difference_id
        return self.difference.to_id()

    @property
    def systems(self) -> FrozenSet[str]:
        """Systems that contain the feature (the intersection part)."""
        return self.difference.intersections

    def to_dict(self) -> Dict[str, Any]:
        return {
            "difference_id": (
                display_id(self.difference_id)
                if self.difference_id is not None
                else None
            ),
            "feature": self.feature,
            "intersections": sorted(self.difference.intersections),
            "unions": sorted(self.difference.unions),
            "expression": self.difference.to_text(),
        }


@dataclass
class IsolationResult:
    """Ordered isolations computed by one strategy for one taxonomy.

    Attributes:
        strategy: Strategy that produced the result.
        taxonomy: Taxonomy the result belongs to.
        isolations: Isolations in strategy order (by feature name for the
            enumeration strategy, by difference ID otherwise).
        elapsed: Wall-clock duration of the computation in seconds.
        metadata: Strategy-specific details (e.g. IDs evaluated).
    """

    strategy: Strategy
    taxonomy: FeatureTaxonomy
    isolations: Tuple[Isolation, ...]
    elapsed: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.isolations)

    def __iter__(self) -> Iterator[Isolation]:
        return iter(self.isolations)

    @property
    def n_systems(self) -> int:
        return self.taxonomy.S

    @property
    def features(self) -> List[str]:
        return [i.feature for i in self.isolations]

    def by_feature(self) -> Dict[str, Isolation]:
        return {i.feature: i for i in self.isolations}

    def get(self, feature: str) -> Isolation:
        """Return the isolation of ``feature``.

        Raises:
            KeyError: If the feature was not isolated by this result.
        """
        for isolation in self.isolations:
            if isolation.feature == feature:
                return isolation
        raise KeyError(feature)

    def membership(self) -> Dict[str, FrozenSet[str]]:
        """Map each feature to the systems that contain it."""
        return {i.feature: i.systems for i in self.isolations}

    def bitstrings(self) -> List[Tuple[str, str]]:
        """Return ``(feature, S-bit string)`` pairs in result order."""
        width = self.n_systems
        return [(i.feature, bitstring(i.bits, width)) for i in self.isolations]

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-safe representation."""
        return {
            "strategy": self.strategy.label,
            "features": self.taxonomy.F,
            "model": self.taxonomy.M,
            "elapsed": self.elapsed,
            "metadata": dict(self.metadata),
            "isolations": [i.to_dict() for i in self.isolations],
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Return one row per isolated feature.

        Columns: ``difference_id``, ``feature``, ``kind``, ``intersections``,
        ``unions``, ``bitstring``. ``difference_id`` is filled from the
        membership bits when the strategy did not surface IDs.
        """
        columns = [
            "difference_id",
            "feature",
            "kind",
            "intersections",
            "unions",
            "bitstring",
        ]
        rows = []
        for isolation in self.isolations:
            kind = (
                self.taxonomy.feature(isolation.feature).kind.label
                if isolation.feature in self.taxonomy
                else None
            )
            difference = isolation.difference
            rows.append(
                {
                    "difference_id": display_id(isolation.bits),
                    "feature": isolation.feature,
                    "kind": kind,
                    "intersections": " ".join(sorted(difference.intersections)),
                    "unions": " ".join(sorted(difference.unions)),
                    "bitstring": bitstring(isolation.bits, self.n_systems),
                }
            )
        return pd.DataFrame(rows, columns=columns)
