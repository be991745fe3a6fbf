"""Enumeration strategy: isolate each feature by its membership partition."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from splfl.engine.base import IsolationStrategy, register_strategy
from splfl.logging import get_logger
from splfl.model.difference import DifferenceExpression
from splfl.results.isolation import Isolation
from splfl.types import Strategy

logger = get_logger(__name__)


@register_strategy(Strategy.ENUMERATION)
class EnumerationStrategy(IsolationStrategy):
    """Scan every system once per feature.

    A system goes to the intersection part when its feature set contains the
    feature and to the union part otherwise. The partition isolates the
    feature by construction, so no validity check is done. Results are
    ordered by feature name. O(T * S).
    """

    def compute(self) -> Tuple[List[Isolation], Dict[str, Any]]:
        catalog = self.systems
        rows = list(zip(catalog.names, catalog.feature_sets()))
        isolations: List[Isolation] = []
        for feature in self.taxonomy.all_feature_names:
            intersections = []
            unions = []
            for name, features in rows:
                if feature in features:
                    intersections.append(name)
                else:
                    unions.append(name)
            isolations.append(
                Isolation(
                    feature=feature,
                    difference=DifferenceExpression(
                        frozenset(intersections), frozenset(unions)
                    ),
                )
            )
        logger.debug(
            f"Partitioned {len(catalog)} systems for {len(isolations)} features"
        )
        return isolations, {"systems_scanned": len(catalog) * len(isolations)}
