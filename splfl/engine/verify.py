"""Cross-strategy verification."""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, List, Optional, Union

from splfl.engine.base import isolate
from splfl.logging import get_logger
from splfl.model.systems import SystemCatalog, enumerate_systems
from splfl.model.taxonomy import FeatureTaxonomy
from splfl.results.isolation import IsolationResult
from splfl.types import Strategy

logger = get_logger(__name__)

# Catalogs with more systems than this skip per-expression evaluation
_MAX_EVALUATED_SYSTEMS = 256


class StrategyMismatchError(RuntimeError):
    """Two strategies disagreed on the systems that contain a feature."""


def _check_evaluation(result: IsolationResult, catalog: SystemCatalog) -> None:
    for isolation in result:
        evaluated = isolation.difference.evaluate(catalog)
        if evaluated != frozenset({isolation.feature}):
            raise StrategyMismatchError(
                f"{result.strategy.label}: {isolation.difference} evaluates to "
                f"{sorted(evaluated)}, expected ['{isolation.feature}']"
            )


def compare_results(
    results: Iterable[IsolationResult],
    catalog: Optional[SystemCatalog] = None,
) -> Dict[str, FrozenSet[str]]:
    """Check that already computed results agree.

    Each result is reduced to a map ``feature -> systems in the intersection
    part``. When ``catalog`` is given and has at most 256 systems, every
    difference is also evaluated and must yield exactly its own feature.

    Args:
        results: Results of one taxonomy (at least one).
        catalog: System catalog of that taxonomy, for the evaluation check.

    Returns:
        The membership map all results agree on.

    Raises:
        StrategyMismatchError: On the first feature whose membership differs,
            or a difference that does not evaluate to its feature.
        ValueError: If no result is given or results span several taxonomies.
    """
    selected = list(results)
    if not selected:
        raise ValueError("At least one strategy is required")
    taxonomy = selected[0].taxonomy
    if any(r.taxonomy != taxonomy for r in selected):
        raise ValueError("Results were computed for different taxonomies")

    reference = selected[0].membership()
    reference_name = selected[0].strategy.label
    for result in selected:
        if catalog is not None and len(catalog) <= _MAX_EVALUATED_SYSTEMS:
            _check_evaluation(result, catalog)
        membership = result.membership()
        for feature in sorted(set(reference) | set(membership)):
            expected = reference.get(feature)
            actual = membership.get(feature)
            if expected != actual:
                raise StrategyMismatchError(
                    f"Feature '{feature}': {reference_name} gives "
                    f"{sorted(expected) if expected is not None else None}, "
                    f"{result.strategy.label} gives "
                    f"{sorted(actual) if actual is not None else None}"
                )
    logger.info(
        f"Strategies {', '.join(r.strategy.label for r in selected)} agree on "
        f"{len(reference)} features for F={taxonomy.F} M={taxonomy.M}"
    )
    return reference


def verify_strategies(
    taxonomy: FeatureTaxonomy,
    catalog: Optional[SystemCatalog] = None,
    strategies: Iterable[Union[Strategy, str]] = (
        Strategy.ENUMERATION,
        Strategy.CLOSED_FORM,
    ),
    parallelism: int = 1,
) -> Dict[str, FrozenSet[str]]:
    """Run several strategies and check with :func:`compare_results` that they agree.

    Args:
        taxonomy: Taxonomy to analyze.
        catalog: Shared system catalog; enumerated when omitted.
        strategies: Strategies to compare (at least one).
        parallelism: Worker processes for the exhaustive search.

    Returns:
        The membership map all strategies agree on.

    Raises:
        StrategyMismatchError: If two strategies disagree.
        ValueError: If no strategy is given.
    """
    selected: List[Strategy] = [
        Strategy.from_string(s) if isinstance(s, str) else s for s in strategies
    ]
    if not selected:
        raise ValueError("At least one strategy is required")
    if catalog is None:
        catalog = enumerate_systems(taxonomy)
    results = [
        isolate(taxonomy, strategy, catalog, parallelism=parallelism)
        for strategy in selected
    ]
    return compare_results(results, catalog)
