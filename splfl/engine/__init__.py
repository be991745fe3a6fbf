"""Isolation strategies.

Importing this package registers every strategy in ``STRATEGY_REGISTRY``.
"""

from splfl.engine.base import (
    STRATEGY_REGISTRY,
    IsolationStrategy,
    get_strategy,
    isolate,
    register_strategy,
)
from splfl.engine.closed_form import (
    ClosedFormStrategy,
    feature_bits,
    independent_bitstring_by_indicator,
    independent_bits,
    independent_indicator,
    negate_bits,
    system_mask,
)
from splfl.engine.enumeration import EnumerationStrategy
from splfl.engine.exhaustive import (
    ExhaustiveStrategy,
    IsolationInvariantError,
    evaluate_id,
)
from splfl.engine.verify import (
    StrategyMismatchError,
    compare_results,
    verify_strategies,
)

__all__ = [
    "STRATEGY_REGISTRY",
    "IsolationStrategy",
    "get_strategy",
    "isolate",
    "register_strategy",
    "EnumerationStrategy",
    "ExhaustiveStrategy",
    "ClosedFormStrategy",
    "IsolationInvariantError",
    "evaluate_id",
    "feature_bits",
    "independent_bits",
    "independent_indicator",
    "independent_bitstring_by_indicator",
    "negate_bits",
    "system_mask",
    "StrategyMismatchError",
    "compare_results",
    "verify_strategies",
]
