"""splfl: feature location in combinatorial software product lines.

Given F independent features and one of 19 feature-interaction models, splfl
derives every composite feature, enumerates the 2**F systems of the product
line and computes, for each feature, the set-difference expression over
systems that isolates it.

Primary API:
    build_taxonomy() - Features and counts for (F, model)
    enumerate_systems() - Defining feature set of every system
    isolate() - Run one isolation strategy
    verify_strategies() - Check that strategies agree
    Analysis - Batch runs described by a YAML file

Example:
    from splfl import build_taxonomy, isolate

    taxonomy = build_taxonomy(3, 19)
    result = isolate(taxonomy, "closed_form")
    for isolation in result:
        print(isolation.feature, isolation.difference)
"""

from __future__ import annotations

from splfl import cli, logging
from splfl._version import __version__
from splfl.analysis import Analysis, RunSpec
from splfl.engine import (
    IsolationInvariantError,
    StrategyMismatchError,
    isolate,
    verify_strategies,
)
from splfl.model import (
    DifferenceExpression,
    Feature,
    FeatureTaxonomy,
    ModelSpec,
    SystemCatalog,
    build_taxonomy,
    enumerate_systems,
    get_model,
)
from splfl.results import Isolation, IsolationResult, Results
from splfl.types import FeatureKind, Strategy

__all__ = [
    # Version
    "__version__",
    # Model
    "ModelSpec",
    "get_model",
    "Feature",
    "FeatureTaxonomy",
    "build_taxonomy",
    "SystemCatalog",
    "enumerate_systems",
    "DifferenceExpression",
    # Engines
    "isolate",
    "verify_strategies",
    "IsolationInvariantError",
    "StrategyMismatchError",
    # Results
    "Isolation",
    "IsolationResult",
    "Results",
    # Analysis files
    "Analysis",
    "RunSpec",
    # Types
    "FeatureKind",
    "Strategy",
    # Utilities
    "cli",
    "logging",
]
