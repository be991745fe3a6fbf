"""Batch analyses described by YAML files.

An :class:`Analysis` is an ordered list of :class:`RunSpec` entries, each
naming a feature count, a model, the strategies to compute and whether their
agreement should be verified. Results of every run are collected in a
:class:`splfl.results.Results` store.

Example:
    analysis = Analysis.from_yaml(yaml_str)
    analysis.run()
    document = analysis.results.to_dict()
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from splfl.config import LIMITS
from splfl.dsl.loader import load_analysis_yaml
from splfl.engine import compare_results, isolate
from splfl.logging import get_logger
from splfl.model.catalog import get_model
from splfl.model.systems import SystemCatalog, enumerate_systems
from splfl.model.taxonomy import build_taxonomy
from splfl.results.isolation import IsolationResult
from splfl.results.store import Results
from splfl.types import Strategy

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunSpec:
    """One (F, model) combination to analyze.

    Attributes:
        name: Unique run name.
        features: Number of independent features F.
        model: Model identifier.
        strategies: Strategies to compute, in order.
        parallelism: Worker processes for the exhaustive search.
        verify: Whether to check that all strategies agree.
    """

    name: str
    features: int
    model: int
    strategies: Tuple[Strategy, ...] = (Strategy.CLOSED_FORM,)
    parallelism: int = 1
    verify: bool = False

    def __post_init__(self) -> None:
        LIMITS.check_features(self.features)
        get_model(self.model)
        if not self.strategies:
            raise ValueError(f"Run '{self.name}' has no strategies")
        if self.parallelism < 1:
            raise ValueError(f"Run '{self.name}': parallelism must be >= 1")

    @classmethod
    def from_dict(cls, entry: Dict[str, Any]) -> "RunSpec":
        features = entry["features"]
        model = entry["model"]
        strategies = tuple(
            Strategy.from_string(s) for s in entry.get("strategies", ["closed_form"])
        )
        return cls(
            name=entry.get("name") or f"F{features}_M{model}",
            features=features,
            model=model,
            strategies=strategies,
            parallelism=entry.get("parallelism", 1),
            verify=entry.get("verify", False),
        )

    @property
    def needs_systems(self) -> bool:
        """True if any requested computation scans materialized systems."""
        return self.verify or any(s != Strategy.CLOSED_FORM for s in self.strategies)


@dataclass
class Analysis:
    """Ordered runs plus the results store they write into."""

    runs: List[RunSpec]
    results: Results = field(default_factory=Results)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "Analysis":
        """Build an analysis from a YAML document.

        Raises:
            ValueError: If the document is malformed or two runs share a name.
            jsonschema.ValidationError: If the document violates the schema.
        """
        data = load_analysis_yaml(yaml_str)
        runs: List[RunSpec] = []
        names = set()
        for entry in data["runs"]:
            spec = RunSpec.from_dict(entry)
            if spec.name in names:
                raise ValueError(f"Duplicate run name '{spec.name}'")
            names.add(spec.name)
            runs.append(spec)
        analysis = cls(runs=runs)
        analysis.results.set_config_snapshot(data)
        logger.debug(f"Loaded analysis with {len(runs)} runs")
        return analysis

    def run(self) -> Results:
        """Execute every run in order and return the results store."""
        for order, spec in enumerate(self.runs):
            self._run_one(spec, order)
        return self.results

    def _run_one(self, spec: RunSpec, order: int) -> None:
        logger.info(f"Starting run '{spec.name}' (F={spec.features}, M={spec.model})")
        start_time = time.time()
        taxonomy = build_taxonomy(spec.features, spec.model)
        catalog: Optional[SystemCatalog] = (
            enumerate_systems(taxonomy) if spec.needs_systems else None
        )

        strategy_results: Dict[str, IsolationResult] = {}
        for strategy in spec.strategies:
            result = isolate(
                taxonomy, strategy, catalog, parallelism=spec.parallelism
            )
            strategy_results[strategy.label] = result

        data: Dict[str, Any] = {
            "counts": taxonomy.counts(),
            "model": taxonomy.model.to_dict(),
            "results": strategy_results,
        }
        if catalog is not None:
            data["systems"] = catalog.to_dict()
        if spec.verify:
            membership = compare_results(strategy_results.values(), catalog)
            data["verification"] = {
                "strategies": [s.label for s in spec.strategies],
                "features": len(membership),
                "agree": True,
            }

        self.results.enter_run(spec.name)
        try:
            self.results.put(
                "metadata", {"elapsed": round(time.time() - start_time, 6)}
            )
            self.results.put("data", data)
        finally:
            self.results.exit_run()
        self.results.put_run_metadata(
            spec.name,
            spec.features,
            spec.model,
            order,
            strategies=tuple(s.label for s in spec.strategies),
            verified=spec.verify,
        )
        logger.info(f"Completed run '{spec.name}'")
