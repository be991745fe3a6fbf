"""Base class and registry for isolation strategies.

Every strategy computes, for each feature of a taxonomy, the difference
expression that isolates it. Concrete strategies implement
:meth:`IsolationStrategy.compute`; :meth:`IsolationStrategy.run` wraps it with
timing and logging and returns an :class:`IsolationResult`.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type, Union

from splfl.logging import get_logger
from splfl.model.systems import SystemCatalog, enumerate_systems
from splfl.model.taxonomy import FeatureTaxonomy
from splfl.results.isolation import Isolation, IsolationResult
from splfl.types import Strategy

logger = get_logger(__name__)

# Registry for strategy classes
STRATEGY_REGISTRY: Dict[Strategy, Type["IsolationStrategy"]] = {}


def register_strategy(strategy: Strategy):
    """Return a decorator that registers an `IsolationStrategy` subclass.

    Args:
        strategy: Registry key used to look the class up by name.

    Returns:
        A class decorator that adds the class to `STRATEGY_REGISTRY`.
    """

    def decorator(cls: Type["IsolationStrategy"]) -> Type["IsolationStrategy"]:
        cls.strategy = strategy
        STRATEGY_REGISTRY[strategy] = cls
        return cls

    return decorator


class IsolationStrategy(ABC):
    """Base class for all isolation strategies.

    Attributes:
        taxonomy: Taxonomy whose features are isolated.
        systems: Materialized systems. Built on demand by strategies that
            need them; the closed-form strategy never touches it.
        parallelism: Worker processes for strategies that can split their
            work. Ignored by the others.
    """

    strategy: ClassVar[Strategy]

    def __init__(
        self,
        taxonomy: FeatureTaxonomy,
        systems: Optional[SystemCatalog] = None,
        parallelism: int = 1,
    ) -> None:
        if systems is not None and systems.taxonomy != taxonomy:
            raise ValueError("System catalog was built from a different taxonomy")
        if parallelism < 1:
            raise ValueError(f"parallelism must be >= 1, got {parallelism}")
        self.taxonomy = taxonomy
        self.parallelism = parallelism
        self._systems = systems

    @property
    def systems(self) -> SystemCatalog:
        if self._systems is None:
            self._systems = enumerate_systems(self.taxonomy)
        return self._systems

    def run(self) -> IsolationResult:
        """Compute all isolations with timing and logging.

        Raises:
            Exception: Re-raises anything raised by :meth:`compute` after
                logging the failure and its duration.
        """
        name = self.strategy.label
        tax = self.taxonomy
        logger.info(f"Starting {name} isolation for F={tax.F} M={tax.M}")
        start_time = time.time()
        try:
            isolations, metadata = self.compute()
        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                f"Failed {name} isolation after {duration:.3f} seconds - "
                f"{type(e).__name__}: {e}"
            )
            raise
        duration = time.time() - start_time
        logger.info(
            f"Completed {name} isolation: {len(isolations)} features "
            f"in {duration:.3f} seconds"
        )
        return IsolationResult(
            strategy=self.strategy,
            taxonomy=tax,
            isolations=tuple(isolations),
            elapsed=duration,
            metadata=metadata,
        )

    @abstractmethod
    def compute(self) -> Tuple[List[Isolation], Dict[str, Any]]:
        """Return the isolations in strategy order and strategy metadata."""
        raise NotImplementedError


def get_strategy(strategy: Union[Strategy, str]) -> Type[IsolationStrategy]:
    """Return the strategy class registered for ``strategy``.

    Raises:
        ValueError: If the name is unknown or nothing is registered for it.
    """
    if isinstance(strategy, str):
        strategy = Strategy.from_string(strategy)
    try:
        return STRATEGY_REGISTRY[strategy]
    except KeyError:
        raise ValueError(f"No isolation strategy registered for {strategy!r}") from None


def isolate(
    taxonomy: FeatureTaxonomy,
    strategy: Union[Strategy, str] = Strategy.CLOSED_FORM,
    systems: Optional[SystemCatalog] = None,
    parallelism: int = 1,
) -> IsolationResult:
    """Run one strategy over ``taxonomy``.

    Args:
        taxonomy: Taxonomy to analyze.
        strategy: Strategy enum member or its name.
        systems: Optional pre-built system catalog to share between runs.
        parallelism: Worker processes (used by the exhaustive search).

    Returns:
        The strategy's isolation result.
    """
    cls = get_strategy(strategy)
    return cls(taxonomy, systems, parallelism=parallelism).run()
