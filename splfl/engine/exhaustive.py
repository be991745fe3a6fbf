"""Exhaustive ID-search strategy.

Every difference ID e in 1..D-1 (D = 2**S) splits the systems into an
intersection part (bit set) and a union part (bit clear). Each split is
evaluated with set algebra over the systems' feature sets and kept when it
isolates exactly one feature.

Performance characteristics:
Time complexity: O(D x S / P) where P is parallelism. D = 2**(2**F), so the
search is only practical for very small F and is refused above
``LIMITS.max_exhaustive_features``.

Parallelism: the ID range is cut into contiguous blocks that are evaluated
independently. System feature sets are shipped once per worker through the
pool initializer. Searches with fewer IDs than ``LIMITS.serial_threshold``
always run serially to avoid IPC overhead.
"""

from __future__ import annotations

import os
import time
from concurrent.futures import ProcessPoolExecutor
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from splfl.config import LIMITS
from splfl.engine.base import IsolationStrategy, register_strategy
from splfl.logging import (
    ProgressLogger,
    apply_env_log_level,
    export_log_level,
    get_logger,
)
from splfl.model.difference import DifferenceExpression
from splfl.model.taxonomy import display_count
from splfl.results.isolation import Isolation
from splfl.types import Strategy

logger = get_logger(__name__)

# Feature sets indexed by system index, shared with worker processes
_shared_feature_sets: Optional[Tuple[FrozenSet[str], ...]] = None

# Number of ID blocks per worker
_BLOCKS_PER_WORKER = 16


class IsolationInvariantError(RuntimeError):
    """A difference evaluated to more than one feature.

    Distinct features always have distinct membership sets, so this signals
    an inconsistent taxonomy or model rather than bad input.
    """

    def __init__(self, difference_id: int, features: FrozenSet[str]) -> None:
        self.difference_id = difference_id
        self.features = features
        super().__init__(
            f"Difference ID {difference_id} isolates {len(features)} features: "
            + ", ".join(sorted(features))
        )

    def __reduce__(self):
        return (type(self), (self.difference_id, self.features))


def evaluate_id(
    difference_id: int, feature_sets: Tuple[FrozenSet[str], ...]
) -> FrozenSet[str]:
    """Evaluate ``(∩ intersection part) \\ (∪ union part)`` for one ID.

    Args:
        difference_id: Bit p set puts system index p in the intersection part.
        feature_sets: Feature sets indexed by system index.

    Returns:
        The features left after the subtraction. Empty when the intersection
        part is empty.
    """
    result: Optional[FrozenSet[str]] = None
    for index, features in enumerate(feature_sets):
        if difference_id >> index & 1:
            result = features if result is None else result & features
            if not result:
                return frozenset()
    if result is None:
        return frozenset()
    for index, features in enumerate(feature_sets):
        if not difference_id >> index & 1:
            result = result - features
            if not result:
                break
    return result


def _search_block(bounds: Tuple[int, int]) -> List[Tuple[int, str]]:
    """Return ``(difference_id, feature)`` pairs isolated inside ``[lo, hi)``.

    Raises:
        IsolationInvariantError: If an ID isolates more than one feature.
    """
    if _shared_feature_sets is None:
        raise RuntimeError("Worker not initialized with system feature sets")
    feature_sets = _shared_feature_sets
    lo, hi = bounds
    found: List[Tuple[int, str]] = []
    for difference_id in range(lo, hi):
        result = evaluate_id(difference_id, feature_sets)
        if len(result) == 1:
            (feature,) = result
            found.append((difference_id, feature))
        elif len(result) > 1:
            raise IsolationInvariantError(difference_id, result)
    return found


def _worker_init(feature_sets: Tuple[FrozenSet[str], ...]) -> None:
    """Install the shared feature sets in a worker process."""
    global _shared_feature_sets
    _shared_feature_sets = feature_sets
    apply_env_log_level()

    get_logger(f"{__name__}.worker").debug(
        f"Worker {os.getpid()} initialized with {len(feature_sets)} systems"
    )


def _blocks(total_ids: int, n_blocks: int) -> List[Tuple[int, int]]:
    """Cut IDs 1..total_ids into at most ``n_blocks`` contiguous ranges."""
    size = max(1, -(-total_ids // n_blocks))
    return [
        (lo, min(lo + size, total_ids + 1)) for lo in range(1, total_ids + 1, size)
    ]


@register_strategy(Strategy.EXHAUSTIVE)
class ExhaustiveStrategy(IsolationStrategy):
    """Search all 2**S difference IDs and keep those isolating one feature.

    Results are ordered by difference ID and carry the raw IDs.
    """

    def compute(self) -> Tuple[List[Isolation], Dict[str, Any]]:
        LIMITS.check_exhaustive_features(self.taxonomy.F)
        n_systems = self.taxonomy.S
        total_ids = self.taxonomy.D - 1
        feature_sets = self.systems.feature_sets()

        workers = min(self.parallelism, total_ids)
        if workers > 1 and total_ids >= LIMITS.serial_threshold:
            found = self._run_parallel(feature_sets, total_ids, workers)
        else:
            workers = 1
            found = self._run_serial(feature_sets, total_ids)

        isolations = [
            Isolation(
                feature=feature,
                difference=DifferenceExpression.from_id(difference_id, n_systems),
                difference_id=difference_id,
            )
            for difference_id, feature in sorted(found)
        ]
        metadata = {
            "ids_evaluated": total_ids,
            "D": display_count(self.taxonomy.D),
            "workers": workers,
        }
        return isolations, metadata

    def _run_serial(
        self, feature_sets: Tuple[FrozenSet[str], ...], total_ids: int
    ) -> List[Tuple[int, str]]:
        """Evaluate every ID in the current process."""
        global _shared_feature_sets
        logger.info(f"Running serial search over {total_ids} difference IDs")
        _shared_feature_sets = feature_sets

        progress = ProgressLogger(logger, "Serial search", total_ids, "IDs evaluated")
        found: List[Tuple[int, str]] = []
        try:
            for bounds in _blocks(total_ids, 10):
                found.extend(_search_block(bounds))
                progress.update(bounds[1] - 1)
        finally:
            _shared_feature_sets = None
        return found

    def _run_parallel(
        self,
        feature_sets: Tuple[FrozenSet[str], ...],
        total_ids: int,
        workers: int,
    ) -> List[Tuple[int, str]]:
        """Evaluate ID blocks in worker processes.

        Feature sets are sent once per worker through the pool initializer;
        tasks only carry block bounds.
        """
        logger.info(
            f"Running parallel search with {workers} workers "
            f"over {total_ids} difference IDs"
        )
        blocks = _blocks(total_ids, workers * _BLOCKS_PER_WORKER)
        chunksize = max(1, len(blocks) // (workers * 4))
        logger.debug(f"Using {len(blocks)} blocks with chunksize={chunksize}")

        export_log_level()

        start_time = time.time()
        found: List[Tuple[int, str]] = []
        progress = ProgressLogger(
            logger, "Parallel search", len(blocks), "blocks completed"
        )
        with ProcessPoolExecutor(
            max_workers=workers,
            initializer=_worker_init,
            initargs=(feature_sets,),
        ) as pool:
            try:
                for completed, block_found in enumerate(
                    pool.map(_search_block, blocks, chunksize=chunksize), start=1
                ):
                    found.extend(block_found)
                    progress.update(completed)
            except IsolationInvariantError as err:
                logger.error(f"Aborting parallel search: {err}")
                pool.shutdown(wait=False, cancel_futures=True)
                raise

        elapsed_time = time.time() - start_time
        logger.info(f"Parallel search completed in {elapsed_time:.2f} seconds")
        return found
