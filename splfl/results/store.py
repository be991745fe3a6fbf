"""Run-scoped results store for analyses.

`Results` organizes outputs by run name and records `RunMetadata` for each
run. Storage is strictly run-scoped: runs write two keys under their
namespace:

- ``metadata``: run-level metadata (dict)
- ``data``: run payload (dict)

Export with :meth:`Results.to_dict`, which returns a JSON-safe structure
with shape ``{analysis, runs, config}``. During export, objects with a
``to_dict()`` method are converted, dictionary keys are coerced to strings,
tuples are emitted as lists, and only JSON primitives are produced.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class RunMetadata:
    """Metadata for one analysis run.

    Attributes:
        run_name: Unique name of the run.
        features: Number of independent features F.
        model: Model identifier.
        execution_order: Order in which this run was executed (0-based).
        strategies: Strategy labels computed by the run.
        verified: Whether strategy agreement was checked.
    """

    run_name: str
    features: int
    model: int
    execution_order: int
    strategies: Tuple[str, ...] = ()
    verified: bool = False


@dataclass
class Results:
    """Run-scoped results container with deterministic export shape.

    Structure:
      - analysis: run metadata registry
      - runs: per-run results with enforced keys {"metadata", "data"}
      - config: optional snapshot of the analysis document
    """

    # Per-run data store: _store[run_name]["metadata"|"data"] = dict
    _store: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    # Metadata registry: _metadata[run_name] = RunMetadata
    _metadata: Dict[str, RunMetadata] = field(default_factory=dict)

    # Active run scope
    _active_run: Optional[str] = None

    # Analysis document snapshot
    _config: Dict[str, Any] = field(default_factory=dict)

    # ---- Scope management -------------------------------------------------
    def enter_run(self, run_name: str) -> None:
        """Enter run scope. Subsequent put/get are scoped to this run."""
        self._active_run = run_name
        if run_name not in self._store:
            self._store[run_name] = {}

    def exit_run(self) -> None:
        """Exit run scope."""
        self._active_run = None

    # ---- Run-scoped accessors --------------------------------------------
    def put(self, key: str, value: Any) -> None:
        """Store a value in the active run under an allowed key.

        Allowed keys are strictly "metadata" and "data". Both are expected to be
        dictionaries at export time.
        """
        if self._active_run is None:
            raise RuntimeError("Results.put() called without active run scope")
        if key not in {"metadata", "data"}:
            raise ValueError("Results.put() only allows keys 'metadata' and 'data'")
        self._store.setdefault(self._active_run, {})[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value from the active run scope."""
        if self._active_run is None:
            raise RuntimeError("Results.get() called without active run scope")
        return self._store.get(self._active_run, {}).get(key, default)

    def get_run(self, run_name: str) -> Dict[str, Any]:
        """Return the raw dict for a given run name."""
        return self._store.get(run_name, {})

    def put_run_metadata(
        self,
        run_name: str,
        features: int,
        model: int,
        execution_order: int,
        *,
        strategies: Tuple[str, ...] = (),
        verified: bool = False,
    ) -> None:
        """Store metadata for a run.

        Args:
            run_name: The run name.
            features: Number of independent features F.
            model: Model identifier.
            execution_order: Order in which this run was executed (0-based).
            strategies: Strategy labels computed by the run.
            verified: Whether strategy agreement was checked.
        """
        self._metadata[run_name] = RunMetadata(
            run_name=run_name,
            features=features,
            model=model,
            execution_order=execution_order,
            strategies=tuple(strategies),
            verified=verified,
        )

    def get_run_metadata(self, run_name: str) -> Optional[RunMetadata]:
        return self._metadata.get(run_name)

    def get_runs_by_execution_order(self) -> List[str]:
        """Get run names ordered by their execution order."""
        return sorted(
            self._metadata.keys(), key=lambda run: self._metadata[run].execution_order
        )

    def set_config_snapshot(self, snapshot: Dict[str, Any]) -> None:
        """Attach the parsed analysis document for export."""
        self._config = snapshot

    def to_dict(self) -> Dict[str, Any]:
        """Return exported results with shape: {analysis, runs, config}."""
        analysis: Dict[str, Any] = {
            run_name: {
                "run_name": md.run_name,
                "features": md.features,
                "model": md.model,
                "execution_order": md.execution_order,
                "strategies": list(md.strategies),
                "verified": md.verified,
            }
            for run_name, md in self._metadata.items()
        }

        runs: Dict[str, Dict[str, Any]] = {}
        for run_name, data in self._store.items():
            # Enforce explicit keys
            if not set(data.keys()).issubset({"metadata", "data"}):
                invalid = ", ".join(sorted(set(data.keys()) - {"metadata", "data"}))
                raise ValueError(
                    f"Run '{run_name}' contains invalid result keys: {invalid}"
                )
            metadata_part = data.get("metadata") or {}
            data_part = data.get("data") or {}
            if not isinstance(metadata_part, dict) or not isinstance(data_part, dict):
                raise ValueError(
                    f"Run '{run_name}' must store dicts for 'metadata' and 'data'"
                )
            runs[run_name] = {
                "metadata": deep_convert(metadata_part),
                "data": deep_convert(data_part),
            }

        out: Dict[str, Any] = {"analysis": analysis, "runs": runs}
        if self._config:
            out["config"] = self._config
        return out


def deep_convert(v: Any) -> Any:
    """Convert nested structures; apply to_dict to any object that supports it."""
    if hasattr(v, "to_dict") and callable(v.to_dict):
        return deep_convert(v.to_dict())
    if isinstance(v, dict):
        return {str(k): deep_convert(val) for k, val in v.items()}
    if isinstance(v, (list, tuple, frozenset, set)):
        items = sorted(v) if isinstance(v, (frozenset, set)) else v
        return [deep_convert(x) for x in items]
    return v
