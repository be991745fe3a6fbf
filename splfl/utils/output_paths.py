"""Output path policy of the splfl CLI.

Every command that writes files resolves its paths here:

- ``run`` writes ``fl_<F>_M<m>_<strategy>.<ext>``;
- ``analyze`` writes ``<analysis stem>.results.json``;
- ``bitstrings`` writes its category files into a directory.

An explicit ``--results`` path wins over the default name. Relative explicit
paths and default names are placed under ``--output`` when it is given, and
stay relative to the current working directory otherwise.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


def run_prefix(n_features: int, model_id: int, strategy_label: str) -> str:
    """Return ``fl_<F>_M<m>_<strategy>``."""
    return f"fl_{n_features}_M{model_id}_{strategy_label}"


def ensure_parent_dir(path: Path) -> None:
    """Create the parent directory of ``path`` if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)


def build_artifact_path(output_dir: Optional[Path], prefix: str, suffix: str) -> Path:
    """Return ``output_dir / (prefix + suffix)``; CWD when ``output_dir`` is None.

    Args:
        output_dir: Base directory for outputs.
        prefix: File name stem, e.g. ``fl_3_M19_closed_form``.
        suffix: Extension including the dot, e.g. ``.txt``.
    """
    base = output_dir if output_dir is not None else Path.cwd()
    return base / f"{prefix}{suffix}"


def resolve_override_path(
    override: Optional[Path], output_dir: Optional[Path]
) -> Optional[Path]:
    """Resolve an explicit ``--results`` path.

    Absolute paths are kept. Relative paths go under ``output_dir`` when it
    is given and stay relative to CWD otherwise. Returns None without an
    override.
    """
    if override is None:
        return None
    if override.is_absolute() or output_dir is None:
        return override
    return (output_dir / override).resolve()


def _default_or_override(
    prefix: str,
    suffix: str,
    output_dir: Optional[Path],
    results_override: Optional[Path],
) -> Path:
    resolved = resolve_override_path(results_override, output_dir)
    if resolved is not None:
        return resolved
    if output_dir is not None:
        return build_artifact_path(output_dir, prefix, suffix)
    return Path(f"{prefix}{suffix}")


def report_path_for_run(
    n_features: int,
    model_id: int,
    strategy_label: str,
    extension: str,
    output_dir: Optional[Path],
    results_override: Optional[Path],
) -> Path:
    """Return the report path of the ``run`` command.

    Args:
        n_features: Number of independent features F.
        model_id: Model identifier.
        strategy_label: Strategy label used in the default name.
        extension: Report extension without the dot (``txt``, ``json``, ``csv``).
        output_dir: Optional ``--output`` directory.
        results_override: Optional ``--results`` path.
    """
    return _default_or_override(
        run_prefix(n_features, model_id, strategy_label),
        f".{extension}",
        output_dir,
        results_override,
    )


def results_path_for_analysis(
    analysis_path: Path,
    output_dir: Optional[Path],
    results_override: Optional[Path],
) -> Path:
    """Return the JSON results path of the ``analyze`` command."""
    return _default_or_override(
        analysis_path.stem, ".results.json", output_dir, results_override
    )


def bitstring_directory(output_dir: Optional[Path]) -> Path:
    """Return the directory receiving the per-category bitstring files."""
    return output_dir if output_dir is not None else Path.cwd()
