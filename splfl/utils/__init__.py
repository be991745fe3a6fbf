"""Utility helpers used across splfl."""

from splfl.utils.output_paths import (
    bitstring_directory,
    build_artifact_path,
    ensure_parent_dir,
    report_path_for_run,
    resolve_override_path,
    results_path_for_analysis,
    run_prefix,
)

__all__ = [
    "bitstring_directory",
    "build_artifact_path",
    "ensure_parent_dir",
    "report_path_for_run",
    "resolve_override_path",
    "results_path_for_analysis",
    "run_prefix",
]
