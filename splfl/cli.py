"""Command-line interface for splfl."""

from __future__ import annotations

import argparse
import io
import json
import logging
import sys
from pathlib import Path
from time import perf_counter
from typing import Any, Dict, List, Optional

from splfl.analysis import Analysis
from splfl.engine import isolate, verify_strategies
from splfl.logging import get_logger, set_global_log_level
from splfl.model.catalog import list_models
from splfl.model.systems import enumerate_systems
from splfl.model.taxonomy import build_taxonomy
from splfl.report import (
    format_header,
    format_systems,
    write_bitstring_files,
    write_report,
)
from splfl.results.store import Results
from splfl.types import Strategy
from splfl.utils.output_paths import (
    bitstring_directory,
    ensure_parent_dir,
    report_path_for_run,
    results_path_for_analysis,
    run_prefix,
)

logger = get_logger(__name__)

_FORMAT_EXTENSIONS = {"text": "txt", "json": "json", "csv": "csv"}


def _format_table(
    headers: List[str],
    rows: List[List[str]],
    min_width: int = 4,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers
        rows: Data rows
        min_width: Minimum column width

    Returns:
        Formatted table string
    """
    if not rows:
        return ""

    all_data = [headers] + rows
    col_widths = []
    for col_idx in range(len(headers)):
        max_width = max(len(str(row[col_idx])) for row in all_data)
        col_widths.append(max(max_width, min_width))

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{str(item):<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(headers)]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    for row in rows:
        lines.append(format_row(row))
    return "\n".join(lines)


def _format_duration(seconds: float) -> str:
    """Return a concise human-readable duration string.

    Examples:
        0.123 -> "123.0 ms"; 1.234 -> "1.23 s"; 75.2 -> "1m 15.2s".
    """
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f} ms"
    if seconds < 60.0:
        return f"{seconds:.2f} s"
    minutes = int(seconds // 60)
    rem = seconds - minutes * 60
    return f"{minutes}m {rem:.1f}s"


def _fail(action: str, exc: Exception) -> None:
    logger.error(f"Failed to {action}: {type(exc).__name__}: {exc}")
    print(f"❌ ERROR: Failed to {action}: {type(exc).__name__}: {exc}")
    sys.exit(1)


def _list_models() -> None:
    """Print the model catalog as a table."""
    rows = []
    for model in list_models():
        flags = model.to_dict()
        rows.append(
            [f"M{model.model_id}", model.label]
            + ["yes" if flags[key] else "-" for key in ("O", "A", "N", "ON", "AN")]
        )
    print("Feature-interaction models:")
    print(_format_table(["Model", "Categories", "O", "A", "N", "ON", "AN"], rows))


def _inspect(n_features: int, model_id: int, show_systems: bool) -> None:
    """Print the header counts and optionally the system table."""
    try:
        taxonomy = build_taxonomy(n_features, model_id)
        print(format_header(taxonomy), end="")
        if show_systems:
            print()
            print(format_systems(enumerate_systems(taxonomy)), end="")
    except Exception as e:
        _fail("inspect product line", e)


def _render_run(
    output_format: str,
    taxonomy: Any,
    catalog: Any,
    result: Any,
) -> str:
    if output_format == "text":
        buffer = io.StringIO()
        write_report(buffer, taxonomy, catalog, result)
        return buffer.getvalue()
    if output_format == "csv":
        return result.to_dataframe().to_csv(index=False)

    results = Results()
    run_name = run_prefix(taxonomy.F, taxonomy.M, result.strategy.label)
    results.enter_run(run_name)
    results.put("metadata", {"elapsed": result.elapsed})
    data: Dict[str, Any] = {
        "counts": taxonomy.counts(),
        "model": taxonomy.model.to_dict(),
        "results": {result.strategy.label: result},
    }
    if catalog is not None:
        data["systems"] = catalog.to_dict()
    results.put("data", data)
    results.exit_run()
    results.put_run_metadata(
        run_name,
        taxonomy.F,
        taxonomy.M,
        0,
        strategies=(result.strategy.label,),
    )
    return json.dumps(results.to_dict(), indent=2, default=str)


def _run(
    n_features: int,
    model_id: int,
    strategy_name: str,
    parallelism: int,
    output_format: str,
    show_systems: bool,
    output_dir: Optional[Path],
    results_override: Optional[Path],
    stdout: bool,
    no_results: bool,
) -> None:
    """Compute one strategy and write the report.

    Args:
        n_features: Number of independent features F.
        model_id: Model identifier.
        strategy_name: Strategy name accepted by ``Strategy.from_string``.
        parallelism: Worker processes for the exhaustive search.
        output_format: One of ``text``, ``json`` or ``csv``.
        show_systems: Include the system table for the closed-form strategy.
        output_dir: Optional directory for the report file.
        results_override: Optional explicit report path.
        stdout: Also print the report to stdout.
        no_results: Do not write a report file.
    """
    _start_time = perf_counter()
    try:
        strategy = Strategy.from_string(strategy_name)
        taxonomy = build_taxonomy(n_features, model_id)
        catalog = None
        if strategy != Strategy.CLOSED_FORM or show_systems:
            catalog = enumerate_systems(taxonomy)
        result = isolate(taxonomy, strategy, catalog, parallelism=parallelism)
        content = _render_run(output_format, taxonomy, catalog, result)

        if not no_results:
            path = report_path_for_run(
                n_features,
                model_id,
                strategy.label,
                _FORMAT_EXTENSIONS[output_format],
                output_dir,
                results_override,
            )
            ensure_parent_dir(path)
            logger.info(f"Writing {output_format} report to: {path}")
            path.write_text(content)
            print(f"✅ Results written to: {path}")
        if stdout:
            print(content, end="" if content.endswith("\n") else "\n")

        _elapsed = perf_counter() - _start_time
        logger.info(
            f"Isolated {len(result)} features in {_format_duration(_elapsed)}"
        )
    except Exception as e:
        _fail("run feature location", e)


def _verify(
    n_features: int, model_id: int, strategy_names: List[str], parallelism: int
) -> None:
    """Check that the selected strategies agree."""
    try:
        strategies = [Strategy.from_string(s) for s in strategy_names]
        taxonomy = build_taxonomy(n_features, model_id)
        membership = verify_strategies(
            taxonomy, None, strategies, parallelism=parallelism
        )
    except Exception as e:
        _fail("verify strategies", e)
    else:
        labels = ", ".join(s.label for s in strategies)
        print(
            f"✅ Strategies agree ({labels}): {len(membership)} features, "
            f"F={n_features}, M{model_id}"
        )


def _analyze(
    path: Path,
    output_dir: Optional[Path],
    results_override: Optional[Path],
    stdout: bool,
    no_results: bool,
) -> None:
    """Run an analysis file and export results as JSON."""
    logger.info(f"Loading analysis from: {path}")
    _start_time = perf_counter()
    try:
        analysis = Analysis.from_yaml(path.read_text())
        analysis.run()
        print(f"✅ Analysis completed ({len(analysis.runs)} runs)")

        json_str = json.dumps(analysis.results.to_dict(), indent=2, default=str)
        if not no_results:
            effective_output = results_path_for_analysis(
                path, output_dir, results_override
            )
            ensure_parent_dir(effective_output)
            logger.info(f"Writing results to: {effective_output}")
            effective_output.write_text(json_str)
            print(f"✅ Results written to: {effective_output}")
        if stdout:
            print(json_str)

        _elapsed = perf_counter() - _start_time
        logger.info(
            f"Analysis completed successfully in {_format_duration(_elapsed)}"
        )
    except FileNotFoundError:
        logger.error(f"Analysis file not found: {path}")
        print(f"❌ ERROR: Analysis file not found: {path}")
        sys.exit(1)
    except Exception as e:
        _fail("run analysis", e)


def _bitstrings(n_features: int, model_id: int, output_dir: Optional[Path]) -> None:
    """Write one closed-form bitstring file per feature category."""
    try:
        taxonomy = build_taxonomy(n_features, model_id)
        written = write_bitstring_files(bitstring_directory(output_dir), taxonomy)
    except Exception as e:
        _fail("write bitstrings", e)
    else:
        for path in written:
            print(f"✅ Bitstrings written to: {path}")


def _add_product_line_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--features",
        "-F",
        type=int,
        required=True,
        help="Number of independent features",
    )
    p.add_argument(
        "--model", "-M", type=int, required=True, help="Model id (1..19)"
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``splfl`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="splfl",
        description="Feature location in combinatorial software product lines.",
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Suppress console output (logs only)"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{models,inspect,run,verify,analyze,bitstrings}",
        help="Available commands",
    )

    subparsers.add_parser("models", help="List the feature-interaction models")

    inspect_parser = subparsers.add_parser(
        "inspect", help="Show the feature counts of a product line"
    )
    _add_product_line_args(inspect_parser)
    inspect_parser.add_argument(
        "--systems", action="store_true", help="Also print every system"
    )

    run_parser = subparsers.add_parser("run", help="Isolate every feature")
    _add_product_line_args(run_parser)
    run_parser.add_argument(
        "--strategy",
        "-s",
        default="closed_form",
        help="enumeration, exhaustive or closed_form (default: closed_form)",
    )
    run_parser.add_argument(
        "--parallelism",
        "-p",
        type=int,
        default=1,
        help="Worker processes for the exhaustive search",
    )
    run_parser.add_argument(
        "--format",
        "-f",
        choices=sorted(_FORMAT_EXTENSIONS),
        default="text",
        help="Report format (default: text)",
    )
    run_parser.add_argument(
        "--systems",
        action="store_true",
        help="Include the system table for the closed-form strategy",
    )
    run_parser.add_argument(
        "--results",
        "-r",
        type=Path,
        default=None,
        help=(
            "Report file path (default: fl_<F>_M<m>_<strategy>.<ext>;"
            " placed under --output when provided)"
        ),
    )
    run_parser.add_argument(
        "--no-results",
        action="store_true",
        help="Disable report file generation",
    )
    run_parser.add_argument(
        "--stdout", action="store_true", help="Print the report to stdout"
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Check that isolation strategies agree"
    )
    _add_product_line_args(verify_parser)
    verify_parser.add_argument(
        "--strategies",
        nargs="+",
        default=["enumeration", "closed_form"],
        help="Strategies to compare (default: enumeration closed_form)",
    )
    verify_parser.add_argument(
        "--parallelism", "-p", type=int, default=1, help="Worker processes"
    )

    analyze_parser = subparsers.add_parser("analyze", help="Run an analysis file")
    analyze_parser.add_argument("analysis", type=Path, help="Path to analysis YAML")
    analyze_parser.add_argument(
        "--results",
        "-r",
        type=Path,
        default=None,
        help=(
            "Export results to JSON file (default: <analysis_name>.results.json;"
            " placed under --output when provided)"
        ),
    )
    analyze_parser.add_argument(
        "--no-results",
        action="store_true",
        help="Disable results file generation",
    )
    analyze_parser.add_argument(
        "--stdout", action="store_true", help="Print results to stdout"
    )

    bitstrings_parser = subparsers.add_parser(
        "bitstrings", help="Write closed-form bitstrings per feature category"
    )
    _add_product_line_args(bitstrings_parser)

    for p in (run_parser, analyze_parser, bitstrings_parser):
        p.add_argument(
            "--output",
            "-o",
            type=Path,
            default=None,
            help="Output directory for generated files",
        )

    # Determine effective arguments (support both direct calls and module entrypoint)
    effective_args = sys.argv[1:] if argv is None else argv

    # If no arguments are provided, show help and exit cleanly
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    # Configure logging based on arguments
    if args.verbose:
        set_global_log_level(logging.DEBUG)
        logger.debug("Debug logging enabled")
    elif args.quiet:
        set_global_log_level(logging.WARNING)
    else:
        set_global_log_level(logging.INFO)

    if args.command == "models":
        _list_models()
    elif args.command == "inspect":
        _inspect(args.features, args.model, args.systems)
    elif args.command == "run":
        _run(
            n_features=args.features,
            model_id=args.model,
            strategy_name=args.strategy,
            parallelism=args.parallelism,
            output_format=args.format,
            show_systems=args.systems,
            output_dir=args.output,
            results_override=args.results,
            stdout=args.stdout,
            no_results=args.no_results,
        )
    elif args.command == "verify":
        _verify(args.features, args.model, args.strategies, args.parallelism)
    elif args.command == "analyze":
        _analyze(
            path=args.analysis,
            output_dir=args.output,
            results_override=args.results,
            stdout=args.stdout,
            no_results=args.no_results,
        )
    elif args.command == "bitstrings":
        _bitstrings(args.features, args.model, args.output)


if __name__ == "__main__":
    main()
