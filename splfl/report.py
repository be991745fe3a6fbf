"""Text reports for feature location results.

Formats the tab-separated report sections: the header with the taxonomy
counts, the system table, and the isolation results in the layout of the
selected strategy. Every ``format_*`` function returns the section as a
string with one line per record; :func:`write_report` and
:func:`write_bitstring_files` write them to a sink or to files.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, TextIO

from splfl.config import NOTATION
from splfl.engine import isolate
from splfl.logging import get_logger
from splfl.model.systems import SystemCatalog
from splfl.model.taxonomy import FeatureTaxonomy, difference_name
from splfl.results.isolation import Isolation, IsolationResult
from splfl.types import FeatureKind, Strategy

logger = get_logger(__name__)

# (count key, description) in header order
HEADER_FIELDS = (
    ("T", "actual total number of features"),
    ("F", "number of independent features"),
    ("DF", "actual total number of inherently dependent features"),
    ("O", "actual number of or-features"),
    ("A", "actual number of and-features"),
    ("N", "actual number of not-features"),
    ("ON", "actual number of or-not-features"),
    ("AN", "actual number of and-not-features"),
    ("S", "number of systems of SPL"),
    ("D", "number of all set differences of SPL systems"),
)

# Short key of each category, used in bitstring file names
KIND_KEYS: Dict[FeatureKind, str] = {
    FeatureKind.INDEPENDENT: "F",
    FeatureKind.OR: "O",
    FeatureKind.AND: "A",
    FeatureKind.NOT: "N",
    FeatureKind.OR_NOT: "ON",
    FeatureKind.AND_NOT: "AN",
}


def _lines(lines: List[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


def format_header(taxonomy: FeatureTaxonomy) -> str:
    """Return the model line followed by one ``value<TAB>key<TAB>text`` line per count."""
    sep = NOTATION.separator
    counts = taxonomy.counts()
    lines = [f"M{taxonomy.M}{sep}selected model"]
    for key, description in HEADER_FIELDS:
        lines.append(f"{counts[key]}{sep}{key}{sep}{description}")
    return _lines(lines)


def format_systems(catalog: SystemCatalog) -> str:
    """Return one ``S<k>`` line per system, each feature followed by a tab."""
    sep = NOTATION.separator
    return _lines(
        [
            system.name + sep + "".join(f"{feature}{sep}" for feature in system.features)
            for system in catalog
        ]
    )


def format_isolation(isolation: Isolation, with_id: bool = False) -> str:
    """Return one result line, optionally prefixed with ``E<id>``."""
    sep = NOTATION.separator
    line = f"{isolation.feature}{sep}{isolation.difference.to_text()}"
    if with_id:
        line = f"{difference_name(isolation.bits)}{sep}{line}"
    return line


def format_isolations(result: IsolationResult) -> str:
    """Return ``<feature><TAB><difference>`` lines in feature name order."""
    ordered = sorted(result, key=lambda i: i.feature)
    return _lines([format_isolation(i) for i in ordered])


def format_differences(result: IsolationResult) -> str:
    """Return ``E<id><TAB><feature><TAB><difference>`` lines by difference ID."""
    ordered = sorted(result, key=lambda i: i.bits)
    return _lines([format_isolation(i, with_id=True) for i in ordered])


def format_bitstrings(
    result: IsolationResult, kind: Optional[FeatureKind] = None
) -> str:
    """Return ``<feature><TAB><S-bit string>`` lines.

    Args:
        result: Isolation result of any strategy.
        kind: Restrict the output to one feature category. Lines then follow
            the generation order of that category instead of result order.
    """
    sep = NOTATION.separator
    pairs = result.bitstrings()
    if kind is not None:
        bits_of = dict(pairs)
        names = result.taxonomy.names_of(kind)
        pairs = [(name, bits_of[name]) for name in names if name in bits_of]
    return _lines([f"{feature}{sep}{bits}" for feature, bits in pairs])


def format_results(result: IsolationResult) -> str:
    """Return the result section in the layout of the result's strategy."""
    if result.strategy == Strategy.ENUMERATION:
        return format_isolations(result)
    return format_differences(result)


def write_report(
    sink: TextIO,
    taxonomy: FeatureTaxonomy,
    catalog: Optional[SystemCatalog],
    result: IsolationResult,
) -> None:
    """Write header, systems and results separated by blank lines.

    The systems section is skipped when ``catalog`` is None.
    """
    sink.write(format_header(taxonomy))
    sink.write("\n")
    if catalog is not None:
        sink.write(format_systems(catalog))
        sink.write("\n")
    sink.write(format_results(result))


def bitstring_file_name(n_features: int, kind: FeatureKind) -> str:
    """Return ``fl_<F>_<key>.csv`` for one feature category."""
    return f"fl_{n_features}_{KIND_KEYS[kind]}.csv"


def write_bitstring_files(
    directory: Path,
    taxonomy: FeatureTaxonomy,
    result: Optional[IsolationResult] = None,
) -> List[Path]:
    """Write one bitstring file per active category of ``taxonomy``.

    Each file holds the :func:`format_bitstrings` lines of one category in
    generation order.

    Args:
        directory: Target directory, created if missing.
        taxonomy: Taxonomy whose categories are written.
        result: Result to serialize. Defaults to the closed form, so no
            system is materialized.

    Returns:
        The written paths in category order.
    """
    if result is None:
        result = isolate(taxonomy, Strategy.CLOSED_FORM)
    directory.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for kind in taxonomy.model.kinds:
        path = directory / bitstring_file_name(taxonomy.F, kind)
        text = format_bitstrings(result, kind)
        path.write_text(text)
        logger.debug(
            f"Wrote {len(text.splitlines())} {kind.label} bitstrings to {path}"
        )
        written.append(path)
    return written
