"""Product-line model: model catalog, feature taxonomy, systems and differences."""

from splfl.model.catalog import (
    MODEL_CATALOG,
    MODEL_IDS,
    ModelSpec,
    get_model,
    has_and,
    has_and_not,
    has_not,
    has_or,
    has_or_not,
    list_models,
)
from splfl.model.difference import DifferenceExpression, bitstring, membership_bits
from splfl.model.systems import System, SystemCatalog, enumerate_systems
from splfl.model.taxonomy import Feature, FeatureTaxonomy, build_taxonomy

__all__ = [
    # Catalog
    "MODEL_CATALOG",
    "MODEL_IDS",
    "ModelSpec",
    "get_model",
    "has_or",
    "has_and",
    "has_not",
    "has_or_not",
    "has_and_not",
    "list_models",
    # Taxonomy
    "Feature",
    "FeatureTaxonomy",
    "build_taxonomy",
    # Systems
    "System",
    "SystemCatalog",
    "enumerate_systems",
    # Differences
    "DifferenceExpression",
    "bitstring",
    "membership_bits",
]
