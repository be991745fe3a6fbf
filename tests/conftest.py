"""Global pytest configuration and shared product-line fixtures."""

from __future__ import annotations

import pytest

from splfl.model.systems import SystemCatalog, enumerate_systems
from splfl.model.taxonomy import FeatureTaxonomy, build_taxonomy


@pytest.fixture
def taxonomy_f2_m8() -> FeatureTaxonomy:
    """F=2 with or-, and- and not-features."""
    return build_taxonomy(2, 8)


@pytest.fixture
def catalog_f2_m8(taxonomy_f2_m8: FeatureTaxonomy) -> SystemCatalog:
    return enumerate_systems(taxonomy_f2_m8)


@pytest.fixture
def taxonomy_f3_m19() -> FeatureTaxonomy:
    """F=3 with every feature category."""
    return build_taxonomy(3, 19)
