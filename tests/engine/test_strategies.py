"""Cross-strategy behavior of the isolation engines."""

import pytest

from splfl.engine import (
    STRATEGY_REGISTRY,
    ClosedFormStrategy,
    EnumerationStrategy,
    ExhaustiveStrategy,
    get_strategy,
    isolate,
)
from splfl.model.catalog import MODEL_IDS
from splfl.model.systems import System, enumerate_systems
from splfl.model.taxonomy import build_taxonomy
from splfl.types import Strategy


def test_registry_has_all_strategies():
    assert STRATEGY_REGISTRY == {
        Strategy.ENUMERATION: EnumerationStrategy,
        Strategy.EXHAUSTIVE: ExhaustiveStrategy,
        Strategy.CLOSED_FORM: ClosedFormStrategy,
    }
    assert get_strategy("closed-form") is ClosedFormStrategy
    assert get_strategy(Strategy.EXHAUSTIVE) is ExhaustiveStrategy
    with pytest.raises(ValueError):
        get_strategy("greedy")


def test_enumeration_f2_m8(taxonomy_f2_m8, catalog_f2_m8):
    result = isolate(taxonomy_f2_m8, "enumeration", catalog_f2_m8)
    assert result.strategy is Strategy.ENUMERATION
    assert result.features == ["!f1", "!f2", "f1", "f1 * f2", "f1 + f2", "f2"]
    assert all(i.difference_id is None for i in result)
    assert result.get("f1").difference.to_text() == "( S2 & S4 ) \\ ( S1 | S3 )"
    assert result.get("!f2").systems == frozenset({"S1", "S2"})
    assert result.metadata["systems_scanned"] == 24


@pytest.mark.parametrize("strategy", ["exhaustive", "closed_form"])
def test_id_ordered_strategies_f2_m8(taxonomy_f2_m8, strategy):
    result = isolate(taxonomy_f2_m8, strategy)
    assert [(i.difference_id, i.feature) for i in result] == [
        (3, "!f2"),
        (5, "!f1"),
        (8, "f1 * f2"),
        (10, "f1"),
        (12, "f2"),
        (14, "f1 + f2"),
    ]


@pytest.mark.parametrize("model_id", MODEL_IDS)
@pytest.mark.parametrize("n_features", [1, 2, 3, 4])
def test_all_strategies_agree(n_features, model_id):
    taxonomy = build_taxonomy(n_features, model_id)
    catalog = enumerate_systems(taxonomy)
    memberships = [
        isolate(taxonomy, strategy, catalog).membership() for strategy in Strategy
    ]
    assert memberships[0] == memberships[1] == memberships[2]
    assert len(memberships[0]) == taxonomy.T


@pytest.mark.parametrize("model_id", [1, 8, 13, 16, 19])
@pytest.mark.parametrize("n_features", [4, 5])
def test_enumeration_and_closed_form_agree_for_larger_f(n_features, model_id):
    taxonomy = build_taxonomy(n_features, model_id)
    catalog = enumerate_systems(taxonomy)
    enumerated = isolate(taxonomy, Strategy.ENUMERATION, catalog)
    closed = isolate(taxonomy, Strategy.CLOSED_FORM)
    assert enumerated.membership() == closed.membership()


@pytest.mark.parametrize("strategy", list(Strategy))
def test_every_difference_evaluates_to_its_feature(taxonomy_f3_m19, strategy):
    catalog = enumerate_systems(taxonomy_f3_m19)
    result = isolate(taxonomy_f3_m19, strategy, catalog)
    for isolation in result:
        assert isolation.difference.evaluate(catalog) == {isolation.feature}
        expected = catalog.membership(isolation.feature)
        assert isolation.difference.intersections == expected
        assert isolation.difference.unions == frozenset(catalog.names) - expected


def test_catalog_from_other_taxonomy_is_rejected(taxonomy_f2_m8, taxonomy_f3_m19):
    catalog = enumerate_systems(taxonomy_f3_m19)
    with pytest.raises(ValueError, match="different taxonomy"):
        isolate(taxonomy_f2_m8, "enumeration", catalog)


def test_parallelism_must_be_positive(taxonomy_f2_m8):
    with pytest.raises(ValueError, match="parallelism"):
        isolate(taxonomy_f2_m8, "exhaustive", parallelism=0)


def test_result_records_elapsed_time(taxonomy_f2_m8):
    result = isolate(taxonomy_f2_m8)
    assert result.strategy is Strategy.CLOSED_FORM
    assert result.elapsed >= 0.0


def test_enumeration_reads_catalog_feature_sets(monkeypatch, taxonomy_f3_m19):
    def fail(self, feature):
        raise AssertionError("per-system tuple scan")

    monkeypatch.setattr(System, "has", fail)
    catalog = enumerate_systems(taxonomy_f3_m19)
    result = isolate(taxonomy_f3_m19, Strategy.ENUMERATION, catalog)
    assert result.membership() == {
        name: catalog.membership(name) for name in taxonomy_f3_m19.all_feature_names
    }
    assert result.metadata["systems_scanned"] == 8 * taxonomy_f3_m19.T
