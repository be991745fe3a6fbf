"""Tests for isolation result containers."""

import json

import pytest

from splfl.engine import isolate
from splfl.model.difference import DifferenceExpression
from splfl.results.isolation import Isolation


def test_isolation_bits_and_dict():
    difference = DifferenceExpression(frozenset({"S2", "S4"}), frozenset({"S1", "S3"}))
    isolation = Isolation("f1", difference)
    assert isolation.bits == 10
    assert isolation.systems == frozenset({"S2", "S4"})
    assert isolation.to_dict() == {
        "difference_id": None,
        "feature": "f1",
        "intersections": ["S2", "S4"],
        "unions": ["S1", "S3"],
        "expression": "( S2 & S4 ) \\ ( S1 | S3 )",
    }
    assert Isolation("f1", difference, 10).to_dict()["difference_id"] == 10


def test_result_accessors(taxonomy_f2_m8):
    result = isolate(taxonomy_f2_m8, "closed_form")
    assert len(result) == 6
    assert result.n_systems == 4
    assert result.get("f2").difference_id == 12
    assert set(result.by_feature()) == set(taxonomy_f2_m8.all_feature_names)
    assert result.membership()["f1 + f2"] == frozenset({"S2", "S3", "S4"})
    assert result.bitstrings()[0] == ("!f2", "0011")
    with pytest.raises(KeyError):
        result.get("f9")


def test_result_to_dict_is_json_safe(taxonomy_f2_m8):
    result = isolate(taxonomy_f2_m8, "exhaustive")
    doc = json.loads(json.dumps(result.to_dict()))
    assert doc["strategy"] == "exhaustive"
    assert doc["features"] == 2
    assert doc["model"] == 8
    assert doc["metadata"]["ids_evaluated"] == 15
    assert [i["difference_id"] for i in doc["isolations"]] == [3, 5, 8, 10, 12, 14]


def test_result_to_dataframe(taxonomy_f2_m8, catalog_f2_m8):
    df = isolate(taxonomy_f2_m8, "enumeration", catalog_f2_m8).to_dataframe()
    assert list(df.columns) == [
        "difference_id",
        "feature",
        "kind",
        "intersections",
        "unions",
        "bitstring",
    ]
    assert len(df) == 6
    row = df.set_index("feature").loc["f1 * f2"]
    assert row["difference_id"] == 8
    assert row["kind"] == "and"
    assert row["intersections"] == "S4"
    assert row["unions"] == "S1 S2 S3"
    assert row["bitstring"] == "1000"
