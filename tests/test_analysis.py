"""Tests for batch analyses."""

import json

import pytest

from splfl.analysis import Analysis, RunSpec
from splfl.engine import isolate
from splfl.types import Strategy

ANALYSIS_YAML = """
runs:
  - name: small
    features: 2
    model: 8
    strategies: [enumeration, exhaustive, closed_form]
    verify: true
  - features: 3
    model: 19
"""


def test_run_spec_defaults():
    spec = RunSpec.from_dict({"features": 3, "model": 19})
    assert spec.name == "F3_M19"
    assert spec.strategies == (Strategy.CLOSED_FORM,)
    assert spec.parallelism == 1
    assert not spec.verify
    assert not spec.needs_systems


def test_run_spec_needs_systems():
    assert RunSpec("a", 2, 8, (Strategy.ENUMERATION,)).needs_systems
    assert RunSpec("b", 2, 8, verify=True).needs_systems


def test_run_spec_validation():
    with pytest.raises(ValueError):
        RunSpec("a", 25, 8)
    with pytest.raises(ValueError):
        RunSpec("a", 2, 0)
    with pytest.raises(ValueError):
        RunSpec("a", 2, 8, strategies=())
    with pytest.raises(ValueError):
        RunSpec("a", 2, 8, parallelism=0)
    with pytest.raises(ValueError, match="Invalid strategy"):
        RunSpec.from_dict({"features": 2, "model": 8, "strategies": ["guess"]})


def test_analysis_runs_and_exports():
    analysis = Analysis.from_yaml(ANALYSIS_YAML)
    assert [r.name for r in analysis.runs] == ["small", "F3_M19"]

    results = analysis.run()
    assert results.get_runs_by_execution_order() == ["small", "F3_M19"]

    doc = json.loads(json.dumps(results.to_dict()))
    assert doc["config"]["runs"][0]["name"] == "small"
    assert doc["analysis"]["small"]["strategies"] == [
        "enumeration",
        "exhaustive",
        "closed_form",
    ]
    assert doc["analysis"]["small"]["verified"] is True

    small = doc["runs"]["small"]["data"]
    assert small["counts"]["T"] == 6
    assert small["model"]["model"] == 8
    assert set(small["results"]) == {"enumeration", "exhaustive", "closed_form"}
    assert small["verification"] == {
        "strategies": ["enumeration", "exhaustive", "closed_form"],
        "features": 6,
        "agree": True,
    }
    assert small["systems"]["S1"] == ["!f1", "!f2"]

    large = doc["runs"]["F3_M19"]["data"]
    assert large["counts"]["T"] == 22
    assert "systems" not in large
    assert "verification" not in large
    assert len(large["results"]["closed_form"]["isolations"]) == 22
    assert "elapsed" in doc["runs"]["F3_M19"]["metadata"]


def test_duplicate_default_names_rejected():
    with pytest.raises(ValueError, match="Duplicate run name 'F2_M8'"):
        Analysis.from_yaml(
            "runs:\n  - {features: 2, model: 8}\n  - {name: F2_M8, features: 2, model: 8}\n"
        )


def test_too_many_features_rejected():
    with pytest.raises(ValueError, match="Number of features"):
        Analysis.from_yaml("runs:\n  - {features: 25, model: 8}\n")


def test_verification_reuses_computed_results(monkeypatch):
    import splfl.analysis as analysis_module
    import splfl.engine.verify as verify_module

    calls = []

    def counting_isolate(taxonomy, strategy, *args, **kwargs):
        calls.append(strategy)
        return isolate(taxonomy, strategy, *args, **kwargs)

    monkeypatch.setattr(analysis_module, "isolate", counting_isolate)
    monkeypatch.setattr(verify_module, "isolate", counting_isolate)

    analysis = Analysis.from_yaml(
        "runs:\n"
        "  - {features: 2, model: 8, strategies: [enumeration, exhaustive], verify: true}\n"
    )
    doc = analysis.run().to_dict()

    assert calls == [Strategy.ENUMERATION, Strategy.EXHAUSTIVE]
    assert doc["runs"]["F2_M8"]["data"]["verification"]["agree"] is True
