"""Tests for shared enums."""

import pytest

from splfl.types import FeatureKind, Strategy


@pytest.mark.parametrize(
    "text,expected",
    [
        ("enumeration", Strategy.ENUMERATION),
        ("EXHAUSTIVE", Strategy.EXHAUSTIVE),
        ("closed_form", Strategy.CLOSED_FORM),
        ("closed-form", Strategy.CLOSED_FORM),
        (" Closed_Form ", Strategy.CLOSED_FORM),
    ],
)
def test_strategy_from_string(text, expected):
    assert Strategy.from_string(text) is expected


def test_strategy_from_string_invalid():
    with pytest.raises(ValueError, match="Invalid strategy 'bogus'"):
        Strategy.from_string("bogus")


def test_strategy_label():
    assert Strategy.CLOSED_FORM.label == "closed_form"
    assert [s.label for s in Strategy] == ["enumeration", "exhaustive", "closed_form"]


def test_feature_kind_labels_in_generation_order():
    assert [k.label for k in FeatureKind] == [
        "independent",
        "or",
        "and",
        "not",
        "or-not",
        "and-not",
    ]
