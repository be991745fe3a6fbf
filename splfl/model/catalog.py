"""Catalog of the 19 feature-interaction models.

A model decides which derived feature categories exist in a product line:
or-features (O), and-features (A), not-features (N), or-not-features (ON)
and and-not-features (AN). Independent features always exist. The mapping
from model id to categories is a fixed table; it is not derived from the id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from splfl.types import FeatureKind, ModelId


@dataclass(frozen=True)
class ModelSpec:
    """Active derived-feature categories of one model.

    Attributes:
        model_id: Model identifier (1..19).
        has_or: Or-features exist.
        has_and: And-features exist.
        has_not: Not-features exist.
        has_or_not: Or-not-features exist.
        has_and_not: And-not-features exist.
    """

    model_id: ModelId
    has_or: bool
    has_and: bool
    has_not: bool
    has_or_not: bool
    has_and_not: bool

    @property
    def kinds(self) -> Tuple[FeatureKind, ...]:
        """Feature kinds present in this model, in generation order."""
        flags = (
            (FeatureKind.OR, self.has_or),
            (FeatureKind.AND, self.has_and),
            (FeatureKind.NOT, self.has_not),
            (FeatureKind.OR_NOT, self.has_or_not),
            (FeatureKind.AND_NOT, self.has_and_not),
        )
        return (FeatureKind.INDEPENDENT,) + tuple(k for k, on in flags if on)

    @property
    def label(self) -> str:
        """Short category label such as ``F+O+A+N``."""
        codes = {
            FeatureKind.INDEPENDENT: "F",
            FeatureKind.OR: "O",
            FeatureKind.AND: "A",
            FeatureKind.NOT: "N",
            FeatureKind.OR_NOT: "ON",
            FeatureKind.AND_NOT: "AN",
        }
        return "+".join(codes[k] for k in self.kinds)

    def to_dict(self) -> Dict[str, object]:
        return {
            "model": self.model_id,
            "O": self.has_or,
            "A": self.has_and,
            "N": self.has_not,
            "ON": self.has_or_not,
            "AN": self.has_and_not,
        }


# model id -> (O, A, N, ON, AN)
_MODEL_TABLE: Dict[ModelId, Tuple[bool, bool, bool, bool, bool]] = {
    1: (False, False, False, False, False),
    2: (True, False, False, False, False),
    3: (False, True, False, False, False),
    4: (True, True, False, False, False),
    5: (False, False, True, False, False),
    6: (True, False, True, False, False),
    7: (False, True, True, False, False),
    8: (True, True, True, False, False),
    9: (False, False, True, True, False),
    10: (False, False, True, False, True),
    11: (True, False, True, True, False),
    12: (False, True, True, True, False),
    13: (True, True, True, True, False),
    14: (True, False, True, False, True),
    15: (False, True, True, False, True),
    16: (True, True, True, False, True),
    17: (True, False, True, True, True),
    18: (False, True, True, True, True),
    19: (True, True, True, True, True),
}

MODEL_CATALOG: Dict[ModelId, ModelSpec] = {
    m: ModelSpec(m, *flags) for m, flags in _MODEL_TABLE.items()
}

MODEL_IDS: Tuple[ModelId, ...] = tuple(sorted(MODEL_CATALOG))


def get_model(model_id: ModelId) -> ModelSpec:
    """Return the catalog entry for ``model_id``.

    Raises:
        ValueError: If the id is not in 1..19.
    """
    try:
        return MODEL_CATALOG[model_id]
    except (KeyError, TypeError):
        raise ValueError(
            f"Invalid model id {model_id!r}; valid ids are "
            f"{MODEL_IDS[0]}..{MODEL_IDS[-1]}"
        ) from None


def has_or(model_id: ModelId) -> bool:
    """Return True if the model has or-features."""
    return get_model(model_id).has_or


def has_and(model_id: ModelId) -> bool:
    """Return True if the model has and-features."""
    return get_model(model_id).has_and


def has_not(model_id: ModelId) -> bool:
    """Return True if the model has not-features."""
    return get_model(model_id).has_not


def has_or_not(model_id: ModelId) -> bool:
    """Return True if the model has or-not-features."""
    return get_model(model_id).has_or_not


def has_and_not(model_id: ModelId) -> bool:
    """Return True if the model has and-not-features."""
    return get_model(model_id).has_and_not


def list_models() -> List[ModelSpec]:
    """Return all catalog entries ordered by id."""
    return [MODEL_CATALOG[m] for m in MODEL_IDS]
