"""Shared typing constructs for splfl.

Defines the enums and type aliases used across the engines. Contains no
runtime logic beyond enum parsing helpers.
"""

from typing import FrozenSet, Tuple

from splfl.types.base import FeatureKind, Strategy

#: Integer identifier 1..F of an independent feature.
FeatureId = int

#: Integer identifier 1..19 of a feature-interaction model.
ModelId = int

#: Sorted tuple of feature names that define one system.
FeatureSet = Tuple[str, ...]

#: Set of system names (``S<k>``).
SystemNames = FrozenSet[str]

__all__ = [
    "FeatureKind",
    "Strategy",
    "FeatureId",
    "ModelId",
    "FeatureSet",
    "SystemNames",
]
