"""Enums shared by the feature location engines."""

from __future__ import annotations

from enum import IntEnum


class Strategy(IntEnum):
    """Algorithms that compute the isolating difference of every feature."""

    #: Partition the materialized systems by membership of each feature.
    ENUMERATION = 1
    #: Evaluate every difference ID and keep the ones isolating one feature.
    EXHAUSTIVE = 2
    #: Compute membership bitstrings arithmetically; no system scan.
    CLOSED_FORM = 3

    @classmethod
    def from_string(cls, value: str) -> "Strategy":
        """Parse a string into a Strategy enum value.

        Args:
            value: Case-insensitive name (e.g., "enumeration", "CLOSED_FORM",
                "closed-form").

        Returns:
            The corresponding Strategy enum member.

        Raises:
            ValueError: If the string doesn't match any enum member.
        """
        try:
            return cls[value.strip().upper().replace("-", "_")]
        except KeyError:
            valid = ", ".join(e.name.lower() for e in cls)
            raise ValueError(
                f"Invalid strategy '{value}'. Valid values are: {valid}"
            ) from None

    @property
    def label(self) -> str:
        """Lower-case name used in file names and configuration files."""
        return self.name.lower()


class FeatureKind(IntEnum):
    """Categories of features in a product line, in generation order."""

    INDEPENDENT = 1
    OR = 2
    AND = 3
    NOT = 4
    OR_NOT = 5
    AND_NOT = 6

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")
