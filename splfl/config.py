"""Configuration objects for splfl components.

Both objects are frozen and created once at import time. ``NOTATION`` holds
the symbols used to build feature, system and difference-expression names;
``LIMITS`` holds the size ceilings enforced by the taxonomy and the
exhaustive search.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Notation:
    """Symbols used for names and textual set expressions."""

    # Set expressions
    set_intersection: str = "&"
    set_union: str = "|"
    set_difference: str = "\\"
    set_separator: str = " "
    opening_parenthesis: str = "("
    closing_parenthesis: str = ")"

    # Feature names
    feature: str = "f"
    feature_and: str = "*"
    feature_or: str = "+"
    feature_not: str = "!"
    feature_separator: str = " "

    # Prefixes and record separator
    system: str = "S"
    difference_expression: str = "E"
    separator: str = "\t"


@dataclass(frozen=True)
class LimitsConfig:
    """Size ceilings for feature location analysis."""

    # Systems are materialized eagerly: S = 2**F entries
    max_features: int = 20

    # D = 2**(2**F) difference IDs; F = 6 keeps D within 2**64
    max_exhaustive_features: int = 6

    # Exhaustive searches below this many IDs always run serially
    serial_threshold: int = 4096

    def check_features(self, n: int) -> None:
        """Raise ValueError unless 1 <= n <= max_features."""
        if n < 1 or n > self.max_features:
            raise ValueError(
                f"Number of features must be in [1, {self.max_features}], got {n}"
            )

    def check_exhaustive_features(self, n: int) -> None:
        """Raise ValueError unless the exhaustive search can handle n features."""
        if n > self.max_exhaustive_features:
            raise ValueError(
                f"Exhaustive search supports at most {self.max_exhaustive_features} "
                f"features (2**2**F difference IDs), got {n}"
            )


# Global configuration instances
NOTATION = Notation()
LIMITS = LimitsConfig()
