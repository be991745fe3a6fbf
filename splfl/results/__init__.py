"""Results store and isolation result containers."""

from __future__ import annotations

from .isolation import Isolation, IsolationResult
from .store import Results, RunMetadata

__all__ = [
    # Store
    "Results",
    "RunMetadata",
    # Isolations
    "Isolation",
    "IsolationResult",
]
