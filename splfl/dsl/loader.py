"""YAML loader + schema validation for analysis files.

Provides a single entrypoint to parse a YAML string, validate it against the
packaged JSON schema, and return a canonical dictionary suitable for building
an :class:`splfl.analysis.Analysis`.
"""

from __future__ import annotations

import json
from importlib import resources
from typing import Any, Dict

import jsonschema
import yaml


def _load_schema() -> Dict[str, Any]:
    with (
        resources.files("splfl.schemas")
        .joinpath("analysis.json")
        .open("r", encoding="utf-8")
    ) as f:
        return json.load(f)


def load_analysis_yaml(yaml_str: str) -> Dict[str, Any]:
    """Load and validate an analysis YAML string.

    Returns:
        The parsed document with schema shape already enforced.

    Raises:
        ValueError: If the document is not a mapping, has malformed runs,
            unrecognized top-level keys or duplicate run names.
        jsonschema.ValidationError: If the document violates the schema.
    """
    data = yaml.safe_load(yaml_str)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("The provided YAML must map to a dictionary at top-level.")

    # Early shape checks helpful for better error messages prior to schema validation
    runs = data.get("runs")
    if runs is not None:
        if not isinstance(runs, list):
            raise ValueError("'runs' must be a list")
        for index, entry in enumerate(runs):
            if not isinstance(entry, dict):
                raise ValueError(f"Run #{index} must be a mapping")
            if "features" not in entry or "model" not in entry:
                raise ValueError(
                    f"Run #{index} must include 'features' and 'model'"
                )
            strategies = entry.get("strategies")
            if strategies is not None and not isinstance(strategies, list):
                raise ValueError(f"'strategies' of run #{index} must be a list")

    # Enforce allowed top-level keys
    recognized_keys = {"runs"}
    extra = set(data.keys()) - recognized_keys
    if extra:
        raise ValueError(
            f"Unrecognized top-level key(s) in analysis: {', '.join(sorted(extra))}. "
            f"Allowed keys are {sorted(recognized_keys)}"
        )

    jsonschema.validate(data, _load_schema())

    seen = set()
    for entry in data["runs"]:
        name = entry.get("name")
        if name is None:
            continue
        if name in seen:
            raise ValueError(f"Duplicate run name '{name}'")
        seen.add(name)

    return data
