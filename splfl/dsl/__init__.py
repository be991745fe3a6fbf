"""Analysis file format: YAML documents describing batches of runs.

Parse and validate a document with `splfl.dsl.loader.load_analysis_yaml`.
"""

from splfl.dsl.loader import load_analysis_yaml

__all__ = ["load_analysis_yaml"]
