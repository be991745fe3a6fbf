"""Packaged JSON schemas for analysis files."""
